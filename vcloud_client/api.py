# -*- coding: utf-8 -*-

##
# Copyright 2016-2017 VMware Inc.
# This file is part of ETSI OSM
# All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.
#
# For those usages not covered by the Apache License, Version 2.0 please
# contact:  osslegalrouting@vmware.com
##

"""
One call per vCloud director endpoint. Nothing here is cached, the Client
builds on top of it.
"""

import logging

from vcloud_client import references, templates, xmltree
from vcloud_client.constants import (ADMIN_CATALOG_CONTENT, ADMIN_ORG_CONTENT, CREATE_VDC_CONTENT,
                                     EXTERNAL_NETWORK_CONTENT, INSTANTIATE_VAPP_TEMPLATE_TYPE,
                                     ORG_NETWORK_CONTENT, VIM_SERVER_REFS_TYPE)
from vcloud_client.errors import UnexpectedResponse, is_fault

DEFAULT_PAGE_SIZE = 250


def action_url(href, action):
    """Append '/action/<action>' to href unless it already ends with it"""
    suffix = '/action/' + action
    if href.endswith(suffix):
        return href
    return href.rstrip('/') + suffix


def created_href(result):
    """href of the created resource for a 201 result, else the result itself"""
    reason, code, data = result
    if code == 201 and isinstance(data, dict) and data.get('href'):
        return data['href']
    return result


def join_url(base, path):
    if not base.endswith('/'):
        base += '/'
    return base + path.lstrip('/')


class API(object):

    def __init__(self, session):
        self.session = session
        self.transport = session.transport
        self.logger = logging.getLogger('vcloud.api')

    # generic verbs

    def get(self, href):
        self.logger.debug("API: get({})".format(href))
        return self.transport.get(href)

    def post(self, href, content_type=None, body=None):
        """
        Returns:
            tuple (status message, status code, parsed body)
        """
        self.logger.debug("API: post({})".format(href))
        return self.transport.post(href, content_type, body)

    def delete(self, href):
        self.logger.debug("API: delete({})".format(href))
        return self.transport.delete(href)

    def _get_resource(self, kind, ref):
        url = references.resolve(kind, ref, self.session.base_url)
        self.logger.debug("API: {}_get({})".format(kind, ref))
        return self.transport.get(url)

    # getters

    def org_get(self, org):
        """Fetch an organization by id or href"""
        return self._get_resource('org', org)

    def org_list(self):
        """Fetch the organization list advertised at login"""
        return self.get(self.session.url('orglist'))

    def vdc_get(self, vdc):
        return self._get_resource('vdc', vdc)

    def vapp_get(self, vapp):
        return self._get_resource('vapp', vapp)

    def template_get(self, template):
        return self._get_resource('template', template)

    def catalog_get(self, catalog):
        return self._get_resource('catalog', catalog)

    def pvdc_get(self, pvdc):
        return self._get_resource('pvdc', pvdc)

    def task_get(self, task):
        return self._get_resource('task', task)

    def admin_get(self):
        """Fetch the admin root (VCloud) document. Needs a system administrator session."""
        return self.get(self.session.url('admin'))

    def admin_extension_get(self):
        return self.get(self.session.url('extension'))

    def vimserver_references_get(self):
        """Fetch the list of vCenter servers attached to vCloud director"""
        extension = self.admin_extension_get()
        if is_fault(extension):
            return extension
        for link in xmltree.links(extension):
            if link.get('type') == VIM_SERVER_REFS_TYPE:
                return self.get(link['href'])
        return self.get(join_url(self.session.url('extension'), 'vimServerReferences'))

    def vimserver_get(self, href):
        return self.get(href)

    def query(self, query_type, page_size=DEFAULT_PAGE_SIZE, **params):
        """Run a typed query, e.g. query('portgroup').

        Extra keyword arguments become additional query string parameters.
        """
        url = "{}?type={}&pageSize={}".format(self._query_root(), query_type, page_size)
        for key in sorted(params):
            url += "&{}={}".format(key, params[key])
        return self.get(url)

    def _query_root(self):
        if 'query' in self.session.urls:
            return self.session.urls['query']
        return self.session.root_url() + '/api/query'

    def datastore_list(self):
        return self.query('datastore')

    # create calls, each returns the new href on 201 and the post tuple otherwise

    def org_create(self, conf):
        """
        Create an organization

        Args:
            conf - dict, see templates.org_xml for the keys
        """
        url = join_url(self.session.url('admin'), 'orgs')
        return created_href(self.post(url, ADMIN_ORG_CONTENT, templates.org_xml(conf)))

    def org_network_create(self, href, conf):
        """Create a network in the admin org at href"""
        url = href.rstrip('/') + '/networks'
        return created_href(self.post(url, ORG_NETWORK_CONTENT, templates.org_network_xml(conf)))

    def org_vdc_create(self, href, conf):
        """Create a vdc in the admin org at href"""
        url = href.rstrip('/') + '/vdcsparams'
        return created_href(self.post(url, CREATE_VDC_CONTENT, templates.vdc_xml(conf)))

    def catalog_create(self, org_href, conf):
        url = org_href.rstrip('/') + '/catalogs'
        return created_href(self.post(url, ADMIN_CATALOG_CONTENT, templates.catalog_xml(conf)))

    def external_network_create(self, conf):
        url = join_url(self.session.url('admin'), 'extension/externalnets')
        return created_href(self.post(url, EXTERNAL_NETWORK_CONTENT, templates.external_network_xml(conf)))

    def vapp_create_from_template(self, url, name, network_href, template_href, fencemode='bridged',
                                  ip_mode='POOL', network_name=None):
        """
        Instantiate a vApp template.

        Args:
            url - the vdc instantiateVAppTemplate link
            name - name of the new vApp
            network_href - parent network, None to skip network configuration
            network_name - name of the parent network, used for the vApp network
            template_href - href of the vApp template

        Returns:
            the new vApp href on 201, else the post tuple (202 carries the vApp with its Tasks)
        """
        if not url:
            raise UnexpectedResponse("No instantiateVAppTemplate link to post vApp {} to".format(name))
        body = templates.instantiate_vapp_template_xml(name, network_href, template_href,
                                                       fencemode=fencemode, ip_mode=ip_mode,
                                                       network_name=network_name)
        return created_href(self.post(url, INSTANTIATE_VAPP_TEMPLATE_TYPE, body))

    # actions

    def enable(self, href):
        return self.post(action_url(href, 'enable'), None, '')

    def disable(self, href):
        return self.post(action_url(href, 'disable'), None, '')
