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
vCloud Director client.

Reads go through a bounded cache keyed '<accessor>:<argument>'. Every change
made through the client purges the whole cache, because a change to a vApp
also changes the vdc and org listings above it.

    with Client('vcd.example.com', 'admin', 'secret', 'System') as vcd:
        for org_id, name in vcd.list_orgs().items():
            print(org_id, name)
"""

import logging
import re

from vcloud_client import references, xmltree
from vcloud_client.api import API
from vcloud_client.cache import BoundedCache, cache_key
from vcloud_client.config import CONNECTION_KEYS, default_options, load_config, split_options
from vcloud_client.constants import (EXTERNAL_NETWORK_REFS_TYPE, INSTANTIATE_VAPP_TEMPLATE_TYPE, MEDIA_TYPE,
                                     ORG_TYPE, VAPP_TEMPLATE_TYPE, VAPP_TYPE)
from vcloud_client.errors import (CacheMiss, ConfigurationError, HTTP_Not_Found, UnexpectedResponse,
                                  VCloudException, is_fault)
from vcloud_client.session import DEFAULT_ORG, Session
from vcloud_client.tasks import TaskPoller, progress
from vcloud_client.vapp import VApp

LINK_TYPE_RE = re.compile(r'^application/vnd\.vmware\.vcloud\.(\w+)\+xml$')
SYSTEM_ORG_RE = re.compile(r'^[sS]ystem$')


def _children(tree, container, name):
    block = xmltree.first(tree, container)
    if not isinstance(block, dict):
        return []
    return block.get(name, [])


class Client(object):
    """
    Args:
        hostname - vCloud director host, optionally with http:// or https://
        username - user name
        password - user password
        orgname - organization to log in to, 'System' when omitted
        config - dict of options, or path of a yaml config file
    """

    def __init__(self, hostname=None, username=None, password=None, orgname=None, config=None):
        self.logger = logging.getLogger('vcloud.client')

        if isinstance(config, str):
            config = load_config(config)
        options, connection = split_options(config or {})

        self.hostname = hostname or connection.get('hostname')
        self.username = username or connection.get('username')
        self.password = password if password is not None else connection.get('password')
        self.orgname = orgname or connection.get('orgname')
        if not self.hostname or not self.username:
            raise ConfigurationError("hostname and username are required")

        self.options = default_options(options)
        self._apply_debug()
        self.cache = BoundedCache(self.options['cache_size'])
        self.session = None
        self.api = None
        self._connect()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logout()
        return False

    def _apply_debug(self):
        if self.options['debug']:
            logging.getLogger('vcloud').setLevel(logging.DEBUG)

    def _connect(self):
        if self.session is not None and self.session.have_session:
            self.session.logout()
        self.session = Session(self.hostname, self.username, self.password, self.orgname, self.options)
        self.session.bootstrap()
        self.api = API(self.session)

    def logout(self):
        """Close the server side session and drop every cached response"""
        self.purge()
        if self.session is not None:
            return self.session.logout()
        return False

    def configure(self, **options):
        """
        Update options at runtime. Changing hostname, username, password,
        orgname or api_version logs in again.

        Returns:
            dict with the options now in effect
        """
        known, connection = split_options(options)
        reconnect = False
        for key in CONNECTION_KEYS:
            if key in connection and connection[key] != getattr(self, key):
                setattr(self, key, connection[key])
                reconnect = True
        if 'api_version' in known and known['api_version'] != self.options['api_version']:
            reconnect = True

        old_capacity = self.options['cache_size']
        self.options.update(known)
        self._apply_debug()
        if self.options['cache_size'] != old_capacity:
            self.cache = BoundedCache(self.options['cache_size'])

        if reconnect:
            self.logger.info("Connection settings changed, logging in to {} again".format(self.hostname))
            self.purge()
            self._connect()
        else:
            self.session.options.update(known)
            transport = self.session.transport
            transport.timeout = self.options['timeout']
            transport.verify = self.options['verify']
            transport.die_on_fault = self.options['die_on_fault']
        return dict(self.options)

    # cache

    def purge(self):
        self.cache.purge()

    def _cached(self, key, loader):
        try:
            value = self.cache.lookup(key)
            self.logger.debug("Cache hit {}".format(key))
            return value
        except CacheMiss:
            self.logger.debug("Cache miss {}".format(key))

        value = loader()
        if is_fault(value):
            return value
        self.cache.set(key, value)
        return value

    def _changed(self, result):
        if not is_fault(result):
            self.purge()
        return result

    # organizations

    def list_orgs(self):
        """
        Returns:
            dict of org id (last segment of the org href) -> org name
        """
        def load():
            org_list = self.api.org_list()
            if is_fault(org_list):
                return org_list
            orgs = {}
            for org in (org_list or {}).get('Org', []):
                if org.get('type') != ORG_TYPE:
                    self.logger.warning("Org type of {} listed for {}".format(org.get('type'), org.get('name')))
                orgs[xmltree.last_segment(org.get('href'))] = org.get('name')
            return orgs

        return self._cached(cache_key('list_orgs'), load)

    def get_org(self, org):
        """
        Method retrieves an organization.

        Args:
            org - org id or href

        Returns:
            dict with keys
                raw - parsed Org document
                name, description, href
                id - last segment of the href
                catalogs, networks, vdcs - references listed in the document
                contains - {link type: {href: name}} of the org links
        """
        def load():
            raw = self.api.org_get(org)
            if is_fault(raw):
                return raw
            if raw is None:
                raise UnexpectedResponse("Empty respond for organization {}".format(org))

            summary = {'raw': raw,
                       'name': raw.get('name'),
                       'description': xmltree.first(raw, 'Description'),
                       'href': raw.get('href'),
                       'id': xmltree.last_segment(raw.get('href')),
                       'catalogs': _children(raw, 'Catalogs', 'CatalogReference'),
                       'networks': _children(raw, 'Networks', 'Network'),
                       'vdcs': _children(raw, 'Vdcs', 'Vdc'),
                       'contains': {}}
            for link in xmltree.links(raw):
                match = LINK_TYPE_RE.match(link.get('type') or '')
                if not match:
                    continue
                link_type = match.group(1)
                if link_type == 'controlAccess':
                    continue
                summary['contains'].setdefault(link_type, {})[link.get('href')] = link.get('name')
            return summary

        return self._cached(cache_key('get_org', org), load)

    def _org_refs(self, orgname):
        """org ids to walk for orgname, every org for None or System"""
        orgs = self.list_orgs()
        if is_fault(orgs):
            return orgs
        if orgname is None or SYSTEM_ORG_RE.match(orgname):
            return list(orgs)
        selected = [org_id for org_id, name in orgs.items() if name == orgname]
        if not selected:
            self.logger.warning("Organization {} is not visible to {}".format(orgname, self.username))
        return selected

    def _org_contents(self, accessor, link_type, orgname):
        scope = '' if orgname is None or SYSTEM_ORG_RE.match(orgname) else orgname

        def load():
            org_ids = self._org_refs(orgname)
            if is_fault(org_ids):
                return org_ids
            found = {}
            for org_id in org_ids:
                org = self.get_org(org_id)
                if is_fault(org):
                    return org
                found.update(org['contains'].get(link_type, {}))
            return found

        return self._cached(cache_key(accessor, scope + ':'), load)

    def list_vdcs(self, orgname=None):
        """
        Returns:
            dict of vdc href -> vdc name, of every visible org when orgname is
            None or System
        """
        return self._org_contents('list_vdcs', 'vdc', orgname)

    def list_catalogs(self, orgname=None):
        """dict of catalog href -> catalog name"""
        return self._org_contents('list_catalogs', 'catalog', orgname)

    def create_org(self, conf):
        return self._changed(self.api.org_create(conf))

    def delete_org(self, href):
        return self._changed(self.api.delete(href))

    def enable_org(self, href):
        return self._changed(self.api.enable(href))

    def disable_org(self, href):
        return self._changed(self.api.disable(href))

    # vdcs

    def get_vdc(self, vdc):
        return self._cached(cache_key('get_vdc', vdc), lambda: self.api.vdc_get(vdc))

    def create_vdc(self, org_href, conf):
        """Create a vdc in the admin org at org_href, conf as in templates.vdc_xml"""
        return self._changed(self.api.org_vdc_create(org_href, conf))

    def delete_vdc(self, href):
        return self._changed(self.api.delete(href))

    def enable_vdc(self, href):
        return self._changed(self.api.enable(href))

    def disable_vdc(self, href):
        return self._changed(self.api.disable(href))

    def _vdc_entities(self, accessor, media_type):
        def load():
            vdcs = self.list_vdcs(self.session.orgname)
            if is_fault(vdcs):
                return vdcs
            entities = {}
            for vdc_href in vdcs:
                vdc = self.get_vdc(vdc_href)
                if is_fault(vdc):
                    return vdc
                for entity in _children(vdc, 'ResourceEntities', 'ResourceEntity'):
                    if entity.get('type') == media_type:
                        entities[entity.get('href')] = entity.get('name')
            return entities

        return self._cached(cache_key(accessor), load)

    # vApps, templates, media

    def list_vapps(self):
        """dict of vApp href -> name in the vdcs of the session org"""
        return self._vdc_entities('list_vapps', VAPP_TYPE)

    def list_templates(self):
        """dict of vApp template href -> name in the vdcs of the session org"""
        return self._vdc_entities('list_templates', VAPP_TEMPLATE_TYPE)

    def list_media(self):
        return self._vdc_entities('list_media', MEDIA_TYPE)

    def get_template(self, template):
        return self._cached(cache_key('get_template', template), lambda: self.api.template_get(template))

    def get_vapp(self, vapp):
        """
        Returns:
            VApp handle. Actions run through it purge the client cache.
        """
        def load():
            handle = VApp(self.api, vapp, on_change=self.purge)
            if is_fault(handle.raw):
                return handle.raw
            return handle

        return self._cached(cache_key('get_vapp', vapp), load)

    def create_vapp_from_template(self, name, vdc, template, network=None, fencemode='bridged', ip_mode='POOL',
                                  network_name=None):
        """
        Instantiate template as a new vApp called name in vdc.

        Args:
            name - name of the vApp
            vdc - vdc id or href
            template - vApp template id or href
            network - org network id or href the vApp is bridged to
            network_name - name given to the vApp network, by default the name
                the vdc lists for network

        Returns:
            the new vApp href, or the post tuple whose body lists the creation Tasks
        """
        tmpl = self.get_template(template)
        if is_fault(tmpl):
            return tmpl
        vdc_tree = self.get_vdc(vdc)
        if is_fault(vdc_tree):
            return vdc_tree

        url = None
        for link in xmltree.links(vdc_tree):
            if link.get('type') == INSTANTIATE_VAPP_TEMPLATE_TYPE:
                url = link.get('href')

        network_href = None
        if network:
            network_href = references.resolve('network', network, self.session.base_url)
            if not network_name:
                network_name = self._available_network_name(vdc_tree, network_href)
        return self._changed(self.api.vapp_create_from_template(url, name, network_href, tmpl.get('href'),
                                                                fencemode=fencemode, ip_mode=ip_mode,
                                                                network_name=network_name))

    @staticmethod
    def _available_network_name(vdc_tree, network_href):
        network_id = xmltree.last_segment(network_href)
        for network in _children(vdc_tree, 'AvailableNetworks', 'Network'):
            if xmltree.last_segment(network.get('href')) == network_id:
                return network.get('name')
        return None

    def delete_vapp(self, href):
        return self._changed(self.api.delete(references.resolve('vapp', href, self.session.base_url)))

    # catalogs

    def get_catalog(self, catalog):
        return self._cached(cache_key('get_catalog', catalog), lambda: self.api.catalog_get(catalog))

    def create_catalog(self, org_href, conf):
        return self._changed(self.api.catalog_create(org_href, conf))

    def delete_catalog(self, href):
        return self._changed(self.api.delete(href))

    # networks

    def list_networks(self, vdc=None):
        """
        Returns:
            dict of network name -> href, for one vdc or for every visible vdc
        """
        def load():
            if vdc:
                vdc_refs = [vdc]
            else:
                vdcs = self.list_vdcs()
                if is_fault(vdcs):
                    return vdcs
                vdc_refs = list(vdcs)

            networks = {}
            for vdc_ref in vdc_refs:
                vdc_tree = self.get_vdc(vdc_ref)
                if is_fault(vdc_tree):
                    return vdc_tree
                for network in _children(vdc_tree, 'AvailableNetworks', 'Network'):
                    networks[network.get('name')] = network.get('href')
            return networks

        return self._cached(cache_key('list_networks', '{}:'.format(vdc or '')), load)

    def create_org_network(self, org_href, conf):
        return self._changed(self.api.org_network_create(org_href, conf))

    def delete_org_network(self, href):
        return self._changed(self.api.delete(href))

    # provider side, needs a System administrator

    def admin_urls(self):
        return self._cached(cache_key('admin_urls'), self.api.admin_get)

    def get_pvdc(self, pvdc):
        return self._cached(cache_key('get_pvdc', pvdc), lambda: self.api.pvdc_get(pvdc))

    def list_pvdcs(self):
        """dict of provider vdc href -> name"""
        def load():
            admin = self.admin_urls()
            if is_fault(admin):
                return admin
            pvdcs = {}
            for pvdc in _children(admin, 'ProviderVdcReferences', 'ProviderVdcReference'):
                pvdcs[pvdc.get('href')] = pvdc.get('name')
            return pvdcs

        return self._cached(cache_key('list_pvdcs'), load)

    def extensions(self):
        return self.api.admin_extension_get()

    def list_external_networks(self):
        """dict of external network name -> href"""
        extension = self.extensions()
        if is_fault(extension):
            return extension

        url = None
        for link in xmltree.links(extension):
            if link.get('type') == EXTERNAL_NETWORK_REFS_TYPE:
                url = link.get('href')
        if url is None:
            self.logger.warning("No external network references advertised by {}".format(self.hostname))
            return {}

        refs = self.api.get(url)
        if is_fault(refs):
            return refs
        return dict((ref.get('name'), ref.get('href'))
                    for ref in (refs or {}).get('ExternalNetworkReference', []))

    def create_external_network(self, conf):
        """conf as in templates.external_network_xml"""
        return self._changed(self.api.external_network_create(conf))

    def _records(self, result, record):
        if is_fault(result):
            return result
        return dict((r.get('name'), r) for r in (result or {}).get(record, []))

    def list_datastores(self):
        """dict of datastore name -> query record"""
        return self._records(self.api.datastore_list(), 'DatastoreRecord')

    def list_portgroups(self):
        """dict of portgroup name -> query record"""
        return self._records(self.api.query('portgroup'), 'PortgroupRecord')

    def _vimserver_href(self):
        refs = self.api.vimserver_references_get()
        if is_fault(refs):
            return refs
        servers = (refs or {}).get('VimServerReference', [])
        if not servers:
            raise VCloudException("No vCenter server is attached to {}".format(self.hostname), HTTP_Not_Found)
        return servers[0].get('href')

    def vimserver(self):
        """Fetch the first vCenter server attached to vCloud director"""
        href = self._vimserver_href()
        if is_fault(href):
            return href
        return self.api.vimserver_get(href)

    def webclienturl(self, mo_type, moref):
        """url that asks vCloud director for the vSphere web client link of a managed object"""
        href = self._vimserver_href()
        if is_fault(href):
            return href
        return '{}/{}/{}/vSphereWebClientUrl'.format(href, mo_type, moref)

    # tasks

    def get_task(self, href):
        return self.api.task_get(href)

    def progress_of_task(self, href):
        """
        Returns:
            tuple (percent, status), see tasks.progress
        """
        task = self.get_task(href)
        if is_fault(task):
            return None, task
        return progress(task)

    def wait_on_task(self, href, timeout=None, interval=None, backoff=None, cancel_event=None):
        """
        Block until the task is success, error, cancelled or aborted.

        Returns:
            tuple (status, task)
        """
        poller = TaskPoller(self.get_task,
                            interval=self.options['task_interval'] if interval is None else interval,
                            backoff=self.options['task_backoff'] if backoff is None else backoff,
                            max_interval=self.options['task_max_interval'],
                            timeout=self.options['task_timeout'] if timeout is None else timeout)
        return poller.wait(href, cancel_event=cancel_event)

    @staticmethod
    def task_href(result):
        """
        Find the task reference in what a mutation returned: a Task document,
        a post tuple, or an entity carrying its Tasks.
        """
        if isinstance(result, tuple) and len(result) == 3:
            result = result[2]
        if isinstance(result, str):
            return result if '/task/' in result else None
        if not isinstance(result, dict):
            return None
        href = result.get('href')
        if href and '/task/' in href:
            return href
        task = xmltree.first(xmltree.first(result, 'Tasks'), 'Task')
        if isinstance(task, dict):
            return task.get('href')
        return None

    def __repr__(self):
        return "Client({}@{} on {})".format(self.username, self.orgname or DEFAULT_ORG, self.hostname)
