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
Session bootstrap: api version discovery, login and the service urls learned
from the login response.
"""

import logging

from lxml import etree as lxmlElementTree

from vcloud_client import xmltree
from vcloud_client.config import default_options
from vcloud_client.constants import (ACCEPT_HEADER_TEMPLATE, AUTH_HEADER, REQUIRED_SESSION_LINKS,
                                     SESSION_LINK_TYPES, SUPPORTED_VERSIONS)
from vcloud_client.errors import AuthenticationError, VCloudException
from vcloud_client.transport import Transport

DEFAULT_ORG = 'System'


def version_key(version):
    """'5.10' -> (5, 10), so versions compare numerically"""
    return tuple(int(part) for part in str(version).strip().split('.'))


class Session(object):
    """Authenticated session of one user on one vCloud director.

    Everything learned during bootstrap lives on the instance, so several
    sessions to different hosts can coexist in one process.
    """

    def __init__(self, hostname, username, password, orgname=None, options=None):
        self.logger = logging.getLogger('vcloud.session')
        self.hostname = hostname
        self.username = username
        self.password = password
        self.orgname = orgname or DEFAULT_ORG
        self.options = default_options(options)

        self.transport = Transport(timeout=self.options['timeout'],
                                   verify=self.options['verify'],
                                   die_on_fault=self.options['die_on_fault'])
        self._reset()

    def _reset(self):
        self.api_version = None
        self.login_url = None
        self.base_url = None
        self.session_href = None
        self.urls = {}
        self.raw_version = None
        self.raw_login = None
        self.transport.accept_header = None
        self.transport.token = None

    @property
    def accept_header(self):
        return self.transport.accept_header

    @property
    def token(self):
        return self.transport.token

    @property
    def have_session(self):
        return self.transport.token is not None

    def root_url(self):
        if self.hostname.startswith('http://') or self.hostname.startswith('https://'):
            return self.hostname.rstrip('/')
        return 'https://' + self.hostname.rstrip('/')

    def bootstrap(self):
        """Discover the api version and log in. Runs once per connection."""
        self._reset()
        self.discover_version()
        self.login()
        return self

    def discover_version(self):
        """ Method query vCloud director for supported api versions.

            The highest advertised version this client supports is picked,
            unless the 'api_version' option pins another advertised one.

            Returns:
                The selected version string
        """
        url = self.root_url() + '/api/versions'
        self.logger.debug("Checking {} for supported API versions".format(url))

        try:
            response = self.transport.perform_request('GET', url)
        except VCloudException as exp:
            raise AuthenticationError("Can't query api versions at {}: {}".format(url, exp))
        if response.status_code != 200:
            raise AuthenticationError("Version discovery at {} failed: {} {}".format(url, response.status_code,
                                                                                  response.reason))
        try:
            info = xmltree.parse(response.content)
        except lxmlElementTree.XMLSyntaxError as exp:
            raise AuthenticationError("Failed parse version list from {}: {}".format(url, exp))

        advertised = {}
        for verblock in (info or {}).get('VersionInfo', []):
            version = xmltree.first(verblock, 'Version')
            login_url = xmltree.first(verblock, 'LoginUrl')
            if not version or not login_url:
                continue
            advertised[version] = (login_url, verblock)

        supported = [v for v in advertised if v in SUPPORTED_VERSIONS]
        pinned = self.options.get('api_version')
        if pinned:
            pinned = str(pinned)
            if pinned not in advertised:
                raise AuthenticationError("Requested api version {} is not offered by {}, available: {}"
                                          .format(pinned, self.hostname, ", ".join(sorted(advertised))))
            selected = pinned
        elif supported:
            selected = max(supported, key=version_key)
        else:
            raise AuthenticationError("No supported api version offered by {}, available: {}"
                                      .format(self.hostname, ", ".join(sorted(advertised))))

        self.api_version = selected
        self.login_url, self.raw_version = advertised[selected]
        self.base_url = '{}/api/v{}/'.format(self.root_url(), selected)
        self.transport.accept_header = ACCEPT_HEADER_TEMPLATE.format(selected)

        self.logger.debug("API Version: {}".format(self.api_version))
        self.logger.debug("API URL: {}".format(self.base_url))
        return self.api_version

    def login(self):
        """ Method authenticates user@org against the login url and stores the
            session token plus the service urls advertised in the response.

            Returns:
                The parsed login response
        """
        if self.login_url is None:
            self.discover_version()
        if self.have_session:
            raise AuthenticationError("Session for {}@{} is already logged in".format(self.username,
                                                                                   self.orgname))

        identity = '{}@{}'.format(self.username, self.orgname)
        self.logger.debug("Login URL: {}".format(self.login_url))
        self.logger.debug("Attempting to login: {}".format(identity))
        self.logger.debug("Accept header: {}".format(self.accept_header))

        try:
            response = self.transport.perform_request('POST', self.login_url,
                                                      headers={'Accept': self.accept_header},
                                                      auth=(identity, self.password))
        except VCloudException as exp:
            raise AuthenticationError("Can't connect to a vCloud director as: {}: {}".format(identity, exp))

        self.logger.debug("Authentication status: {} {}".format(response.status_code, response.reason))
        if not 200 <= response.status_code < 300:
            raise AuthenticationError("Can't login to a vCloud director as: {}: {} {}".format(
                identity, response.status_code, response.reason))

        token = response.headers.get(AUTH_HEADER)
        if not token:
            raise AuthenticationError("Login response for {} carries no {} header".format(identity, AUTH_HEADER))

        try:
            login = xmltree.parse(response.content)
        except lxmlElementTree.XMLSyntaxError as exp:
            raise AuthenticationError("Failed parse login respond for {}: {}".format(identity, exp))

        urls = {}
        for link in xmltree.links(login):
            name = SESSION_LINK_TYPES.get(link.get('type'))
            if name is not None:
                urls[name] = link.get('href')

        missing = [name for name in REQUIRED_SESSION_LINKS if name not in urls]
        if missing:
            raise AuthenticationError("Login response for {} lacks links: {}".format(identity, ", ".join(missing)))

        self.transport.token = token
        self.raw_login = login
        self.urls = urls
        self.session_href = login.get('href') if login else None
        self.logger.info("Successfully logged to a vcloud director org: {} as user: {}".format(self.orgname,
                                                                                              self.username))
        self.logger.debug("Learned urls: {}".format(self.urls))
        return login

    def logout(self):
        """Delete the server side session. No-op when not logged in."""
        if not self.have_session:
            return False
        if self.session_href:
            try:
                response = self.transport.perform_request('DELETE', self.session_href,
                                                          headers=self.transport.headers())
                if response.status_code not in (200, 204):
                    self.logger.warning("Logout from {} failed: {} {}".format(self.hostname,
                                                                             response.status_code,
                                                                             response.reason))
            except VCloudException as exp:
                self.logger.warning("Logout from {} failed: {}".format(self.hostname, exp))
        self.transport.token = None
        self.logger.debug("Logged out of {}".format(self.hostname))
        return True

    def url(self, name):
        """Return a learned service url ('admin', 'extension', 'orglist', 'query', 'entity')"""
        try:
            return self.urls[name]
        except KeyError:
            raise VCloudException("Service url '{}' was not advertised to {}@{}".format(name, self.username,
                                                                                     self.orgname))


def connect(hostname, username, password, orgname=None, options=None):
    """Create and bootstrap a Session, raising AuthenticationError on failure"""
    return Session(hostname, username, password, orgname, options).bootstrap()
