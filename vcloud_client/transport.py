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
HTTP verbs against vCloud director.

Every call carries the negotiated Accept header and, once logged in, the
session token. Response bodies are returned already parsed by xmltree.
"""

import logging

import requests
import urllib3
from lxml import etree as lxmlElementTree

from vcloud_client import xmltree
from vcloud_client.constants import AUTH_HEADER
from vcloud_client.errors import Fault, HttpError, UnexpectedResponse, VCloudConnectionError, VCloudException


class Transport(object):

    def __init__(self, timeout=3600, verify=False, die_on_fault=True):
        self.logger = logging.getLogger('vcloud.transport')
        self.http = requests.Session()
        self.timeout = timeout
        self.verify = verify
        self.die_on_fault = die_on_fault
        self.accept_header = None
        self.token = None

        if not verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def headers(self, content_type=None):
        headers = {}
        if self.accept_header:
            headers['Accept'] = self.accept_header
        if self.token:
            headers[AUTH_HEADER] = self.token
        if content_type:
            headers['Content-Type'] = content_type
        return headers

    def perform_request(self, method, url, headers=None, data=None, auth=None):
        """Send one request and return the requests response object"""
        self.logger.debug("{} {}".format(method, url))
        try:
            response = self.http.request(method, url, headers=headers, data=data, auth=auth,
                                         verify=self.verify, timeout=self.timeout)
        except requests.exceptions.RequestException as exp:
            raise VCloudConnectionError("{} {} failed: {}".format(method, url, exp))
        self.logger.debug("Respond status {} {}".format(response.status_code, response.reason))
        self.logger.debug("Respond body {}".format(response.content))
        return response

    def parse_response(self, url, response):
        """Parse a successful response, raise HttpError for anything else"""
        if 200 <= response.status_code < 300:
            try:
                return xmltree.parse(response.content)
            except lxmlElementTree.XMLSyntaxError as exp:
                raise UnexpectedResponse("Failed parse respond for rest api call {}: {}".format(url, exp))

        body = None
        try:
            body = xmltree.parse(response.content)
        except lxmlElementTree.XMLSyntaxError:
            self.logger.debug("Error respond for {} is not xml".format(url))
        raise HttpError(url, response.status_code, response.reason, body)

    def _fault(self, error):
        if self.die_on_fault:
            raise error
        self.logger.error("{}".format(error))
        return Fault(error)

    def request(self, verb, url, content_type=None, body=None):
        """Send an authenticated request.

        Args:
            verb - 'GET', 'POST', 'PUT' or 'DELETE'
            url - absolute url
            content_type - Content-Type of body
            body - raw request payload

        Returns:
            parsed body, None for an empty body, or a Fault when die_on_fault is off
        """
        try:
            response = self.perform_request(verb, url, headers=self.headers(content_type), data=body)
            return self.parse_response(url, response)
        except VCloudException as exp:
            return self._fault(exp)

    def get(self, url):
        return self.request('GET', url)

    def delete(self, url):
        return self.request('DELETE', url)

    def post(self, url, content_type=None, body=None):
        """POST and report the outcome as a 3-tuple.

        Returns:
            (status message, numeric status code, parsed body). The parsed body
            is a Fault when the request failed and die_on_fault is off.
        """
        headers = self.headers(content_type)
        try:
            response = self.perform_request('POST', url, headers=headers, data=body)
            data = self.parse_response(url, response)
        except HttpError as exp:
            return exp.reason, exp.status_code, self._fault(exp)
        except VCloudException as exp:
            return str(exp), exp.http_code, self._fault(exp)
        return response.reason, response.status_code, data
