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

import mock

from vcloud_client.client import Client
from vcloud_client.constants import AUTH_HEADER
from vcloud_client.tests import xml_responses as xml_resp
from vcloud_client.transport import Transport

TOKEN = 'c3b5d7c8f2e14d2a9b3e7f6a1d0c4b8e'


def fake_response(content='', status_code=200, reason='OK', headers=None):
    """Stand-in for a requests response"""
    if isinstance(content, str):
        content = content.encode('utf-8')
    return mock.Mock(status_code=status_code, reason=reason, content=content, headers=headers or {})


def versions_response(content=xml_resp.versions_xml_response):
    return fake_response(content)


def login_response(content=xml_resp.session_xml_response, token=TOKEN):
    headers = {AUTH_HEADER: token} if token else {}
    return fake_response(content, headers=headers)


def bootstrap_responses():
    return [versions_response(), login_response()]


def connected_client(**config):
    """Client logged in against the canned session responses"""
    with mock.patch.object(Transport, 'perform_request', side_effect=bootstrap_responses()):
        return Client('localhost', 'admin', 'qwerty123', 'System', config=config)
