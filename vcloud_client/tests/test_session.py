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

import unittest

import mock

from vcloud_client.errors import AuthenticationError, VCloudConnectionError, VCloudException
from vcloud_client.session import Session, connect, version_key
from vcloud_client.tests import xml_responses as xml_resp
from vcloud_client.tests.helpers import TOKEN, fake_response, login_response, versions_response
from vcloud_client.transport import Transport


class TestSession(unittest.TestCase):

    def setUp(self):
        self.session = Session('localhost', 'admin', 'qwerty123')

    @mock.patch.object(Transport, 'perform_request')
    def test_highest_supported_version_is_selected(self, perform_request):
        perform_request.side_effect = [versions_response(), login_response()]

        self.session.bootstrap()

        self.assertEqual(self.session.api_version, '1.5')
        self.assertEqual(self.session.base_url, 'https://localhost/api/v1.5/')
        self.assertEqual(self.session.login_url, 'https://localhost/api/sessions')
        self.assertEqual(self.session.accept_header, 'application/*+xml;version=1.5')
        perform_request.assert_any_call('GET', 'https://localhost/api/versions')

    @mock.patch.object(Transport, 'perform_request')
    def test_login_learns_token_and_urls(self, perform_request):
        perform_request.side_effect = [versions_response(), login_response()]

        self.session.bootstrap()

        self.assertEqual(self.session.token, TOKEN)
        self.assertTrue(self.session.have_session)
        self.assertEqual(self.session.urls, {'orglist': 'https://localhost/api/org/',
                                             'admin': 'https://localhost/api/admin/',
                                             'extension': 'https://localhost/api/admin/extension',
                                             'query': 'https://localhost/api/query',
                                             'entity': 'https://localhost/api/entity/'})
        self.assertEqual(self.session.session_href, xml_resp.session_href)
        self.assertEqual(self.session.url('orglist'), 'https://localhost/api/org/')

        login_call = perform_request.call_args_list[1]
        self.assertEqual(login_call[0], ('POST', 'https://localhost/api/sessions'))
        self.assertEqual(login_call[1]['auth'], ('admin@System', 'qwerty123'))
        self.assertEqual(login_call[1]['headers'], {'Accept': 'application/*+xml;version=1.5'})

    @mock.patch.object(Transport, 'perform_request')
    def test_org_context_in_identity(self, perform_request):
        perform_request.side_effect = [versions_response(), login_response()]
        session = connect('localhost', 'orgadmin', 'secret', 'Org3')
        self.assertEqual(perform_request.call_args_list[1][1]['auth'], ('orgadmin@Org3', 'secret'))
        self.assertEqual(session.orgname, 'Org3')

    @mock.patch.object(Transport, 'perform_request')
    def test_pinned_version(self, perform_request):
        perform_request.side_effect = [versions_response(), login_response()]
        session = Session('localhost', 'admin', 'qwerty123', options={'api_version': '1.0'})
        session.bootstrap()
        self.assertEqual(session.api_version, '1.0')
        self.assertEqual(session.login_url, 'https://localhost/api/v1.0/login')

    @mock.patch.object(Transport, 'perform_request')
    def test_pinned_version_not_advertised(self, perform_request):
        perform_request.return_value = versions_response()
        session = Session('localhost', 'admin', 'qwerty123', options={'api_version': '5.5'})
        self.assertRaises(AuthenticationError, session.discover_version)

    @mock.patch.object(Transport, 'perform_request')
    def test_no_supported_version(self, perform_request):
        perform_request.return_value = versions_response(xml_resp.unsupported_versions_xml_response)
        self.assertRaises(AuthenticationError, self.session.bootstrap)

    @mock.patch.object(Transport, 'perform_request')
    def test_version_discovery_unreachable(self, perform_request):
        perform_request.side_effect = VCloudConnectionError("connection refused")
        self.assertRaises(AuthenticationError, self.session.bootstrap)

    @mock.patch.object(Transport, 'perform_request')
    def test_version_discovery_http_error(self, perform_request):
        perform_request.return_value = fake_response('', status_code=404, reason='Not Found')
        self.assertRaises(AuthenticationError, self.session.bootstrap)

    @mock.patch.object(Transport, 'perform_request')
    def test_bad_credentials(self, perform_request):
        perform_request.side_effect = [versions_response(),
                                       fake_response(xml_resp.error_xml_response, status_code=401,
                                                     reason='Unauthorized')]
        self.assertRaises(AuthenticationError, self.session.bootstrap)
        self.assertFalse(self.session.have_session)

    @mock.patch.object(Transport, 'perform_request')
    def test_missing_token(self, perform_request):
        perform_request.side_effect = [versions_response(), login_response(token=None)]
        self.assertRaises(AuthenticationError, self.session.bootstrap)

    @mock.patch.object(Transport, 'perform_request')
    def test_missing_orglist_link(self, perform_request):
        perform_request.side_effect = [versions_response(),
                                       login_response(xml_resp.session_without_orglist_xml_response)]
        self.assertRaises(AuthenticationError, self.session.bootstrap)
        self.assertFalse(self.session.have_session)

    @mock.patch.object(Transport, 'perform_request')
    def test_die_on_fault_off_still_raises_on_login(self, perform_request):
        perform_request.side_effect = [versions_response(),
                                       fake_response('', status_code=401, reason='Unauthorized')]
        session = Session('localhost', 'admin', 'qwerty123', options={'die_on_fault': False})
        self.assertRaises(AuthenticationError, session.bootstrap)

    @mock.patch.object(Transport, 'perform_request')
    def test_logout(self, perform_request):
        perform_request.side_effect = [versions_response(), login_response(),
                                       fake_response('', status_code=204, reason='No Content')]
        self.session.bootstrap()

        self.assertTrue(self.session.logout())

        self.assertFalse(self.session.have_session)
        method, url = perform_request.call_args[0]
        self.assertEqual((method, url), ('DELETE', xml_resp.session_href))
        self.assertEqual(perform_request.call_args[1]['headers']['x-vcloud-authorization'], TOKEN)
        self.assertFalse(self.session.logout())

    def test_unknown_url(self):
        self.assertRaises(VCloudException, self.session.url, 'admin')

    def test_root_url(self):
        self.assertEqual(self.session.root_url(), 'https://localhost')
        self.assertEqual(Session('http://localhost:8080/', 'a', 'b').root_url(), 'http://localhost:8080')
        self.assertEqual(self.session.orgname, 'System')

    def test_version_key(self):
        self.assertGreater(version_key('5.10'), version_key('5.6'))
        self.assertGreater(version_key('1.5'), version_key('1.0'))


if __name__ == '__main__':
    unittest.main()
