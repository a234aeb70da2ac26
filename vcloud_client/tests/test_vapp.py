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

from vcloud_client.api import API
from vcloud_client.errors import ActionUnavailableError, Fault, HttpError
from vcloud_client.session import Session
from vcloud_client.tests import xml_responses as xml_resp
from vcloud_client.tests.helpers import bootstrap_responses, fake_response
from vcloud_client.transport import Transport
from vcloud_client.vapp import VApp


class TestVApp(unittest.TestCase):

    def setUp(self):
        with mock.patch.object(Transport, 'perform_request', side_effect=bootstrap_responses()):
            session = Session('localhost', 'admin', 'qwerty123').bootstrap()
        self.api = API(session)
        self.on_change = mock.Mock()

    def vapp(self, content=xml_resp.vapp_xml_response):
        with mock.patch.object(Transport, 'perform_request', return_value=fake_response(content)):
            return VApp(self.api, xml_resp.vapp_href, on_change=self.on_change)

    def test_properties(self):
        vapp = self.vapp()

        self.assertEqual(vapp.name, 'Test1')
        self.assertEqual(vapp.href, xml_resp.vapp_href)
        self.assertEqual(vapp.status, 8)
        self.assertEqual(vapp.status_name, 'POWERED_OFF')
        self.assertEqual(vapp.dumper()['Description'], ['Ubuntu vApp'])

    def test_available_actions_skip_navigation(self):
        actions = self.vapp().available_actions()

        self.assertEqual(sorted(actions), ['deploy', 'ovf', 'power:powerOn', 'remove', 'snapshot:create'])
        self.assertEqual(actions['power:powerOn'], xml_resp.vapp_href + '/power/action/powerOn')

    def test_actions_follow_the_advertised_links(self):
        actions = self.vapp(xml_resp.vapp_powered_on_xml_response).available_actions()

        self.assertEqual(sorted(actions), ['power:powerOff', 'power:reboot', 'power:suspend', 'undeploy'])

    @mock.patch.object(Transport, 'perform_request')
    def test_unavailable_action_sends_nothing(self, perform_request):
        vapp = self.vapp(xml_resp.vapp_powered_on_xml_response)

        self.assertRaises(ActionUnavailableError, vapp.power_on)
        self.assertRaises(ActionUnavailableError, vapp.deploy)
        self.assertFalse(perform_request.called)
        self.assertFalse(self.on_change.called)

    @mock.patch.object(Transport, 'perform_request')
    def test_power_on(self, perform_request):
        vapp = self.vapp()
        perform_request.return_value = fake_response(xml_resp.running_task_xml, status_code=202,
                                                     reason='Accepted')

        reason, code, task = vapp.power_on()

        self.assertEqual(code, 202)
        self.assertEqual(task['status'], 'running')
        args, kwargs = perform_request.call_args
        self.assertEqual(args, ('POST', xml_resp.vapp_href + '/power/action/powerOn'))
        self.assertIsNone(kwargs['data'])
        self.on_change.assert_called_once_with()

    @mock.patch.object(Transport, 'perform_request')
    def test_deploy_sends_params(self, perform_request):
        vapp = self.vapp()
        perform_request.return_value = fake_response(xml_resp.running_task_xml, status_code=202,
                                                     reason='Accepted')

        vapp.deploy(power_on=True)

        args, kwargs = perform_request.call_args
        self.assertEqual(args[1], xml_resp.vapp_href + '/action/deploy')
        self.assertEqual(kwargs['headers']['Content-Type'], 'application/vnd.vmware.vcloud.deployVAppParams+xml')
        self.assertIn('powerOn="true"', kwargs['data'])

    @mock.patch.object(Transport, 'perform_request')
    def test_undeploy(self, perform_request):
        vapp = self.vapp(xml_resp.vapp_powered_on_xml_response)
        perform_request.return_value = fake_response(xml_resp.running_task_xml, status_code=202,
                                                     reason='Accepted')

        vapp.undeploy('shutdown')

        self.assertIn('<UndeployPowerAction>shutdown</UndeployPowerAction>', perform_request.call_args[1]['data'])

    def test_failed_action_does_not_notify(self):
        self.api.transport.die_on_fault = False
        vapp = self.vapp()
        error = fake_response(xml_resp.error_xml_response, status_code=403, reason='Forbidden')

        with mock.patch.object(Transport, 'perform_request', return_value=error):
            reason, code, fault = vapp.power_on()

        self.assertEqual(code, 403)
        self.assertIsInstance(fault, Fault)
        self.assertIsInstance(fault.error, HttpError)
        self.assertFalse(self.on_change.called)

    def test_refresh(self):
        vapp = self.vapp()
        with mock.patch.object(Transport, 'perform_request',
                               return_value=fake_response(xml_resp.vapp_powered_on_xml_response)):
            vapp.refresh()

        self.assertEqual(vapp.status_name, 'POWERED_ON')


if __name__ == '__main__':
    unittest.main()
