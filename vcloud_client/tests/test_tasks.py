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

from vcloud_client import xmltree
from vcloud_client.errors import Fault, HttpError, TaskTimeoutError, TaskWaitCancelled, UnexpectedResponse
from vcloud_client.tasks import DONE_PERCENT, TaskPoller, progress
from vcloud_client.tests import xml_responses as xml_resp


def task(xml):
    return xmltree.parse(xml)


class FakeClock(object):
    """Monotonic clock advanced by the fake sleep"""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class TestProgress(unittest.TestCase):

    def test_running_task_reports_its_progress(self):
        self.assertEqual(progress(task(xml_resp.running_task_xml)), (40, 'running'))

    def test_queued_task_without_progress(self):
        self.assertEqual(progress(task(xml_resp.queued_task_xml)), (None, 'queued'))

    def test_success(self):
        self.assertEqual(progress(task(xml_resp.success_task_xml)), (100, 'success'))

    def test_finished_task_without_progress_is_done(self):
        self.assertEqual(progress(task(xml_resp.error_task_xml)), (DONE_PERCENT, 'error'))


class TestTaskPoller(unittest.TestCase):

    def test_invalid_settings(self):
        self.assertRaises(ValueError, TaskPoller, mock.Mock(), interval=-1)
        self.assertRaises(ValueError, TaskPoller, mock.Mock(), backoff=0.5)

    def test_terminal_after_n_in_flight_polls(self):
        fetch = mock.Mock(side_effect=[task(xml_resp.queued_task_xml),
                                       task(xml_resp.running_task_xml),
                                       task(xml_resp.running_task_xml),
                                       task(xml_resp.success_task_xml)])
        sleep = mock.Mock()
        poller = TaskPoller(fetch, interval=2, sleep=sleep)

        status, result = poller.wait(xml_resp.task_href)

        self.assertEqual(status, 'success')
        self.assertEqual(result['status'], 'success')
        self.assertEqual(fetch.call_count, 4)
        self.assertEqual(sleep.call_count, 3)
        fetch.assert_called_with(xml_resp.task_href)

    def test_error_is_a_normal_result(self):
        fetch = mock.Mock(return_value=task(xml_resp.error_task_xml))
        sleep = mock.Mock()

        status, result = TaskPoller(fetch, sleep=sleep).wait(xml_resp.task_href)

        self.assertEqual(status, 'error')
        self.assertFalse(sleep.called)

    def test_backoff_is_capped(self):
        fetch = mock.Mock(side_effect=[task(xml_resp.running_task_xml)] * 5 + [task(xml_resp.success_task_xml)])
        sleep = mock.Mock()
        poller = TaskPoller(fetch, interval=1, backoff=2, max_interval=5, sleep=sleep)

        poller.wait(xml_resp.task_href)

        self.assertEqual([c[0][0] for c in sleep.call_args_list], [1, 2, 4, 5, 5])

    def test_timeout(self):
        clock = FakeClock()
        fetch = mock.Mock(return_value=task(xml_resp.running_task_xml))
        poller = TaskPoller(fetch, interval=4, sleep=clock.sleep, clock=clock)

        with self.assertRaises(TaskTimeoutError) as context:
            poller.wait(xml_resp.task_href, timeout=10)

        # polls at 0, 4, 8, then a shortened pause to 10
        self.assertEqual(fetch.call_count, 4)
        self.assertEqual(clock.now, 10)
        self.assertEqual(context.exception.task['status'], 'running')

    def test_cancel(self):
        fetch = mock.Mock(return_value=task(xml_resp.running_task_xml))
        event = mock.Mock()
        event.wait.side_effect = [False, True]
        sleep = mock.Mock()

        with self.assertRaises(TaskWaitCancelled):
            TaskPoller(fetch, interval=3, sleep=sleep).wait(xml_resp.task_href, cancel_event=event)

        self.assertEqual(fetch.call_count, 2)
        event.wait.assert_called_with(3)
        self.assertFalse(sleep.called)

    def test_fault_ends_the_wait(self):
        fault = Fault(HttpError(xml_resp.task_href, 404, 'Not Found'))
        fetch = mock.Mock(return_value=fault)

        status, result = TaskPoller(fetch, sleep=mock.Mock()).wait(xml_resp.task_href)

        self.assertIsNone(status)
        self.assertIs(result, fault)

    def test_unknown_status_is_not_a_result(self):
        fetch = mock.Mock(side_effect=[task(xml_resp.unknown_status_task_xml),
                                       task(xml_resp.success_task_xml)])
        sleep = mock.Mock()

        with self.assertRaises(UnexpectedResponse) as context:
            TaskPoller(fetch, sleep=sleep).wait(xml_resp.task_href)

        self.assertEqual(context.exception.task['status'], 'paused')
        self.assertEqual(fetch.call_count, 1)
        self.assertFalse(sleep.called)

    def test_missing_status_is_not_a_result(self):
        fetch = mock.Mock(return_value=task(xml_resp.no_status_task_xml))

        self.assertRaises(UnexpectedResponse, TaskPoller(fetch, sleep=mock.Mock()).wait, xml_resp.task_href)


if __name__ == '__main__':
    unittest.main()
