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
Tracking of vCloud director tasks.

A task moves queued -> preRunning -> running and ends in one of success,
error, cancelled or aborted. A failed task is a normal result here, only a
deadline or a cancel request interrupts the wait.
"""

import logging
import time

from vcloud_client import xmltree
from vcloud_client.constants import TASK_IN_FLIGHT, TASK_SUCCESS, TASK_TERMINAL
from vcloud_client.errors import TaskTimeoutError, TaskWaitCancelled, UnexpectedResponse, is_fault

DONE_PERCENT = 101


def task_status(task):
    if not task:
        return None
    return task.get('status')


def progress(task):
    """
    Completion snapshot of a fetched task.

    Returns:
        tuple (percent, status). percent is the reported Progress as int, None
        while an in-flight task reports none, and 101 for a finished task that
        reports none.
    """
    status = task_status(task)
    value = xmltree.first(task, 'Progress')
    if value not in (None, ''):
        try:
            value = int(value)
        except (TypeError, ValueError):
            value = None
    else:
        value = None

    if status in TASK_IN_FLIGHT or status == TASK_SUCCESS:
        return value, status
    return (DONE_PERCENT if value is None else value), status


class TaskPoller(object):
    """Blocks until a task reaches a terminal status.

    Args:
        fetch - callable taking a task href and returning the parsed task
        interval - first delay between polls, seconds
        backoff - multiplier applied to the delay after every poll
        max_interval - upper bound of the delay
        timeout - overall deadline in seconds, None waits forever
    """

    def __init__(self, fetch, interval=1.0, backoff=1.0, max_interval=60.0, timeout=None,
                 sleep=time.sleep, clock=time.monotonic):
        if interval < 0 or backoff < 1 or max_interval < 0:
            raise ValueError("Invalid poll settings interval={} backoff={} max_interval={}"
                             .format(interval, backoff, max_interval))
        self.fetch = fetch
        self.interval = interval
        self.backoff = backoff
        self.max_interval = max_interval
        self.timeout = timeout
        self.sleep = sleep
        self.clock = clock
        self.logger = logging.getLogger('vcloud.tasks')

    def wait(self, href, timeout=None, cancel_event=None):
        """
        Poll the task at href until it reaches a terminal status. A status
        that is neither terminal nor in flight raises UnexpectedResponse.

        Args:
            href - task reference
            timeout - overrides the poller timeout for this wait
            cancel_event - threading.Event, setting it aborts the wait

        Returns:
            tuple (terminal status, last fetched task), or (None, fault) when a
            fetch failed and the client does not die on faults
        """
        if timeout is None:
            timeout = self.timeout
        deadline = None if timeout is None else self.clock() + timeout
        delay = self.interval
        polls = 0

        while True:
            task = self.fetch(href)
            polls += 1
            if is_fault(task):
                self.logger.error("Polling task {} failed: {}".format(href, task))
                return None, task

            status = task_status(task)
            self.logger.debug("Task {} poll {} status: {}".format(href, polls, status))
            if status in TASK_TERMINAL:
                self.logger.debug("Task {} finished with status {} after {} polls".format(href, status, polls))
                return status, task
            if status not in TASK_IN_FLIGHT:
                raise UnexpectedResponse("Task {} reported unknown status {}".format(href, status), task=task)

            pause = delay
            if deadline is not None:
                remaining = deadline - self.clock()
                if remaining <= 0:
                    raise TaskTimeoutError("Task {} still {} after {} seconds".format(href, status, timeout),
                                           task=task)
                pause = min(pause, remaining)

            if cancel_event is not None:
                if cancel_event.wait(pause):
                    raise TaskWaitCancelled("Wait on task {} cancelled while {}".format(href, status), task=task)
            else:
                self.sleep(pause)

            delay = min(delay * self.backoff, self.max_interval)
