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
Exceptions raised by the vCloud Director client and the fault value returned
in their place when the client is configured not to die on faults.
"""

# Error variables
HTTP_Bad_Request = 400
HTTP_Unauthorized = 401
HTTP_Not_Found = 404
HTTP_Request_Timeout = 408
HTTP_Conflict = 409
HTTP_Client_Closed_Request = 499
HTTP_Internal_Server_Error = 500
HTTP_Service_Unavailable = 503


class VCloudException(Exception):
    """Common and base class Exception for all vcloud client exceptions"""

    def __init__(self, message, http_code=HTTP_Bad_Request):
        Exception.__init__(self, message)
        self.http_code = http_code


class AuthenticationError(VCloudException):
    """Version discovery or login against vCloud director failed"""

    def __init__(self, message, http_code=HTTP_Unauthorized):
        VCloudException.__init__(self, message, http_code)


class HttpError(VCloudException):
    """vCloud director answered with a non 2xx status

    ``body`` holds the parsed error document when the server sent one, and
    ``error_message`` the message attribute of a vCloud ``<Error>`` element.
    """

    def __init__(self, url, status_code, reason, body=None):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.body = body
        self.error_message = None
        if isinstance(body, dict):
            self.error_message = body.get('message')

        message = "{} {} for url: {}".format(status_code, reason, url)
        if self.error_message:
            message = "{} ({})".format(message, self.error_message)
        VCloudException.__init__(self, message, status_code)


class VCloudConnectionError(VCloudException):
    """Connectivity error with vCloud director"""

    def __init__(self, message, http_code=HTTP_Service_Unavailable):
        VCloudException.__init__(self, message, http_code)


class UnexpectedResponse(VCloudException):
    """Got a response vCloud director should not have sent, e.g. broken xml

    ``task`` holds the parsed task when a task poll returned an unknown status.
    """

    def __init__(self, message, http_code=HTTP_Service_Unavailable, task=None):
        VCloudException.__init__(self, message, http_code)
        self.task = task


class ActionUnavailableError(VCloudException):
    """The requested vApp action is not advertised by the server right now"""

    def __init__(self, message, http_code=HTTP_Conflict):
        VCloudException.__init__(self, message, http_code)


class ConfigurationError(VCloudException):
    """Invalid client option or request body parameters"""

    def __init__(self, message, http_code=HTTP_Bad_Request):
        VCloudException.__init__(self, message, http_code)


class TaskWaitError(VCloudException):
    """Waiting on a task ended before the task reached a terminal state"""

    def __init__(self, message, task=None, http_code=HTTP_Request_Timeout):
        VCloudException.__init__(self, message, http_code)
        self.task = task


class TaskTimeoutError(TaskWaitError):
    """The deadline passed while the task was still queued or running"""


class TaskWaitCancelled(TaskWaitError):
    """The caller cancelled the wait"""

    def __init__(self, message, task=None, http_code=HTTP_Client_Closed_Request):
        TaskWaitError.__init__(self, message, task, http_code)


class CacheMiss(KeyError):
    """Key not present in the response cache"""


class Fault(object):
    """Failure handed back to the caller instead of being raised.

    Returned by every request when ``die_on_fault`` is off. It is falsy so
    callers can write ``if not result:`` and inspect ``fault.error`` for the
    underlying exception.
    """

    def __init__(self, error):
        self.error = error

    @property
    def status_code(self):
        return getattr(self.error, 'status_code', self.error.http_code)

    @property
    def reason(self):
        return getattr(self.error, 'reason', str(self.error))

    @property
    def body(self):
        return getattr(self.error, 'body', None)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Fault({!r})".format(self.error)

    def __str__(self):
        return str(self.error)


def is_fault(value):
    """True for a Fault, or a POST result tuple whose data is a Fault"""
    if isinstance(value, Fault):
        return True
    if isinstance(value, tuple) and len(value) == 3:
        return isinstance(value[2], Fault)
    return False
