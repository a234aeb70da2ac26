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

from vcloud_client.client import Client
from vcloud_client.errors import (ActionUnavailableError, AuthenticationError, ConfigurationError, Fault, HttpError,
                                  TaskTimeoutError, TaskWaitCancelled, TaskWaitError, VCloudException, is_fault)
from vcloud_client.references import ById, ByReference
from vcloud_client.session import Session, connect
from vcloud_client.vapp import VApp

__version__ = '1.0.0'
