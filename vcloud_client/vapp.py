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
Handle on a single vApp. Which actions are possible is decided by the links
vCloud director advertises on the vApp at fetch time, not by local state.
"""

import logging

from vcloud_client import templates, xmltree
from vcloud_client.constants import (DEPLOY_REL, DEPLOY_VAPP_CONTENT, NAVIGATION_RELATIONS, POWER_OFF_REL,
                                     POWER_ON_REL, REBOOT_REL, SUSPEND_REL, UNDEPLOY_REL,
                                     UNDEPLOY_VAPP_CONTENT)
from vcloud_client.errors import ActionUnavailableError, is_fault

vcdStatusCode2Name = {-1: 'FAILED_CREATION',
                      0: 'UNRESOLVED',
                      1: 'RESOLVED',
                      3: 'SUSPENDED',
                      4: 'POWERED_ON',
                      7: 'UNKNOWN',
                      8: 'POWERED_OFF',
                      10: 'MIXED',
                      12: 'BUSY'}


class VApp(object):

    def __init__(self, api, href, on_change=None):
        self.api = api
        self.on_change = on_change
        self.logger = logging.getLogger('vcloud.vapp')
        self.raw = None
        self._href = href
        self.refresh()

    def refresh(self):
        """Fetch the current representation of the vApp"""
        self.raw = self.api.vapp_get(self._href)
        return self.raw

    def dumper(self):
        return self.raw

    @property
    def href(self):
        if self.raw and not is_fault(self.raw):
            return self.raw.get('href', self._href)
        return self._href

    @property
    def name(self):
        if self.raw and not is_fault(self.raw):
            return self.raw.get('name')
        return None

    @property
    def status(self):
        """Numeric vCloud status of the vApp, None when unknown"""
        if not self.raw or is_fault(self.raw):
            return None
        try:
            return int(self.raw.get('status'))
        except (TypeError, ValueError):
            return None

    @property
    def status_name(self):
        return vcdStatusCode2Name.get(self.status, 'UNKNOWN')

    def available_actions(self):
        """
        Returns:
            dict of advertised action relation -> href, navigation links excluded
        """
        actions = {}
        if is_fault(self.raw):
            return actions
        for link in xmltree.links(self.raw):
            rel = link.get('rel')
            if rel is None or rel in NAVIGATION_RELATIONS:
                continue
            actions[rel] = link.get('href')
        return actions

    def invoke(self, rel, content_type=None, body=None):
        """
        POST to the href advertised for rel.

        Returns:
            the post tuple (status message, status code, parsed body); a 202
            body is the Task tracking the action
        """
        actions = self.available_actions()
        if rel not in actions:
            raise ActionUnavailableError("Unable to {} vApp {} at this time, available actions: {}".format(
                rel, self.name or self._href, ", ".join(sorted(actions))))

        self.logger.debug("Invoking {} on vApp {}".format(rel, self.href))
        result = self.api.post(actions[rel], content_type, body)
        if not is_fault(result) and self.on_change is not None:
            self.on_change()
        return result

    def power_on(self):
        """Power on, deploying the vApp first if it is undeployed"""
        return self.invoke(POWER_ON_REL)

    def power_off(self):
        return self.invoke(POWER_OFF_REL)

    def reboot(self):
        return self.invoke(REBOOT_REL)

    def suspend(self):
        return self.invoke(SUSPEND_REL)

    def deploy(self, power_on=False):
        return self.invoke(DEPLOY_REL, DEPLOY_VAPP_CONTENT, templates.deploy_vapp_xml(power_on))

    def undeploy(self, power_off_action='powerOff'):
        return self.invoke(UNDEPLOY_REL, UNDEPLOY_VAPP_CONTENT, templates.undeploy_vapp_xml(power_off_action))

    def __repr__(self):
        return "VApp({!r})".format(self.href)
