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

AUTH_HEADER = 'x-vcloud-authorization'
ACCEPT_HEADER_TEMPLATE = 'application/*+xml;version={}'

# api versions this client speaks, newest last
SUPPORTED_VERSIONS = ('1.0', '1.5', '5.1', '5.5', '5.6')

# session link types mapped to the name they are learned under
SESSION_LINK_TYPES = {'application/vnd.vmware.admin.vcloud+xml': 'admin',
                      'application/vnd.vmware.vcloud.entity+xml': 'entity',
                      'application/vnd.vmware.admin.vmwExtension+xml': 'extension',
                      'application/vnd.vmware.vcloud.orgList+xml': 'orglist',
                      'application/vnd.vmware.vcloud.query.queryList+xml': 'query'}

# without these the session is useless
REQUIRED_SESSION_LINKS = ('orglist',)

# media types
ORG_TYPE = 'application/vnd.vmware.vcloud.org+xml'
VDC_TYPE = 'application/vnd.vmware.vcloud.vdc+xml'
CATALOG_TYPE = 'application/vnd.vmware.vcloud.catalog+xml'
ORG_NETWORK_TYPE = 'application/vnd.vmware.vcloud.orgNetwork+xml'
VAPP_TYPE = 'application/vnd.vmware.vcloud.vApp+xml'
VAPP_TEMPLATE_TYPE = 'application/vnd.vmware.vcloud.vAppTemplate+xml'
MEDIA_TYPE = 'application/vnd.vmware.vcloud.media+xml'
INSTANTIATE_VAPP_TEMPLATE_TYPE = 'application/vnd.vmware.vcloud.instantiateVAppTemplateParams+xml'
EXTERNAL_NETWORK_REFS_TYPE = 'application/vnd.vmware.admin.vmwExternalNetworkReferences+xml'
VIM_SERVER_REFS_TYPE = 'application/vnd.vmware.admin.vmwVimServerReferences+xml'

# request content types
ADMIN_ORG_CONTENT = 'application/vnd.vmware.admin.organization+xml'
ORG_NETWORK_CONTENT = 'application/vnd.vmware.admin.orgNetwork+xml'
CREATE_VDC_CONTENT = 'application/vnd.vmware.admin.createVdcParams+xml'
ADMIN_CATALOG_CONTENT = 'application/vnd.vmware.admin.catalog+xml'
EXTERNAL_NETWORK_CONTENT = 'application/vnd.vmware.admin.vmwexternalnet+xml'

# link relations that are navigation rather than actions
NAVIGATION_RELATIONS = ('up', 'down', 'edit', 'controlAccess')

# task status
TASK_QUEUED = 'queued'
TASK_PRE_RUNNING = 'preRunning'
TASK_RUNNING = 'running'
TASK_SUCCESS = 'success'
TASK_ERROR = 'error'
TASK_CANCELLED = 'cancelled'
TASK_ABORTED = 'aborted'

TASK_IN_FLIGHT = (TASK_QUEUED, TASK_PRE_RUNNING, TASK_RUNNING)
TASK_TERMINAL = (TASK_SUCCESS, TASK_ERROR, TASK_CANCELLED, TASK_ABORTED)

DEPLOY_VAPP_CONTENT = 'application/vnd.vmware.vcloud.deployVAppParams+xml'
UNDEPLOY_VAPP_CONTENT = 'application/vnd.vmware.vcloud.undeployVAppParams+xml'

# vApp action relations
POWER_ON_REL = 'power:powerOn'
POWER_OFF_REL = 'power:powerOff'
REBOOT_REL = 'power:reboot'
SUSPEND_REL = 'power:suspend'
DEPLOY_REL = 'deploy'
UNDEPLOY_REL = 'undeploy'
