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
Request bodies for the create calls. Each builder takes a conf dict and
returns the xml string to POST.
"""

from xml.sax.saxutils import escape, quoteattr

from vcloud_client.errors import ConfigurationError

FENCE_MODES = ('bridged', 'isolated', 'natRouted')
IP_ALLOCATION_MODES = ('NONE', 'MANUAL', 'POOL', 'DHCP')


def _require(conf, *keys):
    missing = [k for k in keys if conf.get(k) in (None, '')]
    if missing:
        raise ConfigurationError("Missing required parameters: {}".format(", ".join(missing)))


def _bool(value):
    return 'true' if value in (True, 'true', 'True', '1', 1) else 'false'


def _text(value):
    return escape('' if value is None else str(value))


def org_xml(conf):
    """AdminOrg body.

    conf keys: name (required), description, full_name, is_enabled,
    can_publish_catalogs, deployed_vm_quota, stored_vm_quota,
    delay_after_power_on_seconds, vdcs (list of vdc hrefs)
    """
    _require(conf, 'name')
    vdcs = ''.join('\n        <Vdc href={}/>'.format(quoteattr(href)) for href in conf.get('vdcs') or [])
    return """<AdminOrg xmlns="http://www.vmware.com/vcloud/v1.5" name={name}>
    <Description>{description}</Description>
    <FullName>{full_name}</FullName>
    <IsEnabled>{is_enabled}</IsEnabled>
    <Settings>
        <OrgGeneralSettings>
            <CanPublishCatalogs>{can_publish}</CanPublishCatalogs>
            <DeployedVMQuota>{deployed}</DeployedVMQuota>
            <StoredVmQuota>{stored}</StoredVmQuota>
            <UseServerBootSequence>false</UseServerBootSequence>
            <DelayAfterPowerOnSeconds>{delay}</DelayAfterPowerOnSeconds>
        </OrgGeneralSettings>
    </Settings>
    <Vdcs>{vdcs}
    </Vdcs>
</AdminOrg>""".format(name=quoteattr(conf['name']),
                      description=_text(conf.get('description')),
                      full_name=_text(conf.get('full_name') or conf['name']),
                      is_enabled=_bool(conf.get('is_enabled', True)),
                      can_publish=_bool(conf.get('can_publish_catalogs', True)),
                      deployed=_text(conf.get('deployed_vm_quota', 10)),
                      stored=_text(conf.get('stored_vm_quota', 15)),
                      delay=_text(conf.get('delay_after_power_on_seconds', 1)),
                      vdcs=vdcs)


def org_network_xml(conf):
    """OrgNetwork body.

    conf keys: name, gateway, netmask (required), description, dns1, dns2,
    dns_suffix, is_enabled, start_ip, end_ip
    """
    _require(conf, 'name', 'gateway', 'netmask')
    ip_range = ''
    if conf.get('start_ip') and conf.get('end_ip'):
        ip_range = """
                <IpRanges>
                    <IpRange>
                        <StartAddress>{}</StartAddress>
                        <EndAddress>{}</EndAddress>
                    </IpRange>
                </IpRanges>""".format(_text(conf['start_ip']), _text(conf['end_ip']))
    return """<OrgNetwork xmlns="http://www.vmware.com/vcloud/v1.5" name={name}>
    <Description>{description}</Description>
    <Configuration>
        <IpScopes>
            <IpScope>
                <IsInherited>false</IsInherited>
                <Gateway>{gateway}</Gateway>
                <Netmask>{netmask}</Netmask>
                <Dns1>{dns1}</Dns1>
                <Dns2>{dns2}</Dns2>
                <DnsSuffix>{dns_suffix}</DnsSuffix>
                <IsEnabled>{is_enabled}</IsEnabled>{ip_range}
            </IpScope>
        </IpScopes>
        <FenceMode>isolated</FenceMode>
    </Configuration>
    <IsShared>{is_shared}</IsShared>
</OrgNetwork>""".format(name=quoteattr(conf['name']),
                        description=_text(conf.get('description')),
                        gateway=_text(conf['gateway']),
                        netmask=_text(conf['netmask']),
                        dns1=_text(conf.get('dns1')),
                        dns2=_text(conf.get('dns2')),
                        dns_suffix=_text(conf.get('dns_suffix')),
                        is_enabled=_bool(conf.get('is_enabled', True)),
                        ip_range=ip_range,
                        is_shared=_bool(conf.get('is_shared', False)))


def vdc_xml(conf):
    """CreateVdcParams body.

    conf keys: name (required), description, allocation_model,
    cpu_allocated, cpu_limit, memory_allocated, memory_limit, storage_limit,
    storage_profile (provider vdc storage profile href), nic_quota,
    network_quota, provider_vdc (provider vdc href)
    """
    _require(conf, 'name')
    provider = ''
    if conf.get('provider_vdc'):
        provider = '\n    <ProviderVdcReference href={}/>'.format(quoteattr(conf['provider_vdc']))
    return """<CreateVdcParams xmlns="http://www.vmware.com/vcloud/v1.5" name={name}>
    <Description>{description}</Description>
    <AllocationModel>{allocation_model}</AllocationModel>
    <ComputeCapacity>
        <Cpu>
            <Units>MHz</Units>
            <Allocated>{cpu_allocated}</Allocated>
            <Limit>{cpu_limit}</Limit>
        </Cpu>
        <Memory>
            <Units>MB</Units>
            <Allocated>{memory_allocated}</Allocated>
            <Limit>{memory_limit}</Limit>
        </Memory>
    </ComputeCapacity>
    <NicQuota>{nic_quota}</NicQuota>
    <NetworkQuota>{network_quota}</NetworkQuota>
    <VdcStorageProfile>
        <Enabled>true</Enabled>
        <Units>MB</Units>
        <Limit>{storage_limit}</Limit>
        <Default>true</Default>
        <ProviderVdcStorageProfile href={storage_profile}/>
    </VdcStorageProfile>
    <IsThinProvision>true</IsThinProvision>{provider}
</CreateVdcParams>""".format(name=quoteattr(conf['name']),
                             description=_text(conf.get('description')),
                             allocation_model=_text(conf.get('allocation_model', 'AllocationVApp')),
                             cpu_allocated=_text(conf.get('cpu_allocated', 500)),
                             cpu_limit=_text(conf.get('cpu_limit', 1000)),
                             memory_allocated=_text(conf.get('memory_allocated', 1000)),
                             memory_limit=_text(conf.get('memory_limit', 2000)),
                             nic_quota=_text(conf.get('nic_quota', 10)),
                             network_quota=_text(conf.get('network_quota', 10)),
                             storage_limit=_text(conf.get('storage_limit', 100)),
                             storage_profile=quoteattr(conf.get('storage_profile') or ''),
                             provider=provider)


def catalog_xml(conf):
    """AdminCatalog body. conf keys: name (required), description, is_published"""
    _require(conf, 'name')
    return """<AdminCatalog xmlns="http://www.vmware.com/vcloud/v1.5" name={name}>
    <Description>{description}</Description>
    <IsPublished>{is_published}</IsPublished>
</AdminCatalog>""".format(name=quoteattr(conf['name']),
                          description=_text(conf.get('description')),
                          is_published=_bool(conf.get('is_published', False)))


def external_network_xml(conf):
    """VMWExternalNetwork body.

    conf keys: name, gateway, netmask, vimserver, mo_ref (required), dns1,
    dns2, suffix, ip_start, ip_end, mo_type
    """
    _require(conf, 'name', 'gateway', 'netmask', 'vimserver', 'mo_ref')
    return """<vmext:VMWExternalNetwork
   xmlns:vmext="http://www.vmware.com/vcloud/extension/v1.5"
   xmlns:vcloud="http://www.vmware.com/vcloud/v1.5"
   name={name}
   type="application/vnd.vmware.admin.vmwexternalnet+xml">
   <vcloud:Description>ExternalNet</vcloud:Description>
   <vcloud:Configuration>
      <vcloud:IpScopes>
         <vcloud:IpScope>
            <vcloud:IsInherited>false</vcloud:IsInherited>
            <vcloud:Gateway>{gateway}</vcloud:Gateway>
            <vcloud:Netmask>{netmask}</vcloud:Netmask>
            <vcloud:Dns1>{dns1}</vcloud:Dns1>
            <vcloud:Dns2>{dns2}</vcloud:Dns2>
            <vcloud:DnsSuffix>{suffix}</vcloud:DnsSuffix>
            <vcloud:IpRanges>
               <vcloud:IpRange>
                  <vcloud:StartAddress>{ip_start}</vcloud:StartAddress>
                  <vcloud:EndAddress>{ip_end}</vcloud:EndAddress>
               </vcloud:IpRange>
            </vcloud:IpRanges>
         </vcloud:IpScope>
      </vcloud:IpScopes>
      <vcloud:FenceMode>isolated</vcloud:FenceMode>
   </vcloud:Configuration>
   <vmext:VimPortGroupRef>
      <vmext:VimServerRef href={vimserver}/>
      <vmext:MoRef>{mo_ref}</vmext:MoRef>
      <vmext:VimObjectType>{mo_type}</vmext:VimObjectType>
   </vmext:VimPortGroupRef>
</vmext:VMWExternalNetwork>""".format(name=quoteattr(conf['name']),
                                      gateway=_text(conf['gateway']),
                                      netmask=_text(conf['netmask']),
                                      dns1=_text(conf.get('dns1')),
                                      dns2=_text(conf.get('dns2')),
                                      suffix=_text(conf.get('suffix')),
                                      ip_start=_text(conf.get('ip_start')),
                                      ip_end=_text(conf.get('ip_end')),
                                      vimserver=quoteattr(conf['vimserver']),
                                      mo_ref=_text(conf['mo_ref']),
                                      mo_type=_text(conf.get('mo_type', 'DV_PORTGROUP')))


def instantiate_vapp_template_xml(name, network_href, template_href, fencemode='bridged', ip_mode='POOL',
                                  network_name=None):
    """InstantiateVAppTemplateParams body.

    network_name names the vApp network, the last segment of network_href
    when not given.

    fencemode is one of bridged, isolated or natRouted. ip_mode is checked
    against NONE, MANUAL, POOL and DHCP only, the vApp level params carry no
    allocation mode and the VMs keep the one of their template.
    """
    if not name or not template_href:
        raise ConfigurationError("vApp name and template href are required")
    if fencemode not in FENCE_MODES:
        raise ConfigurationError("Unknown fence mode '{}'".format(fencemode))
    if ip_mode not in IP_ALLOCATION_MODES:
        raise ConfigurationError("Unknown ip allocation mode '{}'".format(ip_mode))
    network_section = ''
    if network_href:
        if not network_name:
            network_name = network_href.rstrip('/').split('/')[-1]
        network_section = """
        <NetworkConfigSection>
            <ovf:Info>Configuration parameters for logical networks</ovf:Info>
            <NetworkConfig networkName={network_name}>
                <Configuration>
                    <ParentNetwork href={network_href}/>
                    <FenceMode>{fencemode}</FenceMode>
                </Configuration>
            </NetworkConfig>
        </NetworkConfigSection>""".format(network_name=quoteattr(network_name),
                                          network_href=quoteattr(network_href),
                                          fencemode=_text(fencemode))
    return """<InstantiateVAppTemplateParams xmlns="http://www.vmware.com/vcloud/v1.5" name={name} deploy="true" powerOn="false" xmlns:ovf="http://schemas.dmtf.org/ovf/envelope/1">
    <Description>Created from template</Description>
    <InstantiationParams>{network_section}
    </InstantiationParams>
    <Source href={template_href}/>
    <IsSourceDelete>false</IsSourceDelete>
    <AllEULAsAccepted>true</AllEULAsAccepted>
</InstantiateVAppTemplateParams>""".format(name=quoteattr(name),
                                           network_section=network_section,
                                           template_href=quoteattr(template_href))


def deploy_vapp_xml(power_on=False):
    return '<DeployVAppParams xmlns="http://www.vmware.com/vcloud/v1.5" powerOn="{}"/>'.format(_bool(power_on))


def undeploy_vapp_xml(power_off_action='powerOff'):
    """power_off_action is one of powerOff, suspend, shutdown or force"""
    return """<UndeployVAppParams xmlns="http://www.vmware.com/vcloud/v1.5">
    <UndeployPowerAction>{}</UndeployPowerAction>
</UndeployVAppParams>""".format(_text(power_off_action))
