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
Resource references: a short identifier resolved against the versioned base
url, or a full href used verbatim.

Short identifiers are not guaranteed to be stable between sessions, hrefs are.
"""

from collections import namedtuple

# url segment appended to the base url for a bare identifier, per resource kind
KIND_PATHS = {'org': 'org/',
              'vdc': 'vdc/',
              'vapp': 'vApp/vapp-',
              'template': 'tmpl/',
              'catalog': 'catalog/',
              'pvdc': 'admin/providervdc/',
              'task': 'task/',
              'network': 'network/'}


class ById(namedtuple('ById', ['id'])):
    """Short identifier of a resource, e.g. ById('2cb3dffb-5c51')"""
    __slots__ = ()

    def __str__(self):
        return self.id


class ByReference(namedtuple('ByReference', ['href'])):
    """Absolute reference of a resource, e.g. ByReference('https://host/api/org/1')"""
    __slots__ = ()

    def __str__(self):
        return self.href


def as_reference(ref):
    """Turn a plain string into ById or ByReference.

    A string with a path separator is taken as an href, anything else as an
    identifier. Typed references are returned unchanged.
    """
    if isinstance(ref, (ById, ByReference)):
        return ref
    if ref is None:
        raise ValueError("Resource reference can not be None")
    ref = str(ref)
    if '/' in ref:
        return ByReference(ref)
    return ById(ref)


def resolve(kind, ref, base_url):
    """Return the url to GET for a resource of the given kind.

    Args:
        kind - key of KIND_PATHS
        ref - ById, ByReference or plain string
        base_url - versioned api url ending with '/'

    Returns:
        absolute url
    """
    if kind not in KIND_PATHS:
        raise ValueError("Unknown resource kind '{}'".format(kind))
    ref = as_reference(ref)
    if isinstance(ref, ByReference):
        return ref.href
    return base_url + KIND_PATHS[kind] + ref.id
