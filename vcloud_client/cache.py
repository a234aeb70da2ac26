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
Bounded in memory cache of parsed API responses.

Keys follow the '<accessor>:<argument>' convention, e.g. 'get_org:42' or
'list_orgs:'. Entries never expire on their own, the client purges the whole
cache after any change it makes on the server.
"""

import logging
import threading
from collections import OrderedDict

from vcloud_client.errors import CacheMiss

DEFAULT_CAPACITY = 500


def cache_key(accessor, argument=None):
    if argument is None:
        argument = ''
    return "{}:{}".format(accessor, argument)


class BoundedCache(object):

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if capacity is None or int(capacity) < 1:
            raise ValueError("Cache capacity must be a positive integer, got {}".format(capacity))
        self.capacity = int(capacity)
        self.logger = logging.getLogger('vcloud.cache')
        self._entries = OrderedDict()
        self._lock = threading.RLock()

    def lookup(self, key):
        """Return the cached value or raise CacheMiss"""
        with self._lock:
            try:
                return self._entries[key]
            except KeyError:
                raise CacheMiss(key)

    def get(self, key, default=None):
        try:
            return self.lookup(key)
        except CacheMiss:
            return default

    def set(self, key, value):
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            self._entries[key] = value
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self.logger.debug("Cache full, evicted {}".format(evicted))

    def purge(self):
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        self.logger.debug("Cache purged, {} entries dropped".format(count))

    def keys(self):
        with self._lock:
            return list(self._entries.keys())

    def __contains__(self, key):
        with self._lock:
            return key in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)
