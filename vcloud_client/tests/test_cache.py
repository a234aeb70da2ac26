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

from vcloud_client.cache import BoundedCache, cache_key
from vcloud_client.errors import CacheMiss


class TestBoundedCache(unittest.TestCase):

    def test_key_convention(self):
        self.assertEqual(cache_key('list_orgs'), 'list_orgs:')
        self.assertEqual(cache_key('get_org', '42'), 'get_org:42')

    def test_lookup_miss(self):
        cache = BoundedCache(2)
        self.assertRaises(CacheMiss, cache.lookup, 'get_org:42')
        self.assertIsNone(cache.get('get_org:42'))
        self.assertEqual(cache.get('get_org:42', 'default'), 'default')

    def test_set_and_get(self):
        cache = BoundedCache(2)
        cache.set('get_org:42', {'name': 'Org3'})
        self.assertEqual(cache.lookup('get_org:42'), {'name': 'Org3'})
        self.assertIn('get_org:42', cache)
        self.assertEqual(len(cache), 1)

    def test_oldest_entry_is_evicted(self):
        cache = BoundedCache(2)
        cache.set('a:', 1)
        cache.set('b:', 2)
        cache.set('c:', 3)
        self.assertEqual(cache.keys(), ['b:', 'c:'])
        self.assertNotIn('a:', cache)

    def test_reinsert_refreshes_position(self):
        cache = BoundedCache(2)
        cache.set('a:', 1)
        cache.set('b:', 2)
        cache.set('a:', 10)
        cache.set('c:', 3)
        self.assertEqual(cache.keys(), ['a:', 'c:'])
        self.assertEqual(cache.lookup('a:'), 10)

    def test_purge(self):
        cache = BoundedCache()
        cache.set('a:', 1)
        cache.set('b:', 2)
        cache.purge()
        self.assertEqual(len(cache), 0)
        self.assertRaises(CacheMiss, cache.lookup, 'a:')

    def test_invalid_capacity(self):
        self.assertRaises(ValueError, BoundedCache, 0)


if __name__ == '__main__':
    unittest.main()
