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
Translation of vCloud XML documents into nested dicts and lists.

The document root becomes a dict. Attributes are plain keys and every child
element is stored in a list under its tag name, even when it occurs only once,
so callers never have to branch on cardinality:

    <Org name="a"><Link href="x"/><Description>d</Description></Org>

    {'name': 'a', 'Link': [{'href': 'x'}], 'Description': ['d']}
"""

from lxml import etree as lxmlElementTree

CONTENT_KEY = 'content'


def local_name(tag):
    """Strip the '{namespace}' or 'prefix:' part of a tag or attribute name"""
    if '}' in tag:
        tag = tag.split('}')[1]
    return tag.split(':')[-1]


def parse(content):
    """Parse an XML payload into a tree of dicts and lists.

    Args:
        content - raw response body (bytes or str)

    Returns:
        The root element as a dict, or None for an empty body
    """
    if content is None:
        return None
    if isinstance(content, str):
        content = content.encode('utf-8')
    if not content.strip():
        return None

    parser = lxmlElementTree.XMLParser(remove_comments=True, remove_pis=True,
                                       resolve_entities=False)
    root = lxmlElementTree.fromstring(content, parser=parser)
    return element_to_tree(root)


def element_to_tree(element):
    node = {}
    for name, value in element.attrib.items():
        node[local_name(name)] = value

    for child in element:
        if not isinstance(child.tag, str):
            continue
        key = local_name(child.tag)
        if len(child.attrib) == 0 and not _has_elements(child):
            value = (child.text or '').strip()
        else:
            value = element_to_tree(child)

        existing = node.get(key)
        if existing is None:
            node[key] = [value]
        elif isinstance(existing, list):
            existing.append(value)
        else:
            # attribute and child element share a name
            node[key] = [existing, value]

    text = (element.text or '').strip()
    if text:
        node[CONTENT_KEY] = text
    return node


def _has_elements(element):
    for child in element:
        if isinstance(child.tag, str):
            return True
    return False


def links(tree):
    """Return the Link list of a parsed resource, empty when there is none"""
    if not tree:
        return []
    return tree.get('Link', [])


def first(tree, name, default=None):
    """Return the first child called name, or default"""
    if not tree:
        return default
    values = tree.get(name)
    if not values:
        return default
    return values[0]


def last_segment(href):
    """Return the final path segment of a reference"""
    if href is None:
        return None
    return href.rstrip('/').split('/')[-1]
