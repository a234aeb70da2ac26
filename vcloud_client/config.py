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
Client options, with defaults, yaml file loading and VCLOUD_* environment
overrides.

    vcloud:
        hostname: vcd.example.com
        username: admin
        orgname: System
        debug: true
        timeout: 600
"""

import logging
from os import environ

import yaml

from vcloud_client.errors import ConfigurationError

ENV_PREFIX = 'VCLOUD_'

DEFAULT_OPTIONS = {'debug': False,
                   'die_on_fault': True,
                   'timeout': 3600,
                   'verify': False,
                   'api_version': None,
                   'cache_size': 500,
                   'task_interval': 1.0,
                   'task_backoff': 1.0,
                   'task_max_interval': 60.0,
                   'task_timeout': None}

CONNECTION_KEYS = ('hostname', 'username', 'password', 'orgname')

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off')

logger = logging.getLogger('vcloud.config')


def coerce(key, value):
    """Convert a string option to the type of its default value"""
    if not isinstance(value, str):
        return value
    default = DEFAULT_OPTIONS.get(key)
    try:
        if isinstance(default, bool):
            if value.lower() in _TRUE:
                return True
            if value.lower() in _FALSE:
                return False
            raise ValueError(value)
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float) or key == 'task_timeout':
            return float(value)
    except ValueError:
        raise ConfigurationError("Invalid value '{}' for option '{}'".format(value, key))
    return value


def split_options(options):
    """Separate known options from connection fields, dropping unknown keys.

    Returns:
        tuple (options dict, connection dict)
    """
    known = {}
    connection = {}
    for key, value in options.items():
        if key in DEFAULT_OPTIONS:
            known[key] = coerce(key, value)
        elif key in CONNECTION_KEYS:
            connection[key] = value
        else:
            logger.warning("Config key \"{}\" is being ignored. Only the following options may be configured: "
                           "{}".format(key, ", ".join(sorted(DEFAULT_OPTIONS) + list(CONNECTION_KEYS))))
    return known, connection


def default_options(overrides=None):
    options = dict(DEFAULT_OPTIONS)
    if overrides:
        known, _ = split_options(overrides)
        options.update(known)
    return options


def environ_options(env=None):
    """Collect VCLOUD_<KEY> variables, e.g. VCLOUD_TIMEOUT=600"""
    if env is None:
        env = environ
    found = {}
    for k, v in env.items():
        if not k.startswith(ENV_PREFIX):
            continue
        key = k[len(ENV_PREFIX):].lower()
        if key in DEFAULT_OPTIONS or key in CONNECTION_KEYS:
            found[key] = v
    return found


def load_config(config_file, env=None):
    """Read a yaml config file and overlay the environment.

    The options may live at top level or under a 'vcloud' section.

    Returns:
        dict with options and connection fields
    """
    try:
        with open(config_file) as f:
            conf = yaml.safe_load(f) or {}
    except (IOError, OSError, yaml.YAMLError) as e:
        raise ConfigurationError("At config file '{}': {}".format(config_file, e))

    if not isinstance(conf, dict):
        raise ConfigurationError("At config file '{}': expected a mapping".format(config_file))
    if isinstance(conf.get('vcloud'), dict):
        conf = conf['vcloud']

    conf = dict(conf)
    for key, value in environ_options(env).items():
        try:
            conf[key] = coerce(key, value)
        except ConfigurationError as e:
            logger.warning("skipping environ '{}{}' on exception '{}'".format(ENV_PREFIX, key.upper(), e))
    return conf
