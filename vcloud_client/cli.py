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

'''
Standalone application to work with the vCloud director rest api.

    vcloud-cli -c vcd.example.com -u admin -p secret -o System list orgs
    vcloud-cli view vapp 2cb3dffb-5c51-4355-8406-28553ead28ac
    vcloud-cli create vapp web01 --vdc <vdc href> --template <tmpl href> --network <net href> --wait
'''

import argparse
import logging
import os
import sys

import yaml
from prettytable import PrettyTable

from vcloud_client.client import Client
from vcloud_client.config import CONNECTION_KEYS, DEFAULT_OPTIONS, ENV_PREFIX, coerce, environ_options, load_config
from vcloud_client.errors import VCloudException

logger = logging.getLogger('vcloud.cli')


def print_table(columns, rows):
    table = PrettyTable(columns)
    for row in rows:
        table.add_row(row)
    print(table)


def print_dict(mapping, columns):
    """ Method takes a flat dict and print it in tabular format

    Args:
        mapping:  dict to print, one row per key
        columns:  header of the key and value columns
    """
    if mapping is None:
        return
    print_table(columns, sorted(mapping.items(), key=lambda item: str(item[1])))


def print_org_details(org_dict=None):
    """ Method takes org summary returned by get_org and print it in tabular format

    Args:
        org_dict:  dictionary with org name, id and contained objects
    """
    if org_dict is None:
        return

    print_table(['org uuid', 'name', 'description'],
                [[org_dict['id'], org_dict['name'], org_dict['description'] or '']])

    for link_type in sorted(org_dict['contains']):
        print_dict(org_dict['contains'][link_type], ['{} href'.format(link_type), '{} name'.format(link_type)])


def print_tree(tree):
    print(yaml.safe_dump(tree, default_flow_style=False))


def print_task(status, task):
    if task is None:
        return
    print_table(['task', 'operation', 'status'],
                [[task.get('href'), task.get('operationName') or task.get('operation'), status]])


def finish(vcd, result, wait):
    """Print the task started by a change and optionally wait on it"""
    task_href = vcd.task_href(result)
    if task_href is None:
        if isinstance(result, tuple):
            print("{} {}".format(result[1], result[0]))
        elif result is not None:
            print(result)
        return 0
    if not wait:
        print("Task {}".format(task_href))
        return 0
    status, task = vcd.wait_on_task(task_href)
    print_task(status, task)
    return 0 if status == 'success' else 1


def login_actions(vcd, namespace):
    logger.debug("Listing available orgs")
    print("Logged in to {} api version {}".format(vcd.hostname, vcd.session.api_version))
    print_dict(vcd.list_orgs(), ['org uuid', 'name'])
    return 0


def list_actions(vcd, namespace):
    action = namespace.action
    if action == 'orgs':
        print_dict(vcd.list_orgs(), ['org uuid', 'name'])
    elif action == 'vdcs':
        print_dict(vcd.list_vdcs(namespace.orgname), ['vdc href', 'vdc name'])
    elif action == 'vapps':
        print_dict(vcd.list_vapps(), ['vapp href', 'vapp name'])
    elif action == 'templates':
        print_dict(vcd.list_templates(), ['template href', 'template name'])
    elif action == 'networks':
        networks = vcd.list_networks(namespace.vdc)
        print_table(['network name', 'network href'], sorted(networks.items()))
    elif action == 'pvdcs':
        print_dict(vcd.list_pvdcs(), ['provider vdc href', 'provider vdc name'])
    elif action == 'catalogs':
        print_dict(vcd.list_catalogs(namespace.orgname), ['catalog href', 'catalog name'])
    return 0


def view_actions(vcd, namespace):
    action = namespace.action
    logger.debug("Requesting view for {} {}".format(action, namespace.ref))
    if action == 'org':
        print_org_details(vcd.get_org(namespace.ref))
    elif action == 'vdc':
        print_tree(vcd.get_vdc(namespace.ref))
    elif action == 'vapp':
        vapp = vcd.get_vapp(namespace.ref)
        print_table(['vapp name', 'href', 'status'], [[vapp.name, vapp.href, vapp.status_name]])
        print_dict(vapp.available_actions(), ['action', 'href'])
    elif action == 'template':
        print_tree(vcd.get_template(namespace.ref))
    elif action == 'task':
        task = vcd.get_task(namespace.ref)
        print_task(task.get('status'), task)
    return 0


def poweron_actions(vcd, namespace):
    vapp = vcd.get_vapp(namespace.vapp)
    logger.debug("Powering on vapp {}".format(vapp.href))
    return finish(vcd, vapp.power_on(), namespace.wait)


def delete_actions(vcd, namespace):
    deletes = {'vapp': vcd.delete_vapp,
               'org': vcd.delete_org,
               'vdc': vcd.delete_vdc,
               'catalog': vcd.delete_catalog,
               'network': vcd.delete_org_network}
    logger.debug("Requesting delete for {} {}".format(namespace.action, namespace.href))
    return finish(vcd, deletes[namespace.action](namespace.href), namespace.wait)


def create_actions(vcd, namespace):
    """Method creates a vApp from a template

        Args:
            vcd - connected Client
            namespace - parsed arguments

        Returns:
            exit code
    """
    logger.debug("Creating vapp {} in vdc {}".format(namespace.name, namespace.vdc))
    result = vcd.create_vapp_from_template(namespace.name, namespace.vdc, namespace.template, namespace.network)
    if isinstance(result, str) and vcd.task_href(result) is None:
        print("Created new vapp {} href: {}".format(namespace.name, result))
        return 0
    return finish(vcd, result, namespace.wait)


def progress_actions(vcd, namespace):
    percent, status = vcd.progress_of_task(namespace.task)
    print_table(['task', 'progress', 'status'], [[namespace.task, percent, status]])
    return 0


COMMANDS = {'login': login_actions,
            'list': list_actions,
            'view': view_actions,
            'poweron': poweron_actions,
            'delete': delete_actions,
            'create': create_actions,
            'progress': progress_actions}


def build_parser():
    parser = argparse.ArgumentParser(prog='vcloud-cli', description='vCloud director command line client')
    parser.add_argument('-c', '--hostname', help='vcloud director host', type=str)
    parser.add_argument('-u', '--username', help='vcloud director username', type=str)
    parser.add_argument('-p', '--password', help='vcloud director password', type=str)
    parser.add_argument('-o', '--orgname', help='vcloud director org', type=str)
    parser.add_argument('--config', help='yaml config file', type=str)
    parser.add_argument('-d', '--debug', help='debug logging', default=False, action='store_true')

    parser_subparsers = parser.add_subparsers(help='commands', dest='command')
    parser_subparsers.required = True

    parser_subparsers.add_parser('login', help='login and list organizations accessible to you')

    list_sub = parser_subparsers.add_parser('list', help='List objects (orgs, vdcs, vApps, networks)')
    list_sub.add_argument('action', choices=['orgs', 'vdcs', 'vapps', 'templates', 'networks', 'pvdcs',
                                             'catalogs'])
    list_sub.add_argument('--vdc', help='limit networks to one vdc', default=None)

    view_sub = parser_subparsers.add_parser('view', help='View one object')
    view_sub.add_argument('action', choices=['org', 'vdc', 'vapp', 'template', 'task'])
    view_sub.add_argument('ref', help='id or href of the object')

    poweron_sub = parser_subparsers.add_parser('poweron', help='Power on a vApp')
    poweron_sub.add_argument('vapp', help='vapp id or href')
    poweron_sub.add_argument('--wait', default=False, action='store_true', help='wait for the task to finish')

    delete_sub = parser_subparsers.add_parser('delete', help='Delete an object')
    delete_sub.add_argument('action', choices=['vapp', 'org', 'vdc', 'catalog', 'network'])
    delete_sub.add_argument('href', help='href of the object')
    delete_sub.add_argument('--wait', default=False, action='store_true', help='wait for the task to finish')

    create_sub = parser_subparsers.add_parser('create', help='Create an object')
    create_sub_subparsers = create_sub.add_subparsers(help='object', dest='action')
    create_sub_subparsers.required = True
    create_vapp = create_sub_subparsers.add_parser('vapp', help='instantiate a vApp template')
    create_vapp.add_argument('name', help='name of the new vapp')
    create_vapp.add_argument('--vdc', required=True, help='vdc id or href')
    create_vapp.add_argument('--template', required=True, help='vapp template id or href')
    create_vapp.add_argument('--network', default=None, help='org network id or href')
    create_vapp.add_argument('--wait', default=False, action='store_true', help='wait for the task to finish')

    progress_sub = parser_subparsers.add_parser('progress', help='Show progress of a task')
    progress_sub.add_argument('task', help='task id or href')
    return parser


def connection_settings(namespace, env=None):
    """command line, then config file, then VCLOUD_* environment"""
    if env is None:
        env = os.environ
    settings = {}
    for key in CONNECTION_KEYS:
        value = env.get(ENV_PREFIX + key.upper())
        if value:
            settings[key] = value
    options = {}
    if namespace.config:
        options = load_config(namespace.config, env)
        settings.update(dict((k, v) for k, v in options.items() if k in CONNECTION_KEYS))
    else:
        for key, value in environ_options(env).items():
            if key in DEFAULT_OPTIONS:
                options[key] = coerce(key, value)
    for key in CONNECTION_KEYS:
        value = getattr(namespace, key, None)
        if value:
            settings[key] = value
    if namespace.debug:
        options['debug'] = True
    return settings, options


def setup_logging(debug):
    level = logging.DEBUG if debug else logging.INFO
    log = logging.getLogger('vcloud')
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(formatter)
    log.addHandler(ch)
    log.setLevel(level)
    return ch


def main(argv=None):
    namespace = build_parser().parse_args(argv)
    handler = setup_logging(namespace.debug)
    try:
        settings, options = connection_settings(namespace)
        if options.get('debug'):
            handler.setLevel(logging.DEBUG)
        logger.info("Connecting {} username: {} org: {}".format(settings.get('hostname'),
                                                              settings.get('username'),
                                                              settings.get('orgname')))
        logger.debug("command: \"{}\" action: \"{}\"".format(namespace.command,
                                                              getattr(namespace, 'action', None)))
        with Client(settings.get('hostname'), settings.get('username'), settings.get('password'),
                    settings.get('orgname'), config=options) as vcd:
            return COMMANDS[namespace.command](vcd, namespace)
    except VCloudException as exp:
        logger.error("{}: {}".format(type(exp).__name__, exp))
        return 1
    finally:
        logging.getLogger('vcloud').removeHandler(handler)


if __name__ == '__main__':
    sys.exit(main())
