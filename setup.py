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
import os

import setuptools

here = os.path.abspath(os.path.dirname(__file__))


def parse_requirements(requirements):
    with open(os.path.join(here, requirements)) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]


_name = 'vcloud-client'
_version = '1.0.0'
_description = 'vCloud Director REST/XML API client'
_license = 'Apache 2.0'

with open(os.path.join(here, 'README.rst')) as readme_file:
    README = readme_file.read()

setuptools.setup(
    name=_name,
    version=_version,
    description=_description,
    long_description=README,
    license=_license,
    python_requires='>=3.5',
    packages=setuptools.find_packages(include=['vcloud_client', 'vcloud_client.*']),
    include_package_data=True,
    install_requires=parse_requirements('requirements.txt'),
    extras_require={
        'test': parse_requirements('test-requirements.txt'),
    },
    entry_points={
        "console_scripts": [
            "vcloud-cli = vcloud_client.cli:main",
        ]
    }
)
