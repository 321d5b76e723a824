#!/usr/bin/env python
# coding=UTF-8
#

from setuptools import setup

version = '1.0.0'

packages = [
    'namedconf',
    'namedconf.util',
    'namedconf.util.dump',
    'namedconf.util.check',
]

package_dirs = {'namedconf': 'src/namedconf'}

scripts = ['src/bin/named-conf.py']

setup(
    name            = 'namedconf',
    version         = version,
    author          = 'Stefanos Harhalakis',
    author_email    = 'v13@v13.gr',
    url             = '...',
    description     = 'Typed view over BIND named.conf that keeps everything else intact',
    packages        = packages,
    package_dir     = package_dirs,
    scripts         = scripts,
    python_requires = '>=3.10',
    install_requires = [
        'PyYAML',
    ],
    extras_require  = {
        'test': [
            'parameterized',
            'pytest',
        ],
    },
)

# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
