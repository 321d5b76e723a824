# Copyright (c) 2014-2016 Stefanos Harhalakis <v13@v13.gr>
# Copyright (c) 2016-2022 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import dataclasses as dc

import namedconf.util.config


@dc.dataclass
class _Config:
    file: str = ''
    format: str = 'yaml'
    keep_unknown: bool = True


def add_args(parser: argparse.ArgumentParser) -> None:
    config = _Config()
    namedconf.util.config.set_module_config('dump', config)

    parser.add_argument('--format', choices=('json', 'yaml'), default=config.format,
                        help='Output format (def: %(default)s)')
    parser.add_argument('--drop-unknown', action='store_true', default=False,
                        help='Drop unknown statements within blocks instead of listing them')
    parser.add_argument('file', help='The named.conf file to dump')


def handle_args(args: argparse.Namespace) -> None:
    config = namedconf.util.config.get_config()
    config.file = args.file
    config.format = args.format
    config.keep_unknown = not args.drop_unknown


def init() -> None:
    pass


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
