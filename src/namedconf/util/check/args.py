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

from typing import Optional


@dc.dataclass
class _Config:
    file: str = ''
    diff: bool = False
    write: Optional[str] = None
    positional: bool = False


def add_args(parser: argparse.ArgumentParser) -> None:
    config = _Config()
    namedconf.util.config.set_module_config('check', config)

    parser.add_argument('--diff', default=config.diff, action='store_true', help='Whether to show a diff')
    parser.add_argument('--write', default=config.write, metavar='OUT',
                        help='Write the re-encoded file to OUT')
    parser.add_argument('--positional', default=config.positional, action='store_true',
                        help='Put rebuilt statements in place of the old ones instead of at the end')
    parser.add_argument('file', help='The named.conf file to check')


def handle_args(args: argparse.Namespace) -> None:
    config = namedconf.util.config.get_config()
    config.file = args.file
    config.diff = args.diff
    config.write = args.write
    config.positional = args.positional


def init() -> None:
    pass


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
