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

import sys
import logging
import argparse
import namedconf.common
import namedconf.util.dump
import namedconf.util.check
import namedconf.util.config

from typing import Optional, Sequence

modules = {
    'dump': namedconf.util.dump,
    'check': namedconf.util.check,
}


def init_args(argv: Optional[Sequence[str]] = None) -> None:
    """!
    Parses the command line, selects the utility and initializes logging

    When Config.util is None the utility is the first positional argument,
    e.g. named-conf.py dump ... Otherwise Config.util is the utility and
    only its arguments are accepted.
    """
    config = namedconf.util.config.get_config()

    parser = argparse.ArgumentParser()

    parser.add_argument('-d', '--debug', action='store_true',
                        default=config.debug,
                        help='Enable debugging')

    parser.add_argument('--info', action='store_true',
                        default=config.info,
                        help='Enable informational messages')

    module = None
    if config.util is None:
        sub = parser.add_subparsers(dest='what')
        for k, v in modules.items():
            v.add_args(sub.add_parser(k))
    elif config.util in modules:
        module = modules[config.util]
        module.add_args(parser)
    else:
        parser.error(f'Bad utility name: {config.util}')

    args = parser.parse_args(argv)

    config.debug = args.debug
    config.info = args.info

    if config.util:
        config.what = config.util
    elif args.what:
        config.what = args.what
    else:
        parser.error('Must specify a utility')

    if module is None:
        module = modules[config.what]

    config.module = module

    init_log()

    logging.debug('Module: %s', config.what)

    module.args.handle_args(args)


def init_log() -> None:
    config = namedconf.util.config.get_config()

    if config.debug:
        level = logging.DEBUG
    elif config.info:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level)


def init(argv: Optional[Sequence[str]] = None) -> None:
    config = namedconf.util.config.get_config()

    init_args(argv)
    logging.debug('Initializing module')
    config.module.init()


def doit() -> int:
    config = namedconf.util.config.get_config()

    logging.debug('Running module')
    return config.module.doit()


def run(util: Optional[str], argv: Optional[Sequence[str]] = None) -> int:
    """Runs a utility and returns its exit code. AbortError becomes the exit code."""
    config = namedconf.util.config.get_config()
    config.util = util

    init(argv)

    try:
        ret = doit()
    except namedconf.common.AbortError as r:
        if not r.error_shown:
            logging.error('Execution failed: %s', r)
        ret = r.excode

    return ret


def runutil(util: Optional[str]) -> None:
    """!
    Run for a certain utility or for all of them

    @param util     A utility name, or None to provide all of them
    """
    sys.exit(run(util))


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
