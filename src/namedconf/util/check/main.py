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

# Decodes and re-encodes a file twice. The second pass must not change
# anything, neither in the typed view nor in the text.

import difflib
import logging

import namedconf.api
import namedconf.cst
import namedconf.util.config


def doit() -> int:
    config = namedconf.util.config.get_config()

    def check_diff(a: str, b: str, msg: str) -> bool:
        diff = list(difflib.unified_diff(a.splitlines(), b.splitlines(), lineterm=''))
        if config.diff and diff:
            print(f'{msg}:')
            print('\n'.join(diff))
        return bool(diff)

    tree = namedconf.cst.File.load(config.file)
    orig = tree.render()

    conf = namedconf.api.decode(tree)
    out = namedconf.api.dumps(conf, positional=config.positional)

    if check_diff(orig, out, 'diff between orig & 2'):
        logging.info('Re-encoding changed the file')

    conf2 = namedconf.api.loads(out)
    out2 = namedconf.api.dumps(conf2, positional=config.positional)

    ret = 0
    if conf2 != conf:
        logging.error('Decoding the re-encoded file gave different results')
        ret = 1

    if check_diff(out, out2, 'diff between 2 & 3'):
        logging.error('Re-encoding is not stable')
        ret = 1

    if config.write:
        with open(config.write, 'wt', encoding='utf-8') as f:
            f.write(out)
        logging.debug('Wrote %d bytes to %s', len(out), config.write)

    return ret


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
