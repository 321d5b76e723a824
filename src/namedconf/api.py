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

__all__ = ['loads', 'load', 'decode', 'dumps', 'save']

import namedconf.cst
import namedconf.sync
import namedconf.common
import namedconf.loader
import namedconf.model

from typing import Optional


def decode(tree: namedconf.cst.File, keep_unknown: bool = True) -> namedconf.model.NamedConf:
    return namedconf.loader.decode(tree, keep_unknown=keep_unknown)


def loads(text: str, keep_unknown: bool = True) -> namedconf.model.NamedConf:
    """Parses text and returns its typed view."""
    return decode(namedconf.cst.File.parse(text), keep_unknown=keep_unknown)


def load(fn: str, keep_unknown: bool = True) -> namedconf.model.NamedConf:
    """Reads a file and returns its typed view."""
    return decode(namedconf.cst.File.load(fn), keep_unknown=keep_unknown)


def dumps(conf: namedconf.model.NamedConf, tree: Optional[namedconf.cst.File] = None,
          positional: bool = False) -> str:
    """Writes conf to its tree and returns the resulting text."""
    return namedconf.sync.apply(conf, tree, positional=positional).render()


def save(conf: namedconf.model.NamedConf, fn: str, positional: bool = False) -> None:
    """Writes conf to the tree it was loaded from and saves that to a file."""
    if conf.tree is None:
        namedconf.common.abort('Cannot save: missing backing tree')
    namedconf.sync.apply(conf, positional=positional).save(fn)


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
