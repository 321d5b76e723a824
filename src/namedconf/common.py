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

import logging

from typing import Any, NoReturn


class AbortError(Exception):
    excode: int
    error_shown: bool

    def __init__(self, *args: Any, excode: int = 1, error_shown: bool = False, **kwargs: Any):
        """Indicates a program abort with exit code."""
        self.excode = excode
        self.error_shown = error_shown
        super().__init__(*args, **kwargs)


def compact_spaces(st: str) -> str:
    """Replaces all spaces with a single space and strips leading and trailing spaces.

    Doesn't change spaces within quotes.
    """
    st = st.strip()
    ret = ''
    in_quotes = False
    added_space = False
    escaped = False
    for x in st:
        if in_quotes:
            ret += x
            if escaped:
                escaped = False
            elif x == '\\':
                escaped = True
            elif x == '"':
                in_quotes = False
        elif x == '"':
            in_quotes = True
            added_space = False
            ret += x
        elif x in ('\t', '\n', '\r', ' '):
            if not added_space:
                ret += ' '
                added_space = True
        else:
            added_space = False
            ret += x

    return ret


def indent(st: str, prefix: str = '\t') -> str:
    """Prefixes every non-empty line of st."""
    lines = [f'{prefix}{line}' if line.strip() else line for line in st.split('\n')]
    return '\n'.join(lines)


def abort(reason: str) -> NoReturn:
    logging.error('%s', reason)
    raise AbortError(reason, excode=1, error_shown=True)


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
