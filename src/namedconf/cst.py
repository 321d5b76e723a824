# Lossless syntax tree for named.conf
#
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

# The file is split into a flat list of nodes. A node is either a Statement
# (anything up to a top-level ';') or a Raw fragment (whitespace, comments and
# stray semicolons between statements). Each node keeps its exact source text,
# so rendering an untouched tree reproduces the input byte for byte.
#
# Statements also carry a cleaned-up view of themselves: the keyword, the
# value (everything after the keyword with comments removed and spaces
# compacted) and, for blocks, the parsed nodes of the first {} group.

__all__ = ['Raw', 'Statement', 'Node', 'File', 'parse_nodes', 'new_block', 'new_simple']

import re
import logging
import dataclasses as dc

import namedconf.common

from typing import Optional, Union

_KEYWORD_RE = re.compile(r'^[^\s{};"]+')


@dc.dataclass
class Raw:
    text: str


@dc.dataclass
class Statement:
    keyword: str
    value: str = ''
    body: Optional[list['Node']] = None
    text: str = ''
    # Built by new_block()/new_simple() instead of read from a file
    generated: bool = False

    @property
    def header(self) -> str:
        """The keyword and the value up to the first top-level '{'."""
        idx = find_unquoted(self.value, '{')
        value = self.value if idx < 0 else self.value[:idx]
        return f'{self.keyword} {value}'.strip()

    @property
    def line(self) -> str:
        """The whole statement as a single cleaned-up line, without the final ';'."""
        return f'{self.keyword} {self.value}'.strip()


Node = Union[Raw, Statement]


def find_unquoted(st: str, ch: str) -> int:
    """Returns the index of the first ch in st that is not within quotes, or -1."""
    in_quotes = False
    escaped = False
    for i, x in enumerate(st):
        if in_quotes:
            if escaped:
                escaped = False
            elif x == '\\':
                escaped = True
            elif x == '"':
                in_quotes = False
        elif x == '"':
            in_quotes = True
        elif x == ch:
            return i
    return -1


def _skip_comment(text: str, i: int) -> Optional[int]:
    """If a comment starts at i then return the index right after it.

    The newline that terminates a line comment is not part of the comment.
    """
    if text.startswith('//', i) or text[i] == '#':
        end = text.find('\n', i)
        return len(text) if end < 0 else end
    if text.startswith('/*', i):
        end = text.find('*/', i + 2)
        if end < 0:
            namedconf.common.abort(f'Unterminated comment at offset {i}')
        return end + 2
    return None


def _skip_quoted(text: str, i: int) -> int:
    """Returns the index after the closing quote of the string that starts at i."""
    j = i + 1
    while j < len(text):
        if text[j] == '\\':
            j += 2
            continue
        if text[j] == '"':
            return j + 1
        j += 1
    namedconf.common.abort(f'Unterminated quoted string at offset {i}')


def _make_statement(text: str, clean: str, body_text: Optional[str]) -> Statement:
    clean = namedconf.common.compact_spaces(clean)

    if clean.startswith('"'):
        keyword = clean[:_skip_quoted(clean, 0)]
    else:
        m = _KEYWORD_RE.match(clean)
        keyword = m.group(0) if m else ''

    value = clean[len(keyword):].strip()
    body = parse_nodes(body_text) if body_text is not None else None

    return Statement(keyword=keyword, value=value, body=body, text=text)


def _parse_statement(text: str, start: int) -> tuple[Statement, int]:
    """Parses one statement that starts at start.

    @return The statement and the index right after its terminating ';'
    """
    depth = 0
    i = start
    clean: list[str] = []
    open_at = -1
    body_span: Optional[tuple[int, int]] = None

    while i < len(text):
        ch = text[i]

        end = _skip_comment(text, i)
        if end is not None:
            clean.append(' ')
            i = end
            continue

        if ch == '"':
            end = _skip_quoted(text, i)
            clean.append(text[i:end])
            i = end
            continue

        if ch == '{':
            depth += 1
            if depth == 1 and body_span is None:
                open_at = i
        elif ch == '}':
            if depth == 0:
                namedconf.common.abort(f'Found "}}" without "{{" at offset {i}')
            depth -= 1
            if depth == 0 and body_span is None:
                body_span = (open_at + 1, i)
        elif ch == ';' and depth == 0:
            body_text = text[body_span[0]:body_span[1]] if body_span else None
            stmt = _make_statement(text[start:i + 1], ''.join(clean), body_text)
            return stmt, i + 1

        clean.append(ch)
        i += 1

    snippet = namedconf.common.compact_spaces(text[start:start + 40])
    namedconf.common.abort(f'Unterminated statement: {snippet}')


def parse_nodes(text: str) -> list[Node]:
    """Splits text to a list of nodes. Concatenating the nodes' text gives back text."""
    nodes: list[Node] = []
    raw_start = 0
    i = 0

    while i < len(text):
        ch = text[i]
        if ch.isspace() or ch == ';':
            i += 1
            continue

        end = _skip_comment(text, i)
        if end is not None:
            i = end
            continue

        if ch == '}':
            namedconf.common.abort(f'Found "}}" without "{{" at offset {i}')

        if i > raw_start:
            nodes.append(Raw(text[raw_start:i]))
        stmt, i = _parse_statement(text, i)
        nodes.append(stmt)
        raw_start = i

    if raw_start < len(text):
        nodes.append(Raw(text[raw_start:]))

    return nodes


def _generated(text: str) -> Statement:
    stmt, _ = _parse_statement(text, 0)
    stmt.generated = True
    return stmt


def new_simple(line: str) -> Statement:
    """Builds a single-line statement. line must not include the final ';'."""
    return _generated(f'{line};')


def new_block(header: str, body: list[Node]) -> Statement:
    """Builds a block statement, indenting the body with tabs."""
    lines = [f'{header} {{']
    for node in body:
        lines.append(namedconf.common.indent(node.text))
    lines.append('};')
    return _generated('\n'.join(lines))


class File:
    """A parsed named.conf."""
    nodes: list[Node]

    def __init__(self, nodes: Optional[list[Node]] = None) -> None:
        self.nodes = nodes if nodes is not None else []

    @classmethod
    def parse(cls, text: str) -> 'File':
        return cls(parse_nodes(text))

    @classmethod
    def load(cls, fn: str) -> 'File':
        try:
            with open(fn, 'rt', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            namedconf.common.abort(f'Failed to open file: {fn}: {e}')
        logging.debug('Read %d bytes from %s', len(text), fn)
        return cls.parse(text)

    def statements(self, keyword: Optional[str] = None) -> list[Statement]:
        return [x for x in self.nodes
                if isinstance(x, Statement) and (keyword is None or x.keyword == keyword)]

    def render(self) -> str:
        """Returns the text of the file.

        Generated statements are put on lines of their own. Everything else is
        emitted exactly as read.
        """
        ret = ''
        for i, node in enumerate(self.nodes):
            if not (isinstance(node, Statement) and node.generated):
                ret += node.text
                continue

            if ret and not ret.endswith('\n'):
                ret += '\n'
            ret += node.text

            nxt = self.nodes[i + 1] if i + 1 < len(self.nodes) else None
            if not (isinstance(nxt, Raw) and nxt.text.startswith('\n')):
                ret += '\n'

        return ret

    def save(self, fn: str) -> None:
        contents = self.render()
        with open(fn, 'wt', encoding='utf-8') as f:
            f.write(contents)
        logging.debug('Wrote %d bytes to %s', len(contents), fn)


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
