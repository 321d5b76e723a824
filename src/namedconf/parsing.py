# Parsers and serializers for the small grammars inside statements
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

# All parse_*() functions get the text that follows a statement's keyword,
# without the final ';'. They never fail: whatever they can't understand is
# skipped (and logged at info level) and missing values are returned as None
# or as empty lists.
#
# All serialize_*() functions return the canonical text for a value, again
# without the keyword and the final ';'.

import re
import logging

import namedconf.model as m

from typing import Iterable, Optional, Sequence, Union

_BARE_NAME_RE = re.compile(r'^[A-Za-z0-9-]+$')
_KEY_REF_RE = re.compile(r'^key\s+(.+)$', re.DOTALL)
_HEAD_NAME_RE = re.compile(r'^[a-z0-9-]+\s+"([^"]+)"')
_HEAD_CLASS_RE = re.compile(r'^[a-z0-9-]+\s+"[^"]+"\s+([A-Za-z]+)')


# Tokens

def trim_quotes(st: str) -> str:
    return st.strip().strip('"')


def quote(st: str) -> str:
    return f'"{st}"'


def quote_name(st: str) -> str:
    """Quotes a name unless it's a bare alphanumeric/hyphen token."""
    if _BARE_NAME_RE.match(st):
        return st
    return quote(st)


def bool_word(value: bool) -> str:
    return 'yes' if value else 'no'


def _first_word(raw: str) -> Optional[str]:
    words = raw.split()
    if not words:
        return None
    return words[0]


def parse_bool(raw: str) -> Optional[bool]:
    """Returns None (not False) for anything that is not a boolean."""
    word = _first_word(raw)
    if word is None:
        return None
    word = word.lower()
    if word in ('yes', 'true'):
        return True
    if word in ('no', 'false'):
        return False
    return None


def parse_int(raw: str) -> Optional[int]:
    word = _first_word(raw)
    if word is None:
        return None
    try:
        return int(word, 10)
    except ValueError:
        return None


def parse_word(raw: str) -> Optional[str]:
    """Returns the first word, for single-keyword values like 'forward only'."""
    word = _first_word(raw)
    if word is not None and len(raw.split()) > 1:
        logging.info('Ignoring trailing data in: %s', raw)
    return word


def _skip_quoted(raw: str, i: int) -> int:
    """Returns the index after the closing quote of the string that starts at i.

    An unterminated string runs to the end.
    """
    j = i + 1
    while j < len(raw):
        if raw[j] == '\\':
            j += 2
            continue
        if raw[j] == '"':
            return j + 1
        j += 1
    return len(raw)


def _skip_braces(raw: str, i: int) -> int:
    """Returns the index after the '}' that closes the '{' at i.

    Unbalanced braces run to the end.
    """
    depth = 0
    j = i
    while j < len(raw):
        x = raw[j]
        if x == '"':
            j = _skip_quoted(raw, j)
            continue
        if x == '{':
            depth += 1
        elif x == '}':
            depth -= 1
            if depth == 0:
                return j + 1
        j += 1
    return len(raw)


def tokenize(raw: str) -> list[str]:
    """Splits to words. Quoted strings and {} groups are single tokens. ';' is dropped."""
    ret: list[str] = []
    i = 0
    while i < len(raw):
        x = raw[i]
        if x.isspace() or x == ';':
            i += 1
            continue
        if x == '"':
            end = _skip_quoted(raw, i)
        elif x == '{':
            end = _skip_braces(raw, i)
        else:
            end = i
            while end < len(raw) and not raw[end].isspace() and raw[end] not in '{;"':
                end += 1
        ret.append(raw[i:end])
        i = end
    return ret


def split_top(raw: str) -> list[str]:
    """Splits on the ';' that are not within quotes or braces. Drops empty items."""
    ret: list[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(raw):
        x = raw[i]
        if x == '"':
            i = _skip_quoted(raw, i)
            continue
        if x == '{':
            depth += 1
        elif x == '}':
            depth -= 1
        elif x == ';' and depth <= 0:
            ret.append(raw[start:i])
            start = i + 1
        i += 1
    ret.append(raw[start:])

    return [x.strip() for x in ret if x.strip()]


def unwrap_braces(raw: str) -> str:
    """Removes one layer of { } if raw is wrapped in them."""
    raw = raw.strip()
    if raw.startswith('{') and raw.endswith('}'):
        raw = raw[1:-1].strip()
    return raw


def parse_string_list(raw: str) -> list[str]:
    return [trim_quotes(x) for x in split_top(unwrap_braces(raw))]


def serialize_string_list(items: Sequence[str]) -> str:
    return _braced(quote(x) for x in items)


def _braced(items: Iterable[str]) -> str:
    lst = list(items)
    if not lst:
        return '{ }'
    return '{ ' + ' '.join(f'{x};' for x in lst) + ' }'


# Statement headers

def head_name(header: str) -> str:
    """Returns the name from a header like 'zone "example.com" IN'."""
    mt = _HEAD_NAME_RE.match(header)
    if mt:
        return mt.group(1)
    fields = header.split()
    if len(fields) > 1:
        return trim_quotes(fields[1])
    return ''


def head_class(header: str) -> Optional[str]:
    """Returns the class from a header like 'zone "example.com" IN', or None."""
    mt = _HEAD_CLASS_RE.match(header)
    if mt:
        return mt.group(1)
    fields = header.split()
    if len(fields) > 2 and not fields[1].startswith('"'):
        return fields[2]
    return None


# Address match lists

def parse_match_element(st: str) -> Optional[m.MatchElement]:
    st = st.strip()
    negated = False
    if st.startswith('!'):
        negated = True
        st = st[1:].strip()

    if not st:
        return None

    mt = _KEY_REF_RE.match(st)
    if mt:
        return m.KeyMatch(key=trim_quotes(mt.group(1)), negated=negated)

    if st.startswith('{'):
        return m.NestedMatch(elements=parse_match_list(st), negated=negated)

    if st.startswith('"'):
        return m.AclMatch(acl_ref=trim_quotes(st), negated=negated)

    if '/' in st or st.count(':') > 1 or st.count('.') == 3:
        return m.AddressMatch(address=st, negated=negated)

    return m.AclMatch(acl_ref=trim_quotes(st), negated=negated)


def parse_match_list(raw: str) -> m.MatchList:
    ret: m.MatchList = []
    for item in split_top(unwrap_braces(raw)):
        element = parse_match_element(item)
        if element is not None:
            ret.append(element)
    return ret


def serialize_match_element(element: m.MatchElement) -> str:
    if isinstance(element, m.NestedMatch):
        st = serialize_match_list(element.elements)
    elif isinstance(element, m.KeyMatch):
        st = f'key {quote(element.key)}'
    elif isinstance(element, m.AddressMatch):
        st = element.address
    elif isinstance(element, m.AclMatch):
        st = quote_name(element.acl_ref)
    else:
        raise TypeError(f'Unknown match element: {element!r}')

    if element.negated:
        st = f'!{st}'
    return st


def serialize_match_list(elements: Sequence[m.MatchElement]) -> str:
    return _braced([serialize_match_element(x) for x in elements])


# listen-on

def parse_listen(raw: str) -> m.Listen:
    ret = m.Listen()
    tokens = tokenize(raw)
    i = 0
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if token.startswith('{'):
            ret.addresses = parse_match_list(token)
        elif token == 'port' and nxt is not None:
            ret.port = parse_int(nxt)
            i += 1
        elif token == 'tls' and nxt is not None:
            ret.tls = trim_quotes(nxt)
            i += 1
        elif token == 'http' and nxt is not None:
            ret.http = trim_quotes(nxt)
            i += 1
        else:
            logging.info('Ignoring "%s" in listen clause: %s', token, raw)
        i += 1
    return ret


def serialize_listen(listen: m.Listen) -> str:
    parts: list[str] = []
    if listen.port is not None:
        parts.append(f'port {listen.port}')
    if listen.tls is not None:
        parts.append(f'tls {quote(listen.tls)}')
    if listen.http is not None:
        parts.append(f'http {quote(listen.http)}')
    parts.append(serialize_match_list(listen.addresses))
    return ' '.join(parts)


# Forwarders and remote servers

def _parse_server_options(tokens: list[str], allowed: Sequence[str], raw: str) -> dict[str, Union[int, str, None]]:
    """Parses 'port <n>', 'key <name>' and 'tls <name>' pairs."""
    ret: dict[str, Union[int, str, None]] = {}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in allowed and i + 1 < len(tokens):
            if token == 'port':
                ret[token] = parse_int(tokens[i + 1])
            else:
                ret[token] = trim_quotes(tokens[i + 1])
            i += 2
            continue
        logging.info('Ignoring "%s" in: %s', token, raw)
        i += 1
    return ret


def parse_forwarder(raw: str) -> Optional[m.Forwarder]:
    tokens = tokenize(raw)
    if not tokens:
        return None
    opts = _parse_server_options(tokens[1:], ('port', 'tls'), raw)
    return m.Forwarder(address=tokens[0], port=opts.get('port'),  # type: ignore[arg-type]
                       tls=opts.get('tls'))  # type: ignore[arg-type]


def parse_forwarders(raw: str) -> list[m.Forwarder]:
    ret: list[m.Forwarder] = []
    for item in split_top(unwrap_braces(raw)):
        fwd = parse_forwarder(item)
        if fwd is not None:
            ret.append(fwd)
    return ret


def serialize_forwarder(fwd: m.Forwarder) -> str:
    st = fwd.address
    if fwd.port is not None:
        st += f' port {fwd.port}'
    if fwd.tls is not None:
        st += f' tls {quote(fwd.tls)}'
    return st


def serialize_forwarders(fwds: Sequence[m.Forwarder]) -> str:
    return _braced([serialize_forwarder(x) for x in fwds])


def parse_remote_server(raw: str) -> Optional[m.RemoteServer]:
    tokens = tokenize(raw)
    if not tokens:
        return None
    opts = _parse_server_options(tokens[1:], ('port', 'key', 'tls'), raw)
    return m.RemoteServer(address=trim_quotes(tokens[0]), port=opts.get('port'),  # type: ignore[arg-type]
                          key=opts.get('key'), tls=opts.get('tls'))  # type: ignore[arg-type]


def parse_remote_server_list(raw: str) -> list[m.RemoteServer]:
    ret: list[m.RemoteServer] = []
    for item in split_top(unwrap_braces(raw)):
        server = parse_remote_server(item)
        if server is not None:
            ret.append(server)
    return ret


def serialize_remote_server(server: m.RemoteServer) -> str:
    if _looks_like_address(server.address):
        st = server.address
    else:
        st = quote_name(server.address)
    if server.port is not None:
        st += f' port {server.port}'
    if server.key is not None:
        st += f' key {quote(server.key)}'
    if server.tls is not None:
        st += f' tls {quote(server.tls)}'
    return st


def serialize_remote_server_list(servers: Sequence[m.RemoteServer]) -> str:
    return _braced([serialize_remote_server(x) for x in servers])


def _looks_like_address(st: str) -> bool:
    return bool(re.match(r'^[0-9A-Fa-f:.]+(/\d+)?$', st)) and ('.' in st or ':' in st)


# controls

def _octal(value: int) -> str:
    if value == 0:
        return '0'
    return f'0{value:o}'


def _parse_perm(token: str) -> int:
    """Unix permissions are octal when written with a leading zero, like 0600."""
    try:
        if len(token) > 1 and token.startswith('0'):
            return int(token, 8)
        return int(token, 10)
    except ValueError:
        logging.info('Bad permissions: %s', token)
        return 0


def parse_control_inet(raw: str) -> m.ControlInet:
    """Parses 'inet <addr> [port <n>] allow { ... } [keys { ... }] [read-only <bool>]'.

    Keywords are only recognized in keyword position, so an ACL named "allow"
    within the allow list is just an ACL name.
    """
    tokens = tokenize(raw)
    if tokens and tokens[0] == 'inet':
        tokens = tokens[1:]

    ret = m.ControlInet(address=tokens[0] if tokens else '')

    i = 1
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if nxt is None:
            logging.info('Ignoring "%s" in: %s', token, raw)
        elif token == 'port':
            ret.port = parse_int(nxt)
        elif token == 'allow':
            ret.allow = parse_match_list(nxt)
        elif token == 'keys':
            ret.keys = parse_string_list(nxt)
        elif token == 'read-only':
            ret.read_only = parse_bool(nxt)
        else:
            logging.info('Ignoring "%s" in: %s', token, raw)
            i += 1
            continue
        i += 2

    return ret


def serialize_control_inet(control: m.ControlInet) -> str:
    st = f'inet {control.address}'
    if control.port is not None:
        st += f' port {control.port}'
    st += f' allow {serialize_match_list(control.allow)}'
    if control.keys is not None:
        st += f' keys {serialize_string_list(control.keys)}'
    if control.read_only is not None:
        st += f' read-only {bool_word(control.read_only)}'
    return st


def parse_control_unix(raw: str) -> m.ControlUnix:
    """Parses 'unix <path> perm <n> owner <n> group <n> [keys { ... }] [read-only <bool>]'."""
    tokens = tokenize(raw)
    if tokens and tokens[0] == 'unix':
        tokens = tokens[1:]

    ret = m.ControlUnix(path=trim_quotes(tokens[0]) if tokens else '')

    i = 1
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if nxt is None:
            logging.info('Ignoring "%s" in: %s', token, raw)
        elif token == 'perm':
            ret.perm = _parse_perm(nxt)
        elif token in ('owner', 'group'):
            setattr(ret, token, parse_int(nxt) or 0)
        elif token == 'keys':
            ret.keys = parse_string_list(nxt)
        elif token == 'read-only':
            ret.read_only = parse_bool(nxt)
        else:
            logging.info('Ignoring "%s" in: %s', token, raw)
            i += 1
            continue
        i += 2

    return ret


def serialize_control_unix(control: m.ControlUnix) -> str:
    st = (f'unix {quote(control.path)} perm {_octal(control.perm)} '
          f'owner {control.owner} group {control.group}')
    if control.keys is not None:
        st += f' keys {serialize_string_list(control.keys)}'
    if control.read_only is not None:
        st += f' read-only {bool_word(control.read_only)}'
    return st


# rrset-order

def parse_rrset_order_rule(raw: str) -> Optional[m.RRsetOrder]:
    tokens = tokenize(raw)
    if not tokens:
        return None

    order: Optional[str] = None
    rrclass: Optional[str] = None
    rrtype: Optional[str] = None
    name: Optional[str] = None

    i = 0
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if nxt is not None and token in ('order', 'class', 'type', 'name'):
            if token == 'order':
                order = nxt
            elif token == 'class':
                rrclass = nxt
            elif token == 'type':
                rrtype = nxt
            else:
                name = trim_quotes(nxt)
            i += 2
            continue
        i += 1

    if order is None:
        # No explicit order. Assume that it's the last word
        order = tokens[-1]

    return m.RRsetOrder(order=order, rrclass=rrclass, type=rrtype, name=name)


def parse_rrset_order(raw: str) -> list[m.RRsetOrder]:
    ret: list[m.RRsetOrder] = []
    for item in split_top(unwrap_braces(raw)):
        rule = parse_rrset_order_rule(item)
        if rule is not None:
            ret.append(rule)
    return ret


def serialize_rrset_order_rule(rule: m.RRsetOrder) -> str:
    parts: list[str] = []
    if rule.rrclass is not None:
        parts.append(f'class {rule.rrclass}')
    if rule.type is not None:
        parts.append(f'type {rule.type}')
    if rule.name is not None:
        parts.append(f'name {quote(rule.name)}')
    parts.append(f'order {rule.order}')
    return ' '.join(parts)


def serialize_rrset_order(rules: Sequence[m.RRsetOrder]) -> str:
    return _braced([serialize_rrset_order_rule(x) for x in rules])


# trust-anchors

def parse_trust_anchor(line: str) -> Optional[m.TrustAnchor]:
    """Parses '"<name>" <type> <data...>'. Returns None if it's neither a DS nor a DNSKEY."""
    tokens = tokenize(line)
    if len(tokens) < 2:
        return None

    name = trim_quotes(tokens[0])
    rest = line.strip()[len(tokens[0]):].strip()
    anchor_type = tokens[1]

    if anchor_type.endswith('-ds'):
        kind = m.AnchorKind.DS
    elif anchor_type.endswith('-key'):
        kind = m.AnchorKind.DNSKEY
    elif 'ds' in rest:
        kind = m.AnchorKind.DS
    elif 'key' in rest:
        kind = m.AnchorKind.DNSKEY
    else:
        return None

    return m.TrustAnchor(name=name, kind=kind, data=rest)


def serialize_trust_anchor(anchor: m.TrustAnchor) -> str:
    return f'{quote(anchor.name)} {anchor.data}'


# logging

def parse_file_destination(raw: str) -> m.FileDestination:
    """Parses '<path> [versions <n>|unlimited] [size <size>] [suffix <type>]'."""
    tokens = tokenize(raw)
    ret = m.FileDestination(path=trim_quotes(tokens[0]) if tokens else '')

    i = 1
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if nxt is None:
            logging.info('Ignoring "%s" in: %s', token, raw)
        elif token == 'versions':
            versions = parse_int(nxt)
            ret.versions = versions if versions is not None else nxt
        elif token == 'size':
            ret.size = nxt
        elif token == 'suffix':
            ret.suffix = nxt
        else:
            logging.info('Ignoring "%s" in: %s', token, raw)
            i += 1
            continue
        i += 2

    return ret


def serialize_file_destination(dest: m.FileDestination) -> str:
    st = quote(dest.path)
    if dest.versions is not None:
        st += f' versions {dest.versions}'
    if dest.size is not None:
        st += f' size {dest.size}'
    if dest.suffix is not None:
        st += f' suffix {dest.suffix}'
    return st


def parse_category(raw: str) -> m.LogCategory:
    """Parses '<name> { <channel>; ... }'."""
    tokens = tokenize(raw)
    name = trim_quotes(tokens[0]) if tokens else ''
    channels: list[str] = []
    for token in tokens[1:]:
        if token.startswith('{'):
            channels = parse_string_list(token)
    return m.LogCategory(name=name, channels=channels)


def serialize_category(category: m.LogCategory) -> str:
    return f'{quote(category.name)} {serialize_string_list(category.channels)}'


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
