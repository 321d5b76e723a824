# Writes the typed model back to the syntax tree
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

# Modeled statements are rebuilt from scratch. For every modeled keyword all
# old top-level statements are removed and the new ones are appended to the
# end of the file (or put in the place of the first old one, when
# positional). Everything else in the tree is left untouched.

import logging

__all__ = ['apply', 'settle', 'KEYWORDS']

import namedconf.cst
import namedconf.common
import namedconf.loader
import namedconf.model as m
import namedconf.parsing as p

from typing import Callable, Optional, Sequence

Node = namedconf.cst.Node
Raw = namedconf.cst.Raw
Statement = namedconf.cst.Statement

new_block = namedconf.cst.new_block
new_simple = namedconf.cst.new_simple


def _other(other: Sequence[m.RawOption]) -> list[Node]:
    return [new_simple(f'{x.name} {x.raw}'.strip()) for x in other]


def _header(keyword: str, name: str, cls: Optional[str] = None) -> str:
    ret = f'{keyword} {p.quote(name)}'
    if cls:
        ret += f' {cls}'
    return ret


def build_include(inc: m.Include) -> Statement:
    return new_simple(f'include {p.quote(inc.path)}')


def build_acl(acl: m.ACL) -> Statement:
    body: list[Node] = [Raw(f'{p.serialize_match_element(x)};') for x in acl.elements]
    return new_block(_header('acl', acl.name), body)


def build_key(key: m.Key) -> Statement:
    body: list[Node] = []
    if key.algorithm:
        body.append(new_simple(f'algorithm {p.quote_name(key.algorithm)}'))
    if key.secret:
        body.append(new_simple(f'secret {p.quote(key.secret)}'))
    body.extend(_other(key.other))
    return new_block(_header('key', key.name), body)


def build_key_store(ks: m.KeyStore) -> Statement:
    body: list[Node] = []
    if ks.pkcs11_uri is not None:
        body.append(new_simple(f'pkcs11-uri {p.quote(ks.pkcs11_uri)}'))
    body.extend(_other(ks.other))
    return new_block(_header('key-store', ks.name), body)


def build_remote_servers(rs: m.RemoteServers) -> Statement:
    body: list[Node] = [Raw(f'{p.serialize_remote_server(x)};') for x in rs.servers]
    return new_block(_header('remote-servers', rs.name), body)


def build_tls(tls: m.TLS) -> Statement:
    body: list[Node] = []
    for kw in ('ca-file', 'cert-file', 'key-file', 'cipher-suites', 'ciphers', 'dhparam-file'):
        value = getattr(tls, kw.replace('-', '_'))
        if value is not None:
            body.append(new_simple(f'{kw} {p.quote(value)}'))
    if tls.prefer_server_ciphers is not None:
        body.append(new_simple(f'prefer-server-ciphers {p.bool_word(tls.prefer_server_ciphers)}'))
    if tls.protocols is not None:
        body.append(new_simple(f'protocols {p.serialize_string_list(tls.protocols)}'))
    if tls.remote_hostname is not None:
        body.append(new_simple(f'remote-hostname {p.quote(tls.remote_hostname)}'))
    if tls.session_tickets is not None:
        body.append(new_simple(f'session-tickets {p.bool_word(tls.session_tickets)}'))
    body.extend(_other(tls.other))
    return new_block(_header('tls', tls.name), body)


def build_http(http: m.HTTP) -> Statement:
    body: list[Node] = []
    if http.endpoints is not None:
        body.append(new_simple(f'endpoints {p.serialize_string_list(http.endpoints)}'))
    if http.listener_clients is not None:
        body.append(new_simple(f'listener-clients {http.listener_clients}'))
    if http.streams_per_connection is not None:
        body.append(new_simple(f'streams-per-connection {http.streams_per_connection}'))
    body.extend(_other(http.other))
    return new_block(_header('http', http.name), body)


def build_controls(controls: m.Controls) -> Statement:
    body: list[Node] = []
    body.extend(new_simple(p.serialize_control_inet(x)) for x in controls.inet)
    body.extend(new_simple(p.serialize_control_unix(x)) for x in controls.unix)
    body.extend(_other(controls.other))
    return new_block('controls', body)


def build_destination(dest: m.LogDestination) -> Statement:
    if isinstance(dest, m.FileDestination):
        return new_simple(f'file {p.serialize_file_destination(dest)}')
    if isinstance(dest, m.SyslogDestination):
        if dest.facility:
            return new_simple(f'syslog {dest.facility}')
        return new_simple('syslog')
    return new_simple(dest.kind)


def build_channel(channel: m.LogChannel) -> Statement:
    body: list[Node] = []
    if channel.destination is not None:
        body.append(build_destination(channel.destination))
    if channel.severity is not None:
        body.append(new_simple(f'severity {channel.severity}'))
    for kw in ('print-time', 'print-category', 'print-severity', 'buffered'):
        value = getattr(channel, kw.replace('-', '_'))
        if value is not None:
            body.append(new_simple(f'{kw} {p.bool_word(value)}'))
    body.extend(_other(channel.other))
    return new_block(_header('channel', channel.name), body)


def build_logging(lg: m.Logging) -> Statement:
    body: list[Node] = []
    body.extend(build_channel(x) for x in lg.channels)
    body.extend(new_simple(f'category {p.serialize_category(x)}') for x in lg.categories)
    body.extend(_other(lg.other))
    return new_block('logging', body)


def build_options(opts: m.Options) -> Statement:
    lines: list[str] = []
    if opts.directory is not None:
        lines.append(f'directory {p.quote(opts.directory)}')
    if opts.recursion is not None:
        lines.append(f'recursion {p.bool_word(opts.recursion)}')
    for kw in ('allow-query', 'allow-transfer', 'allow-update'):
        value = getattr(opts, kw.replace('-', '_'))
        if value is not None:
            lines.append(f'{kw} {p.serialize_match_list(value)}')
    if opts.listen_on is not None:
        lines.append(f'listen-on {p.serialize_listen(opts.listen_on)}')
    if opts.listen_on_v6 is not None:
        lines.append(f'listen-on-v6 {p.serialize_listen(opts.listen_on_v6)}')
    if opts.forwarders is not None:
        lines.append(f'forwarders {p.serialize_forwarders(opts.forwarders)}')
    if opts.forward is not None:
        lines.append(f'forward {opts.forward}')
    if opts.dnssec_validation is not None:
        lines.append(f'dnssec-validation {opts.dnssec_validation}')
    if opts.rrset_order is not None:
        lines.append(f'rrset-order {p.serialize_rrset_order(opts.rrset_order)}')

    body: list[Node] = [new_simple(x) for x in lines]
    body.extend(_other(opts.other))
    return new_block('options', body)


def build_trust_anchors(ta: m.TrustAnchors) -> Statement:
    body: list[Node] = [new_simple(p.serialize_trust_anchor(x)) for x in ta.anchors]
    body.extend(_other(ta.other))
    return new_block('trust-anchors', body)


def build_zone(zone: m.Zone) -> Statement:
    lines: list[str] = []
    if zone.type is not None:
        lines.append(f'type {zone.type.value}')
    if zone.file is not None:
        lines.append(f'file {p.quote(zone.file)}')
    if isinstance(zone.primaries, m.PrimariesRef):
        lines.append(f'primaries {p.quote_name(zone.primaries.ref)}')
    elif isinstance(zone.primaries, m.PrimariesList):
        lines.append(f'primaries {p.serialize_remote_server_list(zone.primaries.servers)}')
    if zone.forwarders is not None:
        lines.append(f'forwarders {p.serialize_forwarders(zone.forwarders)}')
    if zone.forward is not None:
        lines.append(f'forward {zone.forward}')
    for kw in ('allow-update', 'allow-transfer'):
        value = getattr(zone, kw.replace('-', '_'))
        if value is not None:
            lines.append(f'{kw} {p.serialize_match_list(value)}')
    if zone.also_notify is not None:
        lines.append(f'also-notify {p.serialize_remote_server_list(zone.also_notify)}')
    if zone.dnssec_policy is not None:
        lines.append(f'dnssec-policy {p.quote(zone.dnssec_policy)}')

    body: list[Node] = [new_simple(x) for x in lines]
    body.extend(_other(zone.other))
    return new_block(_header('zone', zone.name, zone.zone_class), body)


def build_view(view: m.View) -> Statement:
    body: list[Node] = []
    for kw in ('match-clients', 'match-destinations'):
        value = getattr(view, kw.replace('-', '_'))
        if value is not None:
            body.append(new_simple(f'{kw} {p.serialize_match_list(value)}'))
    if view.recursion is not None:
        body.append(new_simple(f'recursion {p.bool_word(view.recursion)}'))
    if view.trust_anchors is not None:
        body.append(build_trust_anchors(view.trust_anchors))
    body.extend(_other(view.other))
    body.extend(build_zone(x) for x in view.zones)
    body.extend(build_include(x) for x in view.includes)
    return new_block(_header('view', view.name, view.view_class), body)


def _one(item: Optional[object]) -> list:
    return [] if item is None else [item]


# Reads built statements back. Unknown statements are kept.
_loader = namedconf.loader.ConfLoader(keep_unknown=True)

# Keyword, items of the model, the builder and the reader for each item. In
# the order they are applied.
KEYWORDS: list[tuple[str, Callable[[m.NamedConf], list], Callable, Callable]] = [
    ('include', lambda conf: conf.includes, build_include, _loader.parse_include),
    ('acl', lambda conf: conf.acls, build_acl, _loader.parse_acl),
    ('key', lambda conf: conf.keys, build_key, _loader.parse_key),
    ('key-store', lambda conf: conf.key_stores, build_key_store, _loader.parse_key_store),
    ('remote-servers', lambda conf: conf.remote_servers, build_remote_servers, _loader.parse_remote_servers),
    ('tls', lambda conf: conf.tls, build_tls, _loader.parse_tls),
    ('http', lambda conf: conf.http, build_http, _loader.parse_http),
    ('controls', lambda conf: _one(conf.controls), build_controls, _loader.parse_controls),
    ('logging', lambda conf: _one(conf.logging), build_logging, _loader.parse_logging),
    ('options', lambda conf: _one(conf.options), build_options, _loader.parse_options),
    ('trust-anchors', lambda conf: conf.trust_anchors, build_trust_anchors, _loader.parse_trust_anchors),
    ('view', lambda conf: conf.views, build_view, _loader.parse_view),
    ('zone', lambda conf: conf.zones, build_zone, _loader.parse_zone),
]


def settle(item: object, builder: Callable, reader: Callable) -> Statement:
    """Builds item, reads it back and builds it again.

    Entries of "other" that name a modeled field end up in that field. The
    result reads back to the same statement.
    """
    return builder(reader(builder(item)))


def replace_statements(tree: namedconf.cst.File, keyword: str, stmts: list[Statement],
                       positional: bool = False) -> None:
    """Replaces all top-level statements with keyword by stmts.

    Whitespace right after a removed statement is removed with it.
    """
    nodes: list[Node] = []
    first: Optional[int] = None
    after_removed = False

    for node in tree.nodes:
        if isinstance(node, Statement) and node.keyword == keyword:
            if first is None:
                first = len(nodes)
            after_removed = True
            continue
        if after_removed and isinstance(node, Raw) and not node.text.strip():
            after_removed = False
            continue
        after_removed = False
        nodes.append(node)

    if positional and first is not None:
        nodes[first:first] = stmts
    else:
        nodes.extend(stmts)

    logging.debug('%s: %d statements', keyword, len(stmts))
    tree.nodes = nodes


def apply(conf: m.NamedConf, tree: Optional[namedconf.cst.File] = None,
          positional: bool = False) -> namedconf.cst.File:
    """Writes conf to tree (or to the tree conf was read from).

    @param positional   If True then rebuilt statements take the place of the
                        first old statement with the same keyword instead of
                        being appended at the end
    @return The updated tree
    """
    if tree is None:
        tree = conf.tree
    if tree is None:
        namedconf.common.abort('Cannot encode: missing backing tree')

    for keyword, items, builder, reader in KEYWORDS:
        stmts = [settle(x, builder, reader) for x in items(conf)]
        replace_statements(tree, keyword, stmts, positional)

    return tree


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
