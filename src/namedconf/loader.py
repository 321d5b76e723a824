# Decodes a parsed named.conf into the typed model
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

import logging

__all__ = ['ConfLoader', 'decode']

import namedconf.cst
import namedconf.model as m
import namedconf.parsing as p

from typing import Optional

Statement = namedconf.cst.Statement

ZONE_TYPES = {x.value: x for x in m.ZoneType}


def _children(stmt: Statement) -> list[Statement]:
    """Returns the statements in the body of a block."""
    if stmt.body is None:
        return []
    return [x for x in stmt.body if isinstance(x, Statement)]


def _list_part(value: str) -> Optional[str]:
    """Returns the part of value from the first top-level '{', or None."""
    idx = namedconf.cst.find_unquoted(value, '{')
    if idx < 0:
        return None
    return value[idx:]


def _raw_option(stmt: Statement) -> m.RawOption:
    return m.RawOption(name=stmt.keyword, raw=stmt.value)


class ConfLoader:
    """
    Walks the top-level statements of a file and builds a NamedConf
    """
    conf: m.NamedConf
    keep_unknown: bool

    def __init__(self, keep_unknown: bool = True) -> None:
        """
        @param keep_unknown     If True then unknown statements within blocks
                                are kept in the block's "other" list.
                                Otherwise they are dropped. Unknown statements
                                within options are always kept.
        """
        self.conf = m.NamedConf()
        self.keep_unknown = keep_unknown

    def _unknown(self, other: list[m.RawOption], stmt: Statement, where: str) -> None:
        if self.keep_unknown:
            other.append(_raw_option(stmt))
        else:
            logging.info('Dropping unknown statement in %s: %s', where, stmt.line)

    def decode(self, tree: namedconf.cst.File) -> m.NamedConf:
        self.conf = m.NamedConf(tree=tree)
        for stmt in tree.statements():
            self.add_statement(stmt)
        return self.conf

    def add_statement(self, stmt: Statement) -> None:
        conf = self.conf
        kw = stmt.keyword
        if kw == 'include':
            conf.includes.append(self.parse_include(stmt))
        elif kw == 'acl':
            conf.acls.append(self.parse_acl(stmt))
        elif kw == 'key':
            conf.keys.append(self.parse_key(stmt))
        elif kw == 'key-store':
            conf.key_stores.append(self.parse_key_store(stmt))
        elif kw == 'remote-servers':
            conf.remote_servers.append(self.parse_remote_servers(stmt))
        elif kw == 'tls':
            conf.tls.append(self.parse_tls(stmt))
        elif kw == 'http':
            conf.http.append(self.parse_http(stmt))
        elif kw == 'controls':
            if conf.controls is not None:
                logging.info('Multiple controls blocks. Using the last one')
            conf.controls = self.parse_controls(stmt)
        elif kw == 'logging':
            if conf.logging is not None:
                logging.info('Multiple logging blocks. Using the last one')
            conf.logging = self.parse_logging(stmt)
        elif kw == 'options':
            if conf.options is not None:
                logging.info('Multiple options blocks. Using the last one')
            conf.options = self.parse_options(stmt)
        elif kw == 'trust-anchors':
            conf.trust_anchors.append(self.parse_trust_anchors(stmt))
        elif kw == 'view':
            conf.views.append(self.parse_view(stmt))
        elif kw == 'zone':
            conf.zones.append(self.parse_zone(stmt))
        else:
            logging.debug('Not modeled, leaving as is: %s', stmt.header)

    # Simple blocks

    def parse_include(self, stmt: Statement) -> m.Include:
        return m.Include(path=p.trim_quotes(stmt.value))

    def parse_acl(self, stmt: Statement) -> m.ACL:
        lst = _list_part(stmt.value)
        elements = p.parse_match_list(lst) if lst is not None else []
        return m.ACL(name=p.head_name(stmt.header), elements=elements)

    def parse_key(self, stmt: Statement) -> m.Key:
        ret = m.Key(name=p.head_name(stmt.header))
        for child in _children(stmt):
            if child.keyword == 'algorithm':
                ret.algorithm = p.trim_quotes(child.value)
            elif child.keyword == 'secret':
                ret.secret = p.trim_quotes(child.value)
            else:
                self._unknown(ret.other, child, f'key {ret.name}')
        return ret

    def parse_key_store(self, stmt: Statement) -> m.KeyStore:
        ret = m.KeyStore(name=p.head_name(stmt.header))
        for child in _children(stmt):
            if child.keyword == 'pkcs11-uri':
                ret.pkcs11_uri = p.trim_quotes(child.value)
            else:
                self._unknown(ret.other, child, f'key-store {ret.name}')
        return ret

    def parse_remote_servers(self, stmt: Statement) -> m.RemoteServers:
        ret = m.RemoteServers(name=p.head_name(stmt.header))
        lst = _list_part(stmt.value)
        if lst is not None:
            ret.servers = p.parse_remote_server_list(lst)
        if len(stmt.header.split()) > 2:
            logging.info('Ignoring remote-servers options: %s', stmt.header)
        return ret

    def parse_tls(self, stmt: Statement) -> m.TLS:
        ret = m.TLS(name=p.head_name(stmt.header))
        for child in _children(stmt):
            kw = child.keyword
            if kw in ('ca-file', 'cert-file', 'key-file', 'cipher-suites', 'ciphers',
                      'dhparam-file', 'remote-hostname'):
                setattr(ret, kw.replace('-', '_'), p.trim_quotes(child.value))
            elif kw in ('prefer-server-ciphers', 'session-tickets'):
                setattr(ret, kw.replace('-', '_'), p.parse_bool(child.value))
            elif kw == 'protocols':
                ret.protocols = p.parse_string_list(child.value)
            else:
                self._unknown(ret.other, child, f'tls {ret.name}')
        return ret

    def parse_http(self, stmt: Statement) -> m.HTTP:
        ret = m.HTTP(name=p.head_name(stmt.header))
        for child in _children(stmt):
            kw = child.keyword
            if kw == 'endpoints':
                ret.endpoints = p.parse_string_list(child.value)
            elif kw in ('listener-clients', 'streams-per-connection'):
                setattr(ret, kw.replace('-', '_'), p.parse_int(child.value))
            else:
                self._unknown(ret.other, child, f'http {ret.name}')
        return ret

    def parse_controls(self, stmt: Statement) -> m.Controls:
        ret = m.Controls()
        for child in _children(stmt):
            if child.keyword == 'inet':
                ret.inet.append(p.parse_control_inet(child.line))
            elif child.keyword == 'unix':
                ret.unix.append(p.parse_control_unix(child.line))
            else:
                self._unknown(ret.other, child, 'controls')
        return ret

    # Logging

    def parse_channel(self, stmt: Statement) -> m.LogChannel:
        ret = m.LogChannel(name=p.head_name(stmt.header))
        for child in _children(stmt):
            kw = child.keyword
            if kw == 'file':
                ret.destination = p.parse_file_destination(child.value)
            elif kw == 'syslog':
                ret.destination = m.SyslogDestination(facility=child.value.split()[0] if child.value else None)
            elif kw == 'stderr':
                ret.destination = m.StderrDestination()
            elif kw == 'null':
                ret.destination = m.NullDestination()
            elif kw == 'severity':
                ret.severity = child.value
            elif kw in ('print-time', 'print-category', 'print-severity', 'buffered'):
                setattr(ret, kw.replace('-', '_'), p.parse_bool(child.value))
            else:
                self._unknown(ret.other, child, f'channel {ret.name}')
        return ret

    def parse_logging(self, stmt: Statement) -> m.Logging:
        ret = m.Logging()
        for child in _children(stmt):
            if child.keyword == 'channel':
                ret.channels.append(self.parse_channel(child))
            elif child.keyword == 'category':
                ret.categories.append(p.parse_category(child.value))
            else:
                self._unknown(ret.other, child, 'logging')
        return ret

    # Options

    def parse_options(self, stmt: Statement) -> m.Options:
        ret = m.Options()
        for child in _children(stmt):
            kw = child.keyword
            value = child.value
            if kw == 'directory':
                ret.directory = p.trim_quotes(value)
            elif kw == 'recursion':
                ret.recursion = p.parse_bool(value)
            elif kw in ('allow-query', 'allow-transfer', 'allow-update'):
                setattr(ret, kw.replace('-', '_'), p.parse_match_list(value))
            elif kw in ('listen-on', 'listen-on-v6') and getattr(ret, kw.replace('-', '_')) is None:
                setattr(ret, kw.replace('-', '_'), p.parse_listen(value))
            elif kw == 'forwarders' and value.startswith('{'):
                ret.forwarders = p.parse_forwarders(value)
            elif kw == 'forward':
                ret.forward = p.parse_word(value)
            elif kw == 'dnssec-validation':
                ret.dnssec_validation = p.parse_word(value)
            elif kw == 'rrset-order':
                ret.rrset_order = p.parse_rrset_order(value)
            else:
                # Everything else, including a second listen-on, is kept as is
                ret.other.append(_raw_option(child))
        return ret

    # Trust anchors, views and zones

    def parse_trust_anchors(self, stmt: Statement) -> m.TrustAnchors:
        ret = m.TrustAnchors()
        for child in _children(stmt):
            anchor = p.parse_trust_anchor(child.line)
            if anchor is None:
                self._unknown(ret.other, child, 'trust-anchors')
            else:
                ret.anchors.append(anchor)
        return ret

    def parse_primaries(self, zone: m.Zone, stmt: Statement) -> None:
        value = stmt.value
        if value.startswith('{'):
            zone.primaries = m.PrimariesList(servers=p.parse_remote_server_list(value))
        elif '{' not in value:
            zone.primaries = m.PrimariesRef(ref=p.trim_quotes(value))
        else:
            zone.other.append(_raw_option(stmt))

    def parse_zone(self, stmt: Statement) -> m.Zone:
        ret = m.Zone(name=p.head_name(stmt.header), zone_class=p.head_class(stmt.header))
        for child in _children(stmt):
            kw = child.keyword
            value = child.value
            if kw == 'type':
                word = p.parse_word(value)
                if word in ZONE_TYPES:
                    ret.type = ZONE_TYPES[word]
                else:
                    # Like "type master"
                    ret.other.append(_raw_option(child))
            elif kw == 'file':
                ret.file = p.trim_quotes(value)
            elif kw == 'primaries':
                self.parse_primaries(ret, child)
            elif kw == 'forwarders' and value.startswith('{'):
                ret.forwarders = p.parse_forwarders(value)
            elif kw == 'forward':
                ret.forward = p.parse_word(value)
            elif kw in ('allow-update', 'allow-transfer'):
                setattr(ret, kw.replace('-', '_'), p.parse_match_list(value))
            elif kw == 'also-notify' and value.startswith('{'):
                ret.also_notify = p.parse_remote_server_list(value)
            elif kw == 'dnssec-policy':
                ret.dnssec_policy = p.trim_quotes(value)
            elif kw in ('forwarders', 'also-notify'):
                # Values that can't be represented, like "forwarders port 53 { ... }"
                ret.other.append(_raw_option(child))
            else:
                self._unknown(ret.other, child, f'zone {ret.name}')
        return ret

    def parse_view(self, stmt: Statement) -> m.View:
        ret = m.View(name=p.head_name(stmt.header), view_class=p.head_class(stmt.header))
        for child in _children(stmt):
            kw = child.keyword
            if kw in ('match-clients', 'match-destinations'):
                setattr(ret, kw.replace('-', '_'), p.parse_match_list(child.value))
            elif kw == 'recursion':
                ret.recursion = p.parse_bool(child.value)
            elif kw == 'trust-anchors' and ret.trust_anchors is None:
                ret.trust_anchors = self.parse_trust_anchors(child)
            elif kw == 'trust-anchors':
                logging.info('Multiple trust-anchors in view %s. Keeping the extra one as is', ret.name)
                ret.other.append(_raw_option(child))
            elif kw == 'zone':
                ret.zones.append(self.parse_zone(child))
            elif kw == 'include':
                ret.includes.append(self.parse_include(child))
            else:
                self._unknown(ret.other, child, f'view {ret.name}')
        return ret


def decode(tree: namedconf.cst.File, keep_unknown: bool = True) -> m.NamedConf:
    """Builds the typed view of tree. The returned object keeps a reference to tree."""
    return ConfLoader(keep_unknown=keep_unknown).decode(tree)


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
