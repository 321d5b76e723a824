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

import unittest
import parameterized

import namedconf.model as m
from namedconf import parsing

from typing import Optional


def acl(name: str, negated: bool = False) -> m.AclMatch:
    return m.AclMatch(acl_ref=name, negated=negated)


def addr(address: str, negated: bool = False) -> m.AddressMatch:
    return m.AddressMatch(address=address, negated=negated)


class TokenTest(unittest.TestCase):

    @parameterized.parameterized.expand([
        ('yes', True),
        ('No', False),
        ('true', True),
        ('FALSE', False),
        ('yes ignored', True),
        ('maybe', None),
        ('', None),
    ])
    def test_parse_bool(self, raw: str, expected: Optional[bool]) -> None:
        self.assertEqual(parsing.parse_bool(raw), expected)

    @parameterized.parameterized.expand([
        ('53', 53),
        ('10 20', 10),
        ('x', None),
        ('', None),
    ])
    def test_parse_int(self, raw: str, expected: Optional[int]) -> None:
        self.assertEqual(parsing.parse_int(raw), expected)

    @parameterized.parameterized.expand([
        ('any', 'any'),
        ('rndc-key', 'rndc-key'),
        ('my.acl', '"my.acl"'),
        ('a b', '"a b"'),
    ])
    def test_quote_name(self, st: str, expected: str) -> None:
        self.assertEqual(parsing.quote_name(st), expected)

    def test_parse_word(self) -> None:
        self.assertEqual(parsing.parse_word('only'), 'only')
        self.assertIsNone(parsing.parse_word(''))
        with self.assertLogs(level='INFO'):
            self.assertEqual(parsing.parse_word('auto extra'), 'auto')

    def test_tokenize(self) -> None:
        self.assertEqual(parsing.tokenize('inet 127.0.0.1 allow { a; { b; }; } keys { "k"; }'),
                         ['inet', '127.0.0.1', 'allow', '{ a; { b; }; }', 'keys', '{ "k"; }'])
        self.assertEqual(parsing.tokenize('unix "/a b" perm 0600;'), ['unix', '"/a b"', 'perm', '0600'])
        self.assertEqual(parsing.tokenize(''), [])
        # Unbalanced input doesn't fail
        self.assertEqual(parsing.tokenize('a { b'), ['a', '{ b'])

    def test_split_top(self) -> None:
        self.assertEqual(parsing.split_top('a; { b; c; }; "d;e"'), ['a', '{ b; c; }', '"d;e"'])
        self.assertEqual(parsing.split_top(' ; ;'), [])

    @parameterized.parameterized.expand([
        ('{ "a"; b; ; }', ['a', 'b']),
        ('"a"', ['a']),
        ('{ }', []),
        ('', []),
    ])
    def test_parse_string_list(self, raw: str, expected: list[str]) -> None:
        self.assertEqual(parsing.parse_string_list(raw), expected)

    def test_serialize_string_list(self) -> None:
        self.assertEqual(parsing.serialize_string_list(['a', 'b']), '{ "a"; "b"; }')
        self.assertEqual(parsing.serialize_string_list([]), '{ }')


class HeaderTest(unittest.TestCase):

    @parameterized.parameterized.expand([
        ('zone "example.com" IN', 'example.com'),
        ('zone example.com', 'example.com'),
        ('view "internal"', 'internal'),
        ('channel default_log', 'default_log'),
        ('options', ''),
    ])
    def test_head_name(self, header: str, expected: str) -> None:
        self.assertEqual(parsing.head_name(header), expected)

    @parameterized.parameterized.expand([
        ('zone "example.com" IN', 'IN'),
        ('zone "example.com"', None),
        ('zone example.com CH', 'CH'),
        ('view "v" IN', 'IN'),
    ])
    def test_head_class(self, header: str, expected: Optional[str]) -> None:
        self.assertEqual(parsing.head_class(header), expected)


class MatchListTest(unittest.TestCase):

    @parameterized.parameterized.expand([
        ('10.0.0.0/8', addr('10.0.0.0/8')),
        ('192.168.1.1', addr('192.168.1.1')),
        ('::1', addr('::1')),
        ('2001:db8::/32', addr('2001:db8::/32')),
        ('!10.1.2.3', addr('10.1.2.3', negated=True)),
        ('any', acl('any')),
        ('!internal', acl('internal', negated=True)),
        ('"quoted-acl"', acl('quoted-acl')),
        ('"a.b.c.d"', acl('a.b.c.d')),
        ('!"10.0.0.1"', acl('10.0.0.1', negated=True)),
        ('example.com', acl('example.com')),
        ('key "tsig-key"', m.KeyMatch(key='tsig-key')),
        ('! key k', m.KeyMatch(key='k', negated=True)),
        ('{ a; b; }', m.NestedMatch(elements=[acl('a'), acl('b')])),
        ('!{ a; }', m.NestedMatch(elements=[acl('a')], negated=True)),
    ])
    def test_parse_match_element(self, st: str, expected: m.MatchElement) -> None:
        self.assertEqual(parsing.parse_match_element(st), expected)

    @parameterized.parameterized.expand([
        ('',),
        ('!',),
    ])
    def test_parse_match_element_empty(self, st: str) -> None:
        self.assertIsNone(parsing.parse_match_element(st))

    def test_kinds(self) -> None:
        elements = parsing.parse_match_list('{ 1.2.3.4; key k; acl1; { x; }; }')
        self.assertEqual([x.kind for x in elements], ['address', 'key', 'acl', 'nested'])

    def test_nested(self) -> None:
        raw = '{ any; !10.0.0.1; key "k"; { localhost; !1.2.3.4; }; }'
        expected = [
            acl('any'),
            addr('10.0.0.1', negated=True),
            m.KeyMatch(key='k'),
            m.NestedMatch(elements=[acl('localhost'), addr('1.2.3.4', negated=True)]),
        ]
        res = parsing.parse_match_list(raw)
        self.assertEqual(res, expected)
        self.assertEqual(parsing.serialize_match_list(res), raw)

    def test_serialize(self) -> None:
        self.assertEqual(parsing.serialize_match_list([]), '{ }')
        self.assertEqual(parsing.serialize_match_list([acl('my acl'), m.KeyMatch(key='k1')]),
                         '{ "my acl"; key "k1"; }')


class ClauseTest(unittest.TestCase):

    def test_listen(self) -> None:
        res = parsing.parse_listen('port 53 tls "mytls" { any; }')
        self.assertEqual(res, m.Listen(port=53, tls='mytls', addresses=[acl('any')]))
        self.assertEqual(parsing.serialize_listen(res), 'port 53 tls "mytls" { any; }')

    def test_listen_any_order(self) -> None:
        res = parsing.parse_listen('http local tls none port 8080 { 127.0.0.1; }')
        self.assertEqual(res, m.Listen(port=8080, tls='none', http='local', addresses=[addr('127.0.0.1')]))
        self.assertEqual(parsing.serialize_listen(res), 'port 8080 tls "none" http "local" { 127.0.0.1; }')

    def test_listen_unknown(self) -> None:
        with self.assertLogs(level='INFO'):
            res = parsing.parse_listen('bogus { any; }')
        self.assertEqual(res, m.Listen(addresses=[acl('any')]))

    def test_forwarders(self) -> None:
        raw = '{ 8.8.8.8 port 53 tls "dot"; 1.1.1.1; }'
        res = parsing.parse_forwarders(raw)
        self.assertEqual(res, [m.Forwarder(address='8.8.8.8', port=53, tls='dot'),
                               m.Forwarder(address='1.1.1.1')])
        self.assertEqual(parsing.serialize_forwarders(res), raw)
        self.assertEqual(parsing.serialize_forwarders([]), '{ }')

    def test_remote_servers(self) -> None:
        raw = '{ 192.0.2.1 port 5353 key "k1"; 2001:db8::1 tls "t"; primaries-a; }'
        res = parsing.parse_remote_server_list(raw)
        self.assertEqual(res, [
            m.RemoteServer(address='192.0.2.1', port=5353, key='k1'),
            m.RemoteServer(address='2001:db8::1', tls='t'),
            m.RemoteServer(address='primaries-a'),
        ])
        self.assertEqual(parsing.serialize_remote_server_list(res), raw)

    def test_remote_server_unknown(self) -> None:
        with self.assertLogs(level='INFO'):
            res = parsing.parse_remote_server('192.0.2.1 source 10.0.0.1')
        self.assertEqual(res, m.RemoteServer(address='192.0.2.1'))


class ControlsTest(unittest.TestCase):

    def test_inet(self) -> None:
        raw = 'inet 127.0.0.1 port 953 allow { allow; } keys { "rndc-key"; } read-only yes'
        res = parsing.parse_control_inet(raw)
        self.assertEqual(res, m.ControlInet(address='127.0.0.1', port=953, allow=[acl('allow')],
                                            keys=['rndc-key'], read_only=True))
        self.assertEqual(parsing.serialize_control_inet(res), raw)

    def test_inet_keyword_names(self) -> None:
        # Keywords within lists are just names
        res = parsing.parse_control_inet('inet * allow { keys; port; } keys { "allow"; }')
        self.assertEqual(res.address, '*')
        self.assertEqual(res.allow, [acl('keys'), acl('port')])
        self.assertEqual(res.keys, ['allow'])
        self.assertIsNone(res.port)

    def test_unix(self) -> None:
        raw = 'unix "/var/run/ndc" perm 0600 owner 0 group 0 keys { "k"; }'
        res = parsing.parse_control_unix(raw)
        self.assertEqual(res, m.ControlUnix(path='/var/run/ndc', perm=0o600, owner=0, group=0, keys=['k']))
        self.assertEqual(parsing.serialize_control_unix(res), raw)

    def test_unix_decimal_perm(self) -> None:
        res = parsing.parse_control_unix('unix "/s" perm 384 owner 101 group 102 read-only no')
        self.assertEqual(res, m.ControlUnix(path='/s', perm=0o600, owner=101, group=102, read_only=False))
        self.assertEqual(parsing.serialize_control_unix(res),
                         'unix "/s" perm 0600 owner 101 group 102 read-only no')


class MiscTest(unittest.TestCase):

    def test_rrset_order(self) -> None:
        res = parsing.parse_rrset_order('{ type A name "example.com" order cyclic; class IN order random; fixed; }')
        self.assertEqual(res, [
            m.RRsetOrder(order='cyclic', type='A', name='example.com'),
            m.RRsetOrder(order='random', rrclass='IN'),
            m.RRsetOrder(order='fixed'),
        ])
        self.assertEqual(parsing.serialize_rrset_order(res),
                         '{ type A name "example.com" order cyclic; class IN order random; order fixed; }')

    @parameterized.parameterized.expand([
        ('"." initial-key 257 3 8 "AwEAAa"', m.AnchorKind.DNSKEY, 'initial-key 257 3 8 "AwEAAa"'),
        ('"." static-ds 20326 8 2 "E06D"', m.AnchorKind.DS, 'static-ds 20326 8 2 "E06D"'),
        ('"." initial-ds 20326 8 2 "E06D"', m.AnchorKind.DS, 'initial-ds 20326 8 2 "E06D"'),
        ('"example." ds-like 1 2', m.AnchorKind.DS, 'ds-like 1 2'),
    ])
    def test_trust_anchor(self, line: str, kind: m.AnchorKind, data: str) -> None:
        res = parsing.parse_trust_anchor(line)
        assert res is not None
        self.assertEqual(res.kind, kind)
        self.assertEqual(res.data, data)
        self.assertEqual(parsing.serialize_trust_anchor(res), line)

    @parameterized.parameterized.expand([
        ('"x" weird 1 2',),
        ('"x"',),
        ('',),
    ])
    def test_trust_anchor_unknown(self, line: str) -> None:
        self.assertIsNone(parsing.parse_trust_anchor(line))

    def test_file_destination(self) -> None:
        res = parsing.parse_file_destination('"named.log" versions 3 size 5m')
        self.assertEqual(res, m.FileDestination(path='named.log', versions=3, size='5m'))
        self.assertEqual(parsing.serialize_file_destination(res), '"named.log" versions 3 size 5m')

        res = parsing.parse_file_destination('"n.log" versions unlimited suffix timestamp')
        self.assertEqual(res, m.FileDestination(path='n.log', versions='unlimited', suffix='timestamp'))

    def test_category(self) -> None:
        res = parsing.parse_category('default { default_syslog; "x"; }')
        self.assertEqual(res, m.LogCategory(name='default', channels=['default_syslog', 'x']))
        self.assertEqual(parsing.serialize_category(res), '"default" { "default_syslog"; "x"; }')


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
