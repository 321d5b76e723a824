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

import namedconf.cst
import namedconf.common
import namedconf.loader
import namedconf.model as m
from namedconf import sync
from namedconf import conf_testlib

File = namedconf.cst.File


def encode(text: str, positional: bool = False) -> str:
    tree = File.parse(text)
    conf = namedconf.loader.decode(tree)
    return sync.apply(conf, positional=positional).render()


class ApplyTest(unittest.TestCase):

    def test_roundtrip(self) -> None:
        out = encode(conf_testlib.CONF)
        conf = namedconf.loader.decode(File.parse(out))
        self.assertEqual(conf, conf_testlib.expected())

    def test_non_interference(self) -> None:
        out = encode(conf_testlib.CONF)
        self.assertTrue(out.startswith('// Sample\n' + conf_testlib.SERVER_BLOCK + '\n\n'))

    def test_idempotent(self) -> None:
        out = encode(conf_testlib.CONF)
        self.assertEqual(encode(out), out)

    @parameterized.parameterized.expand([
        (False,),
        (True,),
    ])
    def test_idempotent_mode(self, positional: bool) -> None:
        out = encode(conf_testlib.CONF, positional)
        self.assertEqual(encode(out, positional), out)

    @parameterized.parameterized.expand([
        ('options', m.NamedConf(options=m.Options(other=[
            m.RawOption(name='max-cache-size', raw='1'),
            m.RawOption(name='listen-on', raw='{ any; }'),
        ]))),
        ('options_typed', m.NamedConf(options=m.Options(
            forwarders=[m.Forwarder(address='1.1.1.1')],
            other=[m.RawOption(name='listen-on', raw='{ any; }'),
                   m.RawOption(name='listen-on', raw='port 5353 { any; }')],
        ))),
        ('zone', m.NamedConf(zones=[m.Zone(name='a', other=[
            m.RawOption(name='file', raw='"db.a"'),
            m.RawOption(name='type', raw='primary'),
        ])])),
        ('key', m.NamedConf(keys=[m.Key(name='k', other=[
            m.RawOption(name='secret', raw='"abc="'),
            m.RawOption(name='algorithm', raw='hmac-sha256'),
        ])])),
        ('view', m.NamedConf(views=[m.View(
            name='v',
            other=[m.RawOption(name='trust-anchors', raw='{ "." static-ds 1 8 2 "AA"; }'),
                   m.RawOption(name='recursion', raw='no')],
            zones=[m.Zone(name='z', type=m.ZoneType.HINT)],
        )])),
    ])
    def test_idempotent_model(self, _name: str, conf: m.NamedConf) -> None:
        out = sync.apply(conf, File()).render()
        self.assertEqual(encode(out), out)

    def test_other_with_modeled_name(self) -> None:
        conf = m.NamedConf(options=m.Options(other=[
            m.RawOption(name='max-cache-size', raw='1'),
            m.RawOption(name='listen-on', raw='{ any; }'),
        ]))
        self.assertEqual(sync.apply(conf, File()).render(),
                         'options {\n\tlisten-on { any; };\n\tmax-cache-size 1;\n};\n')

    def test_view_trust_anchors_twice(self) -> None:
        text = ('view "v" {\n'
                '\ttrust-anchors { "a." static-ds 1 8 2 "AA"; };\n'
                '\ttrust-anchors { "b." static-ds 1 8 2 "BB"; };\n'
                '};\n')
        with self.assertLogs(level='INFO'):
            out = encode(text)
        self.assertIn('"a." static-ds 1 8 2 "AA";', out)
        self.assertIn('"b." static-ds 1 8 2 "BB";', out)
        with self.assertLogs(level='INFO'):
            self.assertEqual(encode(out), out)

    def test_empty_views(self) -> None:
        tree = File.parse(conf_testlib.CONF)
        conf = namedconf.loader.decode(tree)
        conf.views = []
        conf.options = None
        sync.apply(conf)

        self.assertEqual(tree.statements('view'), [])
        self.assertEqual(tree.statements('options'), [])
        self.assertEqual(len(tree.statements('zone')), 1)

        conf2 = namedconf.loader.decode(File.parse(tree.render()))
        self.assertEqual(conf2.views, [])
        self.assertIsNone(conf2.options)

    def test_positional(self) -> None:
        text = 'options {\n\trecursion no;\n};\nzone "a" {\n\ttype hint;\n};\n// end\n'
        self.assertEqual(encode(text, positional=True), text)
        self.assertEqual(encode(text),
                         '\n// end\noptions {\n\trecursion no;\n};\nzone "a" {\n\ttype hint;\n};\n')

    def test_changes(self) -> None:
        tree = File.parse('# top\noptions { recursion no; };\n')
        conf = namedconf.loader.decode(tree)
        conf.set_recursion(True)
        conf.upsert_zone(m.Zone(name='example.com', type=m.ZoneType.PRIMARY, file='db'))
        self.assertEqual(sync.apply(conf).render(),
                         '# top\noptions {\n\trecursion yes;\n};\n'
                         'zone "example.com" {\n\ttype primary;\n\tfile "db";\n};\n')

    def test_explicit_tree(self) -> None:
        conf = m.NamedConf(options=m.Options(recursion=True))
        self.assertEqual(sync.apply(conf, File()).render(), 'options {\n\trecursion yes;\n};\n')

    def test_missing_tree(self) -> None:
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(namedconf.common.AbortError):
                sync.apply(m.NamedConf())


class BuildTest(unittest.TestCase):

    def test_zone(self) -> None:
        zone = m.Zone(name='example.com', zone_class='IN', type=m.ZoneType.SECONDARY,
                      primaries=m.PrimariesRef(ref='prim'), allow_transfer=[],
                      other=[m.RawOption(name='notify', raw='explicit')])
        self.assertEqual(sync.build_zone(zone).text,
                         'zone "example.com" IN {\n'
                         '\ttype secondary;\n'
                         '\tprimaries prim;\n'
                         '\tallow-transfer { };\n'
                         '\tnotify explicit;\n'
                         '};')

    def test_zone_quoted_primaries(self) -> None:
        zone = m.Zone(name='a', primaries=m.PrimariesRef(ref='my.list'))
        self.assertEqual(sync.build_zone(zone).text, 'zone "a" {\n\tprimaries "my.list";\n};')

    def test_view(self) -> None:
        view = m.View(name='v', match_clients=[m.AclMatch(acl_ref='any')], recursion=False,
                      zones=[m.Zone(name='z')], includes=[m.Include(path='/x.conf')],
                      other=[m.RawOption(name='allow-query', raw='{ none; }')])
        self.assertEqual(sync.build_view(view).text,
                         'view "v" {\n'
                         '\tmatch-clients { any; };\n'
                         '\trecursion no;\n'
                         '\tallow-query { none; };\n'
                         '\tzone "z" {\n'
                         '\t};\n'
                         '\tinclude "/x.conf";\n'
                         '};')

    def test_acl(self) -> None:
        acl = m.ACL(name='a', elements=[m.AddressMatch(address='10.0.0.0/8'), m.KeyMatch(key='k', negated=True)])
        self.assertEqual(sync.build_acl(acl).text, 'acl "a" {\n\t10.0.0.0/8;\n\t!key "k";\n};')

    def test_key(self) -> None:
        key = m.Key(name='k', algorithm='hmac-sha256', secret='abc=')
        self.assertEqual(sync.build_key(key).text, 'key "k" {\n\talgorithm hmac-sha256;\n\tsecret "abc=";\n};')

    def test_controls(self) -> None:
        controls = m.Controls(inet=[m.ControlInet(address='*', allow=[m.AclMatch(acl_ref='localhost')])],
                              unix=[m.ControlUnix(path='/s', perm=0o660, owner=1, group=2, read_only=True)])
        self.assertEqual(sync.build_controls(controls).text,
                         'controls {\n'
                         '\tinet * allow { localhost; };\n'
                         '\tunix "/s" perm 0660 owner 1 group 2 read-only yes;\n'
                         '};')

    def test_logging(self) -> None:
        lg = m.Logging(
            channels=[m.LogChannel(name='c', destination=m.SyslogDestination(facility='daemon'),
                                   severity='dynamic'),
                      m.LogChannel(name='n', destination=m.NullDestination())],
            categories=[m.LogCategory(name='lame-servers', channels=['n'])],
        )
        self.assertEqual(sync.build_logging(lg).text,
                         'logging {\n'
                         '\tchannel "c" {\n'
                         '\t\tsyslog daemon;\n'
                         '\t\tseverity dynamic;\n'
                         '\t};\n'
                         '\tchannel "n" {\n'
                         '\t\tnull;\n'
                         '\t};\n'
                         '\tcategory "lame-servers" { "n"; };\n'
                         '};')

    def test_options(self) -> None:
        opts = m.Options(
            listen_on_v6=m.Listen(addresses=[m.AclMatch(acl_ref='none')]),
            forwarders=[],
            rrset_order=[m.RRsetOrder(order='random')],
            allow_update=[m.AclMatch(acl_ref='none')],
        )
        self.assertEqual(sync.build_options(opts).text,
                         'options {\n'
                         '\tallow-update { none; };\n'
                         '\tlisten-on-v6 { none; };\n'
                         '\tforwarders { };\n'
                         '\trrset-order { order random; };\n'
                         '};')

    def test_trust_anchors(self) -> None:
        ta = m.TrustAnchors(anchors=[m.TrustAnchor(name='.', kind=m.AnchorKind.DS, data='static-ds 1 8 2 "AB"')])
        self.assertEqual(sync.build_trust_anchors(ta).text,
                         'trust-anchors {\n\t"." static-ds 1 8 2 "AB";\n};')


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
