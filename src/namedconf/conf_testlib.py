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

# Sample configuration and its decoded form, for tests

import namedconf.model as m

SERVER_BLOCK = '''server 10.0.0.2 {
	keys { "rndc-key"; };
};'''

CONF = '''// Sample
include "/etc/bind/extra.conf";

acl "internal" { 10.0.0.0/8; !192.168.1.1; key "xfer"; };

key "rndc-key" {
	algorithm hmac-sha256;
	secret "c2VjcmV0";
};

tls "dot" {
	cert-file "/etc/cert.pem";
	key-file "/etc/key.pem";
	protocols { "TLSv1.3"; };
	prefer-server-ciphers yes;
};

controls {
	inet 127.0.0.1 port 953 allow { allow; } keys { "rndc-key"; };
	unix "/run/named.ctl" perm 0600 owner 0 group 0;
};

logging {
	channel "main" {
		file "/var/log/named.log" versions 3 size 5m;
		severity info;
		print-time yes;
	};
	category default { main; };
};

options {
	directory "/var/named";
	recursion no;
	allow-query { any; };
	listen-on port 53 { 127.0.0.1; };
	listen-on port 5353 { 10.0.0.1; };
	forwarders { 8.8.8.8; };
	forward only;
	dnssec-validation auto;
	max-cache-size 512M;
};

''' + SERVER_BLOCK + '''

view "internal" IN {
	match-clients { internal; };
	recursion yes;
	trust-anchors {
		"." initial-key 257 3 8 "AwEAAa";
	};
	zone "example.com" {
		type primary;
		file "db.example.com";
		allow-update { key "rndc-key"; };
	};
};

zone "example.org" {
	type secondary;
	primaries { 192.0.2.1 port 5353; };
	notify no;
};
'''


def expected() -> m.NamedConf:
    """The typed view of CONF."""
    return m.NamedConf(
        includes=[m.Include(path='/etc/bind/extra.conf')],
        acls=[m.ACL(name='internal', elements=[
            m.AddressMatch(address='10.0.0.0/8'),
            m.AddressMatch(address='192.168.1.1', negated=True),
            m.KeyMatch(key='xfer'),
        ])],
        keys=[m.Key(name='rndc-key', algorithm='hmac-sha256', secret='c2VjcmV0')],
        tls=[m.TLS(name='dot', cert_file='/etc/cert.pem', key_file='/etc/key.pem', protocols=['TLSv1.3'],
                   prefer_server_ciphers=True)],
        controls=m.Controls(
            inet=[m.ControlInet(address='127.0.0.1', port=953, allow=[m.AclMatch(acl_ref='allow')],
                                keys=['rndc-key'])],
            unix=[m.ControlUnix(path='/run/named.ctl', perm=0o600)],
        ),
        logging=m.Logging(
            channels=[m.LogChannel(
                name='main',
                destination=m.FileDestination(path='/var/log/named.log', versions=3, size='5m'),
                severity='info',
                print_time=True,
            )],
            categories=[m.LogCategory(name='default', channels=['main'])],
        ),
        options=m.Options(
            directory='/var/named',
            recursion=False,
            allow_query=[m.AclMatch(acl_ref='any')],
            listen_on=m.Listen(port=53, addresses=[m.AddressMatch(address='127.0.0.1')]),
            forwarders=[m.Forwarder(address='8.8.8.8')],
            forward='only',
            dnssec_validation='auto',
            other=[
                m.RawOption(name='listen-on', raw='port 5353 { 10.0.0.1; }'),
                m.RawOption(name='max-cache-size', raw='512M'),
            ],
        ),
        views=[m.View(
            name='internal',
            view_class='IN',
            match_clients=[m.AclMatch(acl_ref='internal')],
            recursion=True,
            trust_anchors=m.TrustAnchors(anchors=[
                m.TrustAnchor(name='.', kind=m.AnchorKind.DNSKEY, data='initial-key 257 3 8 "AwEAAa"'),
            ]),
            zones=[m.Zone(
                name='example.com',
                type=m.ZoneType.PRIMARY,
                file='db.example.com',
                allow_update=[m.KeyMatch(key='rndc-key')],
            )],
        )],
        zones=[m.Zone(
            name='example.org',
            type=m.ZoneType.SECONDARY,
            primaries=m.PrimariesList(servers=[m.RemoteServer(address='192.0.2.1', port=5353)]),
            other=[m.RawOption(name='notify', raw='no')],
        )],
    )


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
