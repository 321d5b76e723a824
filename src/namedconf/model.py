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

# The typed view of a named.conf.
#
# Conventions:
# - Scalars that may be missing are Optional and None means "not set".
# - Lists that belong to a single statement (e.g. allow-query) are
#   Optional[list]: None means that the statement is missing, [] means that
#   it exists but is empty.
# - Lists of blocks (zones, channels, ...) are plain lists.
# - Every block has an "other" list with the child statements that are not
#   modeled. They are written back verbatim.

import enum
import dataclasses as dc

import namedconf.cst

from typing import Optional, Union


@dc.dataclass
class RawOption:
    """An unmodeled child statement: keyword and everything after it."""
    name: str
    raw: str = ''


# Address match lists

@dc.dataclass(kw_only=True)
class MatchElement:
    negated: bool = False

    @property
    def kind(self) -> str:
        raise NotImplementedError


@dc.dataclass(kw_only=True)
class AddressMatch(MatchElement):
    address: str

    @property
    def kind(self) -> str:
        return 'address'


@dc.dataclass(kw_only=True)
class KeyMatch(MatchElement):
    key: str

    @property
    def kind(self) -> str:
        return 'key'


@dc.dataclass(kw_only=True)
class AclMatch(MatchElement):
    acl_ref: str

    @property
    def kind(self) -> str:
        return 'acl'


@dc.dataclass(kw_only=True)
class NestedMatch(MatchElement):
    elements: list[MatchElement] = dc.field(default_factory=list)

    @property
    def kind(self) -> str:
        return 'nested'


MatchList = list[MatchElement]


@dc.dataclass
class Include:
    path: str


@dc.dataclass
class ACL:
    name: str
    elements: MatchList = dc.field(default_factory=list)


@dc.dataclass
class Key:
    name: str
    algorithm: str = ''
    secret: str = ''
    other: list[RawOption] = dc.field(default_factory=list)


@dc.dataclass
class KeyStore:
    name: str
    pkcs11_uri: Optional[str] = None
    other: list[RawOption] = dc.field(default_factory=list)


@dc.dataclass
class RemoteServer:
    address: str
    port: Optional[int] = None
    key: Optional[str] = None
    tls: Optional[str] = None


@dc.dataclass
class RemoteServers:
    name: str
    servers: list[RemoteServer] = dc.field(default_factory=list)


@dc.dataclass
class TLS:
    name: str
    ca_file: Optional[str] = None
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    cipher_suites: Optional[str] = None
    ciphers: Optional[str] = None
    dhparam_file: Optional[str] = None
    prefer_server_ciphers: Optional[bool] = None
    protocols: Optional[list[str]] = None
    remote_hostname: Optional[str] = None
    session_tickets: Optional[bool] = None
    other: list[RawOption] = dc.field(default_factory=list)


@dc.dataclass
class HTTP:
    name: str
    endpoints: Optional[list[str]] = None
    listener_clients: Optional[int] = None
    streams_per_connection: Optional[int] = None
    other: list[RawOption] = dc.field(default_factory=list)


# Controls

@dc.dataclass
class ControlInet:
    address: str
    port: Optional[int] = None
    allow: MatchList = dc.field(default_factory=list)
    keys: Optional[list[str]] = None
    read_only: Optional[bool] = None


@dc.dataclass
class ControlUnix:
    path: str
    perm: int = 0
    owner: int = 0
    group: int = 0
    keys: Optional[list[str]] = None
    read_only: Optional[bool] = None


@dc.dataclass
class Controls:
    inet: list[ControlInet] = dc.field(default_factory=list)
    unix: list[ControlUnix] = dc.field(default_factory=list)
    other: list[RawOption] = dc.field(default_factory=list)


# Logging

@dc.dataclass(kw_only=True)
class LogDestination:
    @property
    def kind(self) -> str:
        raise NotImplementedError


@dc.dataclass(kw_only=True)
class FileDestination(LogDestination):
    path: str
    # An int, or 'unlimited'
    versions: Optional[Union[int, str]] = None
    size: Optional[str] = None
    suffix: Optional[str] = None

    @property
    def kind(self) -> str:
        return 'file'


@dc.dataclass(kw_only=True)
class SyslogDestination(LogDestination):
    facility: Optional[str] = None

    @property
    def kind(self) -> str:
        return 'syslog'


@dc.dataclass(kw_only=True)
class StderrDestination(LogDestination):
    @property
    def kind(self) -> str:
        return 'stderr'


@dc.dataclass(kw_only=True)
class NullDestination(LogDestination):
    @property
    def kind(self) -> str:
        return 'null'


@dc.dataclass
class LogChannel:
    name: str
    destination: Optional[LogDestination] = None
    severity: Optional[str] = None
    print_time: Optional[bool] = None
    print_category: Optional[bool] = None
    print_severity: Optional[bool] = None
    buffered: Optional[bool] = None
    other: list[RawOption] = dc.field(default_factory=list)


@dc.dataclass
class LogCategory:
    name: str
    # Delivery order
    channels: list[str] = dc.field(default_factory=list)


@dc.dataclass
class Logging:
    channels: list[LogChannel] = dc.field(default_factory=list)
    categories: list[LogCategory] = dc.field(default_factory=list)
    other: list[RawOption] = dc.field(default_factory=list)


# Options

@dc.dataclass
class Listen:
    port: Optional[int] = None
    tls: Optional[str] = None
    http: Optional[str] = None
    addresses: MatchList = dc.field(default_factory=list)


@dc.dataclass
class Forwarder:
    address: str
    port: Optional[int] = None
    tls: Optional[str] = None


@dc.dataclass
class RRsetOrder:
    order: str
    rrclass: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None


@dc.dataclass
class Options:
    directory: Optional[str] = None
    recursion: Optional[bool] = None
    allow_query: Optional[MatchList] = None
    allow_transfer: Optional[MatchList] = None
    allow_update: Optional[MatchList] = None
    listen_on: Optional[Listen] = None
    listen_on_v6: Optional[Listen] = None
    forwarders: Optional[list[Forwarder]] = None
    forward: Optional[str] = None
    dnssec_validation: Optional[str] = None
    rrset_order: Optional[list[RRsetOrder]] = None
    other: list[RawOption] = dc.field(default_factory=list)


# Trust anchors

class AnchorKind(enum.Enum):
    DS = 'ds'
    DNSKEY = 'dnskey'


@dc.dataclass
class TrustAnchor:
    name: str
    kind: AnchorKind
    # Everything after the name, e.g. 'initial-ds 20326 8 2 "E06D..."'
    data: str


@dc.dataclass
class TrustAnchors:
    anchors: list[TrustAnchor] = dc.field(default_factory=list)
    other: list[RawOption] = dc.field(default_factory=list)


# Zones and views

class ZoneType(enum.Enum):
    PRIMARY = 'primary'
    SECONDARY = 'secondary'
    STUB = 'stub'
    MIRROR = 'mirror'
    REDIRECT = 'redirect'
    FORWARD = 'forward'
    STATIC_STUB = 'static-stub'
    HINT = 'hint'


@dc.dataclass(kw_only=True)
class Primaries:
    @property
    def kind(self) -> str:
        raise NotImplementedError


@dc.dataclass(kw_only=True)
class PrimariesRef(Primaries):
    """Refers to a remote-servers block by name."""
    ref: str

    @property
    def kind(self) -> str:
        return 'ref'


@dc.dataclass(kw_only=True)
class PrimariesList(Primaries):
    servers: list[RemoteServer] = dc.field(default_factory=list)

    @property
    def kind(self) -> str:
        return 'list'


@dc.dataclass
class Zone:
    name: str
    zone_class: Optional[str] = None
    type: Optional[ZoneType] = None
    file: Optional[str] = None
    primaries: Optional[Primaries] = None
    forwarders: Optional[list[Forwarder]] = None
    forward: Optional[str] = None
    allow_update: Optional[MatchList] = None
    allow_transfer: Optional[MatchList] = None
    also_notify: Optional[list[RemoteServer]] = None
    dnssec_policy: Optional[str] = None
    other: list[RawOption] = dc.field(default_factory=list)


@dc.dataclass
class View:
    name: str
    view_class: Optional[str] = None
    match_clients: Optional[MatchList] = None
    match_destinations: Optional[MatchList] = None
    recursion: Optional[bool] = None
    trust_anchors: Optional[TrustAnchors] = None
    zones: list[Zone] = dc.field(default_factory=list)
    includes: list[Include] = dc.field(default_factory=list)
    other: list[RawOption] = dc.field(default_factory=list)


@dc.dataclass
class NamedConf:
    """The root of the typed view.

    Collections are kept in file order. Names are not required to be unique:
    the lookup helpers below return the first match.
    """
    includes: list[Include] = dc.field(default_factory=list)
    acls: list[ACL] = dc.field(default_factory=list)
    keys: list[Key] = dc.field(default_factory=list)
    key_stores: list[KeyStore] = dc.field(default_factory=list)
    remote_servers: list[RemoteServers] = dc.field(default_factory=list)
    tls: list[TLS] = dc.field(default_factory=list)
    http: list[HTTP] = dc.field(default_factory=list)
    controls: Optional[Controls] = None
    logging: Optional[Logging] = None
    options: Optional[Options] = None
    trust_anchors: list[TrustAnchors] = dc.field(default_factory=list)
    views: list[View] = dc.field(default_factory=list)
    zones: list[Zone] = dc.field(default_factory=list)

    # The tree this was read from. Only used by namedconf.api.save()
    tree: Optional[namedconf.cst.File] = dc.field(default=None, repr=False, compare=False)

    def get_zone(self, name: str) -> Optional[Zone]:
        """Returns the first zone with that name, looking at top-level zones first and then in views."""
        for zone in self.zones:
            if zone.name == name:
                return zone
        for view in self.views:
            for zone in view.zones:
                if zone.name == name:
                    return zone
        return None

    def upsert_zone(self, zone: Zone) -> None:
        """Replaces the first top-level zone with the same name or appends it."""
        for i, z in enumerate(self.zones):
            if z.name == zone.name:
                self.zones[i] = zone
                return
        self.zones.append(zone)

    def remove_zone(self, name: str) -> bool:
        """Removes all top-level zones with that name.

        @return True if something was removed
        """
        count = len(self.zones)
        self.zones = [x for x in self.zones if x.name != name]
        return len(self.zones) != count

    def find_view(self, name: str) -> Optional[View]:
        for view in self.views:
            if view.name == name:
                return view
        return None

    def upsert_view(self, view: View) -> None:
        for i, v in enumerate(self.views):
            if v.name == view.name:
                self.views[i] = view
                return
        self.views.append(view)

    def remove_view(self, name: str) -> bool:
        count = len(self.views)
        self.views = [x for x in self.views if x.name != name]
        return len(self.views) != count

    def set_recursion(self, recursion: bool) -> None:
        """Sets options.recursion, creating the options block if needed."""
        if self.options is None:
            self.options = Options()
        self.options.recursion = recursion

    def upsert_zone_in_view(self, view_name: str, zone: Zone) -> None:
        """Replaces or appends a zone in a view. A missing view is created."""
        view = self.find_view(view_name)
        if view is None:
            self.views.append(View(name=view_name, zones=[zone]))
            return

        for i, z in enumerate(view.zones):
            if z.name == zone.name:
                view.zones[i] = zone
                return
        view.zones.append(zone)

    def remove_zone_in_view(self, view_name: str, zone_name: str) -> bool:
        view = self.find_view(view_name)
        if view is None:
            return False

        count = len(view.zones)
        view.zones = [x for x in view.zones if x.name != zone_name]
        return len(view.zones) != count

    def set_trust_anchors_in_view(self, view_name: str, trust_anchors: TrustAnchors) -> None:
        view = self.find_view(view_name)
        if view is None:
            self.views.append(View(name=view_name, trust_anchors=trust_anchors))
            return
        view.trust_anchors = trust_anchors


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
