# Serializes the typed model to JSON and YAML
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

import json
import enum
import dataclasses as dc

import yaml

import namedconf.model

from typing import Any

# Fields that are never exported
SKIP_FIELDS = ('tree',)

# Base classes of the tagged variants. Their instances get a "kind" entry.
TAGGED = (namedconf.model.MatchElement, namedconf.model.LogDestination, namedconf.model.Primaries)


def camel_case(name: str) -> str:
    """Converts a field name like zone_class to zoneClass."""
    first, *rest = name.split('_')
    return first + ''.join(x.capitalize() for x in rest)


def _convert(value: Any) -> Any:
    if dc.is_dataclass(value):
        return _dataclass_to_dict(value)
    if isinstance(value, list):
        return [_convert(x) for x in value]
    if isinstance(value, enum.Enum):
        return value.value
    return value


def _dataclass_to_dict(obj: Any) -> dict[str, Any]:
    ret: dict[str, Any] = {}
    if isinstance(obj, TAGGED):
        ret['kind'] = obj.kind
    for field in dc.fields(obj):
        if field.name in SKIP_FIELDS:
            continue
        value = getattr(obj, field.name)
        if value is None:
            continue
        ret[camel_case(field.name)] = _convert(value)
    return ret


def to_dict(conf: namedconf.model.NamedConf) -> dict[str, Any]:
    """Returns a plain dict with the contents of conf.

    Missing values are omitted. Lists are always present, even when empty.
    """
    return _dataclass_to_dict(conf)


def to_json(conf: namedconf.model.NamedConf) -> str:
    return json.dumps(to_dict(conf), indent=2)


def to_yaml(conf: namedconf.model.NamedConf) -> str:
    return yaml.safe_dump(to_dict(conf), sort_keys=False)


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
