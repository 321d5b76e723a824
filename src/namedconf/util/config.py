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

# Command line configuration.
#
# The runner owns a global Config with the options that all utilities share
# (-d, --info, the selected utility). Each utility registers its own config
# object with set_module_config() from its add_args(). get_config() returns a
# view over all of them: attributes are looked up in the global config first
# and then in the utility configs, in registration order.

__all__ = ['Config', 'MergedConfig', 'get_config', 'set_module_config']

import dataclasses as dc

from typing import Any, Optional


@dc.dataclass
class Config:
    util: Optional[str] = None  # Fixed utility name, or None to select it from the command line

    debug: bool = False
    info: bool = False
    what: Optional[str] = None  # The selected utility
    module: Any = None  # The module that implements it


class MergedConfig:
    cfgs: tuple[object, ...]

    def __init__(self, *cfgs: object):
        self.cfgs = cfgs

    def _owner(self, name: str) -> object:
        """Returns the first config that has the attribute name.

        @raise AttributeError   If none has it
        """
        for cfg in self.cfgs:
            if hasattr(cfg, name):
                return cfg
        raise AttributeError(name)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._owner(name), name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == 'cfgs':
            object.__setattr__(self, name, value)
        else:
            setattr(self._owner(name), name, value)

    def __str__(self) -> str:
        return 'MergedConfig({})'.format(', '.join(str(x) for x in self.cfgs))


_config = Config()
_module_configs: dict[str, object] = {}
_merged_config = MergedConfig(_config)


def set_module_config(module: str, cfg: object) -> None:
    """Registers the config of a utility. A second registration under the same name is ignored."""
    global _merged_config

    if module in _module_configs:
        return

    _module_configs[module] = cfg
    _merged_config = MergedConfig(_config, *_module_configs.values())


def get_config() -> MergedConfig:
    return _merged_config


# vim: set ts=8 sts=4 sw=4 et formatoptions=r ai nocindent:
