"""
Plugin-scoped configuration.

A plugin declares its settings in a config spec; ``PluginConfig`` resolves
them for a run.  An explicitly configured value wins, otherwise the spec's
environment variable is read.  ``from_env`` loads a ``.env`` file first so
secrets such as AZURE_ACCESS_TOKEN are available without a manual ``export``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class PluginConfigError(KeyError):
    """Raised when reading a setting the plugin never declared."""


@dataclass(frozen=True)
class PluginConfigSpec:
    type: str                                   # 'string' | 'secret' | ...
    label: str
    description: str = ""
    pull_environment_variable: Optional[str] = None
    helper_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type":        self.type,
            "label":       self.label,
            "description": self.description,
        }
        if self.pull_environment_variable:
            out["pullEnvironmentVariable"] = self.pull_environment_variable
        if self.helper_text:
            out["helperText"] = self.helper_text
        return out


class PluginConfig(Mapping[str, Any]):
    def __init__(self,
                 spec: Mapping[str, PluginConfigSpec],
                 values: Optional[Mapping[str, Any]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.spec = dict(spec)
        self._values = dict(values or {})
        self._environ = environ if environ is not None else os.environ

        unknown = set(self._values) - set(self.spec)
        if unknown:
            raise PluginConfigError(f"Unknown plugin settings: {sorted(unknown)}")

    @classmethod
    def from_env(cls,
                 spec: Mapping[str, PluginConfigSpec],
                 values: Optional[Mapping[str, Any]] = None,
                 env_file: Optional[str] = None) -> 'PluginConfig':
        if env_file is not None:
            loaded = load_dotenv(env_file)
        else:
            loaded = load_dotenv()
        logger.debug(f"dotenv loaded: {loaded}")
        return cls(spec, values)

    def __getitem__(self, key: str) -> Any:
        if key not in self.spec:
            raise PluginConfigError(f"'{key}' is not a setting of this plugin")

        value = self._values.get(key)
        if value not in (None, ""):
            return value

        env_name = self.spec[key].pull_environment_variable
        if env_name:
            env_value = self._environ.get(env_name)
            if env_value:
                return env_value

        return None

    def get(self, key: str, default: Any = None) -> Any:
        value = self[key]
        return default if value is None else value

    def __iter__(self) -> Iterator[str]:
        return iter(self.spec)

    def __len__(self) -> int:
        return len(self.spec)
