"""
The "OpenAI on Azure" plugin: what a host loads to get the ChatAzure node.

Hosts call ``azure_plugin.register(registry.register)`` once at load time and
build a ``PluginConfig`` from ``azure_plugin.config_spec`` for the secrets the
node reads at run time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.NodeImpl import PluginNodeDefinition, RegisterFn
from ..nodes.ChatAzureNode import ACCESS_TOKEN_KEY, ChatAzureNode
from .config import PluginConfig, PluginConfigSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextMenuGroup:
    id: str
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label}


@dataclass
class Plugin:
    id: str
    name: str
    config_spec: Dict[str, PluginConfigSpec] = field(default_factory=dict)
    context_menu_groups: List[ContextMenuGroup] = field(default_factory=list)
    nodes: List[PluginNodeDefinition] = field(default_factory=list)

    def register(self, register: RegisterFn) -> None:
        for definition in self.nodes:
            logger.info(f"[{self.id}] registering {definition.display_name}")
            register(definition)

    def create_config(self,
                      values: Optional[Mapping[str, Any]] = None,
                      env_file: Optional[str] = None) -> PluginConfig:
        return PluginConfig.from_env(self.config_spec, values, env_file=env_file)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":                self.id,
            "name":              self.name,
            "configSpec":        {k: v.to_dict() for k, v in self.config_spec.items()},
            "contextMenuGroups": [g.to_dict() for g in self.context_menu_groups],
        }


azure_plugin = Plugin(
    id="azure",
    name="OpenAI on Azure",
    config_spec={
        ACCESS_TOKEN_KEY: PluginConfigSpec(
            type="secret",
            label="Open AI on Azure Token",
            description="Your access token for Open AI on Azure.",
            pull_environment_variable="AZURE_ACCESS_TOKEN",
            helper_text="Retrieve your token from Azure Portal",
        ),
    },
    context_menu_groups=[
        ContextMenuGroup(id="azure", label="OpenAI on Azure"),
    ],
    nodes=[ChatAzureNode],
)
