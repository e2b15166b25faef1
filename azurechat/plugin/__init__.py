from .config import PluginConfig, PluginConfigError, PluginConfigSpec
from .azure_plugin import ContextMenuGroup, Plugin, azure_plugin
