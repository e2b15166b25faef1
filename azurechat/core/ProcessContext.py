from typing import Any, Callable, Mapping, Optional

from .Types import Outputs


PartialOutputsCallback = Callable[[Outputs], None]


class InternalProcessContext:
    """
    Context object passed to a node's ``process()`` by the host.

    Carries the plugin-scoped configuration and the optional callback used to
    publish partial outputs while the node is still running.
    """
    def __init__(self,
                 node_id: str = "",
                 plugin_config: Optional[Mapping[str, Any]] = None,
                 on_partial_outputs: Optional[PartialOutputsCallback] = None):
        self.node_id = node_id
        self.plugin_config = plugin_config if plugin_config is not None else {}
        self.on_partial_outputs = on_partial_outputs

    def get_plugin_config(self, key: str) -> Any:
        return self.plugin_config.get(key)
