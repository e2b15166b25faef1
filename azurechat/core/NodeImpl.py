from typing import Any, Callable, Dict, List, Optional, Type
import logging

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .Definitions import (
    ChartNode,
    EditorDefinition,
    NodeData,
    NodeInputDefinition,
    NodeOutputDefinition,
    NodeUIData,
)
from .ProcessContext import InternalProcessContext
from .Types import Inputs, Outputs


# Get a logger for this module
logger = logging.getLogger(__name__)


class PluginNodeImpl(ABC):
    """
    Everything the host needs to know about one node type.

    The metadata methods are pure functions of the node data passed in; the
    only method with side effects is ``process``.
    """

    # Graph document ``type`` written by ``create()``
    node_type: str = ""

    # Model used to load this node's ``data`` back from a graph document
    data_model: Type[NodeData] = NodeData

    @abstractmethod
    def create(self) -> ChartNode:
        pass

    @abstractmethod
    def get_ui_data(self) -> NodeUIData:
        pass

    @abstractmethod
    def get_input_definitions(self, data: NodeData) -> List[NodeInputDefinition]:
        pass

    @abstractmethod
    def get_output_definitions(self, data: Optional[NodeData] = None) -> List[NodeOutputDefinition]:
        pass

    def get_editors(self) -> List[EditorDefinition]:
        return []

    def get_body(self, data: NodeData) -> Optional[str]:
        return None

    @abstractmethod
    async def process(self, data: NodeData, inputs: Inputs, context: InternalProcessContext) -> Outputs:
        pass

    def load_node(self, doc: Dict[str, Any]) -> ChartNode:
        """Rebuild a node of this type from its graph document entry."""
        return ChartNode.from_document(doc, data_model=self.data_model)


@dataclass(frozen=True)
class PluginNodeDefinition:
    impl: PluginNodeImpl
    display_name: str
    kind: str = "plugin"

    @property
    def node_type(self) -> str:
        return self.impl.node_type


def plugin_node_definition(impl: PluginNodeImpl, display_name: str) -> PluginNodeDefinition:
    return PluginNodeDefinition(impl=impl, display_name=display_name)


class NodeRegistry:
    """
    Node types known to a host, keyed by graph document type.

    ``register`` is the callback handed to a plugin's ``register()``.
    """

    def __init__(self) -> None:
        self._definitions: Dict[str, PluginNodeDefinition] = {}

    def register(self, definition: PluginNodeDefinition) -> PluginNodeDefinition:
        type_name = definition.node_type
        if type_name in self._definitions:
            raise ValueError(f"Node type '{type_name}' is already registered.")
        self._definitions[type_name] = definition
        logger.info(f"Registered node type '{type_name}' ({definition.display_name})")
        return definition

    def get(self, type_name: str) -> PluginNodeDefinition:
        if type_name not in self._definitions:
            raise ValueError(f"Unknown node type '{type_name}'")
        return self._definitions[type_name]

    def create_node(self, type_name: str) -> ChartNode:
        """Factory method to create a fresh node instance by type name."""
        return self.get(type_name).impl.create()

    def definitions(self) -> List[PluginNodeDefinition]:
        return list(self._definitions.values())

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


RegisterFn = Callable[[PluginNodeDefinition], Any]
