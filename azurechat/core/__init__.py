from .Types import DataValue, Inputs, Outputs, ValueType
from .Coerce import TypeCoercionError, coerce_type, get_input_or_data, toggle_key
from .Definitions import (
    ChartNode,
    EditorDefinition,
    NodeData,
    NodeInputDefinition,
    NodeOutputDefinition,
    NodeUIData,
    VisualData,
)
from .ProcessContext import InternalProcessContext
from .NodeImpl import NodeRegistry, PluginNodeDefinition, PluginNodeImpl, plugin_node_definition
