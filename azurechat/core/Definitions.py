"""
Descriptors handed to the host editor.

Port, editor and UI descriptors are plain dataclasses with ``to_dict()``
producing the camelCase wire shape the editor expects.  Node instances and
their data are pydantic models because they are persisted inside the graph
document and have to round-trip through it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from .Types import ValueType


# ── Ports ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NodeInputDefinition:
    id: str
    data_type: ValueType
    title: str
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":       self.id,
            "dataType": self.data_type.value,
            "title":    self.title,
            "required": self.required,
        }


@dataclass(frozen=True)
class NodeOutputDefinition:
    id: str
    data_type: ValueType
    title: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":       self.id,
            "dataType": self.data_type.value,
            "title":    self.title,
        }


# ── Editors ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EditorDefinition:
    type: str                                 # 'number' | 'toggle'
    label: str
    data_key: str
    use_input_toggle_data_key: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    allow_empty: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type":    self.type,
            "label":   self.label,
            "dataKey": self.data_key,
        }
        optional = {
            "useInputToggleDataKey": self.use_input_toggle_data_key,
            "min":                   self.min,
            "max":                   self.max,
            "step":                  self.step,
            "allowEmpty":            self.allow_empty,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out


# ── Palette / info box ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NodeUIData:
    group: List[str] = field(default_factory=list)
    context_menu_title: str = ""
    info_box_title: str = ""
    info_box_body: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group":            list(self.group),
            "contextMenuTitle": self.context_menu_title,
            "infoBoxTitle":     self.info_box_title,
            "infoBoxBody":      self.info_box_body,
        }


# ── Persisted node ────────────────────────────────────────────────────────────

class NodeData(BaseModel):
    """
    Base for per-node configuration.  Field aliases are the graph document
    keys, and unknown keys found in a document are kept as-is.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def get(self, key: str, default: Any = None) -> Any:
        """Look a value up by its graph document key (or field name)."""
        name = _field_names(type(self)).get(key)
        if name is not None:
            value = getattr(self, name)
        else:
            value = (self.model_extra or {}).get(key)
        return default if value is None else value


@lru_cache(maxsize=None)
def _field_names(model: Type[NodeData]) -> Dict[str, str]:
    """Document key and attribute name -> attribute name, per model class."""
    names: Dict[str, str] = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


class VisualData(BaseModel):
    x: float = 0
    y: float = 0
    width: Optional[float] = None


class ChartNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    title: str
    data: NodeData
    visual_data: VisualData = Field(default_factory=VisualData, alias="visualData")

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude={"data"})
        doc["data"] = self.data.model_dump(by_alias=True, exclude_none=True)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any], data_model: Type[NodeData] = NodeData) -> 'ChartNode':
        fields = dict(doc)
        fields["data"] = data_model.model_validate(fields.get("data") or {})
        return cls.model_validate(fields)
