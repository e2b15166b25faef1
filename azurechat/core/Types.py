from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict


class ValueType(Enum):
    ANY = "any"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"

    @staticmethod
    def validate(value: Any, data_type: 'ValueType') -> bool:
        if data_type == ValueType.ANY:
            return True
        if value is None:
            return False

        if data_type == ValueType.STRING:
            return isinstance(value, str)
        elif data_type == ValueType.NUMBER:
            # bool is an int subclass, but a toggle is not a number
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        elif data_type == ValueType.BOOLEAN:
            return isinstance(value, bool)

        return False


@dataclass(frozen=True)
class DataValue:
    """
    A tagged value travelling along a port: ``{type: 'string', value: ...}``.
    """
    type: ValueType
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "value": self.value}


# Port id -> tagged value. Used for both resolved inputs and node outputs.
Inputs = Dict[str, DataValue]
Outputs = Dict[str, DataValue]
