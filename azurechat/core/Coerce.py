"""
Type coercion for port values and the "use input or data" merge rule.

Every node parameter can either come from the node's own data or, when the
matching ``use<Key>Input`` flag is set, from a graph input port with the same
id.  ``get_input_or_data`` is the single place that decides which one wins.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from .Types import DataValue, Inputs, ValueType

logger = logging.getLogger(__name__)


class TypeCoercionError(TypeError):
    """Raised when a port value is missing or cannot be read as the expected type."""

    def __init__(self, expected: ValueType, value: Any, key: Optional[str] = None):
        self.expected = expected
        self.value = value
        self.key = key
        where = f" for '{key}'" if key else ""
        if value is None:
            message = f"Expected a {expected.value} value{where}, got nothing"
        else:
            message = f"Expected a {expected.value} value{where}, got {_describe(value)}"
        super().__init__(message)


def _describe(value: Any) -> str:
    if isinstance(value, DataValue):
        return f"{value.type.value} ({value.value!r})"
    return f"{type(value).__name__} ({value!r})"


def coerce_type(value: Any, expected: ValueType, key: Optional[str] = None) -> Any:
    """
    Unwrap *value* and return it if it is of type *expected*.

    *value* is normally a ``DataValue`` coming from an input port, but bare
    Python values are accepted too.  Missing values and type mismatches raise
    ``TypeCoercionError``; there is no lossy conversion between types.
    """
    if value is None:
        raise TypeCoercionError(expected, None, key)

    raw = value.value if isinstance(value, DataValue) else value

    if isinstance(value, DataValue) and expected != ValueType.ANY:
        if value.type not in (expected, ValueType.ANY):
            raise TypeCoercionError(expected, value, key)

    if not ValueType.validate(raw, expected):
        raise TypeCoercionError(expected, value, key)

    return raw


def toggle_key(key: str) -> str:
    """``maxNewTokens`` -> ``useMaxNewTokensInput``"""
    return f"use{key[:1].upper()}{key[1:]}Input"


def get_input_or_data(data: Any, inputs: Inputs, key: str,
                      value_type: ValueType = ValueType.STRING) -> Any:
    """
    Resolve parameter *key* for a node run.

    When the data's ``use<Key>Input`` flag is set and the input port *key*
    carries a value, that value wins and must be of *value_type*.  Otherwise
    the static data value is returned unchanged (possibly ``None``).
    """
    if data.get(toggle_key(key)):
        supplied = inputs.get(key)
        if supplied is not None:
            return coerce_type(supplied, value_type, key)
        logger.debug(f"'{key}' is toggled to use an input but none was supplied, using node data")

    return data.get(key)
