"""
Format-neutral value model.

Every conversion pivots through plain Python objects:

- ``None`` for Null
- ``bool`` for Bool
- ``int`` / ``float`` for Number
- ``str`` for String
- ``list`` for List
- ``dict`` with ``str`` keys for Map

This module classifies those objects and renders scalars the same way for
every output format.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Union

Value = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

FLATTEN_SEPARATOR = " | "


class ValueKind(Enum):
    """Kinds of the value model."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    MAP = "map"


def kind_of(value: Any) -> ValueKind:
    """Classify a value.

    Args:
        value: Any value produced by a parser

    Returns:
        The ValueKind of the value

    Raises:
        TypeError: If value is not part of the value model
    """
    if value is None:
        return ValueKind.NULL
    # bool must be checked before int, bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.LIST
    if isinstance(value, dict):
        return ValueKind.MAP
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def is_container(value: Any) -> bool:
    """Return True for List and Map values."""
    return isinstance(value, (list, dict))


def render_number(value: Union[int, float]) -> str:
    """Render a number, dropping the fractional part of whole floats."""
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def render_scalar(value: Any) -> str:
    """Plain-text rendering of a scalar value.

    Null renders as an empty string and booleans as ``true``/``false``.

    Args:
        value: Scalar value

    Returns:
        Text rendering of the value
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return render_number(value)
    if kind is ValueKind.STRING:
        return value
    raise TypeError(f"Cannot render {kind.value} as a scalar")


def flatten_value(value: Any, separator: str = FLATTEN_SEPARATOR) -> str:
    """Join every leaf of a nested value into one delimited string.

    Map entries are visited in ascending key order and list items in order.
    The hierarchy is lost, callers must treat the result as lossy.

    Args:
        value: Any value
        separator: Text placed between leaf renderings

    Returns:
        Flattened text
    """
    if isinstance(value, dict):
        return separator.join(flatten_value(value[key], separator) for key in sorted(value))
    if isinstance(value, list):
        return separator.join(flatten_value(item, separator) for item in value)
    return render_scalar(value)
