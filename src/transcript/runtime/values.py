"""
Runtime values produced by the evaluator.

Each value pairs a payload with a ValueType tag. The scanner and parser never
create values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class ValueType(Enum):
    """Tags for runtime values."""
    NULL = "null"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"


Number = Union[int, float]


@dataclass
class Value:
    """
    A runtime value with its type tag.

    ``data`` is None for null, an int/float for numbers, a bool for booleans
    and a dict of property name to Value for objects.
    """
    data: Any
    type: ValueType

    def __repr__(self) -> str:
        return f"Value({self.data!r}, {self.type.value})"

    @property
    def is_null(self) -> bool:
        return self.type == ValueType.NULL

    @property
    def is_number(self) -> bool:
        return self.type == ValueType.NUMBER


def null_val() -> Value:
    """Create a null value."""
    return Value(None, ValueType.NULL)


def number_val(n: Number) -> Value:
    """Create a number value."""
    return Value(n, ValueType.NUMBER)


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(bool(b), ValueType.BOOLEAN)


def object_val(properties: Dict[str, Value]) -> Value:
    """Create an object value; property order is preserved."""
    return Value(dict(properties), ValueType.OBJECT)


def to_python(value: Value) -> Any:
    """Extract plain Python data, recursing into objects."""
    if value.type == ValueType.OBJECT:
        return {key: to_python(v) for key, v in value.data.items()}
    return value.data


def format_value(value: Value) -> str:
    """Render a value the way scripts spell it."""
    if value.type == ValueType.NULL:
        return "null"
    if value.type == ValueType.BOOLEAN:
        return "true" if value.data else "false"
    if value.type == ValueType.OBJECT:
        inner = ", ".join(f"{key}: {format_value(v)}" for key, v in value.data.items())
        return f"{{ {inner} }}" if inner else "{}"
    if isinstance(value.data, float) and value.data.is_integer():
        return str(int(value.data))
    return str(value.data)
