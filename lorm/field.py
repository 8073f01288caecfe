"""Column value descriptors and helpers that classify raw field values."""

from __future__ import annotations

import dataclasses
import decimal
import enum
from dataclasses import dataclass
from typing import Any

__all__ = [
    "MISSING",
    "ValueType",
    "Value",
    "FValue",
    "get_field_inter",
    "get_field_inter_zero",
    "is_field_null",
]


class _Missing(enum.Enum):
    MISSING = enum.auto()

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING
"""Marker for a field that has no value at all (not even NULL)."""


class ValueType(enum.IntEnum):
    """How a column value is rendered into SQL."""

    NONE = 0  # undefined
    DEFAULT = 1  # column default
    NULL = 2  # set to NULL
    NOW = 3  # current time
    UNIX_SECOND = 4  # seconds timestamp
    UNIX_MILLI = 5  # milliseconds timestamp
    UNIX_NANO = 6  # nanoseconds timestamp
    VAL = 7  # bound value
    INCREMENT = 8  # column += value
    EXPRESSION = 9  # raw SQL expression
    ID = 10  # primary key column


@dataclass(frozen=True)
class Value:
    """A column value together with how it should be rendered."""

    type: ValueType
    value: Any = None


@dataclass(frozen=True)
class FValue:
    """A named column value."""

    name: str
    type: ValueType
    value: Any = None

    def to_value(self) -> Value:
        """Drop the name and return the plain value."""
        return Value(self.type, self.value)


def _is_zero(v: Any) -> bool:
    """Whether ``v`` is the zero value of its type."""
    if v is None or v is MISSING:
        return True
    if isinstance(v, (bool, int, float, complex, decimal.Decimal)):
        return v == 0
    if isinstance(v, (str, bytes, bytearray)):
        return len(v) == 0
    if dataclasses.is_dataclass(v) and not isinstance(v, type):
        return all(_is_zero(getattr(v, f.name)) for f in dataclasses.fields(v))
    return False


def get_field_inter(v: Any) -> Value:
    """Classify ``v`` as NONE (missing), NULL (None) or VAL."""
    if v is MISSING:
        return Value(ValueType.NONE)
    if v is None:
        return Value(ValueType.NULL)
    return Value(ValueType.VAL, v)


def get_field_inter_zero(v: Any) -> Any:
    """Return ``v``, or None when it is missing, None or a zero value."""
    if _is_zero(v):
        return None
    return v


def is_field_null(v: Any) -> bool:
    """A field is null when missing, None, or holding its type's zero value."""
    return _is_zero(v)