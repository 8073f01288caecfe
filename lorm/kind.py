"""Classification of Python types and values into column atoms and records."""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import EmptySliceError, NilValueError

__all__ = [
    "AtomType",
    "PackType",
    "PackValue",
    "is_base_type",
    "is_struct_type",
    "is_comp_type",
    "check_atom_type",
    "check_atom_value",
    "base_ptr_value",
    "base_slice_deep_value",
    "check_pack_value",
    "check_map_field",
]

_BASE_TYPES = (bool, int, float, complex, str)
_VALUER_TYPES = (
    bytes,
    bytearray,
    decimal.Decimal,
    uuid.UUID,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)


class AtomType(enum.IntEnum):
    """Atom: maps to one column. Composite: a record of several atoms."""

    INVALID = 0
    ATOM = 1
    COMPOSITE = 2


class PackType(enum.IntEnum):
    """Whether a value is a plain value or a (nested) sequence."""

    NONE = 0
    SLICE = 1


@dataclass(frozen=True)
class PackValue:
    """Result of :func:`check_pack_value`."""

    typ: PackType
    base: Any
    slice_base: Any


def is_base_type(tp: Any) -> bool:
    """Whether ``tp`` is a scalar builtin type (bool, numbers, str)."""
    return isinstance(tp, type) and issubclass(tp, _BASE_TYPES)


def _is_valuer_type(tp: Any) -> bool:
    if is_base_type(tp):
        return True
    return isinstance(tp, type) and issubclass(tp, _VALUER_TYPES)


def is_struct_type(tp: Any) -> bool:
    """Whether ``tp`` is a record type: a dataclass or a named tuple."""
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, tuple) and hasattr(tp, "_fields")


def _is_map_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, Mapping)


def check_atom_type(tp: Any) -> AtomType:
    """Classify a type as atom, composite or invalid."""
    if _is_valuer_type(tp):
        return AtomType.ATOM
    if is_struct_type(tp):
        return AtomType.COMPOSITE
    if _is_map_type(tp):
        return AtomType.COMPOSITE
    return AtomType.INVALID


def is_comp_type(tp: Any) -> bool:
    """Whether ``tp`` is a composite (record) type."""
    return check_atom_type(tp) is AtomType.COMPOSITE


def check_atom_value(v: Any) -> AtomType:
    """Classify a value; a mapping counts as composite only when non-empty."""
    tp = type(v)
    if _is_valuer_type(tp):
        return AtomType.ATOM
    if is_struct_type(tp):
        return AtomType.COMPOSITE
    if isinstance(v, Mapping) and len(v) > 0:
        return AtomType.COMPOSITE
    return AtomType.INVALID


def base_ptr_value(v: Any) -> Any:
    """Return ``v``; raise :class:`NilValueError` when it is None."""
    if v is None:
        raise NilValueError()
    return v


def _is_sequence(v: Any) -> bool:
    return isinstance(v, (list, tuple)) and not is_struct_type(type(v))


def base_slice_deep_value(v: Any) -> tuple[bool, Any]:
    """Descend through nested non-empty sequences to their first base item.

    Returns ``(is_slice, base)``. An empty sequence is not treated as a slice.
    Raises :class:`NilValueError` on None anywhere along the way.
    """
    is_slice = False
    current = v
    while True:
        if current is None:
            raise NilValueError()
        if _is_sequence(current) and len(current) > 0:
            is_slice = True
            current = current[0]
            continue
        return (True, current) if is_slice else (False, v)


def check_pack_value(v: Any) -> PackValue:
    """Describe ``v`` as a plain value or a sequence with its base item."""
    v = base_ptr_value(v)
    is_slice, base = base_slice_deep_value(v)
    if is_slice:
        return PackValue(PackType.SLICE, v, base)
    return PackValue(PackType.NONE, v, v)


def check_map_field(mapping: Mapping[Any, Any]) -> bool:
    """Whether keys are strings and values are column atoms (or None)."""
    if len(mapping) == 0:
        raise EmptySliceError("map empty")
    for key, value in mapping.items():
        if not isinstance(key, str):
            return False
        if value is not None and not _is_valuer_type(type(value)):
            return False
    return True