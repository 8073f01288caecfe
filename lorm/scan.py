"""Reading cursor rows into atoms, records and mappings."""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import inspect
import uuid
from collections.abc import Mapping
from typing import Any

from .errors import LormError
from .kind import AtomType, check_atom_type, is_struct_type

__all__ = ["check_scan_type", "model_columns", "scan_one", "scan_list"]

_NAMED_TYPES: dict[str, type] = {
    "bool": bool,
    "int": int,
    "float": float,
    "complex": complex,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "UUID": uuid.UUID,
    "uuid.UUID": uuid.UUID,
    "date": datetime.date,
    "datetime": datetime.datetime,
    "time": datetime.time,
    "datetime.date": datetime.date,
    "datetime.datetime": datetime.datetime,
    "datetime.time": datetime.time,
    "Decimal": decimal.Decimal,
    "decimal.Decimal": decimal.Decimal,
}


def check_scan_type(tp: Any) -> AtomType:
    """Classify a scan target type; raise when it cannot hold a row."""
    atom = check_atom_type(tp)
    if atom is AtomType.INVALID:
        raise LormError("scan type is not supported")
    return atom


def _resolve(annotation: Any) -> Any:
    """Turn a string annotation for a simple type into that type."""
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip()
    if text.startswith("Optional[") and text.endswith("]"):
        text = text[len("Optional["):-1].strip()
    parts = [p.strip() for p in text.split("|") if p.strip() != "None"]
    if len(parts) != 1:
        return None
    return _NAMED_TYPES.get(parts[0])


def _record_fields(tp: type) -> dict[str, tuple[str, Any]]:
    """Map column name to (attribute name, annotated type) for a record type."""
    if dataclasses.is_dataclass(tp):
        return {
            f.metadata.get("column", f.name): (f.name, _resolve(f.type))
            for f in dataclasses.fields(tp)
            if f.init
        }
    if is_struct_type(tp):
        annotations = getattr(tp, "__annotations__", {}) or {}
        return {name: (name, _resolve(annotations.get(name))) for name in tp._fields}
    raise LormError("model columns need a record type")


def model_columns(tp: Any) -> list[str]:
    """Column names of a record type, in field order."""
    return list(_record_fields(tp))


def _convert(value: Any, tp: Any) -> Any:
    if value is None or not isinstance(tp, type) or isinstance(value, tp):
        return value
    try:
        if issubclass(tp, uuid.UUID):
            if isinstance(value, (bytes, bytearray)):
                return uuid.UUID(bytes=bytes(value))
            return uuid.UUID(str(value))
        if issubclass(tp, (datetime.date, datetime.time)) and isinstance(value, str):
            return tp.fromisoformat(value)
        if issubclass(tp, (bytes, bytearray)):
            return tp(value.encode() if isinstance(value, str) else value)
        if issubclass(tp, decimal.Decimal):
            return tp(str(value))
        if issubclass(tp, (bool, int, float, complex, str)):
            return tp(value)
    except (TypeError, ValueError, decimal.InvalidOperation) as exc:
        raise LormError(f"cannot scan {value!r} into {tp.__name__}") from exc
    raise LormError(f"cannot scan {value!r} into {tp.__name__}")


def _column_names(cursor: Any) -> list[str]:
    if cursor.description is None:
        raise LormError("statement returns no rows")
    return [d[0] for d in cursor.description]


def _build(row: Any, names: list[str], tp: Any, atom: AtomType) -> Any:
    if atom is AtomType.ATOM:
        return _convert(row[0], tp)
    if issubclass(tp, Mapping):
        factory = dict if inspect.isabstract(tp) else tp
        return factory(zip(names, row))
    fields = _record_fields(tp)
    kwargs = {
        fields[name][0]: _convert(value, fields[name][1])
        for name, value in zip(names, row)
        if name in fields
    }
    try:
        return tp(**kwargs)
    except TypeError as exc:
        raise LormError(f"cannot build {tp.__name__}: {exc}") from exc


def scan_one(cursor: Any, tp: Any) -> tuple[int, Any]:
    """Read the first row as ``tp``; return (rows read, value or None)."""
    atom = check_scan_type(tp)
    try:
        names = _column_names(cursor)
        row = cursor.fetchone()
        if row is None:
            return 0, None
        return 1, _build(row, names, tp, atom)
    finally:
        cursor.close()


def scan_list(cursor: Any, tp: Any) -> list[Any]:
    """Read every row as ``tp``."""
    atom = check_scan_type(tp)
    try:
        names = _column_names(cursor)
        return [_build(row, names, tp, atom) for row in cursor.fetchall()]
    finally:
        cursor.close()