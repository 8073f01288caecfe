"""Rendering of column values into VALUES lists and SET assignments."""

from __future__ import annotations

import datetime
import time
from collections.abc import Sequence
from typing import Any

from .errors import LormError
from .field import Value, ValueType

__all__ = ["render_insert_values", "render_set"]


def _check_lengths(columns: Sequence[str], values: Sequence[Value]) -> None:
    if len(columns) != len(values):
        raise LormError("columns and values differ in length")


def _single_pk(primary_key_names: Sequence[str]) -> str:
    if len(primary_key_names) != 1:
        raise LormError("soft-delete marker as primary key id needs a single primary key")
    return primary_key_names[0]


def _expression(
    column: str, v: Value, primary_key_names: Sequence[str], args: list[Any]
) -> str | None:
    """Right-hand side for ``v``; None when nothing is written."""
    t = v.type
    if t is ValueType.NULL:
        return "NULL"
    if t is ValueType.NOW:
        return "NOW()"
    if t is ValueType.UNIX_SECOND:
        return str(datetime.datetime.now().second)
    if t is ValueType.UNIX_MILLI:
        return str(time.time_ns() // 1_000_000)
    if t is ValueType.UNIX_NANO:
        return str(time.time_ns())
    if t is ValueType.VAL:
        args.append(v.value)
        return "?"
    if t is ValueType.INCREMENT:
        args.append(v.value)
        return column + " + ?"
    if t is ValueType.EXPRESSION:
        return str(v.value)
    if t is ValueType.ID:
        return _single_pk(primary_key_names)
    return None


def render_insert_values(
    columns: Sequence[str],
    values: Sequence[Value],
    primary_key_names: Sequence[str],
) -> tuple[str, list[Any]]:
    """Render the items of an INSERT ... VALUES (...) list.

    Returns the SQL fragment and the bound arguments in order.
    """
    _check_lengths(columns, values)
    args: list[Any] = []
    parts = []
    for column, v in zip(columns, values):
        expr = _expression(column, v, primary_key_names, args)
        if expr is None:
            parts.append("")
        elif v.type in (ValueType.VAL, ValueType.INCREMENT):
            parts.append(" " + expr + " " if v.type is ValueType.VAL else expr + " ")
        else:
            parts.append(expr)
    return " , ".join(parts), args


def render_set(
    columns: Sequence[str],
    values: Sequence[Value],
    primary_key_names: Sequence[str],
) -> tuple[str, list[Any]]:
    """Render ``column = value`` assignments for a SET clause.

    Returns the SQL fragment and the bound arguments in order.
    """
    _check_lengths(columns, values)
    args: list[Any] = []
    parts = []
    for column, v in zip(columns, values):
        expr = _expression(column, v, primary_key_names, args)
        if expr is None:
            parts.append("")
        elif v.type in (ValueType.VAL, ValueType.INCREMENT):
            parts.append(f"{column} = {expr} ")
        else:
            parts.append(f"{column} = {expr}")
    return ", ".join(parts), args