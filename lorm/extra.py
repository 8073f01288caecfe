"""Per-call options for table operations: naming, paging, extra columns, conflicts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import InsertType, ReturnType
from .errors import LormError
from .field import Value, ValueType

__all__ = ["SetContext", "ExtraContext", "DuplicateKey"]


@dataclass
class SetContext:
    """Columns to update when an insert hits a unique-key conflict.

    ``field_names`` are copied from the incoming row; ``columns`` are paired
    with ``column_values`` and bound explicitly.
    """

    field_names: list[str] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    column_values: list[Value] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.columns) != len(self.column_values):
            raise LormError("set columns and values differ in length")


@dataclass
class ExtraContext:
    """Chainable options passed alongside a table operation."""

    insert_type: InsertType = InsertType.ERR
    returning: ReturnType = ReturnType.NONE
    show_sql_enabled: bool = False
    no_run_enabled: bool = False
    skip_soft_delete_enabled: bool = False
    table_name: str = ""
    select_columns: list[str] = field(default_factory=list)
    limit_value: int | None = None
    offset_value: int | None = None
    order_by_tokens: list[str] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    column_values: list[Value] = field(default_factory=list)
    duplicate_key_names: list[str] = field(default_factory=list)
    set_context: SetContext = field(default_factory=SetContext)

    def show_sql(self) -> ExtraContext:
        """Print the generated SQL before running it."""
        self.show_sql_enabled = True
        return self

    def no_run(self) -> ExtraContext:
        """Generate the SQL but do not execute it."""
        self.no_run_enabled = True
        return self

    def skip_soft_delete(self) -> ExtraContext:
        """Ignore soft-delete handling for this call."""
        self.skip_soft_delete_enabled = True
        return self

    def table(self, name: str) -> ExtraContext:
        """Override the table name."""
        self.table_name = name
        return self

    def select(self, *args: str) -> ExtraContext:
        """Restrict the selected columns; none means all columns."""
        self.select_columns = list(args)
        return self

    def order_by(self, name: str, *args: bool) -> ExtraContext:
        """Add an ascending sort, unless any condition is false."""
        if all(args):
            self.order_by_tokens.append(name)
        return self

    def order_desc_by(self, name: str, *args: bool) -> ExtraContext:
        """Add a descending sort, unless any condition is false."""
        if all(args):
            self.order_by_tokens.append(name + " desc")
        return self

    def limit(self, num: int, *args: bool) -> ExtraContext:
        """Set the row limit, unless any condition is false."""
        if all(args):
            self.limit_value = num
        return self

    def offset(self, num: int, *args: bool) -> ExtraContext:
        """Set the row offset, unless any condition is false."""
        if all(args):
            self.offset_value = num
        return self

    def return_type(self, typ: ReturnType) -> ExtraContext:
        """Choose which columns an insert returns."""
        self.returning = typ
        return self

    def _add(self, name: str, value: Value) -> ExtraContext:
        self.columns.append(name)
        self.column_values.append(value)
        return self

    def set_null(self, name: str) -> ExtraContext:
        """Set a column to NULL."""
        return self._add(name, Value(ValueType.NULL))

    def set_now(self, name: str) -> ExtraContext:
        """Set a column to the current time."""
        return self._add(name, Value(ValueType.NOW))

    def set(self, name: str, value: Any) -> ExtraContext:
        """Set a column to a bound value."""
        return self._add(name, Value(ValueType.VAL, value))

    def set_increment(self, name: str, num: Any) -> ExtraContext:
        """Add ``num`` to a column (negative to decrement)."""
        return self._add(name, Value(ValueType.INCREMENT, num))

    def set_expression(self, name: str, expression: str) -> ExtraContext:
        """Set a column to a raw SQL expression."""
        return self._add(name, Value(ValueType.EXPRESSION, expression))

    def when_duplicate_key(self, *args: str) -> DuplicateKey:
        """Name the unique-key columns and choose what a conflict does."""
        self.duplicate_key_names = list(args)
        return DuplicateKey(self)


class DuplicateKey:
    """Chooses the conflict behaviour for an :class:`ExtraContext`."""

    def __init__(self, extra: ExtraContext) -> None:
        self.extra = extra

    def do_nothing(self) -> ExtraContext:
        """Skip the conflicting row."""
        self.extra.insert_type = InsertType.IGNORE
        return self.extra

    def _update(
        self, insert_type: InsertType, set_context: SetContext | None
    ) -> ExtraContext:
        self.extra.insert_type = insert_type
        if set_context is not None:
            self.extra.set_context = set_context
        return self.extra

    def do_update(self, set_context: SetContext | None = None) -> ExtraContext:
        """Update the existing row; all non-key columns unless told otherwise."""
        return self._update(InsertType.UPDATE, set_context)

    def do_replace(self, set_context: SetContext | None = None) -> ExtraContext:
        """Replace the existing row."""
        return self._update(InsertType.REPLACE, set_context)