"""SQL dialects: where-clause parsing and table statement generation."""

from __future__ import annotations

import abc
import itertools
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .enums import ClauseType, InsertType, ReturnType
from .errors import LormError
from .extra import ExtraContext
from .field import Value
from .values import render_insert_values, render_set

__all__ = [
    "Clause",
    "Statement",
    "Dialect",
    "MysqlDialect",
    "PgDialect",
    "gen_placeholders",
    "to_pg_sql",
]

_CLAUSE_FORMATS = {
    ClauseType.EQ: "{q} = ?",
    ClauseType.NEQ: "{q} <> ?",
    ClauseType.LESS: "{q} < ?",
    ClauseType.LESS_EQ: "{q} <= ?",
    ClauseType.GREATER: "{q} > ?",
    ClauseType.GREATER_EQ: "{q} >= ?",
    ClauseType.LIKE: "{q} LIKE ?",
    ClauseType.NOT_LIKE: "{q} NOT LIKE ?",
    ClauseType.IN: "{q} IN ({p})",
    ClauseType.NOT_IN: "{q} NOT IN ({p})",
    ClauseType.BETWEEN: "{q} BETWEEN ? AND ?",
    ClauseType.NOT_BETWEEN: "{q} NOT BETWEEN ? AND ?",
    ClauseType.IS_NULL: "{q} IS NULL",
    ClauseType.IS_NOT_NULL: "{q} IS NOT NULL",
    ClauseType.IS_FALSE: "{q} IS FALSE",
}


def gen_placeholders(n: int) -> str:
    """Return ``n`` comma-separated ``?`` placeholders."""
    return ",".join("?" * max(n, 0))


def to_pg_sql(sql: str) -> str:
    """Number ``?`` placeholders as ``$1``, ``$2``, ... in order."""
    counter = itertools.count(1)
    return re.sub(r"\?", lambda _: f"${next(counter)}", sql)


@dataclass(frozen=True)
class Clause:
    """One where-clause condition on a column expression."""

    type: ClauseType
    query: str
    args_num: int = 0


@dataclass
class Statement:
    """Everything needed to generate one table statement.

    ``is_query`` tells whether the generated SQL returns rows; insert
    generation updates it.
    """

    table_name: str
    columns: list[str] = field(default_factory=list)
    column_values: list[Value] = field(default_factory=list)
    primary_key_names: list[str] = field(default_factory=lambda: ["id"])
    extra: ExtraContext = field(default_factory=ExtraContext)
    soft_delete: bool = False
    select_field_names: list[str] = field(default_factory=list)
    last_sql: str = ""
    limit: int | None = None
    offset: int | None = None
    scan_is_ptr: bool = False
    zero_field_names: list[str] = field(default_factory=list)
    all_field_names: list[str] = field(default_factory=list)
    is_query: bool = True


def _conflict_field_names(stmt: Statement) -> list[str]:
    """Columns copied from the incoming row on conflict.

    Without explicit set columns, every column except the unique-key ones.
    """
    sc = stmt.extra.set_context
    if sc.columns or sc.field_names:
        return list(sc.field_names)
    keys = set(stmt.extra.duplicate_key_names)
    return [name for name in (*stmt.columns, *stmt.extra.columns) if name not in keys]


class Dialect(abc.ABC):
    """Shared behaviour of all SQL dialects."""

    name: str = ""
    need_last_insert_id: bool = False

    def parse(self, clause: Clause) -> str:
        """Render one where-clause condition with ``?`` placeholders."""
        fmt = _CLAUSE_FORMATS.get(clause.type)
        if fmt is None:
            raise LormError("unknown where token type")
        return fmt.format(q=clause.query, p=gen_placeholders(clause.args_num))

    def render(self, sql: str) -> str:
        """Adapt generic SQL to this dialect's placeholder style."""
        return sql

    @abc.abstractmethod
    def insert_sql(self, stmt: Statement) -> tuple[str, list[Any]]:
        """Generate an INSERT statement and its arguments."""

    def _values(self, stmt: Statement) -> tuple[str, list[Any]]:
        return render_insert_values(
            stmt.columns, stmt.column_values, stmt.primary_key_names
        )


class MysqlDialect(Dialect):
    """MySQL: ``?`` placeholders, last-insert-id for generated keys."""

    name = "mysql"
    need_last_insert_id = True

    _INSERT_PREFIX = {
        InsertType.ERR: "INSERT INTO ",
        InsertType.IGNORE: "INSERT IGNORE ",
        InsertType.UPDATE: "INSERT INTO ",
        InsertType.REPLACE: "REPLACE INTO ",
    }

    def insert_sql(self, stmt: Statement) -> tuple[str, list[Any]]:
        # MySQL cannot return rows from an insert; ids come from last_insert_id.
        stmt.is_query = False
        insert_type = stmt.extra.insert_type
        values_sql, args = self._values(stmt)
        sql = (
            self._INSERT_PREFIX[insert_type]
            + stmt.table_name
            + " ("
            + ",".join(stmt.columns)
            + ") VALUES("
            + values_sql
            + " ) "
        )
        if insert_type is InsertType.UPDATE:
            sc = stmt.extra.set_context
            parts = [f"{n} = new.{n}" for n in _conflict_field_names(stmt)]
            parts += [f"{c} = ?" for c in sc.columns]
            args += [v.value for v in sc.column_values]
            sql += " AS new ON DUPLICATE KEY UPDATE " + ", ".join(parts)
        return sql + ";", args

    def delete_sql(
        self, stmt: Statement, where_sql: str, where_args: Sequence[Any]
    ) -> tuple[str, list[Any]]:
        """Hard DELETE, or an UPDATE of the soft-delete columns."""
        if not stmt.soft_delete or stmt.extra.skip_soft_delete_enabled:
            sql = "DELETE FROM " + stmt.table_name
            args: list[Any] = []
        else:
            set_sql, args = render_set(
                stmt.columns, stmt.column_values, stmt.primary_key_names
            )
            sql = "UPDATE " + stmt.table_name + " SET " + set_sql
        sql += " WHERE " + where_sql + ";"
        return sql, args + list(where_args)

    def update_sql(
        self, stmt: Statement, where_sql: str, where_args: Sequence[Any]
    ) -> tuple[str, list[Any]]:
        """UPDATE the statement's columns for rows matching the where clause."""
        set_sql, args = render_set(
            stmt.columns, stmt.column_values, stmt.primary_key_names
        )
        sql = "UPDATE " + stmt.table_name + " SET " + set_sql + " WHERE " + where_sql + ";"
        return sql, args + list(where_args)

    def select_sql(
        self, stmt: Statement, where_sql: str, where_args: Sequence[Any]
    ) -> tuple[str, list[Any]]:
        """SELECT the statement's field names with optional limit and offset."""
        sql = (
            "SELECT "
            + ",".join(stmt.select_field_names)
            + " FROM "
            + stmt.table_name
            + " WHERE "
            + where_sql
            + stmt.last_sql
        )
        if stmt.limit is not None:
            sql += f" LIMIT {stmt.limit}"
        if stmt.offset is not None:
            sql += f" OFFSET {stmt.offset}"
        return sql + ";", list(where_args)


class PgDialect(Dialect):
    """PostgreSQL: numbered placeholders, RETURNING for generated values."""

    name = "pg"
    need_last_insert_id = False

    def render(self, sql: str) -> str:
        return to_pg_sql(sql)

    def insert_sql(self, stmt: Statement) -> tuple[str, list[Any]]:
        insert_type = stmt.extra.insert_type
        if insert_type is InsertType.REPLACE:
            raise LormError("pg does not support insert type REPLACE")
        values_sql, args = self._values(stmt)
        sql = (
            "INSERT INTO "
            + stmt.table_name
            + " ("
            + ",".join(stmt.columns)
            + ") VALUES("
            + values_sql
            + ") "
        )
        if insert_type in (InsertType.IGNORE, InsertType.UPDATE):
            sql += "ON CONFLICT (" + ",".join(stmt.extra.duplicate_key_names) + ") DO "
        if insert_type is InsertType.IGNORE:
            sql += "NOTHING "
        elif insert_type is InsertType.UPDATE:
            sc = stmt.extra.set_context
            parts = [f"{n}= EXCLUDED.{n}" for n in _conflict_field_names(stmt)]
            parts += [f"{c}= ?" for c in sc.columns]
            args += [v.value for v in sc.column_values]
            sql += "UPDATE SET " + ", ".join(parts)

        returning = {
            ReturnType.PRIMARY_KEY: stmt.primary_key_names,
            ReturnType.ZERO_FIELD: stmt.zero_field_names,
            ReturnType.ALL_FIELD: stmt.all_field_names,
        }.get(stmt.extra.returning)
        if stmt.scan_is_ptr and returning is not None:
            sql += " RETURNING " + ",".join(returning)
        else:
            stmt.is_query = False
        return sql + ";", args