"""Incremental construction of SELECT statements with where clauses and paging."""

from __future__ import annotations

import datetime
import enum
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from .dialect import Clause, gen_placeholders
from .engine import Engine
from .errors import LormError
from .scan import check_scan_type, model_columns, scan_list, scan_one

__all__ = ["SqlBuilder", "PageResult", "query_build"]


class _WhereSource(Protocol):
    def to_sql(self, parse: Callable[[Clause], str]) -> tuple[str, list[Any]]: ...


class _SelectStatus(enum.Enum):
    NO_SET = enum.auto()
    SET = enum.auto()
    DONE = enum.auto()


class _WhereStatus(enum.Enum):
    NO_SET = enum.auto()
    SET = enum.auto()
    DONE = enum.auto()


@dataclass(frozen=True)
class _PageConfig:
    page_size: int
    current: int


@dataclass
class PageResult:
    """One page of rows together with the paging numbers and the total count."""

    list: list[Any] = field(default_factory=list)
    page_size: int = 0
    current: int = 0
    total: int = 0


class SqlBuilder:
    """Builds a SELECT piece by piece and runs it on an engine.

    Arguments added before the select part is finished belong to the select
    list; those added afterwards belong to the rest of the statement.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._show_sql = False
        self._select_status = _SelectStatus.NO_SET
        self._where_status = _WhereStatus.NO_SET
        self._select_tokens: list[str] = []
        self._select_args: list[Any] = []
        self._other_sql: list[str] = []
        self._other_args: list[Any] = []
        self._page: _PageConfig | None = None

    # ---------------------------------------------------------------- helpers

    def _statement(self) -> tuple[str, list[Any]]:
        query = "SELECT " + ",".join(self._select_tokens) + " " + "".join(self._other_sql)
        return query, [*self._select_args, *self._other_args]

    def _trace(self, query: str, args: list[Any]) -> None:
        if self._show_sql:
            print(query, args)

    def _require_select_done(self, where_str: str) -> None:
        if self._select_status is not _SelectStatus.DONE:
            raise LormError("where set before select finished: " + where_str)

    def _add_where(self, where_str: str) -> None:
        if self._where_status is _WhereStatus.DONE:
            raise LormError("where has been done")
        if self._where_status is _WhereStatus.NO_SET:
            self._where_status = _WhereStatus.SET
            self._other_sql.append(" WHERE " + where_str)
        else:
            self._other_sql.append(" AND " + where_str)

    def _where_arg(self, where_str: str, *args: Any) -> SqlBuilder:
        self._require_select_done(where_str)
        self.append_args(*args)
        self._add_where(where_str)
        return self

    def _finish(self) -> None:
        self._select_status = _SelectStatus.DONE
        self._where_status = _WhereStatus.DONE

    # ------------------------------------------------------------ construction

    def show_sql(self) -> SqlBuilder:
        """Print each statement and its arguments before running it."""
        self._show_sql = True
        return self

    def append_arg(self, arg: Any, *args: bool) -> SqlBuilder:
        """Add one argument, unless any condition is false."""
        if not all(args):
            return self
        if self._select_status is _SelectStatus.NO_SET:
            self._select_args.append(arg)
        else:
            self._other_args.append(arg)
        return self

    def append_sql(self, sql: str) -> SqlBuilder:
        """Append raw SQL after the select part."""
        self._other_sql.append(sql)
        return self

    def append_args(self, *args: Any) -> SqlBuilder:
        """Add arguments to the select part or, once it is done, to the rest."""
        if self._select_status is _SelectStatus.DONE:
            self._other_args.extend(args)
        else:
            self._select_args.extend(args)
        return self

    def select(self, arg: str, *args: bool) -> SqlBuilder:
        """Add one selected column, unless any condition is false."""
        if not all(args):
            return self
        self._select_status = _SelectStatus.SET
        self._select_tokens.append(arg)
        return self

    def select_model(self, tp: Any) -> SqlBuilder:
        """Select every column of a record type."""
        if tp is None:
            return self
        check_scan_type(tp)
        self._select_status = _SelectStatus.SET
        self._select_tokens.extend(model_columns(tp))
        return self

    def from_(self, name: str) -> SqlBuilder:
        """Name the table; this finishes the select part."""
        self._select_status = _SelectStatus.DONE
        self._other_sql.append(" FROM " + name)
        return self

    def join(self, name: str, *args: bool) -> SqlBuilder:
        """Add an inner join, unless any condition is false."""
        if all(args):
            self._other_sql.append(" JOIN " + name)
        return self

    def arg(self, arg: Any, *args: bool) -> SqlBuilder:
        """Add one argument, unless any condition is false."""
        if all(args):
            self.append_args(arg)
        return self

    def args(self, *args: Any) -> SqlBuilder:
        """Add several arguments."""
        return self.append_args(*args)

    def left_join(self, name: str, *args: bool) -> SqlBuilder:
        """Add a left join on its own line, unless any condition is false."""
        if all(args):
            self._other_sql.append("\nLEFT JOIN " + name + "\n")
        return self

    def right_join(self, name: str, *args: bool) -> SqlBuilder:
        """Add a right join, unless any condition is false."""
        if all(args):
            self._other_sql.append(" RIGHT JOIN " + name)
        return self

    def order_by(self, name: str, *args: bool) -> SqlBuilder:
        """Sort ascending, unless any condition is false."""
        if all(args):
            self._other_sql.append(" ORDER BY " + name)
        return self

    def order_desc_by(self, name: str, *args: bool) -> SqlBuilder:
        """Sort descending, unless any condition is false."""
        if all(args):
            self._other_sql.append(" ORDER BY " + name + " DESC")
        return self

    def native(self, sql: str, *args: bool) -> SqlBuilder:
        """Finish the select part and append raw SQL, unless a condition is false."""
        self.select_end()
        if all(args):
            self._other_sql.append(" " + sql + " ")
        return self

    def limit(self, num: int, *args: bool) -> SqlBuilder:
        """Limit the row count, unless any condition is false."""
        if all(args):
            self._other_sql.append(f" LIMIT {num}")
        return self

    def offset(self, num: int, *args: bool) -> SqlBuilder:
        """Skip rows, unless any condition is false."""
        if all(args):
            self._other_sql.append(f" OFFSET {num}")
        return self

    def where_builder(self, w: _WhereSource | None) -> SqlBuilder:
        """Add the conditions of a where builder, parenthesised."""
        if w is None:
            return self
        sql, args = w.to_sql(self._engine.dialect.parse)
        if sql == "":
            return self
        if self._select_status is not _SelectStatus.DONE:
            raise LormError("select not finished")
        self._add_where("(" + sql + ")")
        self.append_args(*args)
        return self

    def link_where(self) -> SqlBuilder:
        """Continue a where clause already written by hand with AND."""
        self._select_status = _SelectStatus.DONE
        self._where_status = _WhereStatus.SET
        return self

    def select_end(self) -> SqlBuilder:
        """Mark the select part as finished."""
        self._select_status = _SelectStatus.DONE
        return self

    def where(self, where_str: str, *args: bool) -> SqlBuilder:
        """Add a condition, unless any of the given conditions is false."""
        if not all(args):
            return self
        return self._where_arg(where_str)

    def bool_where(self, condition: bool, where_str: str, *args: Any) -> SqlBuilder:
        """Add a condition with its arguments when ``condition`` holds."""
        if not condition:
            return self
        return self._where_arg(where_str, *args)

    def where_in(self, where_str: str, *args: Any) -> SqlBuilder:
        """Add ``where_str IN (...)``; skipped when there are no arguments."""
        if not args:
            return self
        self._require_select_done(where_str)
        self.append_args(*args)
        self._add_where(where_str + " IN (" + gen_placeholders(len(args)) + ")")
        return self

    def where_sql_in(self, where_str: str, *args: Any) -> SqlBuilder:
        """Replace each ``?`` with an IN list; skipped when there are no arguments."""
        if not args:
            return self
        self._require_select_done(where_str)
        self.append_args(*args)
        in_list = " (" + gen_placeholders(len(args)) + ")"
        self._add_where(where_str.replace("?", in_list))
        return self

    def between(self, where_str: str, begin: Any, end: Any, *args: bool) -> SqlBuilder:
        """Bound a column on either or both sides; None leaves a side open."""
        self._require_select_done(where_str)
        if not all(args):
            return self
        if begin is not None and end is not None:
            return self._where_arg(where_str + " BETWEEN ? AND ?", begin, end)
        if begin is not None:
            return self._where_arg(where_str + " >= ?", begin)
        if end is not None:
            return self._where_arg(where_str + " <= ?", end)
        return self

    def between_date_time_of_date(
        self,
        where_str: str,
        date_begin: datetime.date | None,
        date_end: datetime.date | None,
        *args: bool,
    ) -> SqlBuilder:
        """Bound a datetime column by whole days: from the start of
        ``date_begin`` up to, not including, the day after ``date_end``."""
        self._require_select_done(where_str)
        if not all(args):
            return self
        if date_begin is not None:
            start = datetime.datetime.combine(date_begin, datetime.time())
            self._where_arg(where_str + " >= ?", start)
        if date_end is not None:
            stop = datetime.datetime.combine(
                date_end + datetime.timedelta(days=1), datetime.time()
            )
            self._where_arg(where_str + " < ?", stop)
        return self

    # --------------------------------------------------------------- running

    def scan_one(self, tp: Any) -> tuple[int, Any]:
        """Run the query and read the first row as ``tp``.

        Returns the number of rows read (0 or 1) and the value, or None.
        """
        self._finish()
        check_scan_type(tp)
        query, args = self._statement()
        self._trace(query, args)
        return scan_one(self._engine.query(query, *args), tp)

    def scan_list(self, tp: Any) -> list[Any]:
        """Run the query and read every row as ``tp``."""
        self._finish()
        check_scan_type(tp)
        query, args = self._statement()
        self._trace(query, args)
        return scan_list(self._engine.query(query, *args), tp)

    def execute(self) -> Any:
        """Run the statement as a write and return the cursor."""
        self._finish()
        query, args = self._statement()
        self._trace(query, args)
        return self._engine.execute(query, *args)

    def page(self, current: int, page_size: int) -> SqlBuilder:
        """Request page ``current`` (from 1) of ``page_size`` rows."""
        if page_size < 1 or current < 1:
            raise LormError("pageSize,current must be greater than 0")
        self._page = _PageConfig(page_size=page_size, current=current)
        return self

    def scan_page(self, tp: Any) -> PageResult:
        """Count all matching rows, then read the requested page as ``tp``."""
        if self._page is None:
            raise LormError("no set pageConfig")
        check_scan_type(tp)
        size, current = self._page.page_size, self._page.current
        query, args = self._statement()

        count_sql = "select count(*) " + "".join(self._other_sql)
        self._trace(count_sql, self._other_args)
        cursor = self._engine.query(count_sql, *self._other_args)
        total = 0
        try:
            for row in cursor.fetchall():
                total = int(row[0])
        finally:
            cursor.close()

        select_sql = query + " limit ? offset ?"
        select_args = [*args, size, (current - 1) * size]
        self._trace(select_sql, select_args)
        rows = scan_list(self._engine.query(select_sql, *select_args), tp)
        return PageResult(list=rows, page_size=size, current=current, total=total)


def query_build(engine: Engine) -> SqlBuilder:
    """Start a new statement on ``engine``."""
    return SqlBuilder(engine)