"""Running hand-written SQL and reading the rows it returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .engine import Engine
from .scan import check_scan_type, scan_list, scan_one

__all__ = [
    "NativeQuery",
    "PreparedStatement",
    "NativePrepare",
    "query_one",
    "query_list",
    "execute",
    "query_scan",
    "prepare",
]


def _rows_affected(engine: Engine, query: str, args: tuple[Any, ...]) -> int:
    cursor = engine.execute(query, *args)
    try:
        return cursor.rowcount
    finally:
        cursor.close()


def _query_one(engine: Engine, tp: Any, query: str, args: tuple[Any, ...]) -> Any:
    check_scan_type(tp)
    num, value = scan_one(engine.query(query, *args), tp)
    return value if num else None


def _query_list(
    engine: Engine, tp: Any, query: str, args: tuple[Any, ...]
) -> list[Any]:
    check_scan_type(tp)
    return scan_list(engine.query(query, *args), tp)


def query_one(engine: Engine, tp: Any, query: str, *args: Any) -> Any:
    """Run ``query`` and read its first row as ``tp``; None when no row."""
    return _query_one(engine, tp, query, args)


def query_list(engine: Engine, tp: Any, query: str, *args: Any) -> list[Any]:
    """Run ``query`` and read every row as ``tp``."""
    return _query_list(engine, tp, query, args)


def execute(engine: Engine, query: str, *args: Any) -> int:
    """Run a write statement and return the number of rows it affected."""
    return _rows_affected(engine, query, args)


@dataclass(frozen=True)
class NativeQuery:
    """A query and its arguments, waiting to be read into a target type."""

    engine: Engine
    query: str
    args: tuple[Any, ...] = field(default_factory=tuple)

    def scan_one(self, tp: Any) -> tuple[int, Any]:
        """Read the first row as ``tp``; return (rows read, value or None)."""
        check_scan_type(tp)
        return scan_one(self.engine.query(self.query, *self.args), tp)

    def scan_list(self, tp: Any) -> list[Any]:
        """Read every row as ``tp``."""
        check_scan_type(tp)
        return scan_list(self.engine.query(self.query, *self.args), tp)


def query_scan(engine: Engine, query: str, *args: Any) -> NativeQuery:
    """Bind ``query`` and its arguments for reading later."""
    return NativeQuery(engine, query, args)


@dataclass(frozen=True)
class PreparedStatement:
    """A statement fixed once and run with different arguments."""

    engine: Engine
    query: str

    def execute(self, *args: Any) -> int:
        """Run the statement as a write; return the rows affected."""
        return _rows_affected(self.engine, self.query, args)

    def query_one(self, tp: Any, *args: Any) -> Any:
        """Read the first row as ``tp``; None when no row."""
        return _query_one(self.engine, tp, self.query, args)

    def query_list(self, tp: Any, *args: Any) -> list[Any]:
        """Read every row as ``tp``."""
        return _query_list(self.engine, tp, self.query, args)

    def query_scan(self, *args: Any) -> NativePrepare:
        """Bind arguments for reading later."""
        return NativePrepare(self, args)


@dataclass(frozen=True)
class NativePrepare:
    """A prepared statement with its arguments, waiting to be read."""

    statement: PreparedStatement
    args: tuple[Any, ...] = field(default_factory=tuple)

    def scan_one(self, tp: Any) -> tuple[int, Any]:
        """Read the first row as ``tp``; return (rows read, value or None)."""
        check_scan_type(tp)
        engine = self.statement.engine
        return scan_one(engine.query(self.statement.query, *self.args), tp)

    def scan_list(self, tp: Any) -> list[Any]:
        """Read every row as ``tp``."""
        check_scan_type(tp)
        engine = self.statement.engine
        return scan_list(engine.query(self.statement.query, *self.args), tp)


def prepare(engine: Engine, query: str) -> PreparedStatement:
    """Fix ``query`` for repeated runs on ``engine``."""
    return PreparedStatement(engine, query)