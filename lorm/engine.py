"""Database engines and transactions over a DB-API connection."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from .dialect import Dialect
from .errors import LormError
from .log import Logger

__all__ = ["PoolConf", "Engine", "Transaction", "connect_with"]


class _DbConfig(Protocol):
    def dialect(self) -> Dialect: ...


@dataclass(frozen=True)
class PoolConf:
    """Connection pool settings and the logger for SQL tracing.

    ``max_idle_count`` of zero means the driver default, negative means none;
    ``max_open`` of zero or less means unlimited.
    """

    max_idle_count: int = 0
    max_open: int = 0
    max_lifetime: datetime.timedelta | None = None
    max_idle_time: datetime.timedelta | None = None
    logger: logging.Logger | None = None


class Engine:
    """Runs statements on a DB-API connection, committing each write."""

    _autocommit = True

    def __init__(
        self, connection: Any, dialect: Dialect, pool: PoolConf | None = None
    ) -> None:
        self.connection = connection
        self.dialect = dialect
        self.pool = pool
        self.log = Logger(pool.logger if pool is not None else None)

    def query(self, query: str, *args: Any) -> Any:
        """Run a statement that returns rows; return the cursor."""
        cursor = self.connection.cursor()
        cursor.execute(query, args)
        return cursor

    def execute(self, query: str, *args: Any) -> Any:
        """Run a statement that changes data; return the cursor.

        Outside a transaction the change is committed at once.
        """
        cursor = self.connection.cursor()
        cursor.execute(query, args)
        if self._autocommit:
            self.connection.commit()
        return cursor

    def ping(self) -> None:
        """Check that the connection is usable; the driver raises if not."""
        cursor = self.connection.cursor()
        try:
            cursor.execute("SELECT 1")
            cursor.fetchall()
        finally:
            cursor.close()

    def begin(self) -> Transaction:
        """Start a transaction on this connection."""
        return Transaction(self.connection, self.dialect, self.pool)

    def commit(self) -> None:
        """Only a transaction can commit."""
        raise LormError("this not tx")

    def rollback(self) -> None:
        """Only a transaction can roll back."""
        raise LormError("this not tx")


class Transaction(Engine):
    """An engine whose writes wait for :meth:`commit` or :meth:`rollback`.

    As a context manager it commits on success and rolls back on error.
    """

    _autocommit = False

    def begin(self) -> Transaction:
        raise LormError("already in a transaction")

    def commit(self) -> None:
        """Make the transaction's changes permanent."""
        self.connection.commit()

    def rollback(self) -> None:
        """Discard the transaction's changes."""
        self.connection.rollback()

    def __enter__(self) -> Transaction:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False


def connect_with(
    connection: Any, conf: _DbConfig, pool: PoolConf | None = None
) -> Engine:
    """Wrap an open connection in an engine for ``conf``'s dialect and ping it."""
    if conf is None:
        raise LormError("dbconfig cannot be nil")
    engine = Engine(connection, conf.dialect(), pool)
    engine.ping()
    return engine