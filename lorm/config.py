"""Connection settings for the supported databases."""

from __future__ import annotations

from dataclasses import dataclass

from .dialect import MysqlDialect, PgDialect

__all__ = ["MysqlConf", "PgConf"]


@dataclass(frozen=True)
class MysqlConf:
    """MySQL connection settings."""

    host: str = ""
    port: str = ""
    db_name: str = ""
    user: str = ""
    password: str = ""
    other: str = ""

    def dsn(self) -> str:
        """Data source name; ``other`` replaces the default options."""
        base = f"{self.user}:{self.password}@tcp({self.host}:{self.port})/{self.db_name}?"
        return base + (self.other or "charset=utf8mb4&parseTime=True&loc=Local")

    def dialect(self) -> MysqlDialect:
        """The dialect for this database."""
        return MysqlDialect()


@dataclass(frozen=True)
class PgConf:
    """PostgreSQL connection settings."""

    host: str = ""
    port: str = ""
    db_name: str = ""
    user: str = ""
    password: str = ""
    other: str = ""

    def dsn(self) -> str:
        """Key/value data source name; defaults apply when ``other`` is empty."""
        dsn = (
            f"user={self.user} password={self.password} dbname={self.db_name}"
            f" host={self.host} port= {self.port} "
        )
        if not self.other:
            dsn += "sslmode=disable TimeZone=Asia/Shanghai"
        return dsn + self.other

    def dialect(self) -> PgDialect:
        """The dialect for this database."""
        return PgDialect()