"""SQL generation for MySQL and PostgreSQL and row mapping over DB-API connections."""

__version__ = "0.1.0"