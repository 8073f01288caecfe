# lorm

`lorm` writes SQL for MySQL and PostgreSQL and maps result rows onto Python
values. It works on top of a DB-API 2.0 connection that you open yourself.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `lorm.engine`: `Engine` runs statements on a connection. It commits after
  each `execute`. `Transaction` (from `Engine.begin()`) waits for `commit()`
  or `rollback()`. `connect_with(connection, conf, pool)` wraps a connection
  in an engine for the dialect of `conf` and pings it with `SELECT 1`.
  `PoolConf` holds pool settings and the logger.
- `lorm.config`: `MysqlConf` and `PgConf` hold connection settings.
  `dsn()` gives the data source name and `dialect()` gives the dialect.
- `lorm.dialect`: `MysqlDialect` and `PgDialect`.
  - `parse(Clause(...))` renders one where condition with `?` placeholders,
    for example `Clause(ClauseType.IN, "id", 3)` gives `id IN (?,?,?)`.
  - `insert_sql(Statement(...))` returns the SQL and its arguments. Conflicts
    are handled with `INSERT IGNORE`, `REPLACE INTO` and
    `ON DUPLICATE KEY UPDATE` on MySQL, and with `ON CONFLICT ... DO NOTHING`,
    `DO UPDATE SET` and `RETURNING` on PostgreSQL. PostgreSQL refuses
    replace.
  - `MysqlDialect` also has `delete_sql`, `update_sql` and `select_sql`.
    Each takes a where fragment and its arguments. `delete_sql` writes an
    `UPDATE` instead of a `DELETE` when `Statement.soft_delete` is set and
    soft delete has not been skipped.
  - `PgDialect.render(sql)` (the same as `to_pg_sql`) numbers the `?`
    placeholders as `$1, $2, …`. `gen_placeholders(n)` writes `n` `?`
    marks.
- `lorm.extra`: `ExtraContext` holds per-call options.
  - Chainable options: `table`, `select`, `order_by`, `order_desc_by`,
    `limit`, `offset`, `return_type`, `show_sql`, `no_run`,
    `skip_soft_delete`.
  - Extra column values: `set`, `set_null`, `set_now`, `set_increment`,
    `set_expression`.
  - `when_duplicate_key(...)` returns a `DuplicateKey` with `do_nothing()`,
    `do_update(set_context)` and `do_replace(set_context)`. `SetContext`
    picks the columns that a conflict updates.
- `lorm.values`: `render_insert_values` and `render_set` turn `Value`s
  (`lorm.field.ValueType`: NULL, NOW, Unix timestamps, bound value,
  increment, expression, primary key) into SQL fragments plus arguments.
- `lorm.builder`: `query_build(engine)` returns a `SqlBuilder` for
  building a SELECT step by step.
- `lorm.native`: runs hand-written SQL. It has `query_one`, `query_list`,
  `execute`, `query_scan` and `prepare`.
- `lorm.scan`: `scan_one` and `scan_list` read cursor rows as one of these:
  - an atom type (`int`, `str`, `uuid.UUID`, `datetime.date`, `Decimal`, …)
  - a dataclass or named tuple
  - a mapping

  `model_columns` lists the columns of a record type.
- `lorm.kind`, `lorm.field`, `lorm.enums`, `lorm.log`: type
  classification, value descriptors, enumerations and a small logging
  wrapper.
- `lorm.errors`: failures raise `LormError` or one of its subclasses.

## A short tour

```python
from lorm.config import PgConf
from lorm.engine import connect_with
from lorm.native import execute, query_one, query_scan

engine = connect_with(connection, PgConf(), None)

affected = execute(engine, "delete from user where id = %s", 1)
answer = query_one(engine, int, "select 1")           # value, or None
rows_read, name = query_scan(engine, "select 'kk'").scan_one(str)
```

The engine hands SQL and arguments to the driver unchanged. Write
placeholders in the driver's own style, or pass SQL through
`engine.dialect.render(...)` yourself.

Building a query:

```python
from lorm.builder import query_build

users = (
    query_build(engine)
    .select("id")
    .select("name")
    .from_("user")
    .where("age > ?")
    .arg(18)
    .order_desc_by("id")
    .limit(10)
    .scan_list(User)
)
```

In a chain, `where`, `join`, `order_by`, `limit` and the other methods take
extra boolean conditions. The step is skipped when any of them is false.
`where_in` and `where_sql_in` are skipped when no arguments are given.
`between` leaves a side open when its bound is None.

Paging returns a `PageResult` with `list`, `page_size`, `current` and
`total`:

```python
page = query_build(engine).select("id").from_("user").page(1, 20).scan_page(User)
```

Transactions can be used as context managers. They commit on success and
roll back on error:

```python
with engine.begin() as tx:
    tx.execute("update user set name = %s where id = %s", "kk", 1)
```

Calling `commit()` or `rollback()` on a plain `Engine` raises `LormError`.

## What it does not do

- It does not open database connections and ships no drivers. You supply
  a DB-API connection. `MysqlConf.dsn()` and `PgConf.dsn()` only build the
  strings.
- It has no table-level helpers that read a model, find its table and
  primary keys, and run insert, update, delete or select for you. The
  dialects only generate those statements from a `Statement` you fill in.
  `PgDialect` generates inserts only.
- It has no where-condition builder of its own.
  `SqlBuilder.where_builder` accepts any object with a
  `to_sql(parse)` method returning SQL and arguments.
- The pool settings in `PoolConf` are stored, but nothing applies them to
  the connection.