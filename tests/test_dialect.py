import pytest

from lorm.dialect import (
    Clause,
    MysqlDialect,
    PgDialect,
    Statement,
    gen_placeholders,
    to_pg_sql,
)
from lorm.enums import ClauseType, InsertType, ReturnType
from lorm.errors import LormError
from lorm.extra import ExtraContext, SetContext
from lorm.field import Value, ValueType


def _stmt(extra=None, **kwargs):
    return Statement(
        table_name="user",
        columns=["id", "name"],
        column_values=[Value(ValueType.VAL, 1), Value(ValueType.VAL, "kk")],
        extra=extra if extra is not None else ExtraContext(),
        **kwargs,
    )


def test_gen_placeholders_counts():
    assert gen_placeholders(3).count("?") == 3
    assert gen_placeholders(0) == ""


def test_to_pg_sql_numbers_in_order():
    assert to_pg_sql("a = ? AND b = ?") == "a = $1 AND b = $2"


def test_to_pg_sql_without_placeholders_unchanged():
    assert to_pg_sql("select 1") == "select 1"


@pytest.mark.parametrize(
    "typ, suffix",
    [
        (ClauseType.EQ, " = ?"),
        (ClauseType.NEQ, " <> ?"),
        (ClauseType.LESS, " < ?"),
        (ClauseType.LESS_EQ, " <= ?"),
        (ClauseType.GREATER, " > ?"),
        (ClauseType.GREATER_EQ, " >= ?"),
        (ClauseType.LIKE, " LIKE ?"),
        (ClauseType.NOT_LIKE, " NOT LIKE ?"),
        (ClauseType.BETWEEN, " BETWEEN ? AND ?"),
        (ClauseType.NOT_BETWEEN, " NOT BETWEEN ? AND ?"),
        (ClauseType.IS_NULL, " IS NULL"),
        (ClauseType.IS_NOT_NULL, " IS NOT NULL"),
        (ClauseType.IS_FALSE, " IS FALSE"),
    ],
)
@pytest.mark.parametrize("dialect", [MysqlDialect(), PgDialect()])
def test_parse_simple_clauses(dialect, typ, suffix):
    assert dialect.parse(Clause(typ, "age")) == "age" + suffix


@pytest.mark.parametrize("typ", [ClauseType.IN, ClauseType.NOT_IN])
def test_parse_in_has_one_placeholder_per_arg(typ):
    out = MysqlDialect().parse(Clause(typ, "id", 4))
    assert out.startswith("id")
    assert out.count("?") == 4
    assert out.endswith(")")


def test_parse_contains_is_unknown():
    with pytest.raises(LormError):
        MysqlDialect().parse(Clause(ClauseType.CONTAINS, "tags"))


def test_render_keeps_mysql_and_numbers_pg():
    sql = "select * from t where a = ?"
    assert MysqlDialect().render(sql) == sql
    assert PgDialect().render(sql) == to_pg_sql(sql)


def test_last_insert_id_flags():
    assert MysqlDialect().need_last_insert_id is True
    assert PgDialect().need_last_insert_id is False


def test_mysql_insert_plain():
    stmt = _stmt()
    sql, args = MysqlDialect().insert_sql(stmt)
    assert sql.startswith("INSERT INTO user ")
    assert sql.endswith(";")
    assert args == [1, "kk"]
    assert stmt.is_query is False


@pytest.mark.parametrize(
    "extra, prefix",
    [
        (ExtraContext().when_duplicate_key("id").do_nothing(), "INSERT IGNORE "),
        (ExtraContext().when_duplicate_key("id").do_replace(), "REPLACE INTO "),
    ],
)
def test_mysql_insert_prefix(extra, prefix):
    sql, _ = MysqlDialect().insert_sql(_stmt(extra))
    assert sql.startswith(prefix)


def test_mysql_insert_update_defaults_to_non_key_columns():
    extra = ExtraContext().when_duplicate_key("id").do_update()
    sql, args = MysqlDialect().insert_sql(_stmt(extra))
    assert " AS new ON DUPLICATE KEY UPDATE " in sql
    assert "name = new.name" in sql
    assert "id = new.id" not in sql
    assert args == [1, "kk"]


def test_mysql_insert_update_with_set_columns():
    sc = SetContext(columns=["age"], column_values=[Value(ValueType.VAL, 30)])
    extra = ExtraContext().when_duplicate_key("id").do_update(sc)
    sql, args = MysqlDialect().insert_sql(_stmt(extra))
    assert "age = ?" in sql
    assert "new.name" not in sql
    assert args == [1, "kk", 30]


def test_mysql_delete_hard():
    sql, args = MysqlDialect().delete_sql(_stmt(), "id = ?", [5])
    assert sql.startswith("DELETE FROM user")
    assert " WHERE id = ?" in sql
    assert args == [5]


def test_mysql_delete_soft_becomes_update():
    stmt = Statement(
        table_name="user",
        columns=["deleted_at"],
        column_values=[Value(ValueType.NOW)],
        soft_delete=True,
    )
    sql, args = MysqlDialect().delete_sql(stmt, "id = ?", [5])
    assert sql.startswith("UPDATE user SET ")
    assert "deleted_at = NOW()" in sql
    assert args == [5]


def test_mysql_delete_skip_soft_delete():
    stmt = Statement(
        table_name="user",
        columns=["deleted_at"],
        column_values=[Value(ValueType.NOW)],
        soft_delete=True,
        extra=ExtraContext().skip_soft_delete(),
    )
    sql, _ = MysqlDialect().delete_sql(stmt, "id = ?", [5])
    assert sql.startswith("DELETE FROM ")


def test_mysql_update_args_order():
    sql, args = MysqlDialect().update_sql(_stmt(), "id = ?", [9])
    assert sql.startswith("UPDATE user SET ")
    assert sql.endswith("id = ?;")
    assert args == [1, "kk", 9]


def test_mysql_select_with_limit_offset():
    stmt = Statement(
        table_name="user",
        select_field_names=["id", "name"],
        last_sql=" ORDER BY id",
        limit=10,
        offset=20,
    )
    sql, args = MysqlDialect().select_sql(stmt, "name = ?", ["kk"])
    assert sql.startswith("SELECT id,name FROM user WHERE name = ?")
    assert " LIMIT 10" in sql
    assert " OFFSET 20" in sql
    assert sql.index(" ORDER BY id") < sql.index(" LIMIT ")
    assert args == ["kk"]


def test_pg_insert_replace_rejected():
    extra = ExtraContext().when_duplicate_key("id").do_replace()
    with pytest.raises(LormError):
        PgDialect().insert_sql(_stmt(extra))


def test_pg_insert_ignore():
    extra = ExtraContext().when_duplicate_key("id").do_nothing()
    sql, _ = PgDialect().insert_sql(_stmt(extra))
    assert "ON CONFLICT (id) DO " in sql
    assert "NOTHING " in sql


def test_pg_insert_update_uses_excluded():
    extra = ExtraContext().when_duplicate_key("id").do_update()
    sql, _ = PgDialect().insert_sql(_stmt(extra))
    assert "UPDATE SET " in sql
    assert "name= EXCLUDED.name" in sql
    assert "id= EXCLUDED.id" not in sql


def test_pg_insert_returning_primary_key():
    extra = ExtraContext().return_type(ReturnType.PRIMARY_KEY)
    stmt = _stmt(extra, scan_is_ptr=True)
    sql, _ = PgDialect().insert_sql(stmt)
    assert " RETURNING id" in sql
    assert stmt.is_query is True


def test_pg_insert_not_ptr_is_exec():
    extra = ExtraContext().return_type(ReturnType.ALL_FIELD)
    stmt = _stmt(extra)
    sql, _ = PgDialect().insert_sql(stmt)
    assert "RETURNING" not in sql
    assert stmt.is_query is False


def test_pg_insert_rendered_numbers_args():
    stmt = _stmt()
    sql, args = PgDialect().insert_sql(stmt)
    rendered = PgDialect().render(sql)
    assert "?" not in rendered
    assert rendered.count("$") == len(args)
    assert stmt.extra.insert_type is InsertType.ERR