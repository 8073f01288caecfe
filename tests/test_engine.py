import logging
import sqlite3

import pytest

from lorm.config import MysqlConf, PgConf
from lorm.dialect import MysqlDialect
from lorm.engine import Engine, PoolConf, Transaction, connect_with
from lorm.errors import LormError


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "test.db")


@pytest.fixture
def engine(db_path):
    conn = sqlite3.connect(db_path)
    eng = connect_with(conn, MysqlConf())
    eng.execute("CREATE TABLE user (id INTEGER PRIMARY KEY, name TEXT)")
    yield eng
    conn.close()


def _count(db_path):
    other = sqlite3.connect(db_path)
    try:
        return other.execute("SELECT count(*) FROM user").fetchone()[0]
    finally:
        other.close()


def test_connect_with_uses_config_dialect():
    conn = sqlite3.connect(":memory:")
    sql = "a = ? AND b = ?"
    assert connect_with(conn, PgConf()).dialect.render(sql) == "a = $1 AND b = $2"
    assert connect_with(conn, MysqlConf()).dialect.render(sql) == sql


def test_connect_with_none_config():
    with pytest.raises(LormError, match="dbconfig cannot be nil"):
        connect_with(sqlite3.connect(":memory:"), None)


def test_connect_with_closed_connection_fails_ping():
    conn = sqlite3.connect(":memory:")
    conn.close()
    with pytest.raises(sqlite3.ProgrammingError):
        connect_with(conn, MysqlConf())


def test_query_returns_rows(engine):
    engine.execute("INSERT INTO user (id, name) VALUES (?, ?)", 1, "lontten")
    rows = engine.query("SELECT id, name FROM user WHERE id = ?", 1).fetchall()
    assert rows == [(1, "lontten")]


def test_execute_commits_outside_transaction(engine, db_path):
    cursor = engine.execute("INSERT INTO user (id, name) VALUES (?, ?)", 1, "a")
    assert cursor.rowcount == 1
    assert _count(db_path) == 1


def test_engine_commit_and_rollback_raise(engine):
    with pytest.raises(LormError, match="this not tx"):
        engine.commit()
    with pytest.raises(LormError, match="this not tx"):
        engine.rollback()


def test_transaction_rollback_discards(engine, db_path):
    tx = engine.begin()
    assert isinstance(tx, Transaction)
    tx.execute("INSERT INTO user (id, name) VALUES (?, ?)", 1, "a")
    assert tx.query("SELECT count(*) FROM user").fetchone()[0] == 1
    tx.rollback()
    assert _count(db_path) == 0


def test_transaction_commit_persists(engine, db_path):
    tx = engine.begin()
    cursor = tx.execute("INSERT INTO user (id, name) VALUES (?, ?)", 1, "a")
    assert cursor.rowcount == 1
    tx.commit()
    assert _count(db_path) == 1
    rows = engine.query("SELECT id, name FROM user").fetchall()
    assert rows == [(1, "a")]


def test_transaction_context_manager(engine, db_path):
    with engine.begin() as tx:
        cursor = tx.execute("INSERT INTO user (id, name) VALUES (?, ?)", 1, "a")
        assert cursor.rowcount == 1
    assert _count(db_path) == 1
    with pytest.raises(ValueError):
        with engine.begin() as tx:
            tx.execute("INSERT INTO user (id, name) VALUES (?, ?)", 2, "b")
            raise ValueError("boom")
    assert _count(db_path) == 1
    assert engine.query("SELECT id FROM user").fetchall() == [(1,)]


def test_transaction_cannot_begin_again(engine):
    with pytest.raises(LormError):
        engine.begin().begin()


def test_pool_conf_kept_on_engine():
    pool = PoolConf(max_open=5, logger=logging.getLogger("test"))
    eng = Engine(sqlite3.connect(":memory:"), MysqlDialect(), pool)
    assert eng.pool is pool
    assert eng.begin().pool is pool