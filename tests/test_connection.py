# tests/test_connection.py
#
# The gateway is exercised against mocked psycopg2 pool objects, so no
# PostgreSQL server is needed.
from __future__ import annotations

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import psycopg2
import pytest
from psycopg2 import pool

from db.connection import Database, QueryError


@pytest.fixture()
def pool_cls() -> Generator[MagicMock, None, None]:
    with patch("db.connection.pool.ThreadedConnectionPool") as cls:
        yield cls


@pytest.fixture()
def conn(pool_cls: MagicMock) -> MagicMock:
    connection = MagicMock()
    pool_cls.return_value.getconn.return_value = connection
    return connection


@pytest.fixture()
def cursor(conn: MagicMock) -> MagicMock:
    cur = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    return cur


@pytest.fixture()
def db(pool_cls: MagicMock) -> Database:
    database = Database("dbhost", 5433, "registry", "alice", "secret", min_conn=1, max_conn=3)
    database.open()
    return database


def test_open_builds_bounded_pool(pool_cls: MagicMock, db: Database) -> None:
    pool_cls.assert_called_once_with(
        1, 3, host="dbhost", port=5433, dbname="registry", user="alice", password="secret"
    )


def test_open_twice_keeps_one_pool(pool_cls: MagicMock, db: Database) -> None:
    db.open()
    assert pool_cls.call_count == 1


def test_query_before_open_raises() -> None:
    with pytest.raises(RuntimeError, match="not initialized"):
        Database("h", 1, "n", "u", "p").query("SELECT 1")


def test_query_returns_rows_and_releases(
    pool_cls: MagicMock, conn: MagicMock, cursor: MagicMock, db: Database
) -> None:
    cursor.description = [("fn_id",)]
    cursor.fetchall.return_value = [{"fn_id": "ABC123"}]

    rows = db.query("SELECT fn_id FROM shareholders WHERE fn_id = %s", ["ABC123"])

    assert rows == [{"fn_id": "ABC123"}]
    cursor.execute.assert_called_once_with(
        "SELECT fn_id FROM shareholders WHERE fn_id = %s", ["ABC123"]
    )
    conn.commit.assert_called_once()
    pool_cls.return_value.putconn.assert_called_once_with(conn)


def test_write_without_returning_gives_empty_list(cursor: MagicMock, db: Database) -> None:
    cursor.description = None
    assert db.query("DELETE FROM shareholders WHERE fn_id = %s", ["ABC123"]) == []
    cursor.fetchall.assert_not_called()


def test_driver_error_is_wrapped_and_connection_released(
    pool_cls: MagicMock, conn: MagicMock, cursor: MagicMock, db: Database
) -> None:
    cursor.execute.side_effect = psycopg2.Error("relation does not exist")

    with pytest.raises(QueryError, match="relation does not exist") as exc:
        db.query("SELECT * FROM missing")

    assert isinstance(exc.value.__cause__, psycopg2.Error)
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    pool_cls.return_value.putconn.assert_called_once_with(conn)


def test_unsendable_parameter_is_wrapped_and_rolled_back(
    pool_cls: MagicMock, conn: MagicMock, cursor: MagicMock, db: Database
) -> None:
    cursor.execute.side_effect = ValueError(
        "A string literal cannot contain NUL (0x00) characters."
    )

    with pytest.raises(QueryError, match="NUL") as exc:
        db.query("INSERT INTO shareholders (fn_id) VALUES (%s)", ["AB\x00CDE"])

    assert exc.value.pgcode is None
    assert isinstance(exc.value.__cause__, ValueError)
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    pool_cls.return_value.putconn.assert_called_once_with(conn)


def test_exhausted_pool_is_a_query_error(pool_cls: MagicMock, db: Database) -> None:
    pool_cls.return_value.getconn.side_effect = pool.PoolError("connection pool exhausted")

    with pytest.raises(QueryError, match="exhausted"):
        db.query("SELECT 1")
    pool_cls.return_value.putconn.assert_not_called()


def test_close_closes_all_connections(pool_cls: MagicMock, db: Database) -> None:
    db.close()
    pool_cls.return_value.closeall.assert_called_once()
    with pytest.raises(RuntimeError):
        db.query("SELECT 1")
