import logging
import sqlite3

import pytest

from userauth.db import (
    Client,
    Database,
    DatabaseError,
    Query,
    RowNotFoundError,
    connect,
)


@pytest.fixture
def database():
    db = Database(sqlite3.connect(":memory:"), "?")
    db.exec(Query("create", "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)"))
    db.exec(Query("seed", "INSERT INTO users (id, name) VALUES (?1, ?2)"), 1, "alice")
    db.exec(Query("seed", "INSERT INTO users (id, name) VALUES (?1, ?2)"), 2, "bob")
    yield db
    db.connection.close()


def test_exec_returns_rows_affected(database):
    affected = database.exec(Query("update", "UPDATE users SET name = ?1"), "carol")
    assert affected == 2


def test_scan_one_returns_row_by_column(database):
    row = database.scan_one(Query("get", "SELECT id, name FROM users WHERE id = ?1"), 2)
    assert row == {"id": 2, "name": "bob"}


def test_scan_one_without_rows(database):
    with pytest.raises(RowNotFoundError):
        database.scan_one(Query("get", "SELECT id FROM users WHERE id = ?1"), 99)


def test_scan_one_with_many_rows(database):
    with pytest.raises(DatabaseError, match="expected 1 row"):
        database.scan_one(Query("all", "SELECT id FROM users"))


def test_scan_all(database):
    rows = database.scan_all(Query("all", "SELECT id, name FROM users ORDER BY id"))
    assert [row["name"] for row in rows] == ["alice", "bob"]


def test_query_returns_cursor(database):
    cursor = database.query(Query("ids", "SELECT id FROM users ORDER BY id"))
    assert cursor.fetchall() == [(1,), (2,)]


def test_query_row_first_and_missing(database):
    row = database.query_row(Query("first", "SELECT name FROM users ORDER BY id"))
    assert row == {"name": "alice"}
    with pytest.raises(RowNotFoundError):
        database.query_row(Query("none", "SELECT name FROM users WHERE id = ?1"), 50)


def test_queries_are_logged(database, caplog):
    with caplog.at_level(logging.INFO, logger="userauth.db"):
        database.scan_one(Query("users.Get", "SELECT name FROM users WHERE id = ?1"), 1)
    assert "sql: users.Get" in caplog.text
    assert "WHERE id = 1" in caplog.text


def test_invalid_paramstyle():
    with pytest.raises(ValueError):
        Database(sqlite3.connect(":memory:"), "%s")


def test_client_close_closes_connection():
    connection = sqlite3.connect(":memory:")
    client = Client(Database(connection, "?"))
    client.db().ping()
    client.close()
    with pytest.raises(sqlite3.ProgrammingError):
        client.db().ping()


def test_client_without_database_closes_quietly():
    client = Client(None)
    client.close()
    assert client.db() is None


def test_connect_uses_connector():
    seen = []

    def connector(dsn):
        seen.append(dsn)
        return sqlite3.connect(":memory:")

    with connect("memory-dsn", connector, "?") as client:
        assert client.db().placeholder == "?"
    assert seen == ["memory-dsn"]


def test_connect_failure_is_wrapped():
    def connector(dsn):
        raise OSError("refused")

    with pytest.raises(DatabaseError, match="failed to connect to db: refused"):
        connect("dsn", connector)