import logging
import sqlite3
from datetime import datetime

import grpc
import pytest

from userauth.db import Client, Database
from userauth.model import User, UserChangable
from userauth.repository import RepositoryError, UsersRepository

sqlite3.register_adapter(datetime, lambda value: value.isoformat(" "))

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    role INTEGER NOT NULL,
    password TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP
)
"""


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.execute(SCHEMA)
    conn.commit()
    yield conn
    conn.close()


@pytest.fixture
def repo(connection):
    return UsersRepository(Client(Database(connection, "?")))


def make_user(name="alice", email="alice@example.com", role=1):
    password = "password"
    return User(name=name, email=email, role=role, password=password, password_confirm=password)


def count_users(connection):
    return connection.execute("SELECT COUNT(*) FROM users").fetchone()[0]


def test_create_then_get_round_trip(repo):
    user = make_user()
    user_id = repo.create(user)
    stored = repo.get(user_id)
    assert user_id >= 0
    assert stored.id == user_id
    assert (stored.name, stored.email, stored.role) == (user.name, user.email, user.role)
    assert isinstance(stored.created_at, datetime)
    assert stored.updated_at is None


def test_create_stores_password(repo, connection):
    user_id = repo.create(make_user())
    row = connection.execute("SELECT password FROM users WHERE id = ?", (user_id,)).fetchone()
    assert row[0] == "password"


def test_create_assigns_distinct_ids(repo, connection):
    first = repo.create(make_user(name="a", email="a@example.com"))
    second = repo.create(make_user(name="b", email="b@example.com"))
    assert first != second
    assert count_users(connection) == 2


def test_update_name_only(repo):
    user_id = repo.create(make_user())
    repo.update(UserChangable(id=user_id, name="bob"))
    stored = repo.get(user_id)
    assert stored.name == "bob"
    assert stored.email == "alice@example.com"
    assert isinstance(stored.updated_at, datetime)


def test_update_email_only(repo):
    user_id = repo.create(make_user())
    repo.update(UserChangable(id=user_id, email="new@example.com"))
    stored = repo.get(user_id)
    assert stored.email == "new@example.com"
    assert stored.name == "alice"


def test_delete_removes_user(repo, connection):
    user_id = repo.create(make_user())
    repo.delete(user_id)
    assert count_users(connection) == 0
    with pytest.raises(RepositoryError) as info:
        repo.get(user_id)
    assert info.value.code == grpc.StatusCode.INTERNAL
    assert str(info.value).startswith("failed to read user")


def test_delete_missing_user_leaves_others(repo, connection):
    user_id = repo.create(make_user())
    repo.delete(user_id + 1 if user_id < 2**62 else user_id - 1)
    assert count_users(connection) == 1
    stored = repo.get(user_id)
    assert stored.id == user_id
    assert stored.name == "alice"


def test_create_without_table_fails():
    conn = sqlite3.connect(":memory:")
    repository = UsersRepository(Client(Database(conn, "?")))
    with pytest.raises(RepositoryError) as info:
        repository.create(make_user())
    assert str(info.value).startswith("failed to insert user")


def test_delete_logs_query(repo, caplog):
    caplog.set_level(logging.INFO, logger="userauth.db")
    repo.delete(5)
    messages = [record.getMessage() for record in caplog.records]
    assert any("users_repository.Delete" in message for message in messages)
    assert any("DELETE FROM users WHERE id = 5" in message for message in messages)