"""Persistence of users in the ``users`` table."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import grpc

from .db import Client, Query
from .helpers import rand_int64_positive
from .model import User, UserChangable, UserFullNoPass

logger = logging.getLogger(__name__)

TABLE = "users"
_SELECT_COLUMNS = ("id", "name", "email", "role", "created_at", "updated_at")
_INSERT_COLUMNS = ("id", "name", "email", "role", "password")


class RepositoryError(Exception):
    """A storage operation failed; ``code`` is the gRPC status to report."""

    def __init__(self, message: str, code: grpc.StatusCode = grpc.StatusCode.INTERNAL) -> None:
        super().__init__(message)
        self.code = code


def _to_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    return datetime.fromisoformat(str(value))


def _user_from_row(row: dict[str, Any]) -> UserFullNoPass:
    return UserFullNoPass(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        role=int(row["role"]),
        created_at=_to_datetime(row["created_at"]),
        updated_at=_to_datetime(row["updated_at"]),
    )


class UsersRepository:
    """Creates, reads, updates and deletes users through a database client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    @property
    def _db(self):
        return self._client.db()

    def _marks(self, count: int, start: int = 1) -> list[str]:
        placeholder = self._db.placeholder
        return [f"{placeholder}{number}" for number in range(start, start + count)]

    def create(self, user: User) -> int:
        """Insert the user under a fresh random id and return that id."""
        values = (
            rand_int64_positive(),
            user.name,
            user.email,
            int(user.role),
            user.password,
        )
        sql = (
            f"INSERT INTO {TABLE} ({','.join(_INSERT_COLUMNS)}) "
            f"VALUES ({','.join(self._marks(len(values)))}) RETURNING id"
        )
        query = Query(name="users_repository.Create", sql=sql)
        try:
            row = self._db.scan_one(query, *values)
        except Exception as error:
            raise RepositoryError(f"failed to insert user: {error}") from error
        return row["id"]

    def get(self, user_id: int) -> UserFullNoPass:
        """Return the user with this id."""
        (mark,) = self._marks(1)
        sql = f"SELECT {', '.join(_SELECT_COLUMNS)} FROM {TABLE} WHERE id = {mark}"
        query = Query(name="users_repository.Get", sql=sql)
        try:
            row = self._db.scan_one(query, user_id)
        except Exception as error:
            raise RepositoryError(f"failed to read user: {error}") from error
        return _user_from_row(row)

    def update(self, data: UserChangable) -> None:
        """Apply the given changes and stamp ``updated_at``."""
        assignments: list[tuple[str, Any]] = [("updated_at", datetime.now())]
        if data.name is not None:
            assignments.append(("name", data.name))
        if data.email is not None:
            assignments.append(("email", data.email))

        marks = self._marks(len(assignments) + 1)
        set_clause = ", ".join(
            f"{column} = {mark}" for (column, _), mark in zip(assignments, marks)
        )
        sql = f"UPDATE {TABLE} SET {set_clause} WHERE id = {marks[-1]}"
        args = [value for _, value in assignments] + [data.id]
        query = Query(name="users_repository.Update", sql=sql)
        try:
            affected = self._db.exec(query, *args)
        except Exception as error:
            raise RepositoryError(f"failed to update user: {error}") from error
        logger.info("updated %d rows", affected)

    def delete(self, user_id: int) -> None:
        """Remove the user with this id, if present."""
        (mark,) = self._marks(1)
        sql = f"DELETE FROM {TABLE} WHERE id = {mark}"
        query = Query(name="users_repository.Delete", sql=sql)
        try:
            affected = self._db.exec(query, user_id)
        except Exception as error:
            raise RepositoryError(f"failed to delete user: {error}") from error
        logger.info("deleted %d rows", affected)