"""Database access over any DB-API 2.0 connection, with query logging."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .prettier import PLACEHOLDER_DOLLAR, PLACEHOLDER_QUESTION, pretty

logger = logging.getLogger(__name__)

_PLACEHOLDERS = (PLACEHOLDER_DOLLAR, PLACEHOLDER_QUESTION)


class DatabaseError(Exception):
    """A database operation could not be completed."""


class RowNotFoundError(DatabaseError):
    """A query expected to return a row returned none."""


@dataclass(frozen=True)
class Query:
    """A named SQL statement."""

    name: str
    sql: str


def _log_query(query: Query, placeholder: str, args: tuple) -> None:
    logger.info("sql: %s query: %s", query.name, pretty(query.sql, placeholder, *args))


def _row_to_dict(cursor, row) -> dict[str, Any]:
    return {column[0]: value for column, value in zip(cursor.description, row)}


class Database:
    """Runs named queries on a DB-API connection.

    ``paramstyle`` is the numbered placeholder marker the queries use:
    ``"$"`` for ``$1``, ``"?"`` for ``?1``.
    """

    def __init__(self, connection, paramstyle: str = PLACEHOLDER_DOLLAR) -> None:
        if paramstyle not in _PLACEHOLDERS:
            raise ValueError(f"unsupported paramstyle: {paramstyle!r}")
        self.connection = connection
        self.placeholder = paramstyle

    def _execute(self, query: Query, args: tuple):
        _log_query(query, self.placeholder, args)
        cursor = self.connection.cursor()
        cursor.execute(query.sql, args)
        return cursor

    def scan_one(self, query: Query, *args: Any) -> dict[str, Any]:
        """Run a query that must return exactly one row; return it by column."""
        cursor = self._execute(query, args)
        rows = cursor.fetchall()
        self.connection.commit()
        if not rows:
            raise RowNotFoundError("no rows in result set")
        if len(rows) > 1:
            raise DatabaseError(f"expected 1 row, got: {len(rows)}")
        return _row_to_dict(cursor, rows[0])

    def scan_all(self, query: Query, *args: Any) -> list[dict[str, Any]]:
        """Run a query and return every row by column."""
        cursor = self._execute(query, args)
        rows = cursor.fetchall()
        self.connection.commit()
        return [_row_to_dict(cursor, row) for row in rows]

    def exec(self, query: Query, *args: Any) -> int:
        """Run a statement and return the number of rows it affected."""
        cursor = self._execute(query, args)
        affected = cursor.rowcount
        self.connection.commit()
        return affected

    def query(self, query: Query, *args: Any):
        """Run a query and return the open cursor."""
        return self._execute(query, args)

    def query_row(self, query: Query, *args: Any) -> dict[str, Any]:
        """Run a query and return its first row by column."""
        cursor = self._execute(query, args)
        row = cursor.fetchone()
        if row is None:
            raise RowNotFoundError("no rows in result set")
        return _row_to_dict(cursor, row)

    def ping(self) -> None:
        """Check that the connection is usable."""
        cursor = self.connection.cursor()
        cursor.execute("SELECT 1")
        cursor.fetchall()

    def close(self) -> None:
        self.connection.close()


class Client:
    """Owns the database handle used by the repositories."""

    def __init__(self, database: Database | None) -> None:
        self._database = database

    def db(self) -> Database | None:
        return self._database

    def close(self) -> None:
        if self._database is not None:
            self._database.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def connect(
    dsn: str,
    connector: Callable[[str], Any],
    paramstyle: str = PLACEHOLDER_DOLLAR,
) -> Client:
    """Open a connection with ``connector(dsn)`` and wrap it in a client."""
    try:
        connection = connector(dsn)
    except Exception as error:
        raise DatabaseError(f"failed to connect to db: {error}") from error
    return Client(Database(connection, paramstyle))