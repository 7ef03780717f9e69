"""Base repository protocol and utilities.

This module defines the interface that all repositories must implement.
Every ``sqlite3`` error escaping a query is re-raised as
:class:`~albumtree.errors.QueryError`, so callers deal with one
persistence error type regardless of what the driver raised.
"""
from typing import Protocol
import sqlite3

import aiosqlite

from ...errors import QueryError


class ConnectionProtocol(Protocol):
    """Protocol for database connection."""

    def execute(self, sql: str, parameters: tuple = ...) -> sqlite3.Cursor: ...
    def executemany(self, sql: str, parameters: list[tuple]) -> sqlite3.Cursor: ...
    def commit(self) -> None: ...


class Repository:
    """Base repository class.

    All repositories should inherit from this class.

    Example:
        class AlbumRepository(Repository):
            def get_by_id(self, album_id: int) -> dict | None:
                cursor = self._execute("SELECT * FROM albums WHERE id = ?", (album_id,))
                return self._row_to_dict(cursor.fetchone())
    """

    def __init__(self, connection: ConnectionProtocol):
        """Initialize repository with database connection.

        Args:
            connection: Database connection (sqlite3.Connection or compatible)
        """
        self._conn = connection

    @property
    def connection(self) -> ConnectionProtocol:
        """The underlying connection, used to open transactions."""
        return self._conn

    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query with parameters.

        Args:
            sql: SQL query string
            parameters: Query parameters (prevents SQL injection)

        Returns:
            sqlite3.Cursor with results

        Raises:
            QueryError: If the database rejects the statement
        """
        try:
            return self._conn.execute(sql, parameters)
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _execute_many(self, sql: str, parameters_list: list[tuple]) -> sqlite3.Cursor:
        """Execute SQL query multiple times.

        Args:
            sql: SQL query string
            parameters_list: List of parameter tuples

        Returns:
            sqlite3.Cursor
        """
        try:
            return self._conn.executemany(sql, parameters_list)
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _fetchone(self, sql: str, parameters: tuple = ()) -> sqlite3.Row | None:
        try:
            return self._execute(sql, parameters).fetchone()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _fetchall(self, sql: str, parameters: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self._execute(sql, parameters).fetchall()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _row_to_dict(self, row: sqlite3.Row | None) -> dict | None:
        """Convert sqlite3.Row to dictionary.

        Args:
            row: Database row or None

        Returns:
            Dictionary representation or None
        """
        return dict(row) if row else None


# =============================================================================
# ASYNC SUPPORT
# =============================================================================

class AsyncConnectionProtocol(Protocol):
    """Protocol for async database connection."""

    async def execute(self, sql: str, parameters: tuple = ...) -> aiosqlite.Cursor: ...
    async def commit(self) -> None: ...


class AsyncRepository:
    """Async base repository class.

    Provides async read access using aiosqlite.

    Example:
        class AsyncAlbumRepository(AsyncRepository):
            async def get_by_id(self, album_id: int) -> dict | None:
                return await self._fetchone("SELECT * FROM albums WHERE id = ?", (album_id,))
    """

    def __init__(self, connection: AsyncConnectionProtocol):
        """Initialize repository with async database connection.

        Args:
            connection: Async database connection (aiosqlite.Connection)
        """
        self._conn = connection

    async def _execute(self, sql: str, parameters: tuple = ()) -> aiosqlite.Cursor:
        """Execute SQL query with parameters asynchronously.

        Args:
            sql: SQL query string
            parameters: Query parameters (prevents SQL injection)

        Returns:
            aiosqlite.Cursor with results
        """
        try:
            return await self._conn.execute(sql, parameters)
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _row_to_dict(self, row: aiosqlite.Row | None) -> dict | None:
        """Convert aiosqlite.Row to dictionary."""
        return dict(row) if row else None

    async def _fetchone(self, sql: str, parameters: tuple = ()) -> dict | None:
        """Fetch single row and return as dict.

        Args:
            sql: SQL query
            parameters: Query parameters

        Returns:
            Dictionary or None
        """
        cursor = await self._execute(sql, parameters)
        try:
            row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e
        return self._row_to_dict(row)

    async def _fetchall(self, sql: str, parameters: tuple = ()) -> list[dict]:
        """Fetch all rows and return as list of dicts.

        Args:
            sql: SQL query
            parameters: Query parameters

        Returns:
            List of dictionaries
        """
        cursor = await self._execute(sql, parameters)
        try:
            rows = await cursor.fetchall()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e
        return [dict(row) for row in rows]
