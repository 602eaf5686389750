"""Async SQLite database wrapper."""

import logging
import sqlite3
from pathlib import Path

import aiosqlite

from mynotes.errors import StorageError
from mynotes.persistence.models import SCHEMA, SCHEMA_VERSION

logger = logging.getLogger(__name__)


def _casefold(value: str | None) -> str | None:
    """Unicode-aware case folding for SQL text matching."""
    return value.casefold() if value is not None else None


class Database:
    """Async SQLite connection manager.

    aiosqlite runs every statement on its own worker thread, so awaiting
    these methods never blocks the event loop that drives the screens.
    sqlite failures are re-raised as StorageError.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._connection: aiosqlite.Connection | None = None

    @property
    def path(self) -> Path:
        """Location of the database file."""
        return self._path

    @property
    def is_connected(self) -> bool:
        """Check if the connection is open."""
        return self._connection is not None

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the active database connection."""
        if self._connection is None:
            raise StorageError("Database not connected", code="not_connected")
        return self._connection

    async def connect(self) -> None:
        """Open the database connection and initialize schema."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._path)
            self._connection.row_factory = aiosqlite.Row
            await self._connection.create_function(
                "casefold", 1, _casefold, deterministic=True
            )
            await self._connection.execute("PRAGMA journal_mode=WAL")
            await self._connection.execute("PRAGMA foreign_keys=ON")
            await self._init_schema()
        except (sqlite3.Error, OSError) as e:
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
            raise StorageError(f"Cannot open database {self._path}: {e}") from e
        logger.info("Database connected: %s", self._path)

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("Database disconnected")

    async def _init_schema(self) -> None:
        """Initialize database schema."""
        for statement in SCHEMA:
            await self._connection.execute(statement)
        await self._connection.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
        await self._connection.commit()
        logger.debug("Database schema initialized (version %d)", SCHEMA_VERSION)

    async def execute(
        self, sql: str, parameters: tuple | dict | None = None
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement."""
        connection = self.connection
        try:
            if parameters is None:
                return await connection.execute(sql)
            return await connection.execute(sql, parameters)
        except sqlite3.Error as e:
            logger.error("SQL failed: %s", e)
            raise StorageError(str(e)) from e

    async def fetchone(
        self, sql: str, parameters: tuple | dict | None = None
    ) -> aiosqlite.Row | None:
        """Execute a query and fetch one row."""
        cursor = await self.execute(sql, parameters)
        try:
            return await cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    async def fetchall(
        self, sql: str, parameters: tuple | dict | None = None
    ) -> list[aiosqlite.Row]:
        """Execute a query and fetch all rows."""
        cursor = await self.execute(sql, parameters)
        try:
            return list(await cursor.fetchall())
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    async def commit(self) -> None:
        """Commit the current transaction."""
        try:
            await self.connection.commit()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        try:
            await self.connection.rollback()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
