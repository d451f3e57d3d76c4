"""SQLite key-value backend.

Provides persistent storage using a single SQLite table.
Uses aiosqlite for async access.
"""

from datetime import datetime
from pathlib import Path

import aiosqlite

from .base import KeyValueStore


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed key-value store.

    Stores values in a `kv` table of a SQLite database file.
    Supports persistent storage across sessions.
    """

    def __init__(self, path: str | Path = "./mercanto.db"):
        self._db_path = Path(path).expanduser()
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database connection and create the schema."""
        if self._connection is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _db(self) -> aiosqlite.Connection:
        if self._connection is None:
            await self.connect()
        return self._connection

    async def get(self, key: str) -> str | None:
        db = await self._db()
        async with db.execute("SELECT value FROM kv WHERE key = ?", (key,)) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        db = await self._db()
        await db.execute("""
            INSERT INTO kv (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """, (key, value, datetime.now().isoformat()))
        await db.commit()

    async def delete(self, key: str) -> None:
        db = await self._db()
        await db.execute("DELETE FROM kv WHERE key = ?", (key,))
        await db.commit()

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
