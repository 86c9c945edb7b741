"""SQLite dialog state store."""

import time
from pathlib import Path

import aiosqlite

from ..config import resolve_db_path
from ..dialog import Dialog, dump_dialog, load_dialog
from ..logging_config import get_logger
from .storage import Clock, expires_at

logger = get_logger(__name__)


class SqliteStore:
    """Dialog state in a SQLite table, with expiry checked on read."""

    def __init__(self, db_path: str | Path | None = None, clock: Clock = time.time):
        self._db_path = resolve_db_path(db_path)
        self._clock = clock
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()
        logger.debug("SQLite dialog store ready at %s", self._db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _connection(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    async def _live_payload(self, key: str) -> str | None:
        cursor = await self._connection().execute(
            """
            SELECT payload
            FROM dialog_states
            WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)
            """,
            (key, self._clock()),
        )
        row = await cursor.fetchone()
        return row[0] if row else None

    async def has(self, key: str) -> bool:
        return await self._live_payload(key) is not None

    async def get(self, key: str) -> Dialog:
        payload = await self._live_payload(key)
        if payload is None:
            raise KeyError(key)
        return load_dialog(payload)

    async def set(self, key: str, dialog: Dialog, ttl: int | None) -> None:
        conn = self._connection()
        deadline = expires_at(self._clock(), ttl)
        payload = dump_dialog(dialog)

        await conn.execute(
            """
            INSERT OR REPLACE INTO dialog_states
            (key, payload, expires_at, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
            """,
            (key, payload, deadline),
        )
        await conn.commit()

    async def delete(self, key: str) -> None:
        conn = self._connection()
        await conn.execute("DELETE FROM dialog_states WHERE key = ?", (key,))
        await conn.commit()

    async def purge_expired(self) -> int:
        """Delete expired rows, return how many were removed."""
        conn = self._connection()
        cursor = await conn.execute(
            "DELETE FROM dialog_states WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self._clock(),),
        )
        await conn.commit()
        return cursor.rowcount

    async def clear(self) -> None:
        """Clear all data."""
        conn = self._connection()
        await conn.execute("DELETE FROM dialog_states")
        await conn.commit()
