"""SQLite snapshot storage implementation."""

import json
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path


class IStorage(Protocol):
    """Persists the workspace as one JSON document (SQLite)."""

    async def init(self) -> None:
        """Open the database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def save_snapshot(self, document: dict) -> None:
        """Replace the stored snapshot with ``document``."""
        ...

    async def load_snapshot(self) -> dict | None:
        """Return the stored snapshot, or None when nothing was saved yet."""
        ...

    async def clear(self) -> None:
        """Delete the stored snapshot."""
        ...


class Storage:
    """SQLite storage holding the latest workspace snapshot."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def save_snapshot(self, document: dict) -> None:
        """Replace the stored snapshot with ``document``."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO snapshots (id, document, updated_at)
            VALUES (1, ?, CURRENT_TIMESTAMP)
            """,
            (json.dumps(document, ensure_ascii=False),),
        )
        await self._conn.commit()

    async def load_snapshot(self) -> dict | None:
        """Return the stored snapshot, or None when nothing was saved yet."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            "SELECT document FROM snapshots WHERE id = 1"
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return json.loads(row[0])

    async def clear(self) -> None:
        """Delete the stored snapshot."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute("DELETE FROM snapshots")
        await self._conn.commit()
