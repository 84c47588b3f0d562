# src/kv/sqlite_store.py — v1
"""SQLite-based key-value store (KV_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from widgetsmith.kv.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_entries (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def _escape_like(prefix: str) -> str:
    return prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteKeyValueStore(BaseKeyValueStore):
    """SQLite-backed key-value store."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser() if str(db_path) != ":memory:" else None
        if self._db_path is not None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path or ":memory:"))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> str | None:
        cursor = self._conn.execute("SELECT value FROM kv_entries WHERE key = ?", (key,))
        row = cursor.fetchone()
        return None if row is None else row[0]

    async def set(self, key: str, value: str) -> None:
        """Upsert a value."""
        self._conn.execute(
            """INSERT OR REPLACE INTO kv_entries (key, value, updated_at)
               VALUES (?, ?, CURRENT_TIMESTAMP)""",
            (key, value),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
        self._conn.commit()

    async def list_keys(self, prefix: str = "") -> list[str]:
        cursor = self._conn.execute(
            "SELECT key FROM kv_entries WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
            (_escape_like(prefix) + "%",),
        )
        return [row[0] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
