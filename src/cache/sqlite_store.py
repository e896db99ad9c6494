# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3 — no external dependency. One row per bucket
holding the serialized snapshot.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from mpfscore.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_buckets (
    bucket TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def load_bucket(self, bucket: str) -> dict[str, Any]:
        cursor = self._conn.execute(
            "SELECT data FROM cache_buckets WHERE bucket = ?", (bucket,)
        )
        row = cursor.fetchone()
        if row is None:
            return {}
        data = json.loads(row[0])
        if not isinstance(data, dict):
            raise ValueError(f"Cache bucket {bucket!r} is not a JSON object")
        return data

    async def save_bucket(self, bucket: str, entries: dict[str, Any]) -> None:
        """Replace the bucket row with the full snapshot."""
        self._conn.execute(
            """INSERT OR REPLACE INTO cache_buckets (bucket, data, updated_at)
               VALUES (?, ?, CURRENT_TIMESTAMP)""",
            (bucket, json.dumps(entries, ensure_ascii=False)),
        )
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
