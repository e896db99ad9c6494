# src/cache/json_store.py — v2
"""JSON file-based cache store (default CACHE_BACKEND=json).

Stores one JSON file per bucket under CACHE_ROOT. Every save rewrites
the whole file through a temporary file and an atomic replace.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from mpfscore.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using one JSON document per bucket."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def load_bucket(self, bucket: str) -> dict[str, Any]:
        """Read a bucket file; a missing file is an empty bucket."""
        path = self._bucket_path(bucket)
        if not path.exists():
            return {}
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Cache bucket {bucket!r} is not a JSON object")
        return data

    async def save_bucket(self, bucket: str, entries: dict[str, Any]) -> None:
        """Write the full bucket snapshot."""
        path = self._bucket_path(bucket)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, path)
        logger.debug("Saved %d entries to %s", len(entries), path)

    def _bucket_path(self, bucket: str) -> Path:
        """Return file path for a bucket name."""
        safe_name = bucket.replace(":", "_").replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_name}.json"
