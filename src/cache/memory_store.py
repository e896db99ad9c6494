# src/cache/memory_store.py — v1
"""Process-local cache store (CACHE_BACKEND=memory).

Buckets are kept as serialized JSON so values go through the same
round-trip as on a real medium. Used by tests and throwaway runs.
"""

from __future__ import annotations

import json
from typing import Any

from mpfscore.cache.base_cache_store import BaseCacheStore


class MemoryCacheStore(BaseCacheStore):
    """Bucket snapshots held in a dict for the lifetime of the process."""

    def __init__(self) -> None:
        self._buckets: dict[str, str] = {}

    async def load_bucket(self, bucket: str) -> dict[str, Any]:
        raw = self._buckets.get(bucket)
        if raw is None:
            return {}
        return json.loads(raw)

    async def save_bucket(self, bucket: str, entries: dict[str, Any]) -> None:
        self._buckets[bucket] = json.dumps(entries)

    @property
    def buckets(self) -> list[str]:
        return sorted(self._buckets)
