# src/cache/redis_store.py — v2
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Each bucket is a single string key holding the serialized snapshot.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mpfscore.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

_KEY_PREFIX = "mpfscore:bucket:"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store for deployments sharing one cache."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def load_bucket(self, bucket: str) -> dict[str, Any]:
        data = self._client.get(f"{_KEY_PREFIX}{bucket}")
        if data is None:
            return {}
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError(f"Cache bucket {bucket!r} is not a JSON object")
        return parsed

    async def save_bucket(self, bucket: str, entries: dict[str, Any]) -> None:
        self._client.set(f"{_KEY_PREFIX}{bucket}", json.dumps(entries, ensure_ascii=False))

    def close(self) -> None:
        self._client.close()
