# src/cache/base_cache_store.py — v2
"""Abstract durable medium behind the two-tier cache.

A store holds a small number of named buckets, each a JSON-serializable
mapping of key to entry. Reads and writes are whole-bucket (get-all /
set-all); there is no per-key upsert at this layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseCacheStore(ABC):
    """Unified interface for durable cache media."""

    @abstractmethod
    async def load_bucket(self, bucket: str) -> dict[str, Any]:
        """Return every stored entry of a bucket (empty dict if absent)."""

    @abstractmethod
    async def save_bucket(self, bucket: str, entries: dict[str, Any]) -> None:
        """Replace a bucket with a full snapshot of entries."""

    def close(self) -> None:
        """Release any held connection. No-op by default."""
