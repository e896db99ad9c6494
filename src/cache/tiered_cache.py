# src/cache/tiered_cache.py — v1
"""Two-tier expiring cache: process memory in front of a durable store.

Lookup order: memory tier, then the durable bucket (which warms memory).
Writes update memory and re-serialize the whole bucket to the durable
store. Durable-tier failures are logged and degrade to a miss or a
skipped write; they never propagate.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from mpfscore.cache.base_cache_store import BaseCacheStore
from mpfscore.cache.models import (
    AMBIGUITY_BUCKET,
    ANALYSIS_BUCKET,
    VALIDATION_BUCKET,
    CacheEntry,
)
from mpfscore.core.models import AmbiguityResult, AnalysisResult, ValidationResult

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TTL_DAYS = 30
_MS_PER_DAY = 24 * 60 * 60 * 1000


def now_ms() -> float:
    """Wall-clock time in epoch milliseconds."""
    return time.time() * 1000


class TieredCache(Generic[ModelT]):
    """Expiring key-value cache for one result kind.

    Args:
        bucket: Durable bucket name.
        store: Durable medium.
        model: Pydantic model of cached values; persisted values are
            re-validated against it on load.
        ttl_ms: Entry lifetime in milliseconds.
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        bucket: str,
        store: BaseCacheStore,
        model: type[ModelT],
        ttl_ms: float = DEFAULT_TTL_DAYS * _MS_PER_DAY,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._bucket = bucket
        self._store = store
        self._model = model
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._memory: dict[str, CacheEntry] = {}
        self._loaded = False

    @property
    def bucket(self) -> str:
        return self._bucket

    def __len__(self) -> int:
        return len(self._memory)

    async def get(self, key: str) -> ModelT | None:
        """Return a fresh cached value or None."""
        entry = self._fresh_memory_entry(key)
        if entry is None:
            await self.load_all()
            entry = self._fresh_memory_entry(key)
        if entry is None:
            return None
        return entry.value.model_copy(deep=True)

    async def set(self, key: str, value: ModelT) -> None:
        """Store a value in memory and flush the full bucket snapshot."""
        if not self._loaded:
            await self.load_all()
        self._memory[key] = CacheEntry(
            value=value.model_copy(deep=True), saved_at=self._clock()
        )
        await self.flush()

    async def load_all(self) -> int:
        """Promote unexpired durable entries into memory.

        Returns:
            Number of entries promoted (0 on any durable-tier failure).
        """
        try:
            raw_entries = await self._store.load_bucket(self._bucket)
        except Exception as e:
            logger.warning("Failed to load cache %s: %s", self._bucket, e)
            return 0

        self._loaded = True
        now = self._clock()
        promoted = 0
        for key, raw in raw_entries.items():
            try:
                entry = CacheEntry.model_validate(raw)
                value = self._model.model_validate(entry.value)
            except ValidationError as e:
                logger.debug("Skipping malformed entry %s in %s: %s", key, self._bucket, e)
                continue
            if not entry.is_fresh(now, self._ttl_ms):
                continue
            current = self._memory.get(key)
            if current is not None and current.saved_at >= entry.saved_at:
                continue
            self._memory[key] = CacheEntry(value=value, saved_at=entry.saved_at)
            promoted += 1
        return promoted

    async def flush(self) -> bool:
        """Drop expired memory entries and write the full bucket snapshot.

        Returns:
            True if the durable write succeeded.
        """
        now = self._clock()
        self._memory = {
            k: e for k, e in self._memory.items() if e.is_fresh(now, self._ttl_ms)
        }
        snapshot = {
            key: {
                "value": entry.value.model_dump(mode="json", by_alias=True),
                "savedAt": entry.saved_at,
            }
            for key, entry in self._memory.items()
        }
        try:
            await self._store.save_bucket(self._bucket, snapshot)
        except Exception as e:
            logger.warning("Failed to save cache %s: %s", self._bucket, e)
            return False
        return True

    def _fresh_memory_entry(self, key: str) -> CacheEntry | None:
        entry = self._memory.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self._ttl_ms):
            del self._memory[key]
            return None
        return entry


@dataclass
class ResultCaches:
    """The three per-kind caches shared by the pipeline stages."""

    validation: TieredCache[ValidationResult]
    ambiguity: TieredCache[AmbiguityResult]
    analysis: TieredCache[AnalysisResult]

    @classmethod
    def create(
        cls,
        store: BaseCacheStore,
        ttl_days: float = DEFAULT_TTL_DAYS,
        clock: Callable[[], float] = now_ms,
    ) -> ResultCaches:
        ttl_ms = max(1.0, ttl_days) * _MS_PER_DAY
        return cls(
            validation=TieredCache(VALIDATION_BUCKET, store, ValidationResult, ttl_ms, clock),
            ambiguity=TieredCache(AMBIGUITY_BUCKET, store, AmbiguityResult, ttl_ms, clock),
            analysis=TieredCache(ANALYSIS_BUCKET, store, AnalysisResult, ttl_ms, clock),
        )
