# src/cache/models.py — v2
"""Cache domain models: CacheEntry and bucket names."""

from __future__ import annotations

from typing import Any

from mpfscore.core.models import CamelModel

VALIDATION_BUCKET = "mpf:validation-cache:v1"
AMBIGUITY_BUCKET = "mpf:matches-cache:v1"
ANALYSIS_BUCKET = "mpf:analysis-cache:v1"


class CacheEntry(CamelModel):
    """Cached value plus its save time in epoch milliseconds.

    Persisted as ``{"value": ..., "savedAt": ...}``.
    """

    value: Any
    saved_at: float

    def is_fresh(self, now_ms: float, ttl_ms: float) -> bool:
        """Visible only while ``now - saved_at <= ttl``."""
        return now_ms - self.saved_at <= ttl_ms
