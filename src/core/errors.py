# src/core/errors.py — v1
"""Client-facing error taxonomy.

Each error carries an ErrorCode from the fixed vocabulary so transports
can map it without string matching.
"""

from __future__ import annotations

from mpfscore.core.models import ErrorCode


class MarketScoreError(Exception):
    """Base class for errors surfaced to callers."""

    code: ErrorCode = ErrorCode.INTERNAL_FALLBACK_USED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingFieldError(MarketScoreError):
    """Submit called with a blank city or sector."""

    code = ErrorCode.MISSING_REQUIRED_FIELD


class RequestNotFoundError(MarketScoreError):
    """Fetch called with an id that was never submitted."""

    code = ErrorCode.ID_NOT_FOUND

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        super().__init__(f"id not found: {request_id}")
