# src/logging/context.py — v2
"""Contextual logging support — attach request_id, request_key and stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per processing attempt.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_request_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_key", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    request_key: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        request_key=_request_key.get(),
        stage=_stage.get(),
    )


def set_request_context(request_id: str, request_key: str) -> None:
    """Set request-level context (called once per processing attempt)."""
    _request_id.set(request_id)
    _request_key.set(request_key)


def set_stage_context(stage: str | None) -> None:
    """Set the pipeline stage (validate, match, analysis)."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _request_key.set(None)
    _stage.set(None)
