# src/api/models.py — v2
"""API-level request/response models for the service façade and CLI."""

from __future__ import annotations

from pydantic import Field

from mpfscore.core.models import (
    AnalysisResult,
    CamelModel,
    ErrorCode,
    RequestRecord,
    RequestStatus,
)


class SubmitRequest(CamelModel):
    """Caller input; fields are trimmed and checked by the orchestrator."""

    city: str | None = None
    sector: str | None = None


class SubmitResponse(CamelModel):
    """Id handed back on submit. Same input, same id."""

    id: str
    status: RequestStatus

    @classmethod
    def from_record(cls, record: RequestRecord) -> SubmitResponse:
        return cls(id=record.id, status=record.status)


class FetchResponse(CamelModel):
    """Snapshot of a request as returned to callers."""

    id: str
    status: RequestStatus
    result: AnalysisResult | None = None
    error: str | None = None
    error_code: ErrorCode | None = None
    suggested_cities: list[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: RequestRecord) -> FetchResponse:
        return cls(
            id=record.id,
            status=record.status,
            result=record.result,
            error=record.error,
            error_code=record.error_code,
            suggested_cities=list(record.suggested_cities),
        )


class HealthResponse(CamelModel):
    """Liveness probe payload."""

    ok: bool = True
    message: str = "pong"
    generation_enabled: bool
    model_candidates: list[str] = Field(default_factory=list)
