# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
Every model serializes with camelCase aliases (``overallScore``,
``suggestedCities``) and accepts either spelling on input.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RequestStatus = Literal["pending", "invalid_input", "needs_clarification", "done"]
TERMINAL_STATUSES: frozenset[str] = frozenset(
    {"invalid_input", "needs_clarification", "done"}
)

Label = Literal["Excellent", "High Growth", "Good", "Emerging"]
Category = Literal["Metro", "Hospital", "School", "Mall", "Park", "Office"]


class ErrorCode(str, Enum):
    """Fixed error vocabulary exposed to callers."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    ID_NOT_FOUND = "id_not_found"
    INVALID_INPUT = "invalid_input"
    NEEDS_CLARIFICATION = "needs_clarification"
    INTERNAL_FALLBACK_USED = "internal_fallback_used"


class CamelModel(BaseModel):
    """Base for models exchanged with callers, caches and the generation service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === STAGE RESULTS ===


class ValidationResult(CamelModel):
    """Outcome of the two-stage input validator."""

    is_valid: bool
    reason: str


class AmbiguityResult(CamelModel):
    """Whether a locality name maps to more than one city."""

    is_ambiguous: bool = False
    suggested_cities: list[str] = Field(default_factory=list)

    @property
    def needs_clarification(self) -> bool:
        """A single suggestion is not actionable ambiguity."""
        return self.is_ambiguous and len(self.suggested_cities) > 1


# === ANALYSIS ===


class Breakdown(CamelModel):
    """Five sub-scores, each 0–100 with one decimal place."""

    connectivity: float = 0.0
    healthcare: float = 0.0
    education: float = 0.0
    retail: float = 0.0
    employment: float = 0.0


class InfrastructurePoint(CamelModel):
    """Named landmark near the locality; distance in kilometres."""

    name: str
    category: Category
    distance: float


class AnalysisResult(CamelModel):
    """Well-formed market potential analysis.

    ``overall_score`` is always the weighted function of ``breakdown`` and
    ``label`` is always derived from ``overall_score``.
    """

    city: str
    sector: str
    overall_score: float
    label: Label
    breakdown: Breakdown
    infrastructure: list[InfrastructurePoint] = Field(default_factory=list)
    summary: str


# === REQUEST LIFECYCLE ===


class RequestRecord(CamelModel):
    """One record per distinct request key, owned by the RequestStore."""

    id: str
    key: str
    city: str
    sector: str
    status: RequestStatus = "pending"
    result: AnalysisResult | None = None
    error: str | None = None
    error_code: ErrorCode | None = None
    suggested_cities: list[str] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
