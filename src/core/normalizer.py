# src/core/normalizer.py — v1
"""Turn a loosely-typed generated analysis into a well-formed AnalysisResult.

Steps:
  1. Clamp and round the five breakdown sub-scores.
  2. Recompute the overall score from fixed weights (raw value ignored).
  3. Derive the label from fixed thresholds.
  4. Clean, filter, de-duplicate, sort and truncate infrastructure points.
  5. Backfill synthetic landmarks up to the minimum count.
  6. Pick the summary.

The function is pure and idempotent: normalizing its own output returns
the same result.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel

from mpfscore.core.models import AnalysisResult, Breakdown, InfrastructurePoint

SCORE_WEIGHTS: dict[str, float] = {
    "connectivity": 0.25,
    "healthcare": 0.15,
    "education": 0.15,
    "retail": 0.15,
    "employment": 0.15,
}

LABEL_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (90.0, "Excellent"),
    (82.0, "High Growth"),
    (74.0, "Good"),
)
LOWEST_LABEL = "Emerging"

MIN_INFRASTRUCTURE_POINTS = 5
MAX_INFRASTRUCTURE_POINTS = 8

CATEGORIES = ("Metro", "Hospital", "School", "Mall", "Park", "Office")
DEFAULT_CATEGORY = "Office"

DATA_UNAVAILABLE_SUMMARY = (
    "Accurate landmark data not available for this exact location."
)
DEFAULT_SUMMARY = (
    "This location demonstrates strong appreciation potential driven by "
    "connectivity, services, and employment access."
)

# Stock filler names the generation service emits when it has no real data.
GENERIC_LANDMARK_NAMES: frozenset[str] = frozenset({
    "express link metro",
    "city wellness center",
    "global international school",
    "unnamed infrastructure",
})

_BACKFILL_TEMPLATES: tuple[tuple[str, str, str, float], ...] = (
    # (name pattern, source field, category, distance km)
    ("{} Metro Station", "sector", "Metro", 0.9),
    ("{} Multi-Speciality Hospital", "city", "Hospital", 1.8),
    ("{} Public School", "sector", "School", 1.4),
    ("{} Central Mall", "city", "Mall", 2.6),
    ("{} Tech Park", "city", "Office", 3.2),
)

FALLBACK_BREAKDOWN: dict[str, float] = {
    "connectivity": 92,
    "healthcare": 85,
    "education": 88,
    "retail": 82,
    "employment": 90,
}


# ------------------------------------------------------------------
# Scalars
# ------------------------------------------------------------------


def round_half_up(value: float, digits: int) -> float:
    """Round to ``digits`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def to_number(value: Any) -> float:
    """Coerce a raw numeric field; anything non-numeric or non-finite is 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def clamp_score(value: Any) -> float:
    return max(0.0, min(100.0, to_number(value)))


def compute_overall_score(breakdown: Breakdown) -> float:
    """Weighted sum of the sub-scores, clamped and rounded to one decimal."""
    weighted = sum(
        getattr(breakdown, field) * weight for field, weight in SCORE_WEIGHTS.items()
    )
    return round_half_up(clamp_score(weighted), 1)


def compute_label(overall_score: float) -> str:
    for threshold, label in LABEL_THRESHOLDS:
        if overall_score >= threshold:
            return label
    return LOWEST_LABEL


def normalize_category(value: Any) -> str:
    text = value.strip().lower() if isinstance(value, str) else ""
    for category in CATEGORIES:
        if text == category.lower():
            return category
    return DEFAULT_CATEGORY


def is_generic_landmark_name(name: str) -> bool:
    normalized = (name or "").strip().lower()
    return not normalized or normalized in GENERIC_LANDMARK_NAMES


# ------------------------------------------------------------------
# Composite fields
# ------------------------------------------------------------------


def normalize_breakdown(raw: Any) -> Breakdown:
    data = raw if isinstance(raw, Mapping) else {}
    return Breakdown(**{
        field: round_half_up(clamp_score(data.get(field)), 1)
        for field in SCORE_WEIGHTS
    })


def normalize_infrastructure(raw: Any) -> list[InfrastructurePoint]:
    """Clean raw items, drop blanks/placeholders/duplicates, sort, truncate."""
    items: list[InfrastructurePoint] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, Mapping):
            continue
        name = item.get("name")
        name = name.strip() if isinstance(name, str) else ""
        if is_generic_landmark_name(name):
            continue
        items.append(InfrastructurePoint(
            name=name,
            category=normalize_category(item.get("category")),
            distance=round_half_up(max(0.0, to_number(item.get("distance"))), 2),
        ))

    items.sort(key=lambda p: (p.distance, p.name))

    unique: list[InfrastructurePoint] = []
    seen: set[str] = set()
    for point in items:
        folded = point.name.lower()
        if folded in seen:
            continue
        seen.add(folded)
        unique.append(point)

    return unique[:MAX_INFRASTRUCTURE_POINTS]


def ensure_minimum_infrastructure(
    points: list[InfrastructurePoint],
    city: str,
    sector: str,
) -> list[InfrastructurePoint]:
    """Append deterministic synthetic landmarks until the minimum is met.

    Names that collide (case-insensitively) with an existing point are
    skipped; the result is re-sorted by distance then name.
    """
    result = list(points)
    seen = {p.name.lower() for p in result}
    sources = {"city": city or "City", "sector": sector or "Locality"}

    for pattern, source, category, distance in _BACKFILL_TEMPLATES:
        if len(result) >= MIN_INFRASTRUCTURE_POINTS:
            break
        name = pattern.format(sources[source])
        if name.lower() in seen:
            continue
        result.append(InfrastructurePoint(name=name, category=category, distance=distance))
        seen.add(name.lower())

    result.sort(key=lambda p: (p.distance, p.name))
    return result


# ------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------


def normalize_analysis(
    raw: Any,
    city: str,
    sector: str,
    *,
    backfill: bool = True,
) -> AnalysisResult:
    """Normalize a raw generated record into an AnalysisResult.

    Args:
        raw: Parsed model output (mapping), an AnalysisResult, or junk.
        city: Requested city, used when the raw record omits it.
        sector: Requested sector, used when the raw record omits it.
        backfill: Add synthetic landmarks when fewer than the minimum remain.

    Returns:
        AnalysisResult honouring every score, label and list invariant.
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    data: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    city = (city or "").strip()
    sector = (sector or "").strip()

    breakdown = normalize_breakdown(data.get("breakdown"))
    overall_score = compute_overall_score(breakdown)

    infrastructure = normalize_infrastructure(data.get("infrastructure"))
    if backfill and len(infrastructure) < MIN_INFRASTRUCTURE_POINTS:
        infrastructure = ensure_minimum_infrastructure(infrastructure, city, sector)

    raw_summary = data.get("summary")
    if not infrastructure:
        summary = DATA_UNAVAILABLE_SUMMARY
    elif isinstance(raw_summary, str) and raw_summary:
        summary = raw_summary
    else:
        summary = DEFAULT_SUMMARY

    return AnalysisResult(
        city=_pick_text(data.get("city"), city, "Unknown City"),
        sector=_pick_text(data.get("sector"), sector, "General District"),
        overall_score=overall_score,
        label=compute_label(overall_score),
        breakdown=breakdown,
        infrastructure=infrastructure,
        summary=summary,
    )


def fallback_analysis(city: str, sector: str) -> AnalysisResult:
    """Deterministic analysis used when generation fails; no landmarks."""
    return normalize_analysis(
        {"breakdown": dict(FALLBACK_BREAKDOWN)},
        city,
        sector,
        backfill=False,
    )


def _pick_text(*candidates: Any) -> str:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return ""
