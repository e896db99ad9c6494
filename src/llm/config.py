# src/llm/config.py — v2
"""Model candidate resolution.

Resolution order:
  1. Preferred model (GEMINI_MODEL), if set
  2. Configured candidate list (LLM_MODEL_CANDIDATES), in order
  3. Built-in defaults, when the two above yield nothing

Blank entries are dropped and duplicates keep their first position.
"""

from __future__ import annotations

from collections.abc import Iterable

from mpfscore.config.settings import DEFAULT_MODEL_CANDIDATES, Settings


def dedupe_candidates(models: Iterable[str | None]) -> list[str]:
    """Strip, drop blanks and remove duplicates preserving order."""
    seen: set[str] = set()
    result: list[str] = []
    for model in models:
        name = (model or "").strip()
        if not name or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def resolve_model_candidates(settings: Settings | None = None) -> list[str]:
    """Return the ordered model candidate list for the generation adapter."""
    if settings is None:
        return list(DEFAULT_MODEL_CANDIDATES)

    candidates = dedupe_candidates(
        [settings.gemini_model, *settings.llm_model_candidates_list]
    )
    return candidates or list(DEFAULT_MODEL_CANDIDATES)
