# src/pipeline/ambiguity.py — v1
"""Ambiguity resolver: does a locality name exist in several cities?

Failures propagate to the caller, which treats them as "not ambiguous".
Only successful answers are cached.
"""

from __future__ import annotations

import logging

from mpfscore.cache.tiered_cache import TieredCache
from mpfscore.core.models import AmbiguityResult
from mpfscore.llm.errors import LLMInvalidJSONError
from mpfscore.llm.generation import GenerationAdapter
from mpfscore.pipeline.prompts import PURPOSE_MATCH, build_ambiguity_prompt

logger = logging.getLogger(__name__)


class AmbiguityResolver:
    """Asks the generation service whether (city, sector) is ambiguous.

    Args:
        cache: Ambiguity result cache.
        generator: Generation adapter; None means never ambiguous.
        country: Target market quoted in the prompt.
    """

    def __init__(
        self,
        cache: TieredCache[AmbiguityResult],
        generator: GenerationAdapter | None = None,
        country: str = "India",
    ) -> None:
        self._cache = cache
        self._generator = generator
        self._country = country

    async def resolve(self, city: str, sector: str, key: str) -> AmbiguityResult:
        """Return the ambiguity verdict for a validated pair.

        Raises:
            LLMError: If the generation call fails or returns junk.
        """
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Ambiguity cache hit")
            return cached

        if self._generator is None:
            return AmbiguityResult()

        parsed = await self._generator.generate_json(
            PURPOSE_MATCH,
            key,
            build_ambiguity_prompt(city, sector, self._country),
            AmbiguityResult,
            default='{"isAmbiguous": false, "suggestedCities": []}',
        )
        result = coerce_ambiguity(parsed)
        await self._cache.set(key, result)
        return result


def coerce_ambiguity(parsed: object) -> AmbiguityResult:
    """Build an AmbiguityResult from loosely-typed output.

    Suggestions are stripped, blanks dropped and case-insensitive
    duplicates removed.
    """
    if not isinstance(parsed, dict):
        raise LLMInvalidJSONError("Ambiguity output is not a JSON object")

    raw_cities = parsed.get("suggestedCities", parsed.get("suggested_cities"))
    cities: list[str] = []
    seen: set[str] = set()
    for city in raw_cities if isinstance(raw_cities, list) else []:
        if not isinstance(city, str) or not city.strip():
            continue
        name = city.strip()
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        cities.append(name)

    is_ambiguous = bool(parsed.get("isAmbiguous", parsed.get("is_ambiguous", False)))
    return AmbiguityResult(is_ambiguous=is_ambiguous, suggested_cities=cities)
