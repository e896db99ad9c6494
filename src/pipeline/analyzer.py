# src/pipeline/analyzer.py — v1
"""Market analyzer: generate, normalize and cache an AnalysisResult."""

from __future__ import annotations

import logging

from mpfscore.cache.tiered_cache import TieredCache
from mpfscore.core.models import AnalysisResult
from mpfscore.core.normalizer import normalize_analysis
from mpfscore.llm.errors import GenerationUnavailableError, LLMInvalidJSONError
from mpfscore.llm.generation import GenerationAdapter
from mpfscore.pipeline.prompts import PURPOSE_ANALYSIS, build_analysis_prompt

logger = logging.getLogger(__name__)


class MarketAnalyzer:
    """Produces normalized market potential analyses.

    Args:
        cache: Analysis result cache.
        generator: Generation adapter; None raises GenerationUnavailableError.
        country: Target market quoted in the prompt.
    """

    def __init__(
        self,
        cache: TieredCache[AnalysisResult],
        generator: GenerationAdapter | None = None,
        country: str = "India",
    ) -> None:
        self._cache = cache
        self._generator = generator
        self._country = country

    async def analyze(self, city: str, sector: str, key: str) -> AnalysisResult:
        """Return the cached or freshly generated analysis.

        Raises:
            GenerationUnavailableError: No generation client configured.
            LLMError: Generation failed or returned unparseable output.
        """
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Analysis cache hit")
            return cached

        if self._generator is None:
            raise GenerationUnavailableError("No generation client configured")

        parsed = await self._generator.generate_json(
            PURPOSE_ANALYSIS,
            key,
            build_analysis_prompt(city, sector, self._country),
            AnalysisResult,
        )
        if not isinstance(parsed, dict):
            raise LLMInvalidJSONError("Analysis output is not a JSON object")

        result = normalize_analysis(parsed, city, sector)
        await self._cache.set(key, result)
        logger.info(
            "Analysis complete: score=%.1f label=%s landmarks=%d",
            result.overall_score, result.label, len(result.infrastructure),
        )
        return result
