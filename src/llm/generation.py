# src/llm/generation.py — v1
"""Generation adapter: model-candidate fallback with deterministic sampling.

Candidates are tried in order. A model-not-found failure moves on to the
next candidate; any other failure propagates immediately. When every
candidate is exhausted the last not-found error is raised. This is the
only in-process retry in the system and it never repeats a target.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from mpfscore.config.settings import DEFAULT_MODEL_CANDIDATES
from mpfscore.core.keys import purpose_seed
from mpfscore.llm.base_client import BaseGenerationClient
from mpfscore.llm.errors import ModelNotFoundError
from mpfscore.llm.json_utils import parse_json
from mpfscore.llm.models import LLMResponse, SamplingConfig

logger = logging.getLogger(__name__)


def is_model_not_found(error: Exception) -> bool:
    """Classify an exception as the model-not-found condition."""
    if isinstance(error, ModelNotFoundError):
        return True
    msg = str(error)
    return "not found" in msg.lower() or "NOT_FOUND" in msg


def deterministic_sampling(purpose: str, key: str) -> SamplingConfig:
    """temperature=0, top_p=0, top_k=1, one candidate, purpose+key seed."""
    return SamplingConfig(seed=purpose_seed(purpose, key))


class GenerationAdapter:
    """Wraps a generation client with ordered model-candidate fallback.

    Args:
        client: Provider client.
        model_candidates: Ordered model ids; built-in defaults if empty.
    """

    def __init__(
        self,
        client: BaseGenerationClient,
        model_candidates: Sequence[str] = DEFAULT_MODEL_CANDIDATES,
    ) -> None:
        self._client = client
        self._candidates = list(model_candidates) or list(DEFAULT_MODEL_CANDIDATES)

    @property
    def model_candidates(self) -> list[str]:
        return list(self._candidates)

    async def generate(
        self,
        prompt: str,
        response_schema: type[BaseModel],
        sampling: SamplingConfig,
    ) -> LLMResponse:
        """Call the service, falling through not-found candidates."""
        last_error: Exception | None = None

        for model in self._candidates:
            try:
                return await self._client.generate(model, prompt, response_schema, sampling)
            except Exception as e:
                if not is_model_not_found(e):
                    raise
                logger.info("Model %s not found, trying next candidate", model)
                last_error = e

        if last_error is not None:
            raise last_error
        raise ModelNotFoundError("<none>", "No compatible model found")

    async def generate_json(
        self,
        purpose: str,
        key: str,
        prompt: str,
        response_schema: type[BaseModel],
        default: str = "{}",
    ) -> Any:
        """Generate with the purpose seed and parse the JSON payload.

        Args:
            purpose: Seed namespace (validate, match, analysis).
            key: Canonical request key.
            prompt: Prompt text.
            response_schema: Structured-output model sent to the service.
            default: JSON used when the service returns blank text.

        Raises:
            LLMInvalidJSONError: If the output is not parseable.
        """
        sampling = deterministic_sampling(purpose, key)
        response = await self.generate(prompt, response_schema, sampling)
        logger.debug(
            "Generated %s with %s in %dms", purpose, response.model, response.latency_ms,
        )
        return parse_json(response.content, default=default)
