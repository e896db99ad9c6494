# src/llm/adapters/google_adapter.py — v2
"""Google Gemini adapter implementing BaseGenerationClient.

Uses the google-genai SDK async client. Unknown model ids (HTTP 404 /
NOT_FOUND) are raised as ModelNotFoundError so the caller can move on to
the next candidate.
"""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel

from mpfscore.llm.base_client import BaseGenerationClient
from mpfscore.llm.errors import ModelNotFoundError
from mpfscore.llm.models import LLMResponse, SamplingConfig

# The service takes a signed 32-bit seed.
_SEED_MODULUS = 2**31 - 1


def is_not_found_message(message: str) -> bool:
    return "not found" in message.lower() or "NOT_FOUND" in message


class GoogleAdapter(BaseGenerationClient):
    """Google Gemini adapter."""

    def __init__(self, api_key: str = "", client: Any = None, **kwargs: Any):
        if client is None:
            from google import genai

            client = genai.Client(api_key=api_key)
        self._client = client

    async def generate(
        self,
        model: str,
        prompt: str,
        response_schema: type[BaseModel],
        sampling: SamplingConfig,
    ) -> LLMResponse:
        from google.genai import errors, types

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
            temperature=sampling.temperature,
            top_p=sampling.top_p,
            top_k=sampling.top_k,
            candidate_count=sampling.candidate_count,
            seed=sampling.seed % _SEED_MODULUS,
        )

        t0 = time.monotonic()
        try:
            resp = await self._client.aio.models.generate_content(
                model=model, contents=prompt, config=config,
            )
        except errors.ClientError as e:
            if e.code == 404 or is_not_found_message(str(e)):
                raise ModelNotFoundError(model, str(e)) from e
            raise
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=resp.text or "",
            input_tokens=(getattr(usage, "prompt_token_count", 0) or 0) if usage else 0,
            output_tokens=(getattr(usage, "candidates_token_count", 0) or 0) if usage else 0,
            model=model,
            provider="google",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"
