# src/llm/models.py — v2
"""LLM-specific types: SamplingConfig, LLMResponse."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SamplingConfig(BaseModel):
    """Sampling parameters pinned for reproducible generation."""

    temperature: float = 0.0
    top_p: float = 0.0
    top_k: int = 1
    candidate_count: int = 1
    seed: int = Field(ge=0)


class LLMResponse(BaseModel):
    """Normalized response from the generation service."""

    content: str
    model: str
    provider: str
    latency_ms: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    raw_response: Any = None
