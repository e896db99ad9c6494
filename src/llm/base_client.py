# src/llm/base_client.py — v2
"""Abstract generation client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from mpfscore.llm.models import LLMResponse, SamplingConfig


class BaseGenerationClient(ABC):
    """One structured-output text generation call against a named model.

    Implementations raise ModelNotFoundError when the model id is unknown
    to the service; every other failure propagates unchanged.
    """

    @abstractmethod
    async def generate(
        self,
        model: str,
        prompt: str,
        response_schema: type[BaseModel],
        sampling: SamplingConfig,
    ) -> LLMResponse:
        """Generate JSON text conforming to ``response_schema``."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. google)."""
