# src/llm/errors.py — v1
"""Generation-service error classes."""

from __future__ import annotations


class LLMError(RuntimeError):
    pass


class ModelNotFoundError(LLMError):
    """The requested model id does not exist for this service.

    The only error class that makes the fallback loop try the next model
    candidate.
    """

    def __init__(self, model: str, detail: str = "") -> None:
        self.model = model
        message = f"Model not found: {model}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class LLMInvalidJSONError(LLMError):
    pass


class GenerationUnavailableError(LLMError):
    """No generation client is configured."""
