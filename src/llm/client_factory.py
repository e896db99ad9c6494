# src/llm/client_factory.py — v3
"""Factory: instantiate the generation client from settings.

Returns None when no API key is configured; callers then run in offline
mode (validation skipped, no ambiguity check, fallback analysis).
"""

from __future__ import annotations

import importlib
import logging

from mpfscore.config.settings import Settings
from mpfscore.llm.base_client import BaseGenerationClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "google": "mpfscore.llm.adapters.google_adapter.GoogleAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_generation_client(
    settings: Settings,
    provider: str = "google",
    **kwargs: object,
) -> BaseGenerationClient | None:
    """Instantiate the adapter for ``provider`` or None without an API key.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    if not settings.generation_enabled:
        logger.info("No API key provided; running with fallback responses")
        return None

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    init_kwargs = dict(kwargs)
    init_kwargs.setdefault("api_key", settings.gemini_api_key)

    logger.debug("Creating generation client: provider=%s", provider)
    return adapter_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseGenerationClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered generation provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
