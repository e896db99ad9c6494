# src/api/facade.py — v2
"""Public API façade — single entry point for market potential scoring.

Usage:
    from mpfscore.api.facade import create_service
    service = create_service()
    submitted = service.submit("Noida", "Sector 62")
    response = await service.fetch(submitted.id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from mpfscore.api.models import FetchResponse, HealthResponse, SubmitResponse
from mpfscore.cache.cache_factory import create_cache_store
from mpfscore.cache.tiered_cache import ResultCaches, now_ms
from mpfscore.config.settings import Settings
from mpfscore.llm.client_factory import create_generation_client
from mpfscore.llm.config import resolve_model_candidates
from mpfscore.llm.generation import GenerationAdapter
from mpfscore.pipeline.ambiguity import AmbiguityResolver
from mpfscore.pipeline.analyzer import MarketAnalyzer
from mpfscore.pipeline.orchestrator import RequestOrchestrator
from mpfscore.pipeline.store import RequestStore
from mpfscore.pipeline.validator import InputValidator

if TYPE_CHECKING:
    from mpfscore.cache.base_cache_store import BaseCacheStore
    from mpfscore.llm.base_client import BaseGenerationClient

logger = logging.getLogger(__name__)


class MarketPotentialService:
    """Submit/fetch/health surface over one orchestrator.

    Args:
        orchestrator: Wired request orchestrator.
        cache_store: Durable medium, closed by :meth:`aclose`.
        model_candidates: Model ids reported by :meth:`health`.
        generation_enabled: Whether a generation client is configured.
    """

    def __init__(
        self,
        orchestrator: RequestOrchestrator,
        cache_store: BaseCacheStore,
        model_candidates: list[str],
        generation_enabled: bool,
    ) -> None:
        self._orchestrator = orchestrator
        self._cache_store = cache_store
        self._model_candidates = list(model_candidates)
        self._generation_enabled = generation_enabled

    @property
    def orchestrator(self) -> RequestOrchestrator:
        return self._orchestrator

    def submit(self, city: str | None, sector: str | None) -> SubmitResponse:
        """Register (city, sector); identical inputs share one id.

        Raises:
            MissingFieldError: City or sector is blank.
        """
        return SubmitResponse.from_record(self._orchestrator.submit(city, sector))

    async def fetch(self, request_id: str) -> FetchResponse:
        """Return the request, processing it on first fetch.

        Raises:
            RequestNotFoundError: Unknown id.
        """
        record = await self._orchestrator.fetch(request_id)
        return FetchResponse.from_record(record)

    def health(self) -> HealthResponse:
        return HealthResponse(
            generation_enabled=self._generation_enabled,
            model_candidates=self._model_candidates,
        )

    async def aclose(self) -> None:
        self._cache_store.close()


def create_service(
    settings: Settings | None = None,
    cache_store: BaseCacheStore | None = None,
    generation_client: BaseGenerationClient | None = None,
    clock: Callable[[], float] = now_ms,
) -> MarketPotentialService:
    """Wire caches, generation adapter and stages into a service.

    Args:
        settings: Global settings. Loaded from .env if None.
        cache_store: Durable cache medium. Built from settings if None.
        generation_client: Provider client. Built from settings if None;
            stays None without an API key (offline mode).
        clock: Millisecond clock used for cache freshness.
    """
    settings = settings or Settings()
    store = cache_store if cache_store is not None else create_cache_store(settings)
    caches = ResultCaches.create(store, settings.cache_ttl_days, clock)

    client = generation_client
    if client is None:
        client = create_generation_client(settings)

    candidates = resolve_model_candidates(settings)
    generator = GenerationAdapter(client, candidates) if client is not None else None
    country = settings.market_country

    orchestrator = RequestOrchestrator(
        store=RequestStore(),
        validator=InputValidator(caches.validation, generator, country),
        resolver=AmbiguityResolver(caches.ambiguity, generator, country),
        analyzer=MarketAnalyzer(caches.analysis, generator, country),
    )

    logger.info(
        "Service ready: backend=%s, generation=%s, candidates=%s",
        type(store).__name__,
        "enabled" if generator is not None else "offline",
        ",".join(candidates),
    )
    return MarketPotentialService(
        orchestrator=orchestrator,
        cache_store=store,
        model_candidates=candidates,
        generation_enabled=generator is not None,
    )
