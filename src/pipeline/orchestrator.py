# src/pipeline/orchestrator.py — v2
"""Request orchestrator — the per-request state machine.

    pending ─┬─ validator rejects ───────────────▶ invalid_input
             ├─ >1 suggested city ───────────────▶ needs_clarification
             ├─ analysis succeeds ───────────────▶ done
             └─ analysis fails ──────────────────▶ done (fallback + error)

Processing runs lazily on the first fetch of a pending record. Terminal
records are returned verbatim on every later fetch without calling the
generation service again.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from mpfscore.core.errors import MissingFieldError, RequestNotFoundError
from mpfscore.core.keys import normalize_text
from mpfscore.core.models import AmbiguityResult, ErrorCode, RequestRecord
from mpfscore.core.normalizer import fallback_analysis
from mpfscore.logging.context import clear_context, set_request_context, set_stage_context
from mpfscore.pipeline.ambiguity import AmbiguityResolver
from mpfscore.pipeline.analyzer import MarketAnalyzer
from mpfscore.pipeline.prompts import PURPOSE_ANALYSIS, PURPOSE_MATCH, PURPOSE_VALIDATE
from mpfscore.pipeline.store import RequestStore
from mpfscore.pipeline.validator import INVALID_INPUT_REASON, InputValidator

logger = logging.getLogger(__name__)

MISSING_FIELD_MESSAGE = "Both city and sector are required."
AMBIGUOUS_MESSAGE = "Input is ambiguous. Please choose a city."
FALLBACK_MESSAGE = "Model unavailable. Returned fallback response."


class RequestOrchestrator:
    """Sequences validation → ambiguity check → analysis per request.

    Args:
        store: Request store owned by this orchestrator.
        validator: Input validator stage.
        resolver: Ambiguity resolver stage.
        analyzer: Market analyzer stage.
    """

    def __init__(
        self,
        store: RequestStore,
        validator: InputValidator,
        resolver: AmbiguityResolver,
        analyzer: MarketAnalyzer,
    ) -> None:
        self._store = store
        self._validator = validator
        self._resolver = resolver
        self._analyzer = analyzer

    @property
    def store(self) -> RequestStore:
        return self._store

    def submit(self, city: str | None, sector: str | None) -> RequestRecord:
        """Register an input and return its (possibly existing) record.

        Raises:
            MissingFieldError: City or sector is blank.
        """
        city = normalize_text(city)
        sector = normalize_text(sector)
        if not city or not sector:
            raise MissingFieldError(MISSING_FIELD_MESSAGE)

        record, created = self._store.get_or_create(city, sector)
        if created:
            logger.info("Registered request %s for %r", record.id, record.key)
        return record

    async def fetch(self, request_id: str) -> RequestRecord:
        """Return the record, processing it first if still pending.

        Raises:
            RequestNotFoundError: Unknown id.
        """
        record = self._store.get(request_id)
        if record is None:
            raise RequestNotFoundError(request_id)
        if record.is_terminal:
            return record
        return await self.process(record)

    async def process(self, record: RequestRecord) -> RequestRecord:
        """Run one processing attempt; always ends in a terminal state."""
        set_request_context(record.id, record.key)
        t0 = time.monotonic()
        try:
            update = await self._run_stages(record)
        except Exception:
            logger.exception("Processing failed; returning fallback analysis")
            update = {
                "status": "done",
                "result": fallback_analysis(record.city, record.sector),
                "error": FALLBACK_MESSAGE,
                "error_code": ErrorCode.INTERNAL_FALLBACK_USED,
                "suggested_cities": [],
            }

        try:
            final = self._store.complete(record.id, update)
            logger.info(
                "Request resolved: status=%s in %.2fs",
                final.status, time.monotonic() - t0,
                extra={"data": {
                    "status": final.status,
                    "error_code": final.error_code.value if final.error_code else None,
                }},
            )
        finally:
            clear_context()
        return final

    async def _run_stages(self, record: RequestRecord) -> dict[str, Any]:
        city, sector, key = record.city, record.sector, record.key

        set_stage_context(PURPOSE_VALIDATE)
        validation = await self._validator.validate(city, sector, key)
        if not validation.is_valid:
            return {
                "status": "invalid_input",
                "result": None,
                "error": validation.reason or INVALID_INPUT_REASON,
                "error_code": ErrorCode.INVALID_INPUT,
                "suggested_cities": [],
            }

        set_stage_context(PURPOSE_MATCH)
        try:
            ambiguity = await self._resolver.resolve(city, sector, key)
        except Exception as e:
            logger.warning("Ambiguity check unavailable, treating as not ambiguous: %s", e)
            ambiguity = AmbiguityResult()

        if ambiguity.needs_clarification:
            return {
                "status": "needs_clarification",
                "result": None,
                "error": AMBIGUOUS_MESSAGE,
                "error_code": ErrorCode.NEEDS_CLARIFICATION,
                "suggested_cities": list(ambiguity.suggested_cities),
            }

        set_stage_context(PURPOSE_ANALYSIS)
        result = await self._analyzer.analyze(city, sector, key)
        return {
            "status": "done",
            "result": result,
            "error": None,
            "error_code": None,
            "suggested_cities": [],
        }
