# tests/integration/pipeline/test_int_service_flow.py — v1
"""End-to-end service flow across process restarts on real durable media.

A "restart" is simulated by building a second service over a new store
instance pointing at the same file: the request store starts empty but
the durable caches answer without calling the generation service.
"""

from __future__ import annotations

import pytest

from mpfscore.api.facade import create_service
from mpfscore.cache.json_store import JsonCacheStore
from mpfscore.cache.models import ANALYSIS_BUCKET, VALIDATION_BUCKET
from mpfscore.cache.sqlite_store import SqliteCacheStore

DAY_MS = 24 * 60 * 60 * 1000


def _stores(tmp_path):
    return {
        "json": lambda: JsonCacheStore(tmp_path / "json-cache"),
        "sqlite": lambda: SqliteCacheStore(tmp_path / "cache.db"),
    }


@pytest.mark.parametrize("backend", ["json", "sqlite"])
class TestServiceRestart:
    @pytest.mark.asyncio
    async def test_cached_analysis_survives_restart(
        self, backend, settings, tmp_path, fake_client, make_client, clock,
    ):
        open_store = _stores(tmp_path)[backend]

        first = create_service(settings, open_store(), fake_client, clock)
        before = await first.fetch(first.submit("Noida", "Sector 62").id)
        await first.aclose()
        assert before.status == "done"

        offline_calls = make_client(errors={
            "ValidationResult": RuntimeError("should not be called"),
            "AmbiguityResult": RuntimeError("should not be called"),
            "AnalysisResult": RuntimeError("should not be called"),
        })
        second = create_service(settings, open_store(), offline_calls, clock)
        try:
            after = await second.fetch(second.submit(" NOIDA ", "sector 62").id)
        finally:
            await second.aclose()

        assert offline_calls.calls == []
        assert after.id == before.id
        assert after.model_dump_json(by_alias=True) == before.model_dump_json(by_alias=True)

    @pytest.mark.asyncio
    async def test_expired_entries_regenerate(
        self, backend, settings, tmp_path, fake_client, make_client, valid_responses, clock,
    ):
        open_store = _stores(tmp_path)[backend]

        first = create_service(settings, open_store(), fake_client, clock)
        await first.fetch(first.submit("Noida", "Sector 62").id)
        await first.aclose()

        clock.advance(settings.cache_ttl_days * DAY_MS + 1)
        client = make_client(responses=valid_responses)
        second = create_service(settings, open_store(), client, clock)
        try:
            response = await second.fetch(second.submit("Noida", "Sector 62").id)
        finally:
            await second.aclose()

        assert response.status == "done"
        assert client.calls_for("AnalysisResult") == 1

    @pytest.mark.asyncio
    async def test_fallback_not_persisted(
        self, backend, settings, tmp_path, make_client, valid_responses, clock,
    ):
        open_store = _stores(tmp_path)[backend]
        failing = make_client(
            responses=valid_responses, errors={"AnalysisResult": RuntimeError("500")},
        )

        service = create_service(settings, open_store(), failing, clock)
        response = await service.fetch(service.submit("Noida", "Sector 62").id)
        await service.aclose()
        assert response.error_code is not None

        store = open_store()
        try:
            assert await store.load_bucket(ANALYSIS_BUCKET) == {}
            validation = await store.load_bucket(VALIDATION_BUCKET)
            assert list(validation) == ["noida::sector 62"]
        finally:
            store.close()
