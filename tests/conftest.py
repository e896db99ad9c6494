# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a scripted generation client, a controllable millisecond clock,
in-memory cache stores and settings isolated from the host environment.
No network access: every generation call is served by the fake client.
"""

from __future__ import annotations

import json
from typing import Any

import pytest
from pydantic import BaseModel

from mpfscore.cache.memory_store import MemoryCacheStore
from mpfscore.cache.tiered_cache import ResultCaches
from mpfscore.config.settings import Settings
from mpfscore.llm.base_client import BaseGenerationClient
from mpfscore.llm.models import LLMResponse, SamplingConfig

_ENV_VARS = (
    "GEMINI_API_KEY",
    "API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "LLM_MODEL_CANDIDATES",
    "MARKET_COUNTRY",
    "CACHE_BACKEND",
    "CACHE_ROOT",
    "CACHE_REDIS_URL",
    "CACHE_TTL_DAYS",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
)

START_MS = 1_700_000_000_000.0


# === FAKES ===


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: float = START_MS) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeGenerationClient(BaseGenerationClient):
    """Scripted client keyed by response schema name.

    ``responses`` maps a schema name (ValidationResult, AmbiguityResult,
    AnalysisResult) to the raw text returned; ``errors`` maps a schema
    name to an exception raised instead.
    """

    def __init__(
        self,
        responses: dict[str, str] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.errors = dict(errors or {})
        self.calls: list[tuple[str, str, int]] = []

    async def generate(
        self,
        model: str,
        prompt: str,
        response_schema: type[BaseModel],
        sampling: SamplingConfig,
    ) -> LLMResponse:
        name = response_schema.__name__
        self.calls.append((model, name, sampling.seed))
        if name in self.errors:
            raise self.errors[name]
        return LLMResponse(
            content=self.responses.get(name, ""),
            model=model,
            provider="fake",
        )

    @property
    def provider_name(self) -> str:
        return "fake"

    def calls_for(self, schema_name: str) -> int:
        return sum(1 for _, name, _ in self.calls if name == schema_name)


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_analysis_payload() -> dict[str, Any]:
    """Raw analysis as the generation service might return it."""
    return {
        "city": "Noida",
        "sector": "Sector 62",
        "overallScore": 12,
        "label": "Excellent",
        "breakdown": {
            "connectivity": 90,
            "healthcare": 80,
            "education": 80,
            "retail": 80,
            "employment": 80,
        },
        "infrastructure": [
            {"name": "Sector 62 Metro Station", "category": "Metro", "distance": 0.8},
            {"name": "Fortis Hospital", "category": "hospital", "distance": 2.1},
            {"name": "Delhi Public School", "category": "School", "distance": 1.2},
            {"name": "Logix Mall", "category": "Mall", "distance": 3.0},
            {"name": "Express Link Metro", "category": "Metro", "distance": 0.1},
            {"name": "Tech Boulevard", "category": "Campus", "distance": 2.5},
        ],
        "summary": "Established IT corridor with strong metro access.",
    }


@pytest.fixture
def valid_responses(sample_analysis_payload: dict[str, Any]) -> dict[str, str]:
    """Happy-path responses for all three generation purposes."""
    return {
        "ValidationResult": '{"isValid": true, "reason": "Valid input."}',
        "AmbiguityResult": '{"isAmbiguous": false, "suggestedCities": []}',
        "AnalysisResult": json.dumps(sample_analysis_payload),
    }


# === FIXTURES: Infrastructure ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def caches(memory_store: MemoryCacheStore, clock: FakeClock) -> ResultCaches:
    return ResultCaches.create(memory_store, ttl_days=30, clock=clock)


@pytest.fixture
def fake_client(valid_responses: dict[str, str]) -> FakeGenerationClient:
    return FakeGenerationClient(responses=valid_responses)


@pytest.fixture
def make_client() -> type[FakeGenerationClient]:
    """Factory for scripted clients with custom responses or errors."""
    return FakeGenerationClient


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Remove host configuration so Settings sees only test values."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(clean_env: None, tmp_path) -> Settings:
    """Offline settings with the in-memory cache backend."""
    return Settings(_env_file=None, cache_backend="memory", cache_root=tmp_path / "cache")
