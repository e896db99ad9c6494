# tests/unit/pipeline/test_unit_validator.py — v1
"""Tests for pipeline/validator.py — local rules, fail-open, caching."""

from __future__ import annotations

import pytest

from mpfscore.core.keys import request_key
from mpfscore.llm.generation import GenerationAdapter
from mpfscore.pipeline.validator import (
    INVALID_INPUT_REASON,
    SKIPPED_REASON,
    UNAVAILABLE_REASON,
    InputValidator,
    is_obviously_gibberish,
)

KEY = request_key("Noida", "Sector 62")


class TestGibberishRules:
    @pytest.mark.parametrize(
        "value",
        ["asdkjasdkj12345", "x", "", "   ", "Noida@Home", "aaaaargh", "bcdfgh", "12 34", "Sector 99999"],
    )
    def test_rejected(self, value):
        assert is_obviously_gibberish(value) is True

    @pytest.mark.parametrize(
        "value",
        ["Noida", "Sector 62", "Connaught Place", "St. Thomas Mount", "Koramangala 5th Block", "Vyttila"],
    )
    def test_accepted(self, value):
        assert is_obviously_gibberish(value) is False


class TestInputValidator:
    @pytest.mark.asyncio
    async def test_gibberish_never_calls_service(self, caches, fake_client):
        validator = InputValidator(caches.validation, GenerationAdapter(fake_client, ["m"]))
        key = request_key("asdkjasdkj12345", "Sector 62")
        result = await validator.validate("asdkjasdkj12345", "Sector 62", key)

        assert result.is_valid is False
        assert result.reason == INVALID_INPUT_REASON
        assert fake_client.calls == []
        assert (await caches.validation.get(key)).is_valid is False

    @pytest.mark.asyncio
    async def test_valid_cached(self, caches, fake_client):
        validator = InputValidator(caches.validation, GenerationAdapter(fake_client, ["m"]))
        first = await validator.validate("Noida", "Sector 62", KEY)
        second = await validator.validate("Noida", "Sector 62", KEY)

        assert first.is_valid is True
        assert first == second
        assert fake_client.calls_for("ValidationResult") == 1

    @pytest.mark.asyncio
    async def test_service_rejection(self, caches, make_client):
        client = make_client(
            responses={"ValidationResult": '{"isValid": false, "reason": "Not a place."}'}
        )
        validator = InputValidator(caches.validation, GenerationAdapter(client, ["m"]))
        result = await validator.validate("Noida", "Sector 62", KEY)
        assert result.is_valid is False
        assert result.reason == "Not a place."

    @pytest.mark.asyncio
    async def test_fails_open_without_caching(self, caches, make_client):
        client = make_client(errors={"ValidationResult": RuntimeError("503 unavailable")})
        validator = InputValidator(caches.validation, GenerationAdapter(client, ["m"]))
        result = await validator.validate("Noida", "Sector 62", KEY)

        assert result.is_valid is True
        assert result.reason == UNAVAILABLE_REASON
        assert await caches.validation.get(KEY) is None

    @pytest.mark.asyncio
    async def test_junk_output_fails_open(self, caches, make_client):
        client = make_client(responses={"ValidationResult": '["not", "an", "object"]'})
        validator = InputValidator(caches.validation, GenerationAdapter(client, ["m"]))
        result = await validator.validate("Noida", "Sector 62", KEY)
        assert result.is_valid is True
        assert result.reason == UNAVAILABLE_REASON

    @pytest.mark.asyncio
    async def test_no_generator_skips(self, caches):
        validator = InputValidator(caches.validation)
        result = await validator.validate("Noida", "Sector 62", KEY)
        assert result.is_valid is True
        assert result.reason == SKIPPED_REASON
        assert await caches.validation.get(KEY) is None

    @pytest.mark.asyncio
    async def test_missing_reason_defaults(self, caches, make_client):
        client = make_client(responses={"ValidationResult": '{"isValid": true}'})
        validator = InputValidator(caches.validation, GenerationAdapter(client, ["m"]))
        result = await validator.validate("Noida", "Sector 62", KEY)
        assert result.reason == "Valid input."
