# tests/unit/cache/test_unit_cache_stores.py — v1
"""Tests for the durable cache media: memory, JSON file, SQLite, Redis."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from mpfscore.cache.json_store import JsonCacheStore
from mpfscore.cache.memory_store import MemoryCacheStore
from mpfscore.cache.models import ANALYSIS_BUCKET, VALIDATION_BUCKET
from mpfscore.cache.sqlite_store import SqliteCacheStore

ENTRIES = {
    "noida::sector 62": {"value": {"isValid": True, "reason": "Valid input."}, "savedAt": 1.0},
}


class TestMemoryCacheStore:
    @pytest.mark.asyncio
    async def test_roundtrip(self):
        store = MemoryCacheStore()
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)
        assert await store.load_bucket(VALIDATION_BUCKET) == ENTRIES
        assert store.buckets == [VALIDATION_BUCKET]

    @pytest.mark.asyncio
    async def test_missing_bucket(self):
        assert await MemoryCacheStore().load_bucket("nope") == {}

    @pytest.mark.asyncio
    async def test_loaded_data_is_detached(self):
        store = MemoryCacheStore()
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)
        loaded = await store.load_bucket(VALIDATION_BUCKET)
        loaded.clear()
        assert await store.load_bucket(VALIDATION_BUCKET) == ENTRIES


class TestJsonCacheStore:
    @pytest.mark.asyncio
    async def test_roundtrip(self, tmp_path):
        store = JsonCacheStore(tmp_path)
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)
        assert await store.load_bucket(VALIDATION_BUCKET) == ENTRIES

    @pytest.mark.asyncio
    async def test_file_per_bucket(self, tmp_path):
        store = JsonCacheStore(tmp_path)
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)
        await store.save_bucket(ANALYSIS_BUCKET, {})
        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == ["mpf_analysis-cache_v1.json", "mpf_validation-cache_v1.json"]

    @pytest.mark.asyncio
    async def test_survives_new_instance(self, tmp_path):
        await JsonCacheStore(tmp_path).save_bucket(VALIDATION_BUCKET, ENTRIES)
        assert await JsonCacheStore(tmp_path).load_bucket(VALIDATION_BUCKET) == ENTRIES

    @pytest.mark.asyncio
    async def test_missing_bucket(self, tmp_path):
        assert await JsonCacheStore(tmp_path).load_bucket(VALIDATION_BUCKET) == {}

    @pytest.mark.asyncio
    async def test_creates_root(self, tmp_path):
        root = tmp_path / "nested" / "cache"
        JsonCacheStore(root)
        assert root.is_dir()

    @pytest.mark.asyncio
    async def test_non_object_rejected(self, tmp_path):
        (tmp_path / "mpf_validation-cache_v1.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="not a JSON object"):
            await JsonCacheStore(tmp_path).load_bucket(VALIDATION_BUCKET)

    @pytest.mark.asyncio
    async def test_corrupt_file_raises(self, tmp_path):
        (tmp_path / "mpf_validation-cache_v1.json").write_text("{oops", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            await JsonCacheStore(tmp_path).load_bucket(VALIDATION_BUCKET)


class TestSqliteCacheStore:
    @pytest.fixture
    def store(self, tmp_path):
        s = SqliteCacheStore(tmp_path / "cache.db")
        yield s
        s.close()

    @pytest.mark.asyncio
    async def test_roundtrip(self, store):
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)
        assert await store.load_bucket(VALIDATION_BUCKET) == ENTRIES

    @pytest.mark.asyncio
    async def test_replace(self, store):
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)
        await store.save_bucket(VALIDATION_BUCKET, {})
        assert await store.load_bucket(VALIDATION_BUCKET) == {}

    @pytest.mark.asyncio
    async def test_missing_bucket(self, store):
        assert await store.load_bucket(ANALYSIS_BUCKET) == {}

    @pytest.mark.asyncio
    async def test_survives_reopen(self, tmp_path):
        first = SqliteCacheStore(tmp_path / "cache.db")
        await first.save_bucket(VALIDATION_BUCKET, ENTRIES)
        first.close()

        second = SqliteCacheStore(tmp_path / "cache.db")
        try:
            assert await second.load_bucket(VALIDATION_BUCKET) == ENTRIES
        finally:
            second.close()


class TestRedisCacheStore:
    @pytest.fixture
    def fake_redis(self):
        pytest.importorskip("redis")
        backing: dict[str, str] = {}
        client = MagicMock()
        client.get.side_effect = backing.get
        client.set.side_effect = backing.__setitem__
        with patch("redis.Redis.from_url", return_value=client) as from_url:
            yield client, backing, from_url

    @pytest.mark.asyncio
    async def test_roundtrip(self, fake_redis):
        from mpfscore.cache.redis_store import RedisCacheStore

        client, backing, from_url = fake_redis
        store = RedisCacheStore("redis://localhost:6379/0")
        await store.save_bucket(VALIDATION_BUCKET, ENTRIES)

        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)
        assert f"mpfscore:bucket:{VALIDATION_BUCKET}" in backing
        assert await store.load_bucket(VALIDATION_BUCKET) == ENTRIES

    @pytest.mark.asyncio
    async def test_missing_bucket(self, fake_redis):
        from mpfscore.cache.redis_store import RedisCacheStore

        store = RedisCacheStore("redis://localhost:6379/0")
        assert await store.load_bucket(ANALYSIS_BUCKET) == {}

    def test_close(self, fake_redis):
        from mpfscore.cache.redis_store import RedisCacheStore

        client, _, _ = fake_redis
        RedisCacheStore("redis://localhost:6379/0").close()
        client.close.assert_called_once()
