# tests/unit/test_cache_backends.py
"""Unit tests for NoOpCache, SafeCache, RedisCache and create_cache."""
import json
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config.settings import Settings
from src.fv_cache.infrastructure.memory_cache import MemoryCache
from src.fv_cache.infrastructure.noop_cache import NoOpCache
from src.fv_cache.infrastructure.redis_cache import RedisCache
from src.fv_cache.infrastructure.safe_cache import SafeCache
from src.fv_cache.provider import create_cache


class TestNoOpCache:
    async def test_contract(self):
        cache = NoOpCache()
        assert await cache.set("k", {"a": 1}, 10) is True
        assert await cache.get("k") is None
        assert await cache.has("k") is False
        assert await cache.delete(["k", "j"]) == 0
        assert await cache.list_keys() == []
        await cache.clear()


def _failing_backend() -> MagicMock:
    backend = MagicMock()
    err = RedisConnectionError("redis down")
    for name in ("get", "set", "delete", "has", "list_keys", "clear"):
        setattr(backend, name, AsyncMock(side_effect=err))
    return backend


class TestSafeCache:
    async def test_passes_through_when_healthy(self):
        cache = SafeCache(MemoryCache())
        await cache.set("k", 1, 10)
        assert await cache.get("k") == 1
        assert await cache.list_keys() == ["k"]

    async def test_failures_degrade_to_neutral_results(self):
        cache = SafeCache(_failing_backend())
        assert await cache.get("k") is None
        assert await cache.set("k", 1, 10) is False
        assert await cache.delete("k") == 0
        assert await cache.has("k") is False
        assert await cache.list_keys() == []
        await cache.clear()

    async def test_failures_are_logged(self, caplog):
        cache = SafeCache(_failing_backend())
        with caplog.at_level(logging.WARNING, logger="src.fv_cache.infrastructure.safe_cache"):
            await cache.get("features:abc")
        assert "features:abc" in caplog.text

    async def test_unserializable_value_does_not_raise(self):
        cache = SafeCache(RedisCache(MagicMock()))
        assert await cache.set("k", object(), 10) is False


@pytest.fixture
def redis_client() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock()
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=1)
    return client


def _scan(keys):
    async def _iter(match=None):
        for k in keys:
            yield k
    return _iter


class TestRedisCache:
    async def test_set_prefixes_key_and_serializes(self, redis_client):
        cache = RedisCache(redis_client, key_prefix="fv:")
        assert await cache.set("votes:stats:1", {"upvotes": 2}, 10) is True
        redis_client.set.assert_awaited_once_with(
            "fv:votes:stats:1", json.dumps({"upvotes": 2}), ex=10
        )

    async def test_set_uses_default_ttl(self, redis_client):
        cache = RedisCache(redis_client, default_ttl=60)
        await cache.set("k", 1)
        assert redis_client.set.await_args.kwargs["ex"] == 60

    async def test_get_deserializes(self, redis_client):
        redis_client.get.return_value = '{"a": 1}'
        cache = RedisCache(redis_client)
        assert await cache.get("k") == {"a": 1}
        redis_client.get.assert_awaited_once_with("fv:k")

    async def test_get_miss(self, redis_client):
        redis_client.get.return_value = None
        assert await RedisCache(redis_client).get("k") is None

    async def test_delete_many(self, redis_client):
        redis_client.delete.return_value = 2
        cache = RedisCache(redis_client)
        assert await cache.delete(["a", "b"]) == 2
        redis_client.delete.assert_awaited_once_with("fv:a", "fv:b")

    async def test_delete_empty_list_skips_redis(self, redis_client):
        assert await RedisCache(redis_client).delete([]) == 0
        redis_client.delete.assert_not_awaited()

    async def test_has(self, redis_client):
        assert await RedisCache(redis_client).has("k") is True

    async def test_list_keys_strips_prefix(self, redis_client):
        redis_client.scan_iter = _scan(["fv:features:1", "fv:features:list:all:1:10:newest"])
        keys = await RedisCache(redis_client).list_keys()
        assert keys == ["features:1", "features:list:all:1:10:newest"]

    async def test_clear_deletes_prefixed_keys(self, redis_client):
        redis_client.scan_iter = _scan(["fv:a", "fv:b"])
        await RedisCache(redis_client).clear()
        redis_client.delete.assert_awaited_once_with("fv:a", "fv:b")


def _settings(**overrides) -> Settings:
    return Settings(JWT_SECRET="x", **overrides)


class TestCreateCache:
    def test_memory_backend(self):
        cache = create_cache(_settings(CACHE_BACKEND="memory"))
        assert isinstance(cache, SafeCache)
        assert isinstance(cache.backend, MemoryCache)

    def test_disabled_gives_noop(self):
        cache = create_cache(_settings(CACHE_ENABLED=False, CACHE_BACKEND="memory"))
        assert isinstance(cache.backend, NoOpCache)

    def test_none_backend_gives_noop(self):
        assert isinstance(create_cache(_settings(CACHE_BACKEND="none")).backend, NoOpCache)

    def test_redis_backend_uses_shared_client(self):
        client = MagicMock()
        with patch("src.fv_cache.provider.redis_pool", return_value=client):
            cache = create_cache(_settings(CACHE_BACKEND="redis"))
        assert isinstance(cache.backend, RedisCache)

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError):
            create_cache(_settings(CACHE_BACKEND="memcached"))
