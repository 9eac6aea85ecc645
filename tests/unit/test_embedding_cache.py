"""Unit tests for the Redis embedding cache (adapters/redis/cache.py).

The Redis client is an AsyncMock; no Redis server required.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import orjson
from redis.exceptions import ConnectionError as RedisConnectionError

from decision_graph.adapters.redis.cache import RedisEmbeddingCache, cache_key
from decision_graph.settings import RedisSettings


def _cache(client: AsyncMock) -> RedisEmbeddingCache:
    return RedisEmbeddingCache(client, RedisSettings(cache_prefix="emb:", cache_ttl_seconds=60))


class TestCacheKey:
    def test_deterministic_and_prefixed(self):
        key = cache_key("emb:", "m", "hello")
        assert key == cache_key("emb:", "m", "hello")
        assert key.startswith("emb:")
        assert len(key) == len("emb:") + 64

    def test_model_is_part_of_key(self):
        assert cache_key("emb:", "m1", "hello") != cache_key("emb:", "m2", "hello")


class TestGet:
    async def test_hit(self):
        client = AsyncMock()
        client.get.return_value = orjson.dumps([0.5, 0.25])
        cache = _cache(client)

        assert await cache.get("m", "text") == [0.5, 0.25]
        assert cache.hits == 1
        client.get.assert_awaited_once_with(cache_key("emb:", "m", "text"))

    async def test_miss(self):
        client = AsyncMock()
        client.get.return_value = None
        cache = _cache(client)

        assert await cache.get("m", "text") is None
        assert cache.misses == 1

    async def test_redis_error_is_a_miss(self):
        client = AsyncMock()
        client.get.side_effect = RedisConnectionError("down")
        cache = _cache(client)

        assert await cache.get("m", "text") is None
        assert cache.misses == 1


class TestSet:
    async def test_stores_with_ttl(self):
        client = AsyncMock()
        cache = _cache(client)

        await cache.set("m", "text", [1.0])

        client.set.assert_awaited_once_with(
            cache_key("emb:", "m", "text"),
            orjson.dumps([1.0]),
            ex=60,
        )

    async def test_redis_error_swallowed(self):
        client = AsyncMock()
        client.set.side_effect = RedisConnectionError("down")

        await _cache(client).set("m", "text", [1.0])


async def test_close():
    client = AsyncMock()
    await _cache(client).close()
    client.aclose.assert_awaited_once()
