"""Redis-backed embedding cache.

Embeddings are keyed by a SHA-256 of the model name and text, stored as
orjson arrays with a TTL. The cache is best-effort: Redis errors are
logged and treated as misses, never as dependency failures.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

import orjson
import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

if TYPE_CHECKING:
    from decision_graph.settings import RedisSettings

log = structlog.get_logger(__name__)


def cache_key(prefix: str, model: str, text: str) -> str:
    """Deterministic cache key for (model, text)."""
    digest = hashlib.sha256(f"{model}\x00{text}".encode()).hexdigest()
    return f"{prefix}{digest}"


class RedisEmbeddingCache:
    """Get/set embeddings in Redis."""

    def __init__(self, client: Redis, settings: RedisSettings) -> None:
        self._client = client
        self._prefix = settings.cache_prefix
        self._ttl = settings.cache_ttl_seconds
        self.hits = 0
        self.misses = 0

    @classmethod
    def create(cls, settings: RedisSettings) -> RedisEmbeddingCache:
        """Factory: build a cache with its own client from settings."""
        client = Redis(
            host=settings.host,
            port=settings.port,
            db=settings.db,
            password=settings.password,
            decode_responses=False,
        )
        return cls(client=client, settings=settings)

    async def get(self, model: str, text: str) -> list[float] | None:
        key = cache_key(self._prefix, model, text)
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            log.warning("embedding_cache_read_failed", error=str(exc))
            self.misses += 1
            return None
        if raw is None:
            self.misses += 1
            return None
        self.hits += 1
        return orjson.loads(raw)  # type: ignore[no-any-return]

    async def set(self, model: str, text: str, embedding: list[float]) -> None:
        key = cache_key(self._prefix, model, text)
        try:
            await self._client.set(key, orjson.dumps(embedding), ex=self._ttl)
        except RedisError as exc:
            log.warning("embedding_cache_write_failed", error=str(exc))

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()
