"""HTTP embedding provider adapter.

Implements the EmbeddingProvider protocol against an embedding server
exposing ``POST /embed`` with ``{"text": ...}`` and answering
``{"embedding": [...], "dim": n}``. Transport errors, non-2xx answers and
malformed bodies all surface as DependencyError. No retries here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from decision_graph.domain.errors import DependencyError

if TYPE_CHECKING:
    from decision_graph.adapters.redis.cache import RedisEmbeddingCache
    from decision_graph.settings import EmbeddingSettings

log = structlog.get_logger(__name__)


def parse_embedding(body: Any) -> list[float]:
    """Extract the vector from an ``/embed`` response body."""
    if not isinstance(body, dict):
        raise DependencyError("embedding", "response body is not an object")
    embedding = body.get("embedding")
    if not isinstance(embedding, list) or not embedding:
        raise DependencyError("embedding", "response has no embedding")
    try:
        return [float(v) for v in embedding]
    except (TypeError, ValueError) as exc:
        raise DependencyError("embedding", "embedding contains non-numeric values") from exc


class HttpEmbeddingProvider:
    """EmbeddingProvider backed by an HTTP embedding server, with optional cache."""

    def __init__(
        self,
        settings: EmbeddingSettings,
        cache: RedisEmbeddingCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._model = settings.model
        self._cache = cache
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout_s,
        )

    async def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise DependencyError("embedding", "cannot embed empty text")

        if self._cache is not None:
            cached = await self._cache.get(self._model, text)
            if cached is not None:
                return cached

        try:
            response = await self._client.post("/embed", json={"text": text})
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise DependencyError(
                "embedding",
                f"server returned {exc.response.status_code}",
            ) from exc
        except httpx.HTTPError as exc:
            raise DependencyError("embedding", str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise DependencyError("embedding", "response is not valid JSON") from exc

        embedding = parse_embedding(body)
        log.debug("embedding_generated", dim=len(embedding))

        if self._cache is not None:
            await self._cache.set(self._model, text, embedding)
        return embedding

    async def close(self) -> None:
        await self._client.aclose()
