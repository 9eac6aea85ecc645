"""Health check endpoint.

GET /v1/health — reports status of Neo4j and the Redis embedding cache.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Service health check.

    Pings Neo4j and Redis. Returns "healthy" when both are reachable,
    "degraded" when only Neo4j is reachable (the cache is optional), and
    "unhealthy" when Neo4j does not respond. With the cache disabled,
    ``redis`` is reported as null and does not affect the status.
    """
    neo4j_ok = False
    redis_ok: bool | None = None
    cache_stats: dict[str, int] | None = None

    try:
        await request.app.state.decision_store.ping()
        neo4j_ok = True
    except Exception:  # noqa: BLE001
        logger.warning("health_check_neo4j_failed")

    cache = getattr(request.app.state, "embedding_cache", None)
    if cache is not None:
        cache_stats = {"hits": cache.hits, "misses": cache.misses}
        try:
            redis_ok = await cache.ping()
        except Exception:  # noqa: BLE001
            logger.warning("health_check_redis_failed")
            redis_ok = False

    if not neo4j_ok:
        status = "unhealthy"
    elif redis_ok is False:
        status = "degraded"
    else:
        status = "healthy"

    return {
        "status": status,
        "neo4j": neo4j_ok,
        "redis": redis_ok,
        "cache": cache_stats,
        "version": "0.1.0",
    }
