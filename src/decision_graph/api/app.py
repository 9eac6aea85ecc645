"""FastAPI application factory.

Creates and configures the Decision Graph API with lifespan management
for the Neo4j driver, the Redis embedding cache and the embedding client.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from decision_graph.adapters.embedding.client import HttpEmbeddingProvider
from decision_graph.adapters.neo4j.store import Neo4jDecisionStore
from decision_graph.adapters.neo4j.vector_index import Neo4jVectorIndex
from decision_graph.adapters.redis.cache import RedisEmbeddingCache
from decision_graph.api.middleware import register_middleware
from decision_graph.api.routes.admin import router as admin_router
from decision_graph.api.routes.graph import router as graph_router
from decision_graph.api.routes.health import router as health_router
from decision_graph.logging_config import configure_logging
from decision_graph.service import DecisionGraphService
from decision_graph.settings import Settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage Neo4j, Redis and embedding client across the app lifecycle."""
    settings = Settings()
    configure_logging(settings.log_level, json_logs=not settings.debug)

    # -- Startup: create adapters and attach to app state ------------------
    decision_store = Neo4jDecisionStore(settings.neo4j)
    await decision_store.ensure_constraints()

    vector_index = Neo4jVectorIndex(decision_store.driver, settings.neo4j)
    await vector_index.ensure_index()

    embedding_cache = (
        RedisEmbeddingCache.create(settings.redis) if settings.redis.cache_enabled else None
    )
    embedder = HttpEmbeddingProvider(settings.embedding, cache=embedding_cache)

    app.state.settings = settings
    app.state.decision_store = decision_store
    app.state.embedding_cache = embedding_cache
    app.state.graph_service = DecisionGraphService(
        store=decision_store,
        embedder=embedder,
        index=vector_index,
        settings=settings,
    )

    logger.info(
        "app_started",
        neo4j_uri=settings.neo4j.uri,
        embedding_url=settings.embedding.base_url,
        cache_enabled=embedding_cache is not None,
    )

    yield

    # -- Shutdown: release connections -------------------------------------
    await embedder.close()
    if embedding_cache is not None:
        await embedding_cache.close()
    await decision_store.close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Build and return the configured FastAPI application."""
    app = FastAPI(
        title="Decision Graph API",
        description="Decision memory graph with similarity clustering",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_middleware(app)

    app.include_router(graph_router, prefix="/v1")
    app.include_router(health_router, prefix="/v1")
    app.include_router(admin_router, prefix="/v1")

    return app
