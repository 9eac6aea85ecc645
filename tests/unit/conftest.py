"""Unit test conftest with in-memory port stubs for service and API testing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from decision_graph.service import DecisionGraphService
from tests.fixtures.decisions import make_decision, make_edge
from tests.fixtures.fakes import (
    FakeEmbeddingProvider,
    FakeVectorIndex,
    InMemoryDecisionStore,
    wire_similarity,
)

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

    from decision_graph.settings import Settings


class _StubEmbeddingCache:
    """Stub embedding cache for health check PING."""

    def __init__(self, healthy: bool = True) -> None:
        self._healthy = healthy
        self.hits = 0
        self.misses = 0

    async def ping(self) -> bool:
        if not self._healthy:
            msg = "Redis unavailable"
            raise ConnectionError(msg)
        return True


def _graph_decisions():
    # d4 newest ... d0 oldest; two topics
    return [
        make_decision("d0", topic="architecture", created_at=1_000),
        make_decision("d1", topic="architecture", created_at=2_000),
        make_decision("d2", topic="architecture", created_at=3_000),
        make_decision("d3", topic="testing", created_at=4_000),
        make_decision("d4", topic="testing", created_at=5_000),
    ]


def _graph_edges():
    return [
        make_edge("d1", "d0", "builds_on"),
        make_edge("d2", "d1", "supersedes"),
        make_edge("d4", "d3", "debates"),
        make_edge("d3", "d2", "synthesizes"),
    ]


# d4 and d2 are close across topics; d1/d0 close within architecture
_NEIGHBORS = {
    "d4": [("d3", 0.92), ("d2", 0.81)],
    "d3": [("d4", 0.92)],
    "d2": [("d4", 0.81), ("d1", 0.65)],
    "d1": [("d0", 0.88)],
    "d0": [("d1", 0.88)],
}


@pytest.fixture()
def in_memory_store() -> InMemoryDecisionStore:
    """Decision store preloaded with five decisions and four explicit edges."""
    return InMemoryDecisionStore(_graph_decisions(), _graph_edges())


@pytest.fixture()
def fake_embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture()
def fake_index(fake_embedder: FakeEmbeddingProvider) -> FakeVectorIndex:
    """Vector index wired with the neighbor table for the preloaded decisions."""
    index = FakeVectorIndex()
    wire_similarity(_graph_decisions(), _NEIGHBORS, fake_embedder, index)
    return index


@pytest.fixture()
def graph_service(
    in_memory_store: InMemoryDecisionStore,
    fake_embedder: FakeEmbeddingProvider,
    fake_index: FakeVectorIndex,
    settings: Settings,
) -> DecisionGraphService:
    return DecisionGraphService(
        store=in_memory_store,
        embedder=fake_embedder,
        index=fake_index,
        settings=settings,
    )


@pytest.fixture()
def test_client(
    graph_service: DecisionGraphService,
    in_memory_store: InMemoryDecisionStore,
    settings: Settings,
) -> TestClient:
    """FastAPI TestClient with in-memory ports (no Neo4j/Redis/embedder needed)."""
    from fastapi import FastAPI
    from fastapi.responses import ORJSONResponse
    from fastapi.testclient import TestClient as _TestClient

    from decision_graph.api.middleware import register_middleware
    from decision_graph.api.routes.admin import router as admin_router
    from decision_graph.api.routes.graph import router as graph_router
    from decision_graph.api.routes.health import router as health_router

    app = FastAPI(default_response_class=ORJSONResponse)
    register_middleware(app)
    app.include_router(graph_router, prefix="/v1")
    app.include_router(health_router, prefix="/v1")
    app.include_router(admin_router, prefix="/v1")

    # Wire stubs into app state
    app.state.settings = settings
    app.state.graph_service = graph_service
    app.state.decision_store = in_memory_store
    app.state.embedding_cache = _StubEmbeddingCache(healthy=True)

    return _TestClient(app)
