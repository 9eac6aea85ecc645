"""Integration tests for the Neo4j adapters against a real Neo4j instance.

Requires Neo4j 5.13+ running at bolt://localhost:7687 (docker-compose up).
"""

from __future__ import annotations

import pytest

from decision_graph.adapters.neo4j.store import Neo4jDecisionStore
from decision_graph.adapters.neo4j.vector_index import Neo4jVectorIndex
from decision_graph.domain.errors import NotFoundError
from decision_graph.domain.models import Outcome
from decision_graph.settings import Neo4jSettings
from tests.fixtures.decisions import make_decision, make_edge

pytestmark = pytest.mark.integration


@pytest.fixture
async def neo4j_store():
    """Provide a Neo4jDecisionStore connected to the test database, clean up after."""
    settings = Neo4jSettings(embedding_dimension=3)
    store = Neo4jDecisionStore(settings)
    await store.ensure_constraints()

    yield store

    async with store.driver.session(database=settings.database) as session:
        await session.run("MATCH (d:Decision) DETACH DELETE d")

    await store.close()


@pytest.fixture
async def vector_index(neo4j_store: Neo4jDecisionStore):
    settings = Neo4jSettings(embedding_dimension=3)
    index = Neo4jVectorIndex(neo4j_store.driver, settings)
    await index.ensure_index()
    async with neo4j_store.driver.session(database=settings.database) as session:
        await session.run("CALL db.awaitIndexes(60)")

    yield index

    async with neo4j_store.driver.session(database=settings.database) as session:
        await session.run(f"DROP INDEX {settings.vector_index_name} IF EXISTS")


async def test_list_decisions_newest_first(neo4j_store):
    await neo4j_store.merge_decision(make_decision("old", created_at=100))
    await neo4j_store.merge_decision(make_decision("new", created_at=300))
    await neo4j_store.merge_decision(make_decision("mid", created_at=200))

    decisions = await neo4j_store.list_decisions()

    assert [d.id for d in decisions] == ["new", "mid", "old"]


async def test_edges_round_trip(neo4j_store):
    await neo4j_store.merge_decision(make_decision("a"))
    await neo4j_store.merge_decision(make_decision("b"))
    await neo4j_store.create_edge(make_edge("a", "b", "supersedes", reason="newer data"))

    (edge,) = await neo4j_store.list_edges()

    assert (edge.from_id, edge.to_id, edge.relationship) == ("a", "b", "supersedes")
    assert edge.reason == "newer data"


async def test_set_outcome(neo4j_store):
    await neo4j_store.merge_decision(make_decision("d1"))

    await neo4j_store.set_outcome("d1", Outcome.SUCCESS)

    stored = await neo4j_store.get_decision("d1")
    assert stored.outcome is Outcome.SUCCESS


async def test_set_outcome_unknown(neo4j_store):
    with pytest.raises(NotFoundError):
        await neo4j_store.set_outcome("missing", Outcome.FAILED)


async def test_vector_query_returns_cosine(neo4j_store, vector_index):
    await neo4j_store.merge_decision(make_decision("x"))
    await neo4j_store.merge_decision(make_decision("y"))
    await neo4j_store.merge_decision(make_decision("z"))
    await vector_index.upsert("x", [1.0, 0.0, 0.0])
    await vector_index.upsert("y", [0.8, 0.6, 0.0])
    await vector_index.upsert("z", [0.0, 0.0, 1.0])

    matches = await vector_index.query([1.0, 0.0, 0.0], k=3, min_similarity=0.5)

    assert [m.id for m in matches] == ["x", "y"]
    assert matches[0].similarity == pytest.approx(1.0, abs=1e-4)
    assert matches[1].similarity == pytest.approx(0.8, abs=1e-4)
