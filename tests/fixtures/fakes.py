"""In-memory implementations of the ports for unit tests.

No Neo4j, Redis or embedding server is required. The fakes record their
calls so tests can assert on batching, concurrency and failure isolation.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from decision_graph.domain.errors import DependencyError, NotFoundError
from decision_graph.domain.models import VectorMatch
from decision_graph.domain.similarity import anchor_query_text

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from decision_graph.domain.models import Decision, Edge, Outcome


class InMemoryDecisionStore:
    """Minimal DecisionStore that satisfies the protocol for unit tests."""

    def __init__(
        self,
        decisions: Iterable[Decision] = (),
        edges: Iterable[Edge] = (),
        healthy: bool = True,
    ) -> None:
        self._decisions: dict[str, Decision] = {d.id: d for d in decisions}
        self._edges: list[Edge] = list(edges)
        self._healthy = healthy
        self.outcome_reasons: dict[str, str | None] = {}

    async def list_decisions(self) -> list[Decision]:
        return sorted(self._decisions.values(), key=lambda d: d.created_at, reverse=True)

    async def list_edges(self) -> list[Edge]:
        return list(self._edges)

    async def get_decision(self, decision_id: str) -> Decision | None:
        return self._decisions.get(decision_id)

    async def set_outcome(
        self,
        decision_id: str,
        outcome: Outcome,
        reason: str | None = None,
    ) -> None:
        decision = self._decisions.get(decision_id)
        if decision is None:
            raise NotFoundError("Decision", decision_id)
        self._decisions[decision_id] = decision.model_copy(update={"outcome": outcome})
        self.outcome_reasons[decision_id] = reason

    async def ping(self) -> None:
        if not self._healthy:
            msg = "Neo4j unavailable"
            raise ConnectionError(msg)

    async def close(self) -> None:
        pass


class FakeEmbeddingProvider:
    """Maps each text to a one-element vector; unseen texts get a fresh one."""

    def __init__(self, fail_texts: Iterable[str] = ()) -> None:
        self.vectors: dict[str, list[float]] = {}
        self.fail_texts = set(fail_texts)
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.fail_texts:
            raise DependencyError("embedding", "server returned 503")
        if text not in self.vectors:
            self.vectors[text] = [float(len(self.vectors))]
        return list(self.vectors[text])


class FakeVectorIndex:
    """Neighbor table keyed by decision id, addressed through the fake vectors.

    ``gates`` holds per-id events a query waits on before answering, so
    tests can keep an anchor in flight.
    """

    def __init__(self) -> None:
        self.neighbors: dict[str, list[VectorMatch]] = {}
        self.vector_ids: dict[float, str] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.fail_ids: set[str] = set()
        self.fail_all = False
        self.queries: list[tuple[str, int, float]] = []
        self.upserts: dict[str, list[float]] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def query(
        self,
        vector: list[float],
        k: int,
        min_similarity: float,
    ) -> list[VectorMatch]:
        decision_id = self.vector_ids.get(vector[0], "")
        self.queries.append((decision_id, k, min_similarity))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            gate = self.gates.get(decision_id)
            if gate is not None:
                await gate.wait()
            if self.fail_all or decision_id in self.fail_ids:
                raise DependencyError("vector_index", "index unavailable")
            matches = [
                m for m in self.neighbors.get(decision_id, []) if m.similarity >= min_similarity
            ]
            matches.sort(key=lambda m: m.similarity, reverse=True)
            return matches[:k]
        finally:
            self.in_flight -= 1

    async def upsert(self, decision_id: str, vector: list[float]) -> None:
        if decision_id in self.fail_ids:
            raise DependencyError("vector_index", "write rejected")
        self.upserts[decision_id] = list(vector)


def wire_similarity(
    decisions: Sequence[Decision],
    neighbors: Mapping[str, Sequence[tuple[str, float]]],
    embedder: FakeEmbeddingProvider,
    index: FakeVectorIndex,
    include_self: bool = True,
) -> None:
    """Register one vector per decision and its neighbor list.

    With ``include_self`` each decision also finds itself at similarity 1.0,
    as a real index does.
    """
    for position, decision in enumerate(decisions):
        vector = float(position)
        embedder.vectors[anchor_query_text(decision)] = [vector]
        index.vector_ids[vector] = decision.id
        matches = [VectorMatch(id=other, similarity=sim) for other, sim in neighbors.get(decision.id, ())]
        if include_self:
            matches.append(VectorMatch(id=decision.id, similarity=1.0))
        index.neighbors[decision.id] = matches


def wire_query(
    text: str,
    hits: Sequence[tuple[str, float]],
    embedder: FakeEmbeddingProvider,
    index: FakeVectorIndex,
) -> str:
    """Register a free-text query vector and the hits the index returns for it.

    Returns the id the index records in ``queries`` for this text.
    """
    vector = -float(len(index.vector_ids) + 1)
    query_id = f"query:{text}"
    embedder.vectors[text] = [vector]
    index.vector_ids[vector] = query_id
    index.neighbors[query_id] = [VectorMatch(id=other, similarity=sim) for other, sim in hits]
    return query_id
