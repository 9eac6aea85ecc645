"""Decision graph service.

Coordinates the decision store, embedding provider and vector index with
the pure domain modules. This is the surface the API routes call.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from decision_graph.domain.assembly import assemble_graph
from decision_graph.domain.errors import NotFoundError
from decision_graph.domain.export import render_export
from decision_graph.domain.models import (
    OutcomeAck,
    SemanticMatch,
    SemanticSearchResponse,
    SimilarDecision,
    SimilarResponse,
)
from decision_graph.domain.outcome import normalize_outcome
from decision_graph.domain.session import GraphSession
from decision_graph.domain.similarity import (
    anchor_query_text,
    build_similarity_edges,
    find_similar_to,
    search_by_text,
)
from decision_graph.domain.validation import clamp_limit, require_node_id, require_query

if TYPE_CHECKING:
    import asyncio

    from decision_graph.domain.models import ExportFormat, GraphPayload
    from decision_graph.ports.decision_store import DecisionStore
    from decision_graph.ports.embedding import EmbeddingProvider
    from decision_graph.ports.vector_index import VectorIndex
    from decision_graph.settings import Settings

logger = structlog.get_logger(__name__)


class DecisionGraphService:
    """Graph queries, related-item lookup and outcome updates."""

    def __init__(
        self,
        store: DecisionStore,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        settings: Settings,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._index = index
        self._settings = settings

    async def get_graph(
        self,
        topic_filter: str | None = None,
        include_cluster: bool = False,
        cancel: asyncio.Event | None = None,
    ) -> GraphPayload:
        """Assemble nodes, explicit edges and (optionally) similarity edges.

        Similarity edges are computed over the unfiltered decision snapshot
        and then restricted to the visible nodes.
        """
        start = time.monotonic()
        decisions = await self._store.list_decisions()
        edges = await self._store.list_edges()

        similarity_edges = None
        if include_cluster:
            similarity_edges = await build_similarity_edges(
                decisions,
                self._embedder,
                self._index,
                self._settings.cluster,
                cancel=cancel,
            )

        latency_ms = int((time.monotonic() - start) * 1000)
        payload = assemble_graph(
            decisions,
            edges,
            similarity_edges=similarity_edges,
            topic_filter=topic_filter or None,
            latency_ms=latency_ms,
        )
        logger.info(
            "graph_assembled",
            topic=topic_filter,
            cluster=include_cluster,
            total_nodes=payload.meta.total_nodes,
            total_edges=payload.meta.total_edges,
            similarity_edges=payload.meta.similarity_edges,
            latency_ms=latency_ms,
        )
        return payload

    async def open_session(
        self,
        topic_filter: str | None = None,
        include_cluster: bool = False,
    ) -> GraphSession:
        """Load a payload and wrap it for traversal, search and outcome edits."""
        payload = await self.get_graph(topic_filter, include_cluster)
        return GraphSession(
            payload,
            store=self._store,
            default_max_depth=self._settings.traversal.default_max_depth,
            max_max_depth=self._settings.traversal.max_max_depth,
        )

    async def get_similar_to(self, node_id: str | None) -> SimilarResponse:
        """Up to ``similar_to_limit`` decisions closest to ``node_id``.

        Raises ValidationError (no id), NotFoundError (unknown id) or
        DependencyError (provider/index failure).
        """
        decision_id = require_node_id(node_id)
        decision = await self._store.get_decision(decision_id)
        if decision is None:
            raise NotFoundError("Decision", decision_id)

        cluster = self._settings.cluster
        matches = await find_similar_to(
            decision,
            self._embedder,
            self._index,
            limit=cluster.similar_to_limit,
            min_similarity=cluster.similar_to_min_similarity,
            timeout_s=cluster.anchor_timeout_s,
        )

        similar: list[SimilarDecision] = []
        for match in matches:
            related = await self._store.get_decision(match.id)
            if related is None:
                # index can lag behind deletions in the store
                logger.debug("similar_decision_missing", decision_id=match.id)
                continue
            similar.append(
                SimilarDecision(
                    id=related.id,
                    topic=related.topic,
                    decision=related.decision,
                    similarity=match.similarity,
                    outcome=related.outcome,
                )
            )

        logger.info("similar_lookup", decision_id=decision_id, count=len(similar))
        return SimilarResponse(id=decision_id, similar=similar, count=len(similar))

    async def semantic_search(
        self,
        query: str | None,
        limit: int | None = None,
    ) -> SemanticSearchResponse:
        """Decisions whose embeddings are closest to free-text ``query``.

        Raises ValidationError (missing query) or DependencyError
        (provider/index failure).
        """
        text = require_query(query)
        cluster = self._settings.cluster
        bounded_limit = clamp_limit(
            limit,
            cluster.semantic_search_limit,
            cluster.semantic_search_max_limit,
        )
        matches = await search_by_text(
            text,
            self._embedder,
            self._index,
            limit=bounded_limit,
            min_similarity=cluster.semantic_search_min_similarity,
            timeout_s=cluster.anchor_timeout_s,
        )

        results: list[SemanticMatch] = []
        for match in matches:
            found = await self._store.get_decision(match.id)
            if found is None:
                logger.debug("semantic_match_missing", decision_id=match.id)
                continue
            results.append(
                SemanticMatch(
                    id=found.id,
                    topic=found.topic,
                    decision=found.decision,
                    reasoning=found.reasoning,
                    outcome=found.outcome,
                    confidence=found.confidence,
                    similarity=match.similarity,
                    created_at=found.created_at,
                )
            )

        logger.info(
            "semantic_search",
            query_length=len(text),
            limit=bounded_limit,
            count=len(results),
        )
        return SemanticSearchResponse(query=text, results=results, count=len(results))

    async def set_outcome(
        self,
        node_id: str | None,
        outcome: str | None,
        reason: str | None = None,
    ) -> OutcomeAck:
        """Normalize an outcome and persist it through the decision store."""
        decision_id = require_node_id(node_id)
        normalized = normalize_outcome(outcome)
        await self._store.set_outcome(decision_id, normalized, reason)
        logger.info("outcome_updated", decision_id=decision_id, outcome=normalized.value)
        return OutcomeAck(id=decision_id, outcome=normalized)

    async def export(self, fmt: ExportFormat) -> tuple[str, str, str]:
        """Render every decision; returns (content, content_type, filename)."""
        decisions = await self._store.list_decisions()
        return render_export(decisions, fmt)

    async def reindex(self) -> dict[str, Any]:
        """Embed every decision and upsert it into the vector index.

        Failures are isolated per decision, like the clustering batch.
        """
        decisions = await self._store.list_decisions()
        indexed = 0
        failed: list[str] = []
        for decision in decisions:
            try:
                vector = await self._embedder.embed(anchor_query_text(decision))
                await self._index.upsert(decision.id, vector)
                indexed += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "reindex_decision_failed",
                    decision_id=decision.id,
                    error=str(exc),
                )
                failed.append(decision.id)
        logger.info("reindex_complete", indexed=indexed, failed=len(failed))
        return {"total": len(decisions), "indexed": indexed, "failed": failed}
