"""Graph assembly: topic filtering and payload metadata.

Pure domain module — ZERO framework imports.

Edge filtering policies:
- explicit edges are kept when EITHER endpoint survives the node filter,
  so boundary relationships pointing out of the visible set stay visible
- similarity edges are kept only when BOTH endpoints survive, since they
  are additive visual hints and must not imply hidden nodes
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from decision_graph.domain.models import GraphMeta, GraphPayload

if TYPE_CHECKING:
    from collections.abc import Sequence

    from decision_graph.domain.models import Decision, Edge, SimilarityEdge


def unique_topics(nodes: Sequence[Decision]) -> list[str]:
    """Sorted list of distinct topics."""
    return sorted({n.topic for n in nodes})


def filter_nodes_by_topic(nodes: Sequence[Decision], topic: str) -> list[Decision]:
    """Keep nodes whose topic equals ``topic`` exactly, preserving order."""
    return [n for n in nodes if n.topic == topic]


def filter_edges_by_nodes(edges: Sequence[Edge], nodes: Sequence[Decision]) -> list[Edge]:
    """Keep explicit edges touching at least one node in ``nodes``."""
    node_ids = {n.id for n in nodes}
    return [e for e in edges if e.from_id in node_ids or e.to_id in node_ids]


def filter_similarity_edges(
    edges: Sequence[SimilarityEdge],
    nodes: Sequence[Decision],
) -> list[SimilarityEdge]:
    """Keep similarity edges whose endpoints are both in ``nodes``."""
    node_ids = {n.id for n in nodes}
    return [e for e in edges if e.from_id in node_ids and e.to_id in node_ids]


def assemble_graph(
    nodes: Sequence[Decision],
    edges: Sequence[Edge],
    similarity_edges: Sequence[SimilarityEdge] | None = None,
    topic_filter: str | None = None,
    latency_ms: int = 0,
) -> GraphPayload:
    """Build a graph payload from store data plus optional similarity edges.

    ``nodes`` must already be newest-first; order is preserved.
    ``similarity_edges`` are expected to be computed over the unfiltered
    decision set and are intersected with the filtered nodes here.
    """
    visible_nodes = list(nodes)
    visible_edges = list(edges)

    if topic_filter:
        visible_nodes = filter_nodes_by_topic(visible_nodes, topic_filter)
        visible_edges = filter_edges_by_nodes(visible_edges, visible_nodes)

    visible_similarity: list[SimilarityEdge] = []
    if similarity_edges:
        visible_similarity = filter_similarity_edges(similarity_edges, visible_nodes)

    topics = [topic_filter] if topic_filter else unique_topics(visible_nodes)

    return GraphPayload(
        nodes=visible_nodes,
        edges=visible_edges,
        similarity_edges=visible_similarity,
        meta=GraphMeta(
            total_nodes=len(visible_nodes),
            total_edges=len(visible_edges),
            similarity_edges=len(visible_similarity),
            topics=topics,
        ),
        latency=latency_ms,
    )
