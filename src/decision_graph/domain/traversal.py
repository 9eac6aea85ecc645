"""Bounded neighborhood traversal over explicit edges.

Adjacency is built from explicit edges only, as an undirected multimap;
similarity edges never participate, so a focused neighborhood never
crosses a "similar" link.

Pure Python — ZERO framework imports.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from decision_graph.domain.models import Edge

Adjacency = dict[str, list[str]]


def clamp_depth(max_depth: int, max_max_depth: int = 10) -> int:
    """Clamp a client-supplied depth to ``[0, max_max_depth]``."""
    return min(max(0, max_depth), max_max_depth)


def build_adjacency(edges: Iterable[Edge]) -> Adjacency:
    """Map each node id to its neighbor ids; every edge adds both directions.

    Parallel edges produce repeated neighbor entries, which BFS tolerates.
    """
    adjacency: Adjacency = {}
    for edge in edges:
        adjacency.setdefault(edge.from_id, []).append(edge.to_id)
        adjacency.setdefault(edge.to_id, []).append(edge.from_id)
    return adjacency


def reachable(adjacency: Mapping[str, Sequence[str]], root_id: str, max_depth: int = 3) -> set[str]:
    """Ids reachable from ``root_id`` within ``max_depth`` hops.

    Always includes the root, even at depth 0 or when it has no edges.
    """
    visited = {root_id}
    queue: deque[tuple[str, int]] = deque([(root_id, 0)])

    while queue:
        node_id, depth = queue.popleft()
        if depth >= max_depth:
            continue
        for neighbor_id in adjacency.get(node_id, ()):
            if neighbor_id not in visited:
                visited.add(neighbor_id)
                queue.append((neighbor_id, depth + 1))

    return visited


def emphasized_edges(edges: Iterable[Edge], reachable_ids: set[str]) -> list[Edge]:
    """Edges to render at full emphasis: both endpoints must be reachable."""
    return [e for e in edges if e.from_id in reachable_ids and e.to_id in reachable_ids]


def connection_counts(edges: Iterable[Edge]) -> dict[str, int]:
    """Degree of each node over explicit edges."""
    counts: dict[str, int] = {}
    for edge in edges:
        counts[edge.from_id] = counts.get(edge.from_id, 0) + 1
        counts[edge.to_id] = counts.get(edge.to_id, 0) + 1
    return counts
