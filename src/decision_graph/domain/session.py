"""Per-client graph session.

Wraps one assembled payload with the structures derived from it: the
explicit-edge adjacency and a search cursor. The payload is never mutated
in place; an outcome change swaps in a new payload snapshot, so concurrent
readers holding the old one are unaffected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from decision_graph.domain.errors import NotFoundError
from decision_graph.domain.models import Neighborhood
from decision_graph.domain.outcome import normalize_outcome, replace_outcome
from decision_graph.domain.search import SearchIndex
from decision_graph.domain.traversal import (
    build_adjacency,
    clamp_depth,
    emphasized_edges,
    reachable,
)

if TYPE_CHECKING:
    from decision_graph.domain.models import Decision, GraphPayload, Outcome
    from decision_graph.ports.decision_store import DecisionStore

logger = structlog.get_logger(__name__)


class GraphSession:
    """Traversal, search and outcome edits over a single loaded payload."""

    def __init__(
        self,
        payload: GraphPayload,
        store: DecisionStore | None = None,
        default_max_depth: int = 3,
        max_max_depth: int = 10,
    ) -> None:
        self._payload = payload
        self._store = store
        self._default_max_depth = default_max_depth
        self._max_max_depth = max_max_depth
        self._adjacency = build_adjacency(payload.edges)
        self._search = SearchIndex(payload.nodes)

    @property
    def payload(self) -> GraphPayload:
        return self._payload

    @property
    def adjacency(self) -> dict[str, list[str]]:
        return self._adjacency

    @property
    def search_index(self) -> SearchIndex:
        return self._search

    def get_node(self, node_id: str) -> Decision | None:
        for node in self._payload.nodes:
            if node.id == node_id:
                return node
        return None

    # -- traversal ----------------------------------------------------------

    def reachable(self, root_id: str, max_depth: int | None = None) -> set[str]:
        depth = self._default_max_depth if max_depth is None else max_depth
        return reachable(self._adjacency, root_id, clamp_depth(depth, self._max_max_depth))

    def neighborhood(self, root_id: str, max_depth: int | None = None) -> Neighborhood:
        """Reachable ids plus the edges to emphasize around a focus node.

        Raises NotFoundError when ``root_id`` is not in the payload.
        """
        if self.get_node(root_id) is None:
            raise NotFoundError("Decision", root_id)
        depth = clamp_depth(
            self._default_max_depth if max_depth is None else max_depth,
            self._max_max_depth,
        )
        ids = reachable(self._adjacency, root_id, depth)
        # payload order keeps the listing newest-first
        ordered = [n.id for n in self._payload.nodes if n.id in ids]
        dimmed = [n.id for n in self._payload.nodes if n.id not in ids]
        # boundary edges under a topic filter can reach hidden nodes
        visible = set(ordered)
        return Neighborhood(
            id=root_id,
            max_depth=depth,
            reachable=ordered,
            dimmed=dimmed,
            emphasized_edges=emphasized_edges(self._payload.edges, visible),
        )

    # -- search -------------------------------------------------------------

    def search(self, query: str) -> list[Decision]:
        return self._search.search(query)

    def next_match(self) -> Decision | None:
        return self._search.next()

    def previous_match(self) -> Decision | None:
        return self._search.previous()

    def clear_search(self) -> None:
        self._search.clear()

    # -- mutation -----------------------------------------------------------

    async def set_outcome(
        self,
        node_id: str,
        outcome: str,
        reason: str | None = None,
    ) -> Outcome:
        """Normalize, persist through the store (when attached), then apply locally."""
        normalized = normalize_outcome(outcome)
        if self.get_node(node_id) is None:
            raise NotFoundError("Decision", node_id)

        if self._store is not None:
            await self._store.set_outcome(node_id, normalized, reason)

        nodes = replace_outcome(self._payload.nodes, node_id, normalized)
        self._payload = self._payload.model_copy(update={"nodes": nodes})
        self._search.replace_nodes(nodes)
        logger.debug("session_outcome_applied", decision_id=node_id, outcome=normalized.value)
        return normalized
