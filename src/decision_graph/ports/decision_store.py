"""Decision store port interface.

Uses typing.Protocol for structural subtyping (not ABCs).
The Neo4j adapter implements this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from decision_graph.domain.models import Decision, Edge, Outcome


class DecisionStore(Protocol):
    """Protocol for the authoritative decision/edge store."""

    async def list_decisions(self) -> list[Decision]:
        """Return every decision ordered by created_at descending (newest first)."""
        ...

    async def list_edges(self) -> list[Edge]:
        """Return every explicit edge."""
        ...

    async def get_decision(self, decision_id: str) -> Decision | None:
        """Return a single decision, or None when it does not exist."""
        ...

    async def set_outcome(
        self,
        decision_id: str,
        outcome: Outcome,
        reason: str | None = None,
    ) -> None:
        """Persist an outcome change.

        Raises NotFoundError when no decision has ``decision_id``.
        """
        ...

    async def close(self) -> None:
        """Release connections."""
        ...
