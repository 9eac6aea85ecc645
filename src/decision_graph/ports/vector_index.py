"""Vector index port interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from decision_graph.domain.models import VectorMatch


class VectorIndex(Protocol):
    """Protocol for nearest-neighbor lookup over decision embeddings."""

    async def query(
        self,
        vector: list[float],
        k: int,
        min_similarity: float,
    ) -> list[VectorMatch]:
        """Return up to ``k`` matches with similarity >= ``min_similarity``.

        Results are ranked by similarity descending and are NOT self-filtered:
        the caller must drop the anchor id itself.
        """
        ...

    async def upsert(self, decision_id: str, vector: list[float]) -> None:
        """Store or replace the embedding for a decision."""
        ...
