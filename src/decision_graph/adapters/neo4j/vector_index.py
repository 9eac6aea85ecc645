"""Neo4j VectorIndex adapter.

Nearest-neighbor lookup through Neo4j's native vector index
(``db.index.vector.queryNodes``). For the cosine function Neo4j reports a
normalized score ``(1 + cos) / 2`` in [0, 1]; this adapter converts it back
to raw cosine similarity so thresholds mean the same thing everywhere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from decision_graph.adapters.neo4j import queries
from decision_graph.domain.errors import DependencyError, NotFoundError
from decision_graph.domain.models import VectorMatch

if TYPE_CHECKING:
    from neo4j import AsyncDriver

    from decision_graph.settings import Neo4jSettings

logger = structlog.get_logger(__name__)


def score_to_similarity(score: float) -> float:
    """Neo4j normalized cosine score -> cosine similarity."""
    return 2.0 * score - 1.0


def similarity_to_score(similarity: float) -> float:
    """Cosine similarity -> Neo4j normalized cosine score."""
    return (1.0 + similarity) / 2.0


class Neo4jVectorIndex:
    """VectorIndex implementation sharing the decision store's driver."""

    def __init__(self, driver: AsyncDriver, settings: Neo4jSettings) -> None:
        self._driver = driver
        self._database = settings.database
        self._index_name = settings.vector_index_name
        self._dimensions = settings.embedding_dimension

    async def ensure_index(self) -> None:
        """Create the vector index if it does not exist."""
        async with self._driver.session(database=self._database) as session:
            await session.run(queries.create_vector_index(self._index_name, self._dimensions))
        logger.info(
            "ensured_vector_index",
            index_name=self._index_name,
            dimensions=self._dimensions,
        )

    async def query(
        self,
        vector: list[float],
        k: int,
        min_similarity: float,
    ) -> list[VectorMatch]:
        """Top ``k`` decisions by cosine similarity, descending. Not self-filtered."""
        if len(vector) != self._dimensions:
            raise DependencyError(
                "vector_index",
                f"expected {self._dimensions}-dim vector, got {len(vector)}",
            )
        params = {
            "index_name": self._index_name,
            "k": k,
            "vector": vector,
            "min_score": similarity_to_score(min_similarity),
        }
        try:
            async with self._driver.session(database=self._database) as session:
                result = await session.run(queries.QUERY_NEAREST, params)
                records = [record async for record in result]
        except (Neo4jError, ServiceUnavailable) as exc:
            raise DependencyError("vector_index", str(exc)) from exc

        return [
            VectorMatch(id=r["id"], similarity=score_to_similarity(r["score"]))
            for r in records
        ]

    async def upsert(self, decision_id: str, vector: list[float]) -> None:
        """Store the embedding on the decision node."""

        async def _write(tx: Any) -> Any:
            result = await tx.run(queries.SET_EMBEDDING, {"id": decision_id, "vector": vector})
            return await result.single()

        async with self._driver.session(database=self._database) as session:
            record = await session.execute_write(_write)
        if record is None:
            raise NotFoundError("Decision", decision_id)
