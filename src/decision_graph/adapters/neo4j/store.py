"""Neo4j DecisionStore adapter.

Implements the DecisionStore protocol using the neo4j async driver.
Decisions are ``:Decision`` nodes; explicit edges are ``RELATES``
relationships carrying the relationship name. Timestamps are epoch
milliseconds, matching the decision record contract.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from neo4j import AsyncGraphDatabase

from decision_graph.adapters.neo4j import queries
from decision_graph.domain.errors import NotFoundError
from decision_graph.domain.models import Decision, Edge

if TYPE_CHECKING:
    from neo4j import AsyncDriver

    from decision_graph.domain.models import Outcome
    from decision_graph.settings import Neo4jSettings

logger = structlog.get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _record_to_decision(record: Any) -> Decision:
    return Decision(
        id=record["id"],
        topic=record["topic"] or "",
        decision=record["decision"] or "",
        reasoning=record["reasoning"],
        outcome=record["outcome"],
        confidence=record["confidence"],
        created_at=record["created_at"] or 0,
    )


def _record_to_edge(record: Any) -> Edge:
    return Edge(
        from_id=record["from_id"],
        to_id=record["to_id"],
        relationship=record["relationship"],
        reason=record["reason"],
    )


class Neo4jDecisionStore:
    """Neo4j implementation of the DecisionStore protocol."""

    def __init__(self, settings: Neo4jSettings, driver: AsyncDriver | None = None) -> None:
        self._settings = settings
        self._driver: AsyncDriver = driver or AsyncGraphDatabase.driver(
            settings.uri,
            auth=(settings.username, settings.password),
            max_connection_pool_size=settings.max_connection_pool_size,
        )
        self._database = settings.database

    @property
    def driver(self) -> AsyncDriver:
        return self._driver

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_decisions(self) -> list[Decision]:
        """Return every decision, newest first."""
        async with self._driver.session(database=self._database) as session:
            result = await session.run(queries.LIST_DECISIONS)
            records = [record async for record in result]
        return [_record_to_decision(r) for r in records]

    async def list_edges(self) -> list[Edge]:
        """Return every explicit edge."""
        async with self._driver.session(database=self._database) as session:
            result = await session.run(queries.LIST_EDGES)
            records = [record async for record in result]
        return [_record_to_edge(r) for r in records]

    async def get_decision(self, decision_id: str) -> Decision | None:
        async with self._driver.session(database=self._database) as session:
            result = await session.run(queries.GET_DECISION, {"id": decision_id})
            record = await result.single()
        if record is None:
            return None
        return _record_to_decision(record)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def set_outcome(
        self,
        decision_id: str,
        outcome: Outcome,
        reason: str | None = None,
    ) -> None:
        """Persist an outcome change. Raises NotFoundError for unknown ids."""
        params = {
            "id": decision_id,
            "outcome": str(outcome),
            "reason": reason,
            "updated_at": _now_ms(),
        }

        async def _write(tx: Any) -> Any:
            result = await tx.run(queries.SET_OUTCOME, params)
            return await result.single()

        async with self._driver.session(database=self._database) as session:
            record = await session.execute_write(_write)

        if record is None:
            raise NotFoundError("Decision", decision_id)
        logger.debug("outcome_persisted", decision_id=decision_id, outcome=str(outcome))

    async def merge_decision(self, decision: Decision) -> None:
        """MERGE a decision node. Idempotent."""
        params = {
            "id": decision.id,
            "topic": decision.topic,
            "decision": decision.decision,
            "reasoning": decision.reasoning,
            "outcome": str(decision.outcome) if decision.outcome else None,
            "confidence": decision.confidence,
            "created_at": decision.created_at,
        }
        async with self._driver.session(database=self._database) as session:
            await session.execute_write(lambda tx: tx.run(queries.MERGE_DECISION, params))
        logger.debug("merged_decision", decision_id=decision.id)

    async def create_edge(self, edge: Edge) -> None:
        """Create or update an explicit edge between two existing decisions."""
        params = {
            "from_id": edge.from_id,
            "to_id": edge.to_id,
            "relationship": edge.relationship,
            "reason": edge.reason,
            "created_at": _now_ms(),
        }
        async with self._driver.session(database=self._database) as session:
            await session.execute_write(lambda tx: tx.run(queries.MERGE_EDGE, params))
        logger.debug(
            "created_edge",
            from_id=edge.from_id,
            to_id=edge.to_id,
            relationship=edge.relationship,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def ensure_constraints(self) -> None:
        """Create uniqueness constraints and indexes if they do not exist."""
        async with self._driver.session(database=self._database) as session:
            for constraint_query in queries.ALL_CONSTRAINTS:
                await session.run(constraint_query)
        logger.info("ensured_constraints", count=len(queries.ALL_CONSTRAINTS))

    async def ping(self) -> None:
        async with self._driver.session(database=self._database) as session:
            await session.run("RETURN 1")

    async def close(self) -> None:
        """Release connections."""
        await self._driver.close()
        logger.info("neo4j_driver_closed")
