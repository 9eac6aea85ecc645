"""Decision and edge factory functions for tests.

Every function accepts **overrides so callers can replace any field.
"""

from __future__ import annotations

from decision_graph.domain.models import Decision, Edge

_BASE_CREATED_AT = 1_707_644_400_000


def make_decision(decision_id: str = "d1", **overrides) -> Decision:
    """Create a Decision with sensible defaults.

    ``created_at`` defaults to a fixed epoch-ms value; pass it explicitly
    when ordering matters.
    """
    defaults: dict = {
        "id": decision_id,
        "topic": "architecture",
        "decision": f"decision {decision_id}",
        "reasoning": f"because of {decision_id}",
        "outcome": None,
        "confidence": 0.8,
        "created_at": _BASE_CREATED_AT,
    }
    defaults.update(overrides)
    return Decision(**defaults)


def make_decisions(n: int, topic: str = "architecture") -> list[Decision]:
    """Create *n* decisions ``d0..d{n-1}``, returned newest first.

    ``d{n-1}`` is the most recent; timestamps are spaced one second apart.
    """
    decisions = [
        make_decision(f"d{i}", topic=topic, created_at=_BASE_CREATED_AT + i * 1000)
        for i in range(n)
    ]
    return list(reversed(decisions))


def make_edge(from_id: str, to_id: str, relationship: str = "builds_on", **overrides) -> Edge:
    """Create an explicit Edge between two ids."""
    defaults: dict = {
        "from_id": from_id,
        "to_id": to_id,
        "relationship": relationship,
        "reason": None,
    }
    defaults.update(overrides)
    return Edge(**defaults)
