"""Deterministic presentation hints for graph consumers.

Colors, edge styles and node sizes are pure functions of the data, so two
sessions rendering the same graph agree without shared state.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any

from decision_graph.domain.models import SIMILAR, Outcome, Relationship

if TYPE_CHECKING:
    from decision_graph.domain.models import Decision

TOPIC_PALETTE: tuple[str, ...] = (
    "#FFCE00",
    "#E6B800",
    "#FF9999",
    "#D4C4E0",
    "#22c55e",
    "#f97316",
    "#06b6d4",
    "#8b5cf6",
    "#ec4899",
    "#f59e0b",
    "#10b981",
    "#0ea5e9",
)

SUCCESS_COLOR = "#22c55e"
FAILURE_COLOR = "#ef4444"
WARNING_COLOR = "#f59e0b"
NEUTRAL_COLOR = "#4a4a6a"

_OUTCOME_COLORS: dict[str, str] = {
    Outcome.SUCCESS: SUCCESS_COLOR,
    Outcome.FAILED: FAILURE_COLOR,
    Outcome.PARTIAL: WARNING_COLOR,
}

_OUTCOME_ICONS: dict[str, str] = {
    Outcome.PENDING: "clock",
    Outcome.SUCCESS: "check-circle",
    Outcome.FAILED: "x-circle",
    Outcome.PARTIAL: "alert-circle",
}

EDGE_STYLES: dict[str, dict[str, Any]] = {
    Relationship.SUPERSEDES: {"color": "#666666", "dashes": False, "width": 2.0},
    Relationship.BUILDS_ON: {"color": "#B8860B", "dashes": [5, 5], "width": 2.5},
    Relationship.DEBATES: {"color": "#DC143C", "dashes": [5, 5], "width": 2.5},
    Relationship.SYNTHESIZES: {"color": "#6B4C9A", "dashes": False, "width": 3.0},
    SIMILAR: {"color": "#9ca3af", "dashes": [2, 4], "width": 1.0},
}

DEFAULT_EDGE_STYLE: dict[str, Any] = {"color": NEUTRAL_COLOR, "dashes": False, "width": 2.0}


def topic_color(topic: str) -> str:
    """Stable palette color for a topic (SHA-256 of the name, modulo palette size)."""
    digest = hashlib.sha256(topic.encode("utf-8")).hexdigest()
    return TOPIC_PALETTE[int(digest[:8], 16) % len(TOPIC_PALETTE)]


def outcome_color(outcome: str | None) -> str:
    """Border color for an outcome. Total: unknown or absent maps to neutral."""
    if not outcome:
        return NEUTRAL_COLOR
    return _OUTCOME_COLORS.get(outcome.upper(), NEUTRAL_COLOR)


def outcome_icon(outcome: str | None) -> str:
    return _OUTCOME_ICONS.get((outcome or Outcome.PENDING).upper(), "clock")


def edge_style(relationship: str | None) -> dict[str, Any]:
    return dict(EDGE_STYLES.get(relationship or "", DEFAULT_EDGE_STYLE))


def node_size(connection_count: int) -> int:
    """Node radius bucket by degree."""
    if connection_count <= 2:
        return 12
    if connection_count <= 5:
        return 18
    if connection_count <= 10:
        return 24
    return 30


def node_view(decision: Decision, connection_count: int = 0) -> dict[str, Any]:
    """Presentation record for one node."""
    return {
        "id": decision.id,
        "label": decision.topic,
        "color": topic_color(decision.topic),
        "border": outcome_color(decision.outcome),
        "icon": outcome_icon(decision.outcome),
        "size": node_size(connection_count),
    }
