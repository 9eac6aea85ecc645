"""Outcome normalization and local application.

Pure domain module — ZERO framework imports. Persisting the change is the
decision store's job; this module only computes the new node state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from decision_graph.domain.errors import NotFoundError
from decision_graph.domain.validation import validate_outcome

if TYPE_CHECKING:
    from collections.abc import Sequence

    from decision_graph.domain.models import Decision, Outcome


def normalize_outcome(value: str | None) -> Outcome:
    """Upper-case ``value`` and return the matching ``Outcome``."""
    return validate_outcome(value)


def apply_outcome(node: Decision, outcome: Outcome) -> Decision:
    """Copy of ``node`` carrying ``outcome``."""
    return node.model_copy(update={"outcome": outcome})


def replace_outcome(
    nodes: Sequence[Decision],
    node_id: str,
    outcome: Outcome,
) -> list[Decision]:
    """New node list with ``node_id``'s outcome replaced, order preserved.

    Raises NotFoundError when ``node_id`` is not in ``nodes``.
    """
    updated: list[Decision] = []
    found = False
    for node in nodes:
        if node.id == node_id:
            updated.append(apply_outcome(node, outcome))
            found = True
        else:
            updated.append(node)
    if not found:
        raise NotFoundError("Decision", node_id)
    return updated
