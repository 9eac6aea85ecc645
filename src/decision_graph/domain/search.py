"""Free-text search over the loaded node set with a cyclic cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from decision_graph.domain.models import Decision


def matches_query(node: Decision, needle: str) -> bool:
    """Case-insensitive substring test against topic, decision and reasoning.

    ``needle`` must already be lower-cased.
    """
    return (
        needle in (node.topic or "").lower()
        or needle in (node.decision or "").lower()
        or needle in (node.reasoning or "").lower()
    )


def search_nodes(nodes: Sequence[Decision], query: str) -> list[Decision]:
    """Stateless search. Matches keep the input order; empty query matches nothing."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [n for n in nodes if matches_query(n, needle)]


class SearchIndex:
    """Search state for one client session.

    Holds the current match list and a cursor that wraps in both
    directions. Not thread-safe; one instance per session.
    """

    def __init__(self, nodes: Sequence[Decision]) -> None:
        self._nodes = list(nodes)
        self._query = ""
        self._matches: list[Decision] = []
        self._index = 0

    @property
    def query(self) -> str:
        return self._query

    @property
    def matches(self) -> list[Decision]:
        return list(self._matches)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Decision | None:
        if not self._matches:
            return None
        return self._matches[self._index]

    @property
    def position_label(self) -> str:
        """Human-readable cursor position, e.g. ``"2 / 5"``; empty when no matches."""
        if not self._matches:
            return ""
        return f"{self._index + 1} / {len(self._matches)}"

    def search(self, query: str) -> list[Decision]:
        """Replace the match list and reset the cursor. Empty query clears."""
        if not query.strip():
            self.clear()
            return []
        self._query = query.strip()
        self._matches = search_nodes(self._nodes, self._query)
        self._index = 0
        return self.matches

    def next(self) -> Decision | None:
        """Advance the cursor, wrapping past the last match."""
        count = len(self._matches)
        if count == 0:
            return None
        self._index = (self._index + 1 + count) % count
        return self._matches[self._index]

    def previous(self) -> Decision | None:
        """Move the cursor back, wrapping before the first match."""
        count = len(self._matches)
        if count == 0:
            return None
        self._index = (self._index - 1 + count) % count
        return self._matches[self._index]

    def replace_nodes(self, nodes: Sequence[Decision]) -> None:
        """Swap the searched node list, re-running the current query.

        The cursor is kept when it still points inside the new match list.
        """
        self._nodes = list(nodes)
        if not self._query:
            return
        index = self._index
        self._matches = search_nodes(self._nodes, self._query)
        self._index = index if index < len(self._matches) else 0

    def clear(self) -> None:
        self._query = ""
        self._matches = []
        self._index = 0
