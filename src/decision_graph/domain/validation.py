"""Request validation rules.

Pure Python — zero framework imports. Checks that run before a request
reaches the decision store or the embedding provider.
"""

from __future__ import annotations

from decision_graph.domain.errors import ValidationError
from decision_graph.domain.models import Outcome

# Maximum accepted length of a free-text search query
MAX_QUERY_LENGTH = 512


def require_node_id(node_id: str | None, field: str = "id") -> str:
    """Return the stripped node id or raise ``ValidationError(MISSING_ID)``."""
    if node_id is None or not node_id.strip():
        raise ValidationError(field, "Missing required parameter: id", code="MISSING_ID")
    return node_id.strip()


def validate_outcome(value: str | None) -> Outcome:
    """Upper-case an outcome string and check it against the known values."""
    if value is None or not value.strip():
        raise ValidationError("outcome", "Missing required field: outcome")
    normalized = value.strip().upper()
    try:
        return Outcome(normalized)
    except ValueError:
        allowed = ", ".join(o.value for o in Outcome)
        raise ValidationError(
            "outcome",
            f"Unknown outcome '{value}' (expected one of: {allowed})",
        ) from None


def validate_search_query(query: str | None) -> str:
    """Strip a search query and bound its length. Empty is allowed."""
    if query is None:
        return ""
    stripped = query.strip()
    if len(stripped) > MAX_QUERY_LENGTH:
        raise ValidationError(
            "q",
            f"Query exceeds max length of {MAX_QUERY_LENGTH}",
        )
    return stripped


def require_query(query: str | None) -> str:
    """Return the stripped free-text query or raise ``ValidationError(MISSING_QUERY)``."""
    if query is None or not query.strip():
        raise ValidationError("q", "Missing required parameter: q", code="MISSING_QUERY")
    return validate_search_query(query)


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    """Fall back to ``default`` when unset and cap at ``maximum``."""
    if limit is None:
        return default
    if limit < 1:
        raise ValidationError("limit", "Must be a positive integer")
    return min(limit, maximum)
