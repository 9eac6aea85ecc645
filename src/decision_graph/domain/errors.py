"""Error taxonomy for the decision graph core.

Pure Python — zero framework imports. The API layer maps each class to
an HTTP status; the core itself never retries.
"""

from __future__ import annotations


class DecisionGraphError(Exception):
    """Base class carrying a stable error code."""

    code = "DECISION_GRAPH_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DecisionGraphError):
    """A required argument is missing or malformed."""

    code = "INVALID_REQUEST"

    def __init__(self, field: str, message: str, code: str | None = None) -> None:
        self.field = field
        if code is not None:
            self.code = code
        super().__init__(f"{field}: {message}")


class NotFoundError(DecisionGraphError):
    """The referenced decision does not exist."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found: {resource_id}")


class DependencyError(DecisionGraphError):
    """The embedding provider or vector index failed."""

    code = "DEPENDENCY_FAILED"

    def __init__(self, dependency: str, message: str) -> None:
        self.dependency = dependency
        super().__init__(f"{dependency}: {message}")
