"""Embedding provider port interface."""

from __future__ import annotations

from typing import Protocol


class EmbeddingProvider(Protocol):
    """Protocol for text -> fixed-dimension vector.

    Implementations raise DependencyError on outage or invalid input.
    """

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        ...
