"""FastAPI dependency injection helpers.

Extracts shared resources from ``app.state`` so route handlers can
declare them via ``Depends()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request  # noqa: TCH002 — runtime: FastAPI dependency injection

if TYPE_CHECKING:
    from decision_graph.service import DecisionGraphService
    from decision_graph.settings import Settings


def get_settings(request: Request) -> Settings:
    """Return the application settings from app state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def get_graph_service(request: Request) -> DecisionGraphService:
    """Return the decision graph service from app state."""
    return request.app.state.graph_service  # type: ignore[no-any-return]
