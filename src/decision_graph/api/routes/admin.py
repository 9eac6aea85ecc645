"""Admin endpoints.

POST /v1/admin/reindex — embed every decision into the vector index
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from decision_graph.api.dependencies import get_graph_service
from decision_graph.service import DecisionGraphService  # noqa: TCH001 — runtime: Depends

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

GraphServiceDep = Annotated[DecisionGraphService, Depends(get_graph_service)]


class ReindexResponse(BaseModel):
    """Result of a reindex operation."""

    total: int = 0
    indexed: int = 0
    failed: list[str] = Field(default_factory=list)


@router.post("/reindex", response_model=ReindexResponse)
async def reindex(service: GraphServiceDep) -> ReindexResponse:
    """Recompute and store embeddings for all decisions."""
    result = await service.reindex()
    logger.info("admin_reindex", indexed=result["indexed"], failed=len(result["failed"]))
    return ReindexResponse(**result)
