"""Decision graph endpoints.

GET  /v1/graph                              — nodes, edges, optional similarity edges
GET  /v1/graph/similar                      — related decisions for one id
GET  /v1/graph/nodes/{node_id}/neighborhood — bounded-depth reachable set
GET  /v1/graph/search                       — substring search over loaded nodes
GET  /v1/graph/semantic                     — free-text semantic search over the index
POST /v1/graph/outcome                      — update a decision's outcome
GET  /v1/graph/export                       — export decisions (json|markdown|csv)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from decision_graph.api.dependencies import get_graph_service
from decision_graph.domain.models import (  # noqa: TCH001 — runtime: type annotations + response_model
    ExportFormat,
    GraphPayload,
    Neighborhood,
    OutcomeAck,
    OutcomeUpdate,
    SearchResult,
    SemanticSearchResponse,
    SimilarResponse,
)
from decision_graph.domain.validation import validate_search_query
from decision_graph.service import DecisionGraphService  # noqa: TCH001 — runtime: Depends()

router = APIRouter(prefix="/graph", tags=["graph"])

GraphServiceDep = Annotated[DecisionGraphService, Depends(get_graph_service)]


@router.get("/similar", response_model=SimilarResponse)
async def get_similar(
    service: GraphServiceDep,
    node_id: str | None = Query(default=None, alias="id"),
) -> SimilarResponse:
    """Up to five decisions most similar to ``id``."""
    return await service.get_similar_to(node_id)


@router.get("/search", response_model=SearchResult)
async def search_graph(
    service: GraphServiceDep,
    q: str | None = Query(default=None),
    topic: str | None = Query(default=None),
) -> SearchResult:
    """Case-insensitive substring search over topic, decision and reasoning."""
    query = validate_search_query(q)
    session = await service.open_session(topic_filter=topic)
    matches = session.search(query)
    return SearchResult(query=query, matches=matches, count=len(matches))


@router.get("/semantic", response_model=SemanticSearchResponse)
async def semantic_search(
    service: GraphServiceDep,
    q: str | None = Query(default=None),
    limit: int | None = Query(default=None),
) -> SemanticSearchResponse:
    """Decisions closest in meaning to ``q``, capped at the configured maximum."""
    return await service.semantic_search(q, limit)


@router.get("/nodes/{node_id}/neighborhood", response_model=Neighborhood)
async def get_neighborhood(
    node_id: str,
    service: GraphServiceDep,
    max_depth: int | None = Query(default=None, ge=0),
    topic: str | None = Query(default=None),
) -> Neighborhood:
    """Decisions reachable from ``node_id`` over explicit edges."""
    session = await service.open_session(topic_filter=topic)
    return session.neighborhood(node_id, max_depth)


@router.post("/outcome", response_model=OutcomeAck)
async def update_outcome(
    body: OutcomeUpdate,
    service: GraphServiceDep,
) -> OutcomeAck:
    """Normalize and persist a decision outcome."""
    return await service.set_outcome(body.id, body.outcome, body.reason)


@router.get("/export")
async def export_decisions(
    service: GraphServiceDep,
    fmt: ExportFormat = Query(default=ExportFormat.JSON, alias="format"),
) -> Response:
    """Download every decision in the requested format."""
    content, content_type, filename = await service.export(fmt)
    return Response(
        content=content,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=GraphPayload)
async def get_graph(
    service: GraphServiceDep,
    topic: str | None = Query(default=None),
    cluster: bool = Query(default=False),
) -> GraphPayload:
    """Graph payload, optionally filtered by topic and clustered by similarity."""
    return await service.get_graph(topic_filter=topic, include_cluster=cluster)
