"""Domain models for the decision graph.

Decisions and explicit edges are read from the decision store; similarity
edges are derived per request and never persisted. All models are pure
Python + Pydantic v2. Zero framework imports.

Field names (id, topic, decision, reasoning, outcome, confidence, created_at;
from, to, relationship, reason; similarity) form the wire contract.
"""

from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Outcome(enum.StrEnum):
    """Decision outcome. Always stored upper-cased."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PARTIAL = "PARTIAL"


class Relationship(enum.StrEnum):
    """Known explicit edge relationships.

    The set is open: ``Edge.relationship`` is a plain string, so values
    outside this enum are carried through untouched.
    """

    SUPERSEDES = "supersedes"
    BUILDS_ON = "builds_on"
    DEBATES = "debates"
    SYNTHESIZES = "synthesizes"


SIMILAR = "similar"


class ExportFormat(enum.StrEnum):
    """Decision export formats."""

    JSON = "json"
    MARKDOWN = "markdown"
    CSV = "csv"


# ---------------------------------------------------------------------------
# Graph records
# ---------------------------------------------------------------------------


class Decision(BaseModel):
    """A recorded decision (graph node)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    topic: str
    decision: str
    reasoning: str = ""
    outcome: Outcome | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    created_at: int = Field(..., description="Epoch milliseconds")

    @field_validator("outcome", mode="before")
    @classmethod
    def _upper_outcome(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or None
        return value

    @field_validator("reasoning", mode="before")
    @classmethod
    def _none_reasoning(cls, value: object) -> object:
        return "" if value is None else value


class Edge(BaseModel):
    """Explicit, directed, named relationship between two decisions."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_id: str = Field(..., alias="from")
    to_id: str = Field(..., alias="to")
    relationship: str
    reason: str | None = None


class SimilarityEdge(BaseModel):
    """Implicit, ephemeral edge derived from embedding closeness.

    Conceptually undirected: ``from``/``to`` record discovery order only.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_id: str = Field(..., alias="from")
    to_id: str = Field(..., alias="to")
    relationship: Literal["similar"] = SIMILAR
    similarity: float


class VectorMatch(BaseModel):
    """A single nearest-neighbor hit from the vector index."""

    model_config = ConfigDict(frozen=True)

    id: str
    similarity: float


# ---------------------------------------------------------------------------
# Response shapes
# ---------------------------------------------------------------------------


class GraphMeta(BaseModel):
    """Summary metadata for a graph payload."""

    total_nodes: int = 0
    total_edges: int = 0
    similarity_edges: int = 0
    topics: list[str] = Field(default_factory=list)


class GraphPayload(BaseModel):
    """Nodes, explicit edges and optional similarity edges for one query.

    Treated as an immutable snapshot: sessions swap in a new payload rather
    than mutating one in place.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    nodes: list[Decision] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    similarity_edges: list[SimilarityEdge] = Field(
        default_factory=list, alias="similarityEdges"
    )
    meta: GraphMeta = Field(default_factory=GraphMeta)
    latency: int = 0


class SimilarDecision(BaseModel):
    """One related decision returned by the interactive lookup."""

    id: str
    topic: str
    decision: str
    similarity: float
    outcome: Outcome | None = None


class SimilarResponse(BaseModel):
    """Result of ``get_similar_to``."""

    id: str
    similar: list[SimilarDecision] = Field(default_factory=list)
    count: int = 0


class OutcomeUpdate(BaseModel):
    """Request body for an outcome change.

    Fields are optional at the schema level so that missing values are
    reported through the domain ValidationError with an explicit code.
    """

    id: str | None = None
    outcome: str | None = None
    reason: str | None = None


class OutcomeAck(BaseModel):
    """Acknowledgement of an applied outcome change."""

    success: bool = True
    id: str
    outcome: Outcome


class Neighborhood(BaseModel):
    """Reachable set around a focus node plus emphasis flags.

    ``reachable`` nodes render at full emphasis, ``dimmed`` nodes do not.
    """

    id: str
    max_depth: int
    reachable: list[str] = Field(default_factory=list)
    dimmed: list[str] = Field(default_factory=list)
    emphasized_edges: list[Edge] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Search matches in payload order."""

    query: str
    matches: list[Decision] = Field(default_factory=list)
    count: int = 0


class SemanticMatch(BaseModel):
    """One decision returned by free-text semantic search."""

    id: str
    topic: str
    decision: str
    reasoning: str = ""
    outcome: Outcome | None = None
    confidence: float | None = None
    similarity: float
    created_at: int


class SemanticSearchResponse(BaseModel):
    """Result of ``semantic_search``, best match first."""

    query: str
    results: list[SemanticMatch] = Field(default_factory=list)
    count: int = 0
