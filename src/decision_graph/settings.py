"""Application settings via Pydantic BaseSettings.

All configuration uses the DG_ environment variable prefix.
Centralized here to prevent hardcoded magic numbers across the codebase.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Neo4jSettings(BaseSettings):
    """Neo4j connection settings (decision store + vector index)."""

    model_config = {"env_prefix": "DG_NEO4J_"}

    uri: str = "bolt://localhost:7687"
    username: str = "neo4j"
    password: str = "decision-graph-dev-password"
    database: str = "neo4j"
    max_connection_pool_size: int = 50

    # Native vector index over Decision.embedding
    vector_index_name: str = "decision_embedding"
    embedding_dimension: int = 384


class RedisSettings(BaseSettings):
    """Redis connection settings for the embedding cache."""

    model_config = {"env_prefix": "DG_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None

    cache_enabled: bool = True
    cache_prefix: str = "emb:"
    cache_ttl_seconds: int = 7 * 24 * 3600


class EmbeddingSettings(BaseSettings):
    """HTTP embedding provider settings."""

    model_config = {"env_prefix": "DG_EMBEDDING_"}

    base_url: str = "http://127.0.0.1:3849"
    timeout_s: float = 5.0
    model: str = "Xenova/multilingual-e5-small"


class ClusterSettings(BaseSettings):
    """Similarity clustering parameters."""

    model_config = {"env_prefix": "DG_CLUSTER_"}

    # Most recent decisions considered as the comparison universe
    candidate_pool_size: int = Field(default=100, ge=1)
    # How many of those are queried as anchors
    sample_limit: int = Field(default=50, ge=0)
    top_k_per_anchor: int = Field(default=3, ge=1)
    similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    # Bounded worker pool for per-anchor round trips
    max_concurrency: int = Field(default=4, ge=1)
    # Applies to each embed/query call, not the whole batch
    anchor_timeout_s: float = Field(default=10.0, gt=0.0)

    # Interactive "related items" lookup
    similar_to_limit: int = Field(default=5, ge=1)
    similar_to_min_similarity: float = Field(default=0.5, ge=0.0, le=1.0)

    # Free-text semantic search
    semantic_search_limit: int = Field(default=10, ge=1)
    semantic_search_max_limit: int = Field(default=20, ge=1)
    semantic_search_min_similarity: float = Field(default=0.3, ge=0.0, le=1.0)


class TraversalSettings(BaseSettings):
    """Neighborhood traversal bounds."""

    model_config = {"env_prefix": "DG_TRAVERSAL_"}

    default_max_depth: int = 3
    max_max_depth: int = 10


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "DG_"}

    app_name: str = "decision-graph"
    debug: bool = False
    log_level: str = "INFO"

    neo4j: Neo4jSettings = Field(default_factory=Neo4jSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    cluster: ClusterSettings = Field(default_factory=ClusterSettings)
    traversal: TraversalSettings = Field(default_factory=TraversalSettings)
