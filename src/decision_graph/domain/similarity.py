"""Similarity graph builder.

Derives implicit "similar" edges from a frozen snapshot of decisions by
running one embed + nearest-neighbor round trip per sampled anchor.

Guarantees for a single run:
- at most one edge per unordered pair (canonical pair key)
- every edge has similarity strictly above the threshold
- no self edges

Per-anchor failures are logged and skipped so the run returns a partial
edge set. The interactive single-node lookup does not swallow failures.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import structlog

from decision_graph.domain.errors import DependencyError
from decision_graph.domain.models import SimilarityEdge, VectorMatch

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from decision_graph.domain.models import Decision
    from decision_graph.ports.embedding import EmbeddingProvider
    from decision_graph.ports.vector_index import VectorIndex
    from decision_graph.settings import ClusterSettings

logger = structlog.get_logger(__name__)

PAIR_KEY_SEPARATOR = "|"


def pair_key(a: str, b: str) -> str:
    """Canonical key for the unordered pair {a, b}."""
    first, second = sorted((a, b))
    return f"{first}{PAIR_KEY_SEPARATOR}{second}"


def anchor_query_text(decision: Decision) -> str:
    """Text embedded for a decision when it is used as a query point."""
    return f"{decision.topic} {decision.decision}"


def select_candidates(decisions: Sequence[Decision], pool_size: int) -> list[Decision]:
    """Return the ``pool_size`` most recent decisions, newest first."""
    ordered = sorted(decisions, key=lambda d: d.created_at, reverse=True)
    return ordered[:pool_size]


def reduce_anchor_matches(
    anchor_id: str,
    matches: Sequence[VectorMatch],
    threshold: float,
    seen: set[str],
) -> list[SimilarityEdge]:
    """Turn one anchor's neighbors into new edges, updating ``seen`` in place.

    Must be called from a single reducer so that ``seen`` has one writer.
    """
    edges: list[SimilarityEdge] = []
    for match in matches:
        if match.id == anchor_id or match.similarity <= threshold:
            continue
        key = pair_key(anchor_id, match.id)
        if key in seen:
            continue
        seen.add(key)
        edges.append(
            SimilarityEdge(from_id=anchor_id, to_id=match.id, similarity=match.similarity)
        )
    return edges


async def _bounded(awaitable: Awaitable[Any], timeout_s: float | None) -> Any:
    if timeout_s is None:
        return await awaitable
    async with asyncio.timeout(timeout_s):
        return await awaitable


async def _query_anchor(
    anchor: Decision,
    embedder: EmbeddingProvider,
    index: VectorIndex,
    settings: ClusterSettings,
) -> list[VectorMatch]:
    vector = await _bounded(embedder.embed(anchor_query_text(anchor)), settings.anchor_timeout_s)
    return await _bounded(  # type: ignore[no-any-return]
        index.query(
            vector,
            settings.top_k_per_anchor + 1,
            settings.similarity_threshold,
        ),
        settings.anchor_timeout_s,
    )


async def build_similarity_edges(
    decisions: Sequence[Decision],
    embedder: EmbeddingProvider,
    index: VectorIndex,
    settings: ClusterSettings,
    cancel: asyncio.Event | None = None,
) -> list[SimilarityEdge]:
    """Compute deduplicated similarity edges over a snapshot of decisions.

    Anchors are queried concurrently (bounded by ``settings.max_concurrency``)
    while a single reducer consumes their results in anchor order, so the
    output is deterministic for a given set of index responses.

    When ``cancel`` is set, in-flight anchor calls are abandoned and the
    edges reduced so far are returned.
    """
    start = time.monotonic()
    candidates = select_candidates(decisions, settings.candidate_pool_size)
    if len(candidates) < 2:
        return []

    anchors = candidates[: settings.sample_limit]
    semaphore = asyncio.Semaphore(settings.max_concurrency)

    async def run_anchor(anchor: Decision) -> list[VectorMatch] | None:
        async with semaphore:
            if cancel is not None and cancel.is_set():
                return []
            try:
                return await _query_anchor(anchor, embedder, index, settings)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "similarity_anchor_failed",
                    decision_id=anchor.id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                return None

    tasks = [asyncio.ensure_future(run_anchor(anchor)) for anchor in anchors]
    cancel_waiter = asyncio.ensure_future(cancel.wait()) if cancel is not None else None

    edges: list[SimilarityEdge] = []
    seen: set[str] = set()
    failed = 0
    completed = 0
    cancelled = False

    try:
        for anchor, task in zip(anchors, tasks, strict=True):
            if cancel_waiter is not None and not task.done():
                await asyncio.wait({task, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
                if not task.done():
                    cancelled = True
                    break
            matches = await task
            completed += 1
            if matches is None:
                failed += 1
                continue
            edges.extend(
                reduce_anchor_matches(anchor.id, matches, settings.similarity_threshold, seen)
            )
    finally:
        pending = [t for t in tasks if not t.done()]
        if cancel_waiter is not None:
            pending.append(cancel_waiter)
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    logger.info(
        "similarity_run_complete",
        candidates=len(candidates),
        anchors=len(anchors),
        anchors_completed=completed,
        anchors_failed=failed,
        cancelled=cancelled,
        edges=len(edges),
        elapsed_ms=int((time.monotonic() - start) * 1000),
    )
    return edges


async def find_similar_to(
    decision: Decision,
    embedder: EmbeddingProvider,
    index: VectorIndex,
    limit: int = 5,
    min_similarity: float = 0.5,
    timeout_s: float | None = None,
) -> list[VectorMatch]:
    """Single-anchor lookup of a decision's nearest neighbors, excluding itself.

    Failures surface as ``DependencyError``: the caller asked for this
    specific lookup, so an empty answer would be misleading.
    """
    matches = await search_by_text(
        anchor_query_text(decision),
        embedder,
        index,
        limit=limit + 1,
        min_similarity=min_similarity,
        timeout_s=timeout_s,
    )
    return [m for m in matches if m.id != decision.id][:limit]


async def search_by_text(
    text: str,
    embedder: EmbeddingProvider,
    index: VectorIndex,
    limit: int,
    min_similarity: float,
    timeout_s: float | None = None,
) -> list[VectorMatch]:
    """Embed free text and return its nearest indexed decisions.

    Each call (embed, then query) is bounded by ``timeout_s``. Any failure,
    timeouts included, is raised as ``DependencyError``.
    """
    try:
        vector = await _bounded(embedder.embed(text), timeout_s)
        matches: list[VectorMatch] = await _bounded(
            index.query(vector, limit, min_similarity),
            timeout_s,
        )
    except DependencyError:
        raise
    except Exception as exc:
        raise DependencyError("similarity", str(exc) or type(exc).__name__) from exc
    return matches
