"""Shared pytest fixtures for the decision-graph test suite.

Wraps the factories in ``tests.fixtures.decisions``. No external service
dependencies are required for unit tests.
"""

from __future__ import annotations

import pytest

from decision_graph.settings import ClusterSettings, Settings
from tests.fixtures.decisions import make_decision, make_decisions, make_edge


@pytest.fixture()
def decision_factory():
    """Return the ``make_decision`` factory callable."""
    return make_decision


@pytest.fixture()
def edge_factory():
    """Return the ``make_edge`` factory callable."""
    return make_edge


@pytest.fixture()
def sample_decisions():
    """Five decisions d0..d4, newest first."""
    return make_decisions(5)


@pytest.fixture()
def cluster_settings() -> ClusterSettings:
    """Cluster settings with small, test-friendly limits."""
    return ClusterSettings(
        candidate_pool_size=100,
        sample_limit=50,
        top_k_per_anchor=3,
        similarity_threshold=0.7,
        max_concurrency=4,
        anchor_timeout_s=1.0,
    )


@pytest.fixture()
def settings(cluster_settings: ClusterSettings) -> Settings:
    """Root settings with the test cluster parameters."""
    return Settings(cluster=cluster_settings)
