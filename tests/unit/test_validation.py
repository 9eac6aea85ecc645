"""Unit tests for request validation (domain/validation.py).

No external dependencies required.
"""

from __future__ import annotations

import pytest

from decision_graph.domain.errors import ValidationError
from decision_graph.domain.models import Outcome
from decision_graph.domain.validation import (
    MAX_QUERY_LENGTH,
    clamp_limit,
    require_node_id,
    require_query,
    validate_outcome,
    validate_search_query,
)


class TestRequireNodeId:
    def test_strips(self):
        assert require_node_id("  d1 ") == "d1"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_id(self, value):
        with pytest.raises(ValidationError) as exc_info:
            require_node_id(value)
        assert exc_info.value.code == "MISSING_ID"
        assert exc_info.value.field == "id"

    def test_custom_field_name(self):
        with pytest.raises(ValidationError) as exc_info:
            require_node_id(None, field="node_id")
        assert exc_info.value.message.startswith("node_id:")


class TestValidateOutcome:
    def test_lower_case_accepted(self):
        assert validate_outcome("failed") is Outcome.FAILED

    def test_unknown_lists_allowed_values(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_outcome("maybe")
        assert "SUCCESS" in exc_info.value.message
        assert "'maybe'" in exc_info.value.message


class TestValidateSearchQuery:
    def test_none_is_empty(self):
        assert validate_search_query(None) == ""

    def test_strips(self):
        assert validate_search_query("  postgres ") == "postgres"

    def test_length_limit(self):
        assert validate_search_query("x" * MAX_QUERY_LENGTH) == "x" * MAX_QUERY_LENGTH
        with pytest.raises(ValidationError) as exc_info:
            validate_search_query("x" * (MAX_QUERY_LENGTH + 1))
        assert exc_info.value.field == "q"


class TestRequireQuery:
    def test_strips(self):
        assert require_query("  event sourcing ") == "event sourcing"

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_missing_query(self, value):
        with pytest.raises(ValidationError) as exc_info:
            require_query(value)
        assert exc_info.value.code == "MISSING_QUERY"
        assert exc_info.value.field == "q"


class TestClampLimit:
    def test_default_when_unset(self):
        assert clamp_limit(None, default=10, maximum=20) == 10

    def test_capped(self):
        assert clamp_limit(100, default=10, maximum=20) == 20
        assert clamp_limit(3, default=10, maximum=20) == 3

    def test_non_positive_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            clamp_limit(0, default=10, maximum=20)
        assert exc_info.value.field == "limit"
