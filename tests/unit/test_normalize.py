"""
Unit tests for input normalization.

Tests cover:
- Segment order and separators
- Params serialization
- Truncation
"""

import logging

import pytest

from vigil.errors import NormalizationError
from vigil.normalize import bound_text, normalize_request, serialize_params
from vigil.schema import ActionRequest


class TestSerializeParams:
    """Tests for serialize_params."""

    def test_text_verbatim(self) -> None:
        assert serialize_params("rm -rf /") == "rm -rf /"

    def test_compact_json(self) -> None:
        """Mappings become compact JSON."""
        assert serialize_params({"command": "ls", "timeout": 5}) == '{"command":"ls","timeout":5}'

    def test_non_ascii_preserved(self) -> None:
        assert serialize_params({"text": "café"}) == '{"text":"café"}'

    def test_unrepresentable_leaf_uses_str(self) -> None:
        """Leaf values JSON cannot encode are rendered with str()."""

        class Marker:
            def __str__(self) -> str:
                return "marker!"

        assert serialize_params({"value": Marker()}) == '{"value":"marker!"}'

    def test_cycle_raises(self) -> None:
        params: dict = {}
        params["self"] = params
        with pytest.raises(NormalizationError) as exc_info:
            serialize_params(params)
        assert exc_info.value.field_name == "params"
        assert exc_info.value.code == 1001

    def test_bad_key_raises(self) -> None:
        with pytest.raises(NormalizationError):
            serialize_params({(1, 2): "x"})

    def test_leaf_str_failure_raises(self) -> None:
        """Any error from a leaf's str() becomes a NormalizationError."""

        class Unprintable:
            def __str__(self) -> str:
                raise RuntimeError("no text form")

        with pytest.raises(NormalizationError) as exc_info:
            serialize_params({"x": [Unprintable()]})
        assert "no text form" in exc_info.value.underlying_error


class TestNormalizeRequest:
    """Tests for normalize_request."""

    def test_empty_request(self) -> None:
        assert normalize_request(ActionRequest()) == ""

    def test_segment_order(self) -> None:
        """params, context, tool, agent, role; single spaces."""
        request = ActionRequest(
            agent="bot",
            tool="exec",
            params={"command": "ls"},
            role="helper",
            context=["first", "second"],
        )
        assert normalize_request(request) == '{"command":"ls"} first second exec bot helper'

    def test_absent_fields_skipped(self) -> None:
        assert normalize_request(ActionRequest(tool="exec")) == "exec"

    def test_empty_field_contributes_segment(self) -> None:
        """Present-but-empty fields still add a separator."""
        assert normalize_request(ActionRequest(tool="exec", params="")) == " exec"

    def test_context_string(self) -> None:
        assert normalize_request(ActionRequest(context="hello there")) == "hello there"

    def test_propagates_serialization_error(self) -> None:
        params: dict = {}
        params["loop"] = params
        with pytest.raises(NormalizationError):
            normalize_request(ActionRequest(params=params))


class TestBoundText:
    """Tests for bound_text."""

    def test_short_text_unchanged(self) -> None:
        assert bound_text("abc", 10) == "abc"

    def test_exact_length_unchanged(self) -> None:
        assert bound_text("abcde", 5) == "abcde"

    def test_truncates(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="vigil"):
            assert bound_text("abcdefgh", 3) == "abc"
        assert any("truncated" in r.getMessage() for r in caplog.records)
