"""
Tests for ReviewClient — the never-throwing reviewer boundary

Tests verify:
- Raw reviewer items map to Suggestions with defaults
- Every failure mode becomes ReviewResult(ok=False), never an exception
- "No structured result" is an ok, empty review
"""

import pytest

from retro.core.types import SuggestionKind
from retro.errors import MissingCredentialError, ReviewError
from retro.services.providers import MockReviewProvider
from retro.services.reviewer import DEFAULT_TITLE, ReviewClient, map_suggestions


class TestMapSuggestions:
    """Test map_suggestions()."""

    def test_full_item(self):
        """All fields carried over; scope binding left empty."""
        [s] = map_suggestions([{
            "kind": "efficiency",
            "title": "Avoid the second loop",
            "description": "Both passes can be merged.",
            "suggested_code": "for x in xs: ...",
        }])
        assert s.kind == SuggestionKind.EFFICIENCY
        assert s.title == "Avoid the second loop"
        assert s.description == "Both passes can be merged."
        assert s.suggested_code == "for x in xs: ..."
        assert s.scope_name == ""
        assert s.range is None
        assert s.id
        assert s.created_at

    def test_defaults_for_missing_fields(self):
        """Missing title/description/kind get safe defaults; code stays absent."""
        [s] = map_suggestions([{}])
        assert s.kind == SuggestionKind.REFACTOR
        assert s.title == DEFAULT_TITLE
        assert s.description == ""
        assert s.suggested_code is None

    def test_alternate_key_spellings(self):
        """`type` and `suggestedCode` are accepted."""
        [s] = map_suggestions([{"type": "idiom", "title": "t", "suggestedCode": ""}])
        assert s.kind == SuggestionKind.IDIOM
        assert s.suggested_code == ""

    def test_limit_and_non_objects(self):
        """Non-object items are dropped and the list is cut to the limit."""
        raw = ["junk", {"title": "1"}, None, {"title": "2"}, {"title": "3"}]
        assert [s.title for s in map_suggestions(raw, limit=2)] == ["1", "2"]

    def test_control_characters_stripped(self):
        """Terminal escape sequences never reach storage."""
        [s] = map_suggestions([{"title": "\x1b[31mred\x1b[0m", "description": "a\x07b\nc"}])
        assert "\x1b" not in s.title
        assert s.description == "ab\nc"

    def test_ids_unique_within_and_across_calls(self):
        """Suggestion ids never repeat."""
        first = map_suggestions([{"title": "a"}, {"title": "b"}])
        second = map_suggestions([{"title": "a"}])
        ids = [s.id for s in first + second]
        assert len(set(ids)) == 3


class TestReviewClient:
    """Test ReviewClient.review()."""

    def test_success(self):
        """Provider items become suggestions."""
        client = ReviewClient(MockReviewProvider())
        result = client.review("function f() {}", "", "typescript")
        assert result.ok
        assert result.error is None
        assert [s.kind for s in result.suggestions] == [SuggestionKind.STYLE]

    def test_request_carries_inputs(self):
        """Code, context, language and the bound reach the provider."""
        provider = MockReviewProvider()
        ReviewClient(provider, max_suggestions=2).review("code", "ctx", "python")
        [request] = provider.calls
        assert (request.code, request.context, request.language) == ("code", "ctx", "python")
        assert request.max_suggestions == 2
        assert "python" in request.prompt
        assert "1-2 suggestions" in request.prompt

    @pytest.mark.parametrize("error", [
        ConnectionError("network unreachable"),
        TimeoutError("timed out"),
        ReviewError("malformed tool input"),
        MissingCredentialError("Anthropic", "ANTHROPIC_API_KEY"),
        RuntimeError("unexpected"),
    ])
    def test_failures_never_raise(self, error):
        """Every provider failure becomes ok=False with the message."""
        result = ReviewClient(MockReviewProvider(error=error)).review("code", "", "typescript")
        assert not result.ok
        assert result.suggestions == []
        assert str(error) in result.error

    def test_no_structured_result_is_empty_success(self):
        """A reviewer that answers without a tool call yields zero suggestions."""

        class Silent(MockReviewProvider):
            def review(self, request):
                return None

        result = ReviewClient(Silent()).review("code", "", "typescript")
        assert result.ok
        assert result.suggestions == []

    def test_bound_clamped(self):
        """max_suggestions is kept within 1..4."""
        assert ReviewClient(MockReviewProvider(), max_suggestions=10).max_suggestions == 4
        assert ReviewClient(MockReviewProvider(), max_suggestions=0).max_suggestions == 1

    def test_extra_items_cut_to_bound(self):
        """A reviewer ignoring the bound is truncated."""
        provider = MockReviewProvider(response=[{"title": str(i)} for i in range(6)])
        result = ReviewClient(provider, max_suggestions=3).review("code", "", "typescript")
        assert len(result.suggestions) == 3
