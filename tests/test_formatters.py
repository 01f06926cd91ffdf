"""
Tests for Formatters and Symbols — terminal rendering of suggestions
"""

from retro.core.types import SourceRange, SuggestionKind
from retro.orchestrator.analyzer import AnalysisReport
from retro.presentation.formatters import format_document, format_report, format_suggestions
from retro.presentation.symbols import (
    ASCII, UNICODE, get_symbols, sanitize_control_chars, supports_unicode, symbol_for_kind, truncate,
)


def stamped(factory, title="Rename x", kind=SuggestionKind.STYLE, code=None, scope="add", lines=(0, 2)):
    return factory.suggestion(title=title, kind=kind, suggested_code=code).stamped(
        scope, SourceRange.of(lines[0], 0, lines[1], 1)
    )


class TestFormatSuggestions:
    """Test hover-style rendering."""

    def test_empty(self):
        """No suggestions renders nothing."""
        assert format_suggestions([], ASCII) == ""

    def test_header_title_kind_description(self, retro_factory):
        """Each suggestion shows marker, title, kind and description."""
        text = format_suggestions([stamped(retro_factory)], ASCII)
        assert text.startswith("Retro: 1 suggestion(s)")
        assert "[S] Rename x" in text
        assert "  style" in text
        assert "Names should state intent." in text
        assert "Suggested:" not in text

    def test_code_block_with_language(self, retro_factory):
        """suggested_code renders as a fenced block tagged with the language."""
        text = format_suggestions([stamped(retro_factory, code="const y = 1;")], ASCII, language="typescript")
        assert "Suggested:\n```typescript\nconst y = 1;\n```" in text

    def test_empty_code_still_renders_block(self, retro_factory):
        """An empty string is offered code; None is not."""
        text = format_suggestions([stamped(retro_factory, code="")], ASCII)
        assert "Suggested:\n```\n```" in text


class TestFormatDocument:
    """Test the per-document overview."""

    def test_grouped_by_scope_with_one_based_lines(self, retro_factory):
        """Scopes are headed by their 1-based line span."""
        suggestions = [
            stamped(retro_factory, title="first", lines=(0, 2)),
            stamped(retro_factory, title="second", kind=SuggestionKind.EFFICIENCY, lines=(0, 2)),
            stamped(retro_factory, title="third", scope="double", lines=(6, 6)),
        ]
        lines = format_document(suggestions, ASCII).split("\n")
        assert lines[0] == "add (lines 1-3)"
        assert lines[1] == "  +- [S] first"
        assert lines[2] == "  +- [E] second"
        assert lines[3] == "double (line 7)"

    def test_nothing_to_show(self):
        """An empty document says so."""
        assert format_document([], ASCII) == "No suggestions."

    def test_long_titles_truncated_unless_full(self, retro_factory):
        """--full disables truncation."""
        long_title = "x" * 200
        suggestions = [stamped(retro_factory, title=long_title)]
        assert long_title not in format_document(suggestions, ASCII)
        assert long_title in format_document(suggestions, ASCII, full=True)


class TestFormatReport:
    """Test pass summaries."""

    def test_clean_pass(self):
        """Counts are listed; zero extras are omitted."""
        report = AnalysisReport(document_id="file:///a.ts", scopes=3, reviewed=1, unchanged=2)
        assert format_report(report, ASCII, label="a.ts") == \
            "[OK] a.ts: 3 scope(s), 1 reviewed, 2 unchanged"

    def test_pass_with_problems(self):
        """Exclusions, failures and pruning are mentioned, with a warning marker."""
        report = AnalysisReport(document_id="file:///a.ts", scopes=2, reviewed=0, unchanged=1,
                                excluded=1, failed=1, pruned=2)
        text = format_report(report, ASCII)
        assert text.startswith("[!] file:///a.ts:")
        assert "1 skipped (syntax errors)" in text
        assert "1 failed" in text
        assert "2 pruned" in text


class TestSymbols:
    """Test symbol sets and output sanitizing."""

    def test_symbol_for_kind(self):
        """Kinds map to markers; unknown kinds use the refactor marker."""
        assert symbol_for_kind(ASCII, "idiom") == "[I]"
        assert symbol_for_kind(ASCII, "other") == "[R]"

    def test_preference(self):
        """Explicit preference wins over detection."""
        assert get_symbols("unicode") is UNICODE
        assert get_symbols("ascii") is ASCII

    def test_environment_overrides(self, monkeypatch):
        """RETRO_ASCII_ONLY forces ASCII; RETRO_UNICODE forces Unicode."""
        monkeypatch.setenv("RETRO_ASCII_ONLY", "1")
        assert not supports_unicode()
        monkeypatch.delenv("RETRO_ASCII_ONLY")
        monkeypatch.setenv("RETRO_UNICODE", "true")
        assert supports_unicode()

    def test_sanitize_keeps_layout_characters(self):
        """Escapes and bells go; tabs and newlines stay."""
        assert sanitize_control_chars("a\x1b[2Jb\tc\nd\x07") == "a[2Jb\tc\nd"
        assert sanitize_control_chars(None) is None

    def test_truncate(self):
        """Long text is cut with an ellipsis."""
        assert truncate("short", 10) == "short"
        assert len(truncate("x" * 50, 10)) <= 10
        assert truncate("x" * 50, 10, full=True) == "x" * 50
