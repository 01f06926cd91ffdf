"""
Tests for the context builder — lines preceding a scope
"""

from retro.core.context import DEFAULT_CONTEXT_LINES, build_context
from retro.core.types import CodeScope, Document, ScopeKind, SourceRange

TEXT = "".join(f"line {i}\n" for i in range(30))


def scope_at(line: int) -> CodeScope:
    return CodeScope(ScopeKind.FUNCTION, "f", SourceRange.of(line, 0, line + 2, 0), "body")


class TestBuildContext:
    """Test build_context()."""

    def test_window_is_lines_before_scope(self):
        """Up to max_lines lines immediately preceding the scope, verbatim."""
        doc = Document(uri="file:///a.ts", text=TEXT)
        assert build_context(doc, scope_at(5), max_lines=2) == "line 3\nline 4\n"

    def test_default_window(self):
        """The default window is DEFAULT_CONTEXT_LINES lines."""
        doc = Document(uri="file:///a.ts", text=TEXT)
        context = build_context(doc, scope_at(20))
        assert context.count("\n") == DEFAULT_CONTEXT_LINES
        assert context.startswith(f"line {20 - DEFAULT_CONTEXT_LINES}\n")
        assert context.endswith("line 19\n")

    def test_window_clamped_to_document_start(self):
        """Scopes near the top get whatever lines exist."""
        doc = Document(uri="file:///a.ts", text=TEXT)
        assert build_context(doc, scope_at(2), max_lines=10) == "line 0\nline 1\n"

    def test_scope_on_first_line_has_no_context(self):
        """Nothing precedes line 0."""
        doc = Document(uri="file:///a.ts", text=TEXT)
        assert build_context(doc, scope_at(0)) == ""

    def test_zero_lines(self):
        """max_lines=0 disables context."""
        doc = Document(uri="file:///a.ts", text=TEXT)
        assert build_context(doc, scope_at(12), max_lines=0) == ""

    def test_does_not_include_scope_text(self):
        """The window ends where the scope's first line starts."""
        doc = Document(uri="file:///a.ts", text="import x;\nfunction f() {}\n")
        scope = CodeScope(ScopeKind.FUNCTION, "f", SourceRange.of(1, 0, 1, 15), "function f() {}")
        assert build_context(doc, scope) == "import x;\n"
