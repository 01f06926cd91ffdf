"""
Context builder — Surrounding source for a scope

Gives the reviewer a small window of the lines immediately preceding a
scope (imports, decorators, the declaration above) without sending the
whole file. Pure function; cheap enough to recompute every call.
"""

from .types import CodeScope, Document, Position, SourceRange

DEFAULT_CONTEXT_LINES = 10


def build_context(document: Document, scope: CodeScope,
                  max_lines: int = DEFAULT_CONTEXT_LINES) -> str:
    """
    Verbatim text of up to max_lines lines before the scope's first line.

    The window is clamped to the document start; a scope on line 0 (or
    max_lines == 0) yields an empty string.
    """
    end_line = scope.range.start.line
    start_line = max(0, end_line - max(max_lines, 0))
    window = SourceRange(Position(start_line, 0), Position(end_line, 0))
    return document.get_text(window)
