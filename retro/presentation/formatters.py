"""
Formatters — Data-to-string transformations for suggestion output

- format_suggestions(): hover-style block for the suggestions on one line
- format_document(): one-line-per-suggestion overview of a document
- format_report(): summary of one analysis pass

Dependency direction: commands -> presentation -> core
"""

from collections import OrderedDict
from typing import Iterable, List, Optional, TYPE_CHECKING

from ..core.types import Suggestion
from .symbols import SymbolSet, symbol_for_kind, truncate

if TYPE_CHECKING:
    from ..orchestrator.analyzer import AnalysisReport


def format_suggestions(
    suggestions: List[Suggestion],
    symbols: SymbolSet,
    language: str = "",
) -> str:
    """
    Render suggestions the way a hover card shows them.

    The "Suggested" code block appears only when suggested_code is not
    None; an empty string still renders an (empty) block.
    """
    if not suggestions:
        return ""

    lines = [f"Retro: {len(suggestions)} suggestion(s)", ""]
    for suggestion in suggestions:
        lines.append(f"{symbol_for_kind(symbols, suggestion.kind.value)} {suggestion.title}")
        lines.append(f"  {suggestion.kind.value}")
        lines.append("")
        if suggestion.description:
            lines.append(suggestion.description)
            lines.append("")
        if suggestion.suggested_code is not None:
            lines.append("Suggested:")
            lines.append(f"```{language}")
            if suggestion.suggested_code:
                lines.append(suggestion.suggested_code)
            lines.append("```")
            lines.append("")
        lines.append(symbols.rule * 3)
    return "\n".join(lines)


def format_document(suggestions: Iterable[Suggestion], symbols: SymbolSet, full: bool = False) -> str:
    """Overview grouped by scope, with 1-based line spans."""
    by_scope: "OrderedDict[str, List[Suggestion]]" = OrderedDict()
    for suggestion in suggestions:
        by_scope.setdefault(suggestion.scope_name, []).append(suggestion)

    if not by_scope:
        return "No suggestions."

    lines = []
    for scope_name, items in by_scope.items():
        span = _line_span(items[0])
        lines.append(f"{scope_name} {span}".rstrip())
        for index, suggestion in enumerate(items):
            branch = symbols.tree_end if index == len(items) - 1 else symbols.tree_branch
            marker = symbol_for_kind(symbols, suggestion.kind.value)
            lines.append(f"  {branch} {marker} {truncate(suggestion.title, 80, full=full)}")
    return "\n".join(lines)


def format_report(report: 'AnalysisReport', symbols: SymbolSet, label: Optional[str] = None) -> str:
    """One-line summary of an analysis pass."""
    status = symbols.check_pass if report.failed == 0 else symbols.check_warn
    parts = [
        f"{report.scopes} scope(s)",
        f"{report.reviewed} reviewed",
        f"{report.unchanged} unchanged",
    ]
    if report.excluded:
        parts.append(f"{report.excluded} skipped (syntax errors)")
    if report.failed:
        parts.append(f"{report.failed} failed")
    if report.pruned:
        parts.append(f"{report.pruned} pruned")
    return f"{status} {label or report.document_id}: " + ", ".join(parts)


def _line_span(suggestion: Suggestion) -> str:
    if suggestion.range is None:
        return ""
    start, end = suggestion.range.start.line + 1, suggestion.range.end.line + 1
    return f"(line {start})" if start == end else f"(lines {start}-{end})"
