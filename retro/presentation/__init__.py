"""
Presentation — Display layer for the retro CLI

- Symbols: Visual vocabulary (unicode/ascii), safe output
- Formatters: Suggestion and pass-summary rendering
"""

from .symbols import (
    SymbolSet, get_symbols, symbol_for_kind,
    safe_print, sanitize_control_chars, truncate,
)
from .formatters import format_suggestions, format_document, format_report

__all__ = [
    "SymbolSet", "get_symbols", "symbol_for_kind",
    "safe_print", "sanitize_control_chars", "truncate",
    "format_suggestions", "format_document", "format_report",
]
