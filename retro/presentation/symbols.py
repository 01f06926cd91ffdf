"""
Symbols — Visual vocabulary for suggestions in the terminal

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via the display.symbols setting.

Also provides safe output utilities:
- sanitize_control_chars(): strips terminal-hostile characters from LLM output
- safe_print(): encoding-safe printing for untrusted content
"""

import os
import re
import sys
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Safe Output Utilities
# =============================================================================

# Fallbacks used when the output stream cannot encode a character
UNICODE_TO_ASCII = {
    '→': '->',
    '…': '...',
    '–': '-',
    '—': '--',
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
    '•': '*',
    '≤': '<=',
    '≥': '>=',
    '≠': '!=',
}

# C0 controls except \t \n \r, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_control_chars(text: Optional[str]) -> Optional[str]:
    """
    Remove control characters from reviewer output before it is stored.

    Escape sequences in a suggestion could otherwise rewrite the user's
    terminal when the suggestion is printed. Tabs, newlines and carriage
    returns survive.
    """
    if not text:
        return text
    return _CONTROL_CHARS.sub("", text)


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Known Unicode characters are swapped for ASCII equivalents first;
    anything still unencodable becomes '?'.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


SUMMARY_LENGTH = 120


def truncate(text: str, length: int = SUMMARY_LENGTH, full: bool = False) -> str:
    """Truncate text with '...' unless full is set."""
    if not text:
        return ""
    if full or len(text) <= length:
        return text
    if length <= 3:
        return text[:length]
    return text[:length - 3] + "..."


# =============================================================================
# Symbol Sets
# =============================================================================

@dataclass(frozen=True)
class SymbolSet:
    """Markers for suggestion kinds, statuses and layout."""
    # Suggestion kinds
    refactor: str
    efficiency: str
    idiom: str
    style: str

    # Gutter marker for lines with suggestions
    gutter: str

    # Status markers
    check_pass: str
    check_warn: str
    check_fail: str
    arrow: str

    # Pass progress
    reviewing: str
    reviewed: str

    # Tree/structure markers
    tree_branch: str
    tree_end: str
    bullet: str

    # Rules and truncation
    rule: str
    ellipsis: str


UNICODE = SymbolSet(
    refactor='♻',
    efficiency='⚡',
    idiom='✦',
    style='✎',
    gutter='💡',
    check_pass='✓',
    check_warn='⚠',
    check_fail='✗',
    arrow='→',
    reviewing='◌',
    reviewed='●',
    tree_branch='├─',
    tree_end='└─',
    bullet='•',
    rule='─',
    ellipsis='…',
)

ASCII = SymbolSet(
    refactor='[R]',
    efficiency='[E]',
    idiom='[I]',
    style='[S]',
    gutter='(*)',
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[ERR]',
    arrow='->',
    reviewing='...',
    reviewed='[OK]',
    tree_branch='+-',
    tree_end='+-',
    bullet='*',
    rule='-',
    ellipsis='...',
)


def symbol_for_kind(symbols: SymbolSet, kind: str) -> str:
    """Marker for a suggestion kind value ("refactor", "style", ...)."""
    return getattr(symbols, kind, symbols.refactor)


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    if os.environ.get('RETRO_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('RETRO_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None) or ''
    normalized = stdout_encoding.lower().replace('-', '').replace('_', '')
    if normalized.startswith('cp') or normalized in ('ascii', 'latin1', 'iso88591'):
        return False
    if normalized.startswith('utf'):
        return True

    for var in ('LC_ALL', 'LANG'):
        value = os.environ.get(var, '').lower()
        if 'utf-8' in value or 'utf8' in value:
            return True

    if os.environ.get('TERM_PROGRAM', '') in ('vscode', 'iTerm.app', 'Apple_Terminal', 'Hyper'):
        return True
    if os.environ.get('WT_SESSION'):
        return True

    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
