"""
Error filter — Keeps broken code away from the reviewer

A scope whose range touches any error-severity diagnostic is dropped,
even on a one-line overlap. Reviewing half-typed code wastes calls and
produces suggestions about syntax rather than substance.
"""

from typing import Iterable, List

from .types import CodeScope, Diagnostic, Severity


def filter_error_scopes(scopes: Iterable[CodeScope],
                        diagnostics: Iterable[Diagnostic]) -> List[CodeScope]:
    """
    Return the scopes that do not intersect any error diagnostic.

    Non-error severities are ignored. Diagnostics must describe the same
    document version the scopes were extracted from.
    """
    errors = [d for d in diagnostics if d.severity == Severity.ERROR]
    if not errors:
        return list(scopes)

    return [
        scope for scope in scopes
        if not any(scope.range.intersects(error.range) for error in errors)
    ]
