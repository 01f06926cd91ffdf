"""
ScopeExtractor — Turns a provider symbol tree into analyzable code scopes

Policy (what a human would call "a function"):
- Functions, methods and classes become scopes directly
- Classes recurse into their children to pick up methods
- Method and function bodies are never recursed into (no nested callbacks)
- Variables/fields become scopes only when their value is a function
  binding (arrow function in JS/TS, lambda in Python), top level only
- Namespaces/modules recurse transparently and are not scopes themselves

Binding detection is a lenient declaration-shape match, not a parse.
Known gaps: arrow functions inside object literals assigned to a const
are missed; `const x = (a + b)` is accepted by the full-declaration shape.

Usage:
    extractor = ScopeExtractor()
    scopes = extractor.extract(document, symbols)
"""

import logging
import re
from typing import Callable, Dict, List, Optional

from .types import CodeScope, Document, DocumentSymbol, ScopeKind, SymbolKind

logger = logging.getLogger(__name__)

# (content, symbol_name) -> is this binding a function value?
BindingDetector = Callable[[str, str], bool]

_TYPE_ANNOTATION = r"(:\s*[^=]+)?"
_PARAMS = r"(\([^)]*\)|[A-Za-z_$][\w$]*)"

# Value side of an arrow binding, wherever the declaration starts
_SIMPLE_ARROW = re.compile(
    r"=\s*(async\s*)?" + _PARAMS + r"\s*" + _TYPE_ANNOTATION + r"\s*=>"
)

_RECURSE_TRANSPARENTLY = {
    SymbolKind.NAMESPACE,
    SymbolKind.MODULE,
    SymbolKind.PACKAGE,
    SymbolKind.FILE,
}


def is_arrow_function_declaration(content: str, symbol_name: str) -> bool:
    """
    Check whether a variable symbol's text is an arrow-function binding.

    Providers hand us either the full declaration (`export const f = ...`)
    or a range trimmed to start at the identifier (`f = ...`); both match.
    """
    name = re.escape(symbol_name)

    full_declaration = re.compile(
        r"^(export\s+)?(const|let|var)\s+" + name + r"\s*" + _TYPE_ANNOTATION
        + r"\s*=\s*(async\s*)?\(",
        re.MULTILINE,
    )
    trimmed = re.compile(
        r"^" + name + r"\s*" + _TYPE_ANNOTATION + r"\s*=\s*(async\s*)?"
        + _PARAMS + r"\s*" + _TYPE_ANNOTATION + r"\s*=>",
        re.MULTILINE,
    )

    return bool(
        full_declaration.search(content)
        or trimmed.search(content)
        or _SIMPLE_ARROW.search(content)
    )


def is_lambda_binding(content: str, symbol_name: str) -> bool:
    """Check whether a Python assignment binds a lambda: `name = lambda ...`."""
    pattern = re.compile(
        r"^" + re.escape(symbol_name) + r"\s*" + _TYPE_ANNOTATION + r"\s*=\s*lambda\b",
        re.MULTILINE,
    )
    return bool(pattern.search(content))


class ScopeExtractor:
    """
    Flattens a symbol tree into an ordered list of CodeScope.

    Order follows the tree (pre-order), so a class precedes its methods.
    Names are unique per pass: when two scopes share a name (two classes
    that both define `increment`), the last one wins and takes the slot
    of the first. The cache keys by name, so keeping both would make them
    overwrite each other's hash on every pass.
    """

    def __init__(self, binding_detector: Optional[BindingDetector] = None):
        self.binding_detector = binding_detector or is_arrow_function_declaration

    def extract(
        self,
        document: Document,
        symbols: Optional[List[DocumentSymbol]],
        binding_detector: Optional[BindingDetector] = None,
    ) -> List[CodeScope]:
        """
        Extract scopes from a document's symbol tree.

        Args:
            document: Document the symbols were computed for
            symbols: Top-level symbols (None or empty -> no scopes)
            binding_detector: Override for this call (per-language)

        Returns:
            Ordered list of scopes, one per name
        """
        if not symbols:
            return []

        detector = binding_detector or self.binding_detector
        scopes: List[CodeScope] = []
        self._collect(symbols, document, scopes, detector, is_top_level=True)

        by_name: Dict[str, CodeScope] = {}
        for scope in scopes:
            if scope.name in by_name:
                logger.debug("Duplicate scope name %s: keeping the later one", scope.name)
            by_name[scope.name] = scope
        return list(by_name.values())

    def _collect(
        self,
        symbols: List[DocumentSymbol],
        document: Document,
        scopes: List[CodeScope],
        detector: BindingDetector,
        is_top_level: bool,
    ) -> None:
        for symbol in symbols:
            kind = symbol.kind

            if kind == SymbolKind.CLASS:
                scopes.append(self._scope(ScopeKind.CLASS, symbol, document))
                if symbol.children:
                    self._collect(symbol.children, document, scopes, detector, is_top_level=False)

            elif kind == SymbolKind.METHOD:
                scopes.append(self._scope(ScopeKind.METHOD, symbol, document))

            elif kind == SymbolKind.FUNCTION:
                scopes.append(self._scope(ScopeKind.FUNCTION, symbol, document))

            elif kind in (SymbolKind.VARIABLE, SymbolKind.FIELD):
                if not is_top_level:
                    continue
                content = document.get_text(symbol.range)
                if detector(content, symbol.name):
                    scopes.append(self._scope(ScopeKind.FUNCTION, symbol, document, content))
                else:
                    logger.debug("Skipping %s: not a function binding", symbol.name)

            elif is_top_level and kind in _RECURSE_TRANSPARENTLY and symbol.children:
                self._collect(symbol.children, document, scopes, detector, is_top_level=True)

    @staticmethod
    def _scope(
        kind: ScopeKind,
        symbol: DocumentSymbol,
        document: Document,
        content: Optional[str] = None,
    ) -> CodeScope:
        if content is None:
            content = document.get_text(symbol.range)
        return CodeScope(kind=kind, name=symbol.name, range=symbol.range, content=content)
