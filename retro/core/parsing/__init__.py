"""
Parsing module — Symbol trees and syntax errors via tree-sitter.

Stands in for the editor host when none is available:
- LanguageConfig: Per-language rules for building symbol trees
- SymbolQuery: AST node to symbol kind mapping
- ParserRegistry: Language id / extension routing
- DocumentParser: One cached parse per document version
- TreeSitterSymbolProvider / TreeSitterDiagnosticsProvider: the providers

Design principle: Add new languages via config, not code changes.

Usage:
    from retro.core.parsing import (
        DocumentParser, TreeSitterSymbolProvider, default_registry,
    )

    parser = DocumentParser(default_registry())
    symbols = TreeSitterSymbolProvider(parser).symbols(document)
"""

from .config import LanguageConfig, SymbolQuery
from .registry import ParserRegistry, default_registry
from .extractor import (
    DocumentParser, ParsedDocument, TreeSitterSymbolProvider, TreeSitterDiagnosticsProvider,
)

__all__ = [
    'LanguageConfig',
    'SymbolQuery',
    'ParserRegistry',
    'default_registry',
    'DocumentParser',
    'ParsedDocument',
    'TreeSitterSymbolProvider',
    'TreeSitterDiagnosticsProvider',
]
