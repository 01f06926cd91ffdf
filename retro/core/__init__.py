"""
Core — Pipeline stages and the suggestion store

- Types: documents, ranges, scopes, suggestions
- Scopes: symbol tree -> analyzable scopes
- Context: lines above a scope, sent alongside it
- Filtering: drop scopes overlapping syntax errors
- Cache: content-hashed scope -> suggestions table
- Persistence: durable slots for the cache
- Parsing: tree-sitter symbol and diagnostics providers
"""

from .types import (
    ScopeKind, SuggestionKind, SymbolKind, Severity,
    Position, SourceRange, CodeScope, Suggestion, StoredScope,
    DocumentSymbol, Diagnostic, Document,
)
from .scopes import ScopeExtractor, is_arrow_function_declaration, is_lambda_binding
from .context import build_context, DEFAULT_CONTEXT_LINES
from .filtering import filter_error_scopes
from .cache import SuggestionCache, CacheCheck, content_hash, normalize_content
from .persistence import CacheSlot, MemorySlot, JsonFileSlot

__all__ = [
    'ScopeKind', 'SuggestionKind', 'SymbolKind', 'Severity',
    'Position', 'SourceRange', 'CodeScope', 'Suggestion', 'StoredScope',
    'DocumentSymbol', 'Diagnostic', 'Document',
    'ScopeExtractor', 'is_arrow_function_declaration', 'is_lambda_binding',
    'build_context', 'DEFAULT_CONTEXT_LINES',
    'filter_error_scopes',
    'SuggestionCache', 'CacheCheck', 'content_hash', 'normalize_content',
    'CacheSlot', 'MemorySlot', 'JsonFileSlot',
]
