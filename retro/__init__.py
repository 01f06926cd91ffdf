"""
retro — Incremental AI code review

Reviews the functions, methods and classes you just finished writing,
and only those: unchanged code is recognized by a whitespace-insensitive
content hash and never re-sent, moved code keeps its suggestions, and
deleted or renamed code has its suggestions pruned.

Usage:
    retro analyze src/app.ts
    retro watch src/app.ts
    retro show src/app.ts --line 12
    retro clear
    retro config --set llm.model=claude-sonnet-4-5
"""

__version__ = "0.1.0"

# Core layer
from .core.types import (
    Document, DocumentSymbol, Diagnostic, CodeScope, Suggestion, StoredScope,
    Position, SourceRange, ScopeKind, SuggestionKind, SymbolKind, Severity,
)
from .core.scopes import ScopeExtractor
from .core.context import build_context
from .core.filtering import filter_error_scopes
from .core.cache import SuggestionCache, content_hash
from .core.persistence import CacheSlot, MemorySlot, JsonFileSlot

# Orchestration
from .orchestrator import ChangeScheduler, DocumentAnalyzer, AnalysisReport, OrchestratorConfig, IOPool

# Services
from .services.providers import get_provider, ReviewProvider, MockReviewProvider
from .services.reviewer import ReviewClient, ReviewResult

# Config / wiring
from .config import Config, ConfigManager, get_config
from .errors import RetroError, ProviderUnavailableError, ReviewError, MissingCredentialError
from .session import Session

__all__ = [
    # Core
    'Document', 'DocumentSymbol', 'Diagnostic', 'CodeScope', 'Suggestion', 'StoredScope',
    'Position', 'SourceRange', 'ScopeKind', 'SuggestionKind', 'SymbolKind', 'Severity',
    'ScopeExtractor', 'build_context', 'filter_error_scopes',
    'SuggestionCache', 'content_hash',
    'CacheSlot', 'MemorySlot', 'JsonFileSlot',
    # Orchestration
    'ChangeScheduler', 'DocumentAnalyzer', 'AnalysisReport', 'OrchestratorConfig', 'IOPool',
    # Services
    'get_provider', 'ReviewProvider', 'MockReviewProvider',
    'ReviewClient', 'ReviewResult',
    # Config / wiring
    'Config', 'ConfigManager', 'get_config',
    'RetroError', 'ProviderUnavailableError', 'ReviewError', 'MissingCredentialError',
    'Session',
]
