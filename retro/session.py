"""
Session — The single wiring point for one editing session

Builds exactly one SuggestionCache and hands the same instance to the
analyzer (writer) and to every presentation consumer (readers). Nothing
in retro reaches the cache through a global; construct one Session per
workspace and pass it around.

Owns:
- config (YAML layers) and OrchestratorConfig (environment)
- SuggestionCache backed by .retro/suggestions.json
- tree-sitter symbol/diagnostics providers sharing one DocumentParser
- ReviewClient around the configured ReviewProvider
- IOPool and the DocumentAnalyzer (with its ChangeScheduler)
- refresh listeners, fired once per pass and once per clear

Usage:
    with Session(project_dir) as session:
        session.on_refresh(redraw)
        document = session.open_document("src/app.ts")
        session.analyze(document)
        session.suggestions_for_line(document.uri, 3)
"""

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional

from .config import Config, ConfigManager
from .core.cache import SuggestionCache
from .core.parsing import (
    DocumentParser, TreeSitterDiagnosticsProvider, TreeSitterSymbolProvider, default_registry,
)
from .core.persistence import CacheSlot, JsonFileSlot
from .core.types import Document, Suggestion
from .orchestrator.analyzer import AnalysisReport, DiagnosticsProvider, DocumentAnalyzer, SymbolProvider
from .orchestrator.config import OrchestratorConfig
from .orchestrator.pools import IOPool
from .services.providers import ReviewProvider, get_provider
from .services.reviewer import ReviewClient

logger = logging.getLogger(__name__)

RETRO_DIR = ".retro"
CACHE_FILE = "suggestions.json"

RefreshListener = Callable[[], None]


class Session:
    """Composition root for the analysis pipeline."""

    def __init__(
        self,
        project_dir: Path,
        config: Optional[Config] = None,
        orchestrator_config: Optional[OrchestratorConfig] = None,
        provider: Optional[ReviewProvider] = None,
        symbol_provider: Optional[SymbolProvider] = None,
        diagnostics_provider: Optional[DiagnosticsProvider] = None,
        slot: Optional[CacheSlot] = None,
    ):
        """
        Args:
            project_dir: Workspace root; .retro/ lives here
            config: Overrides the YAML/env configuration
            orchestrator_config: Overrides RETRO_* environment settings
            provider: Overrides the configured review provider
            symbol_provider / diagnostics_provider: Replace tree-sitter
                (e.g. with an editor bridge)
            slot: Overrides the durable cache file
        """
        self.project_dir = Path(project_dir)
        self.retro_dir = self.project_dir / RETRO_DIR
        self.config_manager = ConfigManager(self.project_dir)
        self.config = config or self.config_manager.load()

        self.orchestrator_config = orchestrator_config or OrchestratorConfig.from_env()
        self.orchestrator_config.validate()

        self.cache = SuggestionCache(slot or JsonFileSlot(self.retro_dir / CACHE_FILE))

        self.registry = default_registry()
        self.parser = DocumentParser(self.registry)
        self.symbol_provider = symbol_provider or TreeSitterSymbolProvider(self.parser)
        self.diagnostics_provider = diagnostics_provider or TreeSitterDiagnosticsProvider(self.parser)

        self.provider = provider or get_provider(
            self.config, timeout=self.orchestrator_config.review_timeout
        )
        self.review_client = ReviewClient(
            self.provider, max_suggestions=self.config.analysis.max_suggestions
        )
        self.pool = IOPool(self.orchestrator_config)

        self._listeners: List[RefreshListener] = []
        self._listeners_lock = threading.Lock()

        self.analyzer = DocumentAnalyzer(
            cache=self.cache,
            symbol_provider=self.symbol_provider,
            review_client=self.review_client,
            pool=self.pool,
            diagnostics_provider=self.diagnostics_provider,
            registry=self.registry,
            context_lines=self.config.analysis.context_lines,
            debounce_seconds=self.config.analysis.debounce_seconds,
            on_refresh=self._fire_refresh,
            enabled=self.config.analysis.enabled,
        )
        self._closed = False

    # -------------------------------------------------------------------------
    # Refresh signal
    # -------------------------------------------------------------------------

    def on_refresh(self, listener: RefreshListener) -> Callable[[], None]:
        """
        Register a no-argument refresh listener.

        Returns:
            A function that unregisters the listener
        """
        with self._listeners_lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def _fire_refresh(self) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.warning("Refresh listener %r failed: %s", listener, e)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def open_document(self, path: Path, version: int = 0) -> Document:
        """Read a file into a Document keyed by its file URI."""
        path = Path(path)
        if not path.is_absolute():
            path = self.project_dir / path
        return Document.from_path(path, language_id=self.registry.language_id_for(path), version=version)

    def document_uri(self, path: Path) -> str:
        path = Path(path)
        if not path.is_absolute():
            path = self.project_dir / path
        return path.resolve().as_uri()

    def is_supported(self, path: Path) -> bool:
        return self.registry.is_supported(Path(path))

    def language_for(self, uri_or_path: str) -> str:
        """Reviewer language tag for a path or URI ("" if unknown)."""
        config = self.registry.get_config_for_document(Document(uri=str(uri_or_path), text=""))
        return config.reviewer_language if config else ""

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def analyze(self, document: Document) -> AnalysisReport:
        """Run one pass now."""
        return self.analyzer.analyze_document(document)

    def document_changed(self, document: Document) -> bool:
        """Feed an edit into the debounced scheduler."""
        return self.analyzer.handle_document_change(document)

    def suggestions_for_line(self, uri: str, line: int) -> List[Suggestion]:
        return self.cache.get_for_line(uri, line)

    def suggestions(self, uri: str) -> List[Suggestion]:
        return self.cache.get(uri)

    def clear(self, uri: Optional[str] = None) -> bool:
        """Clear one document (or everything) and refresh."""
        return self.analyzer.clear_suggestions(uri)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def shutdown(self) -> None:
        """Stop scheduling, let a running pass finish, then close the pool."""
        if self._closed:
            return
        self._closed = True
        self.analyzer.shutdown()

        # A running pass may not have submitted its reviews yet
        timeout = self.orchestrator_config.shutdown_timeout
        if not self.analyzer.scheduler.wait_idle(timeout=timeout):
            logger.warning("Analysis pass still running after %.1fs; closing the pool anyway", timeout)
        self.pool.shutdown(wait=True)

    def __enter__(self) -> 'Session':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
