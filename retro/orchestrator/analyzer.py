"""
DocumentAnalyzer — One incremental analysis pass per document

Per pass:
1. Extract scopes from the symbol provider; drop error-overlapping ones
2. Prune cached scopes whose names are gone
3. Per surviving scope: unchanged -> update_range only; new or changed
   -> build context, call the reviewer (on the IOPool), set() on success
4. Fire the refresh signal once, after every scope has settled

A pass never raises. Provider failures mean "no scopes this pass" and
skip pruning; reviewer failures leave that scope's cache entry alone.

Edits enter through handle_document_change(), which goes through the
ChangeScheduler so a burst of edits becomes a single pass.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from ..core.cache import SuggestionCache
from ..core.context import DEFAULT_CONTEXT_LINES, build_context
from ..core.filtering import filter_error_scopes
from ..core.parsing.registry import ParserRegistry
from ..core.scopes import ScopeExtractor
from ..core.types import CodeScope, Diagnostic, Document, DocumentSymbol
from ..services.reviewer import ReviewClient, ReviewResult
from .pools import IOPool
from .scheduler import ChangeScheduler, DEFAULT_DEBOUNCE_SECONDS
from .task import io_task

logger = logging.getLogger(__name__)


class SymbolProvider(Protocol):
    """Anything that can produce a symbol tree for a document."""

    def symbols(self, document: Document) -> Optional[List[DocumentSymbol]]:
        ...


class DiagnosticsProvider(Protocol):
    """Anything that can report diagnostics for a document."""

    def diagnostics(self, document: Document) -> List[Diagnostic]:
        ...


@dataclass
class AnalysisReport:
    """What one pass did to one document."""
    document_id: str
    extracted: bool = True      # False if the symbol provider failed
    scopes: int = 0             # candidates after the error filter
    excluded: int = 0           # dropped for overlapping an error
    pruned: int = 0
    unchanged: int = 0
    reviewed: int = 0
    failed: int = 0
    suggestions: int = 0        # produced by this pass's reviews


class DocumentAnalyzer:
    """
    Ties extractor, filter, cache, reviewer and scheduler together.

    Usage:
        analyzer = DocumentAnalyzer(cache, symbols, client, pool,
                                    diagnostics_provider=diagnostics,
                                    on_refresh=redraw)
        analyzer.handle_document_change(document)   # debounced
        analyzer.analyze_document(document)         # immediate, blocking
    """

    def __init__(
        self,
        cache: SuggestionCache,
        symbol_provider: SymbolProvider,
        review_client: ReviewClient,
        pool: IOPool,
        diagnostics_provider: Optional[DiagnosticsProvider] = None,
        registry: Optional[ParserRegistry] = None,
        extractor: Optional[ScopeExtractor] = None,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_refresh: Optional[Callable[[], None]] = None,
        enabled: bool = True,
    ):
        self.cache = cache
        self.symbol_provider = symbol_provider
        self.diagnostics_provider = diagnostics_provider
        self.review_client = review_client
        self.pool = pool
        self.registry = registry
        self.extractor = extractor or ScopeExtractor()
        self.context_lines = context_lines
        self.on_refresh = on_refresh
        self.enabled = enabled
        self.scheduler = ChangeScheduler(self.analyze_document, delay=debounce_seconds)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def handle_document_change(self, document: Document) -> bool:
        """
        Schedule a debounced pass for an edited document.

        Returns:
            False if analysis is disabled or the scheduler is shut down
        """
        if not self.enabled:
            return False
        return self.scheduler.notify(document)

    def analyze_document(self, document: Document) -> AnalysisReport:
        """Run one full pass now, on the calling thread."""
        uri = document.uri
        report = AnalysisReport(document_id=uri)

        language_config = self.registry.get_config_for_document(document) if self.registry else None
        language = language_config.reviewer_language if language_config else (document.language_id or "text")
        detector = language_config.binding_detector if language_config else None

        symbols = self._symbols(document)
        if symbols is None:
            report.extracted = False
            scopes: List[CodeScope] = []
        else:
            scopes = self.extractor.extract(document, symbols, binding_detector=detector)

        candidates = filter_error_scopes(scopes, self._diagnostics(document)) if scopes else []
        report.scopes = len(candidates)
        report.excluded = len(scopes) - len(candidates)

        if report.extracted:
            removed = self.cache.prune_stale(uri, [scope.name for scope in candidates])
            report.pruned = len(removed)
            if removed:
                logger.debug("Pruned stale scopes in %s: %s", uri, ", ".join(removed))

        to_review: List[CodeScope] = []
        for scope in candidates:
            if self.cache.check(uri, scope).needs_review:
                to_review.append(scope)
            else:
                self.cache.update_range(uri, scope.name, scope.range)
                report.unchanged += 1
                logger.debug("Skipping %s: unchanged, range re-synced", scope.name)

        if to_review:
            tasks = [
                io_task(
                    fn=self._review_scope,
                    args=(document, scope, language),
                    name=f"review {scope.name}",
                    timeout=self.pool.config.review_timeout,
                    is_llm_call=True,
                )
                for scope in to_review
            ]
            for scope, result in zip(to_review, self.pool.run_all(tasks)):
                review: Optional[ReviewResult] = result.result if result.success else None
                if review is not None and review.ok:
                    report.reviewed += 1
                    report.suggestions += len(review.suggestions)
                else:
                    report.failed += 1
                    logger.debug("Review of %s did not complete; cache left untouched", scope.name)

        logger.info(
            "Analyzed %s: %d scopes, %d reviewed, %d unchanged, %d failed, %d pruned",
            uri, report.scopes, report.reviewed, report.unchanged, report.failed, report.pruned,
        )
        self._refresh()
        return report

    def clear_suggestions(self, document_id: Optional[str] = None) -> bool:
        """
        Forget one document's suggestions, or all of them.

        Returns:
            True if anything was removed (always True for clear-all)
        """
        if document_id is None:
            self.cache.clear_all()
            removed = True
        else:
            removed = self.cache.clear(document_id)
        self._refresh()
        return removed

    def shutdown(self) -> None:
        self.scheduler.shutdown()

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _symbols(self, document: Document) -> Optional[List[DocumentSymbol]]:
        try:
            return self.symbol_provider.symbols(document)
        except Exception as e:
            logger.warning("Symbol provider failed for %s: %s", document.uri, e)
            return None

    def _diagnostics(self, document: Document) -> List[Diagnostic]:
        if self.diagnostics_provider is None:
            return []
        try:
            return list(self.diagnostics_provider.diagnostics(document) or [])
        except Exception as e:
            logger.warning("Diagnostics provider failed for %s: %s", document.uri, e)
            return []

    def _review_scope(self, document: Document, scope: CodeScope, language: str) -> ReviewResult:
        context = build_context(document, scope, self.context_lines)
        result = self.review_client.review(scope.content, context, language)
        if result.ok:
            self.cache.set(document.uri, scope, result.suggestions)
            logger.debug("Reviewed %s: %d suggestions", scope.name, len(result.suggestions))
        return result

    def _refresh(self) -> None:
        if self.on_refresh is None:
            return
        try:
            self.on_refresh()
        except Exception as e:
            logger.warning("Refresh listener failed: %s", e)
