"""
Tests for DocumentAnalyzer — end-to-end analysis passes

Drives the real cache, filter, extractor, client and pool with fake
symbol/diagnostics providers and a mock reviewer.

Tests verify:
- Unchanged scopes never reach the reviewer (idempotence, reformatting, moves)
- Changed, new and renamed scopes do; vanished ones are pruned
- Broken scopes are excluded
- Provider and reviewer failures degrade silently; refresh always fires once
- Edits are debounced into a single pass
"""

from retro.core.parsing import default_registry
from retro.core.types import Severity, SuggestionKind
from tests.factories import SAMPLE_TS, error_at

ADD_ONLY = "function add(a, b) {\n  return a + b;\n}\n"

TWO_COUNTERS = """class Up {
  increment() {
    this.count += 1;
  }
}

class Down {
  increment() {
    this.count -= 1;
  }
}
"""


# =============================================================================
# End-to-end scenarios
# =============================================================================

class TestEndToEnd:
    """Whole-pass scenarios."""

    def test_new_function_reviewed_then_remembered(self, retro_factory, analyzer):
        """One scope -> one style suggestion on its first line; second pass makes no call."""
        document = retro_factory.document(ADD_ONLY)

        report = analyzer.analyze_document(document)
        assert (report.scopes, report.reviewed, report.suggestions) == (1, 1, 1)
        assert retro_factory.provider.call_count == 1

        [suggestion] = retro_factory.cache.get_for_line(document.uri, 0)
        assert suggestion.kind == SuggestionKind.STYLE
        assert suggestion.scope_name == "add"

        report = analyzer.analyze_document(document)
        assert report.unchanged == 1 and report.reviewed == 0
        assert retro_factory.provider.call_count == 1
        assert retro_factory.cache.get_for_line(document.uri, 0) == [suggestion]

    def test_reviewer_failure_leaves_cache_untouched(self, retro_factory, analyzer):
        """A throwing reviewer: pass completes, nothing stored, refresh fires."""
        retro_factory.provider.error = ConnectionError("network unreachable")
        document = retro_factory.document(ADD_ONLY)

        report = analyzer.analyze_document(document)

        assert report.failed == 1
        assert report.reviewed == 0
        assert retro_factory.cache.stored(document.uri, "add") is None
        assert retro_factory.cache.get(document.uri) == []
        assert retro_factory.refreshes == 1

    def test_failed_scope_retried_next_pass(self, retro_factory, analyzer):
        """A scope whose review failed is sent again on the next pass."""
        document = retro_factory.document(ADD_ONLY)
        retro_factory.provider.error = TimeoutError("slow")
        analyzer.analyze_document(document)

        retro_factory.provider.error = None
        report = analyzer.analyze_document(document)

        assert report.reviewed == 1
        assert retro_factory.provider.call_count == 2
        assert retro_factory.cache.has(document.uri)

    def test_failure_keeps_previous_suggestions(self, retro_factory, analyzer):
        """An edited scope whose re-review fails keeps its old record."""
        document = retro_factory.document(ADD_ONLY)
        analyzer.analyze_document(document)
        before = retro_factory.cache.stored(document.uri, "add")

        retro_factory.provider.error = ConnectionError("down")
        analyzer.analyze_document(retro_factory.document(ADD_ONLY.replace("a + b", "a * b")))

        assert retro_factory.cache.stored(document.uri, "add") == before


# =============================================================================
# Change detection
# =============================================================================

class TestChangeDetection:
    """Which scopes reach the reviewer."""

    def test_first_pass_reviews_every_scope(self, retro_factory, analyzer):
        """Functions, arrow bindings, classes and methods; plain constants skipped."""
        report = analyzer.analyze_document(retro_factory.document())
        assert report.scopes == 4
        assert report.reviewed == 4
        assert sorted(retro_factory.cache.scope_names(retro_factory.uri())) == [
            "Counter", "add", "double", "increment",
        ]

    def test_identical_text_is_idempotent(self, retro_factory, analyzer):
        """Re-running on unchanged text makes zero reviewer calls."""
        document = retro_factory.document()
        analyzer.analyze_document(document)
        calls = retro_factory.provider.call_count

        report = analyzer.analyze_document(document)

        assert retro_factory.provider.call_count == calls
        assert report.unchanged == 4
        assert report.pruned == 0

    def test_shared_method_name_is_idempotent(self, retro_factory, analyzer):
        """Two classes defining `increment`: later passes on the same text make no calls."""
        document = retro_factory.document(TWO_COUNTERS)

        first = analyzer.analyze_document(document)
        assert first.scopes == 3
        calls = retro_factory.provider.call_count
        assert calls == 3

        for _ in range(3):
            report = analyzer.analyze_document(document)
            assert report.unchanged == 3
            assert report.reviewed == 0
        assert retro_factory.provider.call_count == calls

        stored = retro_factory.cache.stored(document.uri, "increment")
        assert stored.range.start.line == 7

    def test_reformatting_is_not_a_change(self, retro_factory, analyzer):
        """Whitespace-only edits make zero reviewer calls."""
        analyzer.analyze_document(retro_factory.document())
        calls = retro_factory.provider.call_count

        reformatted = SAMPLE_TS.replace("return a + b;", "return   a+b;").replace("x * 2", "x*2")
        analyzer.analyze_document(retro_factory.document(reformatted))

        assert retro_factory.provider.call_count == calls

    def test_only_edited_scope_is_reviewed(self, retro_factory, analyzer):
        """Editing one function reviews just that function."""
        analyzer.analyze_document(retro_factory.document())
        calls = retro_factory.provider.call_count

        report = analyzer.analyze_document(retro_factory.document(SAMPLE_TS.replace("a + b", "a - b")))

        assert report.reviewed == 1
        assert report.unchanged == 3
        assert retro_factory.provider.call_count == calls + 1
        assert "a - b" in retro_factory.provider.calls[-1].code

    def test_move_without_change(self, retro_factory, analyzer):
        """Lines inserted above shift suggestions without a reviewer call."""
        analyzer.analyze_document(retro_factory.document())
        calls = retro_factory.provider.call_count
        uri = retro_factory.uri()
        assert retro_factory.cache.get_for_line(uri, 2)

        analyzer.analyze_document(retro_factory.document("// header\n// more\n" + SAMPLE_TS))

        assert retro_factory.provider.call_count == calls
        assert retro_factory.cache.get_for_line(uri, 2) == []
        [moved] = retro_factory.cache.get_for_line(uri, 4)
        assert moved.scope_name == "add"
        assert retro_factory.cache.stored(uri, "add").range.start.line == 4

    def test_rename_prunes_old_name(self, retro_factory, analyzer):
        """A renamed function is reviewed under its new name; the old entry is gone."""
        analyzer.analyze_document(retro_factory.document())

        report = analyzer.analyze_document(
            retro_factory.document(SAMPLE_TS.replace("function add(", "function sum("))
        )

        assert report.pruned == 1
        assert report.reviewed == 1
        names = retro_factory.cache.scope_names(retro_factory.uri())
        assert "add" not in names
        assert "sum" in names

    def test_deleted_function_is_pruned(self, retro_factory, analyzer):
        """Removing a function drops its suggestions."""
        analyzer.analyze_document(retro_factory.document())

        without_add = SAMPLE_TS.replace(
            "export function add(a: number, b: number) {\n  return a + b;\n}\n", ""
        )
        report = analyzer.analyze_document(retro_factory.document(without_add))

        assert report.pruned == 1
        assert retro_factory.cache.stored(retro_factory.uri(), "add") is None

    def test_empty_review_is_remembered(self, retro_factory, analyzer):
        """A scope reviewed with zero suggestions is not re-sent."""
        retro_factory.provider.response = []
        document = retro_factory.document(ADD_ONLY)

        analyzer.analyze_document(document)
        analyzer.analyze_document(document)

        assert retro_factory.provider.call_count == 1
        assert retro_factory.cache.stored(document.uri, "add") is not None

    def test_reviewer_receives_context_and_language(self, retro_factory, analyzer):
        """Preceding lines and the language tag are sent with the code."""
        analyzer.analyze_document(retro_factory.document())
        request = next(r for r in retro_factory.provider.calls if r.code.startswith("export function add"))
        assert request.context == 'import { log } from "./log";\n\n'
        assert request.language == "typescript"

    def test_registry_supplies_language(self, retro_factory):
        """With a registry, the reviewer language comes from the language config."""
        analyzer = retro_factory.create_analyzer(registry=default_registry())
        document = retro_factory.document(ADD_ONLY, name="widget.tsx")
        document.language_id = "typescriptreact"
        try:
            analyzer.analyze_document(document)
        finally:
            analyzer.shutdown()
        assert retro_factory.provider.calls[0].language == "typescript"


# =============================================================================
# Error exclusion
# =============================================================================

class TestErrorExclusion:
    """Scopes overlapping syntax errors."""

    def test_broken_scope_not_reviewed(self, retro_factory, analyzer):
        """An error inside add keeps add away from the reviewer only."""
        retro_factory.diagnostics_provider.diagnostics_list = [error_at(3)]

        report = analyzer.analyze_document(retro_factory.document())

        assert report.excluded == 1
        assert report.reviewed == 3
        assert all("function add" not in r.code for r in retro_factory.provider.calls)

    def test_warnings_do_not_exclude(self, retro_factory, analyzer):
        """Non-error diagnostics are ignored."""
        retro_factory.diagnostics_provider.diagnostics_list = [error_at(3, Severity.WARNING)]
        report = analyzer.analyze_document(retro_factory.document())
        assert report.excluded == 0
        assert report.reviewed == 4

    def test_broken_scope_reviewed_once_fixed(self, retro_factory, analyzer):
        """Fixing the error makes the scope eligible again."""
        retro_factory.diagnostics_provider.diagnostics_list = [error_at(3)]
        analyzer.analyze_document(retro_factory.document())

        retro_factory.diagnostics_provider.diagnostics_list = []
        report = analyzer.analyze_document(retro_factory.document())

        assert report.reviewed == 1
        assert retro_factory.cache.stored(retro_factory.uri(), "add") is not None

    def test_failing_diagnostics_provider_means_no_errors(self, retro_factory, analyzer):
        """Diagnostics failures are logged and treated as a clean document."""
        retro_factory.diagnostics_provider.error = RuntimeError("language server gone")
        report = analyzer.analyze_document(retro_factory.document())
        assert report.reviewed == 4


# =============================================================================
# Provider failures
# =============================================================================

class TestProviderFailures:
    """Symbol provider unavailable."""

    def test_raising_symbol_provider(self, retro_factory, analyzer):
        """No scopes this pass, no pruning, cached suggestions kept, refresh fires."""
        analyzer.analyze_document(retro_factory.document())
        calls = retro_factory.provider.call_count
        retro_factory.symbol_provider.error = RuntimeError("symbol request failed")

        report = analyzer.analyze_document(retro_factory.document())

        assert not report.extracted
        assert report.scopes == 0
        assert report.pruned == 0
        assert retro_factory.provider.call_count == calls
        assert len(retro_factory.cache.scope_names(retro_factory.uri())) == 4
        assert retro_factory.refreshes == 2

    def test_symbol_provider_returning_none(self, retro_factory, analyzer):
        """None is treated like a failure, not like an empty file."""
        analyzer.analyze_document(retro_factory.document())
        retro_factory.symbol_provider.return_none = True

        report = analyzer.analyze_document(retro_factory.document())

        assert not report.extracted
        assert len(retro_factory.cache.scope_names(retro_factory.uri())) == 4


# =============================================================================
# Refresh, clearing, scheduling
# =============================================================================

class TestRefreshAndScheduling:
    """Refresh signal, clear commands and debounced entry."""

    def test_refresh_fires_once_per_pass(self, retro_factory, analyzer):
        """Four reviewed scopes still mean one refresh."""
        analyzer.analyze_document(retro_factory.document())
        assert retro_factory.refreshes == 1

    def test_refresh_listener_failure_is_contained(self, retro_factory):
        """A raising listener does not break the pass."""

        def broken():
            raise RuntimeError("renderer crashed")

        analyzer = retro_factory.create_analyzer(on_refresh=broken)
        try:
            report = analyzer.analyze_document(retro_factory.document(ADD_ONLY))
        finally:
            analyzer.shutdown()
        assert report.reviewed == 1

    def test_clear_one_document(self, retro_factory, analyzer):
        """clear_suggestions(uri) empties the document and refreshes."""
        analyzer.analyze_document(retro_factory.document())
        assert analyzer.clear_suggestions(retro_factory.uri())
        assert retro_factory.cache.get(retro_factory.uri()) == []
        assert retro_factory.refreshes == 2

    def test_clear_all(self, retro_factory, analyzer):
        """clear_suggestions() empties every document and refreshes."""
        analyzer.analyze_document(retro_factory.document())
        analyzer.analyze_document(retro_factory.document(ADD_ONLY, name="other.ts"))
        assert analyzer.clear_suggestions()
        assert retro_factory.cache.documents() == []
        assert retro_factory.refreshes == 3

    def test_cleared_scopes_are_reviewed_again(self, retro_factory, analyzer):
        """After a clear, the next pass starts from scratch."""
        document = retro_factory.document(ADD_ONLY)
        analyzer.analyze_document(document)
        analyzer.clear_suggestions(document.uri)
        analyzer.analyze_document(document)
        assert retro_factory.provider.call_count == 2

    def test_burst_of_edits_yields_one_pass(self, retro_factory, analyzer):
        """Debounced edits collapse into one pass over the latest text."""
        for version in range(5):
            assert analyzer.handle_document_change(retro_factory.document(version=version))

        assert analyzer.scheduler.wait_idle(timeout=5)
        assert retro_factory.symbol_provider.calls == 1
        assert retro_factory.provider.call_count == 4
        assert retro_factory.refreshes == 1

    def test_disabled_analyzer_ignores_edits(self, retro_factory):
        """With analysis disabled nothing is scheduled."""
        analyzer = retro_factory.create_analyzer(enabled=False)
        try:
            assert not analyzer.handle_document_change(retro_factory.document())
            assert analyzer.scheduler.pending() == []
        finally:
            analyzer.shutdown()

    def test_parallel_pool_reviews_every_scope(self, retro_factory):
        """Concurrent reviewer calls each land in the cache."""
        analyzer = retro_factory.create_analyzer(parallel=True)
        try:
            report = analyzer.analyze_document(retro_factory.document())
        finally:
            analyzer.shutdown()
            analyzer.pool.shutdown()
        assert report.reviewed == 4
        assert len(retro_factory.cache.get(retro_factory.uri())) == 4
