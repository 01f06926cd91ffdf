"""
Tests for Session — wiring, refresh signal, durable cache

Tests verify:
- One shared cache between analyzer and readers
- Refresh listeners fire per pass and per clear, and can be removed
- Suggestions survive into a new session via .retro/suggestions.json
"""

import threading
from pathlib import Path

from retro.config import Config
from retro.session import CACHE_FILE, RETRO_DIR
from tests.factories import BlockingSymbolProvider


class TestRefreshSignal:
    """Test on_refresh() listeners."""

    def test_fires_once_per_pass(self, retro_factory, session):
        """Each analysis pass signals exactly once."""
        calls = []
        session.on_refresh(lambda: calls.append("refresh"))
        session.analyze(retro_factory.document())
        assert calls == ["refresh"]

    def test_removed_listener_is_silent(self, retro_factory, session):
        """The returned function unregisters the listener."""
        calls = []
        remove = session.on_refresh(lambda: calls.append("refresh"))
        remove()
        remove()
        session.analyze(retro_factory.document())
        assert calls == []

    def test_failing_listener_does_not_stop_others(self, retro_factory, session):
        """One broken consumer cannot starve the rest."""
        calls = []

        def broken():
            raise RuntimeError("redraw failed")

        session.on_refresh(broken)
        session.on_refresh(lambda: calls.append("refresh"))
        session.analyze(retro_factory.document())
        assert calls == ["refresh"]

    def test_clear_fires_refresh(self, retro_factory, session):
        """Clearing is visible to consumers immediately."""
        document = retro_factory.document()
        session.analyze(document)
        calls = []
        session.on_refresh(lambda: calls.append("refresh"))

        assert session.clear(document.uri)
        assert session.suggestions(document.uri) == []
        assert calls == ["refresh"]


class TestSharedCache:
    """Test that readers see what the analyzer wrote."""

    def test_suggestions_for_line(self, retro_factory, session):
        """Line queries read the same cache the pass wrote."""
        document = retro_factory.document()
        session.analyze(document)

        assert session.analyzer.cache is session.cache
        [suggestion] = session.suggestions_for_line(document.uri, 3)
        assert suggestion.scope_name == "add"
        assert session.suggestions_for_line(document.uri, 1) == []

    def test_cache_persisted_and_reloaded(self, retro_factory):
        """A new session over the same project starts with the old suggestions."""
        document = retro_factory.document()
        with retro_factory.create_session() as first:
            first.analyze(document)

        assert (retro_factory.project_dir / RETRO_DIR / CACHE_FILE).exists()

        with retro_factory.create_session() as second:
            assert len(second.suggestions(document.uri)) == 4
            calls = retro_factory.provider.call_count
            report = second.analyze(document)
            assert report.unchanged == 4
            assert retro_factory.provider.call_count == calls

    def test_disabled_analysis(self, retro_factory):
        """analysis.enabled=false makes edits no-ops."""
        config = Config.from_dict({"analysis": {"enabled": False}})
        with retro_factory.create_session(config=config) as session:
            assert session.document_changed(retro_factory.document()) is False
            assert retro_factory.provider.call_count == 0


class TestDocuments:
    """Test document helpers."""

    def test_open_document_relative_path(self, retro_factory, session):
        """Relative paths resolve against the project; URI matches document_uri()."""
        retro_factory.write_file("src/app.ts")
        document = session.open_document(Path("src/app.ts"), version=3)
        assert document.uri == session.document_uri("src/app.ts")
        assert document.uri == retro_factory.uri("src/app.ts")
        assert document.language_id == "typescript"
        assert document.version == 3

    def test_language_for(self, session):
        """Reviewer language from a path or URI."""
        assert session.language_for("app.tsx") == "typescript"
        assert session.language_for("file:///src/tool.py") == "python"
        assert session.language_for("README.md") == ""

    def test_is_supported(self, session):
        assert session.is_supported("a.js")
        assert not session.is_supported("a.rb")


class TestLifecycle:
    """Test shutdown()."""

    def test_shutdown_is_idempotent(self, retro_factory):
        """A second shutdown is a no-op."""
        session = retro_factory.create_session()
        session.shutdown()
        session.shutdown()
        assert session.document_changed(retro_factory.document()) is False

    def test_shutdown_lets_running_pass_finish(self, retro_factory):
        """A debounced pass caught mid-extraction still reviews and refreshes."""
        gate = BlockingSymbolProvider()
        config = Config.from_dict({"analysis": {"debounce_seconds": 0.05}})
        session = retro_factory.create_session(config=config, symbol_provider=gate)
        calls = []
        session.on_refresh(lambda: calls.append("refresh"))

        assert session.document_changed(retro_factory.document())
        assert gate.entered.wait(timeout=2)
        threading.Timer(0.1, gate.release.set).start()

        session.shutdown()

        assert calls == ["refresh"]
        assert retro_factory.provider.call_count == 4
