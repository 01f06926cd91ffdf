"""
Shared pytest fixtures for the retro test suite.

Every test runs against a temp project directory with the user config
directory redirected into tmp_path and the RETRO_* / API key environment
cleared, so nothing on the developer's machine leaks in.

Usage in tests:
    def test_something(retro_factory):
        analyzer = retro_factory.create_analyzer()
        analyzer.analyze_document(retro_factory.document())
"""

import pytest

from retro.config import ConfigManager
from tests.factories import RetroTestFactory


_ISOLATED_ENV = (
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "RETRO_LLM_PROVIDER",
    "RETRO_LLM_MODEL",
    "RETRO_PARALLEL_ENABLED",
    "RETRO_IO_WORKERS",
    "RETRO_LLM_CONCURRENT",
    "RETRO_LLM_RATE_LIMIT",
    "RETRO_REVIEW_TIMEOUT",
    "RETRO_SHUTDOWN_TIMEOUT",
    "RETRO_PROJECT_PATH",
    "RETRO_ASCII_ONLY",
    "RETRO_UNICODE",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the real user config and environment out of every test."""
    for key in _ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", tmp_path / "home" / ".retro")


@pytest.fixture
def retro_factory(tmp_path):
    """
    Create an empty RetroTestFactory.

    Provides a MemorySlot-backed cache, a MockReviewProvider and fake
    symbol/diagnostics providers, all reachable as attributes.
    """
    return RetroTestFactory(tmp_path)


@pytest.fixture
def analyzer(retro_factory):
    """DocumentAnalyzer wired to the factory's fakes (inline pool)."""
    analyzer = retro_factory.create_analyzer()
    yield analyzer
    analyzer.shutdown()
    analyzer.pool.shutdown()


@pytest.fixture
def session(retro_factory):
    """Session over the temp project, cache persisted to .retro/."""
    session = retro_factory.create_session()
    yield session
    session.shutdown()
