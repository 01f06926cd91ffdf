"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and reach shared resources through
its properties instead of building their own.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import RetroCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'RetroCLI'):
        self._cli = cli

    @property
    def project_dir(self):
        """Project root directory."""
        return self._cli.project_dir

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def session(self):
        """Analysis session (built on first use)."""
        return self._cli.session

    @property
    def cache(self):
        """The session's suggestion cache."""
        return self._cli.session.cache
