"""
OrchestratorConfig — Configuration for review fan-out

Loads concurrency settings from environment variables.
Provides sensible defaults that work on any machine.

Environment variables:
- RETRO_PARALLEL_ENABLED: Run per-scope work on the pool (default: true)
- RETRO_IO_WORKERS: Thread pool size for reviewer calls (default: 4)
- RETRO_LLM_CONCURRENT: Max concurrent reviewer calls (default: 3)
- RETRO_LLM_RATE_LIMIT: Max reviewer requests per second (default: 10)
- RETRO_REVIEW_TIMEOUT: Reviewer call timeout in seconds (default: 60)
- RETRO_SHUTDOWN_TIMEOUT: Pool shutdown timeout in seconds (default: 10)
"""

import os
from dataclasses import dataclass


@dataclass
class OrchestratorConfig:
    """
    Configuration for the analysis orchestrator.

    Loaded from environment variables with sensible defaults.
    """

    # Feature toggle
    enabled: bool = True

    # Worker pool size
    io_workers: int = 4                    # ThreadPool for reviewer calls

    # Rate limiting
    llm_concurrent: int = 3                # Max concurrent reviewer calls
    llm_rate_limit: float = 10.0           # Max requests per second

    # Timeouts
    review_timeout: float = 60.0           # Per reviewer call (seconds)
    shutdown_timeout: float = 10.0         # Pool shutdown timeout (seconds)

    @classmethod
    def from_env(cls) -> 'OrchestratorConfig':
        """
        Load configuration from environment variables.

        Defaults keep a handful of reviewer calls in flight, which is
        enough to review a freshly opened file quickly without tripping
        provider rate limits.
        """
        return cls(
            enabled=_get_bool_env("RETRO_PARALLEL_ENABLED", True),
            io_workers=_get_int_env("RETRO_IO_WORKERS", 4),
            llm_concurrent=_get_int_env("RETRO_LLM_CONCURRENT", 3),
            llm_rate_limit=_get_float_env("RETRO_LLM_RATE_LIMIT", 10.0),
            review_timeout=_get_float_env("RETRO_REVIEW_TIMEOUT", 60.0),
            shutdown_timeout=_get_float_env("RETRO_SHUTDOWN_TIMEOUT", 10.0),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        if self.io_workers < 1:
            raise ValueError("RETRO_IO_WORKERS must be >= 1")
        if self.llm_concurrent < 1:
            raise ValueError("RETRO_LLM_CONCURRENT must be >= 1")
        if self.llm_rate_limit <= 0:
            raise ValueError("RETRO_LLM_RATE_LIMIT must be > 0")
        if self.review_timeout <= 0:
            raise ValueError("RETRO_REVIEW_TIMEOUT must be > 0")
        if self.shutdown_timeout < 0:
            raise ValueError("RETRO_SHUTDOWN_TIMEOUT must be >= 0")

    def to_dict(self) -> dict:
        """Serialize for display/logging."""
        return {
            "enabled": self.enabled,
            "io_workers": self.io_workers,
            "llm_concurrent": self.llm_concurrent,
            "llm_rate_limit": self.llm_rate_limit,
            "review_timeout": self.review_timeout,
            "shutdown_timeout": self.shutdown_timeout,
        }


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return float(value)
        except ValueError:
            pass
    return default
