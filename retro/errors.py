"""
Errors — Failure taxonomy for the analysis pipeline

Every failure the pipeline can meet is one of these. None of them is
allowed to abort an analysis pass:
- ProviderUnavailableError: symbol/diagnostic provider failed -> no scopes
- ReviewError: reviewer transport, auth or response failure -> no suggestions
- MissingCredentialError: raised before any network call is attempted
"""


class RetroError(Exception):
    """Base class for all retro errors."""


class ProviderUnavailableError(RetroError):
    """A symbol or diagnostics provider could not answer for a document."""


class ReviewError(RetroError):
    """The external reviewer failed or returned something unusable."""


class MissingCredentialError(ReviewError):
    """No API key is configured for the selected review provider."""

    def __init__(self, provider: str, env_key: str):
        self.provider = provider
        self.env_key = env_key
        super().__init__(
            f"{provider} API key not configured. "
            f"Set the {env_key} environment variable."
        )
