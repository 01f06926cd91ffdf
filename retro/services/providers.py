"""
Review Providers — Abstraction over the external AI reviewer

Supports: Claude, OpenAI, Mock
All providers implement the same interface: one scope in, raw
structured suggestion items out. Providers raise on failure; the
ReviewClient is the boundary that turns failures into empty results.
"""

import threading
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import orjson

from ..config import Config, LLMConfig
from ..content.prompts import (
    MAX_SUGGESTIONS, REVIEW_TOOL_NAME,
    anthropic_review_tool, build_review_prompt, openai_review_tool,
)
from ..errors import MissingCredentialError, ReviewError

# Raw item as the reviewer produced it: kind/title/description/suggested_code
RawSuggestion = Dict[str, Any]

MAX_TOKENS = 1024
DEFAULT_TIMEOUT = 60.0


@dataclass
class ReviewRequest:
    """One scope to review."""
    code: str
    context: str
    language: str
    max_suggestions: int = MAX_SUGGESTIONS

    @property
    def prompt(self) -> str:
        return build_review_prompt(self.code, self.context, self.language, self.max_suggestions)


class ReviewProvider(ABC):
    """Abstract base for reviewer providers."""

    name: str = ""

    @abstractmethod
    def review(self, request: ReviewRequest) -> Optional[List[RawSuggestion]]:
        """
        Ask the reviewer about one scope.

        Returns:
            Raw suggestion items, or None if the reviewer produced no
            structured result at all

        Raises:
            MissingCredentialError: Before any network call, if no API key
            ReviewError: Malformed structured result
            Exception: Whatever the vendor SDK raises for transport/auth
        """
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is configured and ready."""
        pass


class ClaudeReviewProvider(ReviewProvider):
    """Anthropic Claude provider using a forced tool call."""

    name = "claude"

    def __init__(self, config: LLMConfig, timeout: float = DEFAULT_TIMEOUT, client: Any = None):
        self.config = config
        self.timeout = timeout
        self._client = client
        if self._client is None:
            self._init_client()

    def _init_client(self):
        if not self.config.api_key:
            return
        try:
            import anthropic
            self._client = anthropic.Anthropic(api_key=self.config.api_key, timeout=self.timeout)
        except ImportError:
            pass

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def review(self, request: ReviewRequest) -> Optional[List[RawSuggestion]]:
        if not self._client:
            if not self.config.api_key:
                raise MissingCredentialError("Anthropic", self.config.api_key_env)
            raise ReviewError("anthropic package is not installed")

        message = self._client.messages.create(
            model=self.config.effective_model,
            max_tokens=MAX_TOKENS,
            messages=[{"role": "user", "content": request.prompt}],
            tools=[anthropic_review_tool(request.max_suggestions)],
            tool_choice={"type": "tool", "name": REVIEW_TOOL_NAME},
        )

        for block in message.content or []:
            if getattr(block, "type", None) == "tool_use" and getattr(block, "name", REVIEW_TOOL_NAME) == REVIEW_TOOL_NAME:
                return _suggestions_from_input(block.input)
        return None


class OpenAIReviewProvider(ReviewProvider):
    """OpenAI provider using chat-completions function calling."""

    name = "openai"

    def __init__(self, config: LLMConfig, timeout: float = DEFAULT_TIMEOUT, client: Any = None):
        self.config = config
        self.timeout = timeout
        self._client = client
        if self._client is None:
            self._init_client()

    def _init_client(self):
        if not self.config.api_key:
            return
        try:
            import openai
            self._client = openai.OpenAI(api_key=self.config.api_key, timeout=self.timeout)
        except ImportError:
            pass

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def review(self, request: ReviewRequest) -> Optional[List[RawSuggestion]]:
        if not self._client:
            if not self.config.api_key:
                raise MissingCredentialError("OpenAI", self.config.api_key_env)
            raise ReviewError("openai package is not installed")

        response = self._client.chat.completions.create(
            model=self.config.effective_model,
            max_completion_tokens=MAX_TOKENS,
            messages=[{"role": "user", "content": request.prompt}],
            tools=[openai_review_tool(request.max_suggestions)],
            tool_choice={"type": "function", "function": {"name": REVIEW_TOOL_NAME}},
        )

        if not response.choices:
            return None
        tool_calls = getattr(response.choices[0].message, "tool_calls", None) or []
        for call in tool_calls:
            if call.function.name != REVIEW_TOOL_NAME:
                continue
            try:
                arguments = orjson.loads(call.function.arguments or "{}")
            except orjson.JSONDecodeError as e:
                raise ReviewError(f"Reviewer returned invalid JSON arguments: {e}") from e
            return _suggestions_from_input(arguments)
        return None


class MockReviewProvider(ReviewProvider):
    """
    Deterministic provider for tests and offline use.

    Returns the same canned items for every request and records each
    request it receives. Set `error` to make every call raise it.
    """

    name = "mock"

    DEFAULT_RESPONSE: List[RawSuggestion] = [
        {
            "kind": "style",
            "title": "Consider a more descriptive name",
            "description": "Names that state intent make the code easier to scan.",
        }
    ]

    def __init__(self, response: Optional[List[RawSuggestion]] = None, error: Optional[Exception] = None):
        self.response = self.DEFAULT_RESPONSE if response is None else response
        self.error = error
        self.calls: List[ReviewRequest] = []
        self._lock = threading.Lock()

    @property
    def is_available(self) -> bool:
        return True

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    def review(self, request: ReviewRequest) -> Optional[List[RawSuggestion]]:
        with self._lock:
            self.calls.append(request)
        if self.error is not None:
            raise self.error
        return deepcopy(self.response)


def _suggestions_from_input(tool_input: Any) -> Optional[List[RawSuggestion]]:
    """Pull the suggestions list out of a tool call's input."""
    if not tool_input:
        return None
    if not isinstance(tool_input, dict):
        raise ReviewError(f"Reviewer tool input is {type(tool_input).__name__}, expected an object")
    suggestions = tool_input.get("suggestions")
    if suggestions is None:
        return None
    if not isinstance(suggestions, list):
        raise ReviewError("Reviewer 'suggestions' is not a list")
    return suggestions


def get_provider(config: Config, timeout: float = DEFAULT_TIMEOUT) -> ReviewProvider:
    """
    Get the reviewer provider the configuration selects.

    An unconfigured provider is still returned: its review() raises
    MissingCredentialError, which the ReviewClient reports per scope.
    """
    provider_name = config.llm.provider
    if provider_name == "claude":
        return ClaudeReviewProvider(config.llm, timeout=timeout)
    if provider_name == "openai":
        return OpenAIReviewProvider(config.llm, timeout=timeout)
    if provider_name == "mock":
        return MockReviewProvider()
    raise ValueError(f"Unknown provider '{provider_name}'")


def get_provider_status(config: Config) -> str:
    """Get human-readable provider status."""
    llm = config.llm
    if llm.provider == "mock":
        return "Mock reviewer (offline, canned suggestions)"
    if not llm.api_key:
        return f"Reviewer not configured (set {llm.api_key_env} environment variable)"

    package_map = {
        "claude": ("anthropic", "pip install anthropic"),
        "openai": ("openai", "pip install openai"),
    }
    if llm.provider in package_map:
        module_name, install_cmd = package_map[llm.provider]
        try:
            __import__(module_name)
        except ImportError:
            return f"Reviewer package missing: {install_cmd}"

    return f"{llm.provider.title()}: {llm.effective_model}"
