"""
ReviewClient — The never-throwing boundary around a ReviewProvider

Input: scope text, context text, language tag.
Output: ReviewResult. Every failure (missing credential, transport,
auth, malformed structured result) is logged and returned as
ReviewResult(ok=False); nothing raises past review().

`ok` is what the orchestrator uses to decide whether the scope counts
as reviewed: an ok result with no suggestions still records the scope's
hash, a failed one leaves the cache alone so the scope is retried.
"""

import itertools
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

import xxhash

from ..content.prompts import MAX_SUGGESTIONS
from ..core.types import Suggestion, SuggestionKind
from ..presentation.symbols import sanitize_control_chars
from .providers import RawSuggestion, ReviewProvider, ReviewRequest

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Suggestion"

_id_counter = itertools.count()


@dataclass
class ReviewResult:
    """Outcome of reviewing one scope."""
    ok: bool
    suggestions: List[Suggestion] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> 'ReviewResult':
        return cls(ok=False, error=error)


class ReviewClient:
    """
    Adapter from the pipeline to a ReviewProvider.

    Usage:
        client = ReviewClient(get_provider(config), max_suggestions=4)
        result = client.review(scope.content, context, "typescript")
        if result.ok:
            cache.set(uri, scope, result.suggestions)
    """

    def __init__(self, provider: ReviewProvider, max_suggestions: int = MAX_SUGGESTIONS):
        self.provider = provider
        self.max_suggestions = min(max(max_suggestions, 1), MAX_SUGGESTIONS)

    def review(self, code: str, context: str, language: str) -> ReviewResult:
        request = ReviewRequest(
            code=code,
            context=context,
            language=language,
            max_suggestions=self.max_suggestions,
        )
        try:
            raw = self.provider.review(request)
        except Exception as e:
            logger.warning("Review via %s failed: %s", self.provider.name or "reviewer", e)
            return ReviewResult.failed(str(e))

        if raw is None:
            logger.debug("Reviewer returned no structured result")
            return ReviewResult(ok=True)

        return ReviewResult(ok=True, suggestions=map_suggestions(raw, self.max_suggestions))


def map_suggestions(raw: List[RawSuggestion], limit: int = MAX_SUGGESTIONS) -> List[Suggestion]:
    """
    Turn raw reviewer items into Suggestions (scope and range unstamped).

    Unknown kinds become refactor, a missing title becomes "Suggestion",
    a missing description becomes "". A missing suggested_code stays
    None. Items that are not objects are dropped; the list is cut to limit.
    """
    created_at = datetime.now(timezone.utc).isoformat()
    stamp = time.time_ns()

    suggestions: List[Suggestion] = []
    for index, item in enumerate(raw):
        if len(suggestions) >= limit:
            break
        if not isinstance(item, dict):
            logger.debug("Dropping non-object suggestion item: %r", item)
            continue

        suggestions.append(Suggestion(
            id=_suggestion_id(stamp, index),
            kind=SuggestionKind.parse(item.get("kind", item.get("type"))),
            title=_text(item.get("title")) or DEFAULT_TITLE,
            description=_text(item.get("description")) or "",
            suggested_code=_optional_text(item.get("suggested_code", item.get("suggestedCode"))),
            created_at=created_at,
        ))
    return suggestions


def _suggestion_id(stamp: int, index: int) -> str:
    seed = f"{stamp}:{next(_id_counter)}:{index}"
    return xxhash.xxh64(seed.encode()).hexdigest()[:12]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return sanitize_control_chars(str(value)).strip()


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return sanitize_control_chars(str(value))
