"""
SuggestionCache — The authoritative scope -> suggestions table

One logical table per document, keyed by scope name:
    {document_uri: {scope_name: StoredScope(content_hash, range, suggestions)}}

Answers "has this scope meaningfully changed since it was reviewed?",
forgets scopes that disappeared, and re-syncs ranges of scopes that
moved without changing.

Invariants:
- content_hash is a pure function of (scope name, whitespace-stripped text)
- set() is the only path that records a hash, i.e. marks a scope reviewed
- after prune_stale(), no stored name is absent from the given name set

Construct exactly one per editing session and pass it to every consumer
(pipeline stages and presentation alike). Thread-safe.
"""

import logging
import re
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from .persistence import CacheSlot
from .types import CodeScope, SourceRange, StoredScope, Suggestion

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def normalize_content(content: str) -> str:
    """Strip all whitespace. Comments are deliberately left in place."""
    return _WHITESPACE.sub("", content)


def content_hash(scope_name: str, content: str) -> str:
    """
    djb2-style (multiply by 33, XOR) 32-bit hash, rendered in base 36.

    Insensitive to reformatting, sensitive to identifier and literal
    changes. Collisions are possible and accepted.
    """
    value = 5381
    for char in scope_name + normalize_content(content):
        value = ((value * 33) ^ ord(char)) & 0xFFFFFFFF
    return _to_base36(value)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


@dataclass(frozen=True)
class CacheCheck:
    """Result of comparing a fresh scope against its stored record."""
    exists: bool
    changed: bool

    @property
    def needs_review(self) -> bool:
        return not self.exists or self.changed


class SuggestionCache:
    """
    Per-document tables of StoredScope, optionally backed by a CacheSlot.

    Every mutation is written through to the slot while the lock is held,
    so the slot always holds the latest consistent state. Slot write
    failures are logged and otherwise ignored (best-effort durability).
    """

    def __init__(self, slot: Optional[CacheSlot] = None, autoload: bool = True):
        """
        Args:
            slot: Durable slot to rehydrate from and write through to
            autoload: Rehydrate from the slot immediately
        """
        self._tables: Dict[str, Dict[str, StoredScope]] = {}
        self._lock = threading.RLock()
        self._slot = slot

        if slot is not None and autoload:
            self.load()

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    def check(self, document_id: str, scope: CodeScope) -> CacheCheck:
        """Compare a scope against its stored hash. Pure read."""
        with self._lock:
            stored = self._tables.get(document_id, {}).get(scope.name)
            if stored is None:
                return CacheCheck(exists=False, changed=False)
            return CacheCheck(
                exists=True,
                changed=stored.content_hash != content_hash(scope.name, scope.content),
            )

    def set(self, document_id: str, scope: CodeScope, suggestions: Iterable[Suggestion]) -> None:
        """
        Record a reviewed scope: new hash, current range, its suggestions.

        Each suggestion is stamped with the scope's name and range.
        An empty suggestion list is a valid review result.
        """
        stored = StoredScope(
            content_hash=content_hash(scope.name, scope.content),
            range=scope.range,
            suggestions=[s.stamped(scope.name, scope.range) for s in suggestions],
        )
        with self._lock:
            self._tables.setdefault(document_id, {})[scope.name] = stored
            self._persist()

    def update_range(self, document_id: str, scope_name: str, range: SourceRange) -> bool:
        """
        Move a stored scope (and its suggestions) without touching its hash.

        Returns:
            True if a stored scope exists under that name
        """
        with self._lock:
            stored = self._tables.get(document_id, {}).get(scope_name)
            if stored is None:
                return False
            if stored.range == range:
                return True

            stored.range = range
            stored.suggestions = [replace(s, range=range) for s in stored.suggestions]
            self._persist()
            return True

    def prune_stale(self, document_id: str, current_scope_names: Iterable[str]) -> List[str]:
        """
        Delete stored scopes whose names are not in current_scope_names.

        Returns:
            Names that were removed
        """
        keep = set(current_scope_names)
        with self._lock:
            table = self._tables.get(document_id)
            if not table:
                return []

            removed = [name for name in table if name not in keep]
            for name in removed:
                del table[name]
            if not table:
                del self._tables[document_id]

            if removed:
                self._persist()
            return removed

    def get_for_line(self, document_id: str, line: int) -> List[Suggestion]:
        """All suggestions whose range spans line (start/end lines inclusive)."""
        return [
            s for s in self.get(document_id)
            if s.range is not None and s.range.contains_line(line)
        ]

    def get(self, document_id: str) -> List[Suggestion]:
        """All suggestions for a document, in scope insertion order."""
        with self._lock:
            table = self._tables.get(document_id, {})
            return [s for stored in table.values() for s in stored.suggestions]

    def has(self, document_id: str) -> bool:
        """True if the document has at least one stored suggestion."""
        return bool(self.get(document_id))

    def clear(self, document_id: str) -> bool:
        """Forget one document. Returns True if anything was stored."""
        with self._lock:
            existed = self._tables.pop(document_id, None) is not None
            if existed:
                self._persist()
            return existed

    def clear_all(self) -> None:
        """Forget every document."""
        with self._lock:
            self._tables.clear()
            self._persist()

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def documents(self) -> List[str]:
        with self._lock:
            return list(self._tables.keys())

    def scope_names(self, document_id: str) -> List[str]:
        with self._lock:
            return list(self._tables.get(document_id, {}).keys())

    def stored(self, document_id: str, scope_name: str) -> Optional[StoredScope]:
        """Copy of a stored record, or None."""
        with self._lock:
            stored = self._tables.get(document_id, {}).get(scope_name)
            if stored is None:
                return None
            return StoredScope(stored.content_hash, stored.range, list(stored.suggestions))

    # -------------------------------------------------------------------------
    # Serialization / durability
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested form of the whole table."""
        with self._lock:
            return {
                document_id: {name: stored.to_dict() for name, stored in table.items()}
                for document_id, table in self._tables.items()
            }

    def load_dict(self, data: Dict[str, Any]) -> None:
        """Replace the in-memory table from its plain form."""
        tables: Dict[str, Dict[str, StoredScope]] = {}
        for document_id, table in data.items():
            tables[document_id] = {
                name: StoredScope.from_dict(record) for name, record in table.items()
            }
        with self._lock:
            self._tables = tables

    def load(self) -> int:
        """
        Rehydrate from the slot.

        Malformed content is treated as an empty cache.

        Returns:
            Number of documents loaded
        """
        if self._slot is None:
            return 0

        data = self._slot.read()
        if not data:
            return 0

        try:
            self.load_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding malformed suggestion cache: %s", e)
            with self._lock:
                self._tables = {}
            return 0

        return len(self._tables)

    def _persist(self) -> None:
        if self._slot is None:
            return
        try:
            self._slot.write(self.to_dict())
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist suggestion cache: %s", e)
