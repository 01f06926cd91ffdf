"""
Core types — The data model shared by every pipeline stage

Ephemeral (recomputed every pass):
- CodeScope: a named, analyzable unit of source with its range and text
- DocumentSymbol / Diagnostic: what the host providers hand us

Persistent (owned by the SuggestionCache):
- StoredScope: content hash + current range + suggestions for one scope
- Suggestion: one reviewer suggestion, always bound to exactly one scope

Positions are 0-based (line, character) pairs, the convention editors
use for their symbol and diagnostic APIs.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Dict, Any


class ScopeKind(Enum):
    """Kind of analyzable scope."""
    FUNCTION = "function"
    METHOD = "method"
    CLASS = "class"
    BLOCK = "block"


class SuggestionKind(Enum):
    """Category of an improvement suggestion."""
    REFACTOR = "refactor"
    EFFICIENCY = "efficiency"
    IDIOM = "idiom"
    STYLE = "style"

    @classmethod
    def parse(cls, value: Any) -> 'SuggestionKind':
        """Parse a raw kind, falling back to REFACTOR for anything unknown."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.REFACTOR


class SymbolKind(Enum):
    """Symbol kinds reported by a symbol provider (editor symbol API subset)."""
    FILE = "file"
    MODULE = "module"
    NAMESPACE = "namespace"
    PACKAGE = "package"
    CLASS = "class"
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    CONSTRUCTOR = "constructor"
    ENUM = "enum"
    INTERFACE = "interface"
    FUNCTION = "function"
    VARIABLE = "variable"
    CONSTANT = "constant"
    TYPE_PARAMETER = "type_parameter"


class Severity(Enum):
    """Diagnostic severity. Only ERROR matters to the pipeline."""
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True, order=True)
class Position:
    """A 0-based (line, character) location in a document."""
    line: int
    character: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "character": self.character}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Position':
        return cls(line=int(data["line"]), character=int(data["character"]))


@dataclass(frozen=True)
class SourceRange:
    """
    A (start, end) pair of positions over one document version.

    Ranges go stale as soon as the document changes elsewhere; the
    cache re-syncs them on every no-op re-analysis.
    """
    start: Position
    end: Position

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}")

    @classmethod
    def of(cls, start_line: int, start_character: int,
           end_line: int, end_character: int) -> 'SourceRange':
        """Build a range from four integers."""
        return cls(Position(start_line, start_character), Position(end_line, end_character))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains_line(self, line: int) -> bool:
        """True if line lies between the start and end lines, inclusive."""
        return self.start.line <= line <= self.end.line

    def intersects(self, other: 'SourceRange') -> bool:
        """
        True if the two ranges share at least one position.

        Closed on both ends, so a zero-width range sitting inside or on
        the boundary of this range counts as intersecting.
        """
        return self.start <= other.end and other.start <= self.end

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SourceRange':
        return cls(start=Position.from_dict(data["start"]), end=Position.from_dict(data["end"]))


@dataclass(frozen=True)
class CodeScope:
    """A named unit of code the reviewer can look at. Name is the cache key."""
    kind: ScopeKind
    name: str
    range: SourceRange
    content: str


@dataclass(frozen=True)
class Suggestion:
    """
    One reviewer suggestion.

    scope_name and range are empty until the cache stamps them; a
    suggestion never tracks its own position independently of its scope.
    suggested_code is None when the reviewer offered no code, which is
    not the same thing as offering empty code.
    """
    id: str
    kind: SuggestionKind
    title: str
    description: str
    suggested_code: Optional[str] = None
    scope_name: str = ""
    range: Optional[SourceRange] = None
    created_at: str = ""

    def stamped(self, scope_name: str, range: SourceRange) -> 'Suggestion':
        """Copy bound to a scope name and range."""
        return replace(self, scope_name=scope_name, range=range)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scope_name": self.scope_name,
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "suggested_code": self.suggested_code,
            "range": self.range.to_dict() if self.range else None,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Suggestion':
        raw_range = data.get("range")
        return cls(
            id=str(data["id"]),
            kind=SuggestionKind.parse(data.get("kind")),
            title=data.get("title", ""),
            description=data.get("description", ""),
            suggested_code=data.get("suggested_code"),
            scope_name=data.get("scope_name", ""),
            range=SourceRange.from_dict(raw_range) if raw_range else None,
            created_at=data.get("created_at", ""),
        )


@dataclass
class StoredScope:
    """Cache record for one (document, scope name) pair."""
    content_hash: str
    range: SourceRange
    suggestions: List[Suggestion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content_hash": self.content_hash,
            "range": self.range.to_dict(),
            "suggestions": [s.to_dict() for s in self.suggestions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StoredScope':
        return cls(
            content_hash=str(data["content_hash"]),
            range=SourceRange.from_dict(data["range"]),
            suggestions=[Suggestion.from_dict(s) for s in data.get("suggestions", [])],
        )


@dataclass
class DocumentSymbol:
    """One node of the symbol tree a symbol provider returns."""
    name: str
    kind: SymbolKind
    range: SourceRange
    children: List['DocumentSymbol'] = field(default_factory=list)


@dataclass(frozen=True)
class Diagnostic:
    """A problem a diagnostics provider reports over a range."""
    range: SourceRange
    severity: Severity = Severity.ERROR
    message: str = ""


@dataclass
class Document:
    """
    Snapshot of an open document.

    uri is the canonical identity used to key the cache. Text access by
    range follows editor semantics: characters past the end of a line
    clamp to the line end, lines past the end clamp to the document end.
    """
    uri: str
    text: str
    language_id: str = ""
    version: int = 0
    _line_starts: List[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        starts = [0]
        for index, char in enumerate(self.text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts = starts

    @classmethod
    def from_path(cls, path: Path, language_id: str = "", version: int = 0) -> 'Document':
        """Load a document from disk, keyed by its file URI."""
        path = Path(path).resolve()
        text = path.read_text(encoding="utf-8", errors="replace")
        return cls(uri=path.as_uri(), text=text, language_id=language_id, version=version)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_text(self, line: int) -> str:
        """Text of one line without its line terminator."""
        if line < 0 or line >= self.line_count:
            return ""
        start = self._line_starts[line]
        end = self._line_starts[line + 1] if line + 1 < self.line_count else len(self.text)
        return self.text[start:end].rstrip("\r\n")

    def offset_at(self, position: Position) -> int:
        """Character offset of a position, clamped to the document."""
        if position.line < 0:
            return 0
        if position.line >= self.line_count:
            return len(self.text)
        start = self._line_starts[position.line]
        return start + min(max(position.character, 0), len(self.line_text(position.line)))

    def get_text(self, range: Optional[SourceRange] = None) -> str:
        """Text covered by a range, or the whole document."""
        if range is None:
            return self.text
        return self.text[self.offset_at(range.start):self.offset_at(range.end)]
