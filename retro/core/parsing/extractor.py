"""
Tree-sitter providers — Default symbol and diagnostics providers.

The pipeline consumes a symbol tree and a list of error ranges from "the
host". Outside an editor there is no host, so these providers build both
from a tree-sitter parse using tree-sitter-language-pack grammars.

- TreeSitterSymbolProvider: editor-style DocumentSymbol tree
- TreeSitterDiagnosticsProvider: ERROR / missing nodes as error diagnostics

Both share one DocumentParser so a document version is parsed once.

Usage:
    from retro.core.parsing import DocumentParser, TreeSitterSymbolProvider
    from retro.core.parsing.registry import default_registry

    parser = DocumentParser(default_registry())
    symbols = TreeSitterSymbolProvider(parser).symbols(document)
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from .config import LanguageConfig
from .registry import ParserRegistry
from ...errors import ProviderUnavailableError
from ..types import (
    Diagnostic, Document, DocumentSymbol, Position, Severity, SourceRange, SymbolKind,
)

if TYPE_CHECKING:
    from tree_sitter import Parser, Node, Tree

logger = logging.getLogger(__name__)

# Lazy import for tree-sitter to allow graceful degradation
_language_pack_available = None


def _check_language_pack() -> bool:
    """Check if tree-sitter-language-pack is available."""
    global _language_pack_available
    if _language_pack_available is None:
        try:
            import tree_sitter_language_pack  # noqa: F401
            _language_pack_available = True
        except ImportError:
            _language_pack_available = False
    return _language_pack_available


class ParsedDocument:
    """
    A tree-sitter tree plus the helpers to map it back onto the document.

    tree-sitter columns are byte offsets; editors count characters. The
    conversion only does real work on lines containing non-ASCII text.
    """

    def __init__(self, document: Document, config: LanguageConfig, tree: 'Tree', source: bytes):
        self.document = document
        self.config = config
        self.tree = tree
        self.source = source
        self._ascii = document.text.isascii()
        self._lines: Optional[List[bytes]] = None

    def text(self, node: 'Node') -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def position(self, point: Tuple[int, int]) -> Position:
        row, column = point[0], point[1]
        if self._ascii:
            return Position(row, column)
        if self._lines is None:
            self._lines = self.source.split(b"\n")
        line = self._lines[row] if row < len(self._lines) else b""
        return Position(row, len(line[:column].decode("utf-8", errors="ignore")))

    def range(self, node: 'Node') -> SourceRange:
        return SourceRange(self.position(node.start_point), self.position(node.end_point))


class DocumentParser:
    """
    Parses documents with the grammar their LanguageConfig names.

    Parsers are lazy-loaded per grammar. The last parse of each document
    URI is kept and reused while the text is unchanged.
    """

    def __init__(self, registry: ParserRegistry):
        self.registry = registry
        self._parsers: Dict[str, 'Parser'] = {}
        self._last: Dict[str, ParsedDocument] = {}
        self._lock = threading.Lock()

    def _get_parser(self, tree_sitter_name: str) -> Optional['Parser']:
        if tree_sitter_name in self._parsers:
            return self._parsers[tree_sitter_name]

        if not _check_language_pack():
            return None

        from tree_sitter_language_pack import get_parser
        try:
            parser = get_parser(tree_sitter_name)
        except (LookupError, ValueError) as e:
            logger.warning("No tree-sitter grammar for %s: %s", tree_sitter_name, e)
            return None
        self._parsers[tree_sitter_name] = parser
        return parser

    def config_for(self, document: Document) -> Optional[LanguageConfig]:
        return self.registry.get_config_for_document(document)

    def parse(self, document: Document) -> Optional[ParsedDocument]:
        """
        Parse a document.

        Returns:
            ParsedDocument, or None if the language is not supported

        Raises:
            ProviderUnavailableError: Supported language but no usable parser
        """
        config = self.config_for(document)
        if config is None:
            logger.debug("No language config for %s (%s)", document.uri, document.language_id)
            return None

        if len(document.text) > config.max_file_size:
            logger.debug("Skipping %s: larger than %d characters", document.uri, config.max_file_size)
            return None

        with self._lock:
            cached = self._last.get(document.uri)
            if cached is not None and cached.document.text == document.text:
                return cached

            parser = self._get_parser(config.tree_sitter_name)
            if parser is None:
                raise ProviderUnavailableError(
                    f"tree-sitter grammar '{config.tree_sitter_name}' is unavailable"
                )

            source = document.text.encode("utf-8")
            parsed = ParsedDocument(document, config, parser.parse(source), source)
            self._last[document.uri] = parsed
            return parsed


class TreeSitterSymbolProvider:
    """
    Builds a DocumentSymbol tree from a tree-sitter parse.

    Walk rules (driven by LanguageConfig):
    - wrapper node types are transparent; the wrapper's range is used for
      the single declaration it wraps (so `export` / decorators are included)
    - symbol queries produce symbols; body_field children recurse
    - variable declarations yield one symbol per binding, ranged from the
      binding itself (starting at the identifier)
    - functions inside a class body are methods, variables are fields
    - nothing inside a function body is visited
    """

    def __init__(self, parser: DocumentParser):
        self.parser = parser

    def symbols(self, document: Document) -> Optional[List[DocumentSymbol]]:
        """Symbol tree for a document; None if the language is unsupported."""
        parsed = self.parser.parse(document)
        if parsed is None:
            return None
        return self._children(parsed.tree.root_node, parsed, in_class=False)

    def _children(self, node: 'Node', parsed: ParsedDocument, in_class: bool) -> List[DocumentSymbol]:
        symbols: List[DocumentSymbol] = []
        for child in node.named_children:
            symbols.extend(self._from_node(child, parsed, in_class, range_node=child))
        return symbols

    def _from_node(
        self,
        node: 'Node',
        parsed: ParsedDocument,
        in_class: bool,
        range_node: 'Node',
    ) -> List[DocumentSymbol]:
        config = parsed.config

        if node.type in config.variable_types and config.variable_extractor:
            kind = SymbolKind.FIELD if in_class else SymbolKind.VARIABLE
            return [
                DocumentSymbol(name=name, kind=kind, range=parsed.range(binding))
                for name, binding in config.variable_extractor(node, parsed.source)
            ]

        if node.type in config.wrapper_types:
            inner = [
                child for child in node.named_children
                if child.type not in ("decorator", "comment")
            ]
            outer = range_node if len(inner) == 1 else None
            symbols: List[DocumentSymbol] = []
            for child in inner:
                symbols.extend(self._from_node(child, parsed, in_class, range_node=outer or child))
            return symbols

        query = config.query_for(node.type)
        if query is None:
            return []

        name_node = node.child_by_field_name(query.name_field)
        if name_node is None:
            return []
        name = parsed.text(name_node)

        kind = query.symbol_kind
        if in_class and kind == SymbolKind.FUNCTION:
            kind = SymbolKind.METHOD
        if config.kind_refiner:
            kind = config.kind_refiner(kind, name)

        children: List[DocumentSymbol] = []
        if query.body_field:
            body = node.child_by_field_name(query.body_field)
            if body is not None:
                children = self._children(body, parsed, in_class=(kind == SymbolKind.CLASS))

        return [DocumentSymbol(name=name, kind=kind, range=parsed.range(range_node), children=children)]


class TreeSitterDiagnosticsProvider:
    """Reports syntax errors (ERROR and missing nodes) as error diagnostics."""

    def __init__(self, parser: DocumentParser):
        self.parser = parser

    def diagnostics(self, document: Document) -> List[Diagnostic]:
        parsed = self.parser.parse(document)
        if parsed is None or not parsed.tree.root_node.has_error:
            return []

        found: List[Diagnostic] = []
        self._collect(parsed.tree.root_node, parsed, found)
        return found

    def _collect(self, node: 'Node', parsed: ParsedDocument, found: List[Diagnostic]) -> None:
        if node.type == "ERROR":
            found.append(Diagnostic(parsed.range(node), Severity.ERROR, "Syntax error"))
            return
        if node.is_missing:
            found.append(Diagnostic(parsed.range(node), Severity.ERROR, f"Missing {node.type}"))
            return

        for child in node.children:
            if child.has_error or child.is_missing or child.type == "ERROR":
                self._collect(child, parsed, found)
