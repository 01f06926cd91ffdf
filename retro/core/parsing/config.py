"""
Parsing configuration data structures.

Defines LanguageConfig and SymbolQuery — the per-language rules that turn
a tree-sitter syntax tree into an editor-style symbol tree.

Design principle: New languages are added via config, not code changes.
"""

from dataclasses import dataclass, field
from typing import Set, List, Dict, Callable, Optional, Tuple, Any

from ..scopes import BindingDetector, is_arrow_function_declaration
from ..types import SymbolKind


@dataclass
class SymbolQuery:
    """
    Maps one tree-sitter node type to a symbol kind.

    Attributes:
        node_type: Tree-sitter AST node type (e.g., "function_declaration")
        symbol_kind: Kind reported for matching nodes
        name_field: AST field containing the symbol name
        body_field: AST field whose named children become the symbol's
            children (classes, namespaces); None for leaf symbols
    """
    node_type: str
    symbol_kind: SymbolKind
    name_field: str = "name"
    body_field: Optional[str] = None


# (declaration node, source bytes) -> [(name, node to take the range from)]
VariableExtractor = Callable[[Any, bytes], List[Tuple[str, Any]]]


@dataclass
class LanguageConfig:
    """
    Configuration for building symbol trees for one language.

    Attributes:
        name: Human-readable name (e.g., "TypeScript")
        tree_sitter_name: Grammar name in tree-sitter-language-pack
        extensions: File extensions this config handles (e.g., {'.ts'})
        language_ids: Editor language identifiers (e.g., {'typescript'})
        review_language: Language tag sent to the reviewer
        symbol_queries: Node types that become symbols
        wrapper_types: Node types that are transparent (export statements,
            decorators); their range is used for the wrapped declaration
        variable_types: Declaration node types handled by variable_extractor
        variable_extractor: Hook yielding (name, node) per declared binding
        kind_refiner: Hook to adjust a kind by name (e.g. constructors)
        binding_detector: Decides whether a variable binds a function
        max_file_size: Skip documents larger than this (characters)
    """
    # Identity
    name: str
    tree_sitter_name: str
    extensions: Set[str]
    language_ids: Set[str] = field(default_factory=set)
    review_language: str = ""

    # Extraction rules
    symbol_queries: List[SymbolQuery] = field(default_factory=list)
    wrapper_types: Set[str] = field(default_factory=set)
    variable_types: Set[str] = field(default_factory=set)
    max_file_size: int = 1_000_000

    # Customization hooks (optional)
    variable_extractor: Optional[VariableExtractor] = None
    kind_refiner: Optional[Callable[[SymbolKind, str], SymbolKind]] = None
    binding_detector: BindingDetector = is_arrow_function_declaration

    def __post_init__(self):
        self._queries_by_type: Dict[str, SymbolQuery] = {
            q.node_type: q for q in self.symbol_queries
        }

    def query_for(self, node_type: str) -> Optional[SymbolQuery]:
        """SymbolQuery for a node type, if the node type is a symbol."""
        return self._queries_by_type.get(node_type)

    def matches_extension(self, ext: str) -> bool:
        """Check if this config handles the given extension."""
        return ext.lower() in self.extensions

    @property
    def reviewer_language(self) -> str:
        """Language tag for the reviewer, defaulting to the grammar name."""
        return self.review_language or self.tree_sitter_name
