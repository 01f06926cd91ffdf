"""
JavaScript language configuration for symbol trees.

Defines JAVASCRIPT_CONFIG with tree-sitter queries and hooks for
JavaScript files (.js, .jsx, .mjs, .cjs).

Symbols reported:
- Class: class declarations (children: methods, fields)
- Method / Constructor: method definitions inside classes
- Function: function and generator declarations
- Variable: each declarator of const/let/var (range starts at the name)
"""

from typing import List, Tuple, Any

from ..config import LanguageConfig, SymbolQuery
from ...scopes import is_arrow_function_declaration
from ...types import SymbolKind


# =============================================================================
# Symbol Queries
# =============================================================================

JAVASCRIPT_QUERIES = [
    # class Foo {}
    SymbolQuery(node_type="class_declaration", symbol_kind=SymbolKind.CLASS, body_field="body"),
    # function foo() {}
    SymbolQuery(node_type="function_declaration", symbol_kind=SymbolKind.FUNCTION),
    # function* foo() {}
    SymbolQuery(node_type="generator_function_declaration", symbol_kind=SymbolKind.FUNCTION),
    # Methods inside class bodies
    SymbolQuery(node_type="method_definition", symbol_kind=SymbolKind.METHOD),
    # Class fields: foo = 1 / foo = () => {}
    SymbolQuery(node_type="field_definition", symbol_kind=SymbolKind.FIELD, name_field="property"),
]

# export function foo() {} -> the export keyword belongs to the declaration
JAVASCRIPT_WRAPPERS = {"export_statement"}

JAVASCRIPT_VARIABLE_TYPES = {"lexical_declaration", "variable_declaration"}


# =============================================================================
# Custom Hooks
# =============================================================================

def javascript_variable_extractor(node: Any, source: bytes) -> List[Tuple[str, Any]]:
    """
    One (name, declarator) pair per simple identifier binding.

    Destructuring patterns (`const {a, b} = ...`) are skipped.
    """
    bindings = []
    for child in node.named_children:
        if child.type != "variable_declarator":
            continue
        name_node = child.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier":
            continue
        bindings.append((source[name_node.start_byte:name_node.end_byte].decode("utf-8"), child))
    return bindings


def javascript_kind_refiner(kind: SymbolKind, name: str) -> SymbolKind:
    """`constructor` methods are reported as constructors, not methods."""
    if kind == SymbolKind.METHOD and name == "constructor":
        return SymbolKind.CONSTRUCTOR
    return kind


# =============================================================================
# Configuration
# =============================================================================

JAVASCRIPT_CONFIG = LanguageConfig(
    name="JavaScript",
    tree_sitter_name="javascript",
    extensions={'.js', '.jsx', '.mjs', '.cjs'},
    language_ids={'javascript', 'javascriptreact'},
    review_language="javascript",
    symbol_queries=JAVASCRIPT_QUERIES,
    wrapper_types=JAVASCRIPT_WRAPPERS,
    variable_types=JAVASCRIPT_VARIABLE_TYPES,
    variable_extractor=javascript_variable_extractor,
    kind_refiner=javascript_kind_refiner,
    binding_detector=is_arrow_function_declaration,
)
