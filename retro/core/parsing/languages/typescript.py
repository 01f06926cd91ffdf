"""
TypeScript language configuration for symbol trees.

Defines TYPESCRIPT_CONFIG (.ts) and TSX_CONFIG (.tsx). Extends the
JavaScript queries with TypeScript-specific declarations.

Additional symbols reported:
- Class: abstract class declarations
- Namespace: `namespace Foo {}` / `module Foo {}` (children recurse)
- Interface / Enum: reported so the tree is complete; never scopes
- Field: public_field_definition inside classes
"""

from ..config import LanguageConfig, SymbolQuery
from .javascript import (
    JAVASCRIPT_QUERIES,
    JAVASCRIPT_WRAPPERS,
    JAVASCRIPT_VARIABLE_TYPES,
    javascript_variable_extractor,
    javascript_kind_refiner,
)
from ...scopes import is_arrow_function_declaration
from ...types import SymbolKind


# =============================================================================
# TypeScript-Specific Symbol Queries
# =============================================================================

TYPESCRIPT_SPECIFIC_QUERIES = [
    SymbolQuery(node_type="abstract_class_declaration", symbol_kind=SymbolKind.CLASS, body_field="body"),
    SymbolQuery(node_type="public_field_definition", symbol_kind=SymbolKind.FIELD),
    SymbolQuery(node_type="internal_module", symbol_kind=SymbolKind.NAMESPACE, body_field="body"),
    SymbolQuery(node_type="module", symbol_kind=SymbolKind.NAMESPACE, body_field="body"),
    SymbolQuery(node_type="interface_declaration", symbol_kind=SymbolKind.INTERFACE),
    SymbolQuery(node_type="enum_declaration", symbol_kind=SymbolKind.ENUM),
]

# Combine JavaScript queries with TypeScript-specific ones
TYPESCRIPT_QUERIES = JAVASCRIPT_QUERIES + TYPESCRIPT_SPECIFIC_QUERIES

# `namespace Foo {}` parses as an expression statement; `declare ...` as ambient
TYPESCRIPT_WRAPPERS = JAVASCRIPT_WRAPPERS | {"expression_statement", "ambient_declaration"}


# =============================================================================
# Configuration
# =============================================================================

TYPESCRIPT_CONFIG = LanguageConfig(
    name="TypeScript",
    tree_sitter_name="typescript",
    extensions={'.ts', '.mts', '.cts'},
    language_ids={'typescript'},
    review_language="typescript",
    symbol_queries=TYPESCRIPT_QUERIES,
    wrapper_types=TYPESCRIPT_WRAPPERS,
    variable_types=JAVASCRIPT_VARIABLE_TYPES,
    variable_extractor=javascript_variable_extractor,
    kind_refiner=javascript_kind_refiner,
    binding_detector=is_arrow_function_declaration,
)

TSX_CONFIG = LanguageConfig(
    name="TSX",
    tree_sitter_name="tsx",
    extensions={'.tsx'},
    language_ids={'typescriptreact'},
    review_language="typescript",
    symbol_queries=TYPESCRIPT_QUERIES,
    wrapper_types=TYPESCRIPT_WRAPPERS,
    variable_types=JAVASCRIPT_VARIABLE_TYPES,
    variable_extractor=javascript_variable_extractor,
    kind_refiner=javascript_kind_refiner,
    binding_detector=is_arrow_function_declaration,
)
