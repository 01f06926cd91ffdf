"""
Python language configuration for symbol trees.

Defines PYTHON_CONFIG with tree-sitter queries for Python files (.py).

Symbols reported:
- Class: class definitions (children: methods, class attributes)
- Function: function definitions (Method when inside a class)
- Variable: module-level `name = ...` assignments (Field inside a class)

Decorated definitions take the decorator into their range.
"""

from typing import List, Tuple, Any

from ..config import LanguageConfig, SymbolQuery
from ...scopes import is_lambda_binding
from ...types import SymbolKind


PYTHON_QUERIES = [
    SymbolQuery(node_type="class_definition", symbol_kind=SymbolKind.CLASS, body_field="body"),
    SymbolQuery(node_type="function_definition", symbol_kind=SymbolKind.FUNCTION),
]


def python_variable_extractor(node: Any, source: bytes) -> List[Tuple[str, Any]]:
    """(name, assignment) for `name = value` statements with a plain identifier target."""
    bindings = []
    for child in node.named_children:
        if child.type != "assignment":
            continue
        left = child.child_by_field_name("left")
        if left is None or left.type != "identifier":
            continue
        bindings.append((source[left.start_byte:left.end_byte].decode("utf-8"), child))
    return bindings


PYTHON_CONFIG = LanguageConfig(
    name="Python",
    tree_sitter_name="python",
    extensions={'.py', '.pyw'},
    language_ids={'python'},
    review_language="python",
    symbol_queries=PYTHON_QUERIES,
    wrapper_types={"decorated_definition"},
    variable_types={"expression_statement"},
    variable_extractor=python_variable_extractor,
    binding_detector=is_lambda_binding,
)
