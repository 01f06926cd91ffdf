"""
Language configurations for symbol trees.

Each language has its own module defining:
- Symbol queries (what AST nodes become symbols)
- Wrapper and declaration node types
- Hooks (variable bindings, kind refinement, function-binding detection)

Supported languages:
- javascript.py: JavaScript (.js, .jsx, .mjs, .cjs)
- typescript.py: TypeScript (.ts) and TSX (.tsx)
- python.py: Python (.py)
"""

from .javascript import JAVASCRIPT_CONFIG
from .typescript import TYPESCRIPT_CONFIG, TSX_CONFIG
from .python import PYTHON_CONFIG

__all__ = [
    'JAVASCRIPT_CONFIG',
    'TYPESCRIPT_CONFIG',
    'TSX_CONFIG',
    'PYTHON_CONFIG',
]
