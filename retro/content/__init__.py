"""
Content — Static text for reviewers and the CLI

Separates prompt text from logic. Text is data, not code embedded in methods.
"""

from .prompts import (
    MAX_SUGGESTIONS, REVIEW_TOOL_NAME, SUGGESTION_KINDS,
    build_review_prompt, suggestions_schema, anthropic_review_tool, openai_review_tool,
)

__all__ = [
    'MAX_SUGGESTIONS', 'REVIEW_TOOL_NAME', 'SUGGESTION_KINDS',
    'build_review_prompt', 'suggestions_schema', 'anthropic_review_tool', 'openai_review_tool',
]
