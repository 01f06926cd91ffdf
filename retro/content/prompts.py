"""
Prompt templates and the structured-output contract for reviewers.

Text is data: providers import these instead of embedding prompts.
"""

from typing import Any, Dict

MAX_SUGGESTIONS = 4
TITLE_MAX_LENGTH = 60
SUGGESTION_KINDS = ["refactor", "efficiency", "idiom", "style"]

REVIEW_TOOL_NAME = "provide_suggestions"
REVIEW_TOOL_DESCRIPTION = "Provide code improvement suggestions"


def build_review_prompt(code: str, context: str, language: str, max_suggestions: int = MAX_SUGGESTIONS) -> str:
    """User message asking for a review of one scope."""
    return f"""Analyze this {language} code and provide actionable suggestions for improvement.

Context (imports and surrounding code):
{context}

Code to analyze:
{code}

Provide 1-{max_suggestions} suggestions focusing on:
- More idiomatic {language} patterns
- Efficiency improvements
- Cleaner/more readable code
- Potential bugs or edge cases

Always provide at least one suggestion, even if minor (e.g., adding type annotations, improving variable names, or adding error handling)."""


def suggestions_schema(max_suggestions: int = MAX_SUGGESTIONS) -> Dict[str, Any]:
    """JSON schema of the tool input: a bounded list of typed suggestions."""
    return {
        "type": "object",
        "properties": {
            "suggestions": {
                "type": "array",
                "minItems": 1,
                "maxItems": max_suggestions,
                "items": {
                    "type": "object",
                    "properties": {
                        "kind": {
                            "type": "string",
                            "enum": SUGGESTION_KINDS,
                        },
                        "title": {
                            "type": "string",
                            "maxLength": TITLE_MAX_LENGTH,
                            "description": f"Brief summary under {TITLE_MAX_LENGTH} chars",
                        },
                        "description": {
                            "type": "string",
                            "description": "Detailed explanation",
                        },
                        "suggested_code": {
                            "type": "string",
                            "description": "The improved code",
                        },
                    },
                    "required": ["kind", "title", "description"],
                },
            },
        },
        "required": ["suggestions"],
    }


def anthropic_review_tool(max_suggestions: int = MAX_SUGGESTIONS) -> Dict[str, Any]:
    """Tool definition in Anthropic Messages API shape."""
    return {
        "name": REVIEW_TOOL_NAME,
        "description": REVIEW_TOOL_DESCRIPTION,
        "input_schema": suggestions_schema(max_suggestions),
    }


def openai_review_tool(max_suggestions: int = MAX_SUGGESTIONS) -> Dict[str, Any]:
    """Tool definition in OpenAI chat-completions function-calling shape."""
    return {
        "type": "function",
        "function": {
            "name": REVIEW_TOOL_NAME,
            "description": REVIEW_TOOL_DESCRIPTION,
            "parameters": suggestions_schema(max_suggestions),
        },
    }
