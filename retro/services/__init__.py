"""
Services — External collaborators

- providers: Claude / OpenAI / Mock reviewer providers
- reviewer: ReviewClient, the never-throwing adapter the pipeline calls
"""

from .providers import (
    ReviewProvider, ReviewRequest,
    ClaudeReviewProvider, OpenAIReviewProvider, MockReviewProvider,
    get_provider, get_provider_status,
)
from .reviewer import ReviewClient, ReviewResult, map_suggestions

__all__ = [
    'ReviewProvider', 'ReviewRequest',
    'ClaudeReviewProvider', 'OpenAIReviewProvider', 'MockReviewProvider',
    'get_provider', 'get_provider_status',
    'ReviewClient', 'ReviewResult', 'map_suggestions',
]
