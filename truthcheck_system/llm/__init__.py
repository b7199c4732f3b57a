"""Remote language-model collaborators.

- GeminiClient: async single-shot Gemini calls under a shared RateLimiter
- GeminiBatchClassifier: batch claim classification (JSON mode)
- GeminiRater: 0-10 rubric ratings
"""

from truthcheck_system.llm.gemini_client import GeminiClient
from truthcheck_system.llm.rate_limiter import RateLimiter, RateLimitExceeded
from truthcheck_system.llm.remote_services import GeminiBatchClassifier, GeminiRater

__all__ = [
    "GeminiClient",
    "GeminiBatchClassifier",
    "GeminiRater",
    "RateLimiter",
    "RateLimitExceeded",
]
