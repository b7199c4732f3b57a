"""Prompt templates for the remote language-model collaborators.

Modules:
    classification_prompts: Batch claim classification instructions
    rating_prompts: AI-credibility and tone rubrics
"""

from truthcheck_system.config.prompts.classification_prompts import (
    CLAIM_CLASSIFICATION_INSTRUCTIONS,
    CLAIM_CLASSIFICATION_USER_PROMPT,
)
from truthcheck_system.config.prompts.rating_prompts import (
    CREDIBILITY_RATING_PROMPT,
    TONE_RATING_PROMPT,
)

__all__ = [
    "CLAIM_CLASSIFICATION_INSTRUCTIONS",
    "CLAIM_CLASSIFICATION_USER_PROMPT",
    "CREDIBILITY_RATING_PROMPT",
    "TONE_RATING_PROMPT",
]
