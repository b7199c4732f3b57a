"""Sifter agents that turn article text into classified claims.

- ClaimExtractionAgent: Text -> Claim objects
- ClaimClassificationAgent: Claim -> ClassifiedClaim

All sifters inherit from BaseSifter and implement the sift() method.
"""

from truthcheck_system.agents.sifters.base_sifter import BaseSifter
from truthcheck_system.agents.sifters.claim_classification_agent import ClaimClassificationAgent
from truthcheck_system.agents.sifters.claim_extraction_agent import ClaimExtractionAgent

__all__ = [
    "BaseSifter",
    "ClaimClassificationAgent",
    "ClaimExtractionAgent",
]
