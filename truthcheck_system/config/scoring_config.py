"""Scoring configuration for check-worthiness detection and trust aggregation.

Tunables:
- CHECK_WORTHINESS_POINTS: point value awarded per detector signal category
- SCORING_WEIGHTS: per-classification weight vector over the four signals
- HIGH_AUTHORITY_DOMAINS: domains that earn the scholarly authority bonus
- Tier tables for the scholarly and web signals

Weight vectors must each sum to 1.0. The aggregator renormalizes over the
available signals when the language-model signals are missing.
"""

from typing import Dict, List, Tuple

from truthcheck_system.data_management.schemas.claim_schema import ClaimClassification

# Default minimum detector score for a sentence to count as a claim
CHECK_WORTHINESS_THRESHOLD: float = 2.5

# Structural gate: minimum trimmed sentence length
MIN_CLAIM_LENGTH: int = 25

# Segmenter discards trimmed sentences shorter than this
MIN_SENTENCE_LENGTH: int = 20

# Point value per detector signal category.
# measurement and bare_number are mutually exclusive (higher one wins).
CHECK_WORTHINESS_POINTS: Dict[str, float] = {
    "causal": 2.0,
    "epistemic": 2.0,
    "official_action": 2.0,
    "measurement": 2.0,
    "bare_number": 1.0,
    "named_entity": 1.0,
    "temporal": 1.0,
    "attribution": 1.5,
    "comparative": 1.0,
    "modal": 0.5,
    "negation": 0.5,
    "variability": 1.0,
    "consequence": 0.5,
}

# Signal names used in weight vectors
AI_RATING = "ai_rating"
TONE = "tone"
SCHOLARLY_MATCH = "scholarly_match"
WEB_REINFORCED = "web_reinforced"

SIGNALS: Tuple[str, ...] = (AI_RATING, TONE, SCHOLARLY_MATCH, WEB_REINFORCED)

# Classification -> signal weights
SCORING_WEIGHTS: Dict[ClaimClassification, Dict[str, float]] = {
    ClaimClassification.CURRENT_NEWS: {
        AI_RATING: 0.475,
        TONE: 0.05,
        SCHOLARLY_MATCH: 0.0,
        WEB_REINFORCED: 0.475,
    },
    ClaimClassification.GENERAL_KNOWLEDGE: {
        AI_RATING: 0.475,
        TONE: 0.05,
        SCHOLARLY_MATCH: 0.0,
        WEB_REINFORCED: 0.475,
    },
    ClaimClassification.EMPIRICAL_FACT: {
        AI_RATING: 0.25,
        TONE: 0.05,
        SCHOLARLY_MATCH: 0.45,
        WEB_REINFORCED: 0.25,
    },
}

# Degradation notes attached to renormalized trust scores
NOTE_AI_BOTH_UNAVAILABLE = "AI scorers unavailable - using scholarly + web only"
NOTE_AI_CREDIBILITY_UNAVAILABLE = "AI credibility scorer unavailable"
NOTE_AI_TONE_UNAVAILABLE = "AI tone scorer unavailable"
NOTE_SCORING_FAILED = "Scoring failed - using default values"

# Per-signal timeouts (seconds)
LLM_SCORER_TIMEOUT: float = 10.0
SEARCH_SCORER_TIMEOUT: float = 120.0

# Cache TTL for classifications and signal results (seconds)
CACHE_TTL_SECONDS: int = 86400

# Scholarly signal: (minimum result count, base points), checked top-down
SCHOLAR_RESULT_TIERS: List[Tuple[int, float]] = [
    (15, 5.0),
    (10, 4.0),
    (5, 3.0),
    (2, 2.0),
    (1, 1.0),
]

# Scholarly signal: (minimum authoritative results, bonus points)
SCHOLAR_AUTHORITY_TIERS: List[Tuple[int, float]] = [
    (5, 5.0),
    (3, 3.0),
    (1, 2.0),
]

# Substring match against a result's domain
HIGH_AUTHORITY_DOMAINS: List[str] = [
    "edu",
    "ac.uk",
    "nih.gov",
    "nature.com",
    "science.org",
    "springer.com",
    "ieee.org",
    "acm.org",
    "arxiv.org",
    "pubmed",
    "researchgate.net",
]

# Scholarly query term cap
SCHOLAR_MAX_QUERY_TERMS: int = 15

# Web signal: (maximum source count, base points), checked top-down.
# Anything above the last bound scores WEB_MAX_BASE.
WEB_COUNT_TIERS: List[Tuple[int, float]] = [
    (2, 2.0),
    (5, 4.0),
    (8, 6.0),
]
WEB_MAX_BASE: float = 7.0

# Web signal: lean categories represented -> diversity bonus
WEB_DIVERSITY_BONUS: Dict[int, float] = {
    3: 3.0,
    2: 1.5,
    1: 0.5,
    0: 0.0,
}

SCORE_CEILING: float = 10.0

# Run summary trust bands
HIGH_TRUST_THRESHOLD: float = 7.0
LOW_TRUST_THRESHOLD: float = 3.0


def validate_weights(weights: Dict[ClaimClassification, Dict[str, float]]) -> None:
    """
    Check that every classification has a complete weight vector summing to 1.

    Raises:
        ValueError: If a classification or signal is missing, or a vector
            does not sum to 1 (within 1e-6).
    """
    for classification in ClaimClassification:
        vector = weights.get(classification)
        if vector is None:
            raise ValueError(f"Missing weights for {classification.value}")
        missing = [signal for signal in SIGNALS if signal not in vector]
        if missing:
            raise ValueError(
                f"Weights for {classification.value} missing signals: {missing}"
            )
        total = sum(vector[signal] for signal in SIGNALS)
        if abs(total - 1.0) > 1e-6:
            raise ValueError(
                f"Weights for {classification.value} sum to {total}, expected 1.0"
            )


validate_weights(SCORING_WEIGHTS)
