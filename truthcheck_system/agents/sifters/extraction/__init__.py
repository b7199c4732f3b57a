"""Text-to-claim extraction components.

- NoiseFilter: drops page chrome from scraped text
- SentenceSegmenter: abbreviation- and quote-aware sentence splitting
- QuoteMerger: re-joins quotations and attributions
- ClaimDetector: rule-based check-worthiness predicate
"""

from truthcheck_system.agents.sifters.extraction.claim_detector import (
    ClaimDetector,
    DetectorRule,
)
from truthcheck_system.agents.sifters.extraction.noise_filter import NoiseFilter
from truthcheck_system.agents.sifters.extraction.quote_merger import QuoteMerger
from truthcheck_system.agents.sifters.extraction.sentence_segmenter import (
    SentenceSegmenter,
    locate_sentence,
    normalize_abbreviations,
)

__all__ = [
    "ClaimDetector",
    "DetectorRule",
    "NoiseFilter",
    "QuoteMerger",
    "SentenceSegmenter",
    "locate_sentence",
    "normalize_abbreviations",
]
