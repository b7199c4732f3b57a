"""Scholarly-corroboration signal.

Only empirical_fact claims are searched; every other classification scores 0
with no sources and never touches the search provider.

Score = base points from result-count tiers + authority bonus from results
whose domain contains a high-authority marker, capped at 10.
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from truthcheck_system.agents.sifters.scoring.protocols import (
    KeyValueCache,
    ScholarSearchProvider,
)
from truthcheck_system.config.scoring_config import (
    CACHE_TTL_SECONDS,
    HIGH_AUTHORITY_DOMAINS,
    SCHOLAR_AUTHORITY_TIERS,
    SCHOLAR_MAX_QUERY_TERMS,
    SCHOLAR_RESULT_TIERS,
    SCORE_CEILING,
)
from truthcheck_system.data_management.cache import SCHOLAR_KEY, make_cache_key
from truthcheck_system.data_management.schemas import (
    ClaimClassification,
    SignalResult,
    SourceRecord,
)

# Organizations placed first in the query
ORGANIZATION_PATTERNS = [
    re.compile(r"\b(FDA|CDC|WHO|EPA|NIH|USDA|HHS|NHS|EMA)\b"),
    re.compile(r"\b(Food and Drug Administration|Centers for Disease Control)\b", re.IGNORECASE),
    re.compile(r"\b(World Health Organization|Environmental Protection Agency)\b", re.IGNORECASE),
    re.compile(r"\b(National Institutes of Health)\b", re.IGNORECASE),
]

MEDICAL_PHRASE_PATTERNS = [
    re.compile(r"elevated\s+levels?\s+of\s+\w+", re.IGNORECASE),
    re.compile(r"blood\s+\w+", re.IGNORECASE),
    re.compile(r"\w+\s+poisoning", re.IGNORECASE),
    re.compile(r"health\s+\w+", re.IGNORECASE),
    re.compile(r"\w+\s+exposure", re.IGNORECASE),
    re.compile(r"\w+\s+contamination", re.IGNORECASE),
]

SUBSTANCE_PATTERN = re.compile(
    r"\b(lead|mercury|arsenic|cadmium|aluminum|asbestos|pesticide|toxin|chemical|metal)\b",
    re.IGNORECASE,
)

KEY_VERB_PATTERN = re.compile(
    r"\b(concluded|contribute|cause|result|indicate|suggest|show|demonstrate|reveal|confirm)\b",
    re.IGNORECASE,
)
MAX_KEY_VERBS = 3

STATISTIC_PATTERNS = [
    re.compile(r"\d+(?:\.\d+)?%"),
    re.compile(r"\d+(?:\.\d+)?\s*(?:million|billion|thousand|percent|ppm|ppb)", re.IGNORECASE),
    re.compile(r"(?:19|20)\d{2}"),
    re.compile(r"\d+(?:\.\d+)?\s*(?:mg|mcg|μg|ml|cc)", re.IGNORECASE),
]

SCIENTIFIC_TERM_PATTERNS = [
    re.compile(r"\b(assessment|study|research|published|findings|evidence|data)\b", re.IGNORECASE),
    re.compile(r"\b(consumption|consuming|ingestion|intake)\b", re.IGNORECASE),
    re.compile(r"\b(products|food|supplement|medication|drug)\b", re.IGNORECASE),
    re.compile(r"\b(risk|hazard|danger|safety|warning)\b", re.IGNORECASE),
    re.compile(r"\b(recall|advisory|alert|notification)\b", re.IGNORECASE),
]
MAX_TERMS_PER_SCIENTIFIC_GROUP = 2

FILLER_WORDS = frozenset({
    "that", "this", "there", "their", "these", "those", "about", "which",
    "where", "while", "would", "could", "should", "during", "listed",
})
LONG_WORD_MIN_LENGTH = 6
MAX_LONG_WORDS = 3


def _matches(pattern: re.Pattern, text: str) -> List[str]:
    return [match.group(0) for match in pattern.finditer(text)]


def _dedupe(terms: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for term in terms:
        term = term.strip()
        if term and term not in seen:
            seen.append(term)
    return seen


def extract_scholar_terms(claim_text: str, max_terms: int = SCHOLAR_MAX_QUERY_TERMS) -> str:
    """
    Build a focused scholarly search query from a claim.

    Organization names come first, followed by medical phrases, substances,
    key verbs, statistics, scientific terms and long content words.
    Terms are deduplicated and capped at max_terms.

    Example:
        >>> extract_scholar_terms("The FDA found elevated levels of lead in cinnamon.")
        'FDA elevated levels of lead lead elevated levels cinnamon.'
    """
    priority: List[str] = []
    for pattern in ORGANIZATION_PATTERNS:
        priority.extend(_matches(pattern, claim_text))

    terms: List[str] = []
    for pattern in MEDICAL_PHRASE_PATTERNS:
        terms.extend(_matches(pattern, claim_text))
    terms.extend(_matches(SUBSTANCE_PATTERN, claim_text))
    terms.extend(_matches(KEY_VERB_PATTERN, claim_text)[:MAX_KEY_VERBS])
    for pattern in STATISTIC_PATTERNS:
        terms.extend(_matches(pattern, claim_text))
    for pattern in SCIENTIFIC_TERM_PATTERNS:
        terms.extend(_matches(pattern, claim_text)[:MAX_TERMS_PER_SCIENTIFIC_GROUP])

    long_words = [
        word
        for word in claim_text.split()
        if len(word) >= LONG_WORD_MIN_LENGTH
        and word.lower() not in FILLER_WORDS
        and word[0].isascii()
        and word[0].isalpha()
    ]
    terms.extend(long_words[:MAX_LONG_WORDS])

    ordered = _dedupe(priority) + _dedupe(terms)
    return " ".join(ordered[:max_terms])


def is_authoritative(domain: str, markers: Sequence[str] = HIGH_AUTHORITY_DOMAINS) -> bool:
    """True if the domain contains any high-authority marker."""
    lowered = domain.lower()
    return any(marker in lowered for marker in markers)


def _tier_points(value: int, tiers: Sequence[Tuple[int, float]]) -> float:
    for minimum, points in tiers:
        if value >= minimum:
            return points
    return 0.0


def calculate_scholar_score(
    results: Sequence[SourceRecord],
    markers: Sequence[str] = HIGH_AUTHORITY_DOMAINS,
) -> float:
    """Result-count tier plus authority bonus, capped at 10. 0 for no results."""
    if not results:
        return 0.0
    base = _tier_points(len(results), SCHOLAR_RESULT_TIERS)
    authority_count = sum(1 for result in results if is_authoritative(result.domain, markers))
    bonus = _tier_points(authority_count, SCHOLAR_AUTHORITY_TIERS)
    return min(base + bonus, SCORE_CEILING)


class ScholarScorer:
    """
    Scores empirical claims by scholarly search coverage.

    Results (score and sources) are cached under
    (scholar, classification, claim text).
    """

    def __init__(
        self,
        provider: ScholarSearchProvider,
        cache: KeyValueCache,
        max_results: int = 20,
        cache_ttl: int = CACHE_TTL_SECONDS,
        authority_domains: Optional[Sequence[str]] = None,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._max_results = max_results
        self._cache_ttl = cache_ttl
        self._authority_domains = list(authority_domains or HIGH_AUTHORITY_DOMAINS)
        self._logger = structlog.get_logger().bind(component="ScholarScorer")

    async def score(
        self, claim_text: str, classification: ClaimClassification
    ) -> SignalResult:
        """
        Score a claim.

        Returns:
            SignalResult; score 0 with no sources for non-empirical claims or
            on any failure.
        """
        if classification != ClaimClassification.EMPIRICAL_FACT:
            self._logger.debug("scholar_skipped", classification=classification.value)
            return SignalResult()

        cache_key = make_cache_key(SCHOLAR_KEY, classification.value, claim_text)
        cached = self._cache.get(cache_key)
        if cached is not None:
            self._logger.debug("scholar_cache_hit")
            return SignalResult.model_validate(cached)

        try:
            query = extract_scholar_terms(claim_text)
            if not query:
                self._logger.warning("scholar_query_empty")
                return SignalResult()

            results = await self._provider.search(query, self._max_results)
            value = calculate_scholar_score(results, self._authority_domains)
        except Exception as e:
            self._logger.warning("scholar_scoring_failed", error=str(e))
            return SignalResult()

        result = SignalResult(score=value, sources=list(results))
        self._cache.set(cache_key, result.model_dump(), self._cache_ttl)
        self._logger.info("scholar_scored", query=query[:80], results=len(results), score=value)
        return result
