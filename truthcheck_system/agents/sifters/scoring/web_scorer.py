"""Web cross-source reinforcement signal.

The claim text is searched on the web, results from the article's own
domain (or its subdomains) are dropped, and each remaining result is
classified by political lean. Score = base points from the source count +
a diversity bonus for lean categories represented, capped at 10 and
rounded to one decimal.
"""

from typing import List, Optional, Sequence

import structlog

from truthcheck_system.agents.sifters.credibility.bias_resolver import (
    DomainBiasResolver,
    normalize_host,
)
from truthcheck_system.agents.sifters.scoring.protocols import KeyValueCache, WebSearchProvider
from truthcheck_system.config.media_bias import CENTER, LEFT, RIGHT
from truthcheck_system.config.scoring_config import (
    CACHE_TTL_SECONDS,
    SCORE_CEILING,
    WEB_COUNT_TIERS,
    WEB_DIVERSITY_BONUS,
    WEB_MAX_BASE,
)
from truthcheck_system.data_management.cache import WEB_REINFORCEMENT_KEY, make_cache_key
from truthcheck_system.data_management.schemas import (
    ClaimClassification,
    SignalResult,
    SourceRecord,
    SpectrumCounts,
)


def calculate_web_score(spectrum: SpectrumCounts, total: int) -> float:
    """
    Source-count base plus diversity bonus.

    Example:
        9 sources, 3 left / 3 center / 3 right -> 7 + 3 = 10.0
    """
    if total <= 0:
        return 0.0

    base = WEB_MAX_BASE
    for maximum, points in WEB_COUNT_TIERS:
        if total <= maximum:
            base = points
            break

    bonus = WEB_DIVERSITY_BONUS.get(spectrum.represented, 0.0)
    return round(min(base + bonus, SCORE_CEILING), 1)


def is_same_site(host: str, article_host: str) -> bool:
    """True if host equals article_host or is a subdomain of it."""
    return bool(article_host) and (host == article_host or host.endswith("." + article_host))


class WebScorer:
    """
    Scores claims by cross-spectrum web corroboration.

    Unfiltered search results (score, sources, spectrum) are cached under
    (web-reinforcement, classification, claim text). The article-domain
    filter and the score are applied on every call, so one cached search
    serves claims from different articles.
    """

    def __init__(
        self,
        provider: WebSearchProvider,
        resolver: DomainBiasResolver,
        cache: KeyValueCache,
        max_results: int = 15,
        cache_ttl: int = CACHE_TTL_SECONDS,
    ) -> None:
        self._provider = provider
        self._resolver = resolver
        self._cache = cache
        self._max_results = max_results
        self._cache_ttl = cache_ttl
        self._logger = structlog.get_logger().bind(component="WebScorer")

    def analyze_spectrum(self, results: Sequence[SourceRecord]) -> SpectrumCounts:
        """Count results per political lean."""
        spectrum = SpectrumCounts()
        for result in results:
            lean = self._resolver.classify(result.domain or result.url)
            if lean == LEFT:
                spectrum.left += 1
            elif lean == CENTER:
                spectrum.center += 1
            elif lean == RIGHT:
                spectrum.right += 1
            else:
                spectrum.unknown += 1
        return spectrum

    def exclude_article_domain(
        self, results: Sequence[SourceRecord], exclude_domain: Optional[str]
    ) -> List[SourceRecord]:
        """Drop results hosted on the article's own site."""
        article_host = normalize_host(exclude_domain or "")
        if not article_host:
            return list(results)
        return [
            result
            for result in results
            if not is_same_site(normalize_host(result.domain or result.url), article_host)
        ]

    async def score(
        self,
        claim_text: str,
        classification: ClaimClassification,
        exclude_domain: Optional[str] = None,
    ) -> SignalResult:
        """
        Score a claim.

        Args:
            claim_text: Claim text (used as the search query)
            classification: Claim classification (part of the cache key)
            exclude_domain: Article domain or URL whose results are ignored

        Returns:
            SignalResult; score 0 with no sources on any failure.
        """
        cache_key = make_cache_key(WEB_REINFORCEMENT_KEY, classification.value, claim_text)
        cached = self._cache.get(cache_key)

        try:
            if cached is not None:
                self._logger.debug("web_cache_hit")
                results = SignalResult.model_validate(cached).sources
            else:
                results = await self._provider.search(claim_text, self._max_results)
                self._cache.set(
                    cache_key, self._build_result(results).model_dump(), self._cache_ttl
                )
            filtered = self.exclude_article_domain(results, exclude_domain)
            result = self._build_result(filtered)
        except Exception as e:
            self._logger.warning("web_scoring_failed", error=str(e))
            return SignalResult()

        self._logger.info(
            "web_scored",
            total=len(filtered),
            excluded=len(results) - len(filtered),
            left=result.spectrum.left,
            center=result.spectrum.center,
            right=result.spectrum.right,
            unknown=result.spectrum.unknown,
            score=result.score,
        )
        return result

    def _build_result(self, results: Sequence[SourceRecord]) -> SignalResult:
        spectrum = self.analyze_spectrum(results)
        return SignalResult(
            score=calculate_web_score(spectrum, len(results)),
            sources=list(results),
            spectrum=spectrum,
        )
