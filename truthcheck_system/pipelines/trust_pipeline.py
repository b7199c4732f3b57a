"""Trust pipeline: article text to scored claims.

This pipeline orchestrates the full text-to-trust flow:
1. Extract check-worthy claims via ClaimExtractionAgent
2. Classify them via ClaimClassificationAgent (cache-first, one batch call)
3. Score every claim concurrently via ScoreAggregator
4. Record run statistics for summarize()

Features:
- Collaborators injected through the constructor (fakes in tests)
- from_settings() default wiring against Gemini and Serper
- Run-scoped structlog context (run_id, source_url)
- Never raises for a single claim; fallback records are counted
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
import structlog

from truthcheck_system.agents.sifters.claim_classification_agent import ClaimClassificationAgent
from truthcheck_system.agents.sifters.claim_extraction_agent import ClaimExtractionAgent
from truthcheck_system.agents.sifters.credibility import DomainBiasResolver, normalize_host
from truthcheck_system.agents.sifters.extraction import ClaimDetector
from truthcheck_system.agents.sifters.scoring import (
    AIScorer,
    ScholarScorer,
    ScoreAggregator,
    SerperScholarSearchProvider,
    SerperWebSearchProvider,
    WebScorer,
)
from truthcheck_system.config.scoring_config import (
    HIGH_TRUST_THRESHOLD,
    LOW_TRUST_THRESHOLD,
    NOTE_SCORING_FAILED,
)
from truthcheck_system.config.settings import Settings, settings as default_settings
from truthcheck_system.data_management.cache import TTLCache
from truthcheck_system.data_management.schemas import ClaimClassification, ScoredClaim
from truthcheck_system.llm import GeminiBatchClassifier, GeminiClient, GeminiRater, RateLimiter
from truthcheck_system.utils.logging import bind_run_context, clear_run_context, new_run_id


@dataclass
class PipelineStats:
    """Statistics tracking for one pipeline run."""

    claims_extracted: int = 0
    claims_classified: int = 0
    claims_scored: int = 0
    fallback_records: int = 0
    duration_seconds: float = 0.0
    run_id: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "run_id": self.run_id,
            "claims_extracted": self.claims_extracted,
            "claims_classified": self.claims_classified,
            "claims_scored": self.claims_scored,
            "fallback_records": self.fallback_records,
            "duration_seconds": round(self.duration_seconds, 3),
            "error_count": len(self.errors),
        }


def trust_band(value: float) -> str:
    """Band a trust score: high (>= 7), medium (3 to < 7) or low (< 3)."""
    if value >= HIGH_TRUST_THRESHOLD:
        return "high"
    if value >= LOW_TRUST_THRESHOLD:
        return "medium"
    return "low"


class TrustPipeline:
    """
    Wires ClaimExtractionAgent -> ClaimClassificationAgent -> ScoreAggregator.

    Usage:
        pipeline = TrustPipeline.from_settings()
        scored = await pipeline.run(article_text, source_url="https://cnn.com/a")
        print(pipeline.summarize())
        await pipeline.aclose()

    Attributes:
        extraction_agent: Text -> Claim
        classification_agent: Claim -> ClassifiedClaim
        aggregator: ClassifiedClaim -> ScoredClaim
        stats: Statistics of the most recent run
        results: Scored claims of the most recent run
    """

    def __init__(
        self,
        extraction_agent: ClaimExtractionAgent,
        classification_agent: ClaimClassificationAgent,
        aggregator: ScoreAggregator,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            extraction_agent: Configured extraction agent
            classification_agent: Configured classification agent
            aggregator: Configured score aggregator
            http_client: Shared client closed by aclose(), if the pipeline owns one
        """
        self.extraction_agent = extraction_agent
        self.classification_agent = classification_agent
        self.aggregator = aggregator
        self._http_client = http_client

        self.stats = PipelineStats()
        self.results: List[ScoredClaim] = []
        self._logger = structlog.get_logger().bind(component="TrustPipeline")

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        cache: Optional[TTLCache] = None,
        resolver: Optional[DomainBiasResolver] = None,
    ) -> "TrustPipeline":
        """
        Build the default wiring: Gemini for classification and ratings,
        Serper for search, one shared cache and one shared HTTP client.

        Args:
            config: Settings to use (module settings if None)
            cache: Shared cache (a fresh TTLCache if None)
            resolver: Bias resolver (built from the snapshot settings if None)
        """
        config = config or default_settings
        cache = cache or TTLCache(default_ttl=config.cache_ttl_seconds)
        http_client = httpx.AsyncClient(timeout=30.0)

        if resolver is None:
            resolver = DomainBiasResolver(
                snapshot_path=config.bias_snapshot_path,
                http_client=http_client,
            )

        gemini = GeminiClient(
            api_key=config.gemini_api_key,
            model_name=config.gemini_model,
            rate_limiter=RateLimiter(max_requests_per_minute=config.max_rpm, name="gemini"),
        )
        search_limiter = RateLimiter(max_requests_per_minute=config.max_rpm, name="serper")

        extraction_agent = ClaimExtractionAgent(
            max_claims=config.max_claims_per_article,
            detector=ClaimDetector(threshold=config.check_worthiness_threshold),
        )
        classification_agent = ClaimClassificationAgent(
            classifier=GeminiBatchClassifier(gemini),
            cache=cache,
            cache_ttl=config.cache_ttl_seconds,
        )
        aggregator = ScoreAggregator(
            ai_scorer=AIScorer(
                rater=GeminiRater(gemini),
                cache=cache,
                cache_ttl=config.cache_ttl_seconds,
            ),
            scholar_scorer=ScholarScorer(
                provider=SerperScholarSearchProvider(
                    config.serper_api_key,
                    http_client=http_client,
                    rate_limiter=search_limiter,
                ),
                cache=cache,
                max_results=config.scholar_max_results,
                cache_ttl=config.cache_ttl_seconds,
            ),
            web_scorer=WebScorer(
                provider=SerperWebSearchProvider(
                    config.serper_api_key,
                    http_client=http_client,
                    rate_limiter=search_limiter,
                ),
                resolver=resolver,
                cache=cache,
                max_results=config.web_max_results,
                cache_ttl=config.cache_ttl_seconds,
            ),
            llm_timeout=config.llm_scorer_timeout,
            search_timeout=config.search_scorer_timeout,
        )
        return cls(
            extraction_agent,
            classification_agent,
            aggregator,
            http_client=http_client,
        )

    async def run(self, text: str, source_url: Optional[str] = None) -> List[ScoredClaim]:
        """
        Extract, classify and score the claims in one article.

        Args:
            text: Article body
            source_url: Article URL; its domain is excluded from web
                reinforcement results

        Returns:
            ScoredClaims in extraction order ([] for blank text)
        """
        start = time.monotonic()
        run_id = new_run_id()
        self.stats = PipelineStats(run_id=run_id)
        self.results = []

        if not text or not text.strip():
            self._logger.info("pipeline_skipped_empty_text", run_id=run_id)
            return []

        bind_run_context(run_id, source_url)
        try:
            article_domain = normalize_host(source_url) if source_url else None
            self._logger.info("pipeline_started", chars=len(text), article_domain=article_domain)

            claims = self.extraction_agent.extract(text)
            self.stats.claims_extracted = len(claims)
            if not claims:
                self._logger.info("pipeline_no_claims")
                return []

            classified = await self.classification_agent.classify(claims)
            self.stats.claims_classified = len(classified)

            scored = await self.aggregator.score_claims(classified, article_domain)
            self.stats.claims_scored = len(scored)
            self.stats.fallback_records = sum(
                1 for record in scored if record.degradation_note == NOTE_SCORING_FAILED
            )
            if self.stats.fallback_records:
                self.stats.errors.append(
                    f"{self.stats.fallback_records} claim(s) fell back to default scores"
                )

            self.results = scored
            return scored
        finally:
            self.stats.duration_seconds = time.monotonic() - start
            self._logger.info("pipeline_completed", **self.stats.to_dict())
            clear_run_context()

    def summarize(self, results: Optional[List[ScoredClaim]] = None) -> Dict[str, Any]:
        """
        Summarize scored claims (the most recent run's if results is None).

        Returns:
            Dictionary with total_claims, average_trust, trust_bands,
            classifications and spectrum counts.
        """
        records = self.results if results is None else results
        bands = Counter(trust_band(record.trust_score) for record in records)
        classes = Counter(record.classification for record in records)

        spectrum = {"left": 0, "center": 0, "right": 0, "unknown": 0}
        for record in records:
            spectrum["left"] += record.spectrum.left
            spectrum["center"] += record.spectrum.center
            spectrum["right"] += record.spectrum.right
            spectrum["unknown"] += record.spectrum.unknown

        average = (
            round(sum(record.trust_score for record in records) / len(records), 1)
            if records
            else 0.0
        )
        return {
            "total_claims": len(records),
            "average_trust": average,
            "trust_bands": {band: bands.get(band, 0) for band in ("high", "medium", "low")},
            "classifications": {cls.value: classes.get(cls, 0) for cls in ClaimClassification},
            "spectrum": spectrum,
        }

    async def aclose(self) -> None:
        """Close the shared HTTP client, if any."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
