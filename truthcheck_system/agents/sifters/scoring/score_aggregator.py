"""Concurrent evidence scoring and trust aggregation per claim.

For each claim the four signals run concurrently, each raced against its
own timeout. A signal that times out is replaced by its default (UNAVAILABLE
for ai_rating/tone, score 0 with no sources for scholarly/web); the slow
call keeps running in the background so its cache write still lands, but
its result is discarded.

Any failure while scoring a claim produces a terminal fallback record with
trust 0 and a note, so N claims in always means N scored records out.
"""

import asyncio
from typing import Any, Awaitable, List, Optional, Set, TypeVar

import structlog

from truthcheck_system.agents.sifters.scoring.ai_scorer import AIScorer
from truthcheck_system.agents.sifters.scoring.scholar_scorer import ScholarScorer
from truthcheck_system.agents.sifters.scoring.trust_calculator import TrustCalculator
from truthcheck_system.agents.sifters.scoring.web_scorer import WebScorer
from truthcheck_system.config.scoring_config import (
    LLM_SCORER_TIMEOUT,
    NOTE_SCORING_FAILED,
    SEARCH_SCORER_TIMEOUT,
)
from truthcheck_system.data_management.schemas import (
    UNAVAILABLE,
    ClassifiedClaim,
    ScoredClaim,
    SignalResult,
    SignalScores,
    SourceBundle,
)

T = TypeVar("T")


class ScoreAggregator:
    """
    Runs the evidence scorers for each claim and combines them.

    Usage:
        aggregator = ScoreAggregator(ai_scorer, scholar_scorer, web_scorer)
        scored = await aggregator.score_claims(classified, article_domain="cnn.com")

    Attributes:
        llm_timeout: Timeout for ai_rating and tone
        search_timeout: Timeout for scholarly and web signals
    """

    def __init__(
        self,
        ai_scorer: AIScorer,
        scholar_scorer: ScholarScorer,
        web_scorer: WebScorer,
        calculator: Optional[TrustCalculator] = None,
        llm_timeout: float = LLM_SCORER_TIMEOUT,
        search_timeout: float = SEARCH_SCORER_TIMEOUT,
    ) -> None:
        self.ai_scorer = ai_scorer
        self.scholar_scorer = scholar_scorer
        self.web_scorer = web_scorer
        self.calculator = calculator or TrustCalculator()
        self.llm_timeout = llm_timeout
        self.search_timeout = search_timeout
        self._background: Set[asyncio.Task] = set()
        self._logger = structlog.get_logger().bind(component="ScoreAggregator")

    async def score_claims(
        self,
        claims: List[ClassifiedClaim],
        article_domain: Optional[str] = None,
    ) -> List[ScoredClaim]:
        """Score all claims concurrently. Output order matches input order."""
        if not claims:
            return []
        return list(
            await asyncio.gather(
                *(self.score_claim(claim, article_domain) for claim in claims)
            )
        )

    async def score_claim(
        self,
        claim: ClassifiedClaim,
        article_domain: Optional[str] = None,
    ) -> ScoredClaim:
        """Score one claim. Never raises."""
        try:
            return await self._score(claim, article_domain)
        except Exception as e:
            self._logger.warning(
                "claim_scoring_failed", claim_id=claim.id, error=str(e)
            )
            return self.fallback_record(claim)

    async def _score(
        self, claim: ClassifiedClaim, article_domain: Optional[str]
    ) -> ScoredClaim:
        text = claim.text
        classification = claim.classification

        ai_rating, tone, scholar, web = await asyncio.gather(
            self._with_timeout(
                self.ai_scorer.credibility(text, classification),
                self.llm_timeout, UNAVAILABLE, "ai_rating", claim.id,
            ),
            self._with_timeout(
                self.ai_scorer.tone(text, classification),
                self.llm_timeout, UNAVAILABLE, "tone", claim.id,
            ),
            self._with_timeout(
                self.scholar_scorer.score(text, classification),
                self.search_timeout, SignalResult(), "scholarly_match", claim.id,
            ),
            self._with_timeout(
                self.web_scorer.score(text, classification, article_domain),
                self.search_timeout, SignalResult(), "web_reinforced", claim.id,
            ),
        )

        scores = SignalScores(
            ai_rating=ai_rating,
            tone=tone,
            scholarly_match=scholar.score,
            web_reinforced=web.score,
        )
        trust = self.calculator.calculate(scores, classification)

        if trust.degradation_note:
            self._logger.warning(
                "trust_score_degraded", claim_id=claim.id, note=trust.degradation_note
            )
        self._logger.info(
            "trust_score_computed",
            claim_id=claim.id,
            classification=classification.value,
            trust_score=trust.value,
        )

        return ScoredClaim(
            **claim.model_dump(),
            scores=scores,
            trust_score=trust.value,
            degradation_note=trust.degradation_note,
            sources=SourceBundle(
                scholar=scholar.sources,
                web=web.sources,
                all=[*scholar.sources, *web.sources],
            ),
            spectrum=web.spectrum,
        )

    async def _with_timeout(
        self,
        awaitable: Awaitable[T],
        timeout: float,
        default: T,
        signal: str,
        claim_id: int,
    ) -> T:
        task = asyncio.ensure_future(awaitable)
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError:
            self._logger.warning(
                "signal_timeout", signal=signal, claim_id=claim_id, timeout=timeout
            )
            self._background.add(task)
            task.add_done_callback(self._discard_background)
            return default
        except Exception as e:
            self._logger.warning(
                "signal_failed", signal=signal, claim_id=claim_id, error=str(e)
            )
            return default

    def _discard_background(self, task: "asyncio.Task[Any]") -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            self._logger.debug("late_signal_failed", error=str(task.exception()))

    @staticmethod
    def fallback_record(claim: ClassifiedClaim) -> ScoredClaim:
        """Terminal record for a claim whose scoring failed."""
        return ScoredClaim(
            **claim.model_dump(),
            scores=SignalScores(
                ai_rating=UNAVAILABLE,
                tone=UNAVAILABLE,
                scholarly_match=0.0,
                web_reinforced=0.0,
            ),
            trust_score=0.0,
            degradation_note=NOTE_SCORING_FAILED,
        )
