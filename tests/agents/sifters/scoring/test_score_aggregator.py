"""Tests for ScoreAggregator concurrency, timeouts and fallbacks.

Tests cover:
- Four signals combined into a ScoredClaim with provenance
- Per-signal timeouts substitute defaults while the slow call finishes
- Signal exceptions substitute defaults
- Terminal fallback record on aggregation failure
- Order preservation and idempotent re-scoring through the cache
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from truthcheck_system.agents.sifters.credibility import DomainBiasResolver
from truthcheck_system.agents.sifters.scoring import (
    AIScorer,
    ScholarScorer,
    ScoreAggregator,
    WebScorer,
)
from truthcheck_system.config.scoring_config import (
    NOTE_AI_BOTH_UNAVAILABLE,
    NOTE_AI_CREDIBILITY_UNAVAILABLE,
    NOTE_SCORING_FAILED,
)
from truthcheck_system.data_management.cache import TTLCache
from truthcheck_system.data_management.schemas import (
    UNAVAILABLE,
    ClaimClassification,
    ClassifiedClaim,
    Position,
    SignalResult,
    SourceRecord,
    SpectrumCounts,
)


def make_claim(claim_id, text, classification=ClaimClassification.CURRENT_NEWS):
    return ClassifiedClaim(
        id=claim_id,
        text=text,
        position=Position(start=0, end=len(text)),
        classification=classification,
    )


def source(domain):
    return SourceRecord(url=f"https://{domain}/x", domain=domain)


@pytest.fixture
def claim():
    return make_claim(1, "The FDA advised consumers to discard recalled cinnamon on Tuesday.")


@pytest.fixture
def ai_scorer():
    mock = MagicMock()
    mock.credibility = AsyncMock(return_value=8.0)
    mock.tone = AsyncMock(return_value=8.0)
    return mock


@pytest.fixture
def scholar_scorer():
    mock = MagicMock()
    mock.score = AsyncMock(return_value=SignalResult(score=0.0))
    return mock


@pytest.fixture
def web_scorer():
    mock = MagicMock()
    mock.score = AsyncMock(
        return_value=SignalResult(
            score=8.0,
            sources=[source("cnn.com"), source("reuters.com")],
            spectrum=SpectrumCounts(left=1, center=1),
        )
    )
    return mock


@pytest.fixture
def aggregator(ai_scorer, scholar_scorer, web_scorer):
    return ScoreAggregator(ai_scorer, scholar_scorer, web_scorer, llm_timeout=0.5, search_timeout=0.5)


class TestScoreClaim:
    @pytest.mark.asyncio
    async def test_combines_all_signals(self, aggregator, claim, web_scorer):
        scored = await aggregator.score_claim(claim, article_domain="foxnews.com")

        assert scored.id == claim.id
        assert scored.classification is ClaimClassification.CURRENT_NEWS
        assert scored.scores.ai_rating == 8.0
        assert scored.scores.web_reinforced == 8.0
        assert scored.trust_score == 8.0
        assert scored.degradation_note is None
        assert [s.domain for s in scored.sources.web] == ["cnn.com", "reuters.com"]
        assert scored.sources.all == scored.sources.scholar + scored.sources.web
        assert scored.spectrum == SpectrumCounts(left=1, center=1)
        web_scorer.score.assert_awaited_once_with(
            claim.text, ClaimClassification.CURRENT_NEWS, "foxnews.com"
        )

    @pytest.mark.asyncio
    async def test_llm_timeout_substitutes_unavailable(self, claim, ai_scorer, scholar_scorer, web_scorer):
        finished = asyncio.Event()

        async def slow_credibility(text, classification):
            await asyncio.sleep(0.2)
            finished.set()
            return 9.0

        ai_scorer.credibility = AsyncMock(side_effect=slow_credibility)
        aggregator = ScoreAggregator(
            ai_scorer, scholar_scorer, web_scorer, llm_timeout=0.05, search_timeout=1.0
        )

        scored = await aggregator.score_claim(claim)

        assert scored.scores.ai_rating == UNAVAILABLE
        assert scored.degradation_note == NOTE_AI_CREDIBILITY_UNAVAILABLE
        assert not finished.is_set()

        await asyncio.wait_for(finished.wait(), timeout=1.0)
        await asyncio.sleep(0.01)
        assert not aggregator._background

    @pytest.mark.asyncio
    async def test_search_timeout_substitutes_zero(self, claim, ai_scorer, scholar_scorer, web_scorer):
        async def slow_web(*args):
            await asyncio.sleep(0.2)
            return SignalResult(score=10.0)

        web_scorer.score = AsyncMock(side_effect=slow_web)
        aggregator = ScoreAggregator(
            ai_scorer, scholar_scorer, web_scorer, llm_timeout=1.0, search_timeout=0.05
        )

        scored = await aggregator.score_claim(claim)

        assert scored.scores.web_reinforced == 0.0
        assert scored.sources.web == []
        await asyncio.sleep(0.25)

    @pytest.mark.asyncio
    async def test_signal_exception_substitutes_default(self, aggregator, claim, ai_scorer):
        ai_scorer.credibility.side_effect = RuntimeError("boom")
        ai_scorer.tone.side_effect = RuntimeError("boom")

        scored = await aggregator.score_claim(claim)

        assert scored.scores.ai_rating == UNAVAILABLE
        assert scored.scores.tone == UNAVAILABLE
        assert scored.degradation_note == NOTE_AI_BOTH_UNAVAILABLE
        assert scored.trust_score == 8.0

    @pytest.mark.asyncio
    async def test_aggregation_failure_yields_fallback_record(self, ai_scorer, scholar_scorer, web_scorer, claim):
        calculator = MagicMock()
        calculator.calculate.side_effect = RuntimeError("bad weights")
        aggregator = ScoreAggregator(ai_scorer, scholar_scorer, web_scorer, calculator=calculator)

        scored = await aggregator.score_claim(claim)

        assert scored.id == claim.id
        assert scored.trust_score == 0.0
        assert scored.degradation_note == NOTE_SCORING_FAILED
        assert scored.scores.ai_rating == UNAVAILABLE
        assert scored.scores.tone == UNAVAILABLE
        assert scored.scores.scholarly_match == 0.0
        assert scored.scores.web_reinforced == 0.0


class TestScoreClaims:
    @pytest.mark.asyncio
    async def test_preserves_order_and_count(self, ai_scorer, scholar_scorer, web_scorer):
        delays = {1: 0.05, 2: 0.0, 3: 0.02}
        claims = [make_claim(i, f"Claim number {i} about the recall in 2024.") for i in delays]

        async def credibility(text, classification):
            claim_id = int(text.split()[2])
            await asyncio.sleep(delays[claim_id])
            return float(claim_id)

        ai_scorer.credibility = AsyncMock(side_effect=credibility)
        aggregator = ScoreAggregator(ai_scorer, scholar_scorer, web_scorer)

        scored = await aggregator.score_claims(claims)

        assert [s.id for s in scored] == [1, 2, 3]
        assert [s.scores.ai_rating for s in scored] == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_empty(self, aggregator):
        assert await aggregator.score_claims([]) == []

    @pytest.mark.asyncio
    async def test_rescoring_is_idempotent_through_cache(self):
        cache = TTLCache()
        rater = MagicMock()
        rater.rate = AsyncMock(return_value=7.0)
        scholar_provider = MagicMock()
        scholar_provider.search = AsyncMock(return_value=[source("nih.gov"), source("mit.edu")])
        web_provider = MagicMock()
        web_provider.search = AsyncMock(return_value=[source("cnn.com"), source("foxnews.com")])

        aggregator = ScoreAggregator(
            AIScorer(rater=rater, cache=cache),
            ScholarScorer(provider=scholar_provider, cache=cache),
            WebScorer(provider=web_provider, resolver=DomainBiasResolver(), cache=cache),
        )
        claims = [
            make_claim(1, "Lead exposure causes developmental delays in children.", ClaimClassification.EMPIRICAL_FACT)
        ]

        first = await aggregator.score_claims(claims)
        second = await aggregator.score_claims(claims)

        assert first[0].model_dump() == second[0].model_dump()
        assert rater.rate.await_count == 2
        assert scholar_provider.search.await_count == 1
        assert web_provider.search.await_count == 1
        assert first[0].scores.scholarly_match == 4.0
        assert first[0].scores.web_reinforced == 3.5
