"""End-to-end tests for TrustPipeline with in-memory collaborators.

Tests cover:
- Extract -> classify -> score flow and extraction-order output
- Article-domain exclusion from web reinforcement
- Run statistics and summary bands / classifications / spectrum
- Blank text and no-claim text
- Offline default wiring via from_settings()
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from truthcheck_system.agents.sifters.claim_classification_agent import ClaimClassificationAgent
from truthcheck_system.agents.sifters.claim_extraction_agent import ClaimExtractionAgent
from truthcheck_system.agents.sifters.credibility import DomainBiasResolver
from truthcheck_system.agents.sifters.scoring import (
    AIScorer,
    ScholarScorer,
    ScoreAggregator,
    WebScorer,
)
from truthcheck_system.config.scoring_config import NOTE_AI_BOTH_UNAVAILABLE, NOTE_SCORING_FAILED
from truthcheck_system.config.settings import Settings
from truthcheck_system.data_management.cache import TTLCache
from truthcheck_system.data_management.schemas import ClaimClassification, SourceRecord
from truthcheck_system.pipelines import TrustPipeline, trust_band

FDA_SENTENCE = (
    "The FDA is advising consumers to throw away recalled cinnamon products "
    "due to elevated lead levels, the agency announced Tuesday."
)
LEAD_SENTENCE = (
    "Lead exposure is known to cause developmental delays in children, researchers said."
)
ARTICLE = f"{FDA_SENTENCE} It was a sunny day outside the building today. {LEAD_SENTENCE}"


def source(domain):
    return SourceRecord(url=f"https://{domain}/story", domain=domain)


async def classify_items(items, instructions):
    return [
        {
            "id": item["id"],
            "classification": "empirical_fact" if "FDA" in item["text"] else "general_knowledge",
        }
        for item in items
    ]


@pytest.fixture
def collaborators():
    classifier = MagicMock()
    classifier.batch_classify = AsyncMock(side_effect=classify_items)
    rater = MagicMock()
    rater.rate = AsyncMock(return_value=7.5)
    scholar_provider = MagicMock()
    scholar_provider.search = AsyncMock(
        return_value=[source("nih.gov"), source("mit.edu"), source("example.com")]
    )
    web_provider = MagicMock()
    web_provider.search = AsyncMock(
        return_value=[
            source("cnn.com"),
            source("reuters.com"),
            source("foxnews.com"),
            source("apnews.com"),
        ]
    )
    return classifier, rater, scholar_provider, web_provider


@pytest.fixture
def pipeline(collaborators):
    classifier, rater, scholar_provider, web_provider = collaborators
    cache = TTLCache()
    return TrustPipeline(
        extraction_agent=ClaimExtractionAgent(),
        classification_agent=ClaimClassificationAgent(classifier=classifier, cache=cache),
        aggregator=ScoreAggregator(
            AIScorer(rater=rater, cache=cache),
            ScholarScorer(provider=scholar_provider, cache=cache),
            WebScorer(provider=web_provider, resolver=DomainBiasResolver(), cache=cache),
        ),
    )


class TestRun:
    @pytest.mark.asyncio
    async def test_scores_claims_in_extraction_order(self, pipeline):
        scored = await pipeline.run(ARTICLE, source_url="https://apnews.com/article/cinnamon")

        assert [claim.id for claim in scored] == [1, 2]
        assert scored[0].text == FDA_SENTENCE
        assert scored[1].text == LEAD_SENTENCE
        assert scored[0].classification is ClaimClassification.EMPIRICAL_FACT
        assert scored[1].classification is ClaimClassification.GENERAL_KNOWLEDGE

    @pytest.mark.asyncio
    async def test_signal_values_and_trust(self, pipeline):
        scored = await pipeline.run(ARTICLE, source_url="https://apnews.com/article/cinnamon")
        fda, lead = scored

        assert fda.scores.scholarly_match == 4.0
        assert fda.scores.web_reinforced == 7.0
        assert fda.trust_score == pytest.approx(5.8)
        assert fda.degradation_note is None

        assert lead.scores.scholarly_match == 0.0
        assert lead.trust_score == pytest.approx(7.3)

    @pytest.mark.asyncio
    async def test_article_domain_excluded(self, pipeline):
        scored = await pipeline.run(ARTICLE, source_url="https://www.apnews.com/article/cinnamon")
        domains = [s.domain for s in scored[0].sources.web]
        assert "apnews.com" not in domains
        assert scored[0].spectrum.center == 1

    @pytest.mark.asyncio
    async def test_scholar_searched_only_for_empirical(self, pipeline, collaborators):
        _, _, scholar_provider, web_provider = collaborators
        await pipeline.run(ARTICLE)
        assert scholar_provider.search.await_count == 1
        assert web_provider.search.await_count == 2

    @pytest.mark.asyncio
    async def test_stats(self, pipeline):
        await pipeline.run(ARTICLE)
        stats = pipeline.stats.to_dict()

        assert stats["claims_extracted"] == 2
        assert stats["claims_classified"] == 2
        assert stats["claims_scored"] == 2
        assert stats["fallback_records"] == 0
        assert stats["run_id"]
        assert stats["duration_seconds"] >= 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n "])
    async def test_blank_text(self, pipeline, collaborators, text):
        classifier = collaborators[0]
        assert await pipeline.run(text) == []
        classifier.batch_classify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_text_without_claims(self, pipeline, collaborators):
        assert await pipeline.run("It was a sunny day outside the building today.") == []
        collaborators[0].batch_classify.assert_not_awaited()
        assert pipeline.stats.claims_extracted == 0

    @pytest.mark.asyncio
    async def test_fallback_records_counted(self, pipeline):
        calculator = MagicMock()
        calculator.calculate.side_effect = RuntimeError("broken")
        pipeline.aggregator.calculator = calculator

        scored = await pipeline.run(ARTICLE)

        assert len(scored) == 2
        assert all(record.degradation_note == NOTE_SCORING_FAILED for record in scored)
        assert pipeline.stats.fallback_records == 2
        assert pipeline.stats.to_dict()["error_count"] == 1


class TestSummarize:
    @pytest.mark.asyncio
    async def test_summary_of_last_run(self, pipeline):
        await pipeline.run(ARTICLE, source_url="https://apnews.com/article/cinnamon")
        summary = pipeline.summarize()

        assert summary["total_claims"] == 2
        assert summary["trust_bands"] == {"high": 1, "medium": 1, "low": 0}
        assert summary["classifications"] == {
            "current_news": 0,
            "general_knowledge": 1,
            "empirical_fact": 1,
        }
        assert summary["spectrum"] == {"left": 2, "center": 2, "right": 2, "unknown": 0}
        assert summary["average_trust"] == pytest.approx(6.55, abs=0.05)

    def test_empty_summary(self, pipeline):
        summary = pipeline.summarize([])
        assert summary["total_claims"] == 0
        assert summary["average_trust"] == 0.0
        assert summary["trust_bands"] == {"high": 0, "medium": 0, "low": 0}

    @pytest.mark.parametrize(
        "value, band",
        [(10.0, "high"), (7.0, "high"), (6.9, "medium"), (3.0, "medium"), (2.9, "low"), (0.0, "low")],
    )
    def test_trust_band(self, value, band):
        assert trust_band(value) == band


class TestFromSettings:
    @pytest.mark.asyncio
    async def test_offline_wiring(self):
        config = Settings(_env_file=None, gemini_api_key=None, serper_api_key=None)
        pipeline = TrustPipeline.from_settings(config)
        try:
            scored = await pipeline.run(ARTICLE, source_url="https://apnews.com/x")
        finally:
            await pipeline.aclose()

        assert len(scored) == 2
        for record in scored:
            assert record.classification is ClaimClassification.GENERAL_KNOWLEDGE
            assert record.trust_score == 0.0
            assert record.degradation_note == NOTE_AI_BOTH_UNAVAILABLE
