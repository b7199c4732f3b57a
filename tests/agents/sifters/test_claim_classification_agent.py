"""Tests for ClaimClassificationAgent.

Tests cover:
- Cache-first lookup (hits never reach the classifier)
- Batch request shape and id matching
- UNAVAILABLE and exception fallbacks (defaults, not cached)
- Missing ids and out-of-set values
- Retry with tenacity
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from tenacity import wait_none

from truthcheck_system.agents.sifters.claim_classification_agent import ClaimClassificationAgent
from truthcheck_system.data_management.cache import TTLCache, make_cache_key
from truthcheck_system.data_management.schemas import (
    UNAVAILABLE,
    Claim,
    ClaimClassification,
    Position,
)
from truthcheck_system.exceptions import RemoteServiceError


def make_claim(claim_id: int, text: str) -> Claim:
    return Claim(id=claim_id, text=text, position=Position(start=0, end=len(text)))


@pytest.fixture
def claims():
    return [
        make_claim(1, "The FDA advised consumers to discard recalled cinnamon on Tuesday."),
        make_claim(2, "Lead exposure is linked to developmental delays in children."),
        make_claim(3, "The Eiffel Tower was completed in 1889 in Paris."),
    ]


@pytest.fixture
def cache():
    return TTLCache(default_ttl=3600)


@pytest.fixture
def classifier():
    mock = MagicMock()
    mock.batch_classify = AsyncMock(
        return_value=[
            {"id": 1, "classification": "current_news"},
            {"id": 2, "classification": "empirical_fact"},
            {"id": 3, "classification": "general_knowledge"},
        ]
    )
    return mock


@pytest.fixture
def agent(classifier, cache):
    return ClaimClassificationAgent(
        classifier=classifier,
        cache=cache,
        cache_ttl=3600,
        retry_wait=wait_none(),
    )


def classification_key(text: str) -> str:
    return make_cache_key("classification", "", text)


class TestClassify:
    @pytest.mark.asyncio
    async def test_classifies_batch_in_order(self, agent, claims, classifier):
        classified = await agent.classify(claims)

        assert [c.classification for c in classified] == [
            ClaimClassification.CURRENT_NEWS,
            ClaimClassification.EMPIRICAL_FACT,
            ClaimClassification.GENERAL_KNOWLEDGE,
        ]
        assert [c.id for c in classified] == [1, 2, 3]
        classifier.batch_classify.assert_awaited_once()
        items, instructions = classifier.batch_classify.await_args.args
        assert items == [{"id": c.id, "text": c.text} for c in claims]
        assert "empirical_fact" in instructions

    @pytest.mark.asyncio
    async def test_results_are_cached(self, agent, claims, cache, classifier):
        await agent.classify(claims)
        assert cache.get(classification_key(claims[1].text)) == "empirical_fact"

        again = await agent.classify(claims)
        assert again[1].classification is ClaimClassification.EMPIRICAL_FACT
        assert classifier.batch_classify.await_count == 1

    @pytest.mark.asyncio
    async def test_only_uncached_claims_are_sent(self, agent, claims, cache, classifier):
        cache.set(classification_key(claims[0].text), "current_news")
        classifier.batch_classify.return_value = [
            {"id": 2, "classification": "empirical_fact"},
            {"id": 3, "classification": "general_knowledge"},
        ]

        classified = await agent.classify(claims)

        items = classifier.batch_classify.await_args.args[0]
        assert [item["id"] for item in items] == [2, 3]
        assert classified[0].classification is ClaimClassification.CURRENT_NEWS

    @pytest.mark.asyncio
    async def test_unavailable_defaults_without_caching(self, agent, claims, cache, classifier):
        classifier.batch_classify.return_value = UNAVAILABLE

        classified = await agent.classify(claims)

        assert all(c.classification is ClaimClassification.GENERAL_KNOWLEDGE for c in classified)
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_unavailable_keeps_cached_hits(self, agent, claims, cache, classifier):
        cache.set(classification_key(claims[1].text), "empirical_fact")
        classifier.batch_classify.return_value = UNAVAILABLE

        classified = await agent.classify(claims)

        assert classified[1].classification is ClaimClassification.EMPIRICAL_FACT
        assert classified[0].classification is ClaimClassification.GENERAL_KNOWLEDGE

    @pytest.mark.asyncio
    async def test_missing_and_invalid_ids_default(self, agent, claims, classifier):
        classifier.batch_classify.return_value = [
            {"id": 1, "classification": "opinion"},
            {"id": "2", "classification": "EMPIRICAL_FACT"},
            {"classification": "current_news"},
        ]

        classified = await agent.classify(claims)

        assert classified[0].classification is ClaimClassification.GENERAL_KNOWLEDGE
        assert classified[1].classification is ClaimClassification.EMPIRICAL_FACT
        assert classified[2].classification is ClaimClassification.GENERAL_KNOWLEDGE

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, agent, claims, classifier):
        classifier.batch_classify.side_effect = [
            RemoteServiceError("boom"),
            [{"id": 2, "classification": "empirical_fact"}],
        ]

        classified = await agent.classify(claims)

        assert classifier.batch_classify.await_count == 2
        assert classified[1].classification is ClaimClassification.EMPIRICAL_FACT

    @pytest.mark.asyncio
    async def test_exhausted_retries_default_without_caching(self, agent, claims, cache, classifier):
        classifier.batch_classify.side_effect = RemoteServiceError("down")

        classified = await agent.classify(claims)

        assert classifier.batch_classify.await_count == 3
        assert len(classified) == 3
        assert all(c.classification is ClaimClassification.GENERAL_KNOWLEDGE for c in classified)
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_empty_input(self, agent, classifier):
        assert await agent.classify([]) == []
        classifier.batch_classify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_classification_does_not_mutate_claims(self, agent, claims):
        classified = await agent.classify(claims)
        assert classified[0].text == claims[0].text
        assert classified[0].position == claims[0].position
        assert not hasattr(claims[0], "classification")


class TestSift:
    @pytest.mark.asyncio
    async def test_sift_accepts_claim_dicts(self, agent, claims):
        results = await agent.sift({"claims": [c.model_dump(mode="json") for c in claims]})
        assert [r["classification"] for r in results] == [
            "current_news",
            "empirical_fact",
            "general_knowledge",
        ]

    def test_capabilities(self, agent):
        assert "claim_classification" in agent.get_capabilities()
