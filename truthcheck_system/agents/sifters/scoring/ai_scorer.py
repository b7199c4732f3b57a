"""AI-credibility and tone signals backed by a remote rater.

Each signal is cached independently under (ai-credibility | ai-tone,
classification, claim text). Only numeric results are cached, so an
unavailable rater is asked again on the next run.
"""

from typing import Optional, Union

import structlog

from truthcheck_system.agents.sifters.scoring.protocols import KeyValueCache, RemoteRater
from truthcheck_system.config.prompts import CREDIBILITY_RATING_PROMPT, TONE_RATING_PROMPT
from truthcheck_system.config.scoring_config import CACHE_TTL_SECONDS
from truthcheck_system.data_management.cache import (
    AI_CREDIBILITY_KEY,
    AI_TONE_KEY,
    make_cache_key,
)
from truthcheck_system.data_management.schemas import UNAVAILABLE, ClaimClassification

CREDIBILITY = "credibility"
TONE = "tone"

_CACHE_KEYS = {CREDIBILITY: AI_CREDIBILITY_KEY, TONE: AI_TONE_KEY}


def coerce_rating(value: object) -> Union[float, str]:
    """Return value as a float in [0, 10], or UNAVAILABLE."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return UNAVAILABLE
    try:
        number = float(value)
    except ValueError:
        return UNAVAILABLE
    if number != number or number < 0 or number > 10:
        return UNAVAILABLE
    return number


class AIScorer:
    """
    Scores claim credibility and tone through a RemoteRater.

    Usage:
        scorer = AIScorer(rater=GeminiRater(client), cache=TTLCache())
        credibility = await scorer.credibility(text, ClaimClassification.CURRENT_NEWS)
    """

    def __init__(
        self,
        rater: Optional[RemoteRater],
        cache: KeyValueCache,
        cache_ttl: int = CACHE_TTL_SECONDS,
    ) -> None:
        """
        Args:
            rater: Remote rater. None makes both signals unavailable.
            cache: Shared cache
            cache_ttl: TTL for cached ratings
        """
        self._rater = rater
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._logger = structlog.get_logger().bind(component="AIScorer")

    async def credibility(
        self, claim_text: str, classification: ClaimClassification
    ) -> Union[float, str]:
        """AI-credibility rating (0 false, 5 uncertain, 10 highly credible)."""
        return await self.score(claim_text, CREDIBILITY, classification)

    async def tone(
        self, claim_text: str, classification: ClaimClassification
    ) -> Union[float, str]:
        """Tone neutrality rating (0 manipulative, 10 neutral)."""
        return await self.score(claim_text, TONE, classification)

    async def score(
        self,
        claim_text: str,
        score_type: str,
        classification: ClaimClassification,
    ) -> Union[float, str]:
        """
        Rate a claim.

        Args:
            claim_text: Claim text
            score_type: "credibility" or "tone"
            classification: Claim classification (part of the cache key)

        Returns:
            Rating in [0, 10] or UNAVAILABLE. Never raises for rater failures.
        """
        if score_type not in _CACHE_KEYS:
            raise ValueError(f"Unknown score type: {score_type}")

        if self._rater is None:
            self._logger.warning("rater_not_configured", score_type=score_type)
            return UNAVAILABLE

        cache_key = make_cache_key(_CACHE_KEYS[score_type], classification.value, claim_text)
        cached = self._cache.get(cache_key)
        if cached is not None:
            self._logger.debug("ai_score_cache_hit", score_type=score_type)
            return cached

        prompt = self._build_prompt(claim_text, score_type, classification)
        try:
            raw = await self._rater.rate(prompt)
        except Exception as e:
            self._logger.warning("ai_score_failed", score_type=score_type, error=str(e))
            return UNAVAILABLE

        rating = coerce_rating(raw)
        if rating == UNAVAILABLE:
            if raw != UNAVAILABLE:
                self._logger.warning("ai_score_invalid", score_type=score_type, raw=str(raw)[:40])
            return UNAVAILABLE

        self._cache.set(cache_key, rating, self._cache_ttl)
        return rating

    @staticmethod
    def _build_prompt(
        claim_text: str, score_type: str, classification: ClaimClassification
    ) -> str:
        if score_type == CREDIBILITY:
            return CREDIBILITY_RATING_PROMPT.format(
                claim=claim_text, classification=classification.value
            )
        return TONE_RATING_PROMPT.format(claim=claim_text)
