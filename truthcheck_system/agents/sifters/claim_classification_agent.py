"""Claim classification agent: Claim -> ClassifiedClaim.

Classification flow:
1. Look up each claim in the cache (key: classification::<text>)
2. Send uncached claims to the remote classifier as {id, text} pairs,
   retried with exponential backoff
3. UNAVAILABLE from the classifier: every uncached claim gets the default
4. Otherwise match results back by id; missing ids or values outside the
   closed set get the default
5. Write each resolved classification for a non-cached claim to the cache

Any unexpected failure reverts every input claim to the default. The
default (general_knowledge) written in that case is never cached.
"""

from typing import Any, Dict, List, Optional

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from truthcheck_system.agents.sifters.base_sifter import BaseSifter
from truthcheck_system.agents.sifters.scoring.protocols import (
    KeyValueCache,
    RemoteClassifier,
)
from truthcheck_system.config.prompts import CLAIM_CLASSIFICATION_INSTRUCTIONS
from truthcheck_system.config.scoring_config import CACHE_TTL_SECONDS
from truthcheck_system.data_management.cache import CLASSIFICATION_KEY, make_cache_key
from truthcheck_system.data_management.schemas import (
    Claim,
    ClaimClassification,
    ClassifiedClaim,
    DEFAULT_CLASSIFICATION,
    is_unavailable,
)


class ClaimClassificationAgent(BaseSifter):
    """
    Assigns exactly one ClaimClassification to each Claim.

    Attributes:
        cache: Shared KeyValueCache
        classifier: RemoteClassifier collaborator
        cache_ttl: TTL for written classifications
        max_attempts: Remote call attempts before giving up
    """

    def __init__(
        self,
        classifier: RemoteClassifier,
        cache: KeyValueCache,
        cache_ttl: int = CACHE_TTL_SECONDS,
        max_attempts: int = 3,
        retry_wait: Optional[wait_base] = None,
        instructions: str = CLAIM_CLASSIFICATION_INSTRUCTIONS,
    ):
        """
        Initialize ClaimClassificationAgent.

        Args:
            classifier: Remote batch classifier.
            cache: Shared cache for classifications.
            cache_ttl: Seconds a classification stays cached.
            max_attempts: Attempts for the remote call.
            retry_wait: tenacity wait strategy (exponential from 2s if None).
            instructions: Category instructions sent with each batch.
        """
        super().__init__(
            name="ClaimClassificationAgent",
            description="Classifies claims as current news, general knowledge or empirical fact",
        )
        self.classifier = classifier
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=2, min=2, max=8)
        self.instructions = instructions

    async def sift(self, content: dict) -> list[dict]:
        """
        Classify claims.

        Args:
            content: Dict with 'claims' (list of Claim dicts)

        Returns:
            List of ClassifiedClaim dicts in input order.
        """
        claims = [Claim.model_validate(item) for item in content.get("claims", [])]
        classified = await self.classify(claims)
        return [claim.model_dump(mode="json") for claim in classified]

    async def classify(self, claims: List[Claim]) -> List[ClassifiedClaim]:
        """
        Classify a batch of claims.

        Returns:
            One ClassifiedClaim per input claim, in input order. Never raises.
        """
        if not claims:
            self.logger.warning("No claims to classify")
            return []

        try:
            resolved = await self._resolve(claims)
        except Exception as e:
            self.logger.opt(exception=True).error(
                f"Classification failed, defaulting all claims: {e}"
            )
            resolved = [DEFAULT_CLASSIFICATION] * len(claims)

        return [
            ClassifiedClaim.from_claim(claim, classification)
            for claim, classification in zip(claims, resolved)
        ]

    async def _resolve(self, claims: List[Claim]) -> List[ClaimClassification]:
        cached: List[Optional[ClaimClassification]] = [
            ClaimClassification.parse(self.cache.get(self._cache_key(claim)))
            for claim in claims
        ]
        uncached = [claim for claim, hit in zip(claims, cached) if hit is None]

        self.logger.debug(
            "Classification cache checked",
            hits=len(claims) - len(uncached),
            misses=len(uncached),
        )
        if not uncached:
            return [hit for hit in cached if hit is not None]

        items = [{"id": claim.id, "text": claim.text} for claim in uncached]
        response = await self._call_classifier(items)

        if is_unavailable(response):
            self.logger.warning("Classification skipped - classifier unavailable, using defaults")
            return [hit or DEFAULT_CLASSIFICATION for hit in cached]

        by_id = self._index_response(response)
        fresh: Dict[int, ClaimClassification] = {}
        for claim in uncached:
            classification = by_id.get(claim.id, DEFAULT_CLASSIFICATION)
            fresh[claim.id] = classification
            self.cache.set(self._cache_key(claim), classification.value, self.cache_ttl)

        return [
            hit if hit is not None else fresh[claim.id]
            for claim, hit in zip(claims, cached)
        ]

    async def _call_classifier(self, items: List[Dict[str, Any]]) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            reraise=True,
        ):
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                if attempt_number > 1:
                    self.logger.warning(f"Retrying classifier (attempt {attempt_number})")
                return await self.classifier.batch_classify(items, self.instructions)

    def _index_response(self, response: Any) -> Dict[int, ClaimClassification]:
        by_id: Dict[int, ClaimClassification] = {}
        if not isinstance(response, list):
            self.logger.warning("Classifier returned a non-list response")
            return by_id

        for item in response:
            if not isinstance(item, dict):
                continue
            try:
                claim_id = int(item.get("id"))
            except (TypeError, ValueError):
                continue
            classification = ClaimClassification.parse(item.get("classification"))
            if classification is not None:
                by_id[claim_id] = classification
        return by_id

    @staticmethod
    def _cache_key(claim: Claim) -> str:
        return make_cache_key(CLASSIFICATION_KEY, "", claim.text)

    def get_capabilities(self) -> list[str]:
        """Return classification capabilities."""
        return super().get_capabilities() + ["claim_classification"]
