"""Claim extraction agent: article text -> check-worthy Claims.

Stages, all deterministic:
- NoiseFilter drops page chrome
- SentenceSegmenter splits the cleaned text
- QuoteMerger re-joins quotations and attributions
- ClaimDetector keeps check-worthy sentences

Positions are located in the caller's original text with a monotonic
cursor, so repeated sentences map to successive occurrences.
"""

from typing import List, Optional

from truthcheck_system.agents.sifters.base_sifter import BaseSifter
from truthcheck_system.agents.sifters.extraction import (
    ClaimDetector,
    NoiseFilter,
    QuoteMerger,
    SentenceSegmenter,
    locate_sentence,
)
from truthcheck_system.data_management.schemas import Claim, Position


class ClaimExtractionAgent(BaseSifter):
    """
    Extracts Claim objects from raw article text.

    Extraction faults never propagate: malformed input yields an empty list.

    Attributes:
        max_claims: Extraction stops once this many claims are found
        noise_filter: Chrome removal stage (None disables it)
        segmenter: Sentence segmentation stage
        merger: Quote merge stage
        detector: Check-worthiness predicate
    """

    DEFAULT_MAX_CLAIMS = 50

    def __init__(
        self,
        max_claims: int = DEFAULT_MAX_CLAIMS,
        detector: Optional[ClaimDetector] = None,
        segmenter: Optional[SentenceSegmenter] = None,
        merger: Optional[QuoteMerger] = None,
        noise_filter: Optional[NoiseFilter] = None,
        filter_noise: bool = True,
    ):
        """
        Initialize ClaimExtractionAgent.

        Args:
            max_claims: Maximum claims per run.
            detector: Optional pre-configured ClaimDetector (threshold, points).
            segmenter: Optional SentenceSegmenter.
            merger: Optional QuoteMerger.
            noise_filter: Optional NoiseFilter.
            filter_noise: Set False for text that is already clean.
        """
        super().__init__(
            name="ClaimExtractionAgent",
            description="Extracts check-worthy claims from article text",
        )
        self.max_claims = max_claims
        self.detector = detector or ClaimDetector()
        self.segmenter = segmenter or SentenceSegmenter()
        self.merger = merger or QuoteMerger()
        self.noise_filter = (noise_filter or NoiseFilter()) if filter_noise else None

        self.logger.info(
            "ClaimExtractionAgent initialized",
            max_claims=max_claims,
            threshold=self.detector.threshold,
        )

    async def sift(self, content: dict) -> list[dict]:
        """
        Extract claims from content.

        Args:
            content: Dict with 'text' (str) raw article text

        Returns:
            List of Claim dicts in source order.
        """
        text = content.get("text", "")
        return [claim.model_dump(mode="json") for claim in self.extract(text)]

    def extract(self, text: str) -> List[Claim]:
        """
        Extract claims from raw article text.

        Args:
            text: Original article text

        Returns:
            Claims in source order, at most max_claims. Empty on blank or
            malformed input.
        """
        if not isinstance(text, str) or not text.strip():
            self.logger.warning("No text provided for extraction")
            return []

        try:
            return self._extract(text)
        except Exception as e:
            self.logger.opt(exception=True).error(f"Claim extraction failed: {e}")
            return []

    def _extract(self, text: str) -> List[Claim]:
        cleaned = self.noise_filter.clean(text) if self.noise_filter else text
        sentences = self.segmenter.segment(cleaned)
        sentences = self.merger.merge(sentences)
        self.logger.debug("Candidate sentences", count=len(sentences))

        claims: List[Claim] = []
        cursor = 0
        skipped = 0

        for index, sentence in enumerate(sentences):
            located = locate_sentence(sentence, text, cursor)
            if located is None:
                skipped += 1
                continue
            start, end = located
            cursor = end

            if not self.detector.is_claim(sentence):
                continue

            claims.append(
                Claim(
                    id=len(claims) + 1,
                    text=sentence.strip(),
                    source_kind=self.detector.detect_source_kind(sentence),
                    context_text=self.detector.build_context(sentences, index),
                    position=Position(start=start, end=end),
                )
            )

            if len(claims) >= self.max_claims:
                self.logger.warning(f"Reached max claims limit ({self.max_claims})")
                break

        if skipped:
            self.logger.debug("Unlocatable sentences skipped", skipped=skipped)
        self.logger.info(f"Extracted {len(claims)} claims", sentences=len(sentences))
        return claims

    def get_capabilities(self) -> list[str]:
        """Return extraction capabilities."""
        return super().get_capabilities() + ["claim_extraction", "check_worthiness"]
