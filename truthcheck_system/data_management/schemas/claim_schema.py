"""Claim extraction and classification schemas.

A Claim is produced once by ClaimDetector and never mutated afterwards.
Classification is a separate one-way enrichment: ClassifiedClaim wraps
the claim's fields plus exactly one ClaimClassification.
"""

from enum import Enum

from pydantic import BaseModel, Field


class SourceKind(str, Enum):
    """Whether a claim is stated by the article or attributed to someone.

    DIRECT: The article itself asserts the statement.
    QUOTE: The statement carries quote marks or an attribution phrase.
    """

    DIRECT = "direct"
    QUOTE = "quote"


class ClaimClassification(str, Enum):
    """Epistemic category of a claim.

    CURRENT_NEWS: Recent events, announcements, developments.
    GENERAL_KNOWLEDGE: Widely known facts, history, common knowledge.
    EMPIRICAL_FACT: Scientific, measurable, research-backed statements.

    GENERAL_KNOWLEDGE is the safe default whenever classification cannot
    be resolved.
    """

    CURRENT_NEWS = "current_news"
    GENERAL_KNOWLEDGE = "general_knowledge"
    EMPIRICAL_FACT = "empirical_fact"

    @classmethod
    def parse(cls, value: object) -> "ClaimClassification | None":
        """Return the matching member for a raw value, or None if outside the set."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


DEFAULT_CLASSIFICATION = ClaimClassification.GENERAL_KNOWLEDGE


class Position(BaseModel):
    """Character offsets of a claim in the original article text."""

    start: int = Field(..., ge=0, description="Offset of the first character")
    end: int = Field(..., ge=0, description="Offset one past the last character")

    model_config = {"frozen": True}


class Claim(BaseModel):
    """A check-worthy sentence extracted from article text.

    Attributes:
        id: Monotonic counter within one extraction run (positional identity).
        text: The (merged) sentence text as produced by segmentation.
        source_kind: direct or quote.
        context_text: Previous, current and next sentence joined by spaces.
        position: Offsets located in the original, unnormalized text.
    """

    id: int = Field(..., ge=0, description="Per-run claim counter")
    text: str = Field(..., min_length=1, description="Claim sentence text")
    source_kind: SourceKind = Field(
        default=SourceKind.DIRECT,
        description="direct assertion or attributed quote",
    )
    context_text: str = Field(default="", description="Surrounding sentence window")
    position: Position = Field(..., description="Offsets in the original text")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": 0,
                    "text": "The FDA is advising consumers to throw away recalled cinnamon products due to elevated lead levels, the agency announced Tuesday.",
                    "source_kind": "direct",
                    "context_text": "The FDA is advising consumers to throw away recalled cinnamon products due to elevated lead levels, the agency announced Tuesday.",
                    "position": {"start": 0, "end": 129},
                }
            ]
        },
    }


class ClassifiedClaim(Claim):
    """A Claim with exactly one classification attached."""

    classification: ClaimClassification = Field(
        default=DEFAULT_CLASSIFICATION,
        description="Epistemic category",
    )

    @classmethod
    def from_claim(
        cls, claim: Claim, classification: ClaimClassification
    ) -> "ClassifiedClaim":
        """Enrich a claim without mutating it."""
        return cls(**claim.model_dump(), classification=classification)
