"""Evidence and trust score schemas.

Signals:
- ai_rating and tone come from a remote language model and may be the
  UNAVAILABLE sentinel.
- scholarly_match and web_reinforced always resolve to a number (0 on failure)
  and carry their provenance as SourceRecord lists.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from truthcheck_system.data_management.schemas.claim_schema import ClassifiedClaim

# Sentinel for a signal or collaborator that could not produce a value
UNAVAILABLE = "n/a"

Unavailable = Literal["n/a"]
OptionalScore = Union[float, Unavailable]


def is_unavailable(value: object) -> bool:
    """True if value is the UNAVAILABLE sentinel."""
    return isinstance(value, str) and value == UNAVAILABLE


class SourceRecord(BaseModel):
    """Provenance for a scholarly or web evidence hit."""

    url: str = Field(..., description="Result URL (unwrapped)")
    title: str = Field(default="", description="Result title")
    snippet: str = Field(default="", description="Result snippet")
    domain: str = Field(default="", description="Normalized host of url")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://apnews.com/article/cinnamon-lead-recall",
                    "title": "FDA warns about lead in cinnamon",
                    "snippet": "The FDA advised consumers to discard ...",
                    "domain": "apnews.com",
                }
            ]
        }
    }


class SpectrumCounts(BaseModel):
    """Political-lean distribution of web evidence sources."""

    left: int = 0
    center: int = 0
    right: int = 0
    unknown: int = 0

    @property
    def represented(self) -> int:
        """Number of lean categories (left/center/right) with at least one source."""
        return sum(1 for count in (self.left, self.center, self.right) if count > 0)


class SignalResult(BaseModel):
    """Numeric signal result with provenance (scholarly and web signals)."""

    score: float = Field(default=0.0, ge=0.0, le=10.0)
    sources: list[SourceRecord] = Field(default_factory=list)
    spectrum: SpectrumCounts = Field(default_factory=SpectrumCounts)


class SignalScores(BaseModel):
    """The four per-claim evidence signals."""

    ai_rating: OptionalScore = Field(default=UNAVAILABLE)
    tone: OptionalScore = Field(default=UNAVAILABLE)
    scholarly_match: float = Field(default=0.0, ge=0.0, le=10.0)
    web_reinforced: float = Field(default=0.0, ge=0.0, le=10.0)


class TrustScore(BaseModel):
    """Aggregated trust value with optional degradation note."""

    value: float = Field(..., ge=0.0, le=10.0, description="0-10, one decimal")
    degradation_note: Optional[str] = Field(
        default=None,
        description="Which signals were unavailable and how weights were renormalized",
    )


class SourceBundle(BaseModel):
    """Evidence sources grouped by signal."""

    scholar: list[SourceRecord] = Field(default_factory=list)
    web: list[SourceRecord] = Field(default_factory=list)
    all: list[SourceRecord] = Field(default_factory=list)


class ScoredClaim(ClassifiedClaim):
    """Terminal, fully populated claim record consumed by reporting."""

    scores: SignalScores = Field(default_factory=SignalScores)
    trust_score: float = Field(default=0.0, ge=0.0, le=10.0)
    degradation_note: Optional[str] = None
    sources: SourceBundle = Field(default_factory=SourceBundle)
    spectrum: SpectrumCounts = Field(default_factory=SpectrumCounts)
