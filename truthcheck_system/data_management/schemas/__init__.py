"""Schema package for claim extraction, classification and trust scoring.

Primary exports:
- Claim / ClassifiedClaim: extracted and classified claims
- ScoredClaim: terminal record with signals, trust score and sources
- UNAVAILABLE: sentinel for a signal that could not be computed

Usage:
    from truthcheck_system.data_management.schemas import Claim, Position
    claim = Claim(id=0, text="...", position=Position(start=0, end=3))
"""

from truthcheck_system.data_management.schemas.claim_schema import (
    Claim,
    ClaimClassification,
    ClassifiedClaim,
    DEFAULT_CLASSIFICATION,
    Position,
    SourceKind,
)
from truthcheck_system.data_management.schemas.score_schema import (
    OptionalScore,
    ScoredClaim,
    SignalResult,
    SignalScores,
    SourceBundle,
    SourceRecord,
    SpectrumCounts,
    TrustScore,
    UNAVAILABLE,
    is_unavailable,
)

__all__ = [
    "Claim",
    "ClaimClassification",
    "ClassifiedClaim",
    "DEFAULT_CLASSIFICATION",
    "Position",
    "SourceKind",
    "OptionalScore",
    "ScoredClaim",
    "SignalResult",
    "SignalScores",
    "SourceBundle",
    "SourceRecord",
    "SpectrumCounts",
    "TrustScore",
    "UNAVAILABLE",
    "is_unavailable",
]
