"""Weighted trust score aggregation with renormalization.

Cases, selected by which language-model signals are available:
1. Neither ai_rating nor tone: scholarly + web weights renormalized to 1
   (unweighted average of the two when their combined weight is 0)
2. ai_rating missing: tone, scholarly, web renormalized
3. tone missing: ai_rating, scholarly, web renormalized
4. All four: configured weights used directly

Every renormalized case carries a degradation note.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping, Optional, Sequence, Tuple

from truthcheck_system.config.scoring_config import (
    AI_RATING,
    NOTE_AI_BOTH_UNAVAILABLE,
    NOTE_AI_CREDIBILITY_UNAVAILABLE,
    NOTE_AI_TONE_UNAVAILABLE,
    SCHOLARLY_MATCH,
    SCORE_CEILING,
    SCORING_WEIGHTS,
    TONE,
    WEB_REINFORCED,
)
from truthcheck_system.data_management.schemas import (
    ClaimClassification,
    SignalScores,
    TrustScore,
    is_unavailable,
)


def round_score(value: float) -> float:
    """Round half-up to one decimal and clamp to [0, 10]."""
    rounded = float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return min(max(rounded, 0.0), SCORE_CEILING)


def renormalize(weights: Mapping[str, float], signals: Sequence[str]) -> Dict[str, float]:
    """
    Rescale the weights of the given signals to sum to 1.

    When their combined weight is 0 every signal gets an equal share.
    """
    total = sum(weights[signal] for signal in signals)
    if total <= 0:
        return {signal: 1.0 / len(signals) for signal in signals}
    return {signal: weights[signal] / total for signal in signals}


class TrustCalculator:
    """
    Combines the four evidence signals into a TrustScore.

    Usage:
        calculator = TrustCalculator()
        trust = calculator.calculate(scores, ClaimClassification.EMPIRICAL_FACT)
    """

    def __init__(
        self,
        weights: Optional[Mapping[ClaimClassification, Mapping[str, float]]] = None,
    ):
        self.weights = weights or SCORING_WEIGHTS

    def effective_weights(
        self, scores: SignalScores, classification: ClaimClassification
    ) -> Tuple[Dict[str, float], Optional[str]]:
        """Weights applied to each available signal and the degradation note."""
        weights = self.weights[classification]
        ai_missing = is_unavailable(scores.ai_rating)
        tone_missing = is_unavailable(scores.tone)

        if ai_missing and tone_missing:
            return (
                renormalize(weights, (SCHOLARLY_MATCH, WEB_REINFORCED)),
                NOTE_AI_BOTH_UNAVAILABLE,
            )
        if ai_missing:
            return (
                renormalize(weights, (TONE, SCHOLARLY_MATCH, WEB_REINFORCED)),
                NOTE_AI_CREDIBILITY_UNAVAILABLE,
            )
        if tone_missing:
            return (
                renormalize(weights, (AI_RATING, SCHOLARLY_MATCH, WEB_REINFORCED)),
                NOTE_AI_TONE_UNAVAILABLE,
            )
        return dict(weights), None

    def calculate(
        self, scores: SignalScores, classification: ClaimClassification
    ) -> TrustScore:
        """Weighted sum of available signals, rounded to one decimal."""
        applied, note = self.effective_weights(scores, classification)
        values = {
            AI_RATING: scores.ai_rating,
            TONE: scores.tone,
            SCHOLARLY_MATCH: scores.scholarly_match,
            WEB_REINFORCED: scores.web_reinforced,
        }
        total = sum(float(values[signal]) * weight for signal, weight in applied.items())
        return TrustScore(value=round_score(total), degradation_note=note)
