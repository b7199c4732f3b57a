"""Rule-based check-worthiness detection.

A sentence is a claim when it passes the structural gates (length, not a
question, has a main verb, no UI boilerplate, no first-person opinion) and
its weighted signal score reaches the threshold.

Signals are a declarative rule table: each DetectorRule names a category
from CHECK_WORTHINESS_POINTS and the patterns that trigger it. A category
contributes its points once, however many patterns match. Categories in
an exclusive group award only the highest-scoring member that fired.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from truthcheck_system.config.scoring_config import (
    CHECK_WORTHINESS_POINTS,
    CHECK_WORTHINESS_THRESHOLD,
    MIN_CLAIM_LENGTH,
)
from truthcheck_system.data_management.schemas import SourceKind


@dataclass(frozen=True)
class DetectorRule:
    """One signal category and the patterns that trigger it.

    Attributes:
        name: Key into the points table
        patterns: Any match fires the rule
    """

    name: str
    patterns: Tuple[Pattern[str], ...]

    def fires(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns)


def _rule(name: str, *patterns: str, ignore_case: bool = True) -> DetectorRule:
    flags = re.IGNORECASE if ignore_case else 0
    return DetectorRule(name, tuple(re.compile(p, flags) for p in patterns))


KNOWN_ACRONYMS = (
    "FDA", "CDC", "WHO", "EPA", "FBI", "CIA", "NASA", "UN", "EU", "UK", "US",
    "NATO", "Supreme Court",
)

MAIN_VERB = re.compile(
    r"\b(is|are|was|were|be|been|being|has|have|had|will|would|can|could|may|"
    r"might|must|shall|should|did|does|do|added|advised|advising|said|ruled|"
    r"required|estimates|contain|lie|own|varies|depend|decide|sold|guaranteed)\b",
    re.IGNORECASE,
)

UI_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^(click|tap|download|subscribe|read more|learn more|watch|listen|follow|join)\b", re.IGNORECASE),
    re.compile(r"\bclick here\b", re.IGNORECASE),
    re.compile(r"\bsign up\b", re.IGNORECASE),
    re.compile(r"^(related|trending|popular|advertisement):", re.IGNORECASE),
]

SUBJECTIVE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"\b(i think|i believe|i feel|in my opinion|personally)\b", re.IGNORECASE),
    re.compile(r"\b(beautiful|ugly|amazing|terrible)\b", re.IGNORECASE),
]

DETECTOR_RULES: List[DetectorRule] = [
    _rule(
        "causal",
        r"\b(cause[ds]?|causing|lead[s]?|led|leading to|result[s]?|resulted in|"
        r"resulting in|contribute[ds]?|trigger[s]?|produce[ds]?|induce[ds]?|create[ds]?)\b",
    ),
    _rule(
        "epistemic",
        r"\b(conclude[ds]?|determined?|found|discover[eds]?|reveal[s]?|revealed|"
        r"show[s]?|showed|shown|demonstrate[ds]?|indicate[ds]?|suggest[s]?|"
        r"confirm[s]?|establish[es]?|prove[ds]?|proven)\b",
    ),
    _rule(
        "official_action",
        r"\b(ruled|decided|decide|approved|required|advised|advising|recommended|"
        r"warned|alert|recall|recalled|added|issued|initiated|granted|granting)\b",
    ),
    _rule(
        "measurement",
        r"\d+\s*(million|billion|thousand|hundred|percent|%|times|fold|degrees|"
        r"years?|months?|days?|hours?|miles?|barrels?)\b",
    ),
    _rule("bare_number", r"\d+"),
    _rule(
        "named_entity",
        r"\b([A-Z][a-z]+\s+){1,3}[A-Z][a-z]+\b",
        r"\b(" + "|".join(KNOWN_ACRONYMS) + r")\b",
        ignore_case=False,
    ),
    _rule(
        "temporal",
        r"(19|20)\d{2}",
        r"\b(yesterday|today|last week|last month|last year|last fall|monday|"
        r"tuesday|wednesday|thursday|friday|saturday|sunday|january|february|"
        r"march|april|may|june|july|august|september|october|november|december)\b",
    ),
    _rule(
        "attribution",
        r"\b(according to|said|stated|told|explained|reported|announced|claimed)\b",
        r"[\"“”]",
    ),
    _rule(
        "comparative",
        r"\b(more|less|higher|lower|greater|smaller|better|worse|increased|"
        r"decreased|than|compared to|relative to|most|least|highest|lowest|"
        r"largest|smallest)\b",
    ),
    _rule("modal", r"\b(can|could|may|might|must|should|would|will)\b"),
    _rule(
        "negation",
        r"\b(not|no|without|unlikely|wouldn't|won't|hasn't|haven't|didn't)\b",
    ),
    _rule(
        "variability",
        r"\b(varies|depend[s]?|depending|factor[s]?|influenced by|affected by)\b",
    ),
    _rule("consequence", r"\b(impact|effect[s]?|consequence[s]?|implication[s]?)\b"),
]

# Only the highest-points member of each group contributes
EXCLUSIVE_GROUPS: List[Tuple[str, ...]] = [("measurement", "bare_number")]

QUOTE_ATTRIBUTION_PATTERNS: List[Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"according to",
        r"said that",
        r"stated that",
        r"claimed that",
        r"reported that",
        r"announced that",
    )
]


class ClaimDetector:
    """
    Deterministic check-worthiness predicate over sentence text.

    Usage:
        detector = ClaimDetector()
        detector.is_claim("The FDA said it recalled 3 million units in 2023.")  # True

    Attributes:
        threshold: Minimum total score for a claim
        points: Category -> point value
        min_length: Minimum trimmed length
    """

    def __init__(
        self,
        threshold: float = CHECK_WORTHINESS_THRESHOLD,
        points: Optional[Dict[str, float]] = None,
        rules: Optional[List[DetectorRule]] = None,
        min_length: int = MIN_CLAIM_LENGTH,
    ):
        self.threshold = threshold
        self.points = dict(CHECK_WORTHINESS_POINTS)
        if points:
            self.points.update(points)
        self.rules = rules if rules is not None else DETECTOR_RULES
        self.min_length = min_length

    def passes_gates(self, sentence: str) -> bool:
        """Structural gates and outright rejections."""
        trimmed = sentence.strip()
        if len(trimmed) < self.min_length:
            return False
        if trimmed.endswith("?"):
            return False
        if not MAIN_VERB.search(trimmed):
            return False

        lower = trimmed.lower()
        if any(pattern.search(lower) for pattern in UI_PATTERNS):
            return False
        if any(pattern.search(lower) for pattern in SUBJECTIVE_PATTERNS):
            return False
        return True

    def score_breakdown(self, sentence: str) -> Dict[str, float]:
        """Return the points contributed by each fired category."""
        trimmed = sentence.strip()
        fired = {
            rule.name: self.points.get(rule.name, 0.0)
            for rule in self.rules
            if rule.fires(trimmed)
        }

        for group in EXCLUSIVE_GROUPS:
            members = [name for name in group if name in fired]
            if len(members) > 1:
                best = max(members, key=lambda name: fired[name])
                for name in members:
                    if name != best:
                        del fired[name]
        return fired

    def score(self, sentence: str) -> float:
        """Total check-worthiness score (gates not applied)."""
        return sum(self.score_breakdown(sentence).values())

    def is_claim(self, sentence: str) -> bool:
        """True if the sentence passes every gate and reaches the threshold."""
        if not self.passes_gates(sentence):
            return False
        return self.score(sentence) >= self.threshold

    @staticmethod
    def detect_source_kind(sentence: str) -> SourceKind:
        """quote if the sentence has quote marks or an attribution phrase."""
        if any(ch in sentence for ch in ('"', "“", "”")):
            return SourceKind.QUOTE
        if any(pattern.search(sentence) for pattern in QUOTE_ATTRIBUTION_PATTERNS):
            return SourceKind.QUOTE
        return SourceKind.DIRECT

    @staticmethod
    def build_context(sentences: List[str], index: int) -> str:
        """Previous, current and next sentence joined by spaces."""
        before = sentences[index - 1] if index > 0 else ""
        after = sentences[index + 1] if index < len(sentences) - 1 else ""
        return f"{before} {sentences[index]} {after}".strip()
