"""Re-join segmenter output where quotations and attributions span sentences.

Rules are checked in order for each position, first match wins:
1. Unbalanced opening quote: absorb following sentences until balanced
   (bounded lookahead).
2. Trailing attribution ('"...," she said') followed by a quote-bearing
   sentence: merge the pair.
3. Quote-opening sentence ending in an attribution verb, after a unit that
   had a quote: append to the previous unit.
4. Leading attribution without a quote of its own, followed by a sentence
   starting with a quote: merge forward.
5. Sentence ending with a colon: merge with the next sentence.
"""

import re
from typing import List

from loguru import logger

QUOTE_CHARS = ('"', "“", "”")

# Maximum span of a rule 1 merge, counted from the opening sentence
MAX_QUOTE_LOOKAHEAD = 4

_NAME = r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"

ENDS_WITH_ATTRIBUTION = re.compile(
    r"[\"“”]\s*,?\s*(?:he|she|they|it|" + _NAME + r")\s+"
    r"(?:said|stated|told|explained|added|noted|continued|emphasized|reported|"
    r"announced|claimed|argued|maintained|asserted|declared|revealed|disclosed)\b",
    re.IGNORECASE,
)

STARTS_WITH_QUOTE = re.compile(r"^[\"“”]")

ATTRIBUTION_AT_END = re.compile(
    r"\b(?:he|she|they|it|" + _NAME + r")\s+"
    r"(?:said|stated|told|explained|added|noted|continued|emphasized)\b[.!?]*$",
    re.IGNORECASE,
)

LEADING_ATTRIBUTION = re.compile(
    r"(?:according to|" + _NAME + r"\s+"
    r"(?:said|stated|told|explained|noted|emphasized|reported|announced|claimed)\b)",
    re.IGNORECASE,
)

OPENS_WITH_QUOTE = re.compile(r"^[\"“]")

ENDS_WITH_COLON = re.compile(r":\s*$")


def has_quote(text: str) -> bool:
    """True if text contains any straight or curly double quote."""
    return any(ch in text for ch in QUOTE_CHARS)


def quote_imbalance(text: str) -> int:
    """
    Number of quotations opened but not closed in text.

    Curly quotes are directional. Straight quotes pair up, so an odd count
    leaves one open.
    """
    return (text.count("“") - text.count("”")) + (text.count('"') % 2)


class QuoteMerger:
    """
    Merges quotation fragments and their attributions into single units.

    The output is never longer than the input.

    Usage:
        merged = QuoteMerger().merge(sentences)
    """

    def __init__(self, max_lookahead: int = MAX_QUOTE_LOOKAHEAD):
        self.max_lookahead = max_lookahead
        self.logger = logger.bind(component="QuoteMerger")

    def merge(self, sentences: List[str]) -> List[str]:
        """Return the merged sentence sequence."""
        merged: List[str] = []
        count = len(sentences)
        i = 0

        while i < count:
            sentence = sentences[i]
            sentence_has_quote = has_quote(sentence)
            has_next = i + 1 < count

            # Rule 1: unbalanced quotation spans several sentences
            if sentence_has_quote and quote_imbalance(sentence) > 0:
                combined = sentence
                j = i + 1
                while j < count and j - i < self.max_lookahead:
                    combined += " " + sentences[j]
                    j += 1
                    if quote_imbalance(combined) <= 0:
                        break
                merged.append(combined.strip())
                i = j
                continue

            # Rule 2: '"...," she said.' followed by more quotation
            if has_next and ENDS_WITH_ATTRIBUTION.search(sentence):
                following = sentences[i + 1]
                if has_quote(following):
                    merged.append(f"{sentence} {following}".strip())
                    i += 2
                    continue

            # Rule 3: continuation of the previous unit's quotation
            if (
                merged
                and STARTS_WITH_QUOTE.search(sentence.strip())
                and ATTRIBUTION_AT_END.search(sentence)
                and has_quote(merged[-1])
            ):
                merged[-1] = f"{merged[-1]} {sentence}".strip()
                i += 1
                continue

            # Rule 4: attribution introducing the next sentence's quotation
            if has_next and not sentence_has_quote and LEADING_ATTRIBUTION.search(sentence):
                following = sentences[i + 1]
                if OPENS_WITH_QUOTE.search(following.strip()):
                    merged.append(f"{sentence} {following}".strip())
                    i += 2
                    continue

            # Rule 5: colon introduces an explanation or quote
            if has_next and ENDS_WITH_COLON.search(sentence):
                merged.append(f"{sentence} {sentences[i + 1]}".strip())
                i += 2
                continue

            merged.append(sentence)
            i += 1

        if len(merged) != count:
            self.logger.debug(
                "Merged quoted content", before=count, after=len(merged)
            )
        return merged
