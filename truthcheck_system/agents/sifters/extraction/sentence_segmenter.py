"""Abbreviation-aware, quote-aware sentence segmentation.

Segmentation works on a normalized copy of the text: dotted abbreviations
("Dr.", "U.S.", "e.g.") lose their periods so they cannot end a sentence.
Sentences therefore carry the normalized forms, and locate_sentence() maps
them back onto the original text with a tolerant pattern.
"""

import re
from typing import Iterator, List, Optional, Pattern, Tuple

from loguru import logger

from truthcheck_system.config.scoring_config import MIN_SENTENCE_LENGTH

# (dotted form pattern, normalized replacement), applied in order
ABBREVIATIONS: List[Tuple[str, str]] = [
    (r"Dr\.", "Dr"),
    (r"Mr\.", "Mr"),
    (r"Mrs\.", "Mrs"),
    (r"Ms\.", "Ms"),
    (r"Prof\.", "Prof"),
    (r"Sr\.", "Sr"),
    (r"Jr\.", "Jr"),
    (r"U\.S\.", "US"),
    (r"U\.K\.", "UK"),
    (r"etc\.", "etc"),
    (r"vs\.", "vs"),
    (r"e\.g\.", "eg"),
    (r"i\.e\.", "ie"),
]

_ABBREVIATION_PATTERNS = [(re.compile(dotted), plain) for dotted, plain in ABBREVIATIONS]

# Normalized form -> pattern matching either the normalized or the dotted form
_TOLERANT_FORMS = {
    plain: r"\.?".join(re.escape(ch) for ch in plain) + r"\.?"
    if dotted.count(r"\.") > 1
    else re.escape(plain) + r"\.?"
    for dotted, plain in ABBREVIATIONS
}

_LOCATOR_TOKEN = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<abbr>(?<![A-Za-z])(?:"
    + "|".join(sorted((re.escape(p) for _, p in ABBREVIATIONS), key=len, reverse=True))
    + r")(?![A-Za-z]))"
    r"|(?P<char>.)",
    re.DOTALL,
)

SENTENCE_END_CHARS = ".!?"
OPEN_QUOTES = ('"', "“")
CLOSE_QUOTES = ('"', "”")
PARAGRAPH_SPLIT = re.compile(r"\n+")


def normalize_abbreviations(text: str) -> str:
    """Strip the periods from known abbreviations."""
    for pattern, plain in _ABBREVIATION_PATTERNS:
        text = pattern.sub(plain, text)
    return text


def build_locator_pattern(sentence: str) -> Pattern[str]:
    """
    Build a pattern that finds a segmented sentence in the original text.

    Whitespace runs match any whitespace run, and normalized abbreviations
    match their dotted forms.
    """
    parts: List[str] = []
    for match in _LOCATOR_TOKEN.finditer(sentence.strip()):
        if match.group("space"):
            parts.append(r"\s+")
        elif match.group("abbr"):
            parts.append(_TOLERANT_FORMS[match.group("abbr")])
        else:
            parts.append(re.escape(match.group("char")))
    return re.compile("".join(parts))


def locate_sentence(
    sentence: str, original_text: str, cursor: int = 0
) -> Optional[Tuple[int, int]]:
    """
    Find the first occurrence of sentence in original_text at or after cursor.

    Returns:
        (start, end) offsets, or None if the sentence cannot be located
    """
    if not sentence.strip():
        return None

    match = build_locator_pattern(sentence).search(original_text, cursor)
    if match is None:
        return None
    return match.start(), match.end()


class SentenceSegmenter:
    """
    Splits cleaned article text into sentence strings.

    A boundary is accepted only outside an open quotation, at a sentence-final
    punctuation mark followed by whitespace and an uppercase letter, or at the
    end of a paragraph. Sentences shorter than min_length characters are dropped.

    Usage:
        sentences = SentenceSegmenter().segment(text)
    """

    def __init__(self, min_length: int = MIN_SENTENCE_LENGTH):
        """
        Args:
            min_length: Trimmed sentences shorter than this are discarded
        """
        self.min_length = min_length
        self.logger = logger.bind(component="SentenceSegmenter")

    def segment(self, text: str) -> List[str]:
        """Return the sentences of text in source order."""
        sentences = list(self.iter_sentences(text))
        self.logger.debug("Segmented text", sentences=len(sentences))
        return sentences

    def iter_sentences(self, text: str) -> Iterator[str]:
        """Yield sentences lazily. Each call starts a fresh scan."""
        normalized = normalize_abbreviations(text)
        for paragraph in PARAGRAPH_SPLIT.split(normalized):
            if not paragraph.strip():
                continue
            for sentence in self._split_paragraph(paragraph):
                if len(sentence.strip()) >= self.min_length:
                    yield sentence

    @staticmethod
    def _split_paragraph(paragraph: str) -> List[str]:
        sentences: List[str] = []
        current: List[str] = []
        in_quote = False
        length = len(paragraph)
        i = 0

        while i < length:
            char = paragraph[i]
            current.append(char)

            if not in_quote and char in OPEN_QUOTES:
                in_quote = True
            elif in_quote and char in CLOSE_QUOTES:
                in_quote = False

            if not in_quote and char in SENTENCE_END_CHARS:
                j = i + 1
                while j < length and paragraph[j].isspace():
                    j += 1

                if j > i + 1 and j < length and paragraph[j].isupper():
                    sentences.append("".join(current).strip())
                    current = []
                    i = j
                    continue
                if i + 1 == length:
                    sentences.append("".join(current).strip())
                    current = []

            i += 1

        remainder = "".join(current).strip()
        if remainder:
            sentences.append(remainder)
        return sentences
