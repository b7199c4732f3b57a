"""Page-chrome removal applied before sentence segmentation.

Article text scraped from a page carries navigation, share buttons, bylines,
image credits, legal footers and newsletter prompts. NoiseFilter drops those
lines, stops at the first "Related / Trending / ..." section, then strips
inline call-to-action fragments from what remains.
"""

import re
from typing import List, Pattern

from loguru import logger

# Whole-line patterns that mark a line as chrome
LINE_NOISE_PATTERNS: List[Pattern[str]] = [
    # Relative timestamps and publish lines
    re.compile(r"^\d+\s+(days?|hours?|mins?|weeks?|months?|years?)\s+ago$", re.IGNORECASE),
    re.compile(r"^Published\s+", re.IGNORECASE),
    re.compile(r"^\d{1,2}:\d{2}\s*(am|pm)", re.IGNORECASE),
    # Share / social buttons
    re.compile(
        r"^(Share|Save|Facebook|Twitter|Instagram|LinkedIn|Comments|Print|Email|Login|Watch TV|Podcasts|Video)$",
        re.IGNORECASE,
    ),
    # Section navigation
    re.compile(
        r"^(Personal Finance|Economy|Markets|Watchlist|Lifestyle|Real Estate|Tech|Sports|Opinion|About)$",
        re.IGNORECASE,
    ),
    re.compile(r"^(More|Expand|Collapse|Menu)\b", re.IGNORECASE),
    # Image credits and bylines
    re.compile(r"^(Getty Images|iStock|Fox News|FOXBusiness)", re.IGNORECASE),
    re.compile(r"^By\s+[A-Z]"),
    re.compile(r"\(iStock\)$", re.IGNORECASE),
    # Copyright and legal
    re.compile(r"©\s*20\d{2}"),
    re.compile(r"All rights reserved", re.IGNORECASE),
    re.compile(r"Terms of Use|Privacy Policy|Legal Statement", re.IGNORECASE),
    re.compile(r"material may not be published", re.IGNORECASE),
    # Market data widgets
    re.compile(r"^(Quote Lookup|U\.S\. Stock Market|Quotes displayed)", re.IGNORECASE),
]

# Newsletter prompts only count as chrome when the line is short
NEWSLETTER_PATTERN = re.compile(
    r"Sign up|Subscribe|Enter email|Get Our Newsletter", re.IGNORECASE
)
NEWSLETTER_MAX_LENGTH = 100

# First line matching this ends the article body
SECTION_END_PATTERN = re.compile(
    r"^(Related|Trending|Popular|See Also|More From|More from the BBC)",
    re.IGNORECASE,
)

# Single-word lines shorter than this are navigation labels
SHORT_WORD_LENGTH = 15

# Inline fragments stripped from the surviving text
INLINE_NOISE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"GET\s+[A-Z\s]+ON\s+THE\s+GO\s+BY\s+CLICKING\s+HERE", re.IGNORECASE),
    re.compile(r"CLICK\s+HERE\s+[A-Z ]*", re.IGNORECASE),
    re.compile(r"\b(ADVERTISEMENT|SPONSORED CONTENT)\b", re.IGNORECASE),
    re.compile(
        r"\b(SUBSCRIBE|SIGN UP|FOLLOW US|DOWNLOAD|READ MORE|LEARN MORE|WATCH|LISTEN)\b[A-Z ]{0,30}"
    ),
    re.compile(r"^[A-Z ]{20,}$", re.MULTILINE),
]


class NoiseFilter:
    """
    Removes page chrome from scraped article text.

    Usage:
        cleaned = NoiseFilter().clean(raw_text)
    """

    def __init__(self):
        self.logger = logger.bind(component="NoiseFilter")

    def is_noise_line(self, line: str) -> bool:
        """Return True if a stripped line is page chrome."""
        if not line:
            return True
        if len(line.split()) == 1 and len(line) < SHORT_WORD_LENGTH:
            return True
        if NEWSLETTER_PATTERN.search(line) and len(line) < NEWSLETTER_MAX_LENGTH:
            return True
        return any(pattern.search(line) for pattern in LINE_NOISE_PATTERNS)

    def clean(self, text: str) -> str:
        """
        Drop chrome lines and inline call-to-action fragments.

        Args:
            text: Raw article text, one block per line

        Returns:
            Cleaned text with surviving lines joined by newlines
        """
        kept: List[str] = []
        dropped = 0

        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if line and SECTION_END_PATTERN.match(line):
                self.logger.debug("Reached trailing section, stopping", line=line[:60])
                break
            if self.is_noise_line(line):
                dropped += 1
                continue
            kept.append(line)

        cleaned = "\n".join(kept)
        for pattern in INLINE_NOISE_PATTERNS:
            cleaned = pattern.sub("", cleaned)

        self.logger.debug(
            "Noise filtered", kept_lines=len(kept), dropped_lines=dropped
        )
        return cleaned
