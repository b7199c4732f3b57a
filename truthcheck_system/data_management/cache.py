"""In-memory TTL cache shared by the classifier and the evidence scorers.

Features:
- Keys derived deterministically from (signal type, classification, claim text)
- Entries replaced wholesale on overwrite, lazily evicted on read when expired
- No locking: each key is derived from immutable inputs, and a read of a
  not-yet-written key is simply a miss
"""

import time
from typing import Any, Callable, Dict, Optional, Tuple

from loguru import logger

# Signal types used in cache keys
CLASSIFICATION_KEY = "classification"
AI_CREDIBILITY_KEY = "ai-credibility"
AI_TONE_KEY = "ai-tone"
SCHOLAR_KEY = "scholar"
WEB_REINFORCEMENT_KEY = "web-reinforcement"


def make_cache_key(signal_type: str, classification: str, claim_text: str) -> str:
    """
    Build the cache key for a signal.

    Keys are case-insensitive so trivially different casings of the same
    claim share an entry.

    Args:
        signal_type: One of the *_KEY constants
        classification: Classification value, or '' for the classifier itself
        claim_text: Claim text

    Returns:
        Lowercased "type:classification:text" key
    """
    return f"{signal_type}:{classification}:{claim_text}".lower()


class TTLCache:
    """
    Process-wide key/value cache with per-entry expiry.

    Implements the KeyValueCache collaborator interface: get(key) returns the
    value or None, set(key, value, ttl_seconds) stores it.

    Attributes:
        default_ttl: TTL applied when set() is called without one
        hits: Number of successful lookups
        misses: Number of lookups that found nothing (or an expired entry)
    """

    def __init__(
        self,
        default_ttl: int = 86400,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize an empty cache.

        Args:
            default_ttl: Seconds an entry lives when no TTL is given
            clock: Monotonic time source (injectable for tests)
        """
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._clock = clock
        self.default_ttl = default_ttl
        self.hits = 0
        self.misses = 0
        self.logger = logger.bind(component="TTLCache")

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            self.misses += 1
            self.logger.debug("Evicted expired entry", key=key[:80])
            return None

        self.hits += 1
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store value under key, replacing any previous entry."""
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        self._entries[key] = (value, self._clock() + ttl)

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> dict:
        """Return hit/miss statistics."""
        total = self.hits + self.misses
        return {
            "entries": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total > 0 else 0.0,
        }
