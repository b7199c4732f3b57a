"""Tests for TTLCache and cache key derivation.

Tests cover:
- Key format and case-insensitivity
- Set/get, overwrite, lazy expiry
- Per-entry TTL vs default TTL
- Hit/miss statistics
"""

import pytest

from truthcheck_system.data_management.cache import (
    AI_CREDIBILITY_KEY,
    CLASSIFICATION_KEY,
    TTLCache,
    make_cache_key,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(default_ttl=60, clock=clock)


class TestMakeCacheKey:
    def test_key_format(self):
        key = make_cache_key(AI_CREDIBILITY_KEY, "current_news", "Water boils at 100C")
        assert key == "ai-credibility:current_news:water boils at 100c"

    def test_key_is_case_insensitive(self):
        assert make_cache_key(CLASSIFICATION_KEY, "", "The FDA said X") == make_cache_key(
            CLASSIFICATION_KEY, "", "the fda SAID x"
        )

    def test_classification_is_part_of_key(self):
        assert make_cache_key("scholar", "empirical_fact", "x") != make_cache_key(
            "scholar", "current_news", "x"
        )


class TestTTLCache:
    def test_miss_returns_none(self, cache):
        assert cache.get("missing") is None
        assert cache.misses == 1

    def test_set_then_get(self, cache):
        cache.set("k", {"score": 4.0})
        assert cache.get("k") == {"score": 4.0}
        assert cache.hits == 1

    def test_overwrite_replaces_value(self, cache):
        cache.set("k", 1)
        cache.set("k", 2)
        assert cache.get("k") == 2
        assert len(cache) == 1

    def test_entry_expires_after_default_ttl(self, cache, clock):
        cache.set("k", "v")
        clock.advance(59)
        assert cache.get("k") == "v"
        clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_explicit_ttl_overrides_default(self, cache, clock):
        cache.set("short", "v", ttl_seconds=5)
        cache.set("long", "v", ttl_seconds=500)
        clock.advance(10)
        assert cache.get("short") is None
        assert cache.get("long") == "v"

    def test_overwrite_resets_expiry(self, cache, clock):
        cache.set("k", 1, ttl_seconds=10)
        clock.advance(8)
        cache.set("k", 2, ttl_seconds=10)
        clock.advance(8)
        assert cache.get("k") == 2

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0

    def test_stats(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")
        stats = cache.get_stats()
        assert stats["entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
