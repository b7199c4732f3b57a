"""Tests for TokenBucket and RateLimiter."""

import pytest

from truthcheck_system.llm.rate_limiter import RateLimiter, RateLimitExceeded, TokenBucket


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTokenBucket:
    def test_consumes_until_empty(self):
        clock = FakeClock()
        bucket = TokenBucket(capacity=2, refill_rate=1.0, clock=clock)
        assert bucket.try_acquire() == 0.0
        assert bucket.try_acquire() == 0.0
        assert bucket.try_acquire() == pytest.approx(1.0)

    def test_refills_over_time(self):
        clock = FakeClock()
        bucket = TokenBucket(capacity=1, refill_rate=0.5, clock=clock)
        bucket.try_acquire()
        clock.now = 2.0
        assert bucket.try_acquire() == 0.0

    def test_refill_capped_at_capacity(self):
        clock = FakeClock()
        bucket = TokenBucket(capacity=3, refill_rate=1.0, clock=clock)
        clock.now = 100.0
        bucket.try_acquire()
        assert bucket.tokens == pytest.approx(2.0)

    def test_release_returns_token(self):
        bucket = TokenBucket(capacity=1, refill_rate=0.001, clock=FakeClock())
        bucket.try_acquire()
        bucket.release()
        assert bucket.try_acquire() == 0.0

    @pytest.mark.parametrize("capacity, rate", [(0, 1.0), (1, 0.0)])
    def test_invalid_arguments(self, capacity, rate):
        with pytest.raises(ValueError):
            TokenBucket(capacity=capacity, refill_rate=rate)


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_acquire_within_capacity(self):
        limiter = RateLimiter(max_requests_per_minute=5)
        for _ in range(5):
            await limiter.acquire(timeout=0.1)
        assert limiter.snapshot()["tokens"] < 1.0

    @pytest.mark.asyncio
    async def test_acquire_times_out(self):
        limiter = RateLimiter(max_requests_per_minute=1, max_backoff_seconds=1.0)
        await limiter.acquire()
        with pytest.raises(RateLimitExceeded):
            await limiter.acquire(timeout=0.1)

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            RateLimiter(max_requests_per_minute=0)
        with pytest.raises(ValueError):
            RateLimiter(max_backoff_seconds=0.01, min_sleep_seconds=0.05)
