"""Async token bucket rate limiter for outbound API requests.

Search and language-model providers share one limiter per provider. Callers
that cannot get a token wait with exponential backoff, which is why the
search-backed signals run under a long timeout.
"""

import asyncio
import time
from typing import Callable, Optional

from truthcheck_system.exceptions import TruthCheckError
from truthcheck_system.utils.logging import get_structured_logger


class RateLimitExceeded(TruthCheckError):
    """Raised when the rate limiter cannot satisfy a request in time."""


class TokenBucket:
    """
    Token bucket algorithm implementation for rate limiting.

    Tokens refill continuously at a fixed rate. Requests consume tokens.

    Attributes:
        capacity: Maximum number of tokens the bucket can hold
        refill_rate: Tokens added per second
        tokens: Current number of tokens available
    """

    def __init__(
        self,
        capacity: int,
        refill_rate: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            capacity: Maximum tokens (e.g., 60 for 60 RPM)
            refill_rate: Tokens per second (e.g., 1.0 = 60 per minute)
            clock: Monotonic time source
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if refill_rate <= 0:
            raise ValueError("refill_rate must be positive")

        self.capacity = float(capacity)
        self.refill_rate = refill_rate
        self.tokens = float(capacity)
        self._clock = clock
        self.last_refill = clock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self.last_refill
        if elapsed <= 0:
            return
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    def try_acquire(self, tokens: float = 1.0) -> float:
        """
        Take tokens if available.

        Returns:
            0.0 on success, otherwise seconds until enough tokens refill
        """
        self._refill()
        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0
        return (tokens - self.tokens) / self.refill_rate

    def release(self, tokens: float = 1.0) -> None:
        """Return tokens to the bucket (used when calls fail before sending)."""
        self.tokens = min(self.capacity, self.tokens + tokens)


class RateLimiter:
    """
    Asyncio-safe requests-per-minute limiter with exponential backoff.

    Usage:
        limiter = RateLimiter(max_requests_per_minute=60)
        await limiter.acquire(timeout=30)

    Attributes:
        max_requests_per_minute: Bucket capacity and refill per minute
        max_backoff_seconds: Ceiling for a single backoff sleep
        min_sleep_seconds: Floor for a single backoff sleep
    """

    def __init__(
        self,
        max_requests_per_minute: int = 60,
        max_backoff_seconds: float = 10.0,
        min_sleep_seconds: float = 0.05,
        name: str = "default",
    ):
        if max_requests_per_minute <= 0:
            raise ValueError("max_requests_per_minute must be positive")
        if min_sleep_seconds <= 0:
            raise ValueError("min_sleep_seconds must be positive")
        if max_backoff_seconds < min_sleep_seconds:
            raise ValueError("max_backoff_seconds must be >= min_sleep_seconds")

        self.max_requests_per_minute = max_requests_per_minute
        self.max_backoff_seconds = max_backoff_seconds
        self.min_sleep_seconds = min_sleep_seconds
        self._bucket = TokenBucket(
            capacity=max_requests_per_minute,
            refill_rate=max_requests_per_minute / 60.0,
        )
        self._lock = asyncio.Lock()
        self.logger = get_structured_logger("rate_limiter", limiter=name)

    async def acquire(self, timeout: Optional[float] = None) -> None:
        """
        Acquire a single token, waiting with backoff as needed.

        Args:
            timeout: Max seconds to wait for a token. None waits indefinitely.

        Raises:
            RateLimitExceeded: If timeout elapses before a token is available.
        """
        attempt = 0
        deadline = time.monotonic() + timeout if timeout is not None else None

        while True:
            async with self._lock:
                wait_time = self._bucket.try_acquire()
            if wait_time == 0.0:
                return

            backoff = max(self.min_sleep_seconds, wait_time)
            if attempt:
                backoff = min(backoff * (2 ** attempt), self.max_backoff_seconds)
            else:
                backoff = min(backoff, self.max_backoff_seconds)

            if deadline is not None and time.monotonic() + backoff > deadline:
                raise RateLimitExceeded("Timed out while waiting for rate limiter token")

            self.logger.debug("rate_limit_backoff", backoff=round(backoff, 2), attempt=attempt + 1)
            attempt += 1
            await asyncio.sleep(backoff)

    def release(self) -> None:
        """Return a token to the bucket."""
        self._bucket.release()

    def snapshot(self) -> dict[str, float]:
        """Return diagnostic information about the limiter state."""
        return {
            "tokens": self._bucket.tokens,
            "capacity": self._bucket.capacity,
            "refill_rate_per_sec": self._bucket.refill_rate,
        }
