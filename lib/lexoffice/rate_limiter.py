"""
Token bucket rate limiter for outgoing API calls.

Tokens are replenished in whole batches: every ``replenishment_period``
seconds ``tokens_per_period`` tokens are added, capped at ``token_limit``.
Callers that find the bucket empty wait in FIFO order; once
``queue_limit`` callers are waiting, further callers are rejected.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import RateLimitExceededError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    """Token bucket configuration."""
    token_limit: int
    tokens_per_period: int = 1
    replenishment_period: float = 1.0  # seconds
    queue_limit: int = 1000

    def __post_init__(self) -> None:
        if self.token_limit <= 0:
            raise ValueError("token_limit must be positive")
        if self.tokens_per_period <= 0:
            raise ValueError("tokens_per_period must be positive")
        if self.replenishment_period <= 0:
            raise ValueError("replenishment_period must be positive")
        if self.queue_limit < 0:
            raise ValueError("queue_limit must not be negative")


class RateLimiter:
    """Async token bucket rate limiter."""

    def __init__(
        self,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy
        self._clock = clock
        self._tokens = policy.token_limit
        self._last_refill = clock()
        self._lock = asyncio.Lock()
        self._waiting = 0

    def _refill(self) -> None:
        """Add the batches of tokens earned since the last refill."""
        now = self._clock()
        periods = int((now - self._last_refill) // self.policy.replenishment_period)
        if periods <= 0:
            return
        self._tokens = min(
            self.policy.token_limit,
            self._tokens + periods * self.policy.tokens_per_period,
        )
        self._last_refill += periods * self.policy.replenishment_period

    def _seconds_until_refill(self) -> float:
        elapsed = self._clock() - self._last_refill
        return max(self.policy.replenishment_period - elapsed, 0.0)

    def try_acquire(self) -> bool:
        """Take a token without waiting."""
        self._refill()
        if self._tokens >= 1:
            self._tokens -= 1
            return True
        return False

    async def acquire(self) -> None:
        """Take a token, waiting for the next replenishment if needed.

        Raises:
            RateLimitExceededError: If queue_limit callers are already waiting
        """
        if self.try_acquire():
            return

        if self._waiting >= self.policy.queue_limit:
            logger.warning(
                f"Rate limit queue full ({self._waiting} waiting), rejecting request"
            )
            raise RateLimitExceededError(
                f"Rate limit queue limit of {self.policy.queue_limit} reached"
            )

        self._waiting += 1
        try:
            # The lock keeps waiters in arrival order
            async with self._lock:
                while not self.try_acquire():
                    await asyncio.sleep(self._seconds_until_refill())
        finally:
            self._waiting -= 1

    @property
    def available_tokens(self) -> int:
        self._refill()
        return self._tokens

    @property
    def waiting(self) -> int:
        return self._waiting

    def reset(self) -> None:
        """Refill the bucket completely."""
        self._tokens = self.policy.token_limit
        self._last_refill = self._clock()
