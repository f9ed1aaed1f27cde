"""Token-bucket rate limiter for secondary per-package statistics calls.

A single discovery request can fan out into dozens of download-count
lookups. Every such lookup must ``await bucket.acquire()`` first. When the
bucket is empty the caller waits one full refill interval and tries again,
indefinitely: added latency is preferred over dropping the call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

_DEFAULT_CAPACITY = 100
_DEFAULT_REFILL_AMOUNT = 50
_DEFAULT_REFILL_INTERVAL = 60.0  # seconds


class TokenBucket:
    """Shared token bucket. Token state is only touched under ``_lock``.

    Args:
        capacity: Maximum number of tokens (also the initial count).
        refill_amount: Tokens added per elapsed refill interval.
        refill_interval: Length of one refill interval in seconds.
        clock: Monotonic clock, injectable for tests.
        sleep: Async sleep, injectable for tests.
    """

    def __init__(
        self,
        capacity: int = _DEFAULT_CAPACITY,
        refill_amount: int = _DEFAULT_REFILL_AMOUNT,
        refill_interval: float = _DEFAULT_REFILL_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if capacity <= 0 or refill_amount <= 0 or refill_interval <= 0:
            raise ValueError("capacity, refill_amount and refill_interval must be positive")
        self.capacity = capacity
        self.refill_amount = refill_amount
        self.refill_interval = refill_interval
        self._clock = clock
        self._sleep = sleep
        self._tokens = capacity
        self._last_refill = clock()
        self._lock = asyncio.Lock()

    @property
    def available(self) -> int:
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        refills = int((now - self._last_refill) // self.refill_interval)
        if refills > 0:
            self._tokens = min(self.capacity, self._tokens + refills * self.refill_amount)
            self._last_refill += refills * self.refill_interval

    async def _try_take(self) -> bool:
        async with self._lock:
            self._refill()
            if self._tokens > 0:
                self._tokens -= 1
                return True
            return False

    async def acquire(self) -> None:
        """Take one token, waiting whole refill intervals until one is free."""
        while not await self._try_take():
            logger.debug("Rate limiter empty; waiting %.1fs for refill", self.refill_interval)
            await self._sleep(self.refill_interval)
