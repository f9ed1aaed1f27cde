"""Shared test fixtures."""

from __future__ import annotations

import pytest

from project_finder.ratelimit import TokenBucket


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter() -> TokenBucket:
    """A bucket large enough that no test ever waits on it."""
    return TokenBucket(capacity=10_000, refill_amount=10_000, refill_interval=60.0)
