"""Tests for the reservation rate limiter."""

import pytest

from ticket_marketplace.api.rate_limit import ReservationRateLimiter
from ticket_marketplace.exceptions import RateLimitExceededError


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def test_limit_per_window():
    clock = FakeClock()
    limiter = ReservationRateLimiter(limit=3, window_seconds=60, clock=clock)

    assert [limiter.check("user-1") for _ in range(3)] == [1, 2, 3]
    with pytest.raises(RateLimitExceededError):
        limiter.check("user-1")

    # Other users have their own budget
    assert limiter.check("user-2") == 1

    clock.now = 60.0
    assert limiter.check("user-1") == 1


def test_stale_windows_dropped():
    clock = FakeClock()
    limiter = ReservationRateLimiter(limit=5, window_seconds=10, clock=clock)
    limiter.check("user-1")
    limiter.check("user-2")

    clock.now = 25.0
    limiter.check("user-3")

    assert list(limiter._counts) == [("user-3", 2)]


def test_zero_limit_disables():
    limiter = ReservationRateLimiter(limit=0)
    for _ in range(100):
        assert limiter.check("user-1") == 0
