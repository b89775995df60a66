"""Per-user fixed-window rate limiting for reservation attempts."""

import logging
import threading
import time
from collections.abc import Callable

from ..exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class ReservationRateLimiter:
    """Allows ``limit`` reservation attempts per identity in each window."""

    def __init__(
        self,
        limit: int = 10,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the limiter.

        Args:
            limit: Attempts allowed per window; 0 or less disables limiting
            window_seconds: Window length
            clock: Time source, injectable for tests
        """
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._counts: dict[tuple[str, int], int] = {}
        self._lock = threading.Lock()

    def check(self, identity: str) -> int:
        """Count one attempt for ``identity``.

        Returns:
            Attempts used in the current window

        Raises:
            RateLimitExceededError: If the attempt exceeds the limit
        """
        if self.limit <= 0:
            return 0

        window = int(self._clock() // self.window_seconds)
        key = (identity, window)
        with self._lock:
            # Drop buckets from earlier windows
            for stale in [k for k in self._counts if k[1] < window]:
                del self._counts[stale]
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count

        if count > self.limit:
            logger.warning(f"Rate limit exceeded for user: {identity}")
            raise RateLimitExceededError("Too many reservation attempts, try again later")
        return count
