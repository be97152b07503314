"""
Outbound request rate limiter for external lookups.
"""

from __future__ import annotations

import threading
import time
from typing import Callable


class ReservoirRateLimiter:
    """
    Enforces a minimum interval between requests plus a burst reservoir.

    At most `reservoir` requests are released per `refresh_interval_seconds`,
    and consecutive requests are spaced by `1 / rate_limit_per_second`.
    """

    def __init__(
        self,
        *,
        rate_limit_per_second: float,
        reservoir: int = 20,
        refresh_interval_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._min_interval = 1.0 / max(0.1, rate_limit_per_second)
        self._reservoir = max(1, reservoir)
        self._refresh_interval = max(0.001, refresh_interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._remaining = self._reservoir
        self._refreshed_at = clock()
        self._last_request: float | None = None
        self._lock = threading.Lock()

    @property
    def remaining(self) -> int:
        return self._remaining

    def acquire(self) -> float:
        """
        Block until one request may be sent. Returns the seconds spent waiting.
        """

        waited = 0.0
        with self._lock:
            now = self._clock()
            self._refill(now)

            if self._remaining <= 0:
                wait_seconds = max(0.0, self._refresh_interval - (now - self._refreshed_at))
                if wait_seconds > 0:
                    self._sleep(wait_seconds)
                    waited += wait_seconds
                now = self._clock()
                self._remaining = self._reservoir
                self._refreshed_at = now

            if self._last_request is not None:
                wait_seconds = self._min_interval - (now - self._last_request)
                if wait_seconds > 0:
                    self._sleep(wait_seconds)
                    waited += wait_seconds
                    now = self._clock()

            self._remaining -= 1
            self._last_request = now
        return waited

    def _refill(self, now: float) -> None:
        if now - self._refreshed_at >= self._refresh_interval:
            self._remaining = self._reservoir
            self._refreshed_at = now
