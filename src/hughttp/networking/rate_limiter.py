"""Client-side rate limiting by exponential backoff.

The limiter never rejects a request. It records every admission in a rolling
window and, once the window holds more entries than the policy allows, blocks
the caller for ``2 ** overshoot`` seconds (capped).
"""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable

from .config import RateLimitPolicy, RatePeriod
from .errors import InvalidConfiguration

logger = logging.getLogger("hughttp.rate_limiter")

_PERIOD_SECONDS = {
    RatePeriod.SECOND: 1,
    RatePeriod.MINUTE: 60,
    RatePeriod.HOUR: 3600,
}


def period_seconds(period: str | RatePeriod) -> int:
    """Return the length of ``period`` in seconds."""
    try:
        unit = RatePeriod(str(getattr(period, "value", period)).lower())
    except ValueError:
        raise InvalidConfiguration(
            f"Invalid rate limit period {period!r}; "
            "expected one of: second, minute, hour"
        ) from None
    return _PERIOD_SECONDS[unit]


class RateLimiter:
    """Sliding-window admission control owned by a single client."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        max_backoff_seconds: float = 10.0,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._max_backoff_seconds = max_backoff_seconds
        self._log: list[float] = []
        self._lock = Lock()

    @property
    def request_log(self) -> tuple[float, ...]:
        """Timestamps currently inside the window."""
        with self._lock:
            return tuple(self._log)

    def compute_delay(self, window_size: int, max_requests: int) -> float:
        """Backoff for a window holding ``window_size`` admissions."""
        overshoot = window_size - max_requests
        if overshoot <= 0:
            return 0.0
        return float(min(2**overshoot, self._max_backoff_seconds))

    def admit(self, policy: RateLimitPolicy) -> float:
        """Record one dispatch attempt and block if the window is over budget.

        Returns:
            The delay slept, in seconds (0.0 when admitted immediately).

        Raises:
            InvalidConfiguration: the policy's period or limit is invalid.
        """
        window = period_seconds(policy.period)
        if policy.max_requests < 1:
            raise InvalidConfiguration(
                f"max_requests must be >= 1, got {policy.max_requests}"
            )

        with self._lock:
            now = self._clock()
            cutoff = now - window
            self._log = [stamp for stamp in self._log if stamp > cutoff]
            self._log.append(now)
            window_size = len(self._log)

        delay = self.compute_delay(window_size, policy.max_requests)
        if delay > 0:
            logger.warning(
                "Rate limit of %d per %s exceeded (%d in window); "
                "sleeping %.1fs",
                policy.max_requests,
                getattr(policy.period, "value", policy.period),
                window_size,
                delay,
            )
            self._sleep(delay)
        return delay
