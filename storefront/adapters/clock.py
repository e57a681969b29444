"""System clock used when no clock is injected.

Timeout measurement, backoff sleeps, and request-id timestamps all read time
through the ``Clock`` port so tests can substitute a fake that advances
instantly.
"""

from __future__ import annotations

import time


class SystemClock:
    """Production clock backed by the ``time`` module."""

    def monotonic(self) -> float:
        return time.monotonic()

    def time_ms(self) -> int:
        return int(time.time() * 1000)

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


__all__ = ["SystemClock"]
