"""Monotonic clock that reports elapsed time per loop tick."""

import time
from collections.abc import Callable


class Ticker:
    """Measures wall-clock seconds between consecutive ``tick`` calls."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._last = clock()

    def tick(self) -> float:
        """Return seconds since the previous tick (or construction)."""
        now = self._clock()
        elapsed = now - self._last
        self._last = now
        return max(0.0, elapsed)

    def reset(self) -> None:
        """Start measuring from now."""
        self._last = self._clock()
