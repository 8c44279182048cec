"""
Nonce generator for private requests.

The exchange rejects any nonce that is not greater than the last one it
saw for the same API key.
"""

import threading
import time
from typing import Callable, Optional

from kraken_client.core.logger import get_logger

logger = get_logger(__name__)


def wall_clock_micros() -> int:
    """Current time in microseconds, at millisecond resolution"""
    return int(time.time() * 1000) * 1000


class NonceGenerator:
    """
    Strictly increasing nonce source.

    Values follow the wall clock in microseconds. When two calls land in
    the same clock tick (or the clock steps backwards) the previous value
    plus one is issued instead, so ordering holds under concurrent calls
    from threads or asyncio tasks.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            clock: returns the current time in microseconds
        """
        self._clock = clock or wall_clock_micros
        self._last = 0
        self._lock = threading.Lock()

    @property
    def last(self) -> int:
        """Most recently issued nonce, 0 before the first call"""
        return self._last

    def next(self) -> int:
        with self._lock:
            now = self._clock()
            if now <= self._last:
                if now < self._last - 1_000_000:
                    logger.warning(
                        f"Clock is {(self._last - now) / 1e6:.3f}s behind the last nonce, "
                        f"continuing from {self._last}"
                    )
                now = self._last + 1
            self._last = now
            return now

    __call__ = next
