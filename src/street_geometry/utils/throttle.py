"""
Fixed inter-request delay for batch loops.

Batches are small and run offline, so a sequential sleep between items is
enough to respect the map-data service's informal limits.
"""

import logging
import time
from typing import Callable, Iterable, Iterator, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DELAY_S = 0.5


class Throttle:
    """Sleeps a fixed delay between consecutive external calls."""

    def __init__(self, delay_s: float = DEFAULT_DELAY_S, sleep: Callable[[float], None] = time.sleep):
        if delay_s < 0:
            raise ValueError(f"delay_s must be non-negative, got {delay_s}")
        self.delay_s = delay_s
        self._sleep = sleep

    def pause(self) -> None:
        if self.delay_s > 0:
            self._sleep(self.delay_s)

    def iterate(self, items: Iterable[T]) -> Iterator[Tuple[int, T]]:
        """Yield (index, item), pausing between items but not after the last."""
        items = list(items)
        for index, item in enumerate(items):
            yield index, item
            if index < len(items) - 1:
                self.pause()
