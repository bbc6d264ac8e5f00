"""Collision-resistant identifiers for the delegate table.

An identifier reads ``<millis>-<counter>-<suffix>``. The millisecond
timestamp partitions ids by time, the counter separates calls made within the
same millisecond, and the random suffix covers counter wraparound and
generators running in other processes. Uniqueness is probabilistic.
"""

import random
import threading
import time
from typing import Callable, Optional

from .config import EngineConfig


def wall_clock_millis() -> int:
    """Current wall-clock time in whole milliseconds."""
    return time.time_ns() // 1_000_000


class IdentifierGenerator:
    """Produces table keys from a clock, a wrapping counter and a random suffix."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], int] = wall_clock_millis,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or EngineConfig()
        self._clock = clock
        self._rng = rng if rng is not None else random.Random(self.config.seed)
        self._counter = self.config.counter_floor
        self._lock = threading.Lock()

    @property
    def counter(self) -> int:
        """The counter value the next id will carry."""
        return self._counter

    def _advance(self) -> int:
        value = self._counter
        if value >= self.config.counter_ceiling:
            self._counter = self.config.counter_floor
        else:
            self._counter = value + 1
        return value

    def _suffix(self) -> str:
        alphabet = self.config.alphabet
        return "".join(self._rng.choice(alphabet) for _ in range(self.config.suffix_length))

    def next_id(self) -> str:
        """Return a new identifier."""
        with self._lock:
            stamp = self._clock()
            count = self._advance()
            suffix = self._suffix()
        return f"{stamp}-{count}-{suffix}"
