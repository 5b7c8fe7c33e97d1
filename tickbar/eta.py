"""Sliding-window speed and ETA estimation."""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

__all__ = [
    "EtaTracker",
    "RateEstimate",
    "Sample",
    "SlidingWindow",
    "monotonic_ms",
]


def monotonic_ms() -> int:
    """Current monotonic time in milliseconds."""
    return time.monotonic_ns() // 1_000_000


@dataclass(frozen=True)
class Sample:
    """Progress recorded at a point in time."""

    progress: int
    time_ms: int


@dataclass(frozen=True)
class RateEstimate:
    """Speed in units per second and remaining time in seconds (may be inf)."""

    speed: float
    eta: float


class SlidingWindow:
    """Fixed-capacity ring buffer of samples; the oldest is overwritten when full.

    Progress and timestamps live in preallocated int64 arrays. While the window
    fills up, samples are appended after the last one. Once full, each push
    replaces the oldest slot and moves the oldest index forward.
    """

    def __init__(self, capacity: int):
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise TypeError("capacity must be an integer")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._progress = np.zeros(capacity, dtype=np.int64)
        self._time = np.zeros(capacity, dtype=np.int64)
        self._size = 0
        self._oldest = 0  # slot of the oldest sample once full

    def __len__(self) -> int:
        return self._size

    def push(self, sample: Sample):
        if self._size < self.capacity:
            slot = self._size
            self._size += 1
        else:
            slot = self._oldest
            self._oldest = (self._oldest + 1) % self.capacity
        self._progress[slot] = sample.progress
        self._time[slot] = sample.time_ms

    @property
    def oldest(self) -> Sample:
        if not self._size:
            raise IndexError("sliding window is empty")
        slot = self._oldest
        return Sample(int(self._progress[slot]), int(self._time[slot]))

    def samples(self) -> list[Sample]:
        """All retained samples, oldest first."""
        slots = [(self._oldest + i) % self._size for i in range(self._size)] if self._size else []
        return [Sample(int(self._progress[s]), int(self._time[s])) for s in slots]


class EtaTracker:
    """Estimates speed and ETA against the oldest sample in a sliding window.

    The window is seeded with progress 0 at construction, so the tracker treats
    the work as started the moment it is created and the window is never empty.
    With one update per second and the default capacity of 120, the estimate
    averages over the last two minutes.
    """

    def __init__(self, capacity: int = 120, clock: Callable[[], int] | None = None):
        self.clock = clock or monotonic_ms
        self.window = SlidingWindow(capacity)
        self.window.push(Sample(0, self.clock()))

    def update(self, current: int, total: int | None) -> RateEstimate:
        """Record current progress and return the estimate against the oldest sample."""
        now = self.clock()
        oldest = self.window.oldest
        elapsed_ms = now - oldest.time_ms
        delta = current - oldest.progress

        if elapsed_ms > 0:
            speed = delta * 1000 / elapsed_ms
        else:
            # Same millisecond as the oldest sample
            speed = math.inf if delta > 0 else 0.0

        if current == total:
            eta = 0.0  # Done, even if speed is 0
        elif total is None:
            eta = math.inf
        elif speed == 0:
            eta = math.inf
        else:
            eta = (total - current) / speed

        # Push only after estimating, so this estimate used the previous oldest
        self.window.push(Sample(current, now))
        return RateEstimate(speed, eta)
