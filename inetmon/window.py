"""Bounded history of recent probe cycles."""

from collections import deque

from inetmon.models import ProbeCycleResult, Sample


class SlidingWindow:
    """FIFO store keeping the most recent ``capacity`` probe cycles.

    Appending beyond capacity drops the oldest cycle. Not thread-safe: the
    monitor's consumption loop is its only writer.
    """

    def __init__(self, capacity: int = 10):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._cycles = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self):
        return len(self._cycles)

    def append(self, result: ProbeCycleResult) -> None:
        self._cycles.append(result)

    def clear(self) -> None:
        self._cycles.clear()

    def cycles(self) -> list[ProbeCycleResult]:
        """Cycles held in the window, oldest first."""
        return list(self._cycles)

    def udp_samples(self) -> tuple[Sample, ...]:
        """UDP samples across the window in acquisition order."""
        return tuple(s for cycle in self._cycles for s in cycle.udp_samples)

    def http_samples(self) -> tuple[Sample, ...]:
        """HTTP samples across the window in acquisition order."""
        return tuple(s for cycle in self._cycles for s in cycle.http_samples)
