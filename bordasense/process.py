"""Fixed-size sample queues and per-stream median filtering."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator

from bordasense.sensors import SensorData

FILTERED_SIZE = 10


class RingQueue:
    """A fixed-capacity ring of samples that overwrites the oldest slot when full."""

    def __init__(self, capacity: int = FILTERED_SIZE) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.head = 0
        self.count = 0
        self._buffer: list[SensorData] = [SensorData()] * capacity
        self._lock = threading.Lock()

    def push(self, data: SensorData) -> None:
        """Store ``data`` at the head slot and advance the head."""
        with self._lock:
            self._buffer[self.head] = data
            self.head = (self.head + 1) % self.capacity
            self.count = min(self.count + 1, self.capacity)

    def items(self) -> list[SensorData]:
        """The stored samples in slot order."""
        with self._lock:
            return self._buffer[: self.count]

    def snapshot(self) -> RingQueue:
        """An independent copy of the queue."""
        copy = RingQueue(self.capacity)
        with self._lock:
            copy._buffer = list(self._buffer)
            copy.head = self.head
            copy.count = self.count
        return copy

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[SensorData]:
        return iter(self.items())


def sort_streams(samples: Iterable[SensorData]) -> list[SensorData]:
    """Sort each data stream independently; the n-th result holds each stream's n-th smallest."""
    rows = [sample.values() for sample in samples]
    if not rows:
        return []
    columns = [sorted(column) for column in zip(*rows)]
    return [SensorData.from_values(row) for row in zip(*columns)]


def median_sample(samples: Iterable[SensorData]) -> SensorData:
    """Per-stream median, taking the upper middle for an even count."""
    ordered = sort_streams(samples)
    if not ordered:
        raise ValueError("median of no samples")
    return ordered[len(ordered) // 2]