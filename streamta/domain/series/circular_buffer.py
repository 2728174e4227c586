"""
CircularBuffer - fixed-capacity ring of floats
==============================================
Window storage for every windowed indicator.

- Backing numpy array allocated once at construction, never resized
- add(value, is_new): push (evicting the oldest when full) or overwrite newest
- Index access clamps instead of raising (forward and from-end)
- max/min/sum/average are vectorised numpy reductions over the (at most two)
  contiguous segments of the backing array
"""

from typing import Iterator

import numpy as np

from ...core.exceptions import EmptyBufferError, InvalidPeriodError


class CircularBuffer:
    """
    Ring buffer with overwrite-last support for revisions.

    Invariant: ``count <= capacity``; ``buf[-1]`` is always the most recently
    written slot.
    """

    def __init__(self, capacity: int):
        if not isinstance(capacity, (int, np.integer)) or isinstance(capacity, bool) or capacity < 1:
            raise InvalidPeriodError("capacity", capacity)
        self._capacity = int(capacity)
        self._buffer = np.zeros(self._capacity, dtype=np.float64)
        self._start = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._size

    @property
    def start(self) -> int:
        return self._start

    @property
    def internal_buffer(self) -> np.ndarray:
        """Raw backing array (physical order, includes stale slots)."""
        return self._buffer

    def is_full(self) -> bool:
        return self._size == self._capacity

    def add(self, item: float, is_new: bool = True) -> None:
        """
        Push ``item`` as a new element, or overwrite the newest one when
        ``is_new`` is False. An empty buffer always pushes.
        """
        if self._size == 0 or is_new:
            if self._size < self._capacity:
                self._buffer[(self._start + self._size) % self._capacity] = item
                self._size += 1
            else:
                self._buffer[self._start] = item
                self._start = (self._start + 1) % self._capacity
        else:
            self._buffer[(self._start + self._size - 1) % self._capacity] = item

    def _physical(self, index: int) -> int:
        if self._size == 0:
            raise EmptyBufferError("index")
        logical = index + self._size if index < 0 else index
        logical = min(max(logical, 0), self._size - 1)
        return (self._start + logical) % self._capacity

    def __getitem__(self, index: int) -> float:
        return float(self._buffer[self._physical(index)])

    def __setitem__(self, index: int, value: float) -> None:
        self._buffer[self._physical(index)] = value

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[float]:
        for i in range(self._size):
            yield float(self._buffer[(self._start + i) % self._capacity])

    def newest(self) -> float:
        """Most recently written value; 0.0 for an empty buffer."""
        if self._size == 0:
            return 0.0
        return float(self._buffer[(self._start + self._size - 1) % self._capacity])

    def oldest(self) -> float:
        if self._size == 0:
            raise EmptyBufferError("oldest")
        return float(self._buffer[self._start])

    def _segments(self):
        """Logical contents as one or two contiguous views (oldest first)."""
        end = self._start + self._size
        if end <= self._capacity:
            return (self._buffer[self._start:end],)
        return self._buffer[self._start:], self._buffer[:end - self._capacity]

    def get_span(self) -> np.ndarray:
        """
        Read-only ordered view of the contents. Zero-copy when the data does
        not wrap around the end of the backing array.
        """
        segments = self._segments()
        span = segments[0] if len(segments) == 1 else np.concatenate(segments)
        span = span.view()
        span.flags.writeable = False
        return span

    def to_array(self) -> np.ndarray:
        """Ordered copy of the contents."""
        return np.concatenate(self._segments()) if self._size else np.empty(0, dtype=np.float64)

    def copy_to(self, destination, destination_index: int = 0) -> None:
        if self._size == 0:
            return
        offset = destination_index
        for segment in self._segments():
            destination[offset:offset + len(segment)] = segment
            offset += len(segment)

    def clear(self) -> None:
        """Reset to empty without reallocating the backing array."""
        self._buffer.fill(0.0)
        self._start = 0
        self._size = 0

    def max(self) -> float:
        if self._size == 0:
            raise EmptyBufferError("max")
        return float(max(segment.max() for segment in self._segments()))

    def min(self) -> float:
        if self._size == 0:
            raise EmptyBufferError("min")
        return float(min(segment.min() for segment in self._segments()))

    def sum(self) -> float:
        if self._size == 0:
            return 0.0
        return float(sum(segment.sum() for segment in self._segments()))

    def average(self) -> float:
        if self._size == 0:
            raise EmptyBufferError("average")
        return self.sum() / self._size

    def __repr__(self) -> str:
        return f"CircularBuffer(capacity={self._capacity}, count={self._size})"
