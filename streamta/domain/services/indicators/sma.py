"""
SMA - Simple Moving Average
===========================
Formula: SMA = sum(last N values) / N

Complexity: O(N) per update (vectorised buffer average)
Memory: O(N) - circular buffer of the last N inputs

``period=0`` averages the whole history with a running sum (O(1) memory).
A revision overwrites the buffer's newest slot, so the windowed variant
needs no shadow state of its own.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .base import AbstractBase, require_period
from ...series.circular_buffer import CircularBuffer


@dataclass
class CumulativeState:
    total: float = 0.0
    count: int = 0


class Sma(AbstractBase):
    """Simple moving average over a fixed window (or the whole history with period=0)."""

    category = "averages"

    def __init__(self, period: int, use_nan: Optional[bool] = None, source: Any = None):
        self.period = require_period("Sma", "period", period, minimum=0)
        self._buffer = CircularBuffer(period) if period > 0 else None
        super().__init__(f"Sma({period})", warmup_period=max(period, 1), use_nan=use_nan, source=source)

    def init(self) -> None:
        super().init()
        if self._buffer is not None:
            self._buffer.clear()
            self.state = None
        else:
            self.state = CumulativeState()

    def calculation(self, value: float, is_new: bool) -> float:
        if self._buffer is None:
            self.state.total += value
            self.state.count += 1
            return self.state.total / self.state.count

        self._buffer.add(value, is_new)
        return self._buffer.average()
