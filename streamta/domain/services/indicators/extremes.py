"""Rolling window extremes (highest / lowest value of the last N inputs)."""

from typing import Any, Optional

from .base import AbstractBase, require_period
from ...series.circular_buffer import CircularBuffer


class _WindowExtreme(AbstractBase):

    category = "statistics"

    def __init__(self, label: str, period: int, use_nan: Optional[bool], source: Any):
        self.period = require_period(label, "period", period)
        self._buffer = CircularBuffer(period)
        super().__init__(f"{label}({period})", warmup_period=period, use_nan=use_nan, source=source)

    def init(self) -> None:
        super().init()
        self._buffer.clear()


class Max(_WindowExtreme):
    """Highest input over the last ``period`` samples."""

    def __init__(self, period: int, use_nan: Optional[bool] = None, source: Any = None):
        super().__init__("Max", period, use_nan, source)

    def calculation(self, value: float, is_new: bool) -> float:
        self._buffer.add(value, is_new)
        return self._buffer.max()


class Min(_WindowExtreme):
    """Lowest input over the last ``period`` samples."""

    def __init__(self, period: int, use_nan: Optional[bool] = None, source: Any = None):
        super().__init__("Min", period, use_nan, source)

    def calculation(self, value: float, is_new: bool) -> float:
        self._buffer.add(value, is_new)
        return self._buffer.min()
