"""
MSE - rolling Mean Squared Error between two inputs
===================================================
MSE = sum((actual - predicted)^2) / n   over the last ``period`` pairs

Typical wiring: actual = price series, predicted = a moving average of it.
"""

from typing import Any, Optional

import numpy as np

from .base import AbstractPairBase, require_period
from ...series.circular_buffer import CircularBuffer


class Mse(AbstractPairBase):
    """Rolling mean squared error of source1 (actual) against source2 (predicted)."""

    category = "errors"

    def __init__(self, period: int, use_nan: Optional[bool] = None, source1: Any = None, source2: Any = None):
        self.period = require_period("Mse", "period", period)
        self._actual = CircularBuffer(period)
        self._predicted = CircularBuffer(period)
        super().__init__(f"Mse({period})", warmup_period=period, use_nan=use_nan,
                         source1=source1, source2=source2)

    def init(self) -> None:
        super().init()
        self._actual.clear()
        self._predicted.clear()

    def calculation(self, value1: float, value2: float, is_new: bool) -> float:
        self._actual.add(value1, is_new)
        self._predicted.add(value2, is_new)
        errors = self._actual.get_span() - self._predicted.get_span()
        return float(np.mean(errors * errors))
