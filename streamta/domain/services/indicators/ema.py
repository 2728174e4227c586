"""
EMA - Exponential Moving Average
================================
Formula: EMA(t) = EMA(t-1) + k * (x(t) - EMA(t-1)),  k = 2 / (period + 1)

Seeding:
- use_sma=True: the first ``period`` outputs are the running simple average
  of the inputs seen so far, and the last of them seeds the recursion
- use_sma=False: recursion from zero with an early-value compensator
  ``e := (1-k)e``, output ``ema / (1 - e)``

Warm-up: the number of samples after which the seed weight falls below
``IndicatorSettings.warmup_confidence`` (5% by default):
ceil(ln(confidence) / ln(1 - k)).

Complexity: O(1) per update once seeded.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from .base import AbstractBase, require_period
from ...series.circular_buffer import CircularBuffer
from ....core.exceptions import InvalidPeriodError
from ....infrastructure.config.config_loader import get_settings

COMPENSATOR_FLOOR = 1e-10


@dataclass
class EmaState:
    last_ema: float = 0.0
    e: float = 1.0
    is_init: bool = False


def exponential_warmup(k: float) -> int:
    """Samples needed until the seed keeps less than the configured weight."""
    if k >= 1.0:
        return 1
    confidence = get_settings().indicators.warmup_confidence
    return max(1, math.ceil(math.log(confidence) / math.log(1.0 - k)))


class Ema(AbstractBase):
    """Exponential moving average with SMA seeding or bias compensation."""

    category = "averages"

    def __init__(self, period: int = 10, use_sma: bool = True, use_nan: Optional[bool] = None,
                 source: Any = None, alpha: Optional[float] = None):
        self.period = require_period(type(self).__name__, "period", period)
        if alpha is None:
            alpha = 2.0 / (period + 1)
        elif not 0.0 < alpha <= 1.0:
            raise InvalidPeriodError("alpha", alpha, "must be in (0, 1]")
        self.k = alpha
        self.use_sma = use_sma
        self._sma = CircularBuffer(period)
        super().__init__(self._make_name(), warmup_period=exponential_warmup(self.k),
                         use_nan=use_nan, source=source)

    @classmethod
    def from_alpha(cls, alpha: float, use_nan: Optional[bool] = None, source: Any = None) -> 'Ema':
        """EMA driven directly by a smoothing factor, compensated rather than SMA-seeded."""
        return cls(period=1, use_sma=False, use_nan=use_nan, source=source, alpha=alpha)

    def _make_name(self) -> str:
        return f"Ema({self.period})" if self.use_sma or self.period > 1 else f"Ema(alpha={self.k:.4f})"

    def init(self) -> None:
        super().init()
        self._sma.clear()
        self.state = EmaState()

    def calculation(self, value: float, is_new: bool) -> float:
        s = self.state
        if not s.is_init and self.use_sma:
            self._sma.add(value, is_new)
            ema = self._sma.average()
            result = ema
            if self._index >= self.period:
                s.is_init = True
        else:
            s.e = (1.0 - self.k) * s.e if s.e > COMPENSATOR_FLOOR else 0.0
            ema = self.k * (value - s.last_ema) + s.last_ema
            result = ema if (self.use_sma or s.e <= 0.0) else ema / (1.0 - s.e)

        s.last_ema = ema
        return result


class Rma(Ema):
    """Wilder's running moving average: an EMA with alpha = 1 / period."""

    def __init__(self, period: int = 14, use_sma: bool = True, use_nan: Optional[bool] = None,
                 source: Any = None):
        require_period("Rma", "period", period)
        super().__init__(period, use_sma=use_sma, use_nan=use_nan, source=source, alpha=1.0 / period)

    def _make_name(self) -> str:
        return f"Rma({self.period})"
