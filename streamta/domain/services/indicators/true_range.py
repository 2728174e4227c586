"""
True Range / Average True Range
===============================
TR  = max(High - Low, |High - PrevClose|, |Low - PrevClose|)
      (High - Low on the first bar, which has no previous close)
ATR = Rma(TR, period)

Both consume OHLCV bars; the previous close is the only shadowed state.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .base import AbstractBarBase, require_period
from .ema import Rma
from ...types.tbar import TBar


@dataclass
class TrueRangeState:
    prev_close: float = float('nan')


def true_range(bar: TBar, prev_close: float, first: bool) -> float:
    if first:
        return bar.high - bar.low
    return max(bar.high - bar.low, abs(bar.high - prev_close), abs(bar.low - prev_close))


class Tr(AbstractBarBase):
    """True range of each bar against the previous close."""

    category = "volatility"

    def __init__(self, use_nan: Optional[bool] = None, source: Any = None):
        super().__init__("Tr", warmup_period=2, use_nan=use_nan, source=source)

    def init(self) -> None:
        super().init()
        self.state = TrueRangeState()

    def calculation(self, bar: TBar, is_new: bool) -> float:
        tr = true_range(bar, self.state.prev_close, first=self._index == 1)
        self.state.prev_close = bar.close
        return tr


class Atr(AbstractBarBase):
    """Average true range, smoothed with Wilder's RMA."""

    category = "volatility"

    def __init__(self, period: int = 14, use_nan: Optional[bool] = None, source: Any = None):
        self.period = require_period("Atr", "period", period)
        self._ma = Rma(period, use_sma=True, use_nan=False)
        self.tr = 0.0
        super().__init__(f"Atr({period})", warmup_period=self._ma.warmup_period, use_nan=use_nan, source=source)

    def init(self) -> None:
        super().init()
        self._ma.init()
        self.tr = 0.0
        self.state = TrueRangeState()

    def calculation(self, bar: TBar, is_new: bool) -> float:
        self.tr = true_range(bar, self.state.prev_close, first=self._index == 1)
        self.state.prev_close = bar.close
        return self._ma.calc(self.tr, is_new).value
