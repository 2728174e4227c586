"""
MACD - Moving Average Convergence Divergence
============================================
MACD line = EMA(fast) - EMA(slow)
Signal    = EMA(MACD line, signal)
Output    = histogram (MACD line - signal)

The three EMAs are private nodes fed directly through ``calc``; each keeps
its own shadow state, so a revision of the input rolls all three back.
"""

from typing import Any, Optional

from .base import AbstractBase, require_period
from .ema import Ema
from ....core.exceptions import InvalidPeriodError
from ....infrastructure.config.config_loader import get_settings


class Macd(AbstractBase):
    """MACD histogram; the MACD and signal lines are exposed as attributes."""

    category = "momentum"

    def __init__(self, fast: Optional[int] = None, slow: Optional[int] = None, signal: Optional[int] = None,
                 use_nan: Optional[bool] = None, source: Any = None):
        defaults = get_settings().indicators
        fast = defaults.macd_fast if fast is None else fast
        slow = defaults.macd_slow if slow is None else slow
        signal = defaults.macd_signal if signal is None else signal
        require_period("Macd", "fast", fast)
        require_period("Macd", "slow", slow)
        require_period("Macd", "signal", signal)
        if fast >= slow:
            raise InvalidPeriodError("fast", fast, f"must be less than slow ({slow})")

        self.fast_period, self.slow_period, self.signal_period = fast, slow, signal
        self._fast = Ema(fast, use_nan=False)
        self._slow = Ema(slow, use_nan=False)
        self._signal = Ema(signal, use_nan=False)
        self.macd_line = 0.0
        self.signal_line = 0.0
        super().__init__(f"Macd({fast},{slow},{signal})", warmup_period=slow + signal,
                         use_nan=use_nan, source=source)

    def init(self) -> None:
        super().init()
        for ema in (self._fast, self._slow, self._signal):
            ema.init()
        self.macd_line = 0.0
        self.signal_line = 0.0

    def calculation(self, value: float, is_new: bool) -> float:
        fast = self._fast.calc(value, is_new).value
        slow = self._slow.calc(value, is_new).value
        self.macd_line = fast - slow
        self.signal_line = self._signal.calc(self.macd_line, is_new).value
        return self.macd_line - self.signal_line
