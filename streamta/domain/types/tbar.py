"""
TBar - immutable OHLCV bar
==========================
Derived prices (HL2, HLC3, ...) are computed on access, never stored.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .tvalue import TValue, utc_now


@dataclass(frozen=True)
class TBar:
    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
    is_new: bool = True

    @classmethod
    def now(cls, open: float, high: float, low: float, close: float, volume: float,
            is_new: bool = True, time: Optional[datetime] = None) -> 'TBar':
        return cls(time or utc_now(), float(open), float(high), float(low), float(close), float(volume), is_new)

    @classmethod
    def from_value(cls, tv: TValue) -> 'TBar':
        """Flat bar where every price and the volume equal the sample value."""
        v = tv.value
        return cls(tv.time, v, v, v, v, v, tv.is_new)

    @property
    def hl2(self) -> float:
        return (self.high + self.low) * 0.5

    @property
    def oc2(self) -> float:
        return (self.open + self.close) * 0.5

    @property
    def ohl3(self) -> float:
        return (self.open + self.high + self.low) / 3

    @property
    def hlc3(self) -> float:
        return (self.high + self.low + self.close) / 3

    @property
    def ohlc4(self) -> float:
        return (self.open + self.high + self.low + self.close) * 0.25

    @property
    def hlcc4(self) -> float:
        return (self.high + self.low + self.close + self.close) * 0.25

    def __float__(self) -> float:
        return float(self.close)

    def __str__(self) -> str:
        return (f"[{self.time:%Y-%m-%d %H:%M:%S}: O={self.open:.2f}, H={self.high:.2f}, "
                f"L={self.low:.2f}, C={self.close:.2f}, V={self.volume:.2f}]")


EMPTY_TBAR = TBar(datetime.min, float('nan'), float('nan'), float('nan'), float('nan'), float('nan'))
