"""
TValue - immutable timestamped sample
=====================================
The unit that flows through every series and indicator.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TValue:
    """
    One observation of a value series.

    ``is_new=False`` means this observation replaces the previous one at the
    same logical position rather than opening a new position.
    ``is_hot`` tells whether the producing series is past its warm-up.
    """
    time: datetime
    value: float
    is_new: bool = True
    is_hot: bool = True

    @classmethod
    def now(cls, value: float, is_new: bool = True, is_hot: bool = True,
            time: Optional[datetime] = None) -> 'TValue':
        """Build a sample stamped with the current UTC time unless ``time`` is given."""
        return cls(time or utc_now(), float(value), is_new, is_hot)

    @property
    def t(self) -> datetime:
        return self.time

    @property
    def v(self) -> float:
        return self.value

    def with_value(self, value: float) -> 'TValue':
        return replace(self, value=value)

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return f"[{self.time:%Y-%m-%d %H:%M:%S}, {self.value:.2f}, IsNew: {self.is_new}, IsHot: {self.is_hot}]"


EMPTY_TVALUE = TValue(datetime.min, float('nan'))
