"""Difference of two inputs, e.g. EMA(fast) - EMA(slow)."""

from typing import Any, Optional

from .base import AbstractPairBase, require_period


class Subtract(AbstractPairBase):
    """
    value1 - value2.

    Stateless, so ``warmup_period`` is only a label: pass the slower
    upstream's warm-up to keep cold outputs marked cold.
    """

    category = "arithmetic"

    def __init__(self, warmup_period: int = 0, use_nan: Optional[bool] = None,
                 source1: Any = None, source2: Any = None):
        require_period("Subtract", "warmup_period", warmup_period, minimum=0)
        super().__init__("Subtract", warmup_period=warmup_period, use_nan=use_nan,
                         source1=source1, source2=source2)

    def calculation(self, value1: float, value2: float, is_new: bool) -> float:
        return value1 - value2
