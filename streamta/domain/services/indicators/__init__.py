"""
Incremental indicators
======================
Every indicator is a dataflow node: feed it with ``calc()`` or subscribe it
to a series / another indicator, read ``value`` / ``tick`` or subscribe to
its ``pub``.
"""

from .base import AbstractBarBase, AbstractBase, AbstractPairBase, IndicatorBase
from .ema import Ema, Rma
from .extremes import Max, Min
from .macd import Macd
from .mse import Mse
from .sma import Sma
from .subtract import Subtract
from .true_range import Atr, Tr
from .algorithm_registry import IndicatorRegistry, get_default_registry

__all__ = [
    "IndicatorBase",
    "AbstractBase",
    "AbstractBarBase",
    "AbstractPairBase",
    "Sma",
    "Ema",
    "Rma",
    "Macd",
    "Max",
    "Min",
    "Tr",
    "Atr",
    "Mse",
    "Subtract",
    "IndicatorRegistry",
    "get_default_registry",
]
