"""
streamta - streaming technical analysis
=======================================
Incremental indicators over value and OHLCV bar streams. New samples
append, repeated samples with ``is_new=False`` revise the open position,
and results propagate synchronously through subscribed indicators.
"""

from .core.exceptions import (
    EmptyBufferError,
    IndicatorNotFoundError,
    InvalidPeriodError,
    StreamTAError,
    SubscriptionError,
)
from .domain.types import TBar, TValue
from .domain.series import CircularBuffer, Publisher, TBarSeries, TSeries
from .domain.services.indicators import (
    Atr,
    Ema,
    IndicatorRegistry,
    Macd,
    Max,
    Min,
    Mse,
    Rma,
    Sma,
    Subtract,
    Tr,
    get_default_registry,
)

__version__ = "1.0.0"

__all__ = [
    "StreamTAError",
    "EmptyBufferError",
    "InvalidPeriodError",
    "SubscriptionError",
    "IndicatorNotFoundError",
    "TValue",
    "TBar",
    "CircularBuffer",
    "Publisher",
    "TSeries",
    "TBarSeries",
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
