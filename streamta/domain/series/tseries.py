"""
TSeries - append-or-revise value series
=======================================
Ordered container of TValue samples in which only the last element may be
replaced (revision) and every earlier element is frozen. Each mutation is
published synchronously to subscribers.
"""

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Iterable, Iterator, List, Optional, Union, overload

import numpy as np
import pandas as pd

from .publisher import Publisher, get_publisher
from ..types.tvalue import TValue, EMPTY_TVALUE, utc_now
from ...core.logger import get_logger
from ...infrastructure.config.config_loader import get_settings

logger = get_logger(__name__)


class TSeries:
    """
    Series of TValue samples.

    Args:
        source: optional publisher (series or indicator) to subscribe to
        name: display name, defaults to ``SeriesSettings.default_value_name``
    """

    def __init__(self, source: Any = None, name: Optional[str] = None):
        self._items: List[TValue] = []
        self.name = name or get_settings().series.default_value_name
        self.pub = Publisher(self)
        if source is not None:
            self.subscribe(source)

    # --- wiring ---

    def subscribe(self, source: Any) -> None:
        """Listen to ``source`` and record every sample it publishes."""
        get_publisher(source).subscribe(self.sub)

    def unsubscribe(self, source: Any) -> None:
        get_publisher(source).unsubscribe(self.sub)

    def sub(self, source: Any, sample: TValue) -> None:
        """Push handler invoked by an upstream publisher."""
        self.add(sample)

    # --- mutation ---

    def add(self, sample: TValue) -> TValue:
        """
        Append ``sample`` (new, or the series is empty) or overwrite the last
        element (revision), then notify subscribers with ``sample``.
        """
        if sample.is_new or not self._items:
            self._items.append(sample)
        else:
            self._items[-1] = sample
        self.pub.notify(sample)
        return sample

    def add_value(self, value: float, is_new: bool = True, is_hot: bool = True,
                  time: Optional[datetime] = None) -> TValue:
        return self.add(TValue(time or utc_now(), float(value), is_new, is_hot))

    def add_values(self, values: Iterable[float]) -> None:
        """
        Backfill raw floats as new samples with synthetic, evenly spaced
        timestamps ending at the current time.
        """
        values = list(values)
        step = timedelta(hours=get_settings().series.backfill_interval_hours)
        time = utc_now() - step * len(values)
        for value in values:
            self.add(TValue(time, float(value)))
            time += step
        logger.debug("series.backfill_completed", {"series": self.name, "count": len(values)})

    def add_series(self, series: Iterable[TValue]) -> None:
        """
        Bulk import a finished series, one new position per element.

        Importing a series into itself iterates over a snapshot, so the
        source does not grow while it is being read.
        """
        items = list(series._items) if series is self else list(series)
        for item in items:
            self.add(item if item.is_new else replace(item, is_new=True))
        logger.debug("series.backfill_completed", {"series": self.name, "count": len(items)})

    def clear(self) -> None:
        """Drop every sample. Subscribers stay attached and are not notified."""
        self._items.clear()

    # --- read access ---

    @property
    def last(self) -> TValue:
        return self._items[-1] if self._items else EMPTY_TVALUE

    @property
    def first(self) -> TValue:
        return self._items[0] if self._items else EMPTY_TVALUE

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def length(self) -> int:
        return len(self._items)

    @property
    def t(self) -> List[datetime]:
        return [item.time for item in self._items]

    @property
    def v(self) -> List[float]:
        return [item.value for item in self._items]

    @overload
    def __getitem__(self, index: int) -> TValue: ...

    @overload
    def __getitem__(self, index: slice) -> List[TValue]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TValue]:
        return iter(self._items)

    def to_numpy(self) -> np.ndarray:
        return np.fromiter((item.value for item in self._items), dtype=np.float64, count=len(self._items))

    def to_pandas(self) -> pd.Series:
        """Values as a pandas Series indexed by sample time."""
        return pd.Series(self.v, index=pd.DatetimeIndex(self.t, name="time"), name=self.name, dtype="float64")

    def __repr__(self) -> str:
        return f"TSeries(name={self.name!r}, count={len(self._items)}, last={self.last})"
