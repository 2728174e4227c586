"""
TBarSeries - append-or-revise OHLCV series
==========================================
Same contract as TSeries for TBar samples, plus five component value series
(open/high/low/close/volume) kept in lockstep so value indicators can be
wired directly to a single price field.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Iterator, List, Optional, Union

import pandas as pd

from .publisher import Publisher, get_publisher
from .tseries import TSeries
from ..types.tbar import TBar, EMPTY_TBAR
from ..types.tvalue import TValue, utc_now
from ...core.logger import get_logger
from ...infrastructure.config.config_loader import get_settings

logger = get_logger(__name__)

_COMPONENTS = ("open", "high", "low", "close", "volume")


class TBarSeries:

    def __init__(self, source: Any = None, name: Optional[str] = None):
        self._items: List[TBar] = []
        self.name = name or get_settings().series.default_bar_name
        self.pub = Publisher(self)
        self.open = TSeries(name=f"{self.name}.open")
        self.high = TSeries(name=f"{self.name}.high")
        self.low = TSeries(name=f"{self.name}.low")
        self.close = TSeries(name=f"{self.name}.close")
        self.volume = TSeries(name=f"{self.name}.volume")
        if source is not None:
            self.subscribe(source)

    def subscribe(self, source: Any) -> None:
        get_publisher(source).subscribe(self.sub)

    def unsubscribe(self, source: Any) -> None:
        get_publisher(source).unsubscribe(self.sub)

    def sub(self, source: Any, bar: TBar) -> None:
        self.add(bar)

    def add(self, bar: TBar) -> TBar:
        """
        Append (new bar, or empty series) or revise the last bar, notify bar
        subscribers, then feed the component series with the same flag.
        """
        if bar.is_new or not self._items:
            self._items.append(bar)
        else:
            self._items[-1] = bar
        self.pub.notify(bar)

        for component in _COMPONENTS:
            getattr(self, component).add(TValue(bar.time, getattr(bar, component), bar.is_new, True))
        return bar

    def add_bar(self, open: float, high: float, low: float, close: float, volume: float,
                is_new: bool = True, time: Optional[datetime] = None) -> TBar:
        return self.add(TBar(time or utc_now(), float(open), float(high), float(low),
                             float(close), float(volume), is_new))

    def add_series(self, series: Iterable[TBar]) -> None:
        """Bulk import finished bars (snapshot first when importing into itself)."""
        items = list(series._items) if series is self else list(series)
        for item in items:
            self.add(item if item.is_new else replace(item, is_new=True))
        logger.debug("series.backfill_completed", {"series": self.name, "count": len(items)})

    @property
    def last(self) -> TBar:
        return self._items[-1] if self._items else EMPTY_TBAR

    @property
    def first(self) -> TBar:
        return self._items[0] if self._items else EMPTY_TBAR

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def length(self) -> int:
        return len(self._items)

    def __getitem__(self, index: Union[int, slice]):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TBar]:
        return iter(self._items)

    def to_pandas(self) -> pd.DataFrame:
        """OHLCV DataFrame indexed by bar time."""
        return pd.DataFrame(
            {component: [getattr(bar, component) for bar in self._items] for component in _COMPONENTS},
            index=pd.DatetimeIndex([bar.time for bar in self._items], name="time"),
        )

    def __repr__(self) -> str:
        return f"TBarSeries(name={self.name!r}, count={len(self._items)})"
