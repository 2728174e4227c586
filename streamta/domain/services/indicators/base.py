"""
Indicator State Machine
=======================
Dataflow node that turns one incoming sample into one outgoing TValue
without replaying history.

Per incoming sample:
1. Revision of an already-applied position: ``state := shadow`` (undo)
2. New position (or the very first sample): ``shadow := state``, index += 1
3. NaN/Infinity input: carry forward the last valid output, state untouched
4. ``calculation(...)`` (subclass hook) produces the value
5. Hot once ``index >= warmup_period``; cold outputs become NaN if ``use_nan``
6. Record in ``self.output`` and publish on ``self.pub`` (depth-first)

Only the most recent position can be revised, so two state slots suffice.

Subclasses keep scalar accumulators in a mutable dataclass assigned to
``self.state`` inside ``init()``; it is deep-copied for the shadow slot.
CircularBuffers are revised in place (``add(x, is_new=False)``) and must
not be put in ``self.state``.
"""

import copy
import math
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import Any, Callable, Deque, List, Optional, Tuple, Union

from ...series.publisher import Publisher, get_publisher
from ...series.tseries import TSeries
from ...types.tbar import TBar
from ...types.tvalue import TValue, utc_now
from ....core.exceptions import InvalidPeriodError, SubscriptionError
from ....core.logger import get_logger
from ....infrastructure.config.config_loader import get_settings

logger = get_logger(__name__)

NAN = float('nan')


def is_valid(value: float) -> bool:
    """True for finite numbers; NaN and +/-Infinity are invalid samples."""
    return math.isfinite(value)


def require_period(owner: str, parameter: str, value: int, minimum: int = 1) -> int:
    """
    Construction-time validation of a window length.

    Raises:
        InvalidPeriodError: ``value`` is not an int or is below ``minimum``
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        error = InvalidPeriodError(parameter, value, f"must be an integer >= {minimum}")
        logger.error("indicator.invalid_configuration", {
            "indicator": owner,
            "parameter": parameter,
            "value": repr(value),
            "minimum": minimum
        })
        raise error
    return value


class IndicatorBase(ABC):
    """
    Shared contract of every indicator node: index/warm-up bookkeeping,
    current/shadow state, carry-forward and publishing.
    """

    input_kind = "value"
    category = "general"

    def __init__(self, name: str, warmup_period: int = 0, use_nan: Optional[bool] = None):
        self.name = name
        self.warmup_period = warmup_period
        self.use_nan = get_settings().indicators.default_use_nan if use_nan is None else bool(use_nan)
        self.pub = Publisher(self)
        self.input: Any = None
        self.state: Any = None
        self._shadow: Any = None
        self._subscriptions: List[Tuple[Publisher, Callable]] = []
        self.init()
        logger.debug("indicator.created", {
            "indicator": self.name,
            "warmup_period": self.warmup_period,
            "use_nan": self.use_nan
        })

    def init(self) -> None:
        """Reset to the freshly constructed state. Subclasses extend this."""
        self._index = 0
        self._applied = False
        self._last_valid_value = NAN
        self._time: datetime = datetime.min
        self._value = NAN
        self._is_new = True
        self._is_hot = False
        self._shadow = None
        if getattr(self, "output", None) is None:
            self.output = TSeries(name=self.name)
        else:
            self.output.clear()

    # --- introspection ---

    @property
    def index(self) -> int:
        """Number of positions seen so far (1-based after the first sample)."""
        return self._index

    @property
    def value(self) -> float:
        return self._value

    @property
    def time(self) -> datetime:
        return self._time

    @property
    def is_new(self) -> bool:
        return self._is_new

    @property
    def is_hot(self) -> bool:
        return self._is_hot

    @property
    def tick(self) -> TValue:
        """Last published output."""
        return TValue(self._time, self._value, self._is_new, self._is_hot)

    @property
    def last(self) -> TValue:
        return self.output.last

    @property
    def first(self) -> TValue:
        return self.output.first

    @property
    def count(self) -> int:
        """Number of published positions (revisions do not count)."""
        return self.output.count

    @property
    def length(self) -> int:
        return self.output.length

    # --- wiring ---

    def _attach(self, source: Any, listener: Callable) -> None:
        publisher = get_publisher(source)
        if publisher.owner is self.output:
            raise SubscriptionError(f"{self.name} cannot subscribe to its own output series")
        publisher.subscribe(listener)
        self._subscriptions.append((publisher, listener))

    def unsubscribe(self, source: Any = None) -> None:
        """Detach from ``source``, or from every upstream when omitted."""
        if source is None:
            targets = list(self._subscriptions)
        else:
            publisher = get_publisher(source)
            targets = [entry for entry in self._subscriptions if entry[0] is publisher]
            if not targets:
                raise SubscriptionError(f"{self.name} is not subscribed to {getattr(source, 'name', source)!r}")
        for entry in targets:
            publisher, listener = entry
            publisher.unsubscribe(listener)
            self._subscriptions.remove(entry)

    # --- state machine ---

    def _save_state(self) -> None:
        self._shadow = copy.deepcopy(self.state)

    def _restore_state(self) -> None:
        self.state = copy.deepcopy(self._shadow)

    def _step(self, time: datetime, is_new: bool, valid: bool, compute: Callable[[bool], float]) -> TValue:
        """
        Run one sample through the state machine.

        ``compute`` receives the effective "new position" flag: True the
        first time a position is applied (even when that happens through a
        revision after an invalid new sample), False when re-applying.
        """
        is_new = is_new or self._index == 0
        if is_new:
            self._save_state()
            self._index += 1
            self._applied = False

        if valid:
            if self._applied:
                self._restore_state()
            result = compute(not self._applied)
            self._applied = True
            self._last_valid_value = result
        else:
            result = self._last_valid_value
            logger.debug("indicator.invalid_input", {
                "indicator": self.name,
                "index": self._index,
                "carried_value": result
            })

        is_hot = self._index >= self.warmup_period
        if self.use_nan and not is_hot:
            result = NAN
        return self._process(TValue(time, result, is_new, is_hot))

    def _process(self, output: TValue) -> TValue:
        self._time = output.time
        self._value = output.value
        self._is_new = output.is_new
        self._is_hot = output.is_hot
        self.output.add(output)
        self.pub.notify(output)
        return output

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, index={self._index}, value={self._value})"


def _as_tvalue(sample: Union[TValue, TBar, float], is_new: bool) -> TValue:
    if isinstance(sample, TValue):
        return sample
    if isinstance(sample, TBar):
        return TValue(sample.time, sample.close, sample.is_new)
    return TValue(utc_now(), float(sample), is_new)


class AbstractBase(IndicatorBase):
    """
    Single value input -> single value output.

    Subclasses implement ``calculation(value, is_new)``.
    """

    def __init__(self, name: str, warmup_period: int = 0, use_nan: Optional[bool] = None, source: Any = None):
        super().__init__(name, warmup_period, use_nan)
        if source is not None:
            self.subscribe(source)

    def subscribe(self, source: Any) -> None:
        """Recompute whenever ``source`` publishes (series, bar series or indicator)."""
        self._attach(source, self.sub)

    def sub(self, source: Any, sample: Union[TValue, TBar]) -> None:
        """Push handler; bars are consumed through their close."""
        self.calc(sample)

    def calc(self, sample: Union[TValue, TBar, float], is_new: bool = True) -> TValue:
        """
        Absorb one sample and return the published output.

        ``is_new`` only applies to raw floats; samples carry their own flag.
        """
        tv = _as_tvalue(sample, is_new)
        self.input = tv
        value = tv.value
        return self._step(tv.time, tv.is_new, is_valid(value), lambda new: self.calculation(value, new))

    @abstractmethod
    def calculation(self, value: float, is_new: bool) -> float:
        """Indicator-specific step over ``self.state`` and the validated input."""


class AbstractBarBase(IndicatorBase):
    """OHLCV bar input -> single value output."""

    input_kind = "bar"

    def __init__(self, name: str, warmup_period: int = 0, use_nan: Optional[bool] = None, source: Any = None):
        super().__init__(name, warmup_period, use_nan)
        if source is not None:
            self.subscribe(source)

    def subscribe(self, source: Any) -> None:
        self._attach(source, self.sub)

    def sub(self, source: Any, bar: Union[TBar, TValue]) -> None:
        self.calc(bar)

    def calc(self, bar: Union[TBar, TValue]) -> TValue:
        if isinstance(bar, TValue):
            bar = TBar.from_value(bar)
        self.input = bar
        valid = is_valid(bar.close) and is_valid(bar.high) and is_valid(bar.low)
        return self._step(bar.time, bar.is_new, valid, lambda new: self.calculation(bar, new))

    @abstractmethod
    def calculation(self, bar: TBar, is_new: bool) -> float:
        """Indicator-specific step over ``self.state`` and the validated bar."""


class AbstractPairBase(IndicatorBase):
    """
    Two value inputs -> single value output.

    When wired to two publishers the node appends only once both sides have
    produced the next position, and recomputes as a revision when either
    side revises the position already consumed.
    """

    input_kind = "pair"

    def __init__(self, name: str, warmup_period: int = 0, use_nan: Optional[bool] = None,
                 source1: Any = None, source2: Any = None):
        super().__init__(name, warmup_period, use_nan)
        if (source1 is None) != (source2 is None):
            raise SubscriptionError(f"{name} needs both sources or neither")
        if source1 is not None:
            self.subscribe(source1, source2)

    def init(self) -> None:
        super().init()
        self._current: List[Optional[TValue]] = [None, None]
        self._pending: Tuple[Deque[TValue], Deque[TValue]] = (deque(), deque())
        self._started = [False, False]

    def subscribe(self, source1: Any, source2: Any) -> None:
        if source1 is source2:
            raise SubscriptionError(f"{self.name} needs two distinct sources")
        self._attach(source1, self.sub1)
        self._attach(source2, self.sub2)

    def sub1(self, source: Any, sample: TValue) -> None:
        self._on_sample(0, _as_tvalue(sample, True))

    def sub2(self, source: Any, sample: TValue) -> None:
        self._on_sample(1, _as_tvalue(sample, True))

    def _on_sample(self, side: int, sample: TValue) -> None:
        pending = self._pending[side]
        if sample.is_new or not self._started[side]:
            self._started[side] = True
            pending.append(sample)
        elif pending:
            pending[-1] = sample
        else:
            self._current[side] = sample
            if self._current[1 - side] is not None:
                self.calc(self._current[0], self._current[1], is_new=False)
            return

        while self._pending[0] and self._pending[1]:
            first, second = self._pending[0].popleft(), self._pending[1].popleft()
            self._current = [first, second]
            self.calc(first, second, is_new=True)

    def calc(self, sample1: Union[TValue, float], sample2: Union[TValue, float],
             is_new: Optional[bool] = None) -> TValue:
        """
        Absorb one pair of inputs. The position flag is ``is_new`` when given,
        otherwise the first input's flag (True for raw floats).
        """
        tv1 = _as_tvalue(sample1, True if is_new is None else is_new)
        tv2 = _as_tvalue(sample2, tv1.is_new)
        new = tv1.is_new if is_new is None else is_new
        self.input = (tv1, tv2)
        v1, v2 = tv1.value, tv2.value
        # the first input decides the position, so it also stamps the output
        time = tv1.time
        valid = is_valid(v1) and is_valid(v2)
        return self._step(time, new, valid, lambda n: self.calculation(v1, v2, n))

    @abstractmethod
    def calculation(self, value1: float, value2: float, is_new: bool) -> float:
        """Indicator-specific step over ``self.state`` and both validated inputs."""
