"""Unit tests for the TValue / TBar sample records."""

import dataclasses
import math
from datetime import datetime, timezone

import pytest

from streamta.domain.types import EMPTY_TBAR, EMPTY_TVALUE, TBar, TValue


T0 = datetime(2024, 3, 1, 12, 0, 5, tzinfo=timezone.utc)


@pytest.mark.unit
class TestTValue:

    def test_defaults_to_new_and_hot(self):
        tv = TValue(T0, 1.5)
        assert tv.is_new is True
        assert tv.is_hot is True

    def test_is_immutable(self):
        tv = TValue(T0, 1.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            tv.value = 2.0

    def test_now_stamps_current_utc_time(self):
        before = datetime.now(timezone.utc)
        tv = TValue.now(3)
        assert tv.time >= before
        assert tv.time.tzinfo is not None
        assert tv.value == 3.0

    def test_now_accepts_explicit_time(self):
        assert TValue.now(1, time=T0).time == T0

    def test_aliases_and_float(self):
        tv = TValue(T0, 2.25, is_new=False)
        assert tv.t == T0
        assert tv.v == 2.25
        assert float(tv) == 2.25

    def test_with_value_keeps_flags(self):
        tv = TValue(T0, 1.0, is_new=False, is_hot=False).with_value(9.0)
        assert tv == TValue(T0, 9.0, False, False)

    def test_str(self):
        assert str(TValue(T0, 1.234)) == "[2024-03-01 12:00:05, 1.23, IsNew: True, IsHot: True]"

    def test_empty_sentinel_is_nan(self):
        assert math.isnan(EMPTY_TVALUE.value)
        assert EMPTY_TVALUE.time == datetime.min


@pytest.mark.unit
class TestTBar:

    @pytest.fixture
    def bar(self):
        return TBar(T0, open=10.0, high=14.0, low=8.0, close=12.0, volume=100.0)

    def test_derived_prices(self, bar):
        assert bar.hl2 == pytest.approx(11.0)
        assert bar.oc2 == pytest.approx(11.0)
        assert bar.ohl3 == pytest.approx(32.0 / 3)
        assert bar.hlc3 == pytest.approx(34.0 / 3)
        assert bar.ohlc4 == pytest.approx(11.0)
        assert bar.hlcc4 == pytest.approx(11.5)

    def test_float_is_close(self, bar):
        assert float(bar) == 12.0

    def test_from_value_builds_flat_bar(self):
        bar = TBar.from_value(TValue(T0, 5.0, is_new=False))
        assert (bar.open, bar.high, bar.low, bar.close, bar.volume) == (5.0, 5.0, 5.0, 5.0, 5.0)
        assert bar.is_new is False
        assert bar.time == T0

    def test_now_converts_to_float(self):
        bar = TBar.now(1, 2, 0, 1, 10, time=T0)
        assert isinstance(bar.close, float)
        assert bar.time == T0

    def test_is_immutable(self, bar):
        with pytest.raises(dataclasses.FrozenInstanceError):
            bar.close = 1.0

    def test_str(self, bar):
        assert str(bar) == "[2024-03-01 12:00:05: O=10.00, H=14.00, L=8.00, C=12.00, V=100.00]"

    def test_empty_sentinel_is_nan(self):
        assert math.isnan(EMPTY_TBAR.close)
