"""Unit tests for the rolling extremes and the bar indicators (Tr, Atr)."""

import pytest

from streamta.domain.series import TBarSeries
from streamta.domain.services.indicators import Atr, Max, Min, Sma, Tr
from streamta.domain.types import TBar, TValue

NAN = float('nan')


def bar(high, low, close, is_new=True):
    return TBar.now(open=close, high=high, low=low, close=close, volume=1.0, is_new=is_new)


@pytest.mark.unit
class TestExtremes:

    def test_max_over_window(self):
        ind = Max(3)
        outputs = [ind.calc(v).value for v in (1.0, 5.0, 2.0, 3.0, 1.0)]
        assert outputs == [1.0, 5.0, 5.0, 5.0, 3.0]

    def test_min_over_window(self):
        ind = Min(3)
        outputs = [ind.calc(v).value for v in (4.0, 2.0, 6.0, 7.0, 8.0)]
        assert outputs == [4.0, 2.0, 2.0, 2.0, 6.0]

    def test_revision_replaces_newest(self):
        ind = Max(2)
        ind.calc(3.0)
        ind.calc(9.0)
        assert ind.calc(1.0, is_new=False).value == 3.0

    def test_warmup_equals_period(self):
        ind = Min(4)
        assert ind.warmup_period == 4
        assert ind.name == "Min(4)"


@pytest.mark.unit
class TestTrueRange:

    def test_true_range_uses_previous_close(self):
        tr = Tr()
        outputs = [tr.calc(b).value for b in (bar(10, 8, 9), bar(12, 9, 11), bar(11, 7, 8))]
        assert outputs == [2.0, 3.0, 4.0]

    def test_first_bar_is_cold(self):
        tr = Tr()
        assert tr.calc(bar(10, 8, 9)).is_hot is False
        assert tr.calc(bar(10, 8, 9)).is_hot is True

    def test_revision_restores_previous_close(self):
        tr = Tr()
        tr.calc(bar(10, 8, 9))
        tr.calc(bar(12, 9, 11))
        # measured against the close before the revised bar (9), not 11
        assert tr.calc(bar(9.5, 9.3, 9.4, is_new=False)).value == pytest.approx(0.5)
        assert tr.calc(bar(15, 14, 14.5)).value == pytest.approx(15 - 9.4)

    def test_invalid_bar_carries_forward(self):
        tr = Tr()
        tr.calc(bar(10, 8, 9))
        out = tr.calc(bar(NAN, 8, 9))
        assert out.value == 2.0
        assert tr.index == 2

    def test_value_sample_becomes_flat_bar(self):
        tr = Tr()
        assert tr.calc(TValue.now(5.0)).value == 0.0


@pytest.mark.unit
class TestAverageTrueRange:

    def test_rma_of_true_range(self):
        atr = Atr(2)
        outputs = [atr.calc(b).value for b in (bar(10, 8, 9), bar(12, 9, 11), bar(11, 7, 8))]
        assert outputs == [pytest.approx(2.0), pytest.approx(2.5), pytest.approx(3.25)]
        assert atr.tr == 4.0

    def test_revision(self):
        atr = Atr(2)
        for b in (bar(10, 8, 9), bar(12, 9, 11), bar(11, 7, 8)):
            atr.calc(b)
        out = atr.calc(bar(11, 10, 10.5, is_new=False))
        assert out.value == pytest.approx(1.75)
        assert atr.count == 3

    def test_warmup_follows_rma(self):
        assert Atr(2).warmup_period == 5
        assert Atr().name == "Atr(14)"

    def test_subscribed_to_bar_series(self):
        bars = TBarSeries()
        atr = Atr(2, source=bars)
        bars.add_bar(9, 10, 8, 9, 1)
        bars.add_bar(9, 12, 9, 11, 1)
        bars.add_bar(11, 11, 7, 8, 1)
        assert atr.value == pytest.approx(3.25)


@pytest.mark.unit
class TestValueIndicatorsOnBars:

    def test_value_indicator_consumes_close(self):
        bars = TBarSeries()
        sma = Sma(2, source=bars)
        bars.add_bar(1, 5, 0, 2, 1)
        bars.add_bar(1, 5, 0, 4, 1)
        bars.add_bar(1, 5, 0, 8, 1, is_new=False)
        assert sma.value == pytest.approx(5.0)
        assert sma.index == 2

    def test_value_indicator_on_component_series(self):
        bars = TBarSeries()
        highest = Max(2, source=bars.high)
        bars.add_bar(1, 5, 0, 2, 1)
        bars.add_bar(1, 7, 0, 2, 1)
        bars.add_bar(1, 3, 0, 2, 1)
        assert highest.value == 7.0
