"""Unit tests for the synchronous Publisher."""

import pytest

from streamta.core.exceptions import SubscriptionError
from streamta.domain.series import Publisher, TSeries, get_publisher
from streamta.domain.services.indicators import Sma


class Node:
    def __init__(self, name):
        self.name = name
        self.pub = Publisher(self)
        self.received = []

    def listen(self, source, sample):
        self.received.append((source, sample))


@pytest.mark.unit
class TestSubscription:

    def test_notify_delivers_owner_and_sample(self):
        source = Node("source")
        sink = Node("sink")
        source.pub.subscribe(sink.listen)

        source.pub.notify(42)

        assert sink.received == [(source, 42)]

    def test_delivery_in_subscription_order(self):
        source = Node("source")
        calls = []
        source.pub.subscribe(lambda s, x: calls.append("first"))
        source.pub.subscribe(lambda s, x: calls.append("second"))
        source.pub.subscribe(lambda s, x: calls.append("third"))

        source.pub.notify(None)

        assert calls == ["first", "second", "third"]

    def test_self_subscription_rejected(self):
        node = Node("loop")
        with pytest.raises(SubscriptionError):
            node.pub.subscribe(node.listen)

    def test_duplicate_subscription_rejected(self):
        source, sink = Node("source"), Node("sink")
        source.pub.subscribe(sink.listen)
        with pytest.raises(SubscriptionError):
            source.pub.subscribe(sink.listen)

    def test_non_callable_rejected(self):
        with pytest.raises(SubscriptionError):
            Node("source").pub.subscribe(42)

    def test_unsubscribe_detaches_individually(self):
        source, a, b = Node("source"), Node("a"), Node("b")
        source.pub.subscribe(a.listen)
        source.pub.subscribe(b.listen)

        source.pub.unsubscribe(a.listen)
        source.pub.notify(1)

        assert a.received == []
        assert len(b.received) == 1
        assert source.pub.subscriber_count == 1
        assert not source.pub.is_subscribed(a.listen)

    def test_unsubscribe_unknown_listener_raises(self):
        source, sink = Node("source"), Node("sink")
        with pytest.raises(SubscriptionError):
            source.pub.unsubscribe(sink.listen)

    def test_listener_may_detach_during_notify(self):
        source = Node("source")
        calls = []

        def once(src, sample):
            calls.append(sample)
            source.pub.unsubscribe(once)

        source.pub.subscribe(once)
        source.pub.notify(1)
        source.pub.notify(2)

        assert calls == [1]

    def test_listener_exception_propagates(self):
        source = Node("source")

        def broken(src, sample):
            raise RuntimeError("boom")

        source.pub.subscribe(broken)
        with pytest.raises(RuntimeError, match="boom"):
            source.pub.notify(1)


@pytest.mark.unit
class TestGetPublisher:

    def test_series_and_indicators_publish(self):
        series = TSeries()
        sma = Sma(3)
        assert get_publisher(series) is series.pub
        assert get_publisher(sma) is sma.pub

    def test_plain_object_does_not_publish(self):
        with pytest.raises(SubscriptionError):
            get_publisher(object())

    def test_indicator_cannot_subscribe_to_itself(self):
        sma = Sma(3)
        with pytest.raises(SubscriptionError):
            sma.subscribe(sma)

    def test_indicator_cannot_subscribe_to_its_output_series(self):
        sma = Sma(3)
        with pytest.raises(SubscriptionError):
            sma.subscribe(sma.output)
        sma.calc(1.0)
        assert sma.count == 1

    def test_indicator_cannot_subscribe_twice(self):
        series = TSeries()
        sma = Sma(3, source=series)
        with pytest.raises(SubscriptionError):
            sma.subscribe(series)
