"""
Publisher - synchronous pub/sub capability
==========================================
Every series and indicator owns one Publisher (exposed as ``.pub``).

Delivery: synchronous, in subscription order, depth-first through the graph.
No queueing, batching, retries or error isolation: a listener exception
propagates to whoever called ``notify``.
"""

from typing import Any, Callable, List

from ...core.exceptions import SubscriptionError
from ...core.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[[Any, Any], None]


class Publisher:
    """Ordered list of ``listener(source, sample)`` callables."""

    def __init__(self, owner: Any):
        self._owner = owner
        self._listeners: List[Listener] = []

    @property
    def owner(self) -> Any:
        return self._owner

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> None:
        """
        Attach a listener.

        Raises:
            SubscriptionError: listener is not callable, is a method of the
                owner itself, or is already attached
        """
        if not callable(listener):
            raise SubscriptionError(f"listener {listener!r} is not callable")
        if getattr(listener, '__self__', None) is self._owner:
            raise SubscriptionError(f"{_describe(self._owner)} cannot subscribe to itself")
        if listener in self._listeners:
            raise SubscriptionError(f"{_describe(listener)} is already subscribed to {_describe(self._owner)}")

        self._listeners.append(listener)
        logger.debug("publisher.listener_subscribed", {
            "source": _describe(self._owner),
            "listener": _describe(listener),
            "subscriber_count": len(self._listeners)
        })

    def unsubscribe(self, listener: Listener) -> None:
        """Detach one listener; raises SubscriptionError if it is not attached."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            raise SubscriptionError(
                f"{_describe(listener)} is not subscribed to {_describe(self._owner)}"
            ) from None
        logger.debug("publisher.listener_unsubscribed", {
            "source": _describe(self._owner),
            "listener": _describe(listener),
            "subscriber_count": len(self._listeners)
        })

    def is_subscribed(self, listener: Listener) -> bool:
        return listener in self._listeners

    def notify(self, sample: Any) -> None:
        # Snapshot so listeners may detach themselves while being notified
        for listener in tuple(self._listeners):
            listener(self._owner, sample)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"Publisher(owner={_describe(self._owner)}, subscribers={len(self._listeners)})"


def get_publisher(source: Any) -> Publisher:
    """Return the Publisher of a series or indicator, or raise SubscriptionError."""
    pub = getattr(source, 'pub', None)
    if not isinstance(pub, Publisher):
        raise SubscriptionError(f"{_describe(source)} does not publish samples")
    return pub


def _describe(obj: Any) -> str:
    target = getattr(obj, '__self__', obj)
    name = getattr(target, 'name', None)
    cls_name = type(target).__name__
    return f"{cls_name}({name})" if isinstance(name, str) and name else cls_name
