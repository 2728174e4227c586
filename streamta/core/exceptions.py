"""
Core Exceptions - streamta
==========================
Centralized exception definitions for the streaming indicator framework.

Invalid sample values (NaN / Infinity) are NOT represented here: they are
recovered locally by carry-forward and never raised.
"""


class StreamTAError(Exception):
    """Base exception for all framework errors."""
    pass


class EmptyBufferError(StreamTAError, LookupError):
    """
    Raised when a reduction that needs at least one element is requested
    from an empty CircularBuffer (max, min, average, oldest, indexing).

    Callers must check ``count`` first or rely on ``add`` preceding queries.
    """
    def __init__(self, operation: str, message: str = None):
        self.operation = operation
        self.message = message or f"Buffer is empty: cannot compute {operation}()"
        super().__init__(self.message)


class InvalidPeriodError(StreamTAError, ValueError):
    """
    Raised at construction time when a windowed component is configured
    with a period outside its supported range.
    """
    def __init__(self, parameter: str, value, reason: str = None):
        self.parameter = parameter
        self.value = value
        self.reason = reason or "must be greater than or equal to 1"
        self.message = f"Invalid {parameter}={value!r}: {self.reason}"
        super().__init__(self.message)


class SubscriptionError(StreamTAError):
    """
    Raised when wiring the dataflow graph is structurally wrong:
    self-subscription, duplicate subscription, detaching an unknown
    listener, or subscribing to an object that does not publish.
    """
    def __init__(self, reason: str):
        self.reason = reason
        self.message = f"Subscription error: {reason}"
        super().__init__(self.message)


class IndicatorNotFoundError(StreamTAError, KeyError):
    """Raised when the indicator registry has no entry for a name."""
    def __init__(self, name: str, available=None):
        self.name = name
        self.available = sorted(available or [])
        self.message = f"Indicator not registered: {name}"
        super().__init__(self.message)

    def __str__(self):
        return self.message
