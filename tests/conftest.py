"""
Shared fixtures for the streamta test-suite.

Every test starts from default settings so environment or a stray
config/config.json in the working directory cannot change indicator
defaults between runs.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest

from streamta.infrastructure.config import AppSettings, set_settings


@pytest.fixture(autouse=True)
def default_settings():
    settings = AppSettings()
    set_settings(settings)
    yield settings
    set_settings(None)


class DummyLogger:
    """Records (event_type, data) pairs instead of writing JSON lines."""

    def __init__(self) -> None:
        self.messages: List[tuple] = []

    def _record(self, level: str, event_type: str, data: Dict[str, Any] = None) -> None:
        self.messages.append((level, event_type, data or {}))

    def info(self, event_type: str, data: Dict[str, Any] = None) -> None:
        self._record("info", event_type, data)

    def debug(self, event_type: str, data: Dict[str, Any] = None) -> None:
        self._record("debug", event_type, data)

    def warning(self, event_type: str, data: Dict[str, Any] = None) -> None:
        self._record("warning", event_type, data)

    def error(self, event_type: str, data: Dict[str, Any] = None, exc_info=False) -> None:
        self._record("error", event_type, data)

    def events(self, level: str = None) -> List[str]:
        return [event for lvl, event, _ in self.messages if level is None or lvl == level]


@pytest.fixture
def dummy_logger() -> DummyLogger:
    return DummyLogger()


@pytest.fixture
def minute_times():
    """Factory of evenly spaced UTC timestamps, one minute apart."""
    start = datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)

    def _make(n: int) -> List[datetime]:
        return [start + timedelta(minutes=i) for i in range(n)]

    return _make
