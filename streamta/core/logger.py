"""
Structured logging
==================
Every record is one JSON object::

    {"timestamp", "level", "module", "funcName", "lineno", "event_type", "data"}

Call sites log dotted event names with a context dict, e.g.
``logger.debug("indicator.created", {"indicator": "Sma(3)"})``.
"""

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Optional

_logger_cache: Dict[str, 'StructuredLogger'] = {}
_cache_lock = threading.RLock()

_PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class CustomJsonEncoder(json.JSONEncoder):
    """Serialises datetimes, enums, classes and numpy scalars found in event data."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.name
        if isinstance(obj, type):
            return obj.__name__
        if hasattr(obj, 'item'):
            return obj.item()
        return super().default(obj)


def _stringify_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _stringify_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_stringify_keys(item) for item in value]
    return value


class JsonFormatter(logging.Formatter):
    """Renders a record whose ``msg`` is a payload dict (or plain text) as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            body = _stringify_keys(record.msg)
        else:
            body = {"message": record.getMessage()}

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
        }
        entry.update(body)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, cls=CustomJsonEncoder)


class StructuredLogger:
    """
    ``logging.Logger`` wrapper taking ``(event_type, data)`` pairs.

    ``config`` is anything shaped like ``LoggingSettings``; missing
    attributes take the LoggingSettings defaults.
    """

    def __init__(self, name: str, config: Any, filename: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.logger.propagate = False

        level = getattr(config, 'level', 'INFO')
        level = getattr(level, 'value', level)
        self.logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

        structured = getattr(config, 'structured_logging', True)
        if getattr(config, 'console_enabled', True):
            self._add_console_handler(structured)

        if filename or getattr(config, 'file_enabled', False):
            log_dir = getattr(config, 'log_dir', 'logs')
            self._add_file_handler(
                str(Path(log_dir) / (filename or f"{name}.jsonl")),
                getattr(config, 'max_file_size_mb', 100),
                getattr(config, 'backup_count', 5),
                structured,
            )

    @staticmethod
    def _formatter(structured: bool) -> logging.Formatter:
        return JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)

    def _has_handler(self, match: Callable[[logging.Handler], bool]) -> bool:
        return any(match(handler) for handler in self.logger.handlers)

    def _add_console_handler(self, structured: bool) -> None:
        # Loggers are module-level singletons; re-creating the wrapper must not stack handlers
        if self._has_handler(lambda h: type(h) is logging.StreamHandler and h.stream is sys.stdout):
            return
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(self._formatter(structured))
        self.logger.addHandler(handler)

    def _add_file_handler(self, log_file: str, max_size_mb: int, backup_count: int, structured: bool) -> None:
        target = os.path.abspath(log_file)
        if self._has_handler(lambda h: isinstance(h, RotatingFileHandler) and h.baseFilename == target):
            return

        os.makedirs(os.path.dirname(target), exist_ok=True)
        try:
            handler = RotatingFileHandler(target, maxBytes=max_size_mb * 1024 * 1024,
                                          backupCount=backup_count, encoding='utf-8')
        except OSError as e:
            print(f"ERROR: Failed to create file handler for {log_file}: {e}", file=sys.stderr)
            return
        handler.setFormatter(self._formatter(structured))
        self.logger.addHandler(handler)

    def _log(self, level: int, event_type: str, data: Optional[Dict[str, Any]], exc_info=False) -> None:
        self.logger.log(level, {"event_type": event_type, "data": data or {}}, exc_info=exc_info)

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, event_type: str, data: Dict[str, Any] = None):
        self._log(logging.DEBUG, event_type, data)

    def info(self, event_type: str, data: Dict[str, Any] = None):
        self._log(logging.INFO, event_type, data)

    def warning(self, event_type: str, data: Dict[str, Any] = None):
        self._log(logging.WARNING, event_type, data)

    def error(self, event_type: str, data: Dict[str, Any] = None, exc_info=False):
        """Log an error event, optionally with the active exception's traceback."""
        self._log(logging.ERROR, event_type, data, exc_info=exc_info)


class _FallbackConfig:
    level = "WARNING"
    console_enabled = True
    file_enabled = False
    structured_logging = True


def get_logger(name: str) -> StructuredLogger:
    """
    Cached StructuredLogger for ``name`` (usually the caller's ``__name__``).

    Settings are read on first use of each name. If they cannot be loaded
    the logger still works with a WARNING-level console config.
    """
    logger = _logger_cache.get(name)
    if logger is not None:
        return logger

    with _cache_lock:
        if name in _logger_cache:
            return _logger_cache[name]

        from ..infrastructure.config.config_loader import get_settings
        try:
            config = get_settings().logging
        except Exception as e:
            print(f"WARNING: Failed to load config for logger '{name}': {e}", file=sys.stderr)
            config = _FallbackConfig()

        logger = StructuredLogger(name, config)
        _logger_cache[name] = logger
        return logger


def reset_logger_cache() -> None:
    """Forget cached wrappers so the next get_logger() re-reads settings."""
    with _cache_lock:
        _logger_cache.clear()
