"""
Configuration Loader - Bridge Between JSON Config and AppSettings
=================================================================
Loads configuration from a JSON file (optional) and environment/.env,
and maps it onto the AppSettings structure.
"""

import json
import os
import sys
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .settings import AppSettings, IndicatorSettings, LoggingSettings, SeriesSettings

_settings: Optional[AppSettings] = None
_settings_lock = threading.Lock()

_SECTIONS = {
    'logging': LoggingSettings,
    'indicators': IndicatorSettings,
    'series': SeriesSettings,
}


def _resolve_env_vars(data: Any) -> Any:
    """Recursively replace "${VAR}" string values with environment values."""
    if isinstance(data, dict):
        return {k: _resolve_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars(i) for i in data]
    elif isinstance(data, str) and data.startswith("${") and data.endswith("}"):
        return os.getenv(data[2:-1], "")
    return data


def build_app_settings(config_data: Dict[str, Any]) -> AppSettings:
    """
    Build AppSettings from an already-parsed config mapping.

    Known sections are validated by their own settings class; explicit values
    take precedence over environment variables.
    """
    resolved = _resolve_env_vars(config_data)
    kwargs: Dict[str, Any] = {}
    for section, settings_cls in _SECTIONS.items():
        if section in resolved:
            kwargs[section] = settings_cls(**resolved[section])
    for key in ('app_name', 'version', 'debug'):
        if key in resolved:
            kwargs[key] = resolved[key]
    return AppSettings(**kwargs)


def load_app_settings_from_json(config_path: str = "config/config.json") -> AppSettings:
    """
    Load AppSettings from JSON configuration file.

    Args:
        config_path: Path to config.json file

    Returns:
        Configured AppSettings instance (defaults if the file is unusable)
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = json.load(f)
        return build_app_settings(config_data)
    except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
        print(f"[WARNING] Failed to load JSON config from {config_path}: {e}", file=sys.stderr)
        print("[INFO] Using default AppSettings configuration", file=sys.stderr)
        return AppSettings()


def get_settings_from_working_directory() -> AppSettings:
    """
    Load settings from config.json in the current working directory,
    falling back to environment-only settings.
    """
    load_dotenv()
    for config_path in ("config/config.json", "streamta.json"):
        if Path(config_path).exists():
            return load_app_settings_from_json(config_path)
    return AppSettings()


def get_settings() -> AppSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = get_settings_from_working_directory()
    return _settings


def set_settings(settings: Optional[AppSettings]) -> None:
    """Override (or with None, reset) the process-wide settings."""
    global _settings
    with _settings_lock:
        _settings = settings
