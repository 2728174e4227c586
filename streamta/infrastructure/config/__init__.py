"""Configuration package: pydantic settings and their loader."""

from .settings import AppSettings, LoggingSettings, IndicatorSettings, SeriesSettings, LogLevel
from .config_loader import get_settings, set_settings, load_app_settings_from_json, build_app_settings

__all__ = [
    'AppSettings',
    'LoggingSettings',
    'IndicatorSettings',
    'SeriesSettings',
    'LogLevel',
    'get_settings',
    'set_settings',
    'load_app_settings_from_json',
    'build_app_settings',
]
