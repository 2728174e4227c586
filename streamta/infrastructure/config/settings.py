"""
Unified Configuration Settings - Single Source of Truth
=======================================================
All framework configuration using Pydantic Settings.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator
from enum import Enum


class LogLevel(str, Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# === LOGGING CONFIGURATION ===

class LoggingSettings(BaseSettings):
    """Logging configuration"""
    level: LogLevel = Field(default=LogLevel.INFO)
    file_enabled: bool = Field(default=False)
    console_enabled: bool = Field(default=True)
    structured_logging: bool = Field(default=True)
    log_dir: str = Field(default="logs")
    max_file_size_mb: int = Field(default=100)
    backup_count: int = Field(default=5)

    class Config:
        env_prefix = "LOG_"


# === INDICATOR CONFIGURATION ===

class IndicatorSettings(BaseSettings):
    """Defaults applied when indicators are constructed without explicit values"""
    default_use_nan: bool = Field(default=False, description="Publish NaN instead of cold (warming-up) values")
    warmup_confidence: float = Field(
        default=0.05,
        description="Residual weight of the seed value at which an exponential average counts as hot"
    )
    macd_fast: int = Field(default=12)
    macd_slow: int = Field(default=26)
    macd_signal: int = Field(default=9)

    @field_validator('warmup_confidence')
    @classmethod
    def validate_warmup_confidence(cls, v):
        if not 0.0 < v < 1.0:
            raise ValueError(f"warmup_confidence must be in (0, 1), got {v}")
        return v

    @model_validator(mode='after')
    def validate_macd_periods(self):
        if min(self.macd_fast, self.macd_slow, self.macd_signal) < 1:
            raise ValueError("MACD periods must be >= 1")
        if self.macd_fast >= self.macd_slow:
            raise ValueError(f"macd_fast ({self.macd_fast}) must be less than macd_slow ({self.macd_slow})")
        return self

    class Config:
        env_prefix = "INDICATOR_"


# === SERIES CONFIGURATION ===

class SeriesSettings(BaseSettings):
    """Series container defaults"""
    default_value_name: str = Field(default="Data")
    default_bar_name: str = Field(default="Bar")
    backfill_interval_hours: float = Field(
        default=1.0,
        description="Spacing of synthetic timestamps when backfilling raw floats"
    )

    @field_validator('backfill_interval_hours')
    @classmethod
    def validate_interval(cls, v):
        if v <= 0:
            raise ValueError("backfill_interval_hours must be positive")
        return v

    class Config:
        env_prefix = "SERIES_"


# === MAIN APPLICATION SETTINGS ===

class AppSettings(BaseSettings):
    """Main settings object"""

    app_name: str = Field(default="streamta")
    version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    indicators: IndicatorSettings = Field(default_factory=IndicatorSettings)
    series: SeriesSettings = Field(default_factory=SeriesSettings)

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"  # Allows INDICATORS__DEFAULT_USE_NAN=true
        case_sensitive = False
        extra = "ignore"
