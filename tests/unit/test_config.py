"""Unit tests for the pydantic settings and the JSON/.env loader."""

import json

import pytest
from pydantic import ValidationError

from streamta.infrastructure.config import (
    AppSettings,
    IndicatorSettings,
    LoggingSettings,
    LogLevel,
    SeriesSettings,
    build_app_settings,
    get_settings,
    load_app_settings_from_json,
    set_settings,
)
from streamta.infrastructure.config.config_loader import get_settings_from_working_directory


@pytest.mark.unit
class TestDefaults:

    def test_app_defaults(self):
        settings = AppSettings()
        assert settings.app_name == "streamta"
        assert settings.logging.level == LogLevel.INFO
        assert settings.logging.file_enabled is False
        assert settings.indicators.default_use_nan is False
        assert settings.indicators.warmup_confidence == pytest.approx(0.05)
        assert (settings.indicators.macd_fast, settings.indicators.macd_slow) == (12, 26)
        assert settings.series.backfill_interval_hours == 1.0


@pytest.mark.unit
class TestValidation:

    @pytest.mark.parametrize("confidence", [0.0, 1.0, -0.5, 2.0])
    def test_warmup_confidence_must_be_a_fraction(self, confidence):
        with pytest.raises(ValidationError):
            IndicatorSettings(warmup_confidence=confidence)

    def test_macd_fast_must_be_below_slow(self):
        with pytest.raises(ValidationError):
            IndicatorSettings(macd_fast=30, macd_slow=26)

    def test_backfill_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            SeriesSettings(backfill_interval_hours=0)


@pytest.mark.unit
class TestEnvironment:

    def test_prefixed_environment_variables(self, monkeypatch):
        monkeypatch.setenv("INDICATOR_DEFAULT_USE_NAN", "true")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert IndicatorSettings().default_use_nan is True
        assert LoggingSettings().level == LogLevel.DEBUG

    def test_placeholders_resolve_from_environment(self, monkeypatch):
        monkeypatch.setenv("STREAMTA_TEST_NAME", "replay")
        settings = build_app_settings({"app_name": "${STREAMTA_TEST_NAME}"})
        assert settings.app_name == "replay"


@pytest.mark.unit
class TestJsonLoader:

    def test_sections_are_mapped(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "debug": True,
            "indicators": {"macd_fast": 5, "macd_slow": 10},
            "series": {"default_value_name": "Price"},
            "unknown_section": {"ignored": 1},
        }))

        settings = load_app_settings_from_json(str(path))

        assert settings.debug is True
        assert settings.indicators.macd_fast == 5
        assert settings.series.default_value_name == "Price"

    def test_missing_file_falls_back_to_defaults(self, tmp_path, capsys):
        settings = load_app_settings_from_json(str(tmp_path / "missing.json"))
        assert settings.indicators.macd_slow == 26
        assert "Failed to load JSON config" in capsys.readouterr().err

    def test_invalid_values_fall_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"indicators": {"warmup_confidence": 3}}))
        assert load_app_settings_from_json(str(path)).indicators.warmup_confidence == pytest.approx(0.05)

    def test_working_directory_config(self, tmp_path, monkeypatch):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.json").write_text(json.dumps({"app_name": "from-cwd"}))
        monkeypatch.chdir(tmp_path)
        assert get_settings_from_working_directory().app_name == "from-cwd"


@pytest.mark.unit
class TestProcessSettings:

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_set_settings_overrides(self):
        custom = build_app_settings({"series": {"default_bar_name": "Candles"}})
        set_settings(custom)
        assert get_settings() is custom
