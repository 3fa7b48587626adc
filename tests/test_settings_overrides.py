from __future__ import annotations

import logging
from datetime import datetime, timezone

from logging_config import ContextualFormatter
from models.records import DeviceState
from settings import get_settings


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("API_KEY", "  secret  ")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("SERVER_NAME", "edge-gateway")
    monkeypatch.setenv("SERVICE_VERSION", "2.3.4")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.api_key == "secret"
        assert settings.environment == "production"
        assert settings.is_production is True
        assert settings.log_level == "DEBUG"
        assert settings.server_name == "edge-gateway"
        assert settings.version == "2.3.4"
    finally:
        get_settings.cache_clear()


def test_blank_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("API_KEY", "   ")
    monkeypatch.setenv("ENVIRONMENT", "")
    monkeypatch.setenv("LOG_LEVEL", " ")
    monkeypatch.delenv("SERVICE_VERSION", raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.api_key is None
        assert settings.environment == "development"
        assert settings.is_production is False
        assert settings.log_level == "INFO"
        assert settings.version == "1.0.0"
        assert settings.server_name
    finally:
        get_settings.cache_clear()


def test_contextual_formatter_appends_known_extras() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")
    record = logging.LogRecord(
        name="services.telemetry",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Sensor data received",
        args=(),
        exc_info=None,
    )
    record.device_id = "esp32-01"
    record.readings_count = 3
    record.unrelated = "ignored"

    assert formatter.format(record) == "INFO Sensor data received | device_id=esp32-01 readings_count=3"


def test_contextual_formatter_renders_datetimes_and_enums() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord(
        name="app.api",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Device status retrieved",
        args=(),
        exc_info=None,
    )
    record.status = DeviceState.idle
    record.timestamp = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    assert formatter.format(record) == (
        "Device status retrieved | status=idle timestamp=2024-01-01T12:00:00+00:00"
    )


def test_bind_address_defaults_and_overrides(monkeypatch) -> None:
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.setenv("PORT", "not-a-port")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.host == "0.0.0.0"
        assert settings.port == 3000

        monkeypatch.setenv("HOST", " 127.0.0.1 ")
        monkeypatch.setenv("PORT", "8080")
        get_settings.cache_clear()
        settings = get_settings()
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080

        monkeypatch.setenv("PORT", "70000")
        get_settings.cache_clear()
        assert get_settings().port == 3000
    finally:
        get_settings.cache_clear()
