from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from logging.config import dictConfig
from typing import Any, Iterable, Sequence

from settings import get_settings

# Context attached by the ingest, query and auth paths through ``extra=``.
TELEMETRY_CONTEXT_KEYS = (
    "device_id",
    "readings_count",
    "status",
    "temperature",
    "humidity",
    "timestamp",
    "error_count",
    "reason",
    "remote_addr",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append ``key=value`` pairs for known telemetry context to each line.

    Keys missing from the record or set to ``None`` are skipped. Datetimes
    render as ISO 8601 and enum members as their value, so callers can pass
    ``SensorReading.timestamp`` or ``DeviceState`` straight through.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or TELEMETRY_CONTEXT_KEYS)

    @staticmethod
    def _render(value: Any) -> str:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context_parts: list[str] = []
        for key in self._extra_keys:
            value = getattr(record, key, None)
            if value is None:
                continue
            context_parts.append(f"{key}={self._render(value)}")
        if context_parts:
            return f"{message} | {' '.join(context_parts)}"
        return message


def configure_logging(level: str | int | None = None) -> None:
    """Configure application-wide logging with contextual formatting."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    log_level = level if level is not None else settings.log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(TELEMETRY_CONTEXT_KEYS),
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True
