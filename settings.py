from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_KEY_ENV = "API_KEY"
_ENVIRONMENT_ENV = "ENVIRONMENT"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_SERVER_NAME_ENV = "SERVER_NAME"
_VERSION_ENV = "SERVICE_VERSION"
_HOST_ENV = "HOST"
_PORT_ENV = "PORT"

_FALLBACK_SERVER_NAME = "sensor-telemetry-api"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    environment: str
    log_level: str
    server_name: str
    version: str
    host: str
    port: int

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip().lstrip(":")
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if 0 < parsed < 65536 else default


def _default_server_name() -> str:
    try:
        hostname = socket.gethostname()
    except OSError:
        return _FALLBACK_SERVER_NAME
    return hostname or _FALLBACK_SERVER_NAME


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_key=_read_optional_env(_API_KEY_ENV, None),
        environment=_read_str_env(_ENVIRONMENT_ENV, "development"),
        log_level=_read_log_level("INFO"),
        server_name=_read_str_env(_SERVER_NAME_ENV, _default_server_name()),
        version=_read_str_env(_VERSION_ENV, "1.0.0"),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_port(3000),
    )
