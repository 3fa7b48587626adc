"""Error taxonomy shared by the telemetry core and the HTTP layer."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Iterable


class ErrorKind(str, Enum):
    """Closed set of failure kinds the telemetry core can report."""

    validation_failure = "validation_failure"
    device_not_found = "device_not_found"
    internal_error = "internal_error"


class TelemetryError(Exception):
    """Base class for every error raised by the telemetry core."""

    kind: ClassVar[ErrorKind]


class ValidationFailure(TelemetryError):
    """One or more field-level violations, always reported together."""

    kind = ErrorKind.validation_failure

    def __init__(self, violations: Iterable[str]) -> None:
        self.violations: list[str] = list(violations)
        if not self.violations:
            raise ValueError("ValidationFailure requires at least one violation.")
        super().__init__("; ".join(self.violations))


class DeviceNotFound(TelemetryError):
    """Query against a device with no stored readings."""

    kind = ErrorKind.device_not_found

    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        super().__init__(f"Device {device_id!r} not found.")


class InternalError(TelemetryError):
    """Store invariant violation; not expected once validation has run."""

    kind = ErrorKind.internal_error
