"""Field-range validation for incoming readings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from app.schemas import BatchPayload, ReadingFields, SensorReadingPayload
from errors import ValidationFailure
from models.records import BatchEntry, ReadingBatch, SensorReading
from services.classifier import Clock, utc_now

MAX_BATCH_SIZE = 100

TEMPERATURE_RANGE = (-100.0, 100.0)
HUMIDITY_RANGE = (0.0, 100.0)
BATTERY_RANGE = (0.0, 100.0)


def _in_range(value: float, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    return low <= value <= high


def _is_unset(timestamp: Optional[datetime]) -> bool:
    if timestamp is None:
        return True
    return timestamp.replace(tzinfo=None) == datetime.min


class ReadingValidator:
    """Checks every rule and reports all violations at once."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock

    def validate_reading(self, payload: SensorReadingPayload) -> SensorReading:
        violations: List[str] = []

        if not payload.device_id:
            violations.append("device_id is required")
        if not _in_range(payload.temperature, TEMPERATURE_RANGE):
            violations.append("temperature must be between -100 and 100 celsius")
        if not _in_range(payload.humidity, HUMIDITY_RANGE):
            violations.append("humidity must be between 0 and 100 percent")
        if payload.battery is not None and not _in_range(payload.battery, BATTERY_RANGE):
            violations.append("battery must be between 0 and 100 percent")
        timestamp = self._normalize_timestamp(payload.timestamp)
        if timestamp is None:
            violations.append("timestamp out of range")

        if violations:
            raise ValidationFailure(violations)
        assert timestamp is not None

        return SensorReading(
            device_id=payload.device_id,
            temperature=payload.temperature,
            humidity=payload.humidity,
            timestamp=timestamp,
            pressure=payload.pressure,
            light=payload.light,
            motion=payload.motion,
            battery=payload.battery,
        )

    def validate_batch(self, payload: BatchPayload) -> ReadingBatch:
        violations: List[str] = []
        entries: List[BatchEntry] = []

        if not payload.device_id:
            violations.append("device_id is required")
        if not payload.readings:
            violations.append("at least one reading is required")
        if len(payload.readings) > MAX_BATCH_SIZE:
            violations.append(f"maximum {MAX_BATCH_SIZE} readings per batch")

        # Battery is not range-checked for batch entries.
        for index, reading in enumerate(payload.readings):
            if not _in_range(reading.temperature, TEMPERATURE_RANGE):
                violations.append(f"reading {index}: temperature out of range")
            if not _in_range(reading.humidity, HUMIDITY_RANGE):
                violations.append(f"reading {index}: humidity out of range")
            timestamp = self._normalize_timestamp(reading.timestamp)
            if timestamp is None:
                violations.append(f"reading {index}: timestamp out of range")
                continue
            entries.append(self._to_entry(reading, timestamp))

        if violations:
            raise ValidationFailure(violations)

        return ReadingBatch(device_id=payload.device_id, entries=tuple(entries))

    @staticmethod
    def _to_entry(reading: ReadingFields, timestamp: datetime) -> BatchEntry:
        return BatchEntry(
            temperature=reading.temperature,
            humidity=reading.humidity,
            timestamp=timestamp,
            pressure=reading.pressure,
            light=reading.light,
            motion=reading.motion,
            battery=reading.battery,
        )

    def _normalize_timestamp(self, timestamp: Optional[datetime]) -> Optional[datetime]:
        """Return the UTC instant, or None when it falls outside datetime's range."""
        if _is_unset(timestamp):
            return self._clock()
        assert timestamp is not None
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        try:
            return timestamp.astimezone(timezone.utc)
        except OverflowError:
            return None
