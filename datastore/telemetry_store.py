from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional, Sequence

from datastore.locks import ReadWriteLock
from errors import DeviceNotFound, InternalError
from models.records import BatchEntry, DeviceStatus, SensorReading
from services.classifier import Clock, classify, utc_now

logger = logging.getLogger(__name__)


class TelemetryStore:
    """In-memory readings and device status, guarded by one reader/writer lock.

    Readings are retained for the lifetime of the process; nothing is evicted.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._readings: Dict[str, List[SensorReading]] = {}
        self._devices: Dict[str, DeviceStatus] = {}
        self._lock = ReadWriteLock()

    def store_reading(self, reading: SensorReading) -> None:
        if not isinstance(reading, SensorReading):
            raise InternalError(f"Expected SensorReading, got {type(reading).__name__}.")
        self._check_device_id(reading.device_id)
        self._check_timestamp(reading.timestamp)

        with self._lock.write():
            self._readings.setdefault(reading.device_id, []).append(reading)
            self._update_status(reading.device_id, reading.timestamp, reading.battery, 1)

    def store_batch(self, device_id: str, entries: Sequence[BatchEntry]) -> None:
        self._check_device_id(device_id)
        if not entries:
            raise InternalError(f"Batch for device {device_id!r} is empty.")
        for entry in entries:
            if not isinstance(entry, BatchEntry):
                raise InternalError(f"Expected BatchEntry, got {type(entry).__name__}.")
            self._check_timestamp(entry.timestamp)

        converted = [entry.for_device(device_id) for entry in entries]

        # Strictly later timestamps win, so the first of equal timestamps is kept.
        latest = converted[0]
        for reading in converted[1:]:
            if reading.timestamp > latest.timestamp:
                latest = reading

        with self._lock.write():
            self._readings.setdefault(device_id, []).extend(converted)
            self._update_status(device_id, latest.timestamp, latest.battery, len(converted))

    def get_latest_reading(self, device_id: str) -> SensorReading:
        with self._lock.read():
            readings = self._readings.get(device_id)
            if not readings:
                raise DeviceNotFound(device_id)
            return readings[-1]

    def get_device_status(self, device_id: str) -> DeviceStatus:
        with self._lock.read():
            status = self._devices.get(device_id)
            if status is None:
                raise DeviceNotFound(device_id)
            return self._snapshot(status, self._clock())

    def get_all_devices(self) -> list[DeviceStatus]:
        """Return fresh snapshots of every known device, ordered by device id."""

        with self._lock.read():
            now = self._clock()
            return [
                self._snapshot(self._devices[device_id], now)
                for device_id in sorted(self._devices)
            ]

    def reading_count(self, device_id: str) -> int:
        with self._lock.read():
            return len(self._readings.get(device_id, ()))

    def _update_status(
        self,
        device_id: str,
        timestamp: datetime,
        battery: Optional[float],
        added: int,
    ) -> None:
        status = self._devices.get(device_id)
        if status is None:
            status = DeviceStatus(device_id=device_id, last_seen=timestamp)
            self._devices[device_id] = status
            logger.info("Registered new device", extra={"device_id": device_id})

        status.last_seen = timestamp
        status.total_readings += added
        if battery is not None and battery > 0:
            status.battery_level = battery

    @staticmethod
    def _snapshot(status: DeviceStatus, now: datetime) -> DeviceStatus:
        return replace(status, status=classify(status.last_seen, now))

    @staticmethod
    def _check_device_id(device_id: str) -> None:
        if not isinstance(device_id, str) or not device_id:
            logger.error("Rejected write without device id")
            raise InternalError("Reading is missing a device id.")

    @staticmethod
    def _check_timestamp(timestamp: datetime) -> None:
        if not isinstance(timestamp, datetime) or timestamp.tzinfo is None:
            logger.error("Rejected write with unnormalized timestamp", extra={"timestamp": timestamp})
            raise InternalError("Reading timestamp must be a timezone-aware datetime.")


@lru_cache
def build_default_store() -> TelemetryStore:
    return TelemetryStore()
