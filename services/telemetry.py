"""Ingestion and query orchestration over the telemetry store."""

from __future__ import annotations

import logging
from functools import lru_cache

from app.schemas import BatchPayload, SensorReadingPayload
from datastore.telemetry_store import TelemetryStore, build_default_store
from errors import ValidationFailure
from models.records import DeviceStatus, ReadingBatch, SensorReading
from services.validator import ReadingValidator

logger = logging.getLogger(__name__)


class TelemetryService:
    """Validates writes before they reach the store and exposes the read side."""

    def __init__(self, store: TelemetryStore, validator: ReadingValidator) -> None:
        self.store = store
        self.validator = validator

    def ingest_reading(self, payload: SensorReadingPayload) -> SensorReading:
        try:
            reading = self.validator.validate_reading(payload)
        except ValidationFailure as exc:
            logger.warning(
                "Sensor data validation failed: %s",
                "; ".join(exc.violations),
                extra={"device_id": payload.device_id or None, "error_count": len(exc.violations)},
            )
            raise

        self.store.store_reading(reading)
        logger.info(
            "Sensor data received",
            extra={
                "device_id": reading.device_id,
                "temperature": reading.temperature,
                "humidity": reading.humidity,
                "timestamp": reading.timestamp,
            },
        )
        return reading

    def ingest_batch(self, payload: BatchPayload) -> ReadingBatch:
        try:
            batch = self.validator.validate_batch(payload)
        except ValidationFailure as exc:
            logger.warning(
                "Batch sensor data validation failed: %s",
                "; ".join(exc.violations),
                extra={"device_id": payload.device_id or None, "error_count": len(exc.violations)},
            )
            raise

        self.store.store_batch(batch.device_id, batch.entries)
        logger.info(
            "Batch sensor data received",
            extra={"device_id": batch.device_id, "readings_count": len(batch.entries)},
        )
        return batch

    def latest_reading(self, device_id: str) -> SensorReading:
        return self.store.get_latest_reading(device_id)

    def device_status(self, device_id: str) -> DeviceStatus:
        return self.store.get_device_status(device_id)

    def list_devices(self) -> list[DeviceStatus]:
        return self.store.get_all_devices()


@lru_cache
def build_default_service() -> TelemetryService:
    """Factory that wires the service with the process-wide store."""
    return TelemetryService(store=build_default_store(), validator=ReadingValidator())
