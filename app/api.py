"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
import platform
import threading
import time
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, status

from app.auth import get_app_settings, require_bearer_token
from app.responses import envelope
from app.schemas import (
    BatchPayload,
    BatchReceipt,
    DeviceStatusOut,
    HealthData,
    Meta,
    ReadingOut,
    SensorReadingPayload,
    StandardResponse,
)
from services.telemetry import TelemetryService, build_default_service
from settings import Settings

logger = logging.getLogger(__name__)

_started_at = time.monotonic()

router = APIRouter()
api_router = APIRouter(prefix="/api/v1", dependencies=[Depends(require_bearer_token)])


def get_service() -> TelemetryService:
    return build_default_service()


def _uptime() -> str:
    return str(timedelta(seconds=round(time.monotonic() - _started_at)))


@api_router.post(
    "/sensor-data",
    status_code=status.HTTP_201_CREATED,
    response_model=StandardResponse,
    response_model_exclude_none=True,
    summary="Receive a single sensor reading.",
)
def receive_sensor_data(
    payload: SensorReadingPayload,
    service: TelemetryService = Depends(get_service),
) -> StandardResponse:
    reading = service.ingest_reading(payload)
    return envelope("Sensor data received successfully", ReadingOut.model_validate(reading))


@api_router.post(
    "/sensor-data/batch",
    status_code=status.HTTP_201_CREATED,
    response_model=StandardResponse,
    response_model_exclude_none=True,
    summary="Receive up to 100 readings from one device.",
)
def receive_batch_data(
    payload: BatchPayload,
    service: TelemetryService = Depends(get_service),
) -> StandardResponse:
    batch = service.ingest_batch(payload)
    saved = len(batch.entries)
    meta = Meta(
        count=saved,
        processed_at=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )
    return envelope(
        "Batch data processed successfully",
        BatchReceipt(device_id=batch.device_id, readings_saved=saved),
        meta=meta,
    )


@api_router.get(
    "/devices",
    response_model=StandardResponse,
    response_model_exclude_none=True,
    summary="List the status of every known device.",
)
def list_devices(
    service: TelemetryService = Depends(get_service),
) -> StandardResponse:
    devices = [DeviceStatusOut.model_validate(item) for item in service.list_devices()]
    logger.info("Device list retrieved")
    return envelope(
        "Devices retrieved successfully",
        devices,
        meta=Meta(count=len(devices), total=len(devices)),
    )


@api_router.get(
    "/devices/{device_id}/latest",
    response_model=StandardResponse,
    response_model_exclude_none=True,
    summary="Fetch the most recently stored reading for a device.",
)
def get_latest_reading(
    device_id: str,
    service: TelemetryService = Depends(get_service),
) -> StandardResponse:
    reading = service.latest_reading(device_id)
    logger.info("Latest reading retrieved", extra={"device_id": device_id})
    return envelope("Latest reading retrieved successfully", ReadingOut.model_validate(reading))


@api_router.get(
    "/devices/{device_id}/status",
    response_model=StandardResponse,
    response_model_exclude_none=True,
    summary="Fetch bookkeeping and online/idle/offline state for a device.",
)
def get_device_status(
    device_id: str,
    service: TelemetryService = Depends(get_service),
) -> StandardResponse:
    device = service.device_status(device_id)
    logger.info(
        "Device status retrieved",
        extra={"device_id": device_id, "status": device.status},
    )
    return envelope("Device status retrieved successfully", DeviceStatusOut.model_validate(device))


@router.get(
    "/health",
    response_model=StandardResponse,
    response_model_exclude_none=True,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> StandardResponse:
    health = HealthData(
        status="healthy",
        version=settings.version,
        uptime=_uptime(),
        environment=settings.environment,
        system={
            "python_version": platform.python_version(),
            "arch": platform.machine(),
            "os": platform.system().lower(),
            "threads": str(threading.active_count()),
        },
    )
    remote_addr = request.client.host if request.client else None
    logger.info("Health check requested", extra={"remote_addr": remote_addr})
    return envelope("Sensor telemetry API is healthy", health)


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
