"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import DeviceState


class ReadingFields(BaseModel):
    """Measurement fields shared by single readings and batch entries.

    Ranges are deliberately not declared here; the reading validator
    collects every violation with its own messages.
    """

    temperature: float = 0.0
    humidity: float = 0.0
    pressure: Optional[float] = None
    light: Optional[float] = None
    motion: bool = False
    battery: Optional[float] = None
    timestamp: Optional[datetime] = Field(
        default=None, description="Defaults to ingestion time when omitted."
    )


class SensorReadingPayload(ReadingFields):
    """Request body for a single reading."""

    device_id: str = ""


class BatchReadingPayload(ReadingFields):
    """One entry of a batch; the device id is taken from the batch."""


class BatchPayload(BaseModel):
    """Request body for a batch of readings from one device."""

    device_id: str = ""
    readings: List[BatchReadingPayload] = Field(default_factory=list)


class ReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    device_id: str
    temperature: float
    humidity: float
    pressure: Optional[float] = None
    light: Optional[float] = None
    motion: bool = False
    battery: Optional[float] = None
    timestamp: datetime


class DeviceStatusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    device_id: str
    last_seen: datetime
    total_readings: int = Field(..., ge=0)
    status: DeviceState
    battery_level: Optional[float] = None


class BatchReceipt(BaseModel):
    device_id: str
    readings_saved: int = Field(..., ge=0)


class HealthData(BaseModel):
    status: str
    version: str
    uptime: str
    environment: str
    system: Dict[str, str] = Field(default_factory=dict)


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: Optional[str] = None


class Meta(BaseModel):
    count: Optional[int] = None
    total: Optional[int] = None
    processed_at: Optional[str] = None


class StandardResponse(BaseModel):
    """Envelope wrapping every API response."""

    success: bool
    message: str = ""
    data: Any = None
    error: Optional[ErrorInfo] = None
    meta: Optional[Meta] = None
    server: str
    timestamp: str
