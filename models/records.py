"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class DeviceState(str, Enum):
    """Connectivity classification derived from a device's last reading."""

    online = "online"
    idle = "idle"
    offline = "offline"


@dataclass(frozen=True, slots=True)
class SensorReading:
    """A single validated reading owned by the telemetry store."""

    device_id: str
    temperature: float
    humidity: float
    timestamp: datetime
    pressure: Optional[float] = None
    light: Optional[float] = None
    motion: bool = False
    battery: Optional[float] = None


@dataclass(frozen=True, slots=True)
class BatchEntry:
    """One reading inside a batch; the device id lives on the batch."""

    temperature: float
    humidity: float
    timestamp: datetime
    pressure: Optional[float] = None
    light: Optional[float] = None
    motion: bool = False
    battery: Optional[float] = None

    def for_device(self, device_id: str) -> SensorReading:
        return SensorReading(
            device_id=device_id,
            temperature=self.temperature,
            humidity=self.humidity,
            timestamp=self.timestamp,
            pressure=self.pressure,
            light=self.light,
            motion=self.motion,
            battery=self.battery,
        )


@dataclass(frozen=True, slots=True)
class ReadingBatch:
    device_id: str
    entries: Tuple[BatchEntry, ...]


@dataclass(slots=True)
class DeviceStatus:
    """Bookkeeping for one device.

    ``status`` is only a transient snapshot value; the store recomputes it
    from ``last_seen`` every time a status is read.
    """

    device_id: str
    last_seen: datetime
    total_readings: int = 0
    battery_level: Optional[float] = None
    status: DeviceState = DeviceState.online
