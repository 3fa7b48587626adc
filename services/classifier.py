"""Online/idle/offline classification for devices."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from models.records import DeviceState

ONLINE_WINDOW = timedelta(minutes=5)
IDLE_WINDOW = timedelta(minutes=30)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def classify(last_seen: datetime, now: datetime) -> DeviceState:
    """Map the age of a device's last reading to a connectivity state."""
    age = now - last_seen
    if age < ONLINE_WINDOW:
        return DeviceState.online
    if age < IDLE_WINDOW:
        return DeviceState.idle
    return DeviceState.offline
