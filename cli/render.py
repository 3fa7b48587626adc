from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_STATUS_COLORS = {
    "online": typer.colors.GREEN,
    "idle": typer.colors.YELLOW,
    "offline": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        if value is None:
            continue
        typer.echo(f"{key}: {value}")


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Reading")
    echo_key_values(
        [
            ("device_id", payload.get("device_id")),
            ("timestamp", payload.get("timestamp")),
            ("temperature", payload.get("temperature")),
            ("humidity", payload.get("humidity")),
            ("pressure", payload.get("pressure")),
            ("light", payload.get("light")),
            ("motion", payload.get("motion")),
            ("battery", payload.get("battery")),
        ]
    )


def render_status(payload: Dict[str, Any]) -> None:
    echo_heading("Device Status")
    state = payload.get("status")
    typer.echo("status: ", nl=False)
    typer.secho(str(state), fg=_STATUS_COLORS.get(str(state)))
    echo_key_values(
        [
            ("device_id", payload.get("device_id")),
            ("last_seen", payload.get("last_seen")),
            ("total_readings", payload.get("total_readings")),
            ("battery_level", payload.get("battery_level")),
        ]
    )


def render_devices(devices: List[Dict[str, Any]]) -> None:
    echo_heading("Devices")
    if not devices:
        typer.echo("No devices have reported yet.")
        return
    for device in devices:
        typer.echo(
            f"  - {device.get('device_id')}: {device.get('status')} "
            f"(readings={device.get('total_readings')}, last_seen={device.get('last_seen')})"
        )
