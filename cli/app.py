from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_devices, render_reading, render_status


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the sensor telemetry service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Telemetry API base URL (defaults to API_BASE_URL env or http://localhost:3000).",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        "-k",
        help="Bearer token for protected endpoints (defaults to API_KEY env).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, api_key=api_key, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("send")
def send_command(
    ctx: typer.Context,
    device_id: str = typer.Argument(..., help="Identifier of the reporting device."),
    temperature: float = typer.Option(..., "--temperature", "-t", help="Degrees Celsius."),
    humidity: float = typer.Option(..., "--humidity", "-u", help="Relative humidity in percent."),
    pressure: Optional[float] = typer.Option(None, "--pressure", help="Barometric pressure."),
    light: Optional[float] = typer.Option(None, "--light", help="Light level."),
    motion: bool = typer.Option(False, "--motion/--no-motion", help="Motion detected."),
    battery: Optional[float] = typer.Option(None, "--battery", help="Battery level in percent."),
) -> None:
    """Send a single reading."""
    state = _get_state(ctx)
    reading: Dict[str, Any] = {
        "device_id": device_id,
        "temperature": temperature,
        "humidity": humidity,
        "motion": motion,
    }
    for key, value in (("pressure", pressure), ("light", light), ("battery", battery)):
        if value is not None:
            reading[key] = value

    stored = state.client.send_reading(reading)
    typer.secho(f"Reading accepted for {device_id}.", fg=typer.colors.GREEN)
    render_reading(stored)


@app.command("batch")
def batch_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON file with device_id and readings."
    ),
) -> None:
    """Send a batch of readings from a JSON file."""
    state = _get_state(ctx)
    try:
        batch = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{file} is not valid JSON: {exc}") from exc
    if not isinstance(batch, dict):
        raise typer.BadParameter(f"{file} must contain a JSON object.")

    typer.echo(f"Sending batch from {file} to {state.config.base_url} ...")
    receipt = state.client.send_batch(batch)
    typer.secho(
        f"Batch accepted. device_id={receipt.get('device_id')} "
        f"readings_saved={receipt.get('readings_saved')}",
        fg=typer.colors.GREEN,
    )


@app.command("latest")
def latest_command(
    ctx: typer.Context,
    device_id: str = typer.Argument(..., help="Identifier of the device."),
) -> None:
    """Show the most recently stored reading for a device."""
    state = _get_state(ctx)
    render_reading(state.client.get_latest(device_id))


@app.command("status")
def status_command(
    ctx: typer.Context,
    device_id: str = typer.Argument(..., help="Identifier of the device."),
) -> None:
    """Show online/idle/offline state and bookkeeping for a device."""
    state = _get_state(ctx)
    render_status(state.client.get_status(device_id))


@app.command("devices")
def devices_command(ctx: typer.Context) -> None:
    """List every device that has reported at least once."""
    state = _get_state(ctx)
    render_devices(state.client.list_devices())
