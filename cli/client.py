from __future__ import annotations

from typing import Any, Dict, List, NoReturn, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the telemetry service."""

    def __init__(self, config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        headers = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def send_reading(self, reading: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/v1/sensor-data", json=reading)

    def send_batch(self, batch: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/v1/sensor-data/batch", json=batch)

    def get_latest(self, device_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/v1/devices/{device_id}/latest")

    def get_status(self, device_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/v1/devices/{device_id}/status")

    def list_devices(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/api/v1/devices")
        if not isinstance(data, list):
            raise typer.BadParameter("Unexpected response payload when listing devices.")
        return data

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, dict) or not payload.get("success"):
            raise typer.BadParameter("Unexpected response payload from telemetry service.")
        return payload.get("data")

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
        detail: str | None = None
        try:
            error = exc.response.json().get("error") or {}
            parts = [error.get("message"), error.get("details")]
            detail = ": ".join(part for part in parts if part)
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
