"""Builders for the standard response envelope."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.schemas import ErrorInfo, Meta, StandardResponse
from settings import get_settings


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def envelope(
    message: str,
    data: Any = None,
    meta: Optional[Meta] = None,
) -> StandardResponse:
    return StandardResponse(
        success=True,
        message=message,
        data=jsonable_encoder(data),
        meta=meta,
        server=get_settings().server_name,
        timestamp=_timestamp(),
    )


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[str] = None,
) -> JSONResponse:
    body = StandardResponse(
        success=False,
        error=ErrorInfo(code=code, message=message, details=details),
        server=get_settings().server_name,
        timestamp=_timestamp(),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def bad_request(details: str) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", "Invalid request data", details)


def unauthorized(details: str) -> JSONResponse:
    return error_response(
        status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Valid Bearer token required", details
    )


def not_found(resource: str) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "NOT_FOUND", "Resource not found", resource)


def validation_error(details: str) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Validation failed", details)


def internal_error(details: str) -> JSONResponse:
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error", details
    )
