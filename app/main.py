from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import responses
from app.api import api_router, router
from errors import DeviceNotFound, ErrorKind, TelemetryError, ValidationFailure
from logging_config import configure_logging
from services.telemetry import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_service()
    settings = get_settings()
    logger.info("Sensor telemetry API starting (environment=%s)", settings.environment)
    if not settings.api_key:
        logger.warning("API_KEY is not configured")
    try:
        yield
    finally:
        logger.info("Sensor telemetry API shutting down")


async def telemetry_error_handler(_request: Request, exc: TelemetryError) -> JSONResponse:
    if exc.kind is ErrorKind.validation_failure:
        assert isinstance(exc, ValidationFailure)
        return responses.validation_error("; ".join(exc.violations))
    if exc.kind is ErrorKind.device_not_found:
        assert isinstance(exc, DeviceNotFound)
        return responses.not_found(f"Device: {exc.device_id}")
    logger.error("Telemetry store rejected a write: %s", exc, extra={"reason": exc.kind.value})
    return responses.internal_error("Failed to store sensor data")


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("Failed to parse request body", extra={"error_count": len(exc.errors())})
    return responses.bad_request("Invalid JSON format")


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code == 401:
        return responses.unauthorized(detail or "Authorization header must contain 'Bearer <token>'")
    if exc.status_code == 404:
        return responses.not_found(detail or "Not Found")
    if exc.status_code >= 500:
        return responses.internal_error(detail or "Internal server error")
    return responses.error_response(exc.status_code, "HTTP_ERROR", detail or "Request failed")


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Sensor Telemetry API",
        description="In-memory ingestion and status service for IoT sensor readings.",
        version=get_settings().version,
        lifespan=lifespan,
    )
    app.add_exception_handler(TelemetryError, telemetry_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(router)
    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
