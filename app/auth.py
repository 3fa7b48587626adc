"""Shared-secret bearer token check for the ingestion API."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from settings import Settings, get_settings

_BEARER_PREFIX = "Bearer "

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    return get_settings()


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX):]


def require_bearer_token(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject requests whose bearer token does not match ``API_KEY``.

    Without a configured key, production refuses every protected request
    while other environments let requests through with a warning.
    """
    remote_addr = request.client.host if request.client else None
    expected = settings.api_key

    if not expected:
        if settings.is_production:
            logger.error("API_KEY not configured in production")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server misconfiguration: API key not set",
            )
        logger.warning("API_KEY not set; allowing unauthenticated access")
        return

    token = extract_bearer_token(authorization)
    if token is None or not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected request with invalid bearer token", extra={"remote_addr": remote_addr})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header must contain 'Bearer <token>'",
        )
