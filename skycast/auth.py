"""Bearer-token guard for the weather tool endpoints."""

from __future__ import annotations

import hmac

import structlog
from fastapi import Depends, HTTPException, Request

from skycast.config import Settings, get_settings

logger = structlog.get_logger()

BEARER_PREFIX = "bearer "


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer ...`` header value."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


def token_matches(presented: str, expected: str) -> bool:
    return hmac.compare_digest(presented.encode(), expected.encode())


async def require_service_auth(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the call with 401 unless it carries ``SERVICE_AUTH_TOKEN``.

    An empty token in settings turns the check off.
    """
    expected = settings.service_auth_token
    if not expected:
        logger.warning("service_auth_disabled", path=request.url.path)
        return

    presented = bearer_token(request.headers.get("authorization"))
    if presented is None:
        raise HTTPException(status_code=401, detail="Missing service auth token")

    if not token_matches(presented, expected):
        logger.warning(
            "service_auth_failed",
            path=request.url.path,
            remote=request.client.host if request.client else "unknown",
        )
        raise HTTPException(status_code=401, detail="Invalid service auth token")
