"""
Shared-secret guard for the admin endpoints that switch the active backend
"""

import hmac
from typing import Optional

from fastapi import HTTPException, Request

from tryon_gateway import config
from tryon_gateway.config import logger

__all__ = ["ADMIN_SECRET_HEADER", "verify_secret_header", "require_admin_secret"]

ADMIN_SECRET_HEADER = "X-App-Secret"


def verify_secret_header(request: Request, expected_secret: Optional[str]) -> None:
    """
    Check the admin secret header against ``expected_secret``.

    Raises:
        HTTPException: 500 when no secret is configured, 400 when the header
            is missing, 403 when it does not match
    """
    if not expected_secret:
        logger.error("Admin request rejected: APP_SECRET is not configured")
        raise HTTPException(
            status_code=500,
            detail="Server configuration error: APP_SECRET not configured",
        )

    provided = request.headers.get(ADMIN_SECRET_HEADER)
    if not provided:
        raise HTTPException(status_code=400, detail=f"Missing {ADMIN_SECRET_HEADER} header")

    if not hmac.compare_digest(provided.encode(), expected_secret.encode()):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Invalid admin secret from {client} on {request.url.path}")
        raise HTTPException(status_code=403, detail=f"Invalid {ADMIN_SECRET_HEADER} header")


def require_admin_secret(request: Request) -> None:
    """FastAPI dependency; reads APP_SECRET at call time so it can be rotated."""
    verify_secret_header(request, config.APP_SECRET)
