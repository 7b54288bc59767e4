"""Administrator identification for admin endpoints."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Header, HTTPException, status

logger = structlog.get_logger(__name__)


def get_admin_id(
    x_admin_id: Annotated[
        str | None,
        Header(description="Administrator ID. Required for admin operations."),
    ] = None,
) -> UUID:
    """Extract and validate the administrator ID from X-Admin-Id.

    Raises:
        HTTPException 401: Header missing.
        HTTPException 400: Header is not a UUID.
    """
    if not x_admin_id:
        logger.warning("admin_auth_failed", reason="missing_admin_id")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Admin-Id header is required",
        )

    try:
        return UUID(x_admin_id)
    except ValueError:
        logger.warning("admin_auth_failed", reason="invalid_admin_id", admin_id=x_admin_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid admin ID format (must be UUID)",
        )
