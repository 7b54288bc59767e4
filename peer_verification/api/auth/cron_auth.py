"""Bearer-secret authentication for scheduler-triggered endpoints.

The scheduler calls the cron endpoints with
``Authorization: Bearer <CRON_SECRET>``. The comparison is constant-time.
A deployment without CRON_SECRET cannot authenticate anyone, so it is
reported as a server-side configuration failure (500) rather than 401.
"""

import hmac
from typing import Annotated

import structlog
from fastapi import Header, HTTPException, Request, status

from peer_verification.config.engine_config import CronConfig
from peer_verification.domain.errors.configuration import ConfigurationAbsentError

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "

_cron_config: CronConfig | None = None


def set_cron_config(config: CronConfig | None) -> None:
    """Set the cron configuration; None re-reads the environment per request."""
    global _cron_config
    _cron_config = config


def get_cron_config() -> CronConfig:
    if _cron_config is None:
        return CronConfig.from_environment()
    return _cron_config


def verify_cron_secret(
    request: Request,
    authorization: Annotated[
        str | None,
        Header(description="Bearer token carrying the shared cron secret."),
    ] = None,
) -> None:
    """Validate the Authorization header against CRON_SECRET.

    Raises:
        HTTPException 500: CRON_SECRET is not configured.
        HTTPException 401: Header missing, malformed or wrong.
    """
    log = logger.bind(component="cron_auth", path=request.url.path)

    try:
        secret = get_cron_config().require_secret()
    except ConfigurationAbsentError as e:
        log.error("cron_secret_absent", setting=e.setting)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "configuration_absent", "setting": e.setting},
        )

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        log.warning("cron_auth_failed", reason="missing_bearer")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token required",
        )

    presented = authorization[len(BEARER_PREFIX):]
    if not hmac.compare_digest(presented.encode(), secret.encode()):
        log.warning("cron_auth_failed", reason="secret_mismatch")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid cron secret",
        )
