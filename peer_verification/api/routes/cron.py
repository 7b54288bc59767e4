"""Cron trigger routes.

An external scheduler calls these endpoints:
- check-deadlines: hourly
- send-warnings: every six hours

Both require the shared bearer secret (see ``verify_cron_secret``).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from peer_verification.api.auth.cron_auth import verify_cron_secret
from peer_verification.api.models.cron import (
    DeadlineCheckResponse,
    WarningDispatchResponse,
)
from peer_verification.application.services.cron_sweep_service import CronSweepService

router = APIRouter(
    prefix="/api/cron/peer-verification",
    tags=["cron", "peer-verification"],
    dependencies=[Depends(verify_cron_secret)],
)


# Dependency injection placeholder, set by create_app
_cron_sweep_service: CronSweepService | None = None


def set_cron_sweep_service(service: CronSweepService | None) -> None:
    """Set the cron sweep service for dependency injection."""
    global _cron_sweep_service
    _cron_sweep_service = service


def get_cron_sweep_service() -> CronSweepService:
    """Get the cron sweep service.

    Raises:
        RuntimeError: If the service is not configured.
    """
    if _cron_sweep_service is None:
        raise RuntimeError("Cron sweep service not configured")
    return _cron_sweep_service


@router.get(
    "/check-deadlines",
    response_model=DeadlineCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Expire overdue assignments and reassign",
    description="""
Runs the hourly deadline job: expires overdue pending assignments,
creates replacements for expired ones, then tops up submissions still
short of reviewers.

`success` is false when a data-integrity violation was detected or a
step failed outright. Per-item failures are listed in `errors` and do not
abort the run; a failed step is named in `failed_steps` and the steps
after it still run.
""",
)
async def check_deadlines(
    service: Annotated[CronSweepService, Depends(get_cron_sweep_service)],
) -> DeadlineCheckResponse:
    report = await service.run_deadline_check()
    return DeadlineCheckResponse(**report.to_dict())


@router.get(
    "/send-warnings",
    response_model=WarningDispatchResponse,
    status_code=status.HTTP_200_OK,
    summary="Send deadline warnings and final reminders",
)
async def send_warnings(
    service: Annotated[CronSweepService, Depends(get_cron_sweep_service)],
) -> WarningDispatchResponse:
    report = await service.run_warning_dispatch()
    return WarningDispatchResponse(**report.to_dict())
