"""Administrative peer verification routes.

- override-score: rewrite selected sub-scores of a review and re-aggregate
- reassign: move one assignment to a different reviewer
- shortlist: mark the top-ranked submissions of a contest as finalists

All endpoints require the X-Admin-Id header.
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from peer_verification.api.auth.admin_auth import get_admin_id
from peer_verification.api.models.admin import (
    AllocationResponse,
    OverrideScoreRequest,
    PeerScoreResponse,
    ReassignRequest,
    ShortlistRequest,
    ShortlistResponse,
)
from peer_verification.application.services.reassignment_coordinator import (
    ReassignmentCoordinator,
)
from peer_verification.application.services.result_decider import ResultDecider
from peer_verification.application.services.review_submission_service import (
    ReviewSubmissionService,
)
from peer_verification.domain.errors.assignment import (
    AssignmentAlreadyReplacedError,
    AssignmentNotFoundError,
    AssignmentNotPendingError,
    ReassignmentJustificationError,
)
from peer_verification.domain.errors.configuration import PolicyNotFoundError
from peer_verification.domain.errors.integrity import DataIntegrityError
from peer_verification.domain.errors.review import (
    EmptyOverrideError,
    InvalidSubScoreError,
    JustificationRequiredError,
    ReviewNotFoundError,
)
from peer_verification.domain.errors.submission import SubmissionNotFoundError

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/admin/peer-verification",
    tags=["admin", "peer-verification"],
)


# Dependency injection placeholders, set by create_app
_review_service: ReviewSubmissionService | None = None
_reassignment_coordinator: ReassignmentCoordinator | None = None
_result_decider: ResultDecider | None = None


def set_review_service(service: ReviewSubmissionService | None) -> None:
    global _review_service
    _review_service = service


def set_reassignment_coordinator(coordinator: ReassignmentCoordinator | None) -> None:
    global _reassignment_coordinator
    _reassignment_coordinator = coordinator


def set_result_decider(decider: ResultDecider | None) -> None:
    global _result_decider
    _result_decider = decider


def get_review_service() -> ReviewSubmissionService:
    if _review_service is None:
        raise RuntimeError("Review service not configured")
    return _review_service


def get_reassignment_coordinator() -> ReassignmentCoordinator:
    if _reassignment_coordinator is None:
        raise RuntimeError("Reassignment coordinator not configured")
    return _reassignment_coordinator


def get_result_decider() -> ResultDecider:
    if _result_decider is None:
        raise RuntimeError("Result decider not configured")
    return _result_decider


@router.post(
    "/override-score",
    response_model=PeerScoreResponse,
    status_code=status.HTTP_200_OK,
    summary="Override review sub-scores",
    description="""
Overwrites only the named sub-scores of one review, records the
administrator and justification, and re-aggregates the submission's
score synchronously. The decision is re-evaluated and may flip.
""",
)
async def override_score(
    request: OverrideScoreRequest,
    admin_id: Annotated[UUID, Depends(get_admin_id)],
    service: Annotated[ReviewSubmissionService, Depends(get_review_service)],
) -> PeerScoreResponse:
    try:
        score = await service.override_scores(
            review_id=request.review_id,
            admin_id=admin_id,
            justification=request.justification,
            overrides=request.criterion_overrides(),
        )
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (InvalidSubScoreError, JustificationRequiredError, EmptyOverrideError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
    except DataIntegrityError as e:
        logger.error(
            "override_integrity_violation",
            review_id=str(request.review_id),
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return PeerScoreResponse(**score.to_dict())


@router.post(
    "/reassign",
    response_model=AllocationResponse,
    status_code=status.HTTP_200_OK,
    summary="Manually reassign an assignment",
    description="""
Expires the assignment if it is still pending and allocates one
replacement reviewer, excluding the original reviewer. The original
assignment is annotated with the administrator and justification.

A replacement that cannot be found is reported as a shortfall
(`shortfall` = 1), not as an error.
""",
)
async def reassign(
    request: ReassignRequest,
    admin_id: Annotated[UUID, Depends(get_admin_id)],
    coordinator: Annotated[ReassignmentCoordinator, Depends(get_reassignment_coordinator)],
) -> AllocationResponse:
    try:
        result = await coordinator.reassign_assignment(
            assignment_id=request.assignment_id,
            admin_id=admin_id,
            justification=request.justification,
        )
    except (AssignmentNotFoundError, SubmissionNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ReassignmentJustificationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
    except (AssignmentNotPendingError, AssignmentAlreadyReplacedError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return AllocationResponse(**result.to_dict())


@router.post(
    "/shortlist",
    response_model=ShortlistResponse,
    status_code=status.HTTP_200_OK,
    summary="Select contest finalists",
)
async def shortlist(
    request: ShortlistRequest,
    admin_id: Annotated[UUID, Depends(get_admin_id)],
    decider: Annotated[ResultDecider, Depends(get_result_decider)],
) -> ShortlistResponse:
    try:
        result = await decider.select_shortlist(request.contest_id)
    except PolicyNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    logger.info(
        "shortlist_requested",
        contest_id=str(request.contest_id),
        admin_id=str(admin_id),
        finalist_count=len(result.finalist_ids),
    )
    return ShortlistResponse(**result.to_dict())
