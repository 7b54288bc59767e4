"""Peer review domain model.

A review carries four sub-scores, each an integer in [1, 5], plus a
free-text justification. It is immutable once submitted except through
an administrative override, which must be followed by re-aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

from peer_verification.domain.errors.review import InvalidSubScoreError

MIN_SUB_SCORE: int = 1
"""Lowest allowed sub-score."""

MAX_SUB_SCORE: int = 5
"""Highest allowed sub-score."""


class ReviewCriterion(str, Enum):
    """Scoring criteria, each rated independently."""

    CLARITY = "clarity"
    ARGUMENT = "argument"
    STYLE = "style"
    MORAL_DEPTH = "moral_depth"


def validate_sub_score(criterion: ReviewCriterion | str, value: object) -> int:
    """Validate a single sub-score.

    Args:
        criterion: The criterion being scored.
        value: Candidate score.

    Returns:
        The score as an int.

    Raises:
        InvalidSubScoreError: If value is not an integer in [1, 5].
    """
    name = criterion.value if isinstance(criterion, ReviewCriterion) else criterion
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSubScoreError(name, value)
    if not MIN_SUB_SCORE <= value <= MAX_SUB_SCORE:
        raise InvalidSubScoreError(name, value)
    return value


@dataclass(frozen=True, eq=True)
class PeerReview:
    """A completed review attached one-to-one to a done assignment.

    Attributes:
        id: Unique identifier (UUIDv7).
        assignment_id: The assignment this review completes.
        submission_id: Denormalized submission reference for aggregation.
        clarity: Sub-score for clarity.
        argument: Sub-score for argument.
        style: Sub-score for style.
        moral_depth: Sub-score for moral depth.
        justification: Reviewer's written rationale.
        submitted_at: When the reviewer submitted (UTC).
        overridden_at: When an admin last overrode any sub-score.
        overridden_by: Admin who performed the last override.
        override_justification: Admin's stated reason for the last override.
    """

    id: UUID
    assignment_id: UUID
    submission_id: UUID
    clarity: int
    argument: int
    style: int
    moral_depth: int
    justification: str
    submitted_at: datetime
    overridden_at: datetime | None = field(default=None)
    overridden_by: UUID | None = field(default=None)
    override_justification: str | None = field(default=None)

    def __post_init__(self) -> None:
        for criterion in ReviewCriterion:
            validate_sub_score(criterion, getattr(self, criterion.value))

        if self.submitted_at.tzinfo is None:
            raise ValueError("submitted_at must be timezone-aware (UTC)")

        if self.overridden_at is not None and self.overridden_at.tzinfo is None:
            raise ValueError("overridden_at must be timezone-aware (UTC)")

    def score_for(self, criterion: ReviewCriterion) -> int:
        """Return the sub-score for one criterion."""
        return int(getattr(self, criterion.value))

    def sub_scores(self) -> dict[ReviewCriterion, int]:
        """Return all four sub-scores keyed by criterion."""
        return {criterion: self.score_for(criterion) for criterion in ReviewCriterion}

    def with_overridden_scores(
        self,
        overrides: dict[ReviewCriterion, int],
        admin_id: UUID,
        justification: str,
        overridden_at: datetime,
    ) -> PeerReview:
        """Create a copy with some sub-scores replaced by an administrator.

        Only the criteria present in ``overrides`` change.

        Args:
            overrides: Mapping of criterion to new score.
            admin_id: Administrator performing the override.
            justification: Reason recorded with the override.
            overridden_at: When the override happened (UTC).

        Returns:
            New PeerReview with updated scores and override metadata.

        Raises:
            InvalidSubScoreError: If any new score is out of range.
        """
        changes: dict[str, object] = {
            criterion.value: validate_sub_score(criterion, value)
            for criterion, value in overrides.items()
        }
        return replace(
            self,
            **changes,
            overridden_at=overridden_at,
            overridden_by=admin_id,
            override_justification=justification,
        )
