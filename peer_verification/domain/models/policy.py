"""Per-contest review policy.

Contest administrators own these values. The engine receives a policy
explicitly with every call and never caches it beyond a single sweep.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from uuid import UUID

DEFAULT_TARGET_REVIEWERS: int = 10
"""Reviewers assigned to each submission."""

DEFAULT_DEADLINE_OFFSET_DAYS: int = 7
"""Days a reviewer has to complete an assignment."""

DEFAULT_QUORUM: int = 8
"""Completed reviews required before a decision is made."""

DEFAULT_SHORTLIST_SIZE: int = 100
"""Number of finalists selected per contest."""

DEFAULT_REINSTATEMENT_THRESHOLD: float = 3.0
"""Overall score at or above which a decided submission is reinstated."""


@dataclass(frozen=True)
class ContestReviewPolicy:
    """Review policy for one contest.

    Attributes:
        contest_id: Contest this policy governs.
        target_reviewers: Live assignments wanted per submission.
        deadline_offset_days: Days from creation to deadline.
        quorum: Done assignments needed to decide.
        shortlist_size: Finalists to select.
        results_visible: Whether authors may see scores before the results phase.
        reinstatement_threshold: Overall score needed to be reinstated.
    """

    contest_id: UUID
    target_reviewers: int = field(default=DEFAULT_TARGET_REVIEWERS)
    deadline_offset_days: int = field(default=DEFAULT_DEADLINE_OFFSET_DAYS)
    quorum: int = field(default=DEFAULT_QUORUM)
    shortlist_size: int = field(default=DEFAULT_SHORTLIST_SIZE)
    results_visible: bool = field(default=False)
    reinstatement_threshold: float = field(default=DEFAULT_REINSTATEMENT_THRESHOLD)

    def __post_init__(self) -> None:
        """Validate policy values.

        Raises:
            ValueError: If any value is out of range.
        """
        if self.target_reviewers < 1:
            raise ValueError(
                f"target_reviewers must be positive, got {self.target_reviewers}"
            )
        if self.deadline_offset_days < 1:
            raise ValueError(
                f"deadline_offset_days must be positive, got {self.deadline_offset_days}"
            )
        if not 1 <= self.quorum <= self.target_reviewers:
            raise ValueError(
                f"quorum must be between 1 and target_reviewers "
                f"({self.target_reviewers}), got {self.quorum}"
            )
        if self.shortlist_size < 0:
            raise ValueError(
                f"shortlist_size must be non-negative, got {self.shortlist_size}"
            )
        if not 1.0 <= self.reinstatement_threshold <= 5.0:
            raise ValueError(
                f"reinstatement_threshold must be within 1..5, "
                f"got {self.reinstatement_threshold}"
            )

    @property
    def deadline_offset(self) -> timedelta:
        return timedelta(days=self.deadline_offset_days)
