"""Aggregated peer score value object."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from peer_verification.domain.models.review import PeerReview, ReviewCriterion

OVERALL_SCORE_PRECISION: int = 2
"""Decimal places kept on the overall score."""


@dataclass(frozen=True, eq=True)
class PeerScore:
    """Per-criterion and overall means over a submission's completed reviews.

    The overall score is the mean of the four criterion means, rounded to
    two decimals. A submission with no reviews scores 0 everywhere.

    Attributes:
        clarity: Mean clarity sub-score.
        argument: Mean argument sub-score.
        style: Mean style sub-score.
        moral_depth: Mean moral depth sub-score.
        overall: Mean of the criterion means.
        review_count: Number of reviews aggregated.
        computed_at: When the aggregation ran (UTC).
    """

    clarity: float
    argument: float
    style: float
    moral_depth: float
    overall: float
    review_count: int
    computed_at: datetime

    def __post_init__(self) -> None:
        if self.review_count < 0:
            raise ValueError(f"review_count must be non-negative, got {self.review_count}")
        if self.computed_at.tzinfo is None:
            raise ValueError("computed_at must be timezone-aware (UTC)")

    @classmethod
    def from_reviews(cls, reviews: Iterable[PeerReview], computed_at: datetime) -> PeerScore:
        """Compute a simple arithmetic mean per criterion.

        Args:
            reviews: Reviews attached to done assignments of one submission.
            computed_at: Timestamp to stamp on the result.

        Returns:
            PeerScore over the given reviews.
        """
        review_list = list(reviews)
        count = len(review_list)
        if count == 0:
            return cls(
                clarity=0.0,
                argument=0.0,
                style=0.0,
                moral_depth=0.0,
                overall=0.0,
                review_count=0,
                computed_at=computed_at,
            )

        means = {
            criterion: sum(r.score_for(criterion) for r in review_list) / count
            for criterion in ReviewCriterion
        }
        overall = round(sum(means.values()) / len(means), OVERALL_SCORE_PRECISION)
        return cls(
            clarity=means[ReviewCriterion.CLARITY],
            argument=means[ReviewCriterion.ARGUMENT],
            style=means[ReviewCriterion.STYLE],
            moral_depth=means[ReviewCriterion.MORAL_DEPTH],
            overall=overall,
            review_count=count,
            computed_at=computed_at,
        )

    def criterion_mean(self, criterion: ReviewCriterion) -> float:
        """Return the mean for one criterion."""
        return float(getattr(self, criterion.value))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses and audit records."""
        return {
            "clarity": self.clarity,
            "argument": self.argument,
            "style": self.style,
            "moral_depth": self.moral_depth,
            "overall": self.overall,
            "review_count": self.review_count,
            "computed_at": self.computed_at.isoformat(),
        }
