"""Admin endpoint request and response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from peer_verification.domain.models.review import ReviewCriterion


class OverrideScoreRequest(BaseModel):
    """Overwrite selected sub-scores of one review.

    Attributes:
        review_id: Review to change.
        justification: Mandatory reason for the override.
        overrides: Criterion name -> new sub-score (1..5).
    """

    review_id: UUID
    justification: str = Field(..., min_length=1, max_length=2000)
    overrides: dict[str, int] = Field(
        ...,
        description="Criterion name (clarity, argument, style, moral_depth) to new score",
        examples=[{"clarity": 4}],
    )

    @field_validator("overrides")
    @classmethod
    def validate_criteria(cls, v: dict[str, int]) -> dict[str, int]:
        allowed = {c.value for c in ReviewCriterion}
        unknown = sorted(set(v) - allowed)
        if unknown:
            raise ValueError(
                f"unknown criteria {unknown}; must be one of: {', '.join(sorted(allowed))}"
            )
        return v

    def criterion_overrides(self) -> dict[ReviewCriterion, int]:
        return {ReviewCriterion(name): value for name, value in self.overrides.items()}


class PeerScoreResponse(BaseModel):
    """Recomputed score after an override."""

    clarity: float
    argument: float
    style: float
    moral_depth: float
    overall: float
    review_count: int
    computed_at: datetime


class ReassignRequest(BaseModel):
    """Move one assignment to a different reviewer."""

    assignment_id: UUID
    justification: str = Field(..., min_length=1, max_length=2000)


class AllocationResponse(BaseModel):
    """Replacement assignments created by a manual reassignment."""

    submission_id: UUID
    requested: int
    allocated: int
    shortfall: int
    assignment_ids: list[UUID] = Field(default_factory=list)


class ShortlistRequest(BaseModel):
    contest_id: UUID


class ShortlistResponse(BaseModel):
    """Finalists in rank order."""

    contest_id: UUID
    finalist_ids: list[UUID] = Field(default_factory=list)
    ranked_count: int
