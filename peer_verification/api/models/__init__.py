"""Request and response models for the HTTP layer."""

from peer_verification.api.models.admin import (
    AllocationResponse,
    OverrideScoreRequest,
    PeerScoreResponse,
    ReassignRequest,
    ShortlistRequest,
    ShortlistResponse,
)
from peer_verification.api.models.cron import (
    DeadlineCheckResponse,
    ShortfallModel,
    WarningDispatchResponse,
)

__all__ = [
    "AllocationResponse",
    "DeadlineCheckResponse",
    "OverrideScoreRequest",
    "PeerScoreResponse",
    "ReassignRequest",
    "ShortfallModel",
    "ShortlistRequest",
    "ShortlistResponse",
    "WarningDispatchResponse",
]
