"""Engine and scheduler configuration.

Environment Variables (Engine):
- PEER_STRIKE_THRESHOLD: Expired assignments that make a reviewer
  ineligible (default: 2)
- PEER_WARNING_LOOKAHEAD_HOURS: Warning tier window (default: 24)
- PEER_FINAL_REMINDER_LOOKAHEAD_HOURS: Final reminder window (default: 2)
- PEER_REASSIGN_MIN_JUSTIFICATION: Minimum admin justification length
  for a manual reassignment (default: 10)
- PEER_DEFAULT_TARGET_REVIEWERS: Fallback target per submission (default: 10)
- PEER_DEFAULT_DEADLINE_DAYS: Fallback deadline offset (default: 7)
- PEER_DEFAULT_QUORUM: Fallback quorum (default: 8)
- PEER_DEFAULT_SHORTLIST_SIZE: Fallback finalist count (default: 100)
- PEER_DEFAULT_REINSTATEMENT_THRESHOLD: Fallback score threshold (default: 3.0)

Environment Variables (Scheduler):
- CRON_SECRET: Bearer token required on the cron trigger endpoints
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from uuid import UUID

from peer_verification.domain.errors.configuration import ConfigurationAbsentError
from peer_verification.domain.models.policy import (
    DEFAULT_DEADLINE_OFFSET_DAYS,
    DEFAULT_QUORUM,
    DEFAULT_REINSTATEMENT_THRESHOLD,
    DEFAULT_SHORTLIST_SIZE,
    DEFAULT_TARGET_REVIEWERS,
    ContestReviewPolicy,
)

CRON_SECRET_ENV = "CRON_SECRET"


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class EngineConfig:
    """Operational knobs for the assignment and deadline engine.

    Attributes:
        strike_threshold: Expired-assignment count at which a reviewer stops
            being eligible. Counted across all contests.
        warning_lookahead_hours: Deadline window for the WARNING tier.
        final_reminder_lookahead_hours: Deadline window for the FINAL_REMINDER tier.
        reassign_min_justification: Minimum characters in an admin
            justification for manual reassignment.
        default_target_reviewers: Used when a contest has no explicit policy.
        default_deadline_days: Used when a contest has no explicit policy.
        default_quorum: Used when a contest has no explicit policy.
        default_shortlist_size: Used when a contest has no explicit policy.
        default_reinstatement_threshold: Used when a contest has no explicit policy.
    """

    strike_threshold: int = 2
    warning_lookahead_hours: int = 24
    final_reminder_lookahead_hours: int = 2
    reassign_min_justification: int = 10
    default_target_reviewers: int = DEFAULT_TARGET_REVIEWERS
    default_deadline_days: int = DEFAULT_DEADLINE_OFFSET_DAYS
    default_quorum: int = DEFAULT_QUORUM
    default_shortlist_size: int = DEFAULT_SHORTLIST_SIZE
    default_reinstatement_threshold: float = DEFAULT_REINSTATEMENT_THRESHOLD

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.strike_threshold < 1:
            raise ValueError(
                f"strike_threshold must be positive, got {self.strike_threshold}"
            )
        if self.final_reminder_lookahead_hours < 1:
            raise ValueError(
                "final_reminder_lookahead_hours must be positive, "
                f"got {self.final_reminder_lookahead_hours}"
            )
        if self.warning_lookahead_hours <= self.final_reminder_lookahead_hours:
            raise ValueError(
                f"warning_lookahead_hours ({self.warning_lookahead_hours}) must exceed "
                f"final_reminder_lookahead_hours ({self.final_reminder_lookahead_hours})"
            )
        if self.reassign_min_justification < 0:
            raise ValueError(
                "reassign_min_justification must be non-negative, "
                f"got {self.reassign_min_justification}"
            )

    @classmethod
    def from_environment(cls) -> "EngineConfig":
        """Create config from environment variables with defaults.

        Returns:
            EngineConfig with values from environment or defaults.
        """
        return cls(
            strike_threshold=_get_int_env("PEER_STRIKE_THRESHOLD", 2),
            warning_lookahead_hours=_get_int_env("PEER_WARNING_LOOKAHEAD_HOURS", 24),
            final_reminder_lookahead_hours=_get_int_env(
                "PEER_FINAL_REMINDER_LOOKAHEAD_HOURS", 2
            ),
            reassign_min_justification=_get_int_env(
                "PEER_REASSIGN_MIN_JUSTIFICATION", 10
            ),
            default_target_reviewers=_get_int_env(
                "PEER_DEFAULT_TARGET_REVIEWERS", DEFAULT_TARGET_REVIEWERS
            ),
            default_deadline_days=_get_int_env(
                "PEER_DEFAULT_DEADLINE_DAYS", DEFAULT_DEADLINE_OFFSET_DAYS
            ),
            default_quorum=_get_int_env("PEER_DEFAULT_QUORUM", DEFAULT_QUORUM),
            default_shortlist_size=_get_int_env(
                "PEER_DEFAULT_SHORTLIST_SIZE", DEFAULT_SHORTLIST_SIZE
            ),
            default_reinstatement_threshold=_get_float_env(
                "PEER_DEFAULT_REINSTATEMENT_THRESHOLD", DEFAULT_REINSTATEMENT_THRESHOLD
            ),
        )

    def default_policy(self, contest_id: UUID) -> ContestReviewPolicy:
        """Build the fallback policy for a contest without explicit settings."""
        return ContestReviewPolicy(
            contest_id=contest_id,
            target_reviewers=self.default_target_reviewers,
            deadline_offset_days=self.default_deadline_days,
            quorum=self.default_quorum,
            shortlist_size=self.default_shortlist_size,
            reinstatement_threshold=self.default_reinstatement_threshold,
        )


@dataclass(frozen=True)
class CronConfig:
    """Scheduler trigger settings.

    Attributes:
        cron_secret: Shared bearer secret, or None when not configured.
    """

    cron_secret: str | None = None

    @classmethod
    def from_environment(cls) -> "CronConfig":
        secret = os.environ.get(CRON_SECRET_ENV)
        return cls(cron_secret=secret or None)

    def require_secret(self) -> str:
        """Return the configured secret.

        Raises:
            ConfigurationAbsentError: If CRON_SECRET is unset or empty.
        """
        if not self.cron_secret:
            raise ConfigurationAbsentError(CRON_SECRET_ENV)
        return self.cron_secret


# Pre-defined configurations for common use cases

# Default production config
DEFAULT_ENGINE_CONFIG = EngineConfig()

# Testing config with the same thresholds but a small default contest
TEST_ENGINE_CONFIG = EngineConfig(
    default_target_reviewers=3,
    default_quorum=2,
    default_shortlist_size=5,
)
