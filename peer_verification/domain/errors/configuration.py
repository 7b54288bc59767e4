"""Configuration errors.

A missing operational setting is an environment defect, not a caller
error. The HTTP trigger layer reports it with a status distinct from an
authentication failure.
"""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.exceptions import PeerVerificationError


class ConfigurationAbsentError(PeerVerificationError):
    """Raised when a required setting (e.g. CRON_SECRET) is not configured."""

    def __init__(self, setting: str) -> None:
        """Initialize the error.

        Args:
            setting: Name of the missing setting.
        """
        self.setting = setting
        super().__init__(f"Required setting {setting} is not configured")


class PolicyNotFoundError(PeerVerificationError):
    """Raised when no review policy exists for a contest."""

    def __init__(self, contest_id: UUID) -> None:
        self.contest_id = contest_id
        super().__init__(f"No review policy configured for contest {contest_id}")
