"""System clock implementation of TimeAuthorityProtocol."""

import time
from datetime import datetime, timezone

from peer_verification.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Wall clock and monotonic clock from the host.

    Example:
        >>> clock = SystemTimeAuthority()
        >>> clock.now().tzinfo is not None
        True
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()
