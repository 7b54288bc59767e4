"""Time Authority Protocol - interface for consistent timestamp provisioning.

Every service that needs the current time takes a TimeAuthorityProtocol
instead of calling datetime.now() directly, so sweeps and deadline
arithmetic are deterministic under test.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    For production:
        Use SystemTimeAuthority from peer_verification/application/services/

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC)."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time.

        Returns:
            Current datetime in UTC timezone.
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time.

        Returns:
            Monotonically increasing float value (in seconds).
        """
        ...
