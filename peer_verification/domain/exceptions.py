"""Base exception classes for the peer verification domain layer."""


class PeerVerificationError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so the
    trigger layer can tell engine failures apart from programming errors.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
