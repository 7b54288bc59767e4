"""Logging bootstrap for the API process and scheduled jobs."""

import os

from peer_verification.infrastructure.observability.logging import configure_structlog

ENVIRONMENT_ENV = "ENVIRONMENT"


def configure_logging(environment: str | None = None) -> str:
    """Configure structlog from ENVIRONMENT unless an explicit value is given.

    Returns:
        The environment name that was applied.
    """
    resolved = environment or os.environ.get(ENVIRONMENT_ENV, "development")
    configure_structlog(environment=resolved)
    return resolved
