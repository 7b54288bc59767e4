"""PostgreSQL session factory for the assignment repository.

Environment Variables:
- DATABASE_URL: connection string; ``postgres://``, ``postgresql://`` and
  ``postgresql+asyncpg://`` forms are accepted
- SQLALCHEMY_ECHO: echo SQL when "1", "true" or "yes"

The engine is created lazily on first use and disposed by the API
lifespan hook.
"""

from __future__ import annotations

import os

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

from peer_verification.domain.errors.configuration import ConfigurationAbsentError

logger = get_logger(__name__)

DATABASE_URL_ENV = "DATABASE_URL"
ASYNC_DRIVER = "postgresql+asyncpg"

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def is_database_configured() -> bool:
    return bool(os.environ.get(DATABASE_URL_ENV))


def get_database_url() -> URL:
    """Read DATABASE_URL and force the asyncpg driver.

    Raises:
        ConfigurationAbsentError: If DATABASE_URL is not set.
    """
    raw = os.environ.get(DATABASE_URL_ENV)
    if not raw:
        raise ConfigurationAbsentError(DATABASE_URL_ENV)
    if "://" not in raw:
        raw = f"{ASYNC_DRIVER}://{raw}"
    url = make_url(raw)
    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername=ASYNC_DRIVER)
    return url


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating it on first call."""
    global _engine, _session_factory

    if _session_factory is None:
        url = get_database_url()
        _engine = create_async_engine(
            url,
            echo=os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes"),
            pool_pre_ping=True,
        )
        _session_factory = async_sessionmaker(bind=_engine, expire_on_commit=False)
        logger.info(
            "database_engine_created",
            url=url.render_as_string(hide_password=True),
        )

    return _session_factory


def reset_database_bootstrap() -> None:
    """Forget the engine without disposing it. For testing only."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None


async def close_database_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("database_engine_disposed")
    _engine = None
    _session_factory = None
