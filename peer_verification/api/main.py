"""FastAPI application entry point for the peer verification engine."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from peer_verification import __version__
from peer_verification.api.auth.cron_auth import set_cron_config
from peer_verification.api.middleware.logging_middleware import LoggingMiddleware
from peer_verification.api.routes import admin, cron
from peer_verification.api.routes.admin import router as admin_router
from peer_verification.api.routes.cron import router as cron_router
from peer_verification.api.routes.metrics import router as metrics_router
from peer_verification.bootstrap.database import close_database_engine
from peer_verification.bootstrap.engine import PeerVerificationEngine, build_engine
from peer_verification.bootstrap.logging import configure_logging
from peer_verification.config.engine_config import CronConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_database_engine()


def create_app(
    engine: PeerVerificationEngine | None = None,
    cron_config: CronConfig | None = None,
) -> FastAPI:
    """Build the application and inject the engine's services into the routers.

    Args:
        engine: Wired engine; built from the environment if omitted.
        cron_config: Scheduler settings; CRON_SECRET is read per request
            if omitted.
    """
    configure_logging()
    engine = engine or build_engine()

    cron.set_cron_sweep_service(engine.cron_service)
    admin.set_review_service(engine.review_service)
    admin.set_reassignment_coordinator(engine.reassignment_coordinator)
    admin.set_result_decider(engine.result_decider)
    set_cron_config(cron_config)

    app = FastAPI(
        title="Peer Verification Engine",
        description="Peer review assignment and deadline lifecycle for contest submissions",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(LoggingMiddleware)
    app.include_router(cron_router)
    app.include_router(admin_router)
    app.include_router(metrics_router)
    app.state.engine = engine
    return app


app = create_app()
