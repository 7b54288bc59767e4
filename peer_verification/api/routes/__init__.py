"""API routers."""

from peer_verification.api.routes.admin import router as admin_router
from peer_verification.api.routes.cron import router as cron_router
from peer_verification.api.routes.metrics import router as metrics_router

__all__ = ["admin_router", "cron_router", "metrics_router"]
