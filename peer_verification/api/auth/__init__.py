"""Request authentication for cron and admin endpoints."""

from peer_verification.api.auth.admin_auth import get_admin_id
from peer_verification.api.auth.cron_auth import (
    get_cron_config,
    set_cron_config,
    verify_cron_secret,
)

__all__ = [
    "get_admin_id",
    "get_cron_config",
    "set_cron_config",
    "verify_cron_secret",
]
