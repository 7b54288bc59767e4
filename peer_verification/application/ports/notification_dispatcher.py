"""Notification dispatcher port.

Delivery is at-most-once from the engine's side: callers claim the
notification before dispatching and never retry a failed send.
"""

from __future__ import annotations

from typing import Protocol

from peer_verification.domain.models.notification import PeerNotification


class NotificationDispatcherProtocol(Protocol):
    """Outbound message channel (email or in-app)."""

    async def send(self, notification: PeerNotification) -> None:
        """Deliver a notification.

        Raises:
            Exception: Any delivery failure; callers log and move on.
        """
        ...
