"""Recording stub implementation of NotificationDispatcherProtocol."""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.models.notification import (
    NotificationKind,
    PeerNotification,
)


class NotificationDispatcherStub:
    """Stores sent notifications in memory and can simulate failures."""

    def __init__(self) -> None:
        self._sent: list[PeerNotification] = []
        self._failing_recipients: set[UUID] = set()

    async def send(self, notification: PeerNotification) -> None:
        if notification.recipient_id in self._failing_recipients:
            raise ConnectionError(f"delivery to {notification.recipient_id} failed")
        self._sent.append(notification)

    def fail_for(self, recipient_id: UUID) -> None:
        """Make every send to this recipient raise. For testing only."""
        self._failing_recipients.add(recipient_id)

    def sent(self, kind: NotificationKind | None = None) -> list[PeerNotification]:
        """Return sent notifications, optionally filtered by kind."""
        if kind is None:
            return list(self._sent)
        return [n for n in self._sent if n.kind == kind]

    def clear(self) -> None:
        self._sent.clear()
        self._failing_recipients.clear()
