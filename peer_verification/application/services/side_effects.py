"""Fire-and-forget audit and notification helpers.

Audit records and notifications are side effects of engine actions. A
failure in either is logged and never rolls back or aborts the action
that triggered it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from peer_verification.application.ports.audit_log import AuditLogProtocol
    from peer_verification.application.ports.notification_dispatcher import (
        NotificationDispatcherProtocol,
    )
    from peer_verification.domain.models.audit import AuditEntry
    from peer_verification.domain.models.notification import PeerNotification


async def record_audit(
    audit_log: AuditLogProtocol | None,
    entry: AuditEntry,
    log: Any,
) -> bool:
    """Append an audit entry, logging instead of raising on failure.

    Args:
        audit_log: Audit sink, or None when auditing is not wired.
        entry: Entry to append.
        log: Bound structlog logger of the caller.

    Returns:
        True if the entry was recorded.
    """
    if audit_log is None:
        return False
    try:
        await audit_log.record(entry)
    except Exception as e:
        log.error(
            "audit_record_failed",
            action=entry.action.value,
            entity_id=str(entry.entity_id),
            error=str(e),
        )
        return False
    return True


async def dispatch_notification(
    dispatcher: NotificationDispatcherProtocol | None,
    notification: PeerNotification,
    log: Any,
) -> bool:
    """Send a notification, logging instead of raising on failure.

    Returns:
        True if the dispatcher accepted the notification.
    """
    if dispatcher is None:
        return False
    try:
        await dispatcher.send(notification)
    except Exception as e:
        log.warning(
            "notification_dispatch_failed",
            kind=notification.kind.value,
            recipient_id=str(notification.recipient_id),
            error=str(e),
        )
        return False
    return True
