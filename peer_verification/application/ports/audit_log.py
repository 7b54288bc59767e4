"""Audit log sink port."""

from __future__ import annotations

from typing import Protocol

from peer_verification.domain.models.audit import AuditEntry


class AuditLogProtocol(Protocol):
    """Append-only audit trail for engine and administrative actions."""

    async def record(self, entry: AuditEntry) -> None:
        """Append one audit entry."""
        ...
