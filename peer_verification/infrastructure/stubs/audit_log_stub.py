"""In-memory stub implementation of AuditLogProtocol."""

from __future__ import annotations

from uuid import UUID

from peer_verification.domain.models.audit import AuditAction, AuditEntry


class AuditLogStub:
    """Append-only list of audit entries."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    async def record(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def entries(
        self,
        action: AuditAction | None = None,
        entity_id: UUID | None = None,
    ) -> list[AuditEntry]:
        """Return recorded entries, optionally filtered. For testing only."""
        return [
            e
            for e in self._entries
            if (action is None or e.action == action)
            and (entity_id is None or e.entity_id == entity_id)
        ]
