"""Collaborator contracts the engine and the calling layer depend on"""
from datetime import datetime
from typing import Optional, Protocol

from ..domain.models import Actor, AuditEntry, Church
from ..domain.enums import ChurchStatus


class ChurchStatusStore(Protocol):
    """Persistence for the status field of a church"""

    async def get_church(self, church_id: str) -> Optional[Church]:
        ...

    async def commit_status(
        self,
        church_id: str,
        expected_status: ChurchStatus,
        new_status: ChurchStatus,
        reviewed_by: str,
        note: Optional[str],
        changed_at: datetime,
    ) -> bool:
        """
        Atomically set the status if the stored one equals expected_status

        Returns False when the stored status differs (or the church is gone).
        Raises on I/O failure.
        """
        ...


class AuditTrailPort(Protocol):
    """
    Append-only sink for transition history

    Best-effort from the engine's point of view: a failing append is logged
    and the transition still succeeds. The engine never reads it back.
    """

    async def append(self, entry: AuditEntry) -> None:
        ...


class NotificationPort(Protocol):
    """Informed of successful transitions by the calling layer, never by the engine"""

    async def notify(
        self,
        from_status: ChurchStatus,
        to_status: ChurchStatus,
        church: Church,
        actor: Actor,
        note: Optional[str] = None,
    ) -> None:
        ...
