"""Audit Writer - Best-effort append of status change entries"""
from datetime import datetime

from ..domain.models import AuditEntry, TransitionContext
from ..domain.errors import AuditFailureError
from .ports import AuditTrailPort
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuditWriter:
    """
    Build and append audit entries for executed transitions

    The status change has already been committed when this runs, so an
    append failure is logged and reported as False, never raised.
    """

    def __init__(self, sink: AuditTrailPort):
        self.sink = sink

    def build_entry(self, context: TransitionContext, timestamp: datetime) -> AuditEntry:
        metadata = dict(context.metadata) if context.metadata else None
        return AuditEntry(
            church_id=context.church_id,
            from_status=context.from_status,
            to_status=context.to_status,
            changed_by=context.actor.snapshot(),
            timestamp=timestamp,
            note=context.note,
            metadata=metadata,
            is_automated=bool((metadata or {}).get("isAutomated", False)),
            diocese=context.actor.diocese,
        )

    async def write_status_change(self, context: TransitionContext, timestamp: datetime) -> bool:
        """Append one entry; True if the sink accepted it"""
        entry = self.build_entry(context, timestamp)
        try:
            await self.sink.append(entry)
        except Exception as e:
            failure = AuditFailureError(
                f"Failed to append audit entry: {e}",
                details={"church_id": context.church_id}
            )
            logger.error(
                failure.message,
                exc_info=True,
                extra={
                    "church_id": context.church_id,
                    "from_status": context.from_status.value,
                    "to_status": context.to_status.value,
                    "error_code": failure.error_code,
                }
            )
            return False

        logger.info(
            f"Audit entry recorded: {context.from_status.value} -> {context.to_status.value}",
            extra={"church_id": context.church_id, "actor_email": context.actor.email}
        )
        return True
