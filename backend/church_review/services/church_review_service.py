"""Church Review Service - Public API of the review workflow

Wraps the state machine for calling layers: loads the church, builds the
transition request, executes it, and informs the notifier afterwards.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..domain.models import (
    Actor, AuditEntry, Church, ExecutionResult, NextAction, StatusInfo,
    TransitionContext, TransitionRule, ValidationResult
)
from ..domain.enums import ChurchStatus, Role, TransitionFailure
from ..engine.state_machine import WorkflowStateMachine
from ..engine.ports import NotificationPort
from ..engine.presentation import get_status_info
from ..repositories.church_repo import ChurchRepository
from ..repositories.audit_repo import AuditRepository
from .heritage import should_require_heritage_review
from ..utils.logger import get_logger

logger = get_logger(__name__)

AUTO_FORWARD_NOTE = "Automatically forwarded to heritage review due to heritage indicators."

# Written by the workflow itself; never taken from callers
RESERVED_METADATA_KEYS = frozenset({"reviewerUid", "isAutomated", "autoForwarded"})


class ChurchReviewService:
    """Service for church review operations"""

    def __init__(
        self,
        state_machine: WorkflowStateMachine,
        church_repo: ChurchRepository,
        audit_repo: AuditRepository,
        notifier: Optional[NotificationPort] = None,
    ):
        self.state_machine = state_machine
        self.church_repo = church_repo
        self.audit_repo = audit_repo
        self.notifier = notifier

    # =========================================================================
    # Stateless queries
    # =========================================================================

    def get_valid_transitions(self, from_status: ChurchStatus, role: Role) -> List[TransitionRule]:
        return self.state_machine.get_valid_transitions(from_status, role)

    def is_transition_valid(self, context: TransitionContext) -> ValidationResult:
        return self.state_machine.validate(context)

    def get_status_info(self, status: ChurchStatus) -> StatusInfo:
        return get_status_info(status)

    def get_next_actions(self, church_id: str, status: ChurchStatus, role: Role) -> List[NextAction]:
        """
        Actions role can take on a church in status

        church_id is context for callers and logs only; the result depends
        on status and role alone.
        """
        actions = self.state_machine.actions_from(status, role)
        logger.debug(
            f"{len(actions)} next action(s) available",
            extra={"church_id": church_id, "role": role.value}
        )
        return actions

    # =========================================================================
    # Transitions
    # =========================================================================

    async def execute_transition(self, context: TransitionContext) -> ExecutionResult:
        """Execute without loading the church or notifying"""
        return await self.state_machine.execute(context)

    async def update_church_status(
        self,
        church_id: str,
        target_status: ChurchStatus,
        actor: Actor,
        note: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ExecutionResult:
        """
        Move a church to target_status on behalf of actor

        The from-status is read from the store; on success the notifier is
        called. Notifier failures are logged and do not affect the result.
        Caller metadata may not set the keys the workflow itself writes
        (RESERVED_METADATA_KEYS); they are dropped.
        """
        church = await self.church_repo.get_church(church_id)
        if church is None:
            return self._not_found(church_id, target_status)
        return await self._transition(church, target_status, actor, note, self._caller_metadata(metadata))

    async def update_church_status_with_heritage_detection(
        self,
        church_id: str,
        target_status: ChurchStatus,
        actor: Actor,
        note: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ExecutionResult:
        """
        Like update_church_status, but a chancery approval of a pending
        church with heritage indicators is redirected to heritage review.

        Requests from any other status pass through unchanged so the engine
        reports the precise rejection.
        """
        church = await self.church_repo.get_church(church_id)
        if church is None:
            return self._not_found(church_id, target_status)

        metadata = self._caller_metadata(metadata)
        auto_forwarded = (
            church.status == ChurchStatus.PENDING
            and target_status == ChurchStatus.APPROVED
            and actor.role == Role.CHANCERY_OFFICE
            and should_require_heritage_review(church)
        )
        if not auto_forwarded:
            return await self._transition(church, target_status, actor, note, metadata)

        logger.info(
            "Approval redirected to heritage review",
            extra={"church_id": church_id, "actor_email": actor.email}
        )
        forward_note = f"{AUTO_FORWARD_NOTE} {note or ''}".strip()
        result = await self._transition(
            church,
            ChurchStatus.HERITAGE_REVIEW,
            actor,
            forward_note,
            {**metadata, "autoForwarded": True},
        )
        return result.model_copy(update={"auto_forwarded": True})

    async def _transition(
        self,
        church: Church,
        target_status: ChurchStatus,
        actor: Actor,
        note: Optional[str],
        metadata: Dict[str, Any],
    ) -> ExecutionResult:
        context = TransitionContext(
            church_id=church.church_id,
            from_status=church.status,
            to_status=target_status,
            actor=actor,
            note=note,
            metadata={**metadata, "isAutomated": False},
        )
        result = await self.state_machine.execute(context)
        if result.success:
            await self._notify(church, context)
        return result

    @staticmethod
    def _caller_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        metadata = metadata or {}
        dropped = RESERVED_METADATA_KEYS.intersection(metadata)
        if dropped:
            logger.warning(f"Ignoring reserved metadata keys: {', '.join(sorted(dropped))}")
        return {k: v for k, v in metadata.items() if k not in RESERVED_METADATA_KEYS}

    @staticmethod
    def _not_found(church_id: str, target_status: ChurchStatus) -> ExecutionResult:
        return ExecutionResult(
            success=False,
            error=f"Church '{church_id}' not found",
            failure=TransitionFailure.CHURCH_NOT_FOUND,
            church_id=church_id,
            to_status=target_status,
        )

    async def _notify(self, church: Church, context: TransitionContext) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.notify(
                context.from_status,
                context.to_status,
                church,
                context.actor,
                context.note,
            )
        except Exception as e:
            logger.error(
                f"Status change notification failed: {e}",
                exc_info=True,
                extra={"church_id": church.church_id}
            )

    # =========================================================================
    # Church records
    # =========================================================================

    async def create_church(self, church: Church) -> Church:
        return await self.church_repo.create_church(church)

    async def get_church(self, church_id: str) -> Optional[Church]:
        return await self.church_repo.get_church(church_id)

    async def get_audit_trail(
        self,
        church_id: str,
        skip: int = 0,
        limit: int = 100,
        since: Optional[datetime] = None
    ) -> List[AuditEntry]:
        return await self.audit_repo.list_for_church(church_id, skip=skip, limit=limit, since=since)
