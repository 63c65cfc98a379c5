"""Workflow State Machine - Validate and execute church status transitions

Neither validate() nor execute() raises: every failure comes back as a
result value carrying a TransitionFailure code and a readable reason.
"""
import asyncio
import weakref
from datetime import datetime
from typing import Callable, List, Optional

from ..domain.models import (
    Church, TransitionRule, TransitionContext, ValidationResult,
    ExecutionResult, NextAction
)
from ..domain.enums import ChurchStatus, Role, TransitionFailure
from .registry import TransitionRegistry
from .guards import GuardEvaluator
from .hooks import HookRegistry
from .audit_writer import AuditWriter
from .ports import AuditTrailPort, ChurchStatusStore
from .presentation import get_action_label
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowStateMachine:
    """
    Orchestrates one transition attempt end to end

    Flow for execute():
    1. validate against the registry (no side effects on rejection)
    2. take the per-church lock
    3. run the rule's named hook; a hook failure aborts before any commit
    4. compare-and-swap the status in the store
    5. append an audit entry; an audit failure is logged and ignored
    """

    def __init__(
        self,
        registry: TransitionRegistry,
        store: ChurchStatusStore,
        audit_sink: AuditTrailPort,
        hooks: Optional[HookRegistry] = None,
        guards: Optional[GuardEvaluator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.registry = registry
        self.store = store
        self.audit_writer = AuditWriter(audit_sink)
        self.hooks = hooks or HookRegistry()
        self.guards = guards or GuardEvaluator()
        self._clock = clock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

        # Unknown guard or hook names are startup errors, not runtime ones
        self.guards.ensure_known(registry.guard_kinds())
        self.hooks.ensure_known(registry.hook_ids())

    # =========================================================================
    # Queries
    # =========================================================================

    def get_valid_transitions(self, from_status: ChurchStatus, role: Role) -> List[TransitionRule]:
        """Rules starting at from_status that role may perform"""
        return [
            rule for rule in self.registry.transitions_from(from_status)
            if role in rule.allowed_roles
        ]

    def next_actions(self, church: Church, role: Role) -> List[NextAction]:
        """Legal moves for role from the church's current status"""
        return self.actions_from(church.status, role)

    def actions_from(self, status: ChurchStatus, role: Role) -> List[NextAction]:
        return [
            NextAction(
                action=rule.to_status,
                label=get_action_label(rule.to_status),
                description=rule.description,
                requires_note=rule.requires_note,
            )
            for rule in self.get_valid_transitions(status, role)
        ]

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, context: TransitionContext) -> ValidationResult:
        try:
            return self._validate(context)
        except Exception as e:
            logger.error(
                f"Guard evaluation failed: {e}",
                exc_info=True,
                extra={"church_id": context.church_id}
            )
            return ValidationResult.rejected(
                TransitionFailure.CONDITION_NOT_MET,
                f"Transition conditions could not be evaluated: {e}"
            )

    def _validate(self, context: TransitionContext) -> ValidationResult:
        from_status = context.from_status
        to_status = context.to_status
        role = context.actor.role

        rule = self.registry.find(from_status, to_status, role)
        if rule is None:
            allowed = self.registry.roles_for(from_status, to_status)
            if not allowed:
                return ValidationResult.rejected(
                    TransitionFailure.ILLEGAL_TRANSITION,
                    f"Transition from '{from_status.value}' to '{to_status.value}' is not allowed"
                )
            return ValidationResult.rejected(
                TransitionFailure.UNAUTHORIZED_ROLE,
                f"Role '{role.value}' is not authorized to move a church from "
                f"'{from_status.value}' to '{to_status.value}' "
                f"(allowed: {', '.join(sorted(r.value for r in allowed))})"
            )

        if not self.guards.evaluate(rule.guard, context):
            return ValidationResult.rejected(
                TransitionFailure.CONDITION_NOT_MET,
                f"{self.guards.failure_message(rule.guard)} "
                f"('{from_status.value}' -> '{to_status.value}')"
            )

        return ValidationResult.ok(rule)

    # =========================================================================
    # Execution
    # =========================================================================

    async def execute(self, context: TransitionContext) -> ExecutionResult:
        validation = self.validate(context)
        if not validation.valid:
            logger.info(
                f"Transition rejected: {validation.reason}",
                extra={
                    "church_id": context.church_id,
                    "from_status": context.from_status.value,
                    "to_status": context.to_status.value,
                    "role": context.actor.role.value,
                    "error_code": validation.failure.value,
                }
            )
            return self._failed(context, validation.failure, validation.reason)

        # Once started, run to completion even if the caller is cancelled
        return await asyncio.shield(self._execute_serialized(context, validation.rule))

    async def _execute_serialized(
        self,
        context: TransitionContext,
        rule: TransitionRule
    ) -> ExecutionResult:
        lock = self._lock_for(context.church_id)
        async with lock:
            try:
                await self.hooks.run(rule.hook, context)
            except Exception as e:
                logger.error(
                    f"Pre-transition hook '{rule.hook}' failed: {e}",
                    exc_info=True,
                    extra={"church_id": context.church_id, "hook": rule.hook}
                )
                return self._failed(
                    context,
                    TransitionFailure.HOOK_FAILURE,
                    f"Pre-transition hook '{rule.hook}' failed: {e}"
                )

            changed_at = self._clock()
            reviewed_by = context.metadata.get("reviewerUid") or context.actor.uid
            try:
                committed = await self.store.commit_status(
                    church_id=context.church_id,
                    expected_status=context.from_status,
                    new_status=context.to_status,
                    reviewed_by=reviewed_by,
                    note=context.note,
                    changed_at=changed_at,
                )
            except Exception as e:
                logger.error(
                    f"Status commit failed: {e}",
                    exc_info=True,
                    extra={"church_id": context.church_id}
                )
                return self._failed(
                    context,
                    TransitionFailure.PERSISTENCE_FAILURE,
                    f"Could not save the new status: {e}"
                )

            if not committed:
                logger.warning(
                    "Status commit skipped: stored status no longer matches request",
                    extra={
                        "church_id": context.church_id,
                        "from_status": context.from_status.value,
                    }
                )
                return self._failed(
                    context,
                    TransitionFailure.STALE_STATUS,
                    f"Church '{context.church_id}' is no longer in status "
                    f"'{context.from_status.value}'; reload and try again"
                )

            audit_recorded = await self.audit_writer.write_status_change(context, changed_at)

        logger.info(
            f"Transition executed: {context.from_status.value} -> {context.to_status.value}",
            extra={
                "church_id": context.church_id,
                "from_status": context.from_status.value,
                "to_status": context.to_status.value,
                "actor_email": context.actor.email,
                "role": context.actor.role.value,
            }
        )
        return ExecutionResult(
            success=True,
            church_id=context.church_id,
            from_status=context.from_status,
            to_status=context.to_status,
            audit_recorded=audit_recorded,
        )

    def _lock_for(self, church_id: str) -> asyncio.Lock:
        lock = self._locks.get(church_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[church_id] = lock
        return lock

    @staticmethod
    def _failed(
        context: TransitionContext,
        failure: TransitionFailure,
        reason: str
    ) -> ExecutionResult:
        return ExecutionResult(
            success=False,
            error=reason,
            failure=failure,
            church_id=context.church_id,
            from_status=context.from_status,
            to_status=context.to_status,
        )
