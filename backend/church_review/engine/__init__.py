"""Workflow Engine - Church review state machine"""
from .registry import TransitionRegistry, CANONICAL_RULES
from .state_machine import WorkflowStateMachine
from .guards import GuardEvaluator
from .hooks import HookRegistry
from .audit_writer import AuditWriter
from .ports import AuditTrailPort, ChurchStatusStore, NotificationPort

__all__ = [
    "TransitionRegistry",
    "CANONICAL_RULES",
    "WorkflowStateMachine",
    "GuardEvaluator",
    "HookRegistry",
    "AuditWriter",
    "AuditTrailPort",
    "ChurchStatusStore",
    "NotificationPort",
]
