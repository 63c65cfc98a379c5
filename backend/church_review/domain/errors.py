"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional

from .enums import TransitionFailure


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Request Errors
class InvalidRequestError(DomainError):
    """Request parameters could not be interpreted"""
    error_code = "VALIDATION_ERROR"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class ChurchNotFoundError(NotFoundError):
    """Church not found"""
    error_code = TransitionFailure.CHURCH_NOT_FOUND.value


# Transition Errors
class TransitionError(DomainError):
    """A requested status transition was refused"""
    error_code = "TRANSITION_ERROR"
    http_status = 409


class IllegalTransitionError(TransitionError):
    """No rule exists for (from, to) at all"""
    error_code = TransitionFailure.ILLEGAL_TRANSITION.value


class UnauthorizedRoleError(TransitionError):
    """Rule exists for (from, to) but not for this role"""
    error_code = TransitionFailure.UNAUTHORIZED_ROLE.value
    http_status = 403


class ConditionNotMetError(TransitionError):
    """Rule matched but its guard failed"""
    error_code = TransitionFailure.CONDITION_NOT_MET.value
    http_status = 422


class StaleStatusError(TransitionError):
    """Stored status no longer matches the request's from-status"""
    error_code = TransitionFailure.STALE_STATUS.value


# Engine Errors
class EngineError(DomainError):
    """Workflow engine error"""
    error_code = "ENGINE_ERROR"
    http_status = 500


class HookFailureError(EngineError):
    """Pre-transition hook raised"""
    error_code = TransitionFailure.HOOK_FAILURE.value


class PersistenceFailureError(EngineError):
    """Status commit failed"""
    error_code = TransitionFailure.PERSISTENCE_FAILURE.value
    http_status = 502


class AuditFailureError(EngineError):
    """Audit append failed (logged, never fails a transition)"""
    error_code = "AUDIT_FAILURE"


# Registry Errors (raised at construction time only)
class RegistryError(DomainError):
    """Transition registry could not be built"""
    error_code = "REGISTRY_ERROR"
    http_status = 500


class DuplicateTransitionRuleError(RegistryError):
    """Two rules share the same (from, to, role)"""
    error_code = "DUPLICATE_TRANSITION_RULE"


class UnknownGuardError(RegistryError):
    """Rule names a guard with no implementation"""
    error_code = "UNKNOWN_GUARD"


class UnknownHookError(RegistryError):
    """Rule names a hook that was never registered"""
    error_code = "UNKNOWN_HOOK"


ERRORS_BY_FAILURE = {
    TransitionFailure.ILLEGAL_TRANSITION: IllegalTransitionError,
    TransitionFailure.UNAUTHORIZED_ROLE: UnauthorizedRoleError,
    TransitionFailure.CONDITION_NOT_MET: ConditionNotMetError,
    TransitionFailure.HOOK_FAILURE: HookFailureError,
    TransitionFailure.PERSISTENCE_FAILURE: PersistenceFailureError,
    TransitionFailure.STALE_STATUS: StaleStatusError,
    TransitionFailure.CHURCH_NOT_FOUND: ChurchNotFoundError,
}


def error_for_failure(
    failure: TransitionFailure,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> DomainError:
    """Build the domain error that corresponds to a returned failure code"""
    return ERRORS_BY_FAILURE[failure](message, details=details)
