"""Domain Models - Pydantic schemas for all entities

Python attributes are snake_case; persisted documents and API payloads use
the camelCase aliases.
"""
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional
from pydantic import BaseModel, Field, EmailStr, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import (
    ChurchStatus, Role, HeritageClassification, GuardKind,
    TransitionFailure, NotificationType
)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid"
    )


# ============================================================================
# Actors
# ============================================================================

class Actor(CamelModel):
    """The user acting on a church, supplied by the caller per request"""

    uid: str = Field(..., description="Auth provider user ID")
    email: EmailStr = Field(..., description="User email")
    name: Optional[str] = Field(None, description="User display name")
    role: Role
    diocese: str

    def snapshot(self) -> "ActorSnapshot":
        return ActorSnapshot(uid=self.uid, email=self.email, name=self.name, role=self.role)


class ActorSnapshot(CamelModel):
    """Snapshot of actor identity at the time of a change"""

    uid: str
    email: EmailStr
    name: Optional[str] = None
    role: Role


# ============================================================================
# Church
# ============================================================================

class Church(CamelModel):
    """Church profile as far as the review workflow is concerned"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    church_id: str
    name: str
    diocese: str
    municipality: Optional[str] = None
    status: ChurchStatus = ChurchStatus.PENDING
    classification: HeritageClassification = HeritageClassification.UNKNOWN
    founded_year: Optional[int] = None
    has_historical_documents: bool = False
    architectural_significance: bool = False

    # Denormalized last-review metadata
    last_reviewed_by: Optional[str] = None
    last_review_note: Optional[str] = None
    last_status_change: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_heritage(self) -> bool:
        return self.classification in (HeritageClassification.ICP, HeritageClassification.NCT)


# ============================================================================
# Transition Rules
# ============================================================================

class TransitionRule(CamelModel):
    """One legal move in the review workflow (immutable registry row)"""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid", frozen=True
    )

    from_status: ChurchStatus
    to_status: ChurchStatus
    allowed_roles: FrozenSet[Role]
    guard: GuardKind = GuardKind.ALWAYS
    hook: Optional[str] = Field(None, description="Named pre-transition hook, resolved at startup")
    description: str

    @property
    def requires_note(self) -> bool:
        return self.guard == GuardKind.NOTE_REQUIRED


class TransitionContext(CamelModel):
    """A single transition request; built per call and never persisted as-is"""

    church_id: str
    from_status: ChurchStatus
    to_status: ChurchStatus
    actor: Actor
    note: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Audit
# ============================================================================

class AuditEntry(CamelModel):
    """Status change audit entry (append-only)"""

    church_id: str = Field(..., alias="entityId")
    from_status: ChurchStatus
    to_status: ChurchStatus
    changed_by: ActorSnapshot
    timestamp: datetime
    note: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    is_automated: bool = False
    diocese: Optional[str] = None


# ============================================================================
# Results
# ============================================================================

class ValidationResult(CamelModel):
    """Outcome of validating a transition request"""

    valid: bool
    reason: Optional[str] = None
    failure: Optional[TransitionFailure] = None
    rule: Optional[TransitionRule] = Field(None, exclude=True)

    @classmethod
    def ok(cls, rule: TransitionRule) -> "ValidationResult":
        return cls(valid=True, rule=rule)

    @classmethod
    def rejected(cls, failure: TransitionFailure, reason: str) -> "ValidationResult":
        return cls(valid=False, failure=failure, reason=reason)


class ExecutionResult(CamelModel):
    """Outcome of executing a transition request"""

    success: bool
    error: Optional[str] = None
    failure: Optional[TransitionFailure] = None
    church_id: Optional[str] = None
    from_status: Optional[ChurchStatus] = None
    to_status: Optional[ChurchStatus] = None
    audit_recorded: bool = False
    auto_forwarded: bool = False


class NextAction(CamelModel):
    """A legal move the given role can offer in the UI"""

    action: ChurchStatus
    label: str
    description: str
    requires_note: bool


class StatusInfo(CamelModel):
    """Human-readable rendering of a status"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    label: str
    color: str
    description: str


# ============================================================================
# Notifications
# ============================================================================

class StatusChangeNotification(CamelModel):
    """Notification outbox entry for a status change"""

    notification_id: str
    type: NotificationType
    recipient_roles: List[Role]
    dioceses: List[str]
    church_id: str
    church_name: str
    from_status: ChurchStatus
    to_status: ChurchStatus
    action_by: ActorSnapshot
    note: Optional[str] = None
    created_at: datetime
    read_by: List[str] = Field(default_factory=list)
