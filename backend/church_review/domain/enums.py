"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class ChurchStatus(str, Enum):
    """Review status of a church profile"""
    PENDING = "pending"
    HERITAGE_REVIEW = "heritage_review"
    APPROVED = "approved"  # Published


class Role(str, Enum):
    """Roles that act on church profiles"""
    PARISH_SECRETARY = "parish_secretary"
    CHANCERY_OFFICE = "chancery_office"
    MUSEUM_RESEARCHER = "museum_researcher"


class HeritageClassification(str, Enum):
    """Heritage classification of a church"""
    ICP = "ICP"  # Important Cultural Property
    NCT = "NCT"  # National Cultural Treasure
    NON_HERITAGE = "non-heritage"
    UNKNOWN = "unknown"


class GuardKind(str, Enum):
    """Named guard conditions a transition rule may carry"""
    ALWAYS = "ALWAYS"
    NOTE_REQUIRED = "NOTE_REQUIRED"


class TransitionFailure(str, Enum):
    """Why a transition attempt did not go through"""
    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"
    UNAUTHORIZED_ROLE = "UNAUTHORIZED_ROLE"
    CONDITION_NOT_MET = "CONDITION_NOT_MET"
    HOOK_FAILURE = "HOOK_FAILURE"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    STALE_STATUS = "STALE_STATUS"  # Stored status moved on since the request was built
    CHURCH_NOT_FOUND = "CHURCH_NOT_FOUND"


class NotificationType(str, Enum):
    """Status change notification kinds"""
    CHURCH_SUBMITTED = "church_submitted"
    HERITAGE_REVIEW_ASSIGNED = "heritage_review_assigned"
    HERITAGE_VALIDATED = "heritage_validated"
    CHURCH_APPROVED = "church_approved"
