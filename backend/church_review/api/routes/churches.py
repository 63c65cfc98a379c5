"""Church API Routes - Review workflow endpoints"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import Field

from ..deps import get_actor_dep, get_correlation_id_dep, get_review_service_dep
from ...domain.models import (
    Actor, AuditEntry, CamelModel, Church, ExecutionResult, NextAction,
    TransitionContext, ValidationResult
)
from ...domain.enums import ChurchStatus, HeritageClassification
from ...domain.errors import ChurchNotFoundError, InvalidRequestError, error_for_failure
from ...services.church_review_service import ChurchReviewService
from ...services.heritage import should_require_heritage_review, suggest_heritage_classification
from ...utils.idgen import generate_church_id
from ...utils.time import parse_iso
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class CreateChurchRequest(CamelModel):
    """Request to register a church submission"""
    name: str = Field(..., min_length=1, max_length=200)
    diocese: str = Field(..., min_length=1, max_length=100)
    municipality: Optional[str] = Field(None, max_length=100)
    classification: HeritageClassification = HeritageClassification.UNKNOWN
    founded_year: Optional[int] = Field(None, ge=1000, le=3000)
    has_historical_documents: bool = False
    architectural_significance: bool = False


class TransitionRequest(CamelModel):
    """Request to move a church to another status"""
    to_status: ChurchStatus
    note: Optional[str] = Field(None, max_length=2000)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    detect_heritage: bool = Field(
        False, description="Redirect chancery approvals of heritage churches to heritage review"
    )


class HeritageAssessment(CamelModel):
    church_id: str
    requires_heritage_review: bool
    suggested_classification: HeritageClassification


# ============================================================================
# Helpers
# ============================================================================

async def _load_church(service: ChurchReviewService, church_id: str) -> Church:
    church = await service.get_church(church_id)
    if church is None:
        raise ChurchNotFoundError(
            f"Church '{church_id}' not found",
            details={"church_id": church_id}
        )
    return church


# ============================================================================
# Routes
# ============================================================================

@router.post("", response_model=Church, status_code=status.HTTP_201_CREATED)
async def create_church(
    request: CreateChurchRequest,
    actor: Actor = Depends(get_actor_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    """Register a new church submission; it starts in pending"""
    church = await service.create_church(Church(
        church_id=generate_church_id(),
        **request.model_dump()
    ))
    logger.info(
        f"Church submitted: {church.church_id}",
        extra={"church_id": church.church_id, "actor_email": actor.email}
    )
    return church


@router.get("/{church_id}", response_model=Church)
async def get_church(
    church_id: str,
    actor: Actor = Depends(get_actor_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    return await _load_church(service, church_id)


@router.get("/{church_id}/next-actions", response_model=List[NextAction])
async def get_next_actions(
    church_id: str,
    actor: Actor = Depends(get_actor_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    """Moves the acting role can offer for this church right now"""
    church = await _load_church(service, church_id)
    return service.get_next_actions(church.church_id, church.status, actor.role)


@router.post("/{church_id}/transitions/validate", response_model=ValidationResult)
async def validate_transition(
    church_id: str,
    request: TransitionRequest,
    actor: Actor = Depends(get_actor_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    """Dry run: would this transition be accepted? Nothing is written."""
    church = await _load_church(service, church_id)
    context = TransitionContext(
        church_id=church_id,
        from_status=church.status,
        to_status=request.to_status,
        actor=actor,
        note=request.note,
        metadata=request.metadata,
    )
    return service.is_transition_valid(context)


@router.post("/{church_id}/transitions", response_model=ExecutionResult)
async def execute_transition(
    church_id: str,
    request: TransitionRequest,
    actor: Actor = Depends(get_actor_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    """
    Move a church to another status

    A refused transition responds with the failure code and the reason
    (no such move, wrong role, missing note, stale status).
    """
    if request.detect_heritage:
        result = await service.update_church_status_with_heritage_detection(
            church_id, request.to_status, actor, request.note, request.metadata
        )
    else:
        result = await service.update_church_status(
            church_id, request.to_status, actor, request.note, request.metadata
        )

    if not result.success:
        raise error_for_failure(
            result.failure,
            result.error,
            details={
                "church_id": church_id,
                "from_status": result.from_status.value if result.from_status else None,
                "to_status": request.to_status.value,
                "role": actor.role.value,
            }
        )
    return result


@router.get("/{church_id}/audit", response_model=List[AuditEntry])
async def get_audit_trail(
    church_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    since: Optional[str] = Query(None, description="Only entries at or after this ISO 8601 time"),
    actor: Actor = Depends(get_actor_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    """Status change history, newest first"""
    await _load_church(service, church_id)
    since_dt = None
    if since:
        try:
            since_dt = parse_iso(since)
        except ValueError:
            raise InvalidRequestError(
                f"Invalid timestamp for since: {since}",
                details={"since": since}
            )
    return await service.get_audit_trail(church_id, skip=skip, limit=limit, since=since_dt)


@router.get("/{church_id}/heritage-assessment", response_model=HeritageAssessment)
async def get_heritage_assessment(
    church_id: str,
    actor: Actor = Depends(get_actor_dep),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    church = await _load_church(service, church_id)
    return HeritageAssessment(
        church_id=church.church_id,
        requires_heritage_review=should_require_heritage_review(church),
        suggested_classification=suggest_heritage_classification(church),
    )
