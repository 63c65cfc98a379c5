"""Workflow API Routes - Rule and status introspection for calling UIs"""
from typing import List
from fastapi import APIRouter, Depends, Query

from ..deps import get_review_service_dep
from ...domain.models import CamelModel, StatusInfo, TransitionRule
from ...domain.enums import ChurchStatus, Role
from ...engine.presentation import get_status_badge_classes, get_status_icon
from ...services.church_review_service import ChurchReviewService

router = APIRouter()


class StatusView(StatusInfo):
    """Status rendering plus badge styling"""
    status: ChurchStatus
    badge_classes: str
    icon: str


def _status_view(service: ChurchReviewService, status: ChurchStatus) -> StatusView:
    info = service.get_status_info(status)
    return StatusView(
        status=status,
        label=info.label,
        color=info.color,
        description=info.description,
        badge_classes=get_status_badge_classes(status),
        icon=get_status_icon(status),
    )


@router.get("/transitions", response_model=List[TransitionRule])
async def list_valid_transitions(
    from_status: ChurchStatus = Query(..., alias="fromStatus"),
    role: Role = Query(...),
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    """Transitions role may perform from from_status"""
    return service.get_valid_transitions(from_status, role)


@router.get("/statuses", response_model=List[StatusView])
async def list_statuses(service: ChurchReviewService = Depends(get_review_service_dep)):
    return [_status_view(service, s) for s in ChurchStatus]


@router.get("/statuses/{status}", response_model=StatusView)
async def get_status(
    status: ChurchStatus,
    service: ChurchReviewService = Depends(get_review_service_dep)
):
    return _status_view(service, status)
