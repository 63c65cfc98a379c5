"""Status Presentation - Canonical human-readable rendering of statuses

Every table here must cover every ChurchStatus. Coverage is checked when the
module is imported so a new status without a rendering fails at startup.
"""
from typing import Dict, Mapping

from ..domain.models import StatusInfo
from ..domain.enums import ChurchStatus


STATUS_INFO: Dict[ChurchStatus, StatusInfo] = {
    ChurchStatus.PENDING: StatusInfo(
        label="Pending Review",
        color="yellow",
        description="Awaiting Chancery Office review",
    ),
    ChurchStatus.HERITAGE_REVIEW: StatusInfo(
        label="Heritage Review",
        color="orange",
        description="Under review by Museum Researcher",
    ),
    ChurchStatus.APPROVED: StatusInfo(
        label="Published",
        color="green",
        description="Church profile is live and public",
    ),
}

STATUS_BADGE_CLASSES: Dict[ChurchStatus, str] = {
    ChurchStatus.PENDING: "bg-yellow-100 text-yellow-800 border-yellow-300",
    ChurchStatus.HERITAGE_REVIEW: "bg-orange-100 text-orange-800 border-orange-300",
    ChurchStatus.APPROVED: "bg-green-100 text-green-800 border-green-300",
}

STATUS_ICONS: Dict[ChurchStatus, str] = {
    ChurchStatus.PENDING: "Clock",
    ChurchStatus.HERITAGE_REVIEW: "Building2",
    ChurchStatus.APPROVED: "CheckCircle2",
}

# Label of the button that moves a church *into* the keyed status
ACTION_LABELS: Dict[ChurchStatus, str] = {
    ChurchStatus.PENDING: "Submit for Review",
    ChurchStatus.HERITAGE_REVIEW: "Send to Museum Researcher",
    ChurchStatus.APPROVED: "Approve & Publish",
}


def _ensure_exhaustive(name: str, table: Mapping[ChurchStatus, object]) -> None:
    missing = [s.value for s in ChurchStatus if s not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for status(es): {', '.join(missing)}")


for _name, _table in (
    ("STATUS_INFO", STATUS_INFO),
    ("STATUS_BADGE_CLASSES", STATUS_BADGE_CLASSES),
    ("STATUS_ICONS", STATUS_ICONS),
    ("ACTION_LABELS", ACTION_LABELS),
):
    _ensure_exhaustive(_name, _table)


def get_status_info(status: ChurchStatus) -> StatusInfo:
    return STATUS_INFO[ChurchStatus(status)]


def get_status_badge_classes(status: ChurchStatus) -> str:
    """CSS classes for a status badge"""
    return STATUS_BADGE_CLASSES[ChurchStatus(status)]


def get_status_icon(status: ChurchStatus) -> str:
    """Icon name for a status"""
    return STATUS_ICONS[ChurchStatus(status)]


def get_action_label(target: ChurchStatus) -> str:
    return ACTION_LABELS[ChurchStatus(target)]
