"""Notification Service - Status change notifications for the review workflow

Maps an executed transition to the notification kinds and recipient roles
and writes them to the outbox. Rendering and delivery happen elsewhere.
"""
from typing import Dict, List, Optional, Tuple

from ..domain.models import Actor, Church, StatusChangeNotification
from ..domain.enums import ChurchStatus, NotificationType, Role
from ..repositories.notification_repo import NotificationRepository
from ..utils.idgen import generate_notification_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)

Route = Tuple[NotificationType, Tuple[Role, ...]]


class NotificationService:
    """NotificationPort implementation backed by the notification outbox"""

    ROUTES: Dict[Tuple[ChurchStatus, ChurchStatus], Tuple[Route, ...]] = {
        (ChurchStatus.PENDING, ChurchStatus.PENDING): (
            (NotificationType.CHURCH_SUBMITTED, (Role.CHANCERY_OFFICE,)),
        ),
        (ChurchStatus.PENDING, ChurchStatus.HERITAGE_REVIEW): (
            (NotificationType.HERITAGE_REVIEW_ASSIGNED, (Role.MUSEUM_RESEARCHER,)),
        ),
        (ChurchStatus.APPROVED, ChurchStatus.HERITAGE_REVIEW): (
            (NotificationType.HERITAGE_REVIEW_ASSIGNED, (Role.MUSEUM_RESEARCHER,)),
        ),
        (ChurchStatus.HERITAGE_REVIEW, ChurchStatus.APPROVED): (
            (NotificationType.HERITAGE_VALIDATED, (Role.CHANCERY_OFFICE,)),
            (NotificationType.CHURCH_APPROVED, (Role.PARISH_SECRETARY,)),
        ),
        (ChurchStatus.PENDING, ChurchStatus.APPROVED): (
            (NotificationType.CHURCH_APPROVED, (Role.PARISH_SECRETARY,)),
        ),
    }

    def __init__(self, repo: Optional[NotificationRepository] = None):
        self.repo = repo or NotificationRepository()

    def routes_for(self, from_status: ChurchStatus, to_status: ChurchStatus) -> Tuple[Route, ...]:
        return self.ROUTES.get((from_status, to_status), ())

    def build_notifications(
        self,
        from_status: ChurchStatus,
        to_status: ChurchStatus,
        church: Church,
        actor: Actor,
        note: Optional[str] = None,
    ) -> List[StatusChangeNotification]:
        now = utc_now()
        return [
            StatusChangeNotification(
                notification_id=generate_notification_id(),
                type=notification_type,
                recipient_roles=list(roles),
                dioceses=[church.diocese],
                church_id=church.church_id,
                church_name=church.name,
                from_status=from_status,
                to_status=to_status,
                action_by=actor.snapshot(),
                note=note,
                created_at=now,
            )
            for notification_type, roles in self.routes_for(from_status, to_status)
        ]

    async def notify(
        self,
        from_status: ChurchStatus,
        to_status: ChurchStatus,
        church: Church,
        actor: Actor,
        note: Optional[str] = None,
    ) -> None:
        notifications = self.build_notifications(from_status, to_status, church, actor, note)
        if not notifications:
            logger.debug(
                "No notifications for transition",
                extra={"church_id": church.church_id, "from_status": from_status.value, "to_status": to_status.value}
            )
            return

        await self.repo.create_notifications(notifications)
        for notification in notifications:
            logger.info(
                f"Queued {notification.type.value} for {', '.join(r.value for r in notification.recipient_roles)}",
                extra={
                    "church_id": church.church_id,
                    "notification_type": notification.type.value,
                    "diocese": church.diocese,
                }
            )
