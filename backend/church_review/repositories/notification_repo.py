"""Notification Repository - Data access for the notification outbox"""
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection

from .mongo_client import get_collection
from ..domain.models import StatusChangeNotification
from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationRepository:
    """Repository for status change notifications"""

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._outbox = collection if collection is not None else get_collection(settings.notifications_collection)

    async def create_notifications(
        self,
        notifications: List[StatusChangeNotification]
    ) -> List[StatusChangeNotification]:
        """Insert notifications into the outbox"""
        if not notifications:
            return []

        docs = []
        for notification in notifications:
            doc = notification.model_dump(mode="json", by_alias=True)
            doc["_id"] = notification.notification_id
            docs.append(doc)

        await self._outbox.insert_many(docs)
        logger.info(f"Created {len(notifications)} notifications")
        return notifications
