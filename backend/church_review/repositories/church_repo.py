"""Church Repository - Data access for church status"""
from datetime import datetime
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from .mongo_client import get_collection
from ..domain.models import Church
from ..domain.enums import ChurchStatus
from ..config.settings import settings
from ..utils.time import utc_now, format_iso
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ChurchRepository:
    """Repository for church documents (status fields only)"""

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._churches = collection if collection is not None else get_collection(settings.churches_collection)

    async def create_church(self, church: Church) -> Church:
        """Insert a new church; status is always pending on creation"""
        now = utc_now()
        church = church.model_copy(update={
            "status": ChurchStatus.PENDING,
            "created_at": now,
            "updated_at": now,
        })
        doc = church.model_dump(mode="json", by_alias=True)
        doc["_id"] = church.church_id
        doc["createdAt"] = doc["updatedAt"] = format_iso(now)

        await self._churches.insert_one(doc)
        logger.info(
            f"Created church: {church.name}",
            extra={"church_id": church.church_id, "diocese": church.diocese}
        )
        return church

    async def get_church(self, church_id: str) -> Optional[Church]:
        doc = await self._churches.find_one({"churchId": church_id})
        if doc:
            doc.pop("_id", None)
            return Church.model_validate(doc)
        return None

    async def commit_status(
        self,
        church_id: str,
        expected_status: ChurchStatus,
        new_status: ChurchStatus,
        reviewed_by: str,
        note: Optional[str],
        changed_at: datetime,
    ) -> bool:
        """
        Compare-and-swap the status

        The filter includes the expected status, so a concurrent writer that
        already moved the church makes this a no-op returning False.
        """
        timestamp = format_iso(changed_at)
        doc = await self._churches.find_one_and_update(
            {"churchId": church_id, "status": expected_status.value},
            {"$set": {
                "status": new_status.value,
                "lastReviewedBy": reviewed_by,
                "lastReviewNote": note,
                "lastStatusChange": timestamp,
                "updatedAt": timestamp,
            }},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return False

        logger.info(
            f"Church status updated: {expected_status.value} -> {new_status.value}",
            extra={
                "church_id": church_id,
                "from_status": expected_status.value,
                "to_status": new_status.value
            }
        )
        return True
