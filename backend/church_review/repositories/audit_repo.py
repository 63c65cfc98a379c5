"""Audit Repository - Data access for church status audit entries"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from .mongo_client import get_collection
from ..domain.models import AuditEntry
from ..config.settings import settings
from ..utils.time import format_iso
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuditRepository:
    """Repository for audit entries (append-only)"""

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        self._audit = collection if collection is not None else get_collection(settings.audit_collection)

    async def append(self, entry: AuditEntry) -> None:
        """Append an audit entry"""
        doc = entry.model_dump(mode="json", by_alias=True, exclude_none=True)
        doc["timestamp"] = format_iso(entry.timestamp)
        await self._audit.insert_one(doc)
        logger.debug(
            f"Appended audit entry: {entry.from_status.value} -> {entry.to_status.value}",
            extra={"church_id": entry.church_id, "actor_email": entry.changed_by.email}
        )

    async def list_for_church(
        self,
        church_id: str,
        skip: int = 0,
        limit: int = 100,
        since: Optional[datetime] = None
    ) -> List[AuditEntry]:
        """Audit entries for a church, newest first"""
        query: Dict[str, Any] = {"entityId": church_id}
        if since is not None:
            query["timestamp"] = {"$gte": format_iso(since)}

        cursor = self._audit.find(query).sort("timestamp", DESCENDING).skip(skip).limit(limit)

        entries = []
        async for doc in cursor:
            doc.pop("_id", None)
            entries.append(AuditEntry.model_validate(doc))
        return entries

