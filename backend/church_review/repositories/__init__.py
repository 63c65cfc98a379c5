"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection
from .church_repo import ChurchRepository
from .audit_repo import AuditRepository
from .notification_repo import NotificationRepository

__all__ = [
    "get_database",
    "get_collection",
    "ChurchRepository",
    "AuditRepository",
    "NotificationRepository",
]
