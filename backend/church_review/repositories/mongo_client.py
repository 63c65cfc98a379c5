"""Async MongoDB Client using Motor"""
from typing import Any, Dict, Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Global async client instance
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


def get_client() -> AsyncIOMotorClient:
    """Get or create async MongoDB client"""
    global _client
    if _client is None:
        logger.info(f"Creating async MongoDB client for: {settings.mongo_uri}")
        _client = AsyncIOMotorClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            tz_aware=True,
        )
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """Get the application database"""
    global _database
    if _database is None:
        client = get_client()
        _database = client[settings.mongo_db]
        logger.info(f"Using database: {settings.mongo_db}")
    return _database


def get_collection(name: str) -> AsyncIOMotorCollection:
    """Get a collection from the database"""
    return get_database()[name]


async def create_indexes() -> None:
    """Create all required indexes"""
    db = get_database()
    logger.info("Creating MongoDB indexes...")

    churches = db[settings.churches_collection]
    await churches.create_index("churchId", unique=True)
    await churches.create_index([("diocese", ASCENDING), ("status", ASCENDING)])

    audit = db[settings.audit_collection]
    await audit.create_index([("entityId", ASCENDING), ("timestamp", DESCENDING)])
    await audit.create_index("diocese")

    notifications = db[settings.notifications_collection]
    await notifications.create_index("notificationId", unique=True)
    await notifications.create_index([("dioceses", ASCENDING), ("recipientRoles", ASCENDING)])
    await notifications.create_index("createdAt")

    logger.info("MongoDB indexes created successfully")


async def close_connection() -> None:
    """Close async MongoDB connection"""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


async def health_check() -> Dict[str, Any]:
    """Check MongoDB health"""
    try:
        await get_client().admin.command("ping")
        return {
            "status": "healthy",
            "database": settings.mongo_db,
            "connection": "ok"
        }
    except Exception as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": settings.mongo_db,
            "error": str(e)
        }
