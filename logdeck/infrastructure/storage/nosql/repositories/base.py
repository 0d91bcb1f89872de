# Path: logdeck/infrastructure/storage/nosql/repositories/base.py
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase

from logdeck.shared.errors.infrastructure.database import MongoError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())


class MongoRepository:
    """Repository for MongoDB operations on one collection."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        """Initialize repository with database and collection name."""
        self.db = db
        self.collection = db[collection_name]

    async def insert_one(self, document: Dict[str, Any]) -> str:
        """Insert a single document and return its id."""
        try:
            result = await self.collection.insert_one(document)
        except Exception as e:
            logger.error("Mongo insert_one failed", context={"collection": self.collection.name, "error": str(e)})
            raise MongoError(
                operation="insert",
                details={"collection": self.collection.name, "error": str(e)}
            ) from e
        inserted_id = str(result.inserted_id)
        logger.debug("Mongo insert_one", context={"collection": self.collection.name, "id": inserted_id})
        return inserted_id
