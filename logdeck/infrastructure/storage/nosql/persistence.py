# Path: logdeck/infrastructure/storage/nosql/persistence.py
import asyncio
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from logdeck.domain.logs.models.entry import LogEntry
from logdeck.infrastructure.storage.nosql.client import MongoDBConnection
from logdeck.infrastructure.storage.nosql.repositories.base import MongoRepository
from logdeck.shared.config.settings import DbConfig, MongoSettings
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())

RECONNECT_COOLDOWN_SECONDS = 30


class PersistenceSink:
    """Best-effort write-through of entries to MongoDB.

    Failed writes are logged and dropped: no retry, no queue. Writes that
    arrive while a connection attempt is in flight, or within
    ``RECONNECT_COOLDOWN_SECONDS`` of a failed one, are dropped at once.
    """

    def __init__(
            self,
            db_config: Optional[DbConfig],
            connection_factory: Callable[[MongoSettings], MongoDBConnection] = MongoDBConnection,
            clock: Callable[[], float] = time.monotonic
    ):
        self.db_config = db_config
        self.enabled = db_config is not None and db_config.type == "mongodb"
        self._clock = clock
        self._connection: Optional[MongoDBConnection] = None
        self._repository: Optional[MongoRepository] = None
        self._connect_lock = asyncio.Lock()
        self._reconnect_at = 0.0

        if db_config is not None and not self.enabled:
            logger.warning("Unsupported persistence backend, persistence disabled", context={"type": db_config.type})
        if self.enabled:
            self._connection = connection_factory(db_config.mongodb)

    def _accepting(self) -> bool:
        if self._repository is not None:
            return True
        return not self._connect_lock.locked() and self._clock() >= self._reconnect_at

    async def _get_repository(self) -> MongoRepository:
        async with self._connect_lock:
            if self._repository is None:
                try:
                    db = await self._connection.connect()
                except Exception:
                    self._reconnect_at = self._clock() + RECONNECT_COOLDOWN_SECONDS
                    raise
                self._repository = MongoRepository(db, self.db_config.mongodb.collection_name)
        return self._repository

    async def write(self, entry: LogEntry) -> bool:
        """Insert ``entry``; returns False (after logging) on any failure."""
        if not self.enabled:
            return False
        if not self._accepting():
            logger.debug("MongoDB unavailable, log entry dropped", context={"level": entry.level})
            return False
        try:
            repository = await self._get_repository()
            await repository.insert_one({
                "level": entry.level,
                "timestamp": entry.timestamp,
                "message": entry.message,
                "formattedMessage": entry.formatted_message,
                "createdAt": datetime.now(timezone.utc)
            })
            return True
        except Exception as e:
            logger.error("Failed to persist log entry", context={"level": entry.level, "error": str(e)})
            return False

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.disconnect()
        self._repository = None
