# Path: logdeck/infrastructure/storage/nosql/client.py
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from logdeck.shared.config.settings import MongoSettings
from logdeck.shared.errors.infrastructure.database import DatabaseConnectionError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())

RETRY_WAIT_SECONDS = 1


class MongoDBConnection:
    """Lazily established MongoDB connection owned by one persistence sink."""

    def __init__(self, settings: MongoSettings):
        self.settings = settings
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    async def _open(self) -> None:
        client = AsyncIOMotorClient(self.settings.uri, serverSelectionTimeoutMS=self.settings.timeout_ms)
        try:
            await client.admin.command("ping")
        except Exception:
            client.close()
            raise
        self._client = client
        self._db = client[self.settings.database]

    async def connect(self) -> AsyncIOMotorDatabase:
        """
        Connect (with retries) unless already connected.

        Raises:
            DatabaseConnectionError: If every attempt fails.
        """
        if self._db is not None:
            return self._db

        @retry(
            stop=stop_after_attempt(self.settings.connect_attempts),
            wait=wait_fixed(RETRY_WAIT_SECONDS),
            retry=retry_if_exception_type(Exception),
            reraise=True,
            after=lambda retry_state: logger.error(
                f"MongoDB connection attempt {retry_state.attempt_number} failed",
                context={"error": str(retry_state.outcome.exception())},
            ),
        )
        async def connect_mongo():
            await self._open()

        try:
            await connect_mongo()
        except Exception as e:
            raise DatabaseConnectionError(
                db_type="MongoDB",
                details={"database": self.settings.database, "error": str(e)}
            ) from e

        logger.info("MongoDB connection established", context={
            "uri": self.settings.uri,
            "db": self.settings.database
        })
        return self._db

    async def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed", context={})
        self._client = None
        self._db = None
