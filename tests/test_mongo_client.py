"""Tests for the retrying MongoDB connection."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from logdeck.infrastructure.storage.nosql.client import MongoDBConnection
from logdeck.shared.config.settings import MongoSettings
from logdeck.shared.errors.infrastructure.database import DatabaseConnectionError

CLIENT_PATH = "logdeck.infrastructure.storage.nosql.client.AsyncIOMotorClient"


def make_client(ping_error: Exception = None) -> MagicMock:
    client = MagicMock()
    client.admin.command = AsyncMock(side_effect=ping_error)
    return client


class TestMongoDBConnection:
    """Test connect/disconnect."""

    @pytest.mark.asyncio
    async def test_connect_returns_database(self) -> None:
        client = make_client()
        with patch(CLIENT_PATH, return_value=client) as client_class:
            connection = MongoDBConnection(MongoSettings(uri="mongodb://db:27017", database="app"))
            db = await connection.connect()
            again = await connection.connect()

        client_class.assert_called_once_with("mongodb://db:27017", serverSelectionTimeoutMS=5000)
        client.__getitem__.assert_called_with("app")
        assert db is again
        assert connection.connected is True

    @pytest.mark.asyncio
    async def test_connect_retries_then_raises(self) -> None:
        client = make_client(ping_error=ConnectionError("refused"))
        with patch(CLIENT_PATH, return_value=client) as client_class, \
                patch("logdeck.infrastructure.storage.nosql.client.RETRY_WAIT_SECONDS", 0):
            connection = MongoDBConnection(MongoSettings(connect_attempts=2))
            with pytest.raises(DatabaseConnectionError):
                await connection.connect()

        assert client_class.call_count == 2
        assert client.close.call_count == 2
        assert connection.connected is False

    @pytest.mark.asyncio
    async def test_disconnect_closes_client(self) -> None:
        client = make_client()
        with patch(CLIENT_PATH, return_value=client):
            connection = MongoDBConnection(MongoSettings())
            await connection.connect()
            await connection.disconnect()

        client.close.assert_called_once()
        assert connection.connected is False
