"""Tests for the engine's operational logger."""

import json
import logging
from pathlib import Path

from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.constants import LogLevel


class TestLoggingService:
    """Test LogConfig defaults and LoggingService wiring."""

    def test_default_config_builds_a_working_logger(self) -> None:
        config = LogConfig()

        service = LoggingService(config)

        assert config.level == "INFO"
        assert service.logger.level == logging.INFO
        assert [handler.level for handler in service.logger.handlers] == [logging.INFO]

    def test_enum_level_is_stored_as_its_name(self) -> None:
        config = LogConfig(name="logdeck-test-debug", level=LogLevel.DEBUG)

        service = LoggingService(config)

        assert config.level == "DEBUG"
        assert service.logger.level == logging.DEBUG

    def test_file_handler_writes_json_with_masked_context(self, tmp_path: Path) -> None:
        path = tmp_path / "internal.log"
        config = LogConfig(name="logdeck-test-file", enable_console=False, enable_file=True, file_path=str(path))
        service = LoggingService(config)

        service.warning("Connecting", context={"uri": "mongodb://user:secret@db:27017", "attempt": 2})
        for handler in service.logger.handlers:
            handler.close()

        record = json.loads(path.read_text(encoding="utf-8").splitlines()[0])
        assert record["level"] == "WARNING"
        assert record["event"] == "Connecting"
        assert record["context"]["attempt"] == 2
        assert "secret" not in record["context"]["uri"]
