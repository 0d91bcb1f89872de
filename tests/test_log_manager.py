"""Tests for the LogManager engine and its ingestion pipeline."""

import asyncio
import re
import socket
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from logdeck.domain.logs.services.log_manager import LogManager
from logdeck.infrastructure.mail.smtp_client import SmtpMailer
from logdeck.shared.errors.domain.config import ConfigurationError

ALERT_RULE = {
    "level": "error",
    "smtp": {"host": "smtp.example.com"},
    "from": "logs@example.com",
    "to": "ops@example.com",
}


class TestIngestion:
    """Test log() and the per-level handles."""

    @pytest.mark.asyncio
    async def test_log_returns_entry_and_writes_file(self, make_manager, log_dir: Path) -> None:
        manager = make_manager()

        entry = await manager.log("info", "user", 42, "logged in")

        assert entry.level == "info"
        assert entry.message == "user 42 logged in"
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", entry.timestamp)
        assert entry.formatted_message == f"[{entry.timestamp}] [INFO]: user 42 logged in"
        assert (log_dir / "logs.txt").read_text(encoding="utf-8") == entry.formatted_message + "\n"
        assert manager.get_buffered_logs() == [entry]

    @pytest.mark.asyncio
    async def test_unknown_level_degrades_to_default(self, make_manager) -> None:
        manager = make_manager(levels=["info", "error"])

        entry = await manager.log("fatal", "database gone")

        assert entry.level == "info"
        assert entry.message == "fatal database gone"

    @pytest.mark.asyncio
    async def test_level_methods_forward(self, make_manager) -> None:
        manager = make_manager(levels=["info", "error"])

        entry = await manager.method("error")("boom")

        assert entry.level == "error"
        assert sorted(manager.methods) == ["error", "info"]
        with pytest.raises(KeyError):
            manager.method("debug")

    @pytest.mark.asyncio
    async def test_exception_argument_includes_stack(self, make_manager) -> None:
        manager = make_manager()
        try:
            raise RuntimeError("connection reset")
        except RuntimeError as exc:
            entry = await manager.log("error", exc)

        message, _, stack = entry.message.partition(" \n")
        assert message == "connection reset"
        assert "Traceback" in stack
        assert "RuntimeError: connection reset" in stack

    @pytest.mark.asyncio
    async def test_multi_line_error_is_listed_once(self, make_manager) -> None:
        manager = make_manager()
        try:
            raise RuntimeError("connection reset")
        except RuntimeError as exc:
            entry = await manager.log("error", exc)

        errors = await manager.filter_logs(level="error")

        assert errors == [entry]

    @pytest.mark.asyncio
    async def test_unserializable_argument_is_still_recorded(self, make_manager, log_dir: Path) -> None:
        manager = make_manager()

        entry = await manager.log("info", "grid", {(0, 1): "x"})

        assert entry.message == "grid {(0, 1): 'x'}"
        assert manager.get_buffered_logs() == [entry]
        assert "grid {(0, 1): 'x'}" in (log_dir / "logs.txt").read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_custom_format(self, make_manager, log_dir: Path) -> None:
        manager = make_manager(logFormat=lambda level, ts, msg: f"{level}|{msg}")

        await manager.log("warn", "careful")

        assert (log_dir / "logs.txt").read_text(encoding="utf-8") == "warn|careful\n"

    @pytest.mark.asyncio
    async def test_console_only_skips_file(self, make_manager, log_dir: Path, capsys) -> None:
        manager = make_manager(fileOnly=False, consoleOnly=True)

        await manager.log("info", "to console")

        assert "[INFO]: to console" in capsys.readouterr().out
        assert not (log_dir / "logs.txt").exists()

    @pytest.mark.asyncio
    async def test_file_only_skips_console(self, make_manager, capsys) -> None:
        manager = make_manager()

        await manager.log("info", "quiet")

        assert capsys.readouterr().out == ""

    def test_conflicting_modes_fail_construction(self, make_manager) -> None:
        with pytest.raises(ConfigurationError):
            make_manager(consoleOnly=True, fileOnly=True)

    @pytest.mark.asyncio
    async def test_buffer_keeps_most_recent(self, make_manager) -> None:
        manager = make_manager(bufferSize=3)

        for i in range(5):
            await manager.log("info", f"m{i}")

        assert [entry.message for entry in manager.get_buffered_logs()] == ["m2", "m3", "m4"]


class TestRotationScenario:
    """Rotation through the full pipeline."""

    @pytest.mark.asyncio
    async def test_rotates_once_after_threshold(self, make_manager, log_dir: Path) -> None:
        # Given levels info/error, file-only mode and a 100 byte threshold
        manager = make_manager(levels=["info", "error"], maxFileSize=100, compressOldLogs=False)
        rotations = []
        manager.on("logRotation", rotations.append)
        active = log_dir / "logs.txt"

        # When info messages are logged until the file reaches the threshold
        while not active.exists() or active.stat().st_size < 100:
            await manager.log("info", "filling the active log file")
        after = await manager.log("info", "after rotation")

        # Then exactly one archive exists and the active file holds only the new entry
        archives = [path for path in log_dir.iterdir() if path.name != "logs.txt"]
        assert len(archives) == 1
        assert re.fullmatch(r"logs_\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2}\.txt", archives[0].name)
        assert active.read_text(encoding="utf-8") == after.formatted_message + "\n"
        assert len(rotations) == 1
        assert rotations[0]["archive"] == archives[0].name

    @pytest.mark.asyncio
    async def test_rotation_is_broadcast(self, make_manager, make_session) -> None:
        manager = make_manager(maxFileSize=1)
        session = make_session()
        await manager.connect_client(session)

        await manager.log("info", "one")
        await manager.log("info", "two")

        assert "logRotation" in session.events()


class TestPipelineSideEffects:
    """Metrics, events, realtime, alerts and persistence."""

    @pytest.mark.asyncio
    async def test_metrics_when_enabled(self, make_manager) -> None:
        manager = make_manager(enableMetrics=True)

        for level in ["info", "error", "info"]:
            await manager.log(level, "x")

        metrics = manager.get_metrics()
        assert metrics.total_logs == 3
        assert metrics.logs_by_level == {"info": 2, "error": 1}

    @pytest.mark.asyncio
    async def test_metrics_disabled_returns_none(self, make_manager) -> None:
        manager = make_manager()
        await manager.log("info", "x")

        assert manager.get_metrics() is None

    @pytest.mark.asyncio
    async def test_log_event_and_subscription_removal(self, make_manager) -> None:
        manager = make_manager()
        received = []
        subscription = manager.on("log", received.append)

        first = await manager.log("info", "first")
        subscription.remove()
        await manager.log("info", "second")

        assert received == [first]

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_break_ingestion(self, make_manager, log_dir: Path) -> None:
        manager = make_manager()

        def broken(_entry):
            raise RuntimeError("subscriber bug")

        manager.on("log", broken)
        await manager.log("info", "still written")

        assert "still written" in (log_dir / "logs.txt").read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_new_log_and_metrics_are_pushed(self, make_manager, make_session) -> None:
        manager = make_manager(enableMetrics=True)
        session = make_session()
        await manager.connect_client(session)

        entry = await manager.log("info", "live")

        assert session.events() == ["initialLogs", "newLog", "metricsUpdate"]
        assert session.messages[1]["data"] == entry.to_wire()
        assert session.messages[2]["data"]["totalLogs"] == 1
        assert manager.get_connected_clients() == 1

    @pytest.mark.asyncio
    async def test_initial_logs_are_last_fifty(self, make_manager, make_session) -> None:
        manager = make_manager()
        for i in range(60):
            await manager.log("info", f"m{i}")
        session = make_session()

        await manager.connect_client(session)

        initial = session.messages[0]["data"]
        assert len(initial) == 50
        assert initial[0]["message"] == "m10"

    @pytest.mark.asyncio
    async def test_alert_failure_does_not_block_sinks(self, log_dir: Path, clock) -> None:
        mailer = MagicMock(spec=SmtpMailer)
        mailer.send = AsyncMock(side_effect=OSError("smtp down"))
        manager = LogManager({"logDir": str(log_dir), "fileOnly": True, "emailAlerts": [ALERT_RULE]},
                             clock=clock, mailer=mailer)

        await manager.log("error", "boom")

        mailer.send.assert_awaited_once()
        assert "boom" in (log_dir / "logs.txt").read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_persistence_runs_in_background(self, log_dir: Path, clock) -> None:
        connection = MagicMock()
        repository_collection = MagicMock()
        repository_collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="1"))
        db = MagicMock()
        db.__getitem__.return_value = repository_collection
        connection.connect = AsyncMock(return_value=db)
        connection.disconnect = AsyncMock()
        manager = LogManager({"logDir": str(log_dir), "fileOnly": True, "dbConfig": {"type": "mongodb"}},
                             clock=clock, connection_factory=lambda settings: connection)

        await manager.log("info", "stored")
        await asyncio.gather(*manager.pending_tasks)

        document = repository_collection.insert_one.await_args.args[0]
        assert document["message"] == "stored"
        await manager.close()
        connection.disconnect.assert_awaited_once()


class TestConfigurationOperations:
    """update_config, create_custom_logger and queries."""

    @pytest.mark.asyncio
    async def test_update_levels_regenerates_methods_and_emits(self, make_manager) -> None:
        manager = make_manager()
        changes = []
        manager.on("configChanged", changes.append)

        config = manager.update_config({"levels": ["trace", "fatal"]})

        assert manager.get_available_levels() == ["trace", "fatal"]
        assert sorted(manager.methods) == ["fatal", "trace"]
        assert changes == [config]
        assert (await manager.method("fatal")("x")).level == "fatal"

    def test_invalid_update_keeps_previous_config(self, make_manager) -> None:
        manager = make_manager()
        previous = manager.get_config()

        with pytest.raises(ConfigurationError):
            manager.update_config({"consoleOnly": True})

        assert manager.get_config() is previous

    @pytest.mark.asyncio
    async def test_update_moves_file_sink(self, make_manager, log_dir: Path) -> None:
        manager = make_manager()

        manager.update_config({"logFile": "other.log"})
        await manager.log("info", "moved")

        assert (log_dir / "other.log").exists()

    @pytest.mark.asyncio
    async def test_custom_logger_is_independent(self, make_manager) -> None:
        manager = make_manager(enableMetrics=True)
        child = manager.create_custom_logger({"levels": ["audit"], "logFile": "audit.txt"})

        await child.log("audit", "who did what")

        assert child.get_config().enable_metrics is True
        assert child.get_config().server_config.start_web_server is False
        assert manager.get_buffered_logs() == []
        assert manager.get_available_levels() == ["info", "warn", "error", "debug"]

    @pytest.mark.asyncio
    async def test_filter_and_export(self, make_manager) -> None:
        manager = make_manager()
        await manager.log("info", "ok")
        await manager.log("error", "Disk failure")
        await manager.log("error", "timeout")

        errors = await manager.filter_logs(level="ERROR", search="disk")
        csv = manager.export_logs_as_csv(errors)

        assert [entry.message for entry in errors] == ["Disk failure"]
        assert csv.splitlines()[1].endswith('"error","Disk failure"')

    @pytest.mark.asyncio
    async def test_log_files_listing(self, make_manager) -> None:
        manager = make_manager(maxFileSize=1)
        await manager.log("info", "a")
        await manager.log("info", "b")

        names = [info.name for info in manager.get_log_files()]

        assert "logs.txt" in names
        assert any(name.endswith(".txt.gz") for name in names)


class TestWebServer:
    """start_server and close."""

    @pytest.mark.asyncio
    async def test_port_in_use_does_not_stop_the_host(self, make_manager) -> None:
        # Given a port that is already taken
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen()
            port = taken.getsockname()[1]
            manager = make_manager(serverConfig={"host": "127.0.0.1", "serverPort": port})

            # When the server is started
            await manager.start_server()
            for _ in range(100):
                if not manager.server_running:
                    break
                await asyncio.sleep(0.05)

            # Then the failure stays inside the engine, which keeps logging
            assert manager.server_running is False
            entry = await manager.log("info", "still here")
            assert entry.message == "still here"
            await manager.close()

    @pytest.mark.asyncio
    async def test_close_without_server(self, make_manager) -> None:
        manager = make_manager()

        await manager.close()

        assert manager.server_running is False
