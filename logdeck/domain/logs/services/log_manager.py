# Path: logdeck/domain/logs/services/log_manager.py
"""The log-management engine.

``LogManager`` is the explicit context object that owns the configuration,
ring buffer, metrics, event bus, sinks and realtime broadcaster of one
logger. ``log()`` is the ingestion pipeline: it updates metrics, the buffer,
subscribers, dashboards, alerts, persistence, the console and the file, in
that order, and returns the finished entry.
"""
import asyncio
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Union

import uvicorn
from colorama import Fore, Style

from logdeck.domain.logs.models.entry import LogEntry, LogFileInfo, MetricsSnapshot
from logdeck.domain.logs.services.event_bus import EventBus, Handler, Subscription
from logdeck.domain.logs.services.formatting import default_format, render_message
from logdeck.domain.logs.services.metrics import MetricsAggregator
from logdeck.domain.logs.services.query import LogQueryService, export_logs_as_csv
from logdeck.domain.logs.services.ring_buffer import RingBuffer
from logdeck.domain.notification.services.alert_dispatcher import AlertDispatcher
from logdeck.infrastructure.mail.smtp_client import SmtpMailer
from logdeck.infrastructure.realtime.broadcaster import RealtimeBroadcaster
from logdeck.infrastructure.storage.files.sink import FileSink, RotationResult, compress_log_file, list_log_files
from logdeck.infrastructure.storage.nosql.client import MongoDBConnection
from logdeck.infrastructure.storage.nosql.persistence import PersistenceSink
from logdeck.shared.config.settings import LogManagerConfig, resolve_config
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.constants import BusEvent, INITIAL_LOGS_COUNT, RealtimeEvent
from logdeck.shared.utilities.helpers import format_timestamp
from logdeck.shared.utilities.types import Options

logger = LoggingService(LogConfig())

CONSOLE_COLORS = {
    "error": Fore.RED,
    "warn": Fore.YELLOW,
    "warning": Fore.YELLOW,
    "debug": Fore.CYAN,
}


class LevelMethod:
    """Thin forwarding handle: ``await handle(*values)`` logs at a fixed level."""

    def __init__(self, manager: "LogManager", level: str):
        self.level = level
        self._manager = manager

    async def __call__(self, *values: Any) -> LogEntry:
        return await self._manager.log(self.level, *values)

    def __repr__(self) -> str:
        return f"LevelMethod({self.level!r})"


class LogManager:
    """Log-management engine for one logger instance."""

    def __init__(
            self,
            options: Union[Options, LogManagerConfig, None] = None,
            clock: Callable[[], float] = time.time,
            mailer: Optional[SmtpMailer] = None,
            connection_factory: Callable[..., MongoDBConnection] = MongoDBConnection
    ):
        """
        Build the engine from user options.

        Raises:
            ConfigurationError: If the options are invalid (e.g. both
                consoleOnly and fileOnly are set).
        """
        self.config = resolve_config(options)
        self._clock = clock
        self._mailer = mailer or SmtpMailer()
        self._connection_factory = connection_factory

        self.events = EventBus()
        self.broadcaster = RealtimeBroadcaster()
        self.buffer = RingBuffer(self.config.buffer_size)
        self.metrics = MetricsAggregator(self.config.error_level, clock=clock)
        self.file_sink = self._build_file_sink()
        self.alerts = AlertDispatcher(self.config.email_alerts, self._mailer)
        self.persistence = PersistenceSink(self.config.db_config, connection_factory)
        self.query = LogQueryService(self._query_path, self.buffer.snapshot)

        self.methods: Dict[str, LevelMethod] = {}
        self.regenerate_log_methods()

        self._pending: Set[asyncio.Task] = set()
        self._server = None
        self._server_task: Optional[asyncio.Task] = None

        if self.config.server_config.start_web_server:
            self._start_server_on_running_loop()

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _resolve_level(self, level: Any, values: tuple) -> tuple:
        """Unknown levels degrade into the first message token."""
        if isinstance(level, str) and level in self.config.levels:
            return level, values
        return self.config.default_level, (level, *values)

    def _build_entry(self, level: str, values: tuple) -> LogEntry:
        timestamp = format_timestamp()
        message = render_message(values)
        formatter = self.config.log_format or default_format
        try:
            formatted = formatter(level, timestamp, message)
        except Exception as e:
            logger.error("Custom log format failed, using default", context={"error": str(e)})
            formatted = default_format(level, timestamp, message)
        return LogEntry(level=level, timestamp=timestamp, message=message, formatted_message=str(formatted))

    async def log(self, level: str, *values: Any) -> LogEntry:
        """
        Ingest one entry.

        Args:
            level: Level tag; if it is not configured it becomes the first
                message token and the default level is used instead.
            *values: Message parts (strings, exceptions, objects).

        Returns:
            The completed, immutable LogEntry.
        """
        level, values = self._resolve_level(level, values)
        entry = self._build_entry(level, values)

        if self.config.enable_metrics:
            self.metrics.record(entry.level)
        self.buffer.append(entry)

        try:
            self.events.emit(BusEvent.LOG.value, entry)
        except Exception as e:
            logger.error("Log event emission failed", context={"error": str(e)})

        await self._fan_out(entry)
        await self._dispatch_alerts(entry)
        self._persist(entry)

        if not self.config.file_only:
            self._write_console(entry)
        if not self.config.console_only:
            await self._write_file(entry)
        return entry

    async def _fan_out(self, entry: LogEntry) -> None:
        if self.broadcaster.connected_clients == 0:
            return
        try:
            await self.broadcaster.broadcast(RealtimeEvent.NEW_LOG.value, entry.to_wire())
            if self.config.enable_metrics:
                await self.broadcaster.broadcast(
                    RealtimeEvent.METRICS_UPDATE.value, self.metrics.snapshot().to_wire()
                )
        except Exception as e:
            logger.error("Realtime broadcast failed", context={"error": str(e)})

    async def _dispatch_alerts(self, entry: LogEntry) -> None:
        if not self.alerts.rules:
            return
        try:
            await self.alerts.dispatch(entry)
        except Exception as e:
            logger.error("Alert dispatch failed", context={"error": str(e)})

    def _persist(self, entry: LogEntry) -> None:
        if not self.persistence.enabled:
            return
        self._spawn(self.persistence.write(entry))

    def _write_console(self, entry: LogEntry) -> None:
        line = entry.formatted_message
        color = CONSOLE_COLORS.get(entry.level.lower())
        if color and sys.stdout.isatty():
            line = f"{color}{line}{Style.RESET_ALL}"
        print(line, file=sys.stdout)

    async def _write_file(self, entry: LogEntry) -> None:
        try:
            rotation = await self.file_sink.write(entry.formatted_message)
        except Exception as e:
            logger.error("Failed to write log file", context={"file": str(self.file_sink.path), "error": str(e)})
            return
        if rotation is not None:
            await self._announce_rotation(rotation)

    async def _announce_rotation(self, rotation: RotationResult) -> None:
        payload = rotation.to_wire()
        try:
            self.events.emit(BusEvent.LOG_ROTATION.value, payload)
            await self.broadcaster.broadcast(RealtimeEvent.LOG_ROTATION.value, payload)
        except Exception as e:
            logger.error("Rotation announcement failed", context={"error": str(e)})

    def _spawn(self, coroutine) -> asyncio.Task:
        task = asyncio.ensure_future(coroutine)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending_tasks(self) -> Set[asyncio.Task]:
        """Detached background work (persistence writes) still in flight."""
        return set(self._pending)

    # ------------------------------------------------------------------
    # Per-level handles
    # ------------------------------------------------------------------

    def regenerate_log_methods(self) -> List[str]:
        """Rebuild the level -> handle mapping from the configured levels."""
        self.methods = {level: LevelMethod(self, level) for level in self.config.levels}
        return list(self.methods)

    def method(self, level: str) -> LevelMethod:
        """Handle for ``level``; raises KeyError for unconfigured levels."""
        return self.methods[level]

    def get_available_levels(self) -> List[str]:
        return list(self.config.levels)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_config(self) -> LogManagerConfig:
        return self.config

    def _build_file_sink(self) -> FileSink:
        return FileSink(self.config.log_path, self.config.max_file_size, self.config.compress_old_logs)

    def _query_path(self) -> Optional[Path]:
        if self.config.console_only:
            return None
        return self.file_sink.path

    def update_config(self, options: Union[Options, LogManagerConfig]) -> LogManagerConfig:
        """
        Merge ``options`` into the current configuration.

        Components that depend on changed settings are rebuilt; when the
        level set changes the per-level handles are regenerated. A
        ``configChanged`` event carries the new configuration.

        Raises:
            ConfigurationError: If the merged configuration is invalid; the
                previous configuration stays in effect.
        """
        previous = self.config
        config = resolve_config(options, base=previous)
        self.config = config

        if config.buffer_size != previous.buffer_size:
            self.buffer.resize(config.buffer_size)
        self.metrics.error_level = config.error_level
        if (config.log_path, config.max_file_size, config.compress_old_logs) != (
                previous.log_path, previous.max_file_size, previous.compress_old_logs):
            self.file_sink = self._build_file_sink()
        if config.email_alerts != previous.email_alerts:
            self.alerts = AlertDispatcher(config.email_alerts, self._mailer)
        if config.db_config != previous.db_config:
            old_persistence = self.persistence
            self.persistence = PersistenceSink(config.db_config, self._connection_factory)
            if old_persistence.enabled:
                self._close_later(old_persistence)
        if config.levels != previous.levels:
            self.regenerate_log_methods()

        logger.info("Configuration updated", context={"levels": config.levels})
        self.events.emit(BusEvent.CONFIG_CHANGED.value, config)
        return config

    def _close_later(self, persistence: PersistenceSink) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._spawn(persistence.close())

    def create_custom_logger(self, options: Union[Options, LogManagerConfig, None] = None) -> "LogManager":
        """
        Independent engine whose config is this one's merged with ``options``.

        The child does not start its own web server unless ``options`` asks for one.
        """
        base = resolve_config({"serverConfig": {"startWebServer": False}}, base=self.config)
        return LogManager(
            resolve_config(options or {}, base=base),
            clock=self._clock,
            mailer=self._mailer,
            connection_factory=self._connection_factory
        )

    # ------------------------------------------------------------------
    # Metrics, events, realtime
    # ------------------------------------------------------------------

    def get_metrics(self) -> Optional[MetricsSnapshot]:
        """Current metrics, or None when metrics are disabled."""
        if not self.config.enable_metrics:
            return None
        return self.metrics.snapshot()

    def get_buffered_logs(self) -> List[LogEntry]:
        return self.buffer.snapshot()

    def on(self, event: str, callback: Handler) -> Subscription:
        return self.events.subscribe(event, callback)

    def off(self, event: str, callback: Handler) -> None:
        self.events.unsubscribe(event, callback)

    def get_connected_clients(self) -> int:
        return self.broadcaster.connected_clients

    async def broadcast_to_clients(self, event: str, data: Any) -> int:
        return await self.broadcaster.broadcast(event, data)

    async def connect_client(self, session) -> None:
        """Register a dashboard session and send it the most recent entries."""
        await self.broadcaster.connect(session, self.buffer.tail(INITIAL_LOGS_COUNT))

    def disconnect_client(self, session) -> None:
        self.broadcaster.disconnect(session)

    # ------------------------------------------------------------------
    # Queries and files
    # ------------------------------------------------------------------

    async def filter_logs(
            self,
            level: Optional[str] = None,
            search: Optional[str] = None,
            start_date: Optional[str] = None,
            end_date: Optional[str] = None
    ) -> List[LogEntry]:
        """File history merged with buffered entries, filtered, newest first."""
        return await self.query.filter_logs(level, search, start_date, end_date)

    @staticmethod
    def export_logs_as_csv(entries: List[LogEntry]) -> str:
        return export_logs_as_csv(entries)

    async def compress_log_file(self, path: Union[str, Path]) -> Optional[Path]:
        return await compress_log_file(Path(path))

    def get_log_files(self) -> List[LogFileInfo]:
        return list_log_files(self.config.log_path)

    # ------------------------------------------------------------------
    # Web server
    # ------------------------------------------------------------------

    def _start_server_on_running_loop(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; call 'await start_server()' to start the log viewer", context={})
            return
        self._launch_server()

    def _launch_server(self) -> None:
        if self._server_task is not None:
            return
        from logdeck.infrastructure.setup.app_factory import create_app

        server_config = self.config.server_config
        if server_config.auth_enabled and not server_config.auth.user:
            logger.warning("Dashboard auth is enabled but no credentials are configured", context={})
        self._server = uvicorn.Server(uvicorn.Config(
            create_app(self),
            host=server_config.host,
            port=server_config.server_port,
            log_level="warning"
        ))
        self._server_task = asyncio.create_task(self._serve(self._server))
        logger.info("Log viewer running", context={
            "url": f"http://{server_config.host}:{server_config.server_port}"
        })

    async def _serve(self, server: uvicorn.Server) -> None:
        # uvicorn exits the process (SystemExit) when it cannot bind
        try:
            await server.serve()
        except (SystemExit, OSError) as e:
            server_config = self.config.server_config
            logger.error("Log viewer failed to start", context={
                "host": server_config.host,
                "port": server_config.server_port,
                "error": repr(e)
            })
            if self._server is server:
                self._server = None
                self._server_task = None

    @property
    def server_running(self) -> bool:
        return self._server_task is not None and not self._server_task.done()

    async def start_server(self) -> None:
        """Serve the access-gated dashboard in a background task; no-op if already serving."""
        self._launch_server()

    async def close(self) -> None:
        """Stop the web server and release the database connection."""
        server, task = self._server, self._server_task
        self._server = None
        self._server_task = None
        if server is not None:
            server.should_exit = True
        if task is not None:
            await task
        await self.persistence.close()
