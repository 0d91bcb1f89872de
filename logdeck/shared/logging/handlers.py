# Path: logdeck/shared/logging/handlers.py
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List

from .config import LogConfig
from .filters import SensitiveDataFilter
from .formatters import ConsoleFormatter, JsonFormatter


class LogHandlerFactory:
    """Builds the handlers of the operational logger.

    Diagnostics go to stderr; stdout belongs to the engine's console sink.
    """

    @staticmethod
    def _finish(handler: logging.Handler, config: LogConfig, formatter: logging.Formatter) -> logging.Handler:
        handler.setLevel(config.level)
        handler.setFormatter(formatter)
        handler.addFilter(SensitiveDataFilter())
        return handler

    @classmethod
    def create_console_handler(cls, config: LogConfig) -> logging.Handler:
        stream = sys.stderr
        use_color = hasattr(stream, "isatty") and stream.isatty()
        return cls._finish(logging.StreamHandler(stream), config, ConsoleFormatter(use_color=use_color))

    @classmethod
    def create_file_handler(cls, config: LogConfig) -> logging.Handler:
        """Size-rotated JSON lines next to the user's logs."""
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8"
        )
        return cls._finish(handler, config, JsonFormatter())

    @classmethod
    def get_handlers(cls, config: LogConfig) -> List[logging.Handler]:
        """
        Get all enabled handlers.

        Args:
            config: Operational logging configuration.

        Returns:
            The console and/or file handler, as enabled.
        """
        handlers = []
        if config.enable_console:
            handlers.append(cls.create_console_handler(config))
        if config.enable_file:
            handlers.append(cls.create_file_handler(config))
        return handlers
