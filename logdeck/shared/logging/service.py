# Path: logdeck/shared/logging/service.py
import logging
from typing import Any, Dict, Optional

from .config import LogConfig
from .handlers import LogHandlerFactory
from ..utilities.constants import LogLevel


class LoggingService:
    """Central service for the engine's operational (side-channel) logging."""

    def __init__(self, config: LogConfig):
        """Initialize logging service with configuration."""
        self.logger = logging.getLogger(config.name)
        self.logger.setLevel(getattr(logging, config.level))

        # Clear existing handlers
        self.logger.handlers.clear()

        # Add new handlers
        for handler in LogHandlerFactory.get_handlers(config):
            self.logger.addHandler(handler)

    def log(self, level: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log message with specified level and context."""
        extra = {"extra_context": context or {}}
        self.logger.log(getattr(logging, level), message, extra=extra)

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG.value, message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log info message."""
        self.log(LogLevel.INFO.value, message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message."""
        self.log(LogLevel.WARNING.value, message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR.value, message, context)
