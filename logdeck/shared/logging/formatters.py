# Path: logdeck/shared/logging/formatters.py
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict
from uuid import UUID

from colorama import Fore, Style, just_fix_windows_console

from ..utilities.constants import TIMESTAMP_FORMAT

# Enable ANSI colors on Windows consoles
just_fix_windows_console()


def _jsonable(value: Any) -> Any:
    if isinstance(value, (dict, list, str, int, float, bool, type(None))):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (UUID, Path, BaseException)):
        return str(value)
    return repr(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per diagnostic record, for the internal log file."""

    def format(self, record: logging.LogRecord) -> str:
        context: Dict[str, Any] = getattr(record, "extra_context", {}) or {}
        payload = {
            "time": datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "context": {key: _jsonable(value) for key, value in context.items()},
            "source": f"{record.module}:{record.lineno}"
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Compact single-line diagnostics, colored by severity when the stream is a terminal."""

    LEVEL_COLORS = {
        "DEBUG": Style.DIM,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        moment = datetime.fromtimestamp(record.created).strftime(TIMESTAMP_FORMAT)
        context = getattr(record, "extra_context", {}) or {}
        details = " ".join(f"{key}={value}" for key, value in context.items())
        line = f"{moment} {record.levelname:<8} {record.name}: {record.getMessage()}"
        if details:
            line = f"{line} ({details})"
        if not self.use_color:
            return line
        return f"{self.LEVEL_COLORS.get(record.levelname, '')}{line}{Style.RESET_ALL}"
