# Path: logdeck/shared/logging/config.py
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from ..utilities.constants import LogLevel


class LogConfig(BaseModel):
    """Configuration for the operational logger (engine diagnostics, not user logs)."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = "logdeck"
    level: LogLevel = LogLevel.INFO.value
    enable_console: bool = True
    enable_file: bool = False  # Disabled by default
    file_path: str = str(Path("logs/logdeck-internal.log"))
    max_file_size: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
