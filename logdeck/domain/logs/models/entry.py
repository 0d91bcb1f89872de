# Path: logdeck/domain/logs/models/entry.py
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LogEntry(BaseModel):
    """One ingested, timestamped, leveled log record."""
    level: str = Field(..., description="Level tag; empty for unparsable file lines")
    timestamp: str = Field(..., description="Local wall-clock time, YYYY-MM-DD HH:MM:SS")
    message: str = Field(..., description="Flattened message text")
    formatted_message: str = Field(..., description="Line as written to console and file")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True
    )

    @property
    def dedup_key(self) -> str:
        return f"{self.timestamp}|{self.message}"

    def to_wire(self) -> dict:
        """Dict with the camelCase keys used over HTTP and WebSocket."""
        return self.model_dump(by_alias=True)


class LogFileInfo(BaseModel):
    """A file in the log directory (active file or archive)."""
    name: str
    path: str
    size: int
    created: str


class MinuteSample(BaseModel):
    timestamp: str
    count: int


class MetricsSnapshot(BaseModel):
    """Point-in-time copy of the metrics aggregator state."""
    total_logs: int = 0
    logs_by_level: Dict[str, int] = Field(default_factory=dict)
    logs_per_minute: List[MinuteSample] = Field(default_factory=list)
    errors_per_minute: int = 0
    last_minute_timestamp: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
