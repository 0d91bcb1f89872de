# Path: logdeck/domain/logs/services/query.py
import asyncio
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from logdeck.domain.logs.models.entry import LogEntry

# "[2024-12-21 11:10:23] [INFO]: message"
LINE_PATTERN = re.compile(r"^\[(?P<timestamp>[^\]]*)\]\s*\[(?P<level>[^\]]*)\]:?\s?(?P<message>.*)$")

CSV_HEADER = "Timestamp,Level,Message"


def parse_log_line(line: str) -> LogEntry:
    """Parse one formatted line; unknown layouts are kept verbatim with empty level/timestamp."""
    match = LINE_PATTERN.match(line)
    if match is None:
        return LogEntry(level="", timestamp="", message=line, formatted_message=line)
    return LogEntry(
        level=match.group("level").strip().lower(),
        timestamp=match.group("timestamp").strip(),
        message=match.group("message"),
        formatted_message=line
    )


def read_log_file(path: Path) -> List[LogEntry]:
    """Parse the file; unprefixed lines continue the parsed entry above them (tracebacks)."""
    if not path.is_file():
        return []
    entries: List[LogEntry] = []
    with path.open(encoding="utf-8", errors="replace") as handle:
        for raw in handle:
            line = raw.rstrip("\r\n")
            entry = parse_log_line(line)
            if entries and entries[-1].timestamp and not entry.timestamp:
                previous = entries[-1]
                entries[-1] = previous.model_copy(update={
                    "message": f"{previous.message}\n{line}",
                    "formatted_message": f"{previous.formatted_message}\n{line}"
                })
            elif line.strip():
                entries.append(entry)
    return entries


def merge_entries(file_entries: Iterable[LogEntry], buffered: Iterable[LogEntry]) -> List[LogEntry]:
    """File history plus buffered entries not already in it, newest first."""
    combined = list(file_entries)
    seen = {entry.dedup_key for entry in combined}
    for entry in buffered:
        if entry.dedup_key not in seen:
            combined.append(entry)
            seen.add(entry.dedup_key)
    return sorted(combined, key=lambda entry: entry.timestamp, reverse=True)


def _parse_datetime(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def filter_entries(
        entries: Iterable[LogEntry],
        level: Optional[str] = None,
        search: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
) -> List[LogEntry]:
    """
    Apply level/search/date filters.

    Level matches exactly, ignoring case. Search is a case-insensitive
    substring of the message or the formatted line. A date bound or entry
    timestamp that cannot be parsed skips that date filter for the entry
    instead of excluding it.
    """
    wanted_level = level.lower() if level else None
    needle = search.lower() if search else None
    start = _parse_datetime(start_date) if start_date else None
    end = _parse_datetime(end_date) if end_date else None

    result = []
    for entry in entries:
        if wanted_level and entry.level.lower() != wanted_level:
            continue
        if needle and needle not in entry.message.lower() and needle not in entry.formatted_message.lower():
            continue
        if start is not None or end is not None:
            moment = _parse_datetime(entry.timestamp)
            if moment is not None:
                if start is not None and moment < start:
                    continue
                if end is not None and moment > end:
                    continue
        result.append(entry)
    return result


def _csv_field(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def export_logs_as_csv(entries: Iterable[LogEntry]) -> str:
    """One header row plus one quoted row per entry; newlines in messages become spaces."""
    rows = [CSV_HEADER]
    for entry in entries:
        message = entry.message.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
        rows.append(",".join((_csv_field(entry.timestamp), _csv_field(entry.level), _csv_field(message))))
    return "\n".join(rows)


class LogQueryService:
    """Combined view over the active log file and the in-memory buffer."""

    def __init__(self, path_provider: Callable[[], Optional[Path]], buffer_provider: Callable[[], List[LogEntry]]):
        self._path_provider = path_provider
        self._buffer_provider = buffer_provider

    async def combined_logs(self) -> List[LogEntry]:
        path = self._path_provider()
        file_entries = await asyncio.to_thread(read_log_file, path) if path is not None else []
        return merge_entries(file_entries, self._buffer_provider())

    async def filter_logs(
            self,
            level: Optional[str] = None,
            search: Optional[str] = None,
            start_date: Optional[str] = None,
            end_date: Optional[str] = None
    ) -> List[LogEntry]:
        return filter_entries(await self.combined_logs(), level, search, start_date, end_date)
