# Path: logdeck/infrastructure/storage/files/sink.py
import asyncio
import gzip
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from logdeck.domain.logs.models.entry import LogFileInfo
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService
from logdeck.shared.utilities.helpers import file_safe_timestamp, format_timestamp

logger = LoggingService(LogConfig())


@dataclass(frozen=True)
class RotationResult:
    """Outcome of one rotation: where the old active file ended up."""
    archive: Path
    compressed: bool
    timestamp: str

    def to_wire(self) -> dict:
        return {
            "archive": self.archive.name,
            "compressed": self.compressed,
            "timestamp": self.timestamp
        }


def _gzip_file(path: Path) -> Path:
    target = path.with_name(path.name + ".gz")
    try:
        with path.open("rb") as source, gzip.open(target, "wb") as destination:
            shutil.copyfileobj(source, destination)
    except BaseException:
        target.unlink(missing_ok=True)
        raise
    path.unlink()
    return target


async def compress_log_file(path: Path) -> Optional[Path]:
    """
    Gzip ``path`` to ``<path>.gz`` and delete the original.

    The original is removed only after the compressed copy is complete. On
    failure the original stays in place and None is returned.
    """
    path = Path(path)
    try:
        compressed = await asyncio.to_thread(_gzip_file, path)
    except Exception as e:
        logger.error("Log compression failed", context={"file": str(path), "error": str(e)})
        return None
    logger.info("Log file compressed", context={"file": str(compressed)})
    return compressed


def list_log_files(active: Path) -> List[LogFileInfo]:
    """Active file and its archives, newest first."""
    directory = active.parent
    if not directory.is_dir():
        return []
    files = []
    for candidate in directory.iterdir():
        name = candidate.name
        if not candidate.is_file():
            continue
        if name != active.name and not name.startswith(f"{active.stem}_"):
            continue
        stat = candidate.stat()
        files.append(LogFileInfo(
            name=name,
            path=str(candidate),
            size=stat.st_size,
            created=datetime.fromtimestamp(stat.st_ctime).isoformat(timespec="seconds")
        ))
    return sorted(files, key=lambda info: (info.created, info.name), reverse=True)


class FileSink:
    """Appends formatted lines to the active file, rotating it when oversized.

    The size check, the rename and the append for one file run under a
    single lock, so concurrent writers never rotate twice or append to a
    file that is being renamed. Compression of the archive happens after the
    lock is released.
    """

    def __init__(self, path: Path, max_file_size: int, compress: bool):
        self.path = Path(path)
        self.max_file_size = max_file_size
        self.compress = compress
        self._lock = asyncio.Lock()

    async def write(self, line: str) -> Optional[RotationResult]:
        """Append ``line``; returns the rotation performed beforehand, if any."""
        async with self._lock:
            rotation = await asyncio.to_thread(self._rotate_if_needed)
            await asyncio.to_thread(self._append, line)

        if rotation is None or not self.compress:
            return rotation
        compressed = await compress_log_file(rotation.archive)
        if compressed is None:
            return rotation
        return RotationResult(archive=compressed, compressed=True, timestamp=rotation.timestamp)

    def needs_rotation(self) -> bool:
        try:
            return self.path.stat().st_size >= self.max_file_size
        except FileNotFoundError:
            return False

    def _archive_path(self, timestamp: str) -> Path:
        base = f"{self.path.stem}_{file_safe_timestamp(timestamp)}"
        candidate = self.path.with_name(f"{base}.txt")
        counter = 1
        while candidate.exists() or candidate.with_name(candidate.name + ".gz").exists():
            candidate = self.path.with_name(f"{base}-{counter}.txt")
            counter += 1
        return candidate

    def _rotate_if_needed(self) -> Optional[RotationResult]:
        if not self.needs_rotation():
            return None
        timestamp = format_timestamp()
        archive = self._archive_path(timestamp)
        try:
            self.path.rename(archive)
        except OSError as e:
            logger.error("Log rotation failed", context={"file": str(self.path), "error": str(e)})
            return None
        logger.info("Log file rotated", context={"file": str(self.path), "archive": str(archive)})
        return RotationResult(archive=archive, compressed=False, timestamp=timestamp)

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
