"""
Pytest configuration and shared fixtures for logdeck tests.

The fixtures build engines that write into a per-test temporary directory
and never start the web server on their own.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from logdeck.domain.logs.models.entry import LogEntry
from logdeck.domain.logs.services.log_manager import LogManager


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSession:
    """Dashboard session that records every JSON message it is sent."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[Dict[str, Any]] = []

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.messages.append(data)

    def events(self) -> List[str]:
        return [message["event"] for message in self.messages]


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Directory that receives the active log file and its archives."""
    directory = tmp_path / "logs"
    directory.mkdir()
    return directory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_manager(log_dir: Path, clock: FakeClock) -> Callable[..., LogManager]:
    """Factory for engines rooted in ``log_dir``; keyword options override the defaults."""

    def factory(**options: Any) -> LogManager:
        merged = {"logDir": str(log_dir), "fileOnly": True}
        merged.update(options)
        return LogManager(merged, clock=clock)

    return factory


@pytest.fixture
def make_entry() -> Callable[..., LogEntry]:
    def factory(level: str = "info", message: str = "hello", timestamp: str = "2024-05-01 10:00:00") -> LogEntry:
        return LogEntry(
            level=level,
            timestamp=timestamp,
            message=message,
            formatted_message=f"[{timestamp}] [{level.upper()}]: {message}"
        )

    return factory


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    return FakeSession
