# Path: logdeck/domain/logs/services/ring_buffer.py
from collections import deque
from typing import Deque, List

from logdeck.domain.logs.models.entry import LogEntry


class RingBuffer:
    """Fixed-capacity FIFO of recent entries; the oldest is evicted when full."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("Ring buffer capacity must be positive")
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def snapshot(self) -> List[LogEntry]:
        """Copy of the buffered entries, oldest first."""
        return list(self._entries)

    def tail(self, count: int) -> List[LogEntry]:
        """The ``count`` most recent entries, oldest first."""
        if count <= 0:
            return []
        return list(self._entries)[-count:]

    def resize(self, capacity: int) -> None:
        """Change capacity, keeping the newest entries."""
        if capacity <= 0:
            raise ValueError("Ring buffer capacity must be positive")
        if capacity != self._entries.maxlen:
            self._entries = deque(self._entries, maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)
