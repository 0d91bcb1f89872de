# Path: logdeck/domain/logs/services/metrics.py
import time
from datetime import datetime
from typing import Callable, Dict, List

from logdeck.domain.logs.models.entry import MetricsSnapshot, MinuteSample
from logdeck.shared.utilities.constants import MAX_MINUTE_SAMPLES, MINUTE_MS


class MetricsAggregator:
    """Counts per level, per-minute totals and the current-minute error rate.

    Minute boundaries are detected when a log call arrives; there is no
    background timer, so a minute without any log call produces no sample.
    """

    def __init__(self, error_level: str, clock: Callable[[], float] = time.time):
        self.error_level = error_level
        self._clock = clock
        self.total_logs = 0
        self.logs_by_level: Dict[str, int] = {}
        self.logs_per_minute: List[MinuteSample] = []
        self.errors_per_minute = 0
        self.last_minute_timestamp = self._now_ms()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def record(self, level: str) -> None:
        """Account for one ingested entry of ``level``."""
        self.total_logs += 1
        self.logs_by_level[level] = self.logs_by_level.get(level, 0) + 1

        now = self._now_ms()
        if now - self.last_minute_timestamp >= MINUTE_MS:
            started = datetime.fromtimestamp(self.last_minute_timestamp / 1000)
            self.logs_per_minute.append(MinuteSample(
                timestamp=started.isoformat(timespec="seconds"),
                count=self.total_logs
            ))
            if len(self.logs_per_minute) > MAX_MINUTE_SAMPLES:
                self.logs_per_minute.pop(0)
            self.errors_per_minute = 0
            self.last_minute_timestamp = now

        if level == self.error_level:
            self.errors_per_minute += 1

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(
            total_logs=self.total_logs,
            logs_by_level=dict(self.logs_by_level),
            logs_per_minute=[sample.model_copy() for sample in self.logs_per_minute],
            errors_per_minute=self.errors_per_minute,
            last_minute_timestamp=self.last_minute_timestamp
        )
