"""Tests for the bounded in-memory entry buffer."""

import pytest

from logdeck.domain.logs.services.ring_buffer import RingBuffer


class TestRingBuffer:
    """Test RingBuffer eviction and ordering."""

    @pytest.mark.parametrize("count,capacity", [(0, 3), (2, 3), (3, 3), (10, 3), (1, 1)])
    def test_holds_most_recent_entries_oldest_first(self, make_entry, count: int, capacity: int) -> None:
        buffer = RingBuffer(capacity)
        entries = [make_entry(message=f"m{i}") for i in range(count)]

        for entry in entries:
            buffer.append(entry)

        assert len(buffer) == min(count, capacity)
        assert buffer.snapshot() == entries[-capacity:]

    def test_tail_returns_last_entries(self, make_entry) -> None:
        buffer = RingBuffer(10)
        for i in range(5):
            buffer.append(make_entry(message=f"m{i}"))

        assert [entry.message for entry in buffer.tail(2)] == ["m3", "m4"]
        assert len(buffer.tail(50)) == 5
        assert buffer.tail(0) == []

    def test_resize_keeps_newest(self, make_entry) -> None:
        buffer = RingBuffer(5)
        for i in range(5):
            buffer.append(make_entry(message=f"m{i}"))

        buffer.resize(2)

        assert buffer.capacity == 2
        assert [entry.message for entry in buffer.snapshot()] == ["m3", "m4"]

    def test_snapshot_is_a_copy(self, make_entry) -> None:
        buffer = RingBuffer(2)
        buffer.append(make_entry())

        snapshot = buffer.snapshot()
        snapshot.clear()

        assert len(buffer) == 1

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            RingBuffer(0)
