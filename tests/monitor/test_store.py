"""
Tests for the bounded history store and anomaly log.
"""

import pytest

from src.core.zones import ZoneRange
from src.monitor.detector import detect
from src.monitor.store import AnomalyLog, HistoryStore


class TestHistoryStore:
    """Tests for HistoryStore class."""

    def test_empty_store(self):
        store = HistoryStore(capacity=3)

        assert store.latest("assembly-1") is None
        assert store.window("assembly-1") == []
        assert len(store) == 0

    def test_append_and_latest(self, reading_factory):
        store = HistoryStore(capacity=3)
        first = reading_factory(250.0)
        second = reading_factory(255.0, seconds=5)

        store.append(first)
        store.append(second)

        assert store.latest("assembly-1") is second
        assert store.window("assembly-1") == [first, second]

    def test_fifo_eviction_after_capacity_plus_one(self, reading_factory):
        """After C+1 appends the window starts at the second reading."""
        capacity = 4
        store = HistoryStore(capacity=capacity)
        readings = [reading_factory(200.0 + i, seconds=i) for i in range(capacity + 1)]

        for reading in readings:
            store.append(reading)

        window = store.window("assembly-1")
        assert len(window) == capacity
        assert window[0] is readings[1]
        assert window[-1] is readings[-1]
        assert store.latest("assembly-1") is readings[-1]

    def test_window_never_exceeds_capacity(self, reading_factory):
        store = HistoryStore(capacity=10)
        for i in range(250):
            store.append(reading_factory(250.0, seconds=i))
            assert len(store.window("assembly-1")) <= 10

    def test_zones_are_independent(self, reading_factory):
        store = HistoryStore(capacity=2)
        for i in range(5):
            store.append(reading_factory(250.0, seconds=i))
        warehouse = reading_factory(30.0, zone_id="warehouse")
        store.append(warehouse)

        assert store.window("warehouse") == [warehouse]
        assert len(store.window("assembly-1")) == 2
        assert sorted(store.zones()) == ["assembly-1", "warehouse"]
        assert len(store) == 3

    def test_window_is_a_snapshot(self, reading_factory):
        store = HistoryStore(capacity=5)
        store.append(reading_factory(250.0))

        window = store.window("assembly-1")
        store.append(reading_factory(260.0, seconds=5))

        assert len(window) == 1

    def test_latest_readings(self, reading_factory):
        store = HistoryStore()
        store.append(reading_factory(250.0))
        last = reading_factory(30.0, zone_id="warehouse")
        store.append(last)

        latest = store.latest_readings()

        assert set(latest) == {"assembly-1", "warehouse"}
        assert latest["warehouse"] is last

    def test_default_capacity(self):
        assert HistoryStore().capacity == 1500

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            HistoryStore(capacity=0)


class TestAnomalyLog:
    """Tests for AnomalyLog class."""

    def test_keeps_most_recent_entries(self, reading_factory):
        log = AnomalyLog(max_size=2)
        zone_range = ZoneRange(min=220, max=280)
        anomalies = [
            detect(reading_factory(700.0 + i, seconds=i), None, zone_range) for i in range(3)
        ]

        for anomaly in anomalies:
            log.append(anomaly)

        assert log.entries() == anomalies[1:]
        assert len(log) == 2

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            AnomalyLog(max_size=0)
