"""
Bounded in-memory state: per-zone reading history and the anomaly log.

Both structures evict their oldest entries first, so memory stays bounded
however long the feed runs.
"""

import threading
from collections import deque

from src.core.readings import Reading

from .models import Anomaly


class HistoryStore:
    """Most recent readings per zone, capped at ``capacity`` per zone"""

    def __init__(self, capacity: int = 1500):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._windows: dict[str, deque[Reading]] = {}
        self._latest: dict[str, Reading] = {}
        self._lock = threading.Lock()

    def append(self, reading: Reading) -> None:
        """Add a reading to its zone window, evicting the oldest one when full"""
        with self._lock:
            window = self._windows.get(reading.zone_id)
            if window is None:
                window = deque(maxlen=self.capacity)
                self._windows[reading.zone_id] = window
            window.append(reading)
            self._latest[reading.zone_id] = reading

    def latest(self, zone_id: str) -> Reading | None:
        return self._latest.get(zone_id)

    def window(self, zone_id: str) -> list[Reading]:
        """Readings of a zone in arrival order (a copy)"""
        with self._lock:
            return list(self._windows.get(zone_id, ()))

    def latest_readings(self) -> dict[str, Reading]:
        with self._lock:
            return dict(self._latest)

    def zones(self) -> list[str]:
        with self._lock:
            return list(self._windows)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(window) for window in self._windows.values())


class AnomalyLog:
    """Append-only log of the ``max_size`` most recent anomalies"""

    def __init__(self, max_size: int = 50):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: deque[Anomaly] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def append(self, anomaly: Anomaly) -> None:
        with self._lock:
            self._entries.append(anomaly)

    def entries(self) -> list[Anomaly]:
        """Anomalies oldest first (a copy)"""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
