"""
Zone Energy Monitor

Streaming ingestion and anomaly scoring for per-zone energy readings.

Architecture:
- Reading source: Kafka consumer with exponential-backoff reconnection
- Detection: fixed threshold + percent-change cascade per reading
- State: bounded per-zone history windows and a bounded anomaly log

Usage:
    python -m src.monitor.run
"""

from .detector import describe_anomaly, detect
from .models import (
    Anomaly,
    AnomalyType,
    ConnectionState,
    ConnectionStatus,
    MonitorConfig,
    Severity,
)
from .monitor import EnergyMonitor
from .source import ReadingSource, backoff_delay
from .store import AnomalyLog, HistoryStore

__all__ = [
    "Anomaly",
    "AnomalyLog",
    "AnomalyType",
    "ConnectionState",
    "ConnectionStatus",
    "EnergyMonitor",
    "HistoryStore",
    "MonitorConfig",
    "ReadingSource",
    "Severity",
    "backoff_delay",
    "describe_anomaly",
    "detect",
]
