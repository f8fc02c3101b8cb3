"""
Pytest configuration and shared fixtures.
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.core.readings import Reading
from src.core.zones import ZoneRange
from src.generator.models import GeneratorConfig
from src.monitor.models import MonitorConfig

T0 = datetime(2026, 1, 14, 14, 0, 0, tzinfo=UTC)


def make_reading(energy_kw, zone_id="assembly-1", seconds=0, zone_name=None, **overrides):
    """Build a reading for ``zone_id`` at T0 + ``seconds``."""
    fields = {
        "timestamp": T0 + timedelta(seconds=seconds),
        "zone_id": zone_id,
        "zone_name": zone_name or zone_id.replace("-", " ").title(),
        "energy_kw": float(energy_kw),
        "temperature": 22.0,
        "equipment_count": 12,
    }
    fields.update(overrides)
    return Reading(**fields)


def make_message(**overrides):
    """Valid feed message with optional field overrides."""
    message = {
        "timestamp": "2026-01-14T14:00:00.000Z",
        "zoneId": "assembly-1",
        "zoneName": "Assembly Line 1",
        "energyKw": 250.5,
        "temperature": 22.3,
        "equipmentCount": 12,
    }
    message.update(overrides)
    return message


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    created = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


# Monitor fixtures
@pytest.fixture
def ranges():
    """Expected ranges of two test zones."""
    return {
        "assembly-1": ZoneRange(min=220, max=280),
        "warehouse": ZoneRange(min=20, max=40),
    }


@pytest.fixture
def monitor_config():
    """Monitor configuration with fast, bounded reconnects."""
    return MonitorConfig(
        kafka_bootstrap_servers="localhost:9092",
        kafka_topic="test-readings",
        kafka_group_id="test-group",
        poll_timeout_ms=10,
        reconnect_base_delay_seconds=1.0,
        reconnect_max_delay_seconds=8.0,
        max_reconnect_attempts=5,
        history_capacity=5,
        max_anomalies=3,
    )


@pytest.fixture
def fake_timer():
    FakeTimer.created = []
    yield FakeTimer
    FakeTimer.created = []


# Generator fixtures
@pytest.fixture
def generator_config():
    """Reproducible generator configuration for testing."""
    return GeneratorConfig(
        kafka_bootstrap_servers="localhost:9092",
        kafka_topic="test-readings",
        event_interval_seconds=0.01,
        anomaly_probability=0.0,
        seed=42,
        backfill_days=1,
        backfill_interval_seconds=3600,
    )


@pytest.fixture
def reading_factory():
    return make_reading


@pytest.fixture
def message_factory():
    return make_message
