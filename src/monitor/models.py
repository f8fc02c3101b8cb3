"""
Data models and configuration for the zone energy monitor.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from src.core.readings import Reading, format_timestamp


class AnomalyType(Enum):
    """Kinds of anomalous readings"""

    SPIKE = "spike"
    DROP = "drop"
    FLATLINE = "flatline"


class Severity(Enum):
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Anomaly:
    """An anomalous reading, created once when the reading is ingested"""

    id: str
    type: AnomalyType
    zone_id: str
    zone_name: str
    timestamp: datetime
    value: float
    threshold: float
    severity: Severity

    @classmethod
    def from_reading(
        cls, reading: Reading, anomaly_type: AnomalyType, threshold: float, severity: Severity
    ) -> "Anomaly":
        return cls(
            id=f"{reading.zone_id}-{format_timestamp(reading.timestamp)}",
            type=anomaly_type,
            zone_id=reading.zone_id,
            zone_name=reading.zone_name,
            timestamp=reading.timestamp,
            value=reading.energy_kw,
            threshold=threshold,
            severity=severity,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "type": self.type.value,
            "zoneId": self.zone_id,
            "zoneName": self.zone_name,
            "timestamp": format_timestamp(self.timestamp),
            "value": self.value,
            "threshold": self.threshold,
            "severity": self.severity.value,
        }


class ConnectionStatus(Enum):
    """Lifecycle of the feed connection"""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionState:
    """Snapshot of the feed connection, handed out to observers"""

    status: ConnectionStatus = ConnectionStatus.CONNECTING
    reconnect_attempts: int = 0

    def to_dict(self) -> dict:
        return {"status": self.status.value, "reconnect_attempts": self.reconnect_attempts}


@dataclass
class MonitorConfig:
    """Configuration for the real-time monitor"""

    # Kafka settings
    kafka_bootstrap_servers: str = "localhost:9092"
    kafka_topic: str = "zone-energy-readings"
    kafka_group_id: str = "zone-energy-monitor"
    kafka_auto_offset_reset: str = "latest"
    poll_timeout_ms: int = 1000
    max_poll_records: int = 500

    # Reconnect policy
    reconnect_base_delay_seconds: float = 1.0
    reconnect_max_delay_seconds: float = 30.0
    max_reconnect_attempts: int | None = 5  # None retries forever
    liveness_timeout_seconds: float = 10.0  # empty polls with no broker connection

    # Bounded state
    history_capacity: int = 1500  # supports a 1000-point chart with headroom
    max_anomalies: int = 50

    # Reference data
    zones_file: str | None = None  # built-in plant layout when unset
    historical_data_file: str | None = None

    stats_interval_seconds: float = 30.0

    def __post_init__(self):
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be at least 1")
        if self.max_anomalies < 1:
            raise ValueError("max_anomalies must be at least 1")

    def to_dict(self) -> dict:
        return asdict(self)
