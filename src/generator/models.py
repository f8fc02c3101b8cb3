"""
Data models and enums for the zone energy feed generator.
"""

from dataclasses import dataclass
from enum import Enum


class InjectedAnomaly(Enum):
    """Anomalies the generator can inject into the feed"""

    SPIKE = "spike"
    DROP = "drop"
    FLATLINE = "flatline"


# Relative likelihood of each anomaly once one is injected
ANOMALY_WEIGHTS = {
    InjectedAnomaly.SPIKE: 0.4,
    InjectedAnomaly.DROP: 0.4,
    InjectedAnomaly.FLATLINE: 0.2,
}


@dataclass
class GeneratorConfig:
    """Configuration for the feed generator"""

    # Kafka settings
    kafka_bootstrap_servers: str = "localhost:9092"
    kafka_topic: str = "zone-energy-readings"

    # Generation settings
    event_interval_seconds: float = 0.1  # one zone per tick, rotating
    seed: int | None = None
    zones_file: str | None = None

    # Anomaly settings
    anomaly_probability: float = 0.05
    enabled_anomalies: list[InjectedAnomaly] | None = None
    flatline_duration_seconds: float = 30.0

    # Backfill (historical corpus) settings
    backfill_mode: bool = False
    backfill_days: int = 7
    backfill_interval_seconds: int = 60
    backfill_output: str = "data/historical-data.json"

    def __post_init__(self):
        if self.enabled_anomalies is None:
            self.enabled_anomalies = list(InjectedAnomaly)
