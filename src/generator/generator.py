"""
Zone energy feed generator: real-time publishing and historical backfill.
"""

import json
import random
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import structlog
from kafka import KafkaProducer

from src.core.zones import ZoneConfig, load_zones

from .models import ANOMALY_WEIGHTS, GeneratorConfig, InjectedAnomaly
from .zone_state import ZoneState

logger = structlog.get_logger(__name__)


def pick_anomaly(config: GeneratorConfig, rng: random.Random) -> InjectedAnomaly | None:
    """Roll for an anomaly among the enabled ones"""
    if not config.enabled_anomalies or rng.random() >= config.anomaly_probability:
        return None
    weights = [ANOMALY_WEIGHTS[a] for a in config.enabled_anomalies]
    return rng.choices(config.enabled_anomalies, weights=weights)[0]


def build_zone_states(
    config: GeneratorConfig, rng: random.Random, zones: list[ZoneConfig] | None = None
) -> list[ZoneState]:
    if zones is None:
        zones = load_zones(config.zones_file)
    return [ZoneState(zone, rng, config.flatline_duration_seconds) for zone in zones]


def build_history(
    config: GeneratorConfig,
    zones: list[ZoneConfig] | None = None,
    end: datetime | None = None,
) -> list[dict[str, Any]]:
    """Generate a historical corpus covering ``backfill_days`` up to ``end``

    Every zone gets one reading per ``backfill_interval_seconds``. The output is
    reproducible for a given seed and end time.
    """
    rng = random.Random(config.seed)
    states = build_zone_states(config, rng, zones)

    end = end or datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    start = end - timedelta(days=config.backfill_days)
    step = timedelta(seconds=config.backfill_interval_seconds)

    history = []
    timestamp = start
    while timestamp < end:
        for state in states:
            anomaly = pick_anomaly(config, rng)
            history.append(state.generate_reading(inject_anomaly=anomaly, timestamp=timestamp))
        timestamp += step
    return history


def write_history(config: GeneratorConfig, zones: list[ZoneConfig] | None = None) -> Path:
    """Generate the historical corpus and write it as a JSON array"""
    logger.info(
        "Generating historical corpus",
        days=config.backfill_days,
        interval_seconds=config.backfill_interval_seconds,
        seed=config.seed,
    )
    history = build_history(config, zones)

    output = Path(config.backfill_output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(history), encoding="utf-8")

    logger.info("Historical corpus written", path=str(output), readings=len(history))
    return output


class ZoneEnergyGenerator:
    """Publishes readings to Kafka, one zone per tick in rotation"""

    def __init__(self, config: GeneratorConfig, zones: list[ZoneConfig] | None = None):
        self.config = config
        logger.info("Initializing zone energy generator", config=config)

        try:
            self.producer = KafkaProducer(
                bootstrap_servers=config.kafka_bootstrap_servers,
                value_serializer=lambda v: json.dumps(v).encode("utf-8"),
                key_serializer=lambda k: k.encode("utf-8"),
                compression_type="gzip",
            )
            logger.info(
                "Kafka producer initialized",
                bootstrap_servers=config.kafka_bootstrap_servers,
                topic=config.kafka_topic,
            )
        except Exception as e:
            logger.error("Failed to initialize Kafka producer", error=str(e))
            raise

        self.rng = random.Random(config.seed)
        self.zones = build_zone_states(config, self.rng, zones)
        self.current_index = 0

        logger.info("Zones initialized", zones=[s.zone.id for s in self.zones])
        logger.info(
            "Anomaly configuration",
            probability=config.anomaly_probability,
            enabled_anomalies=[a.value for a in config.enabled_anomalies],
        )

    def next_reading(self, timestamp: datetime | None = None) -> dict[str, Any]:
        """Generate the reading of the next zone in rotation"""
        state = self.zones[self.current_index]
        self.current_index = (self.current_index + 1) % len(self.zones)

        anomaly = pick_anomaly(self.config, self.rng)
        reading = state.generate_reading(inject_anomaly=anomaly, timestamp=timestamp)

        if anomaly:
            logger.warning(
                "Anomaly injected",
                anomaly_type=anomaly.value,
                zone_id=state.zone.id,
                energy_kw=reading["energyKw"],
            )
        return reading

    def generate_event(self):
        """Generate and send one reading"""
        reading = self.next_reading()
        self.producer.send(self.config.kafka_topic, key=reading["zoneId"], value=reading)
        self.producer.flush()

    def run(self, duration_seconds: int | None = None):
        """Run the generator continuously or for a specified duration

        Args:
            duration_seconds: Optional duration in seconds. If None, runs indefinitely.
        """
        logger.info(
            "Starting generator",
            topic=self.config.kafka_topic,
            duration=duration_seconds if duration_seconds else "indefinite",
        )

        start_time = time.time()
        event_count = 0
        last_log_time = start_time

        try:
            while True:
                self.generate_event()
                event_count += 1

                elapsed = time.time() - start_time

                if time.time() - last_log_time >= 10:
                    rate = event_count / elapsed if elapsed > 0 else 0
                    logger.info(
                        "Generator stats",
                        total_events=event_count,
                        rate_per_sec=round(rate, 1),
                        elapsed_sec=round(elapsed, 1),
                    )
                    last_log_time = time.time()

                if duration_seconds and elapsed >= duration_seconds:
                    logger.info("Duration limit reached", duration_seconds=duration_seconds)
                    break

                time.sleep(self.config.event_interval_seconds)

        except KeyboardInterrupt:
            logger.info("Received interrupt signal, stopping generator")

        except Exception as e:
            logger.error("Generator error", error=str(e), exc_info=True)
            raise

        finally:
            elapsed = time.time() - start_time
            rate = event_count / elapsed if elapsed > 0 else 0

            self.producer.close()
            logger.info(
                "Generator stopped",
                total_events=event_count,
                elapsed_sec=round(elapsed, 1),
                avg_rate_per_sec=round(rate, 1),
            )
