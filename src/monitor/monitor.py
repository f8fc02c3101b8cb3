"""
Real-time zone energy monitor.

Consumes readings from the feed, flags anomalies and keeps the bounded state
that the dashboard reads: latest reading and history window per zone, the
anomaly log, the connection status and the historical comparison.
"""

import threading
import time

import structlog

from src.baseline import (
    Baseline,
    BaselineState,
    Comparison,
    ZoneComparison,
    compare_to_baseline,
    load_baselines,
)
from src.core.readings import Reading
from src.core.zones import ZoneRange, load_zones, zone_ranges

from .detector import describe_anomaly, detect
from .models import Anomaly, ConnectionState, MonitorConfig, Severity
from .source import ReadingSource
from .store import AnomalyLog, HistoryStore

logger = structlog.get_logger(__name__)


class EnergyMonitor:
    """Streaming ingestion and anomaly scoring for all plant zones"""

    def __init__(
        self,
        config: MonitorConfig,
        ranges: dict[str, ZoneRange] | None = None,
        baseline_state: BaselineState | None = None,
        source: ReadingSource | None = None,
    ):
        self.config = config

        if ranges is None:
            ranges = zone_ranges(load_zones(config.zones_file))
        self.ranges = dict(ranges)

        if baseline_state is None:
            baseline_state = load_baselines(config.historical_data_file)
        self.baseline_state = baseline_state

        self.store = HistoryStore(config.history_capacity)
        self.anomaly_log = AnomalyLog(config.max_anomalies)
        self._lock = threading.Lock()

        self.source = source or ReadingSource(
            config, on_reading=self.handle_reading, on_state_change=self._on_state_change
        )

        self.stats = {
            "total_received": 0,
            "anomalies_detected": 0,
            "unknown_zones": 0,
        }

        logger.info(
            "Monitor initialized",
            zones=sorted(self.ranges),
            history_capacity=config.history_capacity,
            max_anomalies=config.max_anomalies,
            baselines_available=self.baseline_state.available,
        )

    def handle_reading(self, reading: Reading) -> Anomaly | None:
        """Score a reading against the previous one of its zone, then store both"""
        with self._lock:
            self.stats["total_received"] += 1

            zone_range = self.ranges.get(reading.zone_id)
            if zone_range is None:
                self.stats["unknown_zones"] += 1
                logger.debug("No reference range for zone", zone_id=reading.zone_id)

            previous = self.store.latest(reading.zone_id)
            anomaly = detect(reading, previous, zone_range)
            if anomaly is not None:
                self.anomaly_log.append(anomaly)
                self.stats["anomalies_detected"] += 1

            self.store.append(reading)

        if anomaly is not None:
            log = logger.warning if anomaly.severity == Severity.CRITICAL else logger.info
            log(
                "Anomaly detected",
                zone_id=anomaly.zone_id,
                type=anomaly.type.value,
                severity=anomaly.severity.value,
                description=describe_anomaly(anomaly),
            )
        return anomaly

    # Read-only views for the display layer

    def latest(self, zone_id: str) -> Reading | None:
        return self.store.latest(zone_id)

    def window(self, zone_id: str) -> list[Reading]:
        return self.store.window(zone_id)

    def latest_readings(self) -> dict[str, Reading]:
        return self.store.latest_readings()

    def anomalies(self) -> list[Anomaly]:
        return self.anomaly_log.entries()

    def connection_state(self) -> ConnectionState:
        return self.source.state

    def baselines(self) -> dict[str, Baseline]:
        return dict(self.baseline_state.baselines)

    def compare_zone(self, zone_id: str) -> Comparison | None:
        """Latest reading of a zone against its baseline (None when either is missing)"""
        reading = self.store.latest(zone_id)
        if reading is None:
            return None
        return compare_to_baseline(reading.energy_kw, self.baseline_state.get(zone_id))

    def compare_all(self) -> list[ZoneComparison]:
        """Comparison rows for every zone that has both a reading and a baseline"""
        rows = []
        for zone_id, reading in sorted(self.store.latest_readings().items()):
            baseline = self.baseline_state.get(zone_id)
            comparison = compare_to_baseline(reading.energy_kw, baseline)
            if comparison is None:
                continue
            rows.append(
                ZoneComparison(
                    zone_id=zone_id,
                    zone_name=reading.zone_name,
                    current_kw=reading.energy_kw,
                    baseline_kw=baseline.avg_energy_kw,
                    percentage=comparison.percentage,
                    status=comparison.status,
                )
            )
        return rows

    # Lifecycle

    def start(self):
        self.source.start()

    def stop(self):
        """Stop the feed; the store is not mutated once this returns"""
        self.source.stop()

    def run(self, duration_seconds: float | None = None):
        """Run the monitor

        Args:
            duration_seconds: Optional duration in seconds. If None, runs indefinitely.
        """
        logger.info(
            "Starting zone energy monitor",
            topic=self.config.kafka_topic,
            duration=duration_seconds if duration_seconds else "indefinite",
        )

        start_time = time.time()
        last_log_time = start_time

        try:
            self.start()
            while True:
                time.sleep(0.5)
                elapsed = time.time() - start_time

                if time.time() - last_log_time >= self.config.stats_interval_seconds:
                    self._log_stats(elapsed)
                    last_log_time = time.time()

                if duration_seconds and elapsed >= duration_seconds:
                    logger.info("Duration limit reached", duration_seconds=duration_seconds)
                    break

        except KeyboardInterrupt:
            logger.info("Received interrupt signal, stopping monitor")

        finally:
            self.stop()
            elapsed = time.time() - start_time
            logger.info(
                "Monitor stopped",
                total_received=self.stats["total_received"],
                anomalies_detected=self.stats["anomalies_detected"],
                elapsed_sec=round(elapsed, 1),
            )

    def _log_stats(self, elapsed: float):
        rate = self.stats["total_received"] / elapsed if elapsed > 0 else 0
        state = self.source.state
        logger.info(
            "Monitor stats",
            total_received=self.stats["total_received"],
            anomalies_detected=self.stats["anomalies_detected"],
            unknown_zones=self.stats["unknown_zones"],
            parse_errors=self.source.stats["malformed"],
            connection=state.status.value,
            reconnect_attempts=state.reconnect_attempts,
            rate_per_sec=round(rate, 1),
            elapsed_sec=round(elapsed, 1),
        )

    def _on_state_change(self, state: ConnectionState):
        logger.info(
            "Feed status", status=state.status.value, reconnect_attempts=state.reconnect_attempts
        )
