"""
Hybrid threshold + percent-change anomaly detection.

Rules run in a fixed order and the first one that fires wins:

1. Spike threshold: energy above 1.5x the zone's expected max
   (critical above 2x).
2. Drop threshold: energy below 0.5x the zone's expected min
   (critical below 0.3x).
3. Sudden change: more than 30% away from the previous reading of the same
   zone, by arrival order (critical above 50%).

Zones without a registered range are never evaluated.
"""

from collections.abc import Callable

from src.core.readings import Reading
from src.core.zones import ZoneRange

from .models import Anomaly, AnomalyType, Severity

SPIKE_FACTOR = 1.5
SPIKE_CRITICAL_FACTOR = 2.0
DROP_FACTOR = 0.5
DROP_CRITICAL_FACTOR = 0.3
CHANGE_THRESHOLD = 0.3
CHANGE_CRITICAL_THRESHOLD = 0.5

Rule = Callable[[Reading, Reading | None, ZoneRange], Anomaly | None]


def spike_threshold_rule(
    reading: Reading, previous: Reading | None, zone_range: ZoneRange
) -> Anomaly | None:
    threshold = zone_range.max * SPIKE_FACTOR
    if reading.energy_kw <= threshold:
        return None
    severity = (
        Severity.CRITICAL
        if reading.energy_kw > zone_range.max * SPIKE_CRITICAL_FACTOR
        else Severity.WARNING
    )
    return Anomaly.from_reading(reading, AnomalyType.SPIKE, threshold, severity)


def drop_threshold_rule(
    reading: Reading, previous: Reading | None, zone_range: ZoneRange
) -> Anomaly | None:
    threshold = zone_range.min * DROP_FACTOR
    if reading.energy_kw >= threshold:
        return None
    severity = (
        Severity.CRITICAL
        if reading.energy_kw < zone_range.min * DROP_CRITICAL_FACTOR
        else Severity.WARNING
    )
    return Anomaly.from_reading(reading, AnomalyType.DROP, threshold, severity)


def sudden_change_rule(
    reading: Reading, previous: Reading | None, zone_range: ZoneRange
) -> Anomaly | None:
    if previous is None or previous.zone_id != reading.zone_id:
        return None
    # no ratio against a zero reading
    if previous.energy_kw == 0:
        return None

    pct_change = abs(reading.energy_kw - previous.energy_kw) / previous.energy_kw
    if pct_change <= CHANGE_THRESHOLD:
        return None

    anomaly_type = AnomalyType.SPIKE if reading.energy_kw > previous.energy_kw else AnomalyType.DROP
    severity = Severity.CRITICAL if pct_change > CHANGE_CRITICAL_THRESHOLD else Severity.WARNING
    return Anomaly.from_reading(reading, anomaly_type, previous.energy_kw, severity)


RULES: tuple[Rule, ...] = (spike_threshold_rule, drop_threshold_rule, sudden_change_rule)


def detect(
    reading: Reading, previous: Reading | None, zone_range: ZoneRange | None
) -> Anomaly | None:
    """Run the detection cascade on one reading

    Args:
        reading: The reading just received
        previous: The reading stored for the same zone before this one, if any
        zone_range: Expected range of the zone, or None when the zone is unknown

    Returns:
        The anomaly raised by the first matching rule, or None
    """
    if zone_range is None:
        return None

    for rule in RULES:
        anomaly = rule(reading, previous, zone_range)
        if anomaly is not None:
            return anomaly
    return None


def describe_anomaly(anomaly: Anomaly) -> str:
    """Human-readable summary of an anomaly"""
    if anomaly.type == AnomalyType.SPIKE:
        return f"Energy spiked to {anomaly.value:.1f} kW (threshold: {anomaly.threshold:.1f} kW)"
    if anomaly.type == AnomalyType.DROP:
        return f"Energy dropped to {anomaly.value:.1f} kW (threshold: {anomaly.threshold:.1f} kW)"
    if anomaly.type == AnomalyType.FLATLINE:
        return f"Energy flatlined at {anomaly.value:.1f} kW"
    return f"Unusual reading: {anomaly.value:.1f} kW"
