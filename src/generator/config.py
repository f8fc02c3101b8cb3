"""
Predefined configurations for different operational scenarios.
"""

from .models import GeneratorConfig, InjectedAnomaly

# Normal operation (5% anomaly rate, as on the plant floor simulator)
NORMAL_CONFIG = GeneratorConfig(
    anomaly_probability=0.05,
    event_interval_seconds=0.1,
)


# Chaos mode (frequent anomalies of every kind)
CHAOS_CONFIG = GeneratorConfig(
    anomaly_probability=0.25,
    event_interval_seconds=0.05,
)


# Sensor failures only
FLATLINE_FOCUS_CONFIG = GeneratorConfig(
    anomaly_probability=0.05,
    enabled_anomalies=[InjectedAnomaly.FLATLINE],
    event_interval_seconds=0.1,
)


# Quiet feed (no injected anomalies)
QUIET_CONFIG = GeneratorConfig(
    anomaly_probability=0.0,
    event_interval_seconds=0.5,
)


# Development/Testing (slow and reproducible)
DEV_CONFIG = GeneratorConfig(anomaly_probability=0.1, event_interval_seconds=1.0, seed=2026)
