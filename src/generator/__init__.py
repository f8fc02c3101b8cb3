"""
Zone Energy Feed Generator for Kafka
Simulates per-zone plant energy readings with configurable anomalies,
and writes historical corpora for the baseline engine.
"""

from .config import CHAOS_CONFIG, DEV_CONFIG, FLATLINE_FOCUS_CONFIG, NORMAL_CONFIG, QUIET_CONFIG
from .generator import ZoneEnergyGenerator, build_history, pick_anomaly, write_history
from .models import GeneratorConfig, InjectedAnomaly
from .zone_state import ZoneState, time_of_day_factor

__all__ = [
    "GeneratorConfig",
    "InjectedAnomaly",
    "ZoneState",
    "ZoneEnergyGenerator",
    "build_history",
    "pick_anomaly",
    "time_of_day_factor",
    "write_history",
    "NORMAL_CONFIG",
    "CHAOS_CONFIG",
    "FLATLINE_FOCUS_CONFIG",
    "QUIET_CONFIG",
    "DEV_CONFIG",
]

__version__ = "1.0.0"
