"""
Core utilities shared across the application.
"""

from .logger import setup_logging
from .readings import MalformedReadingError, Reading
from .zones import DEFAULT_ZONES, ZoneConfig, ZoneConfigError, ZoneRange, load_zones, zone_ranges

__all__ = [
    "DEFAULT_ZONES",
    "MalformedReadingError",
    "Reading",
    "ZoneConfig",
    "ZoneConfigError",
    "ZoneRange",
    "load_zones",
    "setup_logging",
    "zone_ranges",
]
