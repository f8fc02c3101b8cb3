"""
Zone state management and energy reading generation.
"""

import math
import random
from datetime import UTC, datetime, timedelta
from typing import Any

from src.core.readings import format_timestamp
from src.core.zones import ZoneConfig

from .models import InjectedAnomaly

STAMPING_PRESS_ID = "stamping-press"


def time_of_day_factor(hour: int) -> float:
    """Usage multiplier: up to 1.2 during working hours (8-18), 0.5 to 0.8 outside them"""
    if 8 <= hour < 18:
        return 1.0 + 0.2 * math.sin((hour - 8) / 10 * math.pi)
    return 0.6 + 0.2 * math.sin((hour + 6) / 12 * math.pi)


class ZoneState:
    """Tracks the state of a zone over time for realistic evolution"""

    def __init__(
        self,
        zone: ZoneConfig,
        rng: random.Random | None = None,
        flatline_duration_seconds: float = 30.0,
    ):
        self.zone = zone
        self.rng = rng or random.Random()
        self.flatline_duration = timedelta(seconds=flatline_duration_seconds)

        # Active flatline (sensor stuck on one value)
        self.flatline_value: float | None = None
        self.flatline_until: datetime | None = None

    @property
    def flatlined(self) -> bool:
        return self.flatline_until is not None

    def _add_noise(self, value: float, noise_percent: float) -> float:
        return value + (self.rng.random() - 0.5) * 2 * noise_percent * value

    def generate_energy(
        self, now: datetime, inject_anomaly: InjectedAnomaly | None = None
    ) -> float:
        """Energy usage in kW at ``now``, with optional anomaly injection"""
        expected = self.zone.expected_range
        operating = self.zone.operating_hours.is_operating(now.hour)

        base = expected.min + self.rng.random() * (expected.max - expected.min)
        energy = base * time_of_day_factor(now.hour)

        if not operating:
            energy = base * (0.1 + self.rng.random() * 0.1)

        # Press cycles: high draw during the first 30% of every 10 seconds
        if self.zone.id == STAMPING_PRESS_ID and operating:
            if (now.second % 10) / 10 < 0.3:
                energy *= 1.3

        if self.flatline_until is not None:
            if now < self.flatline_until:
                return self.flatline_value
            self.flatline_value = None
            self.flatline_until = None

        if inject_anomaly == InjectedAnomaly.SPIKE:
            energy *= 2.0
        elif inject_anomaly == InjectedAnomaly.DROP:
            energy *= 0.5
        elif inject_anomaly == InjectedAnomaly.FLATLINE:
            self.flatline_value = energy
            self.flatline_until = now + self.flatline_duration

        return max(0.0, self._add_noise(energy, 0.05 + self.rng.random() * 0.05))

    def generate_temperature(self, energy_kw: float) -> float:
        """Temperature follows energy usage around the zone's baseline (+/-3 C)"""
        expected = self.zone.expected_range
        midpoint = (expected.min + expected.max) / 2
        variation = (energy_kw / midpoint - 1) * 3 if midpoint else 0.0
        return self._add_noise(self.zone.baseline_temperature + variation, 0.02)

    def generate_reading(
        self, inject_anomaly: InjectedAnomaly | None = None, timestamp: datetime | None = None
    ) -> dict[str, Any]:
        """Generate one feed message for this zone

        Args:
            inject_anomaly: Optional anomaly to inject
            timestamp: Optional custom timestamp (for backfill mode)
        """
        now = timestamp or datetime.now(UTC)
        energy_kw = self.generate_energy(now, inject_anomaly)
        temperature = self.generate_temperature(energy_kw)

        return {
            "timestamp": format_timestamp(now),
            "zoneId": self.zone.id,
            "zoneName": self.zone.name,
            "energyKw": round(energy_kw, 1),
            "temperature": round(temperature, 1),
            "equipmentCount": self.zone.equipment_count,
        }
