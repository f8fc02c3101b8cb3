"""
Static zone reference data: expected operating ranges and display metadata.

Loaded once at startup, either from the built-in plant layout or from a JSON
file with the same camelCase shape as the feed.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class ZoneConfigError(ValueError):
    """Raised when a zone reference file cannot be used"""


@dataclass(frozen=True)
class ZoneRange:
    """Expected operating bounds of a zone, in kW"""

    min: float
    max: float


@dataclass(frozen=True)
class OperatingHours:
    """Operating schedule of a zone (``24/7`` or a daily window)"""

    type: str = "24/7"
    start: int | None = None
    end: int | None = None

    def is_operating(self, hour: int) -> bool:
        if self.type == "24/7" or self.start is None or self.end is None:
            return True
        return self.start <= hour < self.end


@dataclass(frozen=True)
class ZoneConfig:
    """Reference data for a single plant zone"""

    id: str
    name: str
    expected_range: ZoneRange
    description: str = ""
    location: str = ""
    critical_threshold: float | None = None
    equipment_count: int = 0
    operating_hours: OperatingHours = OperatingHours()
    priority: str = "medium"
    cost_per_kwh: float = 0.0
    baseline_temperature: float = 20.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ZoneConfig":
        """Build a zone from its JSON representation"""
        try:
            expected = data["expectedRange"]
            zone_range = ZoneRange(min=float(expected["min"]), max=float(expected["max"]))
            hours = data.get("operatingHours") or {}
            zone = cls(
                id=str(data["id"]),
                name=str(data.get("name", data["id"])),
                expected_range=zone_range,
                description=data.get("description", ""),
                location=data.get("location", ""),
                critical_threshold=data.get("criticalThreshold"),
                equipment_count=int(data.get("equipmentCount", 0)),
                operating_hours=OperatingHours(
                    type=hours.get("type", "24/7"),
                    start=hours.get("start"),
                    end=hours.get("end"),
                ),
                priority=data.get("priority", "medium"),
                cost_per_kwh=float(data.get("costPerKwh", 0.0)),
                baseline_temperature=float(data.get("baselineTemperature", 20.0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ZoneConfigError(f"Invalid zone definition {data!r}: {e}") from e

        if zone_range.min > zone_range.max:
            raise ZoneConfigError(f"Zone '{zone.id}' has min above max")
        return zone


DEFAULT_ZONES: list[ZoneConfig] = [
    ZoneConfig(
        id="assembly-1",
        name="Assembly Line 1",
        description="Primary vehicle assembly line",
        location="Building A, Level 1",
        expected_range=ZoneRange(min=220, max=280),
        critical_threshold=350,
        equipment_count=12,
        priority="critical",
        cost_per_kwh=0.12,
        baseline_temperature=22.0,
    ),
    ZoneConfig(
        id="paint-shop",
        name="Paint Shop",
        description="Automated painting facility",
        location="Building B, Level 1",
        expected_range=ZoneRange(min=150, max=200),
        critical_threshold=280,
        equipment_count=8,
        operating_hours=OperatingHours(type="scheduled", start=6, end=22),
        priority="high",
        cost_per_kwh=0.14,
        baseline_temperature=24.0,
    ),
    ZoneConfig(
        id="stamping-press",
        name="Stamping Press",
        description="Heavy-duty hydraulic stamping presses",
        location="Building C, Level 1",
        expected_range=ZoneRange(min=300, max=400),
        critical_threshold=500,
        equipment_count=6,
        priority="critical",
        cost_per_kwh=0.11,
        baseline_temperature=26.0,
    ),
    ZoneConfig(
        id="quality-control",
        name="Quality Control",
        description="Inspection stations",
        location="Building A, Level 2",
        expected_range=ZoneRange(min=50, max=80),
        critical_threshold=120,
        equipment_count=15,
        operating_hours=OperatingHours(type="scheduled", start=7, end=19),
        priority="medium",
        cost_per_kwh=0.13,
        baseline_temperature=20.0,
    ),
    ZoneConfig(
        id="warehouse",
        name="Warehouse",
        description="Parts storage and logistics",
        location="Building D, Level 1",
        expected_range=ZoneRange(min=20, max=40),
        critical_threshold=60,
        equipment_count=4,
        priority="low",
        cost_per_kwh=0.10,
        baseline_temperature=18.0,
    ),
]


def load_zones(path: str | Path | None = None) -> list[ZoneConfig]:
    """Load zone reference data

    Args:
        path: Optional JSON file holding a list of zones (or ``{"zones": [...]}``).
              The built-in plant layout is used when omitted.

    Raises:
        ZoneConfigError: If the file cannot be read or a zone is invalid
    """
    if path is None:
        return list(DEFAULT_ZONES)

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ZoneConfigError(f"Cannot read zone file {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("zones")
    if not isinstance(raw, list):
        raise ZoneConfigError(f"Zone file {path} must contain a list of zones")

    zones = [ZoneConfig.from_dict(item) for item in raw]
    logger.info("Zone reference data loaded", path=str(path), zones=[z.id for z in zones])
    return zones


def zone_ranges(zones: list[ZoneConfig]) -> dict[str, ZoneRange]:
    """Map zone id to expected range, as consumed by the detector"""
    return {zone.id: zone.expected_range for zone in zones}
