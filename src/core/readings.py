"""
Sensor reading model shared by the monitor, the baseline engine and the generator.
"""

import json
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


class MalformedReadingError(ValueError):
    """Raised when a feed payload does not describe a valid reading"""


def format_timestamp(timestamp: datetime) -> str:
    """ISO-8601 UTC rendering used on the wire (``...Z``)"""
    return timestamp.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise MalformedReadingError(f"timestamp must be a string, got {type(value).__name__}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise MalformedReadingError(f"invalid timestamp {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _number(data: dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedReadingError(f"{key} must be a number, got {type(value).__name__}")
    try:
        number = float(value)
    except (OverflowError, ValueError) as e:
        raise MalformedReadingError(f"{key} is out of range: {e}") from e
    if not math.isfinite(number):
        raise MalformedReadingError(f"{key} must be a finite number, got {number!r}")
    return number


def _text(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value:
        raise MalformedReadingError(f"{key} must be a non-empty string")
    return value


@dataclass(frozen=True)
class Reading:
    """A single sensor reading for one zone"""

    timestamp: datetime
    zone_id: str
    zone_name: str
    energy_kw: float
    temperature: float
    equipment_count: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Reading":
        """Validate a decoded feed message

        Raises:
            MalformedReadingError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise MalformedReadingError(f"expected a JSON object, got {type(data).__name__}")

        try:
            energy_kw = _number(data, "energyKw")
            equipment_count = data["equipmentCount"]
            reading = cls(
                timestamp=_parse_timestamp(data["timestamp"]),
                zone_id=_text(data, "zoneId"),
                zone_name=_text(data, "zoneName"),
                energy_kw=energy_kw,
                temperature=_number(data, "temperature"),
                equipment_count=equipment_count,
            )
        except KeyError as e:
            raise MalformedReadingError(f"missing field {e.args[0]}") from e

        if energy_kw < 0:
            raise MalformedReadingError(f"energyKw must be >= 0, got {energy_kw}")
        if (
            isinstance(equipment_count, bool)
            or not isinstance(equipment_count, int)
            or equipment_count < 0
        ):
            raise MalformedReadingError(
                f"equipmentCount must be a non-negative integer, got {equipment_count!r}"
            )
        return reading

    @classmethod
    def from_message(cls, payload: bytes | str | dict[str, Any]) -> "Reading":
        """Decode a raw feed payload (JSON bytes, text or an already decoded dict)"""
        if isinstance(payload, dict):
            return cls.from_dict(payload)
        try:
            if isinstance(payload, bytes):
                payload = payload.decode("utf-8")
            data = json.loads(payload)
        except (ValueError, TypeError, RecursionError) as e:
            raise MalformedReadingError(f"payload is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (camelCase keys)"""
        return {
            "timestamp": format_timestamp(self.timestamp),
            "zoneId": self.zone_id,
            "zoneName": self.zone_name,
            "energyKw": self.energy_kw,
            "temperature": self.temperature,
            "equipmentCount": self.equipment_count,
        }


