"""
Data models for historical baselines and live-vs-baseline comparison.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum


class CorpusLoadError(Exception):
    """Raised when the historical corpus cannot be loaded"""


@dataclass(frozen=True)
class Baseline:
    """Statistics of a zone's energy usage over the historical corpus"""

    zone_id: str
    zone_name: str
    avg_energy_kw: float
    min_energy_kw: float
    max_energy_kw: float
    data_points: int

    def to_dict(self) -> dict:
        return asdict(self)


class ComparisonStatus(Enum):
    NORMAL = "normal"
    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class Comparison:
    """Deviation of a live value from its baseline, in percent"""

    percentage: float
    status: ComparisonStatus


@dataclass(frozen=True)
class ZoneComparison:
    """Latest reading of a zone set against its historical average"""

    zone_id: str
    zone_name: str
    current_kw: float
    baseline_kw: float
    percentage: float
    status: ComparisonStatus

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class BaselineState:
    """Baselines computed at startup, or the reason they are unavailable"""

    baselines: dict[str, Baseline] = field(default_factory=dict)
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.error is None and bool(self.baselines)

    def get(self, zone_id: str) -> Baseline | None:
        if self.error is not None:
            return None
        return self.baselines.get(zone_id)
