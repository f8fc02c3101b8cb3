"""
Live usage versus historical baseline.

Deviations within +/-10% of the baseline count as normal so that readings
oscillating around the average do not flap between states.
"""

from collections.abc import Sequence

from src.core.readings import Reading

from .models import Baseline, Comparison, ComparisonStatus

NORMAL_BAND_PERCENT = 10.0


def percentage_diff(current: float, baseline: float) -> float:
    if baseline == 0:
        return 0.0
    return (current - baseline) / baseline * 100


def comparison_status(percentage: float) -> ComparisonStatus:
    if abs(percentage) < NORMAL_BAND_PERCENT:
        return ComparisonStatus.NORMAL
    return ComparisonStatus.ABOVE if percentage > 0 else ComparisonStatus.BELOW


def compare(current: float, baseline: float) -> Comparison:
    """Compare a live value with a baseline value"""
    percentage = percentage_diff(current, baseline)
    return Comparison(percentage=percentage, status=comparison_status(percentage))


def compare_to_baseline(current: float, baseline: Baseline | None) -> Comparison | None:
    """Compare against a zone baseline; None means there is no data to compare with"""
    if baseline is None:
        return None
    return compare(current, baseline.avg_energy_kw)


def window_average(window: Sequence[Reading]) -> float | None:
    """Mean energy of a history window, None for an empty window"""
    if not window:
        return None
    return sum(r.energy_kw for r in window) / len(window)


def format_percentage(percentage: float) -> str:
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{percentage:.1f}%"
