"""
Historical baselines and comparison of live usage against them.
"""

from .comparison import compare, compare_to_baseline, format_percentage, window_average
from .engine import compute_baselines, load_baselines, load_corpus
from .models import (
    Baseline,
    BaselineState,
    Comparison,
    ComparisonStatus,
    CorpusLoadError,
    ZoneComparison,
)

__all__ = [
    "Baseline",
    "BaselineState",
    "Comparison",
    "ComparisonStatus",
    "CorpusLoadError",
    "ZoneComparison",
    "compare",
    "compare_to_baseline",
    "compute_baselines",
    "format_percentage",
    "load_baselines",
    "load_corpus",
    "window_average",
]
