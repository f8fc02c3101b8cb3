"""
Historical baseline engine.

Loads the static historical corpus once and derives, per zone, the mean,
min and max energy usage together with the number of data points.
"""

import json
from collections.abc import Iterable
from pathlib import Path

import pandas as pd
import structlog

from src.core.readings import MalformedReadingError, Reading

from .models import Baseline, BaselineState, CorpusLoadError

logger = structlog.get_logger(__name__)

NO_HISTORICAL_DATA = "No historical data available"


def load_corpus(path: str | Path) -> list[Reading]:
    """Load historical readings from a JSON array

    Records that fail validation are skipped with a warning.

    Raises:
        CorpusLoadError: If the file cannot be read or is not a JSON array
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError, RecursionError) as e:
        raise CorpusLoadError(f"Failed to load historical data from {path}: {e}") from e

    if not isinstance(raw, list):
        raise CorpusLoadError(f"Historical data in {path} must be a JSON array")

    readings = []
    skipped = 0
    for record in raw:
        try:
            readings.append(Reading.from_dict(record))
        except MalformedReadingError as e:
            skipped += 1
            logger.debug("Skipping historical record", error=str(e))

    if skipped:
        logger.warning("Skipped malformed historical records", skipped=skipped, path=str(path))

    logger.info("Historical corpus loaded", path=str(path), readings=len(readings))
    return readings


def compute_baselines(corpus: Iterable[Reading]) -> dict[str, Baseline]:
    """Group the corpus by zone and summarise energy usage

    Args:
        corpus: Historical readings, in any order

    Returns:
        Mapping of zone id to its baseline (empty for an empty corpus)
    """
    df = pd.DataFrame(
        [
            {"zone_id": r.zone_id, "zone_name": r.zone_name, "energy_kw": r.energy_kw}
            for r in corpus
        ],
        columns=["zone_id", "zone_name", "energy_kw"],
    )
    if df.empty:
        return {}

    stats = df.groupby("zone_id", sort=True).agg(
        zone_name=("zone_name", "first"),
        avg_energy_kw=("energy_kw", "mean"),
        min_energy_kw=("energy_kw", "min"),
        max_energy_kw=("energy_kw", "max"),
        data_points=("energy_kw", "count"),
    )

    return {
        str(zone_id): Baseline(
            zone_id=str(zone_id),
            zone_name=str(row["zone_name"]),
            avg_energy_kw=float(row["avg_energy_kw"]),
            min_energy_kw=float(row["min_energy_kw"]),
            max_energy_kw=float(row["max_energy_kw"]),
            data_points=int(row["data_points"]),
        )
        for zone_id, row in stats.iterrows()
    }


def load_baselines(path: str | Path | None) -> BaselineState:
    """Load the corpus and compute baselines, reporting failures as state"""
    if path is None:
        return BaselineState(error=NO_HISTORICAL_DATA)

    try:
        corpus = load_corpus(path)
    except CorpusLoadError as e:
        logger.error("Baselines unavailable", error=str(e))
        return BaselineState(error=str(e))

    if not corpus:
        logger.warning("Baselines unavailable", error=NO_HISTORICAL_DATA, path=str(path))
        return BaselineState(error=NO_HISTORICAL_DATA)

    baselines = compute_baselines(corpus)
    logger.info(
        "Baselines computed",
        zones=len(baselines),
        data_points=sum(b.data_points for b in baselines.values()),
    )
    return BaselineState(baselines=baselines)
