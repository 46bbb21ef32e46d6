from __future__ import annotations

import logging

import pandas as pd

from artifact_forge import artifact_factory, genshin_data
from artifact_forge.rng import DefaultRng, Rng
from artifact_forge.stat_table import Rotation, StatTable

log = logging.getLogger(__name__)


def sample_artifacts(slot: str, rarity: int, level: int = None, samples: int = 10000, rng: Rng = None) -> pd.DataFrame:
    """Generates `samples` artifacts, one row each: main stat, number of substats, and each substat's value"""

    if rng is None:
        rng = DefaultRng()

    rows = []
    for _ in range(samples):
        artifact = artifact_factory.generate_artifact(slot=slot, rarity=rarity, level=level, rng=rng)
        row = {"main_stat": artifact.main_stat, "substat_count": len(artifact.substats)}
        for substat in genshin_data.possible_sub_stats:
            row[substat] = artifact.substats.get(substat)
        rows.append(row)

    return pd.DataFrame(rows, columns=["main_stat", "substat_count"] + genshin_data.possible_sub_stats)


def main_stat_frequencies(frame: pd.DataFrame) -> pd.Series:
    return frame["main_stat"].value_counts(normalize=True)


def substat_count_frequencies(frame: pd.DataFrame) -> pd.Series:
    return frame["substat_count"].value_counts(normalize=True).sort_index()


def substat_frequencies(frame: pd.DataFrame) -> pd.Series:
    """Fraction of artifacts carrying each substat"""
    return (frame[genshin_data.possible_sub_stats] > 0).mean()


def expected_frequencies(weights: pd.Series) -> pd.Series:
    return weights / weights.sum()


def max_frequency_deviation(observed: pd.Series, expected: pd.Series) -> float:
    """Largest absolute difference between observed and expected frequencies"""
    observed = observed.reindex(expected.index.union(observed.index), fill_value=0.0)
    expected = expected.reindex(observed.index, fill_value=0.0)
    return float((observed - expected).abs().max())


def log_optimization_report(
    base_stats: StatTable, rotation: Rotation, artifact_stats: StatTable, roll_counts: dict[str, int] = None
):
    """Logs rotation value before and after equipping the optimized artifacts"""

    total_stats = base_stats.merge(artifact_stats)
    before = rotation.execute(base_stats)
    after = rotation.execute(total_stats)

    log.info("-" * 140)
    log.info("OPTIMIZATION REPORT")
    log.info("")
    delta = 100 * (after / before - 1) if before else 0.0
    log.info(f"ROTATION VALUE: {before:>12,.0f} -> {after:>12,.0f} | {delta:>+6.1f}%")
    log.info("")

    log.info("ACTIONS:")
    for (label, before_value), (_, after_value) in zip(rotation.breakdown(base_stats), rotation.breakdown(total_stats)):
        log.info(f"{label:>16s}: {before_value:>12,.0f} -> {after_value:>12,.0f}")
    log.info("")

    log.info("ARTIFACT STATS:")
    artifact_series = artifact_stats.to_series()
    artifact_series = artifact_series[artifact_series != 0].rename(genshin_data.stat2output_map)
    log.info(artifact_series.to_frame().T.to_string(index=False, float_format="{:.3f}".format))
    log.info("")

    if roll_counts is not None:
        log.info("SUBSTAT ROLLS:")
        log.info(pd.Series(roll_counts).rename(genshin_data.stat2output_map).to_frame().T.to_string(index=False))
        log.info("")
