"""Main stat and substat optimization against a rotation"""

from __future__ import annotations

import itertools
import logging
from typing import Callable

import pandas as pd

from artifact_forge import genshin_data
from artifact_forge.artifact import (
    Circlet,
    Feather,
    Flower,
    Goblet,
    RollQuality,
    Sands,
    get_main_stat_value,
)
from artifact_forge.artifact_builder import ArtifactBuilder
from artifact_forge.errors import InvalidArgumentError, RequirementUnsatisfiableError
from artifact_forge.stat_table import Rotation, StatTable

log = logging.getLogger(__name__)

NO_MAIN_STATS = (genshin_data.no_stat, genshin_data.no_stat, genshin_data.no_stat)


def stat_gradients(base: StatTable, rotation: Rotation, slopes: dict[str, float]) -> pd.Series:
    """Finite difference of the rotation's value per unit of each stat"""

    before = rotation.execute(base)
    gradients = pd.Series(0.0, index=list(slopes))
    for stat, delta in slopes.items():
        adjusted = base.clone()
        adjusted.add(stat, delta)
        gradients[stat] = (rotation.execute(adjusted) - before) / delta
    return gradients


def relu_heuristic(base: StatTable, rotation: Rotation, slopes: dict[str, float]) -> list[str]:
    """Stats that strictly increase the rotation's value, in slope order"""
    gradients = stat_gradients(base, rotation, slopes)
    return [stat for stat, gradient in gradients.items() if gradient > 0]


def optimal_main_stats(
    stats: StatTable, rotation: Rotation, main_stat_value: Callable[[str], float] = None
) -> tuple[str, str, str]:
    """Exhaustive search over sands, goblet, and circlet main stats that improve the rotation"""

    if main_stat_value is None:
        main_stat_value = get_main_stat_value

    # Sands stats first, then stats new to goblet, then stats new to circlet
    pool = list(dict.fromkeys(Sands.main_stats() + Goblet.main_stats() + Circlet.main_stats()))
    effective_stats = relu_heuristic(stats, rotation, {stat: 1.0 for stat in pool})
    log.debug(f"Effective main stats: {effective_stats}")

    candidates = [
        [stat for stat in effective_stats if stat in slot_type.main_stats()] for slot_type in [Sands, Goblet, Circlet]
    ]

    best_main_stats = NO_MAIN_STATS
    best_value = 0.0
    for main_stats in itertools.product(*candidates):
        combined = stats.clone()
        for main_stat in main_stats:
            combined.add(main_stat, main_stat_value(main_stat))
        value = rotation.execute(combined)
        # First seen wins ties
        if value > best_value:
            best_value = value
            best_main_stats = main_stats

    log.debug(f"Optimal main stats: {best_main_stats} ({best_value:,.1f})")
    return tuple(best_main_stats)


def _optimize_substats(
    stats: StatTable, rotation: Rotation, builder: ArtifactBuilder, energy_recharge_requirement: float
) -> ArtifactBuilder:
    """Meets the energy recharge requirement, then greedily commits the single best roll until none helps"""

    roll_rarity = builder.roll_rarity

    # Energy recharge requirement
    while stats.merge(builder.build()).get("EnergyRecharge") < energy_recharge_requirement:
        if builder.rolls_left() <= 0 or builder.rolls_left_for_given("EnergyRecharge", roll_rarity) <= 0:
            raise RequirementUnsatisfiableError("Energy Recharge requirements cannot be met with substats alone")
        builder.roll("EnergyRecharge", RollQuality.AVG, roll_rarity)
        log.debug(f"Rolled EnergyRecharge toward requirement of {energy_recharge_requirement:.0%}")

    # Hill climb
    while builder.rolls_left() > 0:
        best_value = rotation.execute(stats.merge(builder.build()))
        best_stat = None
        for stat in genshin_data.possible_sub_stats:
            if builder.rolls_left_for_given(stat, roll_rarity) <= 0:
                continue
            builder.roll(stat, RollQuality.AVG, roll_rarity)
            value = rotation.execute(stats.merge(builder.build()))
            builder.unroll(stat, RollQuality.AVG, roll_rarity)
            if value > best_value:
                best_value = value
                best_stat = stat
        if best_stat is None:
            break
        builder.roll(best_stat, RollQuality.AVG, roll_rarity)
        log.debug(f"Rolled {best_stat:<16s} -> {best_value:>12,.1f} ({builder.rolls_left()} rolls left)")

    return builder


def gradient_5_star_kqmc_artifact_substat_optimizer(
    stats: StatTable,
    rotation: Rotation,
    flower: Flower,
    feather: Feather,
    sands: Sands,
    goblet: Goblet,
    circlet: Circlet,
    energy_recharge_requirement: float = 1.0,
) -> dict[str, int]:
    """Returns total substat rolls per stat, baseline rolls included"""

    if any(piece is None for piece in [flower, feather, sands, goblet, circlet]):
        raise InvalidArgumentError("Substat optimization requires all five artifacts.")

    builder = ArtifactBuilder.kqmc(flower, feather, sands, goblet, circlet)
    builder = _optimize_substats(stats, rotation, builder, energy_recharge_requirement)
    return builder.substat_roll_counts()


def optimal_kqmc_5_artifacts_stats(
    stats: StatTable, rotation: Rotation, energy_recharge_requirement: float = 1.0
) -> StatTable:
    """Stats of five optimized 5* level 20 artifacts"""

    log.info("-" * 140)
    log.info("OPTIMIZING KQMC 5* ARTIFACTS")
    log.info("")

    sands_main, goblet_main, circlet_main = optimal_main_stats(stats, rotation)
    if genshin_data.no_stat in (sands_main, goblet_main, circlet_main):
        raise InvalidArgumentError("No main stat combination improves the rotation.")
    log.info(
        f"MAIN STATS: {genshin_data.stat2output_map[sands_main]} / {genshin_data.stat2output_map[goblet_main]} / "
        f"{genshin_data.stat2output_map[circlet_main]}"
    )

    builder = ArtifactBuilder.kqm_all_5_star(sands_main, goblet_main, circlet_main)
    builder = _optimize_substats(stats, rotation, builder, energy_recharge_requirement)
    log.info(f"SUBSTAT ROLLS: {builder.substat_roll_counts()}")
    log.info("")

    return builder.build()
