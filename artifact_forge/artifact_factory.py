"""Generates randomly rolled artifacts following in-game drop and upgrade rules"""

from __future__ import annotations

import logging
import math

import pandas as pd

from artifact_forge import genshin_data
from artifact_forge.artifact import Artifact, get_substat_roll_value, slot_name2type, validate_rarity_and_level
from artifact_forge.errors import FixtureLookupError
from artifact_forge.rng import DefaultRng, Rng
from artifact_forge.stat_table import StatTable

log = logging.getLogger(__name__)


def pick_weighted(weights: pd.Series, rng: Rng = None):
    """Draws an index label with probability proportional to its weight"""

    if len(weights) == 0:
        raise FixtureLookupError("Cannot pick from an empty weight table.")
    if rng is None:
        rng = DefaultRng()

    random = rng.next_float() * weights.sum()
    for item, weight in weights.items():
        random -= weight
        if random <= 0:
            return item

    # Floating point remainder
    return weights.index[-1]


def select_main_stat(slot: str, rng: Rng = None) -> str:
    if slot not in genshin_data.main_stat_drop_rate:
        raise FixtureLookupError(f"No main stat weights defined for slot: {slot}.")
    return pick_weighted(genshin_data.main_stat_drop_rate[slot], rng)


def get_available_substats(slot: str, main_stat: str) -> pd.Series:
    if slot not in genshin_data.substat_weights:
        raise FixtureLookupError(f"No substat weights for slot: {slot}.")
    slot_weights = genshin_data.substat_weights[slot]
    if main_stat not in slot_weights:
        raise FixtureLookupError(f"No substat weights for main stat {main_stat} in slot {slot}.")
    return slot_weights[main_stat].drop(main_stat, errors="ignore")


def select_initial_substat_count(rarity: int, rng: Rng = None) -> int:
    if rarity not in genshin_data.initial_substat_counts:
        raise FixtureLookupError(f"No initial substat counts for rarity {rarity}.")
    return int(pick_weighted(genshin_data.initial_substat_counts[rarity], rng))


def select_roll_tier(rarity: int, rng: Rng = None) -> int:
    """Index into [max, high, mid, low] by inverting the cumulative tier distribution"""

    if rarity not in genshin_data.roll_tier_probabilities:
        raise FixtureLookupError(f"No roll tier probabilities for rarity {rarity}.")
    if rng is None:
        rng = DefaultRng()

    random = rng.next_float()
    cumulative = 0.0
    for tier, probability in enumerate(genshin_data.roll_tier_probabilities[rarity]):
        cumulative += probability
        if random < cumulative:
            return tier

    # Probabilities may not sum to 1
    return 0


def select_upgrade_roll_count(rng: Rng = None) -> int:
    return int(pick_weighted(genshin_data.upgrade_roll_counts, rng))


def generate_substats(slot: str, main_stat: str, rarity: int, level: int, rng: Rng = None) -> list[tuple[str, float]]:
    """Rolls initial substats then applies one upgrade every UPGRADE_INTERVAL levels"""

    if rng is None:
        rng = DefaultRng()

    available_substats = get_available_substats(slot, main_stat)
    initial_count = select_initial_substat_count(rarity, rng)

    # Insertion ordered, repeat rolls accumulate
    substats: dict[str, float] = {}

    # Initial substats
    while len(substats) < initial_count:
        selected = pick_weighted(available_substats, rng)
        if selected not in substats:
            tier = select_roll_tier(rarity, rng)
            substats[selected] = get_substat_roll_value(selected, rarity, tier)

    # Upgrades
    for _ in range(math.floor(level / genshin_data.UPGRADE_INTERVAL)):
        if len(substats) < genshin_data.MAX_SUBSTATS:
            available_for_new = available_substats.drop(list(substats))
            if len(available_for_new) > 0:
                selected = pick_weighted(available_for_new, rng)
                tier = select_roll_tier(rarity, rng)
                substats[selected] = substats.get(selected, 0.0) + get_substat_roll_value(selected, rarity, tier)
            continue

        existing_substats = list(substats)
        stat_to_upgrade = existing_substats[rng.next_int(len(existing_substats))]
        for _ in range(select_upgrade_roll_count(rng)):
            tier = select_roll_tier(rarity, rng)
            substats[stat_to_upgrade] += get_substat_roll_value(stat_to_upgrade, rarity, tier)

    return list(substats.items())


def generate_artifact(slot: str, rarity: int, level: int = None, rng: Rng = None) -> Artifact:
    """Generates a single artifact with main stat and substats drawn from in-game distributions"""

    if slot not in slot_name2type:
        raise FixtureLookupError(f"No artifact type defined for slot: {slot}.")
    if rng is None:
        rng = DefaultRng()
    # Validate before spending any draws
    level = validate_rarity_and_level(rarity, level)

    main_stat = select_main_stat(slot, rng)
    substats = generate_substats(slot, main_stat, rarity, level, rng)
    artifact = slot_name2type[slot](main_stat=main_stat, rarity=rarity, level=level, substats=StatTable(*substats))

    log.debug(artifact.to_string_table())
    return artifact
