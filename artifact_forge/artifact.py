from __future__ import annotations

import enum
import math

from artifact_forge import genshin_data
from artifact_forge.errors import FixtureLookupError, InvalidArgumentError
from artifact_forge.stat_table import StatTable


class RollQuality(enum.Enum):
    """Quality tier of a single substat roll. AVG is the expected value and is never sampled."""

    MAX = "MAX"
    HIGH = "HIGH"
    MID = "MID"
    LOW = "LOW"
    AVG = "AVG"

    @property
    def multiplier(self) -> float:
        return _roll_quality_multipliers[self]


_roll_quality_multipliers = {
    RollQuality.MAX: 1.0,
    RollQuality.HIGH: 0.9,
    RollQuality.MID: 0.8,
    RollQuality.LOW: 0.7,
    RollQuality.AVG: (1.0 + 0.9 + 0.8 + 0.7) / 4,
}


class Artifact:

    # To be overwritten by inherited types
    _main_stats = []

    def __init__(self, main_stat: str, rarity: int = 5, level: int = None, substats: StatTable = None):

        level = validate_rarity_and_level(rarity, level)
        if main_stat not in self._main_stats:
            raise InvalidArgumentError(f"Invalid {self.slot} main stat: {main_stat}.")
        if substats is None:
            substats = StatTable()
        for substat, _ in substats:
            if not is_valid_substat(substat):
                raise InvalidArgumentError(f"Invalid substat: {substat}.")
            if substat == main_stat:
                raise InvalidArgumentError(f"Substat {substat} cannot equal the main stat.")

        # Save inputs
        self._main_stat = main_stat
        self._rarity = rarity
        self._level = level
        self._substats = substats

    @classmethod
    def main_stats(cls) -> list[str]:
        return list(cls._main_stats)

    @property
    def slot(self) -> str:
        return type(self).__name__.lower()

    @property
    def main_stat(self) -> str:
        return self._main_stat

    @property
    def rarity(self) -> int:
        return self._rarity

    @property
    def level(self) -> int:
        return self._level

    @property
    def max_level(self) -> int:
        return genshin_data.max_level_by_stars[self.rarity]

    @property
    def substats(self) -> StatTable:
        return self._substats

    @property
    def main_stat_value(self) -> float:
        return get_main_stat_value(self.main_stat, self.rarity, self.level)

    def stats(self) -> StatTable:
        stats = self.substats.clone()
        stats.add(self.main_stat, self.main_stat_value)
        return stats

    def to_string_table(self) -> str:
        return_str = (
            f"{type(self).__name__:>7s} "
            f"{self.rarity:>d}* "
            f"{self.level:>2d}/{self.max_level:>2d} "
            f"{genshin_data.stat2output_map[self.main_stat]:>17s}: "
            f"{_format_value(self.main_stat, self.main_stat_value):>6}"
        )
        for possible_substat in genshin_data.possible_sub_stats:
            if possible_substat in self.substats:
                return_str += f" {_format_value(possible_substat, self.substats[possible_substat]):>6}"
            else:
                return_str += "       "
        return return_str

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.main_stat}, rarity={self.rarity}, level={self.level})"


class Flower(Artifact):

    _main_stats = ["FlatHP"]


class Feather(Artifact):

    _main_stats = ["FlatATK"]


class Sands(Artifact):

    _main_stats = ["HPPercent", "ATKPercent", "DEFPercent", "ElementalMastery", "EnergyRecharge"]


class Goblet(Artifact):

    _main_stats = [
        "HPPercent",
        "ATKPercent",
        "DEFPercent",
        "ElementalMastery",
        "PyroDMGBonus",
        "CryoDMGBonus",
        "GeoDMGBonus",
        "DendroDMGBonus",
        "ElectroDMGBonus",
        "HydroDMGBonus",
        "AnemoDMGBonus",
        "PhysicalDMGBonus",
    ]


class Circlet(Artifact):

    _main_stats = ["HPPercent", "ATKPercent", "DEFPercent", "ElementalMastery", "CritRate", "CritDMG", "HealingBonus"]


slot_name2type = {
    "flower": Flower,
    "feather": Feather,
    "sands": Sands,
    "goblet": Goblet,
    "circlet": Circlet,
}


def make_artifact(
    slot_name: str, main_stat: str, rarity: int = 5, level: int = None, substats: StatTable = None
) -> Artifact:
    if slot_name not in slot_name2type:
        raise InvalidArgumentError(f"Invalid slot: {slot_name}.")
    return slot_name2type[slot_name](main_stat=main_stat, rarity=rarity, level=level, substats=substats)


def validate_rarity_and_level(rarity: int, level: int = None) -> int:
    """Returns the level, defaulting to the rarity's max level"""

    if rarity not in genshin_data.max_level_by_stars:
        raise InvalidArgumentError(f"Invalid rarity: {rarity}. Rarity must be between 1 and 5.")
    if level is None:
        level = genshin_data.max_level_by_stars[rarity]
    if not 0 <= level <= genshin_data.max_level_by_stars[rarity]:
        raise InvalidArgumentError(
            f"Invalid level {level} for {rarity}* artifact. "
            f"Level must be between 0 and {genshin_data.max_level_by_stars[rarity]}."
        )
    return level


def is_valid_substat(stat: str) -> bool:
    return stat in genshin_data.possible_sub_stats


def max_rolls_for(artifact: Artifact) -> int:
    """Initial substats plus one roll per upgrade"""
    return (artifact.rarity - 1) + math.floor(artifact.level / genshin_data.UPGRADE_INTERVAL)


def max_rolls_for_given(artifact: Artifact, stat: str, worst_case: bool = False) -> int:
    """Most rolls a single substat can receive on an artifact. Worst case assumes it was not an initial substat."""
    if artifact.main_stat == stat:
        return 0
    upgrades = math.floor(artifact.level / genshin_data.UPGRADE_INTERVAL)
    return upgrades if worst_case else upgrades + 1


def get_main_stat_value(stat: str, rarity: int = 5, level: int = 20) -> float:
    if rarity not in genshin_data.main_stat_values:
        raise FixtureLookupError(f"No main stat values for rarity {rarity}.")
    values = genshin_data.main_stat_values[rarity].get(stat)
    if values is None:
        return 0.0
    level = min(level, len(values) - 1)
    return float(values[level])


def get_sub_stat_value(stat: str, rarity: int) -> float:
    """Value of a maximum quality roll"""
    return get_substat_roll_value(stat, rarity, 0)


def get_substat_roll_value(stat: str, rarity: int, tier: int) -> float:
    if rarity not in genshin_data.substat_roll_tiers:
        raise FixtureLookupError(f"No substat roll tiers for rarity {rarity}.")
    if stat not in genshin_data.substat_roll_tiers[rarity]:
        raise FixtureLookupError(f"No roll tiers for stat {stat} at rarity {rarity}.")
    return genshin_data.substat_roll_tiers[rarity][stat][tier]


def _format_value(stat: str, value: float) -> str:
    if stat in genshin_data.flat_stats:
        return f"{value:.0f}"
    return f"{100 * value:.1f}%"
