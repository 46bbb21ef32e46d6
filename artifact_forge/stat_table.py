from __future__ import annotations

import logging
import re
from typing import Callable, Iterator, Union

import pandas as pd

from artifact_forge import genshin_data
from artifact_forge.errors import InvalidArgumentError

log = logging.getLogger(__name__)

# Objective contribution of a single action
DamageCompute = Callable[["StatTable"], float]
Action = Union[tuple[str, DamageCompute], DamageCompute]

_stat_name_set = frozenset(genshin_data.stat_names)


def _validate_stat(stat: str) -> str:
    if stat not in _stat_name_set:
        raise InvalidArgumentError(f"Invalid stat: {stat}.")
    return stat


class StatTable:
    """Additive stat accumulator. Absent stats read as 0."""

    def __init__(self, *stats: tuple[str, float]):
        self._stats: dict[str, float] = {}
        for stat, value in stats:
            self.add(stat, value)

    def get(self, stat: str) -> float:
        return self._stats.get(_validate_stat(stat), 0.0)

    def set(self, stat: str, value: float):
        self._stats[_validate_stat(stat)] = value

    def add(self, stat: str, value: float):
        self._stats[_validate_stat(stat)] = self._stats.get(stat, 0.0) + value

    def clone(self) -> StatTable:
        return StatTable(*self._stats.items())

    def merge(self, other: StatTable) -> StatTable:
        """New table with every known stat present, each the sum of both tables"""
        merged = StatTable()
        for stat in genshin_data.stat_names:
            merged.set(stat, self.get(stat) + other.get(stat))
        return merged

    def items(self) -> list[tuple[str, float]]:
        return list(self._stats.items())

    def to_series(self) -> pd.Series:
        series = pd.Series(0.0, index=genshin_data.stat_names)
        for stat, value in self._stats.items():
            series[stat] = value
        return series

    def __getitem__(self, stat: str) -> float:
        return self.get(stat)

    def __contains__(self, stat: str) -> bool:
        return stat in self._stats

    def __iter__(self) -> Iterator[tuple[str, float]]:
        return iter(self._stats.items())

    def __len__(self) -> int:
        return len(self._stats)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StatTable):
            return NotImplemented
        return all(self.get(stat) == other.get(stat) for stat in genshin_data.stat_names)

    def __repr__(self) -> str:
        stats = ", ".join(f"{stat}={value}" for stat, value in self._stats.items() if value != 0)
        return f"StatTable({stats})"


class StatTableBuilder:
    def __init__(self):
        self._table = StatTable()

    def add_stat(self, stat: str, value: float) -> StatTableBuilder:
        self._table.add(stat, value)
        return self

    def add_table(self, table: StatTable) -> StatTableBuilder:
        for stat, value in table:
            self._table.add(stat, value)
        return self

    def build(self) -> StatTable:
        return self._table.clone()


def compose(*funcs: DamageCompute) -> DamageCompute:
    """Sum several objective functions into one"""

    def composed(stats: StatTable) -> float:
        return sum(func(stats) for func in funcs)

    return composed


class Rotation:
    """Ordered list of labelled actions whose summed output is the optimization objective"""

    def __init__(self, *actions: Union[Action, list[Action]]):
        # Support both Rotation([a, b]) and Rotation(a, b)
        if len(actions) == 1 and isinstance(actions[0], list):
            actions = actions[0]
        self._actions: list[tuple[str, DamageCompute]] = []
        for action in actions:
            self.add(action)

    @property
    def actions(self) -> list[tuple[str, DamageCompute]]:
        return list(self._actions)

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self._actions]

    def add(self, action: Action):
        if callable(action):
            self._actions.append(("", action))
        else:
            label, compute = action
            self._actions.append((label, compute))

    def execute(self, stats: StatTable) -> float:
        total = 0.0
        for _, compute in self._actions:
            total += compute(stats)
        return total

    def breakdown(self, stats: StatTable) -> list[tuple[str, float]]:
        return [(label, compute(stats)) for label, compute in self._actions]

    def __len__(self) -> int:
        return len(self._actions)


# fmt: off
_stat_aliases = {
    "hp":          "HPPercent",
    "atk":         "ATKPercent",
    "def":         "DEFPercent",
    "hp%":         "HPPercent",
    "atk%":        "ATKPercent",
    "def%":        "DEFPercent",
    "em":          "ElementalMastery",
    "cr":          "CritRate",
    "cd":          "CritDMG",
    "er":          "EnergyRecharge",
    "hb":          "HealingBonus",
    "n":           "None",
    "elementaldmg": "ElementalDMGBonus",
    "physicaldmg": "PhysicalDMGBonus",
    "physicaldmg%": "PhysicalDMGBonus",
    "physicaldmgpercent": "PhysicalDMGBonus",
}
# fmt: on
_stat_aliases.update({stat.lower(): stat for stat in genshin_data.stat_names})


def stat_from_string(name: str) -> Union[str, None]:
    """Forgiving stat name lookup, e.g. "Crit Rate" -> CritRate. Returns None if unrecognized."""
    normalized = re.sub(r"[^a-z%]", "", name.lower())
    return _stat_aliases.get(normalized)
