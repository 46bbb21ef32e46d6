from __future__ import annotations

import logging
from typing import Union

import pandas as pd

from artifact_forge import genshin_data
from artifact_forge.artifact import (
    Artifact,
    Circlet,
    Feather,
    Flower,
    Goblet,
    RollQuality,
    Sands,
    get_main_stat_value,
    get_sub_stat_value,
    is_valid_substat,
    max_rolls_for,
    max_rolls_for_given,
)
from artifact_forge.errors import InvalidArgumentError, RollConstraintError
from artifact_forge.stat_table import StatTable, StatTableBuilder

log = logging.getLogger(__name__)

RollKey = tuple[str, RollQuality, int]
ConstraintKey = tuple[str, int]


def _validate_pieces(
    flower: Flower = None, feather: Feather = None, sands: Sands = None, goblet: Goblet = None, circlet: Circlet = None
):
    for piece, slot_type in zip([flower, feather, sands, goblet, circlet], [Flower, Feather, Sands, Goblet, Circlet]):
        if piece is None:
            continue
        if not isinstance(piece, slot_type):
            raise InvalidArgumentError(f"Expected a {slot_type.__name__}, received {type(piece).__name__}.")
        if piece.main_stat not in slot_type.main_stats():
            raise InvalidArgumentError(f"Invalid {piece.slot} main stat: {piece.main_stat}.")


class ArtifactBuilder:
    """Tracks substat rolls allocated across up to five artifacts and the most rolls each (stat, rarity) may take"""

    def __init__(
        self,
        flower: Flower = None,
        feather: Feather = None,
        sands: Sands = None,
        goblet: Goblet = None,
        circlet: Circlet = None,
    ):

        _validate_pieces(flower, feather, sands, goblet, circlet)

        # Save inputs
        self._flower = flower
        self._feather = feather
        self._sands = sands
        self._goblet = goblet
        self._circlet = circlet

        self._rolls: dict[RollKey, int] = {}
        self._constraints: dict[ConstraintKey, int] = {}
        self._roll_limit: int = None
        self._roll_rarity: int = max((piece.rarity for piece in self.pieces), default=None)

        # Sum each piece's capacity for every substat it could carry
        for stat in genshin_data.possible_sub_stats:
            for piece in self.pieces:
                if piece.main_stat != stat:
                    self._add_constraint(stat, piece.rarity, max_rolls_for_given(piece, stat))

    @classmethod
    def kqmc(
        cls,
        flower: Flower = None,
        feather: Feather = None,
        sands: Sands = None,
        goblet: Goblet = None,
        circlet: Circlet = None,
    ) -> ArtifactBuilder:
        """KQM standard conditions: 2 rolls per substat per piece, one roll per piece withheld, 2 average rolls of
        every substat already allocated"""

        _validate_pieces(flower, feather, sands, goblet, circlet)
        pieces = [piece for piece in [flower, feather, sands, goblet, circlet] if piece is not None]
        if len(pieces) == 0:
            raise InvalidArgumentError("KQMC builder requires at least one artifact.")
        for piece in pieces:
            if piece.rarity <= 3:
                raise InvalidArgumentError(f"Rarity must be > 3. Received {piece.rarity}* {piece.slot}.")
            if genshin_data.KQMC_LEVEL_BY_STARS.get(piece.rarity) != piece.level:
                raise InvalidArgumentError(
                    f"Invalid level/rarity combination: {piece.slot} is {piece.rarity}* level {piece.level}. "
                    f"KQMC requires 5* level 20 or 4* level 16."
                )

        builder = cls(flower, feather, sands, goblet, circlet)

        # Replace per-piece capacities with the fixed KQMC allowance
        builder._constraints = {}
        for stat in genshin_data.possible_sub_stats:
            for piece in pieces:
                if piece.main_stat != stat:
                    builder._add_constraint(stat, piece.rarity, genshin_data.KQMC_ROLLS_PER_PIECE)

        builder._roll_limit = sum(max_rolls_for(piece) for piece in pieces) - len(pieces) * (
            genshin_data.KQMC_RESERVED_ROLLS_PER_PIECE
        )
        baseline_rolls = len(genshin_data.possible_sub_stats) * genshin_data.KQMC_BASELINE_ROLLS
        if baseline_rolls > builder._roll_limit:
            raise InvalidArgumentError(
                f"KQMC pieces permit {builder._roll_limit} rolls, fewer than the {baseline_rolls} baseline rolls."
            )

        # Baseline rolls are always permitted, even for a stat that is the main stat of every piece
        roll_rarity = builder.roll_rarity
        for stat in genshin_data.possible_sub_stats:
            builder._add_constraint(stat, roll_rarity, genshin_data.KQMC_BASELINE_ROLLS)
            builder.roll(stat, RollQuality.AVG, roll_rarity, genshin_data.KQMC_BASELINE_ROLLS)

        return builder

    @classmethod
    def kqm_all_5_star(cls, sands_main: str, goblet_main: str, circlet_main: str) -> ArtifactBuilder:
        return cls.kqmc(
            Flower("FlatHP", rarity=5, level=20),
            Feather("FlatATK", rarity=5, level=20),
            Sands(sands_main, rarity=5, level=20),
            Goblet(goblet_main, rarity=5, level=20),
            Circlet(circlet_main, rarity=5, level=20),
        )

    @classmethod
    def kqm_all_4_star(cls, sands_main: str, goblet_main: str, circlet_main: str) -> ArtifactBuilder:
        builder = cls.kqmc(
            Flower("FlatHP", rarity=4, level=16),
            Feather("FlatATK", rarity=4, level=16),
            Sands(sands_main, rarity=4, level=16),
            Goblet(goblet_main, rarity=4, level=16),
            Circlet(circlet_main, rarity=4, level=16),
        )
        builder._swap_baseline_to_4_star()
        return builder

    @classmethod
    def kqm_all_4_star_with_5_star(
        cls, sands_main: str, goblet_main: str, circlet_main: str, five_star_index: int
    ) -> ArtifactBuilder:
        """Four star set except for one five star sands (0), goblet (1), or circlet (2)"""

        if five_star_index not in [0, 1, 2]:
            raise InvalidArgumentError(f"Invalid five star index: {five_star_index}. Must be 0, 1, or 2.")

        rarities = [4, 4, 4]
        rarities[five_star_index] = 5
        sands, goblet, circlet = [
            slot_type(main_stat, rarity=rarity, level=genshin_data.KQMC_LEVEL_BY_STARS[rarity])
            for slot_type, main_stat, rarity in zip(
                [Sands, Goblet, Circlet], [sands_main, goblet_main, circlet_main], rarities
            )
        ]
        builder = cls.kqmc(
            Flower("FlatHP", rarity=4, level=16),
            Feather("FlatATK", rarity=4, level=16),
            sands,
            goblet,
            circlet,
        )
        builder._swap_baseline_to_4_star()
        return builder

    def _swap_baseline_to_4_star(self):
        """Moves the 5* baseline rolls, along with their reserved allowance, to 4*"""
        baseline = genshin_data.KQMC_BASELINE_ROLLS
        swapped = False
        for stat in genshin_data.possible_sub_stats:
            if self.current_rolls_for_given(stat, RollQuality.AVG, 5) < baseline:
                continue
            self.unroll(stat, RollQuality.AVG, 5, baseline)
            self._add_constraint(stat, 5, -baseline)
            self._add_constraint(stat, 4, baseline)
            self.roll(stat, RollQuality.AVG, 4, baseline)
            swapped = True
        if swapped:
            self._roll_rarity = 4

    def _add_constraint(self, stat: str, rarity: int, rolls: int):
        key = (stat, rarity)
        self._constraints[key] = self._constraints.get(key, 0) + rolls

    @property
    def flower(self) -> Flower:
        return self._flower

    @property
    def feather(self) -> Feather:
        return self._feather

    @property
    def sands(self) -> Sands:
        return self._sands

    @property
    def goblet(self) -> Goblet:
        return self._goblet

    @property
    def circlet(self) -> Circlet:
        return self._circlet

    @property
    def pieces(self) -> list[Artifact]:
        pieces = [self._flower, self._feather, self._sands, self._goblet, self._circlet]
        return [piece for piece in pieces if piece is not None]

    @property
    def roll_rarity(self) -> int:
        return self._roll_rarity

    def roll(self, stat: str, quality: Union[RollQuality, str], rarity: int, num: int = 1):
        """Allocates num rolls. Raises if the (stat, rarity) allowance would be exceeded."""

        quality = RollQuality(quality)
        if not is_valid_substat(stat):
            raise InvalidArgumentError(f"Invalid substat type: {stat}.")
        if num <= 0:
            raise InvalidArgumentError(f"Number of rolls must be positive. Received {num}.")

        current = self.current_rolls_for_stat(stat, rarity)
        constraint = self.substat_constraint(stat, rarity)
        if current + num > constraint:
            raise RollConstraintError(stat, rarity, current, num, constraint)

        key = (stat, quality, rarity)
        self._rolls[key] = self._rolls.get(key, 0) + num

    def unroll(self, stat: str, quality: Union[RollQuality, str], rarity: int, num: int = 1):
        """Removes num rolls. Does nothing if fewer than num rolls are allocated."""

        quality = RollQuality(quality)
        if not is_valid_substat(stat):
            raise InvalidArgumentError(f"Invalid substat type: {stat}.")
        if num <= 0:
            raise InvalidArgumentError(f"Number of rolls must be positive. Received {num}.")

        key = (stat, quality, rarity)
        current = self._rolls.get(key, 0)
        if current == 0 or num > current:
            return
        if current == num:
            del self._rolls[key]
        else:
            self._rolls[key] = current - num

    def current_rolls(self) -> int:
        return sum(self._rolls.values())

    def current_rolls_for_given(self, stat: str, quality: Union[RollQuality, str], rarity: int) -> int:
        return self._rolls.get((stat, RollQuality(quality), rarity), 0)

    def current_rolls_for_stat(self, stat: str, rarity: int) -> int:
        """Rolls summed over every quality"""
        return sum(
            num for (key_stat, _, key_rarity), num in self._rolls.items() if key_stat == stat and key_rarity == rarity
        )

    def max_rolls(self) -> int:
        if self._roll_limit is not None:
            return self._roll_limit
        return sum(max_rolls_for(piece) for piece in self.pieces)

    def substat_constraint(self, stat: str, rarity: int) -> int:
        return self._constraints.get((stat, rarity), 0)

    def rolls_left(self) -> int:
        return self.max_rolls() - self.current_rolls()

    def rolls_left_for_given(self, stat: str, rarity: int) -> int:
        return self.substat_constraint(stat, rarity) - self.current_rolls_for_stat(stat, rarity)

    def main_stats(self) -> StatTable:
        stats = StatTable()
        for piece in self.pieces:
            stats.add(piece.main_stat, get_main_stat_value(piece.main_stat, piece.rarity, piece.level))
        return stats

    def sub_stats(self) -> StatTable:
        stats = StatTable()
        for (stat, quality, rarity), num in self._rolls.items():
            stats.add(stat, get_sub_stat_value(stat, rarity) * quality.multiplier * num)
        return stats

    def build(self) -> StatTable:
        return StatTableBuilder().add_table(self.main_stats()).add_table(self.sub_stats()).build()

    def substat_roll_counts(self) -> dict[str, int]:
        """Total rolls per substat across qualities and rarities"""
        roll_counts = {}
        for stat in genshin_data.possible_sub_stats:
            rolls = sum(num for (key_stat, _, _), num in self._rolls.items() if key_stat == stat)
            if rolls > 0:
                roll_counts[stat] = rolls
        return roll_counts

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "stat": stat,
                "quality": quality.value,
                "rarity": rarity,
                "rolls": num,
                "value": get_sub_stat_value(stat, rarity) * quality.multiplier * num,
            }
            for (stat, quality, rarity), num in self._rolls.items()
        ]
        return pd.DataFrame(rows, columns=["stat", "quality", "rarity", "rolls", "value"])
