import pytest

from artifact_forge.artifact import Circlet, Feather, Flower, Goblet, Sands, get_main_stat_value
from artifact_forge.errors import InvalidArgumentError, RequirementUnsatisfiableError
from artifact_forge.optimizer import (
    gradient_5_star_kqmc_artifact_substat_optimizer,
    optimal_kqmc_5_artifacts_stats,
    optimal_main_stats,
    relu_heuristic,
    stat_gradients,
)
from artifact_forge.stat_table import Rotation, StatTable


@pytest.fixture
def main_stat_base() -> StatTable:
    return StatTable(
        ("BaseATK", 100.0),
        ("ATKPercent", 0.5),
        ("FlatATK", 100.0),
        ("CritRate", 0.05),
        ("CritDMG", 0.5),
        ("ElementalMastery", 100.0),
    )


def _with_main_stats(stats: StatTable, main_stats: tuple[str, str, str]) -> StatTable:
    combined = stats.clone()
    for main_stat in main_stats:
        combined.add(main_stat, get_main_stat_value(main_stat))
    return combined


class TestGradients:
    def test_stat_gradients(self) -> None:
        rotation = Rotation(lambda stats: 2 * stats.get("FlatATK"))
        gradients = stat_gradients(StatTable(("FlatATK", 10.0)), rotation, {"FlatATK": 1.0, "CritRate": 1.0})

        assert gradients["FlatATK"] == pytest.approx(2.0)
        assert gradients["CritRate"] == 0.0

    def test_relu_heuristic(self) -> None:
        rotation = Rotation(lambda stats: stats.get("FlatATK") - stats.get("FlatDEF"))
        slopes = {"FlatDEF": 1.0, "CritRate": 1.0, "FlatATK": 1.0}

        assert relu_heuristic(StatTable(), rotation, slopes) == ["FlatATK"]


class TestOptimalMainStats:
    def test_improves_rotation(self, main_stat_base: StatTable, atk_rotation: Rotation) -> None:
        main_stats = optimal_main_stats(main_stat_base, atk_rotation)

        assert atk_rotation.execute(_with_main_stats(main_stat_base, main_stats)) > atk_rotation.execute(
            main_stat_base
        )

    def test_atk_scaling_choice(self, main_stat_base: StatTable, atk_rotation: Rotation) -> None:
        assert optimal_main_stats(main_stat_base, atk_rotation) == ("ATKPercent", "PyroDMGBonus", "ATKPercent")

    def test_locally_optimal(self, main_stat_base: StatTable, atk_rotation: Rotation) -> None:
        main_stats = optimal_main_stats(main_stat_base, atk_rotation)
        best = atk_rotation.execute(_with_main_stats(main_stat_base, main_stats))

        for index, slot_type in enumerate([Sands, Goblet, Circlet]):
            for alternative in slot_type.main_stats():
                swapped = list(main_stats)
                swapped[index] = alternative
                assert atk_rotation.execute(_with_main_stats(main_stat_base, tuple(swapped))) <= best

    def test_first_seen_wins_ties(self, main_stat_base: StatTable, atk_rotation: Rotation) -> None:
        main_stats = optimal_main_stats(
            main_stat_base, atk_rotation, main_stat_value=lambda stat: 1.0 if stat == "CritDMG" else 0.0
        )

        assert main_stats == ("ATKPercent", "ATKPercent", "CritDMG")

    def test_no_improvement_returns_sentinel(self, main_stat_base: StatTable) -> None:
        assert optimal_main_stats(main_stat_base, Rotation(lambda stats: 1.0)) == ("None", "None", "None")


class TestSubstatOptimizer:
    def test_within_roll_budget(self, base_stats: StatTable, atk_rotation: Rotation, default_pieces) -> None:
        roll_counts = gradient_5_star_kqmc_artifact_substat_optimizer(
            base_stats, atk_rotation, *default_pieces, energy_recharge_requirement=1.0
        )

        assert len(roll_counts) > 0
        assert sum(roll_counts.values()) <= 40
        assert all(rolls >= 2 for rolls in roll_counts.values())

    def test_greedy_until_saturated(self, default_pieces) -> None:
        flower, feather, sands, goblet, _ = default_pieces
        circlet = Circlet("CritDMG", rarity=5, level=20)
        rotation = Rotation(lambda stats: stats.get("CritRate"))
        stats = StatTable(("EnergyRecharge", 1.0))

        roll_counts = gradient_5_star_kqmc_artifact_substat_optimizer(
            stats, rotation, flower, feather, sands, goblet, circlet
        )

        assert roll_counts["CritRate"] == 12
        assert roll_counts["CritDMG"] == 2
        assert sum(roll_counts.values()) == 30

    def test_saturates_every_useful_substat(self, default_pieces) -> None:
        rotation = Rotation(lambda stats: stats.get("FlatDEF") + stats.get("FlatHP"))
        stats = StatTable(("EnergyRecharge", 1.0))

        roll_counts = gradient_5_star_kqmc_artifact_substat_optimizer(stats, rotation, *default_pieces)

        assert roll_counts["FlatHP"] == 10
        assert roll_counts["FlatDEF"] == 12

    def test_meets_energy_recharge_requirement(self, base_stats: StatTable, atk_rotation: Rotation, default_pieces):
        roll_counts = gradient_5_star_kqmc_artifact_substat_optimizer(
            base_stats, atk_rotation, *default_pieces, energy_recharge_requirement=1.3
        )

        assert roll_counts["EnergyRecharge"] >= 6
        assert 1.0 + roll_counts["EnergyRecharge"] * 0.0648 * 0.85 >= 1.3

    def test_unsatisfiable_energy_recharge(self, atk_rotation: Rotation, default_pieces) -> None:
        stats = StatTable(
            ("BaseATK", 106.0),
            ("BaseHP", 15552.0),
            ("BaseDEF", 876.0),
            ("CritRate", 0.05),
            ("CritDMG", 0.5),
            ("EnergyRecharge", 1.0),
        )

        with pytest.raises(
            RequirementUnsatisfiableError, match="Energy Recharge requirements cannot be met with substats alone"
        ):
            gradient_5_star_kqmc_artifact_substat_optimizer(
                stats, atk_rotation, *default_pieces, energy_recharge_requirement=3.0
            )

    def test_energy_recharge_main_stat(self, atk_rotation: Rotation) -> None:
        stats = StatTable(
            ("BaseATK", 337.0),
            ("BaseHP", 12907.0),
            ("BaseDEF", 789.0),
            ("CritRate", 0.05),
            ("CritDMG", 0.5),
            ("EnergyRecharge", 1.32),
            ("FlatATK", 900.0),
        )
        pieces = (
            Flower("FlatHP", rarity=5, level=20),
            Feather("FlatATK", rarity=5, level=20),
            Sands("EnergyRecharge", rarity=5, level=20),
            Goblet("ElectroDMGBonus", rarity=5, level=20),
            Circlet("CritRate", rarity=5, level=20),
        )

        roll_counts = gradient_5_star_kqmc_artifact_substat_optimizer(
            stats, atk_rotation, *pieces, energy_recharge_requirement=1.8
        )

        assert roll_counts["EnergyRecharge"] >= 2
        assert 1.32 + 0.518 + roll_counts["EnergyRecharge"] * 0.0648 * 0.85 >= 1.8

    def test_requires_five_pieces(self, base_stats: StatTable, atk_rotation: Rotation, default_pieces) -> None:
        flower, feather, sands, goblet, _ = default_pieces

        with pytest.raises(InvalidArgumentError):
            gradient_5_star_kqmc_artifact_substat_optimizer(
                base_stats, atk_rotation, flower, feather, sands, goblet, None
            )


class TestOptimalKqmc5ArtifactsStats:
    def test_improves_rotation(self, atk_rotation: Rotation) -> None:
        stats = StatTable(
            ("BaseATK", 106.0 + 454.0),
            ("BaseHP", 15552.0),
            ("BaseDEF", 876.0),
            ("CritRate", 0.05),
            ("CritDMG", 0.5),
            ("EnergyRecharge", 1.0),
            ("ElementalMastery", 221.0),
        )

        artifact_stats = optimal_kqmc_5_artifacts_stats(stats, atk_rotation, 1.0)

        assert atk_rotation.execute(stats.merge(artifact_stats)) > atk_rotation.execute(stats)
        assert artifact_stats.get("FlatHP") >= 4780
        assert artifact_stats.get("FlatATK") >= 311
        assert artifact_stats.get("PyroDMGBonus") == pytest.approx(0.466)

    def test_no_useful_main_stats(self) -> None:
        with pytest.raises(InvalidArgumentError):
            optimal_kqmc_5_artifacts_stats(StatTable(("EnergyRecharge", 1.0)), Rotation(lambda stats: 1.0))
