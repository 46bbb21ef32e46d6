import pytest

from artifact_forge.artifact import (
    Circlet,
    Feather,
    Flower,
    Goblet,
    RollQuality,
    Sands,
    get_main_stat_value,
    get_sub_stat_value,
    get_substat_roll_value,
    is_valid_substat,
    make_artifact,
    max_rolls_for,
    max_rolls_for_given,
    validate_rarity_and_level,
)
from artifact_forge.errors import FixtureLookupError, InvalidArgumentError
from artifact_forge.stat_table import StatTable


class TestArtifactValidation:
    def test_fixed_main_stats(self) -> None:
        assert Flower("FlatHP").main_stat == "FlatHP"
        assert Feather("FlatATK").main_stat == "FlatATK"
        with pytest.raises(InvalidArgumentError):
            Flower("FlatATK")
        with pytest.raises(InvalidArgumentError):
            Feather("FlatHP")

    def test_slot_specific_main_stats(self) -> None:
        assert Sands("EnergyRecharge").main_stat == "EnergyRecharge"
        assert Goblet("DendroDMGBonus").main_stat == "DendroDMGBonus"
        assert Circlet("HealingBonus").main_stat == "HealingBonus"
        with pytest.raises(InvalidArgumentError):
            Goblet("EnergyRecharge")
        with pytest.raises(InvalidArgumentError):
            Sands("CritRate")
        with pytest.raises(InvalidArgumentError):
            Circlet("PyroDMGBonus")

    def test_substat_cannot_equal_main_stat(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Sands("ATKPercent", substats=StatTable(("ATKPercent", 0.05)))

    def test_substat_must_be_valid(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Sands("ATKPercent", substats=StatTable(("HealingBonus", 0.05)))

    def test_rarity_and_level_bounds(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Flower("FlatHP", rarity=6)
        with pytest.raises(InvalidArgumentError):
            Flower("FlatHP", rarity=5, level=21)
        with pytest.raises(InvalidArgumentError):
            Flower("FlatHP", rarity=4, level=20)
        with pytest.raises(InvalidArgumentError):
            Flower("FlatHP", rarity=5, level=-1)

    def test_level_defaults_to_max(self) -> None:
        assert Flower("FlatHP", rarity=5).level == 20
        assert Flower("FlatHP", rarity=3).level == 12
        assert Flower("FlatHP", rarity=1).max_level == 4

    def test_validate_rarity_and_level(self) -> None:
        assert validate_rarity_and_level(5) == 20
        assert validate_rarity_and_level(4, 8) == 8
        with pytest.raises(InvalidArgumentError):
            validate_rarity_and_level(0, 0)
        with pytest.raises(InvalidArgumentError):
            validate_rarity_and_level(2, 5)


class TestMakeArtifact:
    def test_by_slot_name(self) -> None:
        goblet = make_artifact("goblet", "PyroDMGBonus", rarity=4, level=16)

        assert isinstance(goblet, Goblet)
        assert goblet.slot == "goblet"
        assert goblet.rarity == 4

    def test_unknown_slot(self) -> None:
        with pytest.raises(InvalidArgumentError):
            make_artifact("hat", "CritRate")


class TestArtifactStats:
    def test_stats_include_main_stat(self) -> None:
        circlet = Circlet("CritRate", substats=StatTable(("CritDMG", 0.0777), ("FlatATK", 19.45)))
        stats = circlet.stats()

        assert stats.get("CritRate") == pytest.approx(0.311)
        assert stats.get("CritDMG") == pytest.approx(0.0777)
        assert stats.get("FlatATK") == pytest.approx(19.45)

    def test_to_string_table(self) -> None:
        line = Circlet("CritRate", substats=StatTable(("CritDMG", 0.0777))).to_string_table()

        assert "Circlet" in line
        assert "Crit Rate %" in line
        assert "7.8%" in line


class TestMainStatValues:
    @pytest.mark.parametrize(
        "stat, value",
        [
            ("FlatHP", 4780),
            ("FlatATK", 311),
            ("HPPercent", 0.466),
            ("ATKPercent", 0.466),
            ("PyroDMGBonus", 0.466),
            ("PhysicalDMGBonus", 0.583),
            ("CritRate", 0.311),
            ("CritDMG", 0.622),
            ("EnergyRecharge", 0.518),
            ("ElementalMastery", 187),
        ],
    )
    def test_five_star_level_20(self, stat: str, value: float) -> None:
        assert get_main_stat_value(stat) == pytest.approx(value)

    def test_lower_levels_and_rarities(self) -> None:
        assert get_main_stat_value("FlatHP", rarity=5, level=0) == pytest.approx(717)
        assert get_main_stat_value("PhysicalDMGBonus", rarity=5, level=4) == pytest.approx(0.186)
        assert get_main_stat_value("FlatATK", rarity=4, level=16) == pytest.approx(232)
        assert get_main_stat_value("FlatHP", rarity=1, level=4) == pytest.approx(258)

    def test_level_clamps_to_max(self) -> None:
        assert get_main_stat_value("FlatHP", rarity=4, level=20) == pytest.approx(3571)

    def test_non_main_stat_reads_zero(self) -> None:
        assert get_main_stat_value("FlatDEF") == 0.0

    def test_unknown_rarity(self) -> None:
        with pytest.raises(FixtureLookupError):
            get_main_stat_value("FlatHP", rarity=6)


class TestSubstatValues:
    def test_max_tier_value(self) -> None:
        assert get_sub_stat_value("CritRate", 5) == pytest.approx(0.0389)
        assert get_sub_stat_value("FlatHP", 4) == pytest.approx(239.0)

    def test_tiers(self) -> None:
        assert get_substat_roll_value("CritDMG", 5, 3) == pytest.approx(0.0544)
        assert get_substat_roll_value("FlatATK", 1, 2) == 0.0

    def test_missing_fixture(self) -> None:
        with pytest.raises(FixtureLookupError):
            get_sub_stat_value("HealingBonus", 5)
        with pytest.raises(FixtureLookupError):
            get_sub_stat_value("CritRate", 0)

    def test_valid_substats(self) -> None:
        assert is_valid_substat("CritRate")
        assert not is_valid_substat("HealingBonus")
        assert not is_valid_substat("PyroDMGBonus")


class TestRollFormulas:
    def test_max_rolls_for(self) -> None:
        assert max_rolls_for(Flower("FlatHP", rarity=5, level=20)) == 9
        assert max_rolls_for(Flower("FlatHP", rarity=4, level=16)) == 7
        assert max_rolls_for(Flower("FlatHP", rarity=5, level=0)) == 4

    def test_max_rolls_for_given(self) -> None:
        flower = Flower("FlatHP", rarity=5, level=20)

        assert max_rolls_for_given(flower, "FlatHP") == 0
        assert max_rolls_for_given(flower, "CritRate") == 6
        assert max_rolls_for_given(flower, "CritRate", worst_case=True) == 5


class TestRollQuality:
    def test_multipliers(self) -> None:
        assert RollQuality.MAX.multiplier == 1.0
        assert RollQuality.HIGH.multiplier == 0.9
        assert RollQuality.MID.multiplier == 0.8
        assert RollQuality.LOW.multiplier == 0.7
        assert RollQuality.AVG.multiplier == pytest.approx(0.85)

    def test_from_string(self) -> None:
        assert RollQuality("AVG") is RollQuality.AVG
