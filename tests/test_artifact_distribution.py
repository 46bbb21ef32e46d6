import pandas as pd
import pytest

from artifact_forge import analysis, genshin_data
from artifact_forge.artifact_factory import get_available_substats, pick_weighted, select_main_stat, select_roll_tier
from artifact_forge.rng import SeededRng

SAMPLES = 10000
TOLERANCE = 0.05


@pytest.fixture(scope="module")
def leveled_goblets() -> pd.DataFrame:
    return analysis.sample_artifacts("goblet", rarity=5, level=20, samples=SAMPLES, rng=SeededRng(20240601))


@pytest.fixture(scope="module")
def unleveled_sands() -> pd.DataFrame:
    return analysis.sample_artifacts("sands", rarity=5, level=0, samples=SAMPLES, rng=SeededRng(8675309))


class TestArtifactDistribution:
    def test_level_20_always_has_four_substats(self, leveled_goblets: pd.DataFrame) -> None:
        assert (leveled_goblets["substat_count"] == 4).all()

    def test_main_stat_never_a_substat(self, leveled_goblets: pd.DataFrame) -> None:
        for main_stat in genshin_data.possible_sub_stats:
            rows = leveled_goblets[leveled_goblets["main_stat"] == main_stat]
            assert (rows[main_stat] == 0).all()

    @pytest.mark.parametrize("slot", genshin_data.slot_names)
    def test_main_stats_converge(self, slot: str) -> None:
        rng = SeededRng(len(slot))
        draws = pd.Series([select_main_stat(slot, rng) for _ in range(SAMPLES)])
        observed = draws.value_counts(normalize=True)
        expected = analysis.expected_frequencies(genshin_data.main_stat_drop_rate[slot])

        assert set(observed.index) <= set(expected.index)
        assert analysis.max_frequency_deviation(observed, expected) < TOLERANCE

    def test_sampled_goblet_main_stats_converge(self, leveled_goblets: pd.DataFrame) -> None:
        observed = analysis.main_stat_frequencies(leveled_goblets)
        expected = analysis.expected_frequencies(genshin_data.main_stat_drop_rate["goblet"])

        assert analysis.max_frequency_deviation(observed, expected) < TOLERANCE

    @pytest.mark.parametrize(
        "slot, main_stat",
        [("circlet", "CritRate"), ("flower", "FlatHP"), ("sands", "EnergyRecharge"), ("goblet", "PyroDMGBonus")],
    )
    def test_substat_selection_converges(self, slot: str, main_stat: str) -> None:
        rng = SeededRng(len(slot) * 100 + len(main_stat))
        weights = get_available_substats(slot, main_stat)
        draws = pd.Series([pick_weighted(weights, rng) for _ in range(SAMPLES)])
        observed = draws.value_counts(normalize=True)
        expected = analysis.expected_frequencies(weights)

        assert main_stat not in observed.index
        assert set(observed.index) <= set(expected.index)
        assert analysis.max_frequency_deviation(observed, expected) < TOLERANCE

    def test_initial_substat_counts_converge(self, unleveled_sands: pd.DataFrame) -> None:
        observed = analysis.substat_count_frequencies(unleveled_sands)
        expected = genshin_data.initial_substat_counts[5]

        assert set(observed.index) == {3, 4}
        assert analysis.max_frequency_deviation(observed, expected) < TOLERANCE

    @pytest.mark.parametrize("rarity", [1, 2, 5])
    def test_roll_tiers_converge(self, rarity: int) -> None:
        rng = SeededRng(rarity)
        tiers = pd.Series([select_roll_tier(rarity, rng) for _ in range(SAMPLES)])
        observed = tiers.value_counts(normalize=True)
        expected = analysis.expected_frequencies(pd.Series(genshin_data.roll_tier_probabilities[rarity]))

        assert analysis.max_frequency_deviation(observed, expected) < TOLERANCE
