import matplotlib

matplotlib.use("Agg")

import pytest

from artifact_forge.artifact import Circlet, Feather, Flower, Goblet, Sands
from artifact_forge.power_calculator import dmg_formula
from artifact_forge.stat_table import Rotation, StatTable


@pytest.fixture
def atk_rotation() -> Rotation:
    """Single pyro normal attack scaling off ATK."""
    rotation = Rotation([])
    rotation.add(("atk", dmg_formula("Pyro", "Normal", 1.0)))
    return rotation


@pytest.fixture
def default_pieces() -> tuple[Flower, Feather, Sands, Goblet, Circlet]:
    return (
        Flower("FlatHP", rarity=5, level=20),
        Feather("FlatATK", rarity=5, level=20),
        Sands("ATKPercent", rarity=5, level=20),
        Goblet("PyroDMGBonus", rarity=5, level=20),
        Circlet("CritRate", rarity=5, level=20),
    )


@pytest.fixture
def base_stats() -> StatTable:
    return StatTable(
        ("BaseATK", 844.85),
        ("ATKPercent", 0.2),
        ("FlatATK", 1000.0),
        ("CritRate", 0.05),
        ("CritDMG", 0.5),
        ("EnergyRecharge", 1.0),
    )
