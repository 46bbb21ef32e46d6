"""A module for generating Genshin Impact artifacts and optimizing them against a rotation"""

from .artifact import Circlet, Feather, Flower, Goblet, RollQuality, Sands, make_artifact
from .artifact_builder import ArtifactBuilder
from .artifact_factory import generate_artifact
from .optimizer import (
    gradient_5_star_kqmc_artifact_substat_optimizer,
    optimal_kqmc_5_artifacts_stats,
    optimal_main_stats,
)
from .rng import DefaultRng, MockRng, Rng, SeededRng
from .stat_table import Rotation, StatTable, StatTableBuilder, compose, stat_from_string
