import logging
import logging.config
import os

import matplotlib.pyplot as plt

dir_path = os.path.dirname(os.path.realpath(__file__))
config_path = os.path.join(dir_path, "logging.conf")
logging.config.fileConfig(config_path)

from artifact_forge import analysis, genshin_data, graphing
from artifact_forge.artifact_factory import generate_artifact
from artifact_forge.optimizer import optimal_kqmc_5_artifacts_stats
from artifact_forge.power_calculator import dmg_formula
from artifact_forge.rng import SeededRng
from artifact_forge.stat_table import Rotation, StatTable

log = logging.getLogger("artifact_forge.main")

rng = SeededRng(seed=42)

# Roll a few artifacts
log.info("-" * 140)
log.info("GENERATED ARTIFACTS")
log.info("")
for slot in genshin_data.slot_names:
    log.info(generate_artifact(slot=slot, rarity=5, level=20, rng=rng).to_string_table())
log.info("")

# Compare sampled goblet main stats against their drop rates
goblets = analysis.sample_artifacts(slot="goblet", rarity=5, level=20, samples=10000, rng=rng)
observed = analysis.main_stat_frequencies(goblets)
expected = analysis.expected_frequencies(genshin_data.main_stat_drop_rate["goblet"])
log.info(f"Largest goblet main stat frequency deviation: {analysis.max_frequency_deviation(observed, expected):.4f}")

# Ayaka with Mistsplitter Reforged
ayaka = StatTable(
    ("BaseATK", 342 + 674),
    ("CritRate", 0.05),
    ("CritDMG", 0.5 + 0.441 + 0.384),
    ("ATKPercent", 0.88),
    ("CritRate", 0.55),
    ("CryoDMGBonus", 0.73),
    ("NormalATKDMGBonus", 0.3),
    ("ChargeATKDMGBonus", 0.3),
    ("CryoResistanceReduction", 0.4),
)
rotation = Rotation(
    [
        ("N1", dmg_formula("Cryo", "Normal", 0.84)),
        ("N2", dmg_formula("Cryo", "Normal", 0.894)),
        ("CA", dmg_formula("Cryo", "Charged", 3.039)),
        ("Skill", dmg_formula("Cryo", "Skill", 4.07)),
        ("Burst Cuts", dmg_formula("Cryo", "Burst", 1.91, instances=19)),
        ("Burst Explosion", dmg_formula("Cryo", "Burst", 2.86)),
    ]
)

artifact_stats = optimal_kqmc_5_artifacts_stats(ayaka, rotation, energy_recharge_requirement=1.2)
analysis.log_optimization_report(base_stats=ayaka, rotation=rotation, artifact_stats=artifact_stats)

graphing.graph_main_stat_frequencies(observed, expected, title="5* Goblet Main Stats")
graphing.graph_substat_distribution(goblets, "CritDMG", title="5* Goblet Crit DMG")
plt.show()
