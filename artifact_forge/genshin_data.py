"""Static Genshin data required to generate, build, and optimize artifacts"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

stat_names = [
    "BaseHP",
    "FlatHP",
    "HPPercent",
    "BaseATK",
    "FlatATK",
    "ATKPercent",
    "BaseDEF",
    "FlatDEF",
    "DEFPercent",
    "ElementalMastery",
    "CritRate",
    "CritDMG",
    "EnergyRecharge",
    "DMGBonus",
    "ElementalDMGBonus",
    "PyroDMGBonus",
    "CryoDMGBonus",
    "GeoDMGBonus",
    "DendroDMGBonus",
    "ElectroDMGBonus",
    "HydroDMGBonus",
    "AnemoDMGBonus",
    "PhysicalDMGBonus",
    "NormalATKDMGBonus",
    "ChargeATKDMGBonus",
    "PlungeATKDMGBonus",
    "SkillDMGBonus",
    "BurstDMGBonus",
    "HealingBonus",
    "None",
    "ReactionBonus",
    "DefReduction",
    "DefIgnore",
    "PyroResistanceReduction",
    "HydroResistanceReduction",
    "ElectroResistanceReduction",
    "CryoResistanceReduction",
    "AnemoResistanceReduction",
    "GeoResistanceReduction",
    "DendroResistanceReduction",
    "PhysicalResistanceReduction",
]

# Placeholder stat used when no main stat improves a rotation
no_stat = "None"

elements = ["Pyro", "Cryo", "Geo", "Dendro", "Electro", "Hydro", "Anemo", "Physical"]

elemental_dmg_bonuses = [f"{element}DMGBonus" for element in elements if element != "Physical"]

# Stats stored as raw numbers, every other stat is a fraction (0.466 == 46.6%)
flat_stats = ["BaseHP", "FlatHP", "BaseATK", "FlatATK", "BaseDEF", "FlatDEF", "ElementalMastery"]

possible_sub_stats = [
    "HPPercent",
    "FlatHP",
    "ATKPercent",
    "FlatATK",
    "DEFPercent",
    "FlatDEF",
    "ElementalMastery",
    "CritRate",
    "CritDMG",
    "EnergyRecharge",
]

slot_names = ["flower", "feather", "sands", "goblet", "circlet"]

# fmt: off
stat2output_map = {
    "BaseHP":           "Base HP",
    "FlatHP":           "HP",
    "HPPercent":        "HP %",
    "BaseATK":          "Base ATK",
    "FlatATK":          "ATK",
    "ATKPercent":       "ATK %",
    "BaseDEF":          "Base DEF",
    "FlatDEF":          "DEF",
    "DEFPercent":       "DEF %",
    "ElementalMastery": "EM",
    "CritRate":         "Crit Rate %",
    "CritDMG":          "Crit DMG %",
    "EnergyRecharge":   "Energy Recharge %",
    "DMGBonus":         "DMG %",
    "PyroDMGBonus":     "Pyro DMG %",
    "CryoDMGBonus":     "Cryo DMG %",
    "GeoDMGBonus":      "Geo DMG %",
    "DendroDMGBonus":   "Dendro DMG %",
    "ElectroDMGBonus":  "Electro DMG %",
    "HydroDMGBonus":    "Hydro DMG %",
    "AnemoDMGBonus":    "Anemo DMG %",
    "PhysicalDMGBonus": "Physical DMG %",
    "HealingBonus":     "Healing Bonus %",
}

max_level_by_stars = {1: 4, 2: 4, 3: 12, 4: 16, 5: 20}

# One upgrade event occurs every UPGRADE_INTERVAL levels
UPGRADE_INTERVAL = 4
MAX_SUBSTATS = 4

# KQM standard conditions
KQMC_LEVEL_BY_STARS = {5: 20, 4: 16}
KQMC_ROLLS_PER_PIECE = 2
KQMC_BASELINE_ROLLS = 2
KQMC_RESERVED_ROLLS_PER_PIECE = 1


# Source:
# https://genshin-impact.fandom.com/wiki/Artifacts/Scaling
# Values are percentages for percent stats, converted to fractions below
# 1* and 2* intermediate levels are linearly interpolated between level 0 and max level
_main_stat_scaling_percent = {
    1: {
        "FlatHP":           np.linspace(129, 258, 5).round(),
        "FlatATK":          np.linspace(8, 17, 5).round(),
        "HPPercent":        np.linspace(3.1, 6.2, 5).round(1),
        "DEFPercent":       np.linspace(3.9, 7.7, 5).round(1),
        "ElementalMastery": np.linspace(12.6, 24.8, 5).round(1),
        "EnergyRecharge":   np.linspace(3.5, 6.9, 5).round(1),
        "CritRate":         np.linspace(2.1, 4.2, 5).round(1),
        "CritDMG":          np.linspace(4.2, 8.3, 5).round(1),
        "HealingBonus":     np.linspace(2.4, 4.8, 5).round(1),
    },
    2: {
        "FlatHP":           np.linspace(258, 552, 5).round(),
        "FlatATK":          np.linspace(17, 36, 5).round(),
        "HPPercent":        np.linspace(4.2, 9.0, 5).round(1),
        "DEFPercent":       np.linspace(5.2, 11.2, 5).round(1),
        "ElementalMastery": np.linspace(16.8, 35.9, 5).round(1),
        "EnergyRecharge":   np.linspace(4.7, 10.0, 5).round(1),
        "CritRate":         np.linspace(2.8, 6.0, 5).round(1),
        "CritDMG":          np.linspace(5.6, 12.0, 5).round(1),
        "HealingBonus":     np.linspace(3.2, 6.9, 5).round(1),
    },
    3: {
        "FlatHP":           [430, 	552, 	674, 	796, 	918, 	1040, 	1162, 	1283, 	1405, 	1527, 	1649, 	1771, 	1893],
        "FlatATK":          [28, 	36, 	44, 	52, 	60, 	68, 	76, 	84, 	91, 	99, 	107, 	115, 	123],
        "HPPercent":        [5.2, 	6.7, 	8.2, 	9.7, 	11.2, 	12.7, 	14.2, 	15.6, 	17.1, 	18.6, 	20.1, 	21.6, 	23.1],
        "DEFPercent":       [6.6, 	8.4, 	10.3, 	12.1, 	14.0, 	15.8, 	17.7, 	19.6, 	21.4, 	23.3, 	25.1, 	27.0, 	28.8],
        "ElementalMastery": [21, 	27, 	33, 	39, 	45, 	51, 	57, 	63, 	69, 	75, 	80, 	86, 	92],
        "EnergyRecharge":   [5.8, 	7.5, 	9.1, 	10.8, 	12.4, 	14.1, 	15.7, 	17.4, 	19.0, 	20.7, 	22.3, 	24.0, 	25.6],
        "CritRate":         [3.5, 	4.5, 	5.5, 	6.5, 	7.5, 	8.4, 	9.4, 	10.4, 	11.4, 	12.4, 	13.4, 	14.4, 	15.4],
        "CritDMG":          [7.0, 	9.0, 	11.0, 	12.9, 	14.9, 	16.9, 	18.9, 	20.9, 	22.8, 	24.8, 	26.8, 	28.8, 	30.8],
        "HealingBonus":     [4.0, 	5.2, 	6.3, 	7.5, 	8.6, 	9.8, 	10.9, 	12.0, 	13.2, 	14.3, 	15.5, 	16.6, 	17.8],
    },
    4: {
        "FlatHP":           [645, 	828, 	1011, 	1194, 	1377, 	1559, 	1742, 	1925, 	2108, 	2291, 	2474, 	2657, 	2839, 	3022, 	3205, 	3388, 	3571],
        "FlatATK":          [42, 	54, 	66, 	78, 	90, 	102, 	113, 	125, 	137, 	149, 	161, 	173, 	185, 	197, 	209, 	221, 	232],
        "HPPercent":        [6.3, 	8.1, 	9.9, 	11.6, 	13.4, 	15.2, 	17.0, 	18.8, 	20.6, 	22.3, 	24.1, 	25.9, 	27.7, 	29.5, 	31.3, 	33.0, 	34.8],
        "DEFPercent":       [7.9, 	10.1, 	12.3, 	14.6, 	16.8, 	19.0, 	21.2, 	23.5, 	25.7, 	27.9, 	30.2, 	32.4, 	34.6, 	36.8, 	39.1, 	41.3, 	43.5],
        "ElementalMastery": [25, 	32, 	39, 	47, 	54, 	61, 	68, 	75, 	82, 	89, 	97, 	104, 	111, 	118, 	125, 	132, 	139],
        "EnergyRecharge":   [7.0, 	9.0, 	11.0, 	12.9, 	14.9, 	16.9, 	18.9, 	20.9, 	22.8, 	24.8, 	26.8, 	28.8, 	30.8, 	32.8, 	34.7, 	36.7, 	38.7],
        "CritRate":         [4.2, 	5.4, 	6.6, 	7.8, 	9.0, 	10.1, 	11.3, 	12.5, 	13.7, 	14.9, 	16.1, 	17.3, 	18.5, 	19.7, 	20.8, 	22.0, 	23.2],
        "CritDMG":          [8.4, 	10.8, 	13.1, 	15.5, 	17.9, 	20.3, 	22.7, 	25.0, 	27.4, 	29.8, 	32.2, 	34.5, 	36.9, 	39.3, 	41.7, 	44.1, 	46.4],
        "HealingBonus":     [4.8, 	6.2, 	7.6, 	9.0, 	10.3, 	11.7, 	13.1, 	14.4, 	15.8, 	17.2, 	18.6, 	19.9, 	21.3, 	22.7, 	24.0, 	25.4, 	26.8],
    },
    5: {
        "FlatHP":           [717, 	920, 	1123, 	1326, 	1530, 	1733, 	1936, 	2139, 	2342, 	2545, 	2749, 	2952, 	3155, 	3358, 	3561, 	3764, 	3967, 	4171, 	4374, 	4577, 	4780],
        "FlatATK":          [47, 	60, 	73, 	86, 	100, 	113, 	126, 	139, 	152, 	166, 	179, 	192, 	205, 	219, 	232, 	245, 	258, 	272, 	285, 	298, 	311],
        "HPPercent":        [7.0, 	9.0, 	11.0, 	12.9, 	14.9, 	16.9, 	18.9, 	20.9, 	22.8, 	24.8, 	26.8, 	28.8, 	30.8, 	32.8, 	34.7, 	36.7, 	38.7, 	40.7, 	42.7, 	44.6, 	46.6],
        "DEFPercent":       [8.7, 	11.2, 	13.7, 	16.2, 	18.6, 	21.1, 	23.6, 	26.1, 	28.6, 	31.0, 	33.5, 	36.0, 	38.5, 	40.9, 	43.4, 	45.9, 	48.4, 	50.8, 	53.3, 	55.8, 	58.3],
        "ElementalMastery": [28, 	36, 	44, 	52, 	60, 	68, 	76, 	84, 	91, 	99, 	107, 	115, 	123, 	131, 	139, 	147, 	155, 	163, 	171, 	179, 	187],
        "EnergyRecharge":   [7.8, 	10.0, 	12.2, 	14.4, 	16.6, 	18.8, 	21.0, 	23.2, 	25.4, 	27.6, 	29.8, 	32.0, 	34.2, 	36.4, 	38.6, 	40.8, 	43.0, 	45.2, 	47.4, 	49.6, 	51.8],
        "CritRate":         [4.7, 	6.0, 	7.4, 	8.7, 	10.0, 	11.4, 	12.7, 	14.0, 	15.4, 	16.7, 	18.0, 	19.3, 	20.7, 	22.0, 	23.3, 	24.7, 	26.0, 	27.3, 	28.7, 	30.0, 	31.1],
        "CritDMG":          [9.3, 	11.9, 	14.6, 	17.2, 	19.9, 	22.5, 	25.2, 	27.8, 	30.5, 	33.1, 	35.8, 	38.4, 	41.1, 	43.7, 	46.3, 	49.0, 	51.6, 	54.3, 	56.9, 	59.6, 	62.2],
        "HealingBonus":     [5.4, 	6.9, 	8.4, 	10.0, 	11.5, 	13.0, 	14.5, 	16.1, 	17.6, 	19.1, 	20.6, 	22.2, 	23.7, 	25.2, 	26.7, 	28.3, 	29.8, 	31.3, 	32.8, 	34.4, 	35.9],
    },
}
# fmt: on


def _expand_main_stat_scaling(scaling: dict[str, list[float]]) -> dict[str, np.ndarray]:
    """ATK% and elemental bonuses share the HP% curve, physical bonus shares the DEF% curve"""
    expanded = {stat: np.asarray(values, dtype=float) for stat, values in scaling.items()}
    expanded["ATKPercent"] = expanded["HPPercent"]
    for dmg_bonus in elemental_dmg_bonuses:
        expanded[dmg_bonus] = expanded["HPPercent"]
    expanded["PhysicalDMGBonus"] = expanded["DEFPercent"]
    for stat in expanded:
        if stat not in flat_stats:
            expanded[stat] = expanded[stat] / 100
    return expanded


# main_stat_values[rarity][stat][level]
main_stat_values = {
    rarity: _expand_main_stat_scaling(scaling) for rarity, scaling in _main_stat_scaling_percent.items()
}


# Source:
# https://genshin-impact.fandom.com/wiki/Artifacts/Distribution
# fmt: off
main_stat_drop_rate = {
    "flower": pd.Series({
        "FlatHP": 100.0,
    }),
    "feather": pd.Series({
        "FlatATK": 100.0,
    }),
    "sands": pd.Series({
        "HPPercent":        26.68,
        "ATKPercent":       26.66,
        "DEFPercent":       26.66,
        "EnergyRecharge":   10.0,
        "ElementalMastery": 10.0,
    }),
    "goblet": pd.Series({
        "HPPercent":        19.25,
        "ATKPercent":       19.25,
        "DEFPercent":       19.0,
        "PyroDMGBonus":     5.0,
        "ElectroDMGBonus":  5.0,
        "CryoDMGBonus":     5.0,
        "HydroDMGBonus":    5.0,
        "DendroDMGBonus":   5.0,
        "AnemoDMGBonus":    5.0,
        "GeoDMGBonus":      5.0,
        "PhysicalDMGBonus": 5.0,
        "ElementalMastery": 2.5,
    }),
    "circlet": pd.Series({
        "HPPercent":        22.0,
        "ATKPercent":       22.0,
        "DEFPercent":       22.0,
        "CritRate":         10.0,
        "CritDMG":          10.0,
        "HealingBonus":     10.0,
        "ElementalMastery": 4.0,
    }),
}

_substat_base_weights = pd.Series({
    "FlatHP":           6.0,
    "FlatATK":          6.0,
    "FlatDEF":          6.0,
    "HPPercent":        4.0,
    "ATKPercent":       4.0,
    "DEFPercent":       4.0,
    "EnergyRecharge":   4.0,
    "ElementalMastery": 4.0,
    "CritRate":         3.0,
    "CritDMG":          3.0,
})
# fmt: on

# substat_weights[slot][main_stat] -> weights of every substat that can roll alongside main_stat
substat_weights = {
    slot: {main_stat: _substat_base_weights.drop(main_stat, errors="ignore") for main_stat in drop_rate.index}
    for slot, drop_rate in main_stat_drop_rate.items()
}

initial_substat_counts = {
    5: pd.Series({3: 0.8, 4: 0.2}),
    4: pd.Series({2: 0.8, 3: 0.2}),
    3: pd.Series({1: 0.8, 2: 0.2}),
    2: pd.Series({0: 0.8, 1: 0.2}),
    1: pd.Series({0: 1.0}),
}

# [max, high, mid, low], low rarities cannot reach every tier
roll_tier_probabilities = {
    5: [0.25, 0.25, 0.25, 0.25],
    4: [0.25, 0.25, 0.25, 0.25],
    3: [0.25, 0.25, 0.25, 0.25],
    2: [0.333, 0.333, 0.333, 0.0],
    1: [0.5, 0.5, 0.0, 0.0],
}

upgrade_roll_counts = pd.Series({0: 0.2373, 1: 0.3955, 2: 0.2637, 3: 0.0879, 4: 0.0146, 5: 0.0010})

# Source:
# https://genshin-impact.fandom.com/wiki/Artifacts/Scaling
# substat_roll_tiers[rarity][stat] -> [max, high, mid, low]
# fmt: off
substat_roll_tiers = {
    5: {
        "FlatHP":           [298.75, 268.88, 239.00, 209.13],
        "FlatATK":          [19.45,  17.51,  15.56,  13.62],
        "FlatDEF":          [23.15,  20.83,  18.52,  16.20],
        "HPPercent":        [0.0583, 0.0525, 0.0466, 0.0408],
        "ATKPercent":       [0.0583, 0.0525, 0.0466, 0.0408],
        "DEFPercent":       [0.0729, 0.0656, 0.0583, 0.0510],
        "ElementalMastery": [23.31,  20.98,  18.65,  16.32],
        "EnergyRecharge":   [0.0648, 0.0583, 0.0518, 0.0453],
        "CritRate":         [0.0389, 0.0350, 0.0311, 0.0272],
        "CritDMG":          [0.0777, 0.0699, 0.0622, 0.0544],
    },
    4: {
        "FlatHP":           [239.00, 215.10, 191.20, 167.30],
        "FlatATK":          [15.56,  14.00,  12.45,  10.89],
        "FlatDEF":          [18.52,  16.67,  14.82,  12.96],
        "HPPercent":        [0.0466, 0.0420, 0.0373, 0.0326],
        "ATKPercent":       [0.0466, 0.0420, 0.0373, 0.0326],
        "DEFPercent":       [0.0583, 0.0525, 0.0466, 0.0408],
        "ElementalMastery": [18.65,  16.79,  14.92,  13.06],
        "EnergyRecharge":   [0.0518, 0.0466, 0.0414, 0.0363],
        "CritRate":         [0.0311, 0.0280, 0.0249, 0.0218],
        "CritDMG":          [0.0622, 0.0560, 0.0497, 0.0435],
    },
    3: {
        "FlatHP":           [143.40, 129.06, 114.72, 100.38],
        "FlatATK":          [9.34,   8.40,   7.47,   6.54],
        "FlatDEF":          [11.11,  10.00,  8.89,   7.78],
        "HPPercent":        [0.0350, 0.0315, 0.0280, 0.0245],
        "ATKPercent":       [0.0350, 0.0315, 0.0280, 0.0245],
        "DEFPercent":       [0.0437, 0.0393, 0.0350, 0.0306],
        "ElementalMastery": [13.99,  12.59,  11.19,  9.79],
        "EnergyRecharge":   [0.0389, 0.0350, 0.0311, 0.0272],
        "CritRate":         [0.0233, 0.0210, 0.0186, 0.0163],
        "CritDMG":          [0.0466, 0.0420, 0.0373, 0.0326],
    },
    2: {
        "FlatHP":           [71.70,  60.95,  50.19,  29.88],
        "FlatATK":          [4.67,   3.97,   3.27,   1.95],
        "FlatDEF":          [5.56,   4.72,   3.89,   2.31],
        "HPPercent":        [0.0198, 0.0168, 0.0138, 0.0082],
        "ATKPercent":       [0.0198, 0.0168, 0.0138, 0.0082],
        "DEFPercent":       [0.0246, 0.0209, 0.0172, 0.0102],
        "ElementalMastery": [7.93,   6.74,   5.55,   3.31],
        "EnergyRecharge":   [0.0221, 0.0188, 0.0155, 0.0092],
        "CritRate":         [0.0132, 0.0112, 0.0092, 0.0055],
        "CritDMG":          [0.0264, 0.0224, 0.0185, 0.0110],
    },
    1: {
        "FlatHP":           [29.88,  23.90,  0.0,    0.0],
        "FlatATK":          [1.95,   1.56,   0.0,    0.0],
        "FlatDEF":          [2.31,   1.85,   0.0,    0.0],
        "HPPercent":        [0.0082, 0.0066, 0.0,    0.0],
        "ATKPercent":       [0.0082, 0.0066, 0.0,    0.0],
        "DEFPercent":       [0.0102, 0.0082, 0.0,    0.0],
        "ElementalMastery": [3.31,   2.65,   0.0,    0.0],
        "EnergyRecharge":   [0.0092, 0.0074, 0.0,    0.0],
        "CritRate":         [0.0055, 0.0044, 0.0,    0.0],
        "CritDMG":          [0.0110, 0.0088, 0.0,    0.0],
    },
}
# fmt: on

for _rarity, _probabilities in roll_tier_probabilities.items():
    if abs(sum(_probabilities) - 1) > 1e-2:
        log.warning(f"Roll tier probabilities for {_rarity}* sum to {sum(_probabilities):.3f}, not 1.")
