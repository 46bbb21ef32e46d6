"""Damage formula used to build rotation actions"""

from __future__ import annotations

from artifact_forge.errors import InvalidArgumentError
from artifact_forge.stat_table import DamageCompute, StatTable

CHARACTER_LEVEL = 90
ENEMY_LEVEL = 100
ENEMY_BASE_RESISTANCE = 0.1

# fmt: off
element2dmg_bonus = {
    "Pyro":     "PyroDMGBonus",
    "Hydro":    "HydroDMGBonus",
    "Electro":  "ElectroDMGBonus",
    "Anemo":    "AnemoDMGBonus",
    "Geo":      "GeoDMGBonus",
    "Dendro":   "DendroDMGBonus",
    "Cryo":     "CryoDMGBonus",
    "Physical": "PhysicalDMGBonus",
}

element2resistance_reduction = {element: f"{element}ResistanceReduction" for element in element2dmg_bonus}

damage_type2dmg_bonus = {
    "Normal":   "NormalATKDMGBonus",
    "Charged":  "ChargeATKDMGBonus",
    "Plunging": "PlungeATKDMGBonus",
    "Skill":    "SkillDMGBonus",
    "Burst":    "BurstDMGBonus",
}

amplifier2multiplier = {
    "None":    1.0,
    "Forward": 2.0,
    "Reverse": 1.5,
}
# fmt: on

amplifying_elements = ["Pyro", "Hydro", "Cryo", "Anemo"]


def default_damage_formula(
    instances: float,
    total_scaling_stat: float,
    motion_value: float,
    base_dmg_multiplier: float,
    additive_base_dmg_bonus: float,
    avg_crit_multiplier: float,
    total_dmg_bonus: float,
    dmg_reduction_target: float,
    def_multiplier: float,
    res_multiplier: float,
    amplifier_multiplier: float,
) -> float:
    return (
        (total_scaling_stat * motion_value * base_dmg_multiplier + additive_base_dmg_bonus)
        * avg_crit_multiplier
        * (1.0 + total_dmg_bonus - dmg_reduction_target)
        * def_multiplier
        * res_multiplier
        * amplifier_multiplier
        * instances
    )


def total_attack(stats: StatTable) -> float:
    return stats.get("BaseATK") * (1 + stats.get("ATKPercent")) + stats.get("FlatATK")


def total_defense(stats: StatTable) -> float:
    return stats.get("BaseDEF") * (1 + stats.get("DEFPercent")) + stats.get("FlatDEF")


def total_health(stats: StatTable) -> float:
    return stats.get("BaseHP") * (1 + stats.get("HPPercent")) + stats.get("FlatHP")


def avg_crit_multiplier(stats: StatTable) -> float:
    crit_rate = min(max(stats.get("CritRate"), 0.0), 1.0)
    return 1.0 + crit_rate * stats.get("CritDMG")


def def_multiplier(character_level: int, enemy_level: int, def_reduction: float, def_ignore: float) -> float:
    if not 1 <= character_level <= 90:
        raise InvalidArgumentError(f"Character level must be between 1 and 90. Received {character_level}.")
    if enemy_level < 1:
        raise InvalidArgumentError(f"Enemy level must be at least 1. Received {enemy_level}.")

    return (character_level + 100.0) / (
        character_level + 100.0 + (enemy_level + 100.0) * (1.0 - min(def_reduction, 0.9)) * (1.0 - def_ignore)
    )


def res_multiplier(enemy_base_resistance: float, resistance_reduction: float) -> float:
    resistance = enemy_base_resistance - resistance_reduction
    if resistance < 0.0:
        return 1.0 - resistance / 2.0
    elif resistance < 0.75:
        return 1.0 - resistance
    else:
        return 1.0 / (4.0 * resistance + 1.0)


def amplifier_multiplier(amplifier: float, elemental_mastery: float, reaction_bonus: float) -> float:
    return amplifier * (1.0 + 2.78 * elemental_mastery / (1400.0 + elemental_mastery) + reaction_bonus)


def calculate_damage(
    element: str,
    damage_type: str,
    scaling: str,
    amplifier: str,
    instances: float,
    motion_value: float,
    character: StatTable,
    buffs: StatTable = None,
) -> float:
    """Average damage of a single action"""

    if element not in element2dmg_bonus:
        raise InvalidArgumentError(f"Invalid element: {element}.")
    if damage_type not in damage_type2dmg_bonus:
        raise InvalidArgumentError(f"Invalid damage type: {damage_type}.")
    if amplifier not in amplifier2multiplier:
        raise InvalidArgumentError(f"Invalid amplifier: {amplifier}.")
    if amplifier != "None" and element not in amplifying_elements:
        raise InvalidArgumentError(f"Amplifier {amplifier} requires Pyro, Hydro, Cryo, or Anemo element.")

    total = character.clone()
    if buffs is not None:
        for stat, value in buffs:
            total.add(stat, value)

    if scaling == "ATK":
        total_scaling_stat = total_attack(total)
    elif scaling == "DEF":
        total_scaling_stat = total_defense(total)
    elif scaling == "HP":
        total_scaling_stat = total_health(total)
    else:
        raise InvalidArgumentError(f"Invalid scaling stat: {scaling}.")

    if amplifier == "None":
        amp_multiplier = 1.0
    else:
        amp_multiplier = amplifier_multiplier(
            amplifier2multiplier[amplifier], total.get("ElementalMastery"), total.get("ReactionBonus")
        )

    total_dmg_bonus = (
        total.get("DMGBonus")
        + total.get("ElementalDMGBonus")
        + total.get(element2dmg_bonus[element])
        + total.get(damage_type2dmg_bonus[damage_type])
    )

    return default_damage_formula(
        instances=instances,
        total_scaling_stat=total_scaling_stat,
        motion_value=motion_value,
        base_dmg_multiplier=1.0,
        additive_base_dmg_bonus=0.0,
        avg_crit_multiplier=avg_crit_multiplier(total),
        total_dmg_bonus=total_dmg_bonus,
        dmg_reduction_target=0.0,
        def_multiplier=def_multiplier(CHARACTER_LEVEL, ENEMY_LEVEL, total.get("DefReduction"), total.get("DefIgnore")),
        res_multiplier=res_multiplier(ENEMY_BASE_RESISTANCE, total.get(element2resistance_reduction[element])),
        amplifier_multiplier=amp_multiplier,
    )


def dmg_formula(
    element: str,
    damage_type: str,
    motion_value: float,
    buffs: StatTable = None,
    instances: float = 1,
    scaling: str = "ATK",
    amplifier: str = "None",
) -> DamageCompute:
    """Rotation action computing the damage of one hit"""

    def compute(stats: StatTable) -> float:
        return calculate_damage(element, damage_type, scaling, amplifier, instances, motion_value, stats, buffs)

    return compute
