"""Exceptions raised by artifact generation, building, and optimization"""

from __future__ import annotations


class ArtifactForgeError(Exception):
    """Base class for every error raised by artifact_forge"""


class FixtureLookupError(ArtifactForgeError, LookupError):
    """No static data is configured for a slot, rarity, or stat. Indicates a data defect."""


class InvalidArgumentError(ArtifactForgeError, ValueError):
    """Caller supplied a stat, slot, rarity, level, or index that is not allowed"""


class RollConstraintError(InvalidArgumentError):
    """A roll would exceed the maximum rolls permitted for a (stat, rarity) pair"""

    def __init__(self, stat: str, rarity: int, current: int, requested: int, constraint: int):
        self.stat = stat
        self.rarity = rarity
        self.current = current
        self.requested = requested
        self.constraint = constraint
        super().__init__(
            f"Cannot roll {stat} {requested} more time(s) at {rarity}*: "
            f"{current} of {constraint} permitted rolls already allocated."
        )


class RequirementUnsatisfiableError(ArtifactForgeError):
    """A stat requirement cannot be reached with the available roll budget"""
