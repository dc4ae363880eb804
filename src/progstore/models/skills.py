"""Skill definition models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UnlockCondition:
    """A prerequisite: *required_skill_id* must be at least *required_level*."""

    required_skill_id: str
    required_level: int = 1


@dataclass(frozen=True)
class SkillDefinition:
    """Static definition of a learnable skill.

    Attributes:
        skill_id: Stable skill id stored in save documents.
        name: Display name.
        max_level: Highest level the skill can reach (>= 1).
        icon: Icon asset name, empty if none is assigned.
        unlock_conditions: Prerequisite skills and levels.
    """

    skill_id: str = ""
    name: str = ""
    max_level: int = 1
    icon: str = ""
    unlock_conditions: tuple[UnlockCondition, ...] = field(default_factory=tuple)
