"""Loadout models — what the player currently carries into a run.

These are owned by gameplay code; the progression store only reads
and writes them through apply/save operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from progstore.models.equipment import EquipmentDefinition
from progstore.models.skills import SkillDefinition


@dataclass
class EquippedItem:
    """An equipment definition together with its live durability."""

    definition: EquipmentDefinition
    durability: int


@dataclass
class Loadout:
    """Equipped weapon and mining tool."""

    weapon: Optional[EquippedItem] = None
    mining_tool: Optional[EquippedItem] = None

    def load_equipped(
        self,
        weapon: Optional[EquipmentDefinition],
        weapon_durability: int,
        mining_tool: Optional[EquipmentDefinition],
        mining_tool_durability: int,
    ) -> None:
        """Replace both slots. A ``None`` definition empties the slot."""
        self.weapon = EquippedItem(weapon, weapon_durability) if weapon else None
        self.mining_tool = (
            EquippedItem(mining_tool, mining_tool_durability) if mining_tool else None
        )


@dataclass
class SkillSlots:
    """The two equipped active-skill slots."""

    slot1: Optional[SkillDefinition] = None
    slot2: Optional[SkillDefinition] = None
