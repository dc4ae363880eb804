"""Equipment definition models.

Loaded from config/catalog/equipment.yaml via the catalog_loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class EquipmentKind(Enum):
    """Which loadout slot an equipment piece goes into."""

    WEAPON = "weapon"
    MINING_TOOL = "mining_tool"


class EquipmentRarity(IntEnum):
    """Ordinal rarity tier. The integer value is the tier index."""

    COMMON = 0
    UNCOMMON = 1
    RARE = 2
    HEROIC = 3
    EPIC = 4
    LEGENDARY = 5
    MYTHIC = 6


@dataclass(frozen=True)
class EquipmentDefinition:
    """Static definition of a piece of equipment.

    Attributes:
        id: Stable equipment id stored in save documents.
        name: Human-readable display name.
        kind: Weapon or mining tool.
        rarity: Rarity tier; gates unlocking through the rarity facility.
        max_durability: Durability of a fresh item.
        max_upgrade_level: Highest enhancement level of the item itself,
            before facility caps are applied.
        icon: Icon asset name, empty if none is assigned.
    """

    id: str = ""
    name: str = ""
    kind: EquipmentKind = EquipmentKind.WEAPON
    rarity: EquipmentRarity = EquipmentRarity.COMMON
    max_durability: int = 100
    max_upgrade_level: int = 12
    icon: str = ""
