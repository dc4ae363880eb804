"""Facility rules — step functions from facility level to gameplay values.

Pure functions shared by the store, the unlock engine and any UI that
shows caps or prices, so all of them agree on the same numbers.
"""

from __future__ import annotations

import math
from typing import Sequence

from progstore.models.equipment import EquipmentRarity
from progstore.util.constants import (
    DISCOUNT_PER_LEVEL,
    EQUIPMENT_MAX_LEVEL_LIMITS,
    MAX_DISCOUNT_RATE,
)


def max_unlocked_rarity(gate_level: int) -> EquipmentRarity:
    """Highest rarity tier unlocked at *gate_level* of the rarity facility.

    Level 1 (or less) unlocks COMMON only; each further level adds one
    tier, saturating at MYTHIC.
    """
    tier = max(0, gate_level - 1)
    return EquipmentRarity(min(tier, int(EquipmentRarity.MYTHIC)))


def discount_rate(
    level: int,
    per_level: float = DISCOUNT_PER_LEVEL,
    cap: float = MAX_DISCOUNT_RATE,
) -> float:
    """Fractional price reduction granted by a discount facility at *level*."""
    return min(max(level * per_level, 0.0), cap)


def apply_discount(base_price: int, rate: float) -> int:
    """Discounted price, rounded down to whole gold."""
    # round first so 100 * (1 - 0.15) floors to 85, not 84
    return math.floor(round(base_price * (1.0 - rate), 6))


def equipment_max_level_limit(
    level: int,
    limits: Sequence[int] = EQUIPMENT_MAX_LEVEL_LIMITS,
) -> int:
    """Enhancement cap for all equipment at *level* of the max-level facility."""
    if not limits or level < 0:
        return 0
    return limits[min(level, len(limits) - 1)]


def is_buff_unlocked(required_level: int, unlock_level: int) -> bool:
    """Whether a buff needing *required_level* is offered at *unlock_level*."""
    return required_level <= unlock_level
