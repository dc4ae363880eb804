"""Derived unlock engine — equipment unlocks computed from facility levels.

Unlocking is monotonic: the engine only ever adds ids, so lowering the
gate level later never takes equipment away.  Running it twice without
a level change in between reports no change the second time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import MutableMapping, MutableSequence

from progstore.engine.catalog import CatalogIndex
from progstore.engine.facility_rules import max_unlocked_rarity
from progstore.models.equipment import EquipmentRarity


@dataclass
class UnlockResult:
    """Outcome of one unlock refresh.

    Attributes:
        ceiling: Highest rarity tier allowed at the current gate level.
        newly_unlocked: Equipment ids appended to the unlocked list.
        changed: Whether the unlocked list or the durability map changed.
    """

    ceiling: EquipmentRarity
    newly_unlocked: list[str] = field(default_factory=list)
    changed: bool = False


def refresh_equipment_unlocks(
    catalog: CatalogIndex,
    unlocked: MutableSequence[str],
    durabilities: MutableMapping[str, int],
    gate_level: int,
) -> UnlockResult:
    """Reconcile *unlocked* and *durabilities* with the rarity gate level.

    Every catalog equipment at or below the rarity ceiling is appended to
    *unlocked* if missing and gets a full-durability entry in
    *durabilities* if it has none.  Both containers are mutated in place.
    """
    result = UnlockResult(ceiling=max_unlocked_rarity(gate_level))
    already = set(unlocked)

    for eq in catalog.all_equipment():
        if eq.rarity > result.ceiling:
            continue
        if eq.id not in already:
            unlocked.append(eq.id)
            already.add(eq.id)
            result.newly_unlocked.append(eq.id)
            result.changed = True
        if eq.id not in durabilities:
            durabilities[eq.id] = eq.max_durability
            result.changed = True

    return result
