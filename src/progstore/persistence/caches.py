"""Runtime caches — id → value dicts mirrored by list fields in the save document.

The dicts are the live representation while the game runs.  The list
fields of :class:`SaveDocument` are only meaningful at the load/save
boundary: ``pull_from`` rebuilds all dicts from a freshly loaded
document, ``push_into`` rewrites all list fields right before a save.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from progstore.models.save_document import (
    EquipmentStateEntry,
    FacilityLevelEntry,
    SaveDocument,
    SkillLevelEntry,
)

log = logging.getLogger(__name__)


# ===================================================================
# Encode / decode helpers
# ===================================================================

def pull_levels(entries: Iterable[SkillLevelEntry | FacilityLevelEntry], label: str = "level") -> dict[str, int]:
    """Convert level entries to a dict. Entries with an empty id are skipped."""
    result: dict[str, int] = {}
    for entry in entries:
        if not entry.id:
            log.warning("Skipping %s entry with empty id (level=%d)", label, entry.level)
            continue
        result[entry.id] = entry.level
    return result


def push_skill_levels(levels: dict[str, int]) -> list[SkillLevelEntry]:
    return [SkillLevelEntry(id=k, level=v) for k, v in levels.items()]


def push_facility_levels(levels: dict[str, int]) -> list[FacilityLevelEntry]:
    return [FacilityLevelEntry(id=k, level=v) for k, v in levels.items()]


def pull_durabilities(entries: Iterable[EquipmentStateEntry]) -> dict[str, int]:
    """Convert equipment state entries to a dict. Entries with an empty id are skipped."""
    result: dict[str, int] = {}
    for entry in entries:
        if not entry.id:
            log.warning("Skipping equipment state with empty id (durability=%d)", entry.durability)
            continue
        result[entry.id] = entry.durability
    return result


def push_durabilities(durabilities: dict[str, int]) -> list[EquipmentStateEntry]:
    return [EquipmentStateEntry(id=k, durability=v) for k, v in durabilities.items()]


# ===================================================================
# Cache container
# ===================================================================

@dataclass
class RuntimeCaches:
    """The three live lookup maps of the progression store.

    Attributes:
        skill_levels: Skill id → level.
        facility_levels: Facility id → level.
        durabilities: Equipment id → current durability.
    """

    skill_levels: dict[str, int] = field(default_factory=dict)
    facility_levels: dict[str, int] = field(default_factory=dict)
    durabilities: dict[str, int] = field(default_factory=dict)

    def pull_from(self, document: SaveDocument) -> None:
        """Replace all maps with the contents of *document*'s list fields."""
        self.skill_levels = pull_levels(document.skill_levels, "skill level")
        self.facility_levels = pull_levels(document.facility_levels, "facility level")
        self.durabilities = pull_durabilities(document.equipment_states)

    def push_into(self, document: SaveDocument) -> None:
        """Replace *document*'s list fields with the contents of all maps."""
        document.skill_levels = push_skill_levels(self.skill_levels)
        document.facility_levels = push_facility_levels(self.facility_levels)
        document.equipment_states = push_durabilities(self.durabilities)

    def clear(self) -> None:
        self.skill_levels.clear()
        self.facility_levels.clear()
        self.durabilities.clear()
