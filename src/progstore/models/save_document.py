"""Save document schema — the serialized root of all player progress.

The document is a pydantic model so that a file read from disk is
validated structurally on load: unknown keys are ignored, absent keys
take their defaults, and anything else that does not fit is rejected.
Level and durability maps are stored as lists of entries; the runtime
caches convert them to dicts (see ``persistence.caches``).
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


# ===================================================================
# List entries
# ===================================================================


class SkillLevelEntry(BaseModel):
    id: str = ""
    level: int = 1


class FacilityLevelEntry(BaseModel):
    id: str = ""
    level: int = 0


class EquipmentStateEntry(BaseModel):
    id: str = ""
    durability: int = 0


class QuestRecord(BaseModel):
    """Persisted progress of one accepted quest.

    ``completed`` means the clear condition is met and the quest still
    has to be reported to the quest giver.
    """

    quest_id: str
    progress: int = 0
    completed: bool = False


# ===================================================================
# Root document
# ===================================================================


class SaveDocument(BaseModel):
    money: int = 0

    unlocked_equipments: List[str] = Field(default_factory=list)
    equipment_states: List[EquipmentStateEntry] = Field(default_factory=list)

    unlocked_skills: List[str] = Field(default_factory=list)
    skill_levels: List[SkillLevelEntry] = Field(default_factory=list)

    facility_levels: List[FacilityLevelEntry] = Field(default_factory=list)

    # Equipped skill ids
    slot1_id: Optional[str] = None
    slot2_id: Optional[str] = None

    run_buff_basket: List[str] = Field(default_factory=list)

    # Quests
    tutorial_completed: bool = False
    tutorial_step: int = 0
    active_quests: List[QuestRecord] = Field(default_factory=list)

    # Equipment
    equipped_weapon_id: Optional[str] = None
    equipped_weapon_durability: int = 0
    equipped_mining_tool_id: Optional[str] = None
    equipped_mining_tool_durability: int = 0

    @field_validator(
        "unlocked_equipments",
        "equipment_states",
        "unlocked_skills",
        "skill_levels",
        "facility_levels",
        "run_buff_basket",
        "active_quests",
        mode="before",
    )
    @classmethod
    def _null_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value
