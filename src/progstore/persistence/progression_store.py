"""Progression store — owns all persistent player progress.

Responsibilities:
- Load the save document, or create a default one on first run or
  when the file is unreadable
- Keep the runtime caches and the document's list fields in sync
- Write-through saves after every mutating operation
- Derive equipment unlocks from facility levels
- Notify subscribers when a facility level changes

All errors are absorbed here: gameplay and UI code only ever see
boolean results and refreshed values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from progstore.engine.catalog import CatalogIndex
    from progstore.engine.economy import EconomyPort
    from progstore.engine.quest_log import QuestPort
    from progstore.util.events import EventBus

from progstore.engine.facility_rules import (
    apply_discount,
    discount_rate,
    equipment_max_level_limit,
    is_buff_unlocked,
    max_unlocked_rarity,
)
from progstore.engine.unlocks import refresh_equipment_unlocks as derive_equipment_unlocks
from progstore.loaders.config_loader import StoreConfig
from progstore.models.equipment import EquipmentDefinition, EquipmentRarity
from progstore.models.facilities import BuffDefinition
from progstore.models.loadout import Loadout, SkillSlots
from progstore.models.save_document import QuestRecord, SaveDocument
from progstore.models.skills import SkillDefinition
from progstore.persistence.caches import RuntimeCaches
from progstore.persistence.document_io import delete_document, read_document, write_document
from progstore.persistence.errors import CorruptSaveDocument, SaveFileMissing, SaveWriteError
from progstore.util.events import FacilityLevelChanged, SaveFailed

log = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _drop_duplicates(document: SaveDocument) -> None:
    """Make id lists and quest records unique, in place.

    Id lists keep the first occurrence. For quest records the last one
    wins but keeps the position of the first.
    """
    document.unlocked_equipments = list(dict.fromkeys(document.unlocked_equipments))
    document.unlocked_skills = list(dict.fromkeys(document.unlocked_skills))
    quests = {q.quest_id: q for q in document.active_quests}
    if len(quests) != len(document.active_quests):
        log.warning("Save file has %d duplicate quest records; keeping the last of each",
                    len(document.active_quests) - len(quests))
    document.active_quests = list(quests.values())


class ProgressionStore:
    """Persistent progression state with write-through saves.

    Args:
        catalog: Content database for equipment, skill and buff lookups.
        economy: Gold balance collaborator; its balance is persisted.
        event_bus: Bus the store publishes change notifications to.
        save_path: Save file location; defaults to ``config.save_path``.
        config: Facility ids and step tables.
        quest_log: Optional quest collaborator. When present, its active
            quests are the live quest records: restored on load, edited by
            the quest methods and written into the document on every save.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        economy: EconomyPort,
        event_bus: EventBus,
        save_path: str | Path | None = None,
        config: StoreConfig | None = None,
        quest_log: QuestPort | None = None,
    ) -> None:
        self._catalog = catalog
        self._economy = economy
        self._events = event_bus
        self._config = config or StoreConfig()
        self._path = Path(save_path if save_path is not None else self._config.save_path)
        self._quests = quest_log

        self._document = SaveDocument()
        self._caches = RuntimeCaches()

        self._has_loaded = False
        self._is_loading = False

    # -- State -----------------------------------------------------------

    @property
    def document(self) -> SaveDocument:
        """The live save document. List fields are only current right after a save."""
        return self._document

    @property
    def save_path(self) -> Path:
        return self._path

    @property
    def is_loaded(self) -> bool:
        return self._has_loaded

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    # ===================================================================
    # Load / save
    # ===================================================================

    def load(self) -> None:
        """Load the save document. Does nothing if already loaded or loading.

        A missing or unreadable file is replaced by a default document,
        which is written to disk immediately.
        """
        if self._has_loaded or self._is_loading:
            return

        self._is_loading = True
        document: Optional[SaveDocument] = None
        try:
            document = read_document(self._path)
        except SaveFileMissing:
            log.info("No save file at %s, creating a new one", self._path)
        except CorruptSaveDocument as exc:
            log.error("Save file %s is unreadable (%s), reinitializing", self._path, exc.reason)

        if document is None:
            self._reset_to_defaults()
            self._has_loaded = True
            self._is_loading = False
            self.save()
            return

        try:
            _drop_duplicates(document)
            self._document = document
            self._caches.pull_from(document)
            if self._quests is not None:
                self._quests.active = {q.quest_id: q.model_copy() for q in document.active_quests}
            self.refresh_equipment_unlocks(auto_save=False)
            self._economy.set_balance(document.money)
            self._has_loaded = True
        finally:
            self._is_loading = False

        log.info(
            "Progress restored from %s (money=%d, %d equipment, %d skills unlocked)",
            self._path, document.money,
            len(document.unlocked_equipments), len(document.unlocked_skills),
        )

    def save(self) -> bool:
        """Write the full current state to disk.

        Returns False while a load is in progress or if writing failed;
        a failed write is retried by the next save with current state.
        """
        if self._is_loading:
            return False

        if not self._has_loaded:
            log.warning("save() called before load(), loading first")
            self.load()

        self._caches.push_into(self._document)
        if self._quests is not None:
            self._document.active_quests = [q.model_copy() for q in self._quests.active.values()]
        self._document.money = self._economy.get_balance()

        try:
            write_document(self._path, self._document)
        except SaveWriteError as exc:
            log.error("Failed to save progress to %s: %s", self._path, exc.reason)
            self._events.emit(SaveFailed(path=str(self._path), reason=exc.reason))
            return False
        return True

    def save_now(self) -> bool:
        return self.save()

    def delete_all(self) -> None:
        """Delete the save file and reset every piece of progress to first-run defaults."""
        try:
            delete_document(self._path)
        except OSError:
            log.exception("Failed to delete save file %s", self._path)

        self._reset_to_defaults()
        self._has_loaded = True
        self.save()
        log.info("All progress data has been reset")

    def _reset_to_defaults(self) -> None:
        self._document = SaveDocument()
        self._caches.clear()
        self._initialize_level_one_facilities()
        self._caches.push_into(self._document)
        self.refresh_equipment_unlocks(auto_save=False)
        self._economy.set_balance(0)
        if self._quests is not None:
            self._quests.active.clear()

    # ===================================================================
    # Derived unlocks
    # ===================================================================

    def refresh_equipment_unlocks(self, auto_save: bool = True) -> bool:
        """Unlock all equipment allowed by the current rarity gate level.

        Returns whether anything changed.  Saves only if something
        changed, *auto_save* is set and no load is in progress.
        """
        result = derive_equipment_unlocks(
            self._catalog,
            self._document.unlocked_equipments,
            self._caches.durabilities,
            self.get_facility_level(self._config.rarity_gate_facility),
        )
        if result.newly_unlocked:
            log.info(
                "Unlocked %d equipment up to rarity %s: %s",
                len(result.newly_unlocked), result.ceiling.name, ", ".join(result.newly_unlocked),
            )
        if result.changed and auto_save and not self._is_loading:
            self.save()
        return result.changed

    def max_unlocked_rarity(self) -> EquipmentRarity:
        return max_unlocked_rarity(self.get_facility_level(self._config.rarity_gate_facility))

    # ===================================================================
    # Equipment
    # ===================================================================

    def is_equipment_unlocked(self, eq: Optional[EquipmentDefinition]) -> bool:
        return eq is not None and eq.id in self._document.unlocked_equipments

    def unlock_equipment(self, eq: Optional[EquipmentDefinition]) -> bool:
        """Unlock *eq* at full durability. Returns False if it already was."""
        if eq is None or self.is_equipment_unlocked(eq):
            return False
        self._document.unlocked_equipments.append(eq.id)
        self._caches.durabilities[eq.id] = eq.max_durability
        self.save()
        return True

    def unlocked_equipment_ids(self) -> list[str]:
        return list(self._document.unlocked_equipments)

    def get_equipment_by_id(self, equipment_id: Optional[str]) -> Optional[EquipmentDefinition]:
        return self._catalog.equipment(equipment_id)

    def get_equipment_durability(self, eq: Optional[EquipmentDefinition]) -> int:
        """Stored durability of *eq*, clamped to its range; an item without an entry counts as new."""
        if eq is None:
            return 0
        return _clamp(self._caches.durabilities.get(eq.id, eq.max_durability), 0, eq.max_durability)

    def set_equipment_durability(self, eq: Optional[EquipmentDefinition], durability: int) -> None:
        if eq is None:
            return
        self._caches.durabilities[eq.id] = _clamp(durability, 0, eq.max_durability)
        if not self._is_loading:
            self.save()

    def consume_equipment_durability(self, eq: Optional[EquipmentDefinition], amount: int = 1) -> int:
        """Wear *eq* down by *amount* and return the remaining durability."""
        if eq is None:
            return 0
        remaining = self.get_equipment_durability(eq) - max(0, amount)
        self.set_equipment_durability(eq, remaining)
        return self.get_equipment_durability(eq)

    def apply_equipment_to(self, loadout: Optional[Loadout]) -> None:
        """Put the persisted weapon and mining tool into *loadout*."""
        if loadout is None:
            return
        doc = self._document
        loadout.load_equipped(
            self.get_equipment_by_id(doc.equipped_weapon_id),
            doc.equipped_weapon_durability,
            self.get_equipment_by_id(doc.equipped_mining_tool_id),
            doc.equipped_mining_tool_durability,
        )

    def save_equipment_from(self, loadout: Optional[Loadout]) -> None:
        """Snapshot the equipped items and save.

        The equipped items' live durability is also written back to the
        durability cache so the per-item state stays current.
        """
        if loadout is None:
            return
        doc = self._document
        weapon, tool = loadout.weapon, loadout.mining_tool

        doc.equipped_weapon_id = weapon.definition.id if weapon else None
        doc.equipped_weapon_durability = (
            _clamp(weapon.durability, 0, weapon.definition.max_durability) if weapon else 0
        )
        doc.equipped_mining_tool_id = tool.definition.id if tool else None
        doc.equipped_mining_tool_durability = (
            _clamp(tool.durability, 0, tool.definition.max_durability) if tool else 0
        )

        if weapon:
            self._caches.durabilities[weapon.definition.id] = doc.equipped_weapon_durability
        if tool:
            self._caches.durabilities[tool.definition.id] = doc.equipped_mining_tool_durability

        self.save()

    def equipment_upgrade_discount_rate(self) -> float:
        level = self.get_facility_level(self._config.equipment_discount_facility)
        return discount_rate(level, self._config.discount_per_level, self._config.max_discount_rate)

    def equipment_max_level_limit(self) -> int:
        level = self.get_facility_level(self._config.equipment_max_level_facility)
        return equipment_max_level_limit(level, self._config.equipment_max_level_limits)

    def equipment_max_level(self, eq: Optional[EquipmentDefinition]) -> int:
        """Enhancement cap of *eq*: its own maximum, limited by the facility cap."""
        if eq is None:
            return 0
        return min(eq.max_upgrade_level, self.equipment_max_level_limit())

    # ===================================================================
    # Skills
    # ===================================================================

    def is_skill_unlocked(self, skill: Optional[SkillDefinition]) -> bool:
        return skill is not None and skill.skill_id in self._document.unlocked_skills

    def unlock_skill(self, skill: Optional[SkillDefinition]) -> bool:
        """Unlock *skill* at level 1. Returns False if it already was."""
        if skill is None or self.is_skill_unlocked(skill):
            return False
        self._document.unlocked_skills.append(skill.skill_id)
        self._caches.skill_levels.setdefault(skill.skill_id, 1)
        self.save()
        return True

    def lock_skill(self, skill: Optional[SkillDefinition]) -> bool:
        """Remove an unlock, unequip the skill and drop its level."""
        if skill is None or skill.skill_id not in self._document.unlocked_skills:
            return False
        doc = self._document
        doc.unlocked_skills = [sid for sid in doc.unlocked_skills if sid != skill.skill_id]
        if doc.slot1_id == skill.skill_id:
            doc.slot1_id = None
        if doc.slot2_id == skill.skill_id:
            doc.slot2_id = None
        self._caches.skill_levels.pop(skill.skill_id, None)
        self.save()
        return True

    def get_skill_by_id(self, skill_id: Optional[str]) -> Optional[SkillDefinition]:
        return self._catalog.skill(skill_id)

    def get_skill_level(self, skill: Optional[SkillDefinition]) -> int:
        """Current level of *skill*, 0 if locked.

        An unlocked skill without a level entry is fixed at level 1 and
        the entry is created.
        """
        if skill is None or not self.is_skill_unlocked(skill):
            return 0
        level = self._caches.skill_levels.get(skill.skill_id)
        if level is not None:
            return _clamp(level, 1, skill.max_level)
        self._caches.skill_levels[skill.skill_id] = 1
        self.save()
        return 1

    def set_skill_level(self, skill: Optional[SkillDefinition], level: int) -> None:
        if skill is None:
            return
        self._caches.skill_levels[skill.skill_id] = _clamp(level, 1, skill.max_level)
        self.save()

    def can_unlock(self, skill: Optional[SkillDefinition]) -> bool:
        """Check all prerequisite skill levels. Unknown prerequisites fail the check."""
        if skill is None:
            return False
        for condition in skill.unlock_conditions:
            required = self.get_skill_by_id(condition.required_skill_id)
            if required is None:
                return False
            if self.get_skill_level(required) < condition.required_level:
                return False
        return True

    def try_unlock_skill(self, skill: Optional[SkillDefinition], cost: int) -> bool:
        """Pay *cost* and unlock *skill*. Nothing changes if any step fails."""
        if skill is None or self.is_skill_unlocked(skill) or not self.can_unlock(skill):
            return False
        if not self._economy.try_spend_money(cost):
            return False
        return self.unlock_skill(skill)

    def try_level_up_skill(self, skill: Optional[SkillDefinition], cost: int) -> bool:
        """Pay *cost* and raise *skill* by one level, up to its maximum."""
        if skill is None or not self.is_skill_unlocked(skill):
            return False
        level = self.get_skill_level(skill)
        if level >= skill.max_level:
            return False
        if not self._economy.try_spend_money(cost):
            return False
        self.set_skill_level(skill, level + 1)
        return True

    def apply_skills_to(self, slots: Optional[SkillSlots]) -> None:
        if slots is None:
            return
        slots.slot1 = self.get_skill_by_id(self._document.slot1_id)
        slots.slot2 = self.get_skill_by_id(self._document.slot2_id)

    def save_skills_from(self, slots: Optional[SkillSlots]) -> None:
        if slots is None:
            return
        self._document.slot1_id = slots.slot1.skill_id if slots.slot1 else None
        self._document.slot2_id = slots.slot2.skill_id if slots.slot2 else None
        self.save()

    # ===================================================================
    # Run buffs
    # ===================================================================

    def save_run_buff_basket(self, buff_ids: Optional[Iterable[str]]) -> None:
        self._document.run_buff_basket = list(buff_ids or [])
        self.save()

    def load_run_buff_basket(self) -> list[str]:
        return list(self._document.run_buff_basket)

    def buff_discount_rate(self) -> float:
        level = self.get_facility_level(self._config.buff_discount_facility)
        return discount_rate(level, self._config.discount_per_level, self._config.max_discount_rate)

    def buff_price(self, buff: BuffDefinition) -> int:
        return self.discounted_price(buff.price, self._config.buff_discount_facility)

    def discounted_price(self, base: int, facility_id: str) -> int:
        """*base* reduced by the discount of *facility_id*, rounded down."""
        level = self.get_facility_level(facility_id)
        rate = discount_rate(level, self._config.discount_per_level, self._config.max_discount_rate)
        return apply_discount(base, rate)

    def is_buff_available(self, buff: Optional[BuffDefinition]) -> bool:
        if buff is None:
            return False
        unlock_level = self.get_facility_level(self._config.buff_unlock_facility)
        return is_buff_unlocked(buff.required_unlock_level, unlock_level)

    def available_buffs(self) -> list[BuffDefinition]:
        return [b for b in self._catalog.all_buffs() if self.is_buff_available(b)]

    # ===================================================================
    # Quests / tutorial
    # ===================================================================

    def is_tutorial_completed(self) -> bool:
        return self._document.tutorial_completed

    def get_tutorial_step(self) -> int:
        return self._document.tutorial_step

    def set_tutorial_step(self, step: int, completed: bool = False) -> None:
        """Record tutorial progress. Completion, once set, is never cleared here."""
        self._document.tutorial_step = max(0, step)
        if completed:
            self._document.tutorial_completed = True
        self.save()

    def get_active_quests(self) -> list[QuestRecord]:
        self.load()
        return list(self._quest_records().values())

    def set_active_quests(self, records: Optional[Iterable[QuestRecord]]) -> None:
        """Replace all quest records. Later records win for duplicate quest ids."""
        self._commit_quests({r.quest_id: r.model_copy() for r in records or []})

    def upsert_quest_progress(self, quest_id: str, progress: int, completed: bool) -> None:
        records = self._quest_records()
        record = records.get(quest_id)
        if record is None:
            records[quest_id] = QuestRecord(quest_id=quest_id, progress=progress, completed=completed)
        else:
            record.progress = progress
            record.completed = completed
        self._commit_quests(records)

    def remove_quest(self, quest_id: str) -> None:
        records = self._quest_records()
        records.pop(quest_id, None)
        self._commit_quests(records)

    def _quest_records(self) -> dict[str, QuestRecord]:
        """Live quest records keyed by id: the quest log's when present, else the document's."""
        if self._quests is not None:
            return self._quests.active
        return {q.quest_id: q for q in self._document.active_quests}

    def _commit_quests(self, records: dict[str, QuestRecord]) -> None:
        if self._quests is not None:
            self._quests.active = records
        else:
            self._document.active_quests = list(records.values())
        self.save()

    # ===================================================================
    # Facilities
    # ===================================================================

    def _initialize_level_one_facilities(self) -> None:
        for facility_id in self._config.level_one_facilities:
            self._caches.facility_levels[facility_id] = 1
        log.debug("Level-one facilities initialized: %s", ", ".join(self._config.level_one_facilities))

    def get_facility_level(self, facility_id: str) -> int:
        """Current level; level-one facilities without an entry read as 1, others as 0."""
        level = self._caches.facility_levels.get(facility_id)
        if level is not None:
            return level
        return 1 if facility_id in self._config.level_one_facilities else 0

    def set_facility_level(self, facility_id: str, level: int) -> None:
        """Set a facility level, re-derive unlocks if it gates rarity, notify and save."""
        if not facility_id:
            return
        self._caches.facility_levels[facility_id] = max(0, level)

        if facility_id == self._config.rarity_gate_facility:
            self.refresh_equipment_unlocks(auto_save=False)

        self._events.emit(FacilityLevelChanged())
        self.save()

    def try_upgrade_facility(self, facility_id: str, cost: int) -> bool:
        """Pay *cost* and raise a facility by one level.

        Refused without spending when the catalog caps the facility and
        it is already at its maximum.
        """
        if not facility_id:
            return False
        current = self.get_facility_level(facility_id)
        definition = self._catalog.facility(facility_id)
        if definition is not None and definition.max_level and current >= definition.max_level:
            return False
        if not self._economy.try_spend_money(cost):
            return False
        self.set_facility_level(facility_id, current + 1)
        return True

    def reset_all_facility_levels(self) -> None:
        """Development helper: drop all facility progress back to the defaults."""
        self._caches.facility_levels.clear()
        self._initialize_level_one_facilities()
        self.save()
        log.info("All facility levels have been reset")
