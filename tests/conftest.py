"""Shared fixtures: a small in-memory catalog and a store on a temp save file."""

from __future__ import annotations

from pathlib import Path

import pytest

from progstore.engine.catalog import CatalogIndex
from progstore.engine.economy import Wallet
from progstore.engine.quest_log import QuestLog
from progstore.models.equipment import EquipmentDefinition, EquipmentKind, EquipmentRarity
from progstore.models.facilities import BuffDefinition, FacilityDefinition
from progstore.models.skills import SkillDefinition, UnlockCondition
from progstore.persistence.progression_store import ProgressionStore
from progstore.util.events import EventBus


def _equipment() -> list[EquipmentDefinition]:
    return [
        EquipmentDefinition(id="sword_common", name="Rusty Sword", rarity=EquipmentRarity.COMMON,
                            max_durability=50, max_upgrade_level=8, icon="a"),
        EquipmentDefinition(id="pick_common", name="Wooden Pickaxe", kind=EquipmentKind.MINING_TOOL,
                            rarity=EquipmentRarity.COMMON, max_durability=40, icon="b"),
        EquipmentDefinition(id="sword_uncommon", name="Iron Sword", rarity=EquipmentRarity.UNCOMMON,
                            max_durability=80, icon="c"),
        EquipmentDefinition(id="sword_rare", name="Knight's Blade", rarity=EquipmentRarity.RARE,
                            max_durability=100, icon="d"),
        EquipmentDefinition(id="sword_epic", name="Dragonbone Saber", rarity=EquipmentRarity.EPIC,
                            max_durability=140, icon="e"),
        EquipmentDefinition(id="sword_mythic", name="Blade of the Abyss", rarity=EquipmentRarity.MYTHIC,
                            max_durability=200, icon="f"),
    ]


def _skills() -> list[SkillDefinition]:
    return [
        SkillDefinition(skill_id="strike", name="Power Strike", max_level=5, icon="s1"),
        SkillDefinition(skill_id="whirl", name="Whirlwind", max_level=5, icon="s2",
                        unlock_conditions=(UnlockCondition("strike", 3),)),
        SkillDefinition(skill_id="quake", name="Earthshaker", max_level=3, icon="s3",
                        unlock_conditions=(UnlockCondition("strike", 5), UnlockCondition("ghost", 1))),
    ]


def _facilities() -> list[FacilityDefinition]:
    return [
        FacilityDefinition(id="BS001", name="Bellows", max_level=9),
        FacilityDefinition(id="BS002", name="Anvil", max_level=3),
        FacilityDefinition(id="BS003", name="Forge", max_level=8),
        FacilityDefinition(id="TP001", name="Merchant Discount", max_level=9),
    ]


def _buffs() -> list[BuffDefinition]:
    return [
        BuffDefinition(id="edge", name="Sharpened Edge", price=100, required_unlock_level=1),
        BuffDefinition(id="luck", name="Miner's Luck", price=250, required_unlock_level=2),
    ]


@pytest.fixture
def catalog() -> CatalogIndex:
    return CatalogIndex.build(_equipment(), _skills(), _facilities(), _buffs())


@pytest.fixture
def wallet() -> Wallet:
    return Wallet()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def quest_log() -> QuestLog:
    return QuestLog()


@pytest.fixture
def save_path(tmp_path: Path) -> Path:
    return tmp_path / "database.json"


@pytest.fixture
def make_store(catalog, bus, save_path, quest_log):
    """Factory for stores sharing one save file, each with a fresh wallet."""

    def _make(wallet: Wallet | None = None) -> ProgressionStore:
        return ProgressionStore(
            catalog=catalog,
            economy=wallet if wallet is not None else Wallet(),
            event_bus=bus,
            save_path=save_path,
            quest_log=quest_log,
        )

    return _make


@pytest.fixture
def store(catalog, wallet, bus, save_path, quest_log) -> ProgressionStore:
    """A loaded store on a fresh save file."""
    s = ProgressionStore(
        catalog=catalog,
        economy=wallet,
        event_bus=bus,
        save_path=save_path,
        quest_log=quest_log,
    )
    s.load()
    return s
