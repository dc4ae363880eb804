"""Catalog loader — parses content YAML files into definition models.

Supports two modes:
  1. Single file with all sections (equipment, skills, facilities, buffs)
  2. Directory with per-section files: equipment.yaml, skills.yaml,
     facilities.yaml, buffs.yaml

A section is either a list of entries carrying an ``id`` key, or a
mapping of id → attributes.  Lists are preferred for content that is
validated for duplicate ids, since YAML mappings silently drop them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import yaml

from progstore.models.equipment import EquipmentDefinition, EquipmentKind, EquipmentRarity
from progstore.models.facilities import BuffDefinition, FacilityDefinition
from progstore.models.skills import SkillDefinition, UnlockCondition

log = logging.getLogger(__name__)

_SECTIONS = ("equipment", "skills", "facilities", "buffs")


@dataclass
class CatalogData:
    """Raw definition lists as read from disk, before indexing."""

    equipment: list[EquipmentDefinition] = field(default_factory=list)
    skills: list[SkillDefinition] = field(default_factory=list)
    facilities: list[FacilityDefinition] = field(default_factory=list)
    buffs: list[BuffDefinition] = field(default_factory=list)


def _iter_entries(section: Any, id_key: str = "id") -> Iterator[tuple[str, dict]]:
    """Yield ``(id, attrs)`` pairs from a list or mapping section."""
    if isinstance(section, dict):
        for entry_id, attrs in section.items():
            if isinstance(attrs, dict):
                yield str(entry_id), attrs
    elif isinstance(section, list):
        for attrs in section:
            if isinstance(attrs, dict):
                yield str(attrs.get(id_key, "") or ""), attrs


def _parse_rarity(value: Any) -> EquipmentRarity:
    if isinstance(value, int):
        return EquipmentRarity(value)
    return EquipmentRarity[str(value).strip().upper()]


def _parse_equipment(section: Any) -> list[EquipmentDefinition]:
    items: list[EquipmentDefinition] = []
    for eid, attrs in _iter_entries(section):
        try:
            items.append(EquipmentDefinition(
                id=eid,
                name=attrs.get("name", eid),
                kind=EquipmentKind(attrs.get("kind", "weapon")),
                rarity=_parse_rarity(attrs.get("rarity", 0)),
                max_durability=int(attrs.get("max_durability", 100)),
                max_upgrade_level=int(attrs.get("max_upgrade_level", 12)),
                icon=attrs.get("icon", "") or "",
            ))
        except (KeyError, ValueError, TypeError):
            log.warning("Skipping equipment %r with invalid attributes", eid)
    return items


def _parse_conditions(raw: Any) -> tuple[UnlockCondition, ...]:
    conditions: list[UnlockCondition] = []
    for cond in raw or []:
        if not isinstance(cond, dict):
            continue
        conditions.append(UnlockCondition(
            required_skill_id=str(cond.get("skill", "")),
            required_level=int(cond.get("level", 1)),
        ))
    return tuple(conditions)


def _parse_skills(section: Any) -> list[SkillDefinition]:
    skills: list[SkillDefinition] = []
    for sid, attrs in _iter_entries(section):
        try:
            skills.append(SkillDefinition(
                skill_id=sid,
                name=attrs.get("name", sid),
                max_level=max(1, int(attrs.get("max_level", 1))),
                icon=attrs.get("icon", "") or "",
                unlock_conditions=_parse_conditions(attrs.get("unlock_conditions")),
            ))
        except (ValueError, TypeError):
            log.warning("Skipping skill %r with invalid max_level or unlock conditions", sid)
    return skills


def _parse_facilities(section: Any) -> list[FacilityDefinition]:
    facilities: list[FacilityDefinition] = []
    for fid, attrs in _iter_entries(section):
        try:
            facilities.append(FacilityDefinition(
                id=fid,
                name=attrs.get("name", fid),
                max_level=int(attrs.get("max_level", 0)),
            ))
        except (ValueError, TypeError):
            log.warning("Skipping facility %r with invalid max_level", fid)
    return facilities


def _parse_buffs(section: Any) -> list[BuffDefinition]:
    buffs: list[BuffDefinition] = []
    for bid, attrs in _iter_entries(section):
        try:
            buffs.append(BuffDefinition(
                id=bid,
                name=attrs.get("name", bid),
                price=int(attrs.get("price", 0)),
                required_unlock_level=int(attrs.get("required_unlock_level", 0)),
                icon=attrs.get("icon", "") or "",
            ))
        except (ValueError, TypeError):
            log.warning("Skipping buff %r with invalid price or unlock level", bid)
    return buffs


_PARSERS = {
    "equipment": _parse_equipment,
    "skills": _parse_skills,
    "facilities": _parse_facilities,
    "buffs": _parse_buffs,
}


def load_catalog(path: str | Path = "config/catalog") -> CatalogData:
    """Load all content definitions from YAML file(s).

    Args:
        path: Either a directory containing per-section YAML files
              (equipment.yaml, skills.yaml, …) or a single YAML file
              with all sections.

    Returns:
        A :class:`CatalogData` with one list per section.
    """
    path = Path(path)
    data = CatalogData()

    if path.is_dir():
        for section in _SECTIONS:
            section_file = path / f"{section}.yaml"
            if not section_file.exists():
                continue
            with section_file.open(encoding="utf-8") as f:
                raw = yaml.safe_load(f)
            setattr(data, section, _PARSERS[section](raw))
    else:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        for section in _SECTIONS:
            setattr(data, section, _PARSERS[section](raw.get(section)))

    log.info(
        "Loaded catalog from %s (%d equipment, %d skills, %d facilities, %d buffs)",
        path, len(data.equipment), len(data.skills), len(data.facilities), len(data.buffs),
    )
    return data
