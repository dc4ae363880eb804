"""Catalog index — content database.

Maps stable ids to equipment, skill, facility and buff definitions and
validates the content once at construction.  Read-only afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union

from progstore.models.equipment import EquipmentDefinition
from progstore.models.facilities import BuffDefinition, FacilityDefinition
from progstore.models.skills import SkillDefinition

log = logging.getLogger(__name__)

Definition = Union[EquipmentDefinition, SkillDefinition, FacilityDefinition, BuffDefinition]


class CatalogKind(Enum):
    """The kind of definition to look up."""

    EQUIPMENT = "equipment"
    SKILL = "skill"
    FACILITY = "facility"
    BUFF = "buff"


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class CatalogIssue:
    """A single problem found while validating the catalog."""

    severity: Severity
    kind: CatalogKind
    id: str
    message: str


@dataclass
class CatalogReport:
    """Validation result of a catalog build.

    Nothing in here blocks startup; callers decide whether errors are
    fatal in their context.
    """

    issues: list[CatalogIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[CatalogIssue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[CatalogIssue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(i.severity is Severity.ERROR for i in self.issues)

    def add(self, severity: Severity, kind: CatalogKind, id: str, message: str) -> None:
        self.issues.append(CatalogIssue(severity, kind, id, message))
        if severity is Severity.ERROR:
            log.error("Catalog %s %r: %s", kind.value, id, message)
        else:
            log.warning("Catalog %s %r: %s", kind.value, id, message)


class CatalogIndex:
    """Content database keyed by id.

    Attributes:
        report: Validation report produced by :meth:`build`.
    """

    def __init__(self) -> None:
        self._equipment: dict[str, EquipmentDefinition] = {}
        self._skills: dict[str, SkillDefinition] = {}
        self._facilities: dict[str, FacilityDefinition] = {}
        self._buffs: dict[str, BuffDefinition] = {}
        self.report = CatalogReport()

    @classmethod
    def build(
        cls,
        equipment: Iterable[EquipmentDefinition],
        skills: Iterable[SkillDefinition],
        facilities: Iterable[FacilityDefinition] = (),
        buffs: Iterable[BuffDefinition] = (),
    ) -> CatalogIndex:
        """Index all definitions and validate them.

        Entries with an empty id are left out of the index. For duplicate
        ids the first definition wins.
        """
        index = cls()
        report = index.report

        for eq in equipment:
            if not eq.id:
                report.add(Severity.WARNING, CatalogKind.EQUIPMENT, "", f"equipment {eq.name!r} has empty id")
                continue
            if eq.id in index._equipment:
                report.add(Severity.ERROR, CatalogKind.EQUIPMENT, eq.id, "duplicate equipment id")
                continue
            if not eq.icon:
                report.add(Severity.WARNING, CatalogKind.EQUIPMENT, eq.id, "no icon assigned")
            index._equipment[eq.id] = eq

        for skill in skills:
            if not skill.skill_id:
                report.add(Severity.WARNING, CatalogKind.SKILL, "", f"skill {skill.name!r} has empty skill_id")
                continue
            if skill.skill_id in index._skills:
                report.add(Severity.ERROR, CatalogKind.SKILL, skill.skill_id, "duplicate skill id")
                continue
            if not skill.icon:
                report.add(Severity.WARNING, CatalogKind.SKILL, skill.skill_id, "no icon assigned")
            index._skills[skill.skill_id] = skill

        for facility in facilities:
            if facility.id:
                index._facilities.setdefault(facility.id, facility)

        for buff in buffs:
            if buff.id:
                index._buffs.setdefault(buff.id, buff)

        log.info(
            "Catalog indexed: %d equipment, %d skills, %d facilities, %d buffs "
            "(%d errors, %d warnings)",
            len(index._equipment), len(index._skills), len(index._facilities),
            len(index._buffs), len(report.errors), len(report.warnings),
        )
        return index

    # -- Lookup ----------------------------------------------------------

    def lookup(self, kind: CatalogKind, id: Optional[str]) -> Optional[Definition]:
        """Look up a definition by kind and id. Unknown ids log a warning."""
        if not id:
            return None
        table = self._table(kind)
        definition = table.get(id)
        if definition is None:
            log.warning("Unknown %s id %r; check save data against the catalog", kind.value, id)
        return definition

    def equipment(self, id: Optional[str]) -> Optional[EquipmentDefinition]:
        return self.lookup(CatalogKind.EQUIPMENT, id)

    def skill(self, id: Optional[str]) -> Optional[SkillDefinition]:
        return self.lookup(CatalogKind.SKILL, id)

    def facility(self, id: Optional[str]) -> Optional[FacilityDefinition]:
        """Facilities are mostly referenced by constant ids, so a miss is not logged."""
        if not id:
            return None
        return self._facilities.get(id)

    def buff(self, id: Optional[str]) -> Optional[BuffDefinition]:
        return self.lookup(CatalogKind.BUFF, id)

    def all_equipment(self) -> list[EquipmentDefinition]:
        return list(self._equipment.values())

    def all_skills(self) -> list[SkillDefinition]:
        return list(self._skills.values())

    def all_buffs(self) -> list[BuffDefinition]:
        return list(self._buffs.values())

    def _table(self, kind: CatalogKind) -> dict:
        return {
            CatalogKind.EQUIPMENT: self._equipment,
            CatalogKind.SKILL: self._skills,
            CatalogKind.FACILITY: self._facilities,
            CatalogKind.BUFF: self._buffs,
        }[kind]
