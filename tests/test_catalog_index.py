"""Tests for CatalogIndex lookup and validation report."""

import logging

from progstore.engine.catalog import CatalogIndex, CatalogKind, Severity
from progstore.models.equipment import EquipmentDefinition
from progstore.models.facilities import BuffDefinition, FacilityDefinition
from progstore.models.skills import SkillDefinition


class TestLookup:
    def test_lookup_by_kind(self, catalog):
        eq = catalog.lookup(CatalogKind.EQUIPMENT, "sword_rare")
        assert eq is not None and eq.name == "Knight's Blade"
        skill = catalog.lookup(CatalogKind.SKILL, "whirl")
        assert skill is not None and skill.max_level == 5

    def test_typed_helpers(self, catalog):
        assert catalog.equipment("pick_common").max_durability == 40
        assert catalog.skill("strike").name == "Power Strike"
        assert catalog.facility("BS003").max_level == 8
        assert catalog.buff("luck").price == 250

    def test_unknown_id_returns_none_and_warns(self, catalog, caplog):
        with caplog.at_level(logging.WARNING):
            assert catalog.lookup(CatalogKind.SKILL, "nope") is None
        assert "nope" in caplog.text

    def test_empty_id_returns_none_silently(self, catalog, caplog):
        with caplog.at_level(logging.WARNING):
            assert catalog.skill(None) is None
            assert catalog.equipment("") is None
        assert "Unknown" not in caplog.text

    def test_kind_mismatch_is_not_found(self, catalog):
        assert catalog.lookup(CatalogKind.SKILL, "sword_common") is None

    def test_all_accessors_preserve_order(self, catalog):
        assert [e.id for e in catalog.all_equipment()][:2] == ["sword_common", "pick_common"]
        assert [s.skill_id for s in catalog.all_skills()] == ["strike", "whirl", "quake"]
        assert [b.id for b in catalog.all_buffs()] == ["edge", "luck"]

    def test_clean_catalog_has_empty_report(self, catalog):
        assert catalog.report.issues == []
        assert not catalog.report.has_errors


class TestValidationReport:
    def test_duplicate_skill_id_is_error_and_first_wins(self):
        index = CatalogIndex.build(
            [],
            [
                SkillDefinition(skill_id="s", name="First", icon="i"),
                SkillDefinition(skill_id="s", name="Second", icon="i"),
            ],
        )
        assert index.report.has_errors
        err = index.report.errors[0]
        assert err.kind is CatalogKind.SKILL
        assert err.id == "s"
        assert index.skill("s").name == "First"

    def test_missing_icon_is_warning(self):
        index = CatalogIndex.build(
            [EquipmentDefinition(id="e")],
            [SkillDefinition(skill_id="s")],
        )
        assert not index.report.has_errors
        assert {(w.kind, w.id) for w in index.report.warnings} == {
            (CatalogKind.EQUIPMENT, "e"),
            (CatalogKind.SKILL, "s"),
        }
        # Still indexed
        assert index.equipment("e") is not None

    def test_empty_skill_id_is_warning_and_not_indexed(self):
        index = CatalogIndex.build([], [SkillDefinition(skill_id="", name="Nameless", icon="i")])
        assert len(index.report.warnings) == 1
        assert index.report.warnings[0].severity is Severity.WARNING
        assert index.all_skills() == []

    def test_duplicate_equipment_id_is_error(self):
        index = CatalogIndex.build(
            [EquipmentDefinition(id="e", icon="i"), EquipmentDefinition(id="e", icon="i")],
            [],
        )
        assert len(index.report.errors) == 1
        assert len(index.all_equipment()) == 1

    def test_issues_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            CatalogIndex.build([], [SkillDefinition(skill_id="x"), SkillDefinition(skill_id="x")])
        assert "duplicate skill id" in caplog.text
        assert "no icon assigned" in caplog.text

    def test_facilities_and_buffs_without_ids_are_dropped(self):
        index = CatalogIndex.build(
            [], [],
            facilities=[FacilityDefinition(id=""), FacilityDefinition(id="F1")],
            buffs=[BuffDefinition(id=""), BuffDefinition(id="B1")],
        )
        assert index.facility("F1") is not None
        assert [b.id for b in index.all_buffs()] == ["B1"]
