"""Tests for the bootstrap entry point."""

import json
import logging
from pathlib import Path

from progstore.main import bootstrap, load_configuration, main
from progstore.models.equipment import EquipmentRarity

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class TestLoadConfiguration:
    def test_shipped_config(self):
        config = load_configuration(str(CONFIG_DIR))
        assert config.store.rarity_gate_facility == "BS003"
        assert {eq.id for eq in config.catalog.equipment} >= {"WP001", "MT001"}
        assert len(config.catalog.buffs) == 4

    def test_missing_config_dir_uses_defaults(self, tmp_path, monkeypatch, caplog):
        monkeypatch.chdir(tmp_path)
        with caplog.at_level(logging.WARNING):
            config = load_configuration(str(tmp_path / "nowhere"))
        assert config.catalog.equipment == []
        assert config.store.save_path == "database.json"
        assert "empty catalog" in caplog.text


class TestBootstrap:
    def test_bootstrap_loads_store(self, tmp_path):
        save_file = tmp_path / "database.json"
        context = bootstrap(config_dir=str(CONFIG_DIR), save_path=str(save_file))
        assert context.store.is_loaded
        assert not context.catalog_report.has_errors
        assert set(context.store.unlocked_equipment_ids()) == {"WP001", "MT001"}
        assert context.store.max_unlocked_rarity() is EquipmentRarity.COMMON
        assert save_file.exists()

    def test_facility_change_is_logged(self, tmp_path, caplog):
        context = bootstrap(config_dir=str(CONFIG_DIR), save_path=str(tmp_path / "database.json"))
        with caplog.at_level(logging.INFO):
            context.store.set_facility_level("BS003", 3)
        assert "max rarity now RARE" in caplog.text
        assert "WP002" in context.store.unlocked_equipment_ids()

    def test_save_failure_is_logged(self, tmp_path, caplog):
        slot = tmp_path / "slot"
        slot.mkdir()
        with caplog.at_level(logging.WARNING):
            context = bootstrap(config_dir=str(CONFIG_DIR), save_path=str(slot))
        assert context.store.is_loaded
        assert "will retry on next change" in caplog.text


def test_main_with_arguments(tmp_path, monkeypatch):
    save_file = tmp_path / "database.json"
    monkeypatch.setattr("sys.argv", [
        "progstore", "--config_dir", str(CONFIG_DIR), "--save_file", str(save_file),
    ])
    main()
    raw = json.loads(save_file.read_text(encoding="utf-8"))
    assert raw["money"] == 0
    assert set(raw["unlocked_equipments"]) == {"WP001", "MT001"}
