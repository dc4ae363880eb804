"""Tests for the store config loader."""

from pathlib import Path

from progstore.loaders.config_loader import StoreConfig, load_store_config
from progstore.util.constants import LEVEL_ONE_FACILITIES

CONFIG_FILE = Path(__file__).resolve().parent.parent / "config" / "progression.yaml"


class TestLoadStoreConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        cfg = load_store_config(str(tmp_path / "missing.yaml"))
        assert cfg == StoreConfig()

    def test_defaults(self):
        cfg = StoreConfig()
        assert cfg.save_path == "database.json"
        assert cfg.rarity_gate_facility == "BS003"
        assert tuple(cfg.level_one_facilities) == LEVEL_ONE_FACILITIES
        assert cfg.equipment_max_level_limits == [0, 4, 8, 12]

    def test_shipped_config_matches_defaults(self):
        cfg = load_store_config(str(CONFIG_FILE))
        assert sorted(cfg.level_one_facilities) == sorted(LEVEL_ONE_FACILITIES)
        assert cfg.max_discount_rate == 0.45
        assert cfg.rarity_gate_facility == "BS003"

    def test_partial_override_and_unknown_keys(self, tmp_path):
        f = tmp_path / "progression.yaml"
        f.write_text(
            "save_path: slot2.json\n"
            "max_discount_rate: 0.3\n"
            "colour_scheme: dark\n",
            encoding="utf-8",
        )
        cfg = load_store_config(str(f))
        assert cfg.save_path == "slot2.json"
        assert cfg.max_discount_rate == 0.3
        assert cfg.discount_per_level == 0.05
        assert not hasattr(cfg, "colour_scheme")

    def test_non_mapping_returns_defaults(self, tmp_path):
        f = tmp_path / "progression.yaml"
        f.write_text("- just\n- a list\n", encoding="utf-8")
        assert load_store_config(str(f)) == StoreConfig()

    def test_empty_file_returns_defaults(self, tmp_path):
        f = tmp_path / "progression.yaml"
        f.write_text("", encoding="utf-8")
        assert load_store_config(str(f)) == StoreConfig()
