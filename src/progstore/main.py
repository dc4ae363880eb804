"""Progression store entry point.

Builds the progression context explicitly, in order:
1. Load configuration (store config, content catalog)
2. Build the catalog index and report validation problems
3. Create collaborators (event bus, wallet, quest log)
4. Create the progression store and load the save document

Usage:
    python -m progstore.main [--save_file <path>] [--config_dir <dir>]
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from progstore.engine.catalog import CatalogIndex, CatalogReport
from progstore.engine.economy import Wallet
from progstore.engine.quest_log import QuestLog
from progstore.loaders.catalog_loader import CatalogData, load_catalog
from progstore.loaders.config_loader import StoreConfig, load_store_config
from progstore.persistence.progression_store import ProgressionStore
from progstore.util.events import EventBus, FacilityLevelChanged, SaveFailed

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Container for all loaded configuration
# ---------------------------------------------------------------------------


@dataclass
class Configuration:
    """Holds all data loaded from config files."""

    store: StoreConfig = field(default_factory=StoreConfig)
    catalog: CatalogData = field(default_factory=CatalogData)


# ---------------------------------------------------------------------------
# Context passed to every consumer of progression state
# ---------------------------------------------------------------------------


@dataclass
class ProgressionContext:
    """Holds references to the store and its collaborators."""

    config: StoreConfig
    catalog: CatalogIndex
    event_bus: EventBus
    wallet: Wallet
    quest_log: QuestLog
    store: ProgressionStore

    @property
    def catalog_report(self) -> CatalogReport:
        return self.catalog.report


# ===================================================================
# 1. Load configuration
# ===================================================================


def load_configuration(config_dir: str = "config") -> Configuration:
    """Load the store config and content catalog from *config_dir*.

    ``progression.yaml`` holds the store config; the catalog path inside
    it is resolved relative to the working directory unless it is
    absolute.  Without a config file, ``<config_dir>/catalog`` is used.
    """
    log.info("Loading configuration …")
    store_config = load_store_config(os.path.join(config_dir, "progression.yaml"))

    catalog_path = store_config.catalog_path
    if not os.path.exists(catalog_path):
        catalog_path = os.path.join(config_dir, "catalog")

    if os.path.exists(catalog_path):
        catalog = load_catalog(catalog_path)
    else:
        log.warning("Catalog not found at %s, starting with an empty catalog", catalog_path)
        catalog = CatalogData()

    return Configuration(store=store_config, catalog=catalog)


# ===================================================================
# 2. Create context
# ===================================================================


def create_context(
    config: Configuration,
    save_path: Optional[str] = None,
    wallet: Optional[Wallet] = None,
) -> ProgressionContext:
    """Build the catalog index and all collaborators. Does not load yet."""
    catalog = CatalogIndex.build(
        config.catalog.equipment,
        config.catalog.skills,
        config.catalog.facilities,
        config.catalog.buffs,
    )
    if catalog.report.has_errors:
        log.error("Catalog has %d errors; continuing with the first definition of each id",
                  len(catalog.report.errors))

    event_bus = EventBus()
    wallet = wallet or Wallet()
    quest_log = QuestLog()
    store = ProgressionStore(
        catalog=catalog,
        economy=wallet,
        event_bus=event_bus,
        save_path=save_path,
        config=config.store,
        quest_log=quest_log,
    )
    return ProgressionContext(
        config=config.store,
        catalog=catalog,
        event_bus=event_bus,
        wallet=wallet,
        quest_log=quest_log,
        store=store,
    )


def wire_events(context: ProgressionContext) -> None:
    """Log facility changes and save failures."""

    def on_facility_changed(event: FacilityLevelChanged) -> None:
        log.info("Facility level changed; max rarity now %s",
                 context.store.max_unlocked_rarity().name)

    def on_save_failed(event: SaveFailed) -> None:
        log.warning("Progress not saved to %s (%s); will retry on next change",
                    event.path, event.reason)

    context.event_bus.on(FacilityLevelChanged, on_facility_changed)
    context.event_bus.on(SaveFailed, on_save_failed)


def bootstrap(config_dir: str = "config", save_path: Optional[str] = None) -> ProgressionContext:
    """Load configuration, build the context, wire events and load the save."""
    config = load_configuration(config_dir=config_dir)
    context = create_context(config, save_path=save_path)
    wire_events(context)
    context.store.load()
    return context


# ===================================================================
# Entry point
# ===================================================================


def _arg_value(name: str) -> Optional[str]:
    if name not in sys.argv:
        return None
    idx = sys.argv.index(name)
    if idx + 1 >= len(sys.argv):
        print(f"Error: {name} requires an argument", file=sys.stderr)
        sys.exit(1)
    return sys.argv[idx + 1]


def main() -> None:
    """Load the progression store and print a short summary.

    Supports command-line arguments:
        --save_file <path>   Save document to use (default from config)
        --config_dir <dir>   Configuration directory (default: config)
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    config_dir = _arg_value("--config_dir") or "config"
    save_file = _arg_value("--save_file")

    context = bootstrap(config_dir=config_dir, save_path=save_file)
    store = context.store
    log.info("Save file: %s", store.save_path)
    log.info("Gold: %d", context.wallet.get_balance())
    log.info("Unlocked equipment: %d (max rarity %s)",
             len(store.unlocked_equipment_ids()), store.max_unlocked_rarity().name)
    log.info("Unlocked skills: %d", len(store.document.unlocked_skills))


if __name__ == "__main__":
    main()
