"""Store configuration — loads tunable constants from config/progression.yaml.

Provides a single ``StoreConfig`` dataclass that is loaded once at startup
and then passed to the progression store and the facility rules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

from progstore.util.constants import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_CONFIG_PATH,
    DEFAULT_SAVE_FILENAME,
    DISCOUNT_PER_LEVEL,
    EQUIPMENT_MAX_LEVEL_LIMITS,
    FACILITY_BUFF_DISCOUNT,
    FACILITY_BUFF_UNLOCK,
    FACILITY_EQUIPMENT_DISCOUNT,
    FACILITY_EQUIPMENT_MAX_LEVEL,
    FACILITY_RARITY_UNLOCK,
    LEVEL_ONE_FACILITIES,
    MAX_DISCOUNT_RATE,
)

log = logging.getLogger(__name__)


@dataclass
class StoreConfig:
    """All tunable progression constants.

    Every field has a default so the store can start without the file.
    """

    # -- Files -------------------------------------------------------
    save_path: str = DEFAULT_SAVE_FILENAME
    catalog_path: str = DEFAULT_CATALOG_PATH

    # -- Facilities --------------------------------------------------
    level_one_facilities: List[str] = field(
        default_factory=lambda: list(LEVEL_ONE_FACILITIES)
    )
    rarity_gate_facility: str = FACILITY_RARITY_UNLOCK
    equipment_discount_facility: str = FACILITY_EQUIPMENT_DISCOUNT
    equipment_max_level_facility: str = FACILITY_EQUIPMENT_MAX_LEVEL
    buff_discount_facility: str = FACILITY_BUFF_DISCOUNT
    buff_unlock_facility: str = FACILITY_BUFF_UNLOCK

    # -- Step tables -------------------------------------------------
    discount_per_level: float = DISCOUNT_PER_LEVEL
    max_discount_rate: float = MAX_DISCOUNT_RATE
    equipment_max_level_limits: List[int] = field(
        default_factory=lambda: list(EQUIPMENT_MAX_LEVEL_LIMITS)
    )


def load_store_config(path: str = DEFAULT_CONFIG_PATH) -> StoreConfig:
    """Load store configuration from a YAML file.

    Missing keys fall back to dataclass defaults, unknown keys are
    ignored.  If the file does not exist, a warning is logged and pure
    defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Store config not found at %s, using defaults", p)
        return StoreConfig()

    with p.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        log.warning("Store config %s is not a mapping, using defaults", p)
        return StoreConfig()

    log.info("Loaded store config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in StoreConfig.__dataclass_fields__)
    if unknown:
        log.warning("Ignoring unknown store config keys: %s", ", ".join(unknown))

    return StoreConfig(**{
        k: v for k, v in raw.items()
        if k in StoreConfig.__dataclass_fields__
    })
