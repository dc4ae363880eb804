"""Progression constants — facility ids, step tables, file names.

Facility ids are the stable short ids stored in the save document.
"""

# -- Facility ids --------------------------------------------------------

FACILITY_MAX_LEVEL_INCREASE: str = "GD002"
"""Raises the level cap of the other facilities."""

FACILITY_MINE_CART: str = "GD003"
"""Mine cart capacity."""

FACILITY_BUFF_DISCOUNT: str = "TP001"
"""Discount on run-buff prices."""

FACILITY_BUFF_UNLOCK: str = "TP002"
"""Gates which run buffs are offered in the shop."""

FACILITY_BUFF_SLOT: str = "TP003"
"""Number of run-buff slots."""

FACILITY_EQUIPMENT_DISCOUNT: str = "BS001"
"""Discount on equipment enhancement costs."""

FACILITY_EQUIPMENT_MAX_LEVEL: str = "BS002"
"""Caps the enhancement level of all equipment."""

FACILITY_RARITY_UNLOCK: str = "BS003"
"""Rarity gate: its level decides which equipment rarities are unlocked."""

LEVEL_ONE_FACILITIES: tuple[str, ...] = (
    FACILITY_MAX_LEVEL_INCREASE,
    FACILITY_BUFF_SLOT,
    FACILITY_EQUIPMENT_MAX_LEVEL,
    FACILITY_RARITY_UNLOCK,
    FACILITY_BUFF_UNLOCK,
    FACILITY_MINE_CART,
)
"""Facilities that start at level 1 instead of 0."""

# -- Discounts -----------------------------------------------------------

DISCOUNT_PER_LEVEL: float = 0.05
"""Price reduction granted per discount-facility level."""

MAX_DISCOUNT_RATE: float = 0.45
"""Upper bound for any facility discount."""

# -- Equipment enhancement caps -----------------------------------------

EQUIPMENT_MAX_LEVEL_LIMITS: tuple[int, ...] = (0, 4, 8, 12)
"""Enhancement cap indexed by BS002 level; higher levels keep the last value."""

# -- Files ---------------------------------------------------------------

DEFAULT_SAVE_FILENAME: str = "database.json"
DEFAULT_CONFIG_PATH: str = "config/progression.yaml"
DEFAULT_CATALOG_PATH: str = "config/catalog"
