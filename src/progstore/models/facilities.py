"""Facility and run-buff definitions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FacilityDefinition:
    """A town facility that can be upgraded level by level.

    A ``max_level`` of 0 means the catalog does not cap the facility.
    """

    id: str = ""
    name: str = ""
    max_level: int = 0


@dataclass(frozen=True)
class BuffDefinition:
    """A run buff sold in the shop before a dungeon run.

    Attributes:
        id: Stable buff id stored in the run-buff basket.
        name: Display name.
        price: Undiscounted price in gold.
        required_unlock_level: Buff-unlock facility level needed to offer it.
        icon: Icon asset name.
    """

    id: str = ""
    name: str = ""
    price: int = 0
    required_unlock_level: int = 0
    icon: str = ""
