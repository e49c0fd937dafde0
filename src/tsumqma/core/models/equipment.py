"""
Module: equipment

Purpose:
    Static catalog entry for companion equipment. Items unlock once the
    player's aggregate level reaches them and never lock again.

Used By:
    - common.equipment: The built-in catalog
    - engine.progression.engine: Unlock checks
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EquipmentItem:
    """
    Equipment catalog entry (immutable).

    Attributes:
        id: Unique item id, stored in PlayerProfile.unlocked_equipment
        name: Display name
        icon: Display glyph
        unlock_level: Aggregate level that unlocks the item (>= 1)
        bonus: Bonus value shown on the status screen
    """

    id: str
    name: str
    icon: str
    unlock_level: int
    bonus: int

    def __post_init__(self) -> None:
        if self.unlock_level < 1:
            raise ValueError(f"unlock_level must be >= 1: {self.unlock_level}")
        if self.bonus < 0:
            raise ValueError(f"bonus must be non-negative: {self.bonus}")
