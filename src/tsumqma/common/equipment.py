"""
Module: common.equipment

Purpose:
    Built-in equipment catalog. Items unlock by aggregate level.

Used By:
    - engine.progression.engine: Default catalog checked on level-ups
"""

from __future__ import annotations

from tsumqma.core.models.equipment import EquipmentItem

EQUIPMENT_CATALOG: tuple[EquipmentItem, ...] = (
    EquipmentItem("pen1", "Wooden Pen", "🖊️", unlock_level=1, bonus=5),
    EquipmentItem("pen2", "Silver Pen", "🖋️", unlock_level=3, bonus=10),
    EquipmentItem("pen3", "Golden Pen", "✒️", unlock_level=5, bonus=15),
    EquipmentItem("book1", "Beginner's Book", "📕", unlock_level=2, bonus=5),
    EquipmentItem("book2", "Expert's Book", "📘", unlock_level=4, bonus=10),
    EquipmentItem("glasses", "Glasses of Wisdom", "👓", unlock_level=6, bonus=20),
)
