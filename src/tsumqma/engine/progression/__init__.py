"""
Module: engine.progression

Purpose:
    Experience, leveling, equipment unlocks and milestones.

Key Classes:
    - ProgressionEngine: Exp grants with level-up cascades
    - ProgressionConfig, UnlockPolicy: Tunables
    - LevelUp, EquipmentUnlocked, MilestoneReached: Queued events
"""

from .config import ProgressionConfig, UnlockPolicy
from .engine import ProgressionEngine
from .events import (
    LevelUp,
    EquipmentUnlocked,
    MilestoneReached,
    MilestoneKind,
    ProgressionEvent,
)

__all__ = [
    "ProgressionConfig",
    "UnlockPolicy",
    "ProgressionEngine",
    "LevelUp",
    "EquipmentUnlocked",
    "MilestoneReached",
    "MilestoneKind",
    "ProgressionEvent",
]
