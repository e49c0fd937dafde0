"""
Module: engine.progression.events

Purpose:
    Events emitted by the progression engine. They are queued and drained
    exactly once by whoever presents them, replacing ad-hoc "needs
    animation" flags on the profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class MilestoneKind(Enum):
    HATCH = "hatch"


@dataclass(frozen=True)
class LevelUp:
    stage_id: str
    level: int
    aggregate_level: int


@dataclass(frozen=True)
class EquipmentUnlocked:
    item_id: str
    aggregate_level: int


@dataclass(frozen=True)
class MilestoneReached:
    kind: MilestoneKind
    stage_id: str
    level: int


ProgressionEvent = Union[LevelUp, EquipmentUnlocked, MilestoneReached]
