"""
Core Models Package

Data models shared by the loader, the engine and storage.

| Model | Mutability | Owner |
|-------|-----------|-------|
| `QuestionSpec` | frozen | asset loader |
| `Stage` | frozen | asset loader |
| `EquipmentItem` | frozen | static catalog |
| `StageProgress` | mutable | progression engine |
| `PlayerProfile` | mutable | progression engine |
| `SessionState` | mutable | session scheduler |
| `SessionResult` | frozen | session scheduler |
"""

from .questions import QuestionSpec, SINGLE_CHOICE, MULTIPLE_CHOICE
from .stages import Stage
from .equipment import EquipmentItem
from .progress import StageProgress, PlayerProfile, aggregate_level_for
from .session import SessionState, SessionResult

__all__ = [
    "QuestionSpec",
    "SINGLE_CHOICE",
    "MULTIPLE_CHOICE",
    "Stage",
    "EquipmentItem",
    "StageProgress",
    "PlayerProfile",
    "aggregate_level_for",
    "SessionState",
    "SessionResult",
]
