"""
TsumQMA Core Package

Shared data models, schema validation and serialization helpers. Nothing in
this package knows about timers, question rendering or persistence; those
live in tsumqma.engine and tsumqma.storage.

**DESIGN NOTES:**

1. **Immutable question data**
   - `QuestionSpec` and `Stage` are frozen; the loader builds them once.

2. **Derived aggregate level**
   - `PlayerProfile.aggregate_level` is recomputed from stage levels,
     never trusted from the save file.

3. **Explicit session state**
   - `SessionState` is a separate object owned by the scheduler.
"""

from .models import (
    QuestionSpec,
    Stage,
    EquipmentItem,
    StageProgress,
    PlayerProfile,
    SessionState,
    SessionResult,
)

__all__ = [
    "QuestionSpec",
    "Stage",
    "EquipmentItem",
    "StageProgress",
    "PlayerProfile",
    "SessionState",
    "SessionResult",
]
