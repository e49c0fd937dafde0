"""
Module: progress

Purpose:
    Long-lived progression data: per-stage level tracks and the player
    profile that owns them. Unlike the question models these are mutable;
    only the progression engine writes to them.

Key Classes:
    - StageProgress: Level/exp track of one stage
    - PlayerProfile: Persisted player state

Key Functions:
    - aggregate_level_for(): Overall level derived from stage levels

Dependencies:
    - dataclasses (std)
    - common.stages: Default stage ids

Used By:
    - engine.progression.engine: Exp grants and level-ups
    - core.utils.serialization: Save format
    - storage.profile_store: Persistence
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from tsumqma.common.stages import DEFAULT_STAGE_IDS, INITIAL_MAX_EXP

AGGREGATE_FACTOR = 0.8


def aggregate_level_for(levels: Iterable[int], factor: float = AGGREGATE_FACTOR) -> int:
    """
    Derive the overall player level from stage levels.

    Args:
        levels: Level of every tracked stage
        factor: Share of the level sum that counts (0.8 by default)

    Returns:
        floor(sum(levels) * factor)

    Example:
        >>> aggregate_level_for([3, 1, 1, 1, 1, 1])
        6
    """
    # round() first so float noise in the product never drops a whole result
    # below its integer
    return math.floor(round(sum(levels) * factor, 9))


@dataclass
class StageProgress:
    """
    Level/exp track of a single stage.

    Attributes:
        level: Current level (>= 1)
        exp: Experience towards the next level (>= 0)
        max_exp: Experience needed for the next level (> 0)
    """

    level: int = 1
    exp: int = 0
    max_exp: int = INITIAL_MAX_EXP

    def __post_init__(self) -> None:
        if self.level < 1:
            raise ValueError(f"level must be >= 1: {self.level}")
        if self.exp < 0:
            raise ValueError(f"exp must be non-negative: {self.exp}")
        if self.max_exp <= 0:
            raise ValueError(f"max_exp must be positive: {self.max_exp}")

    @property
    def fraction(self) -> float:
        """Progress towards the next level in [0, 1)."""
        return self.exp / self.max_exp

    def copy(self) -> StageProgress:
        return StageProgress(self.level, self.exp, self.max_exp)

    def to_dict(self) -> dict:
        return {"level": self.level, "exp": self.exp, "maxExp": self.max_exp}

    @classmethod
    def from_dict(cls, data: dict) -> StageProgress:
        return cls(
            level=int(data.get("level", 1)),
            exp=int(data.get("exp", 0)),
            max_exp=int(data.get("maxExp", INITIAL_MAX_EXP)),
        )


def default_stages() -> Dict[str, StageProgress]:
    """Fresh level-1 track for every default stage."""
    return {stage_id: StageProgress() for stage_id in DEFAULT_STAGE_IDS}


@dataclass
class PlayerProfile:
    """
    Persisted player state.

    Attributes:
        selected_character: Character id ("fire", "water", "leaf") or None
        player_name: Player display name
        character_name: Name given to the companion after hatching
        hatched: Whether the companion egg has hatched
        aggregate_level: Derived overall level (see aggregate_level_for)
        total_answers: All answers ever submitted
        total_correct: All correct answers ever submitted
        max_combo_ever: Best combo across all sessions
        unlocked_equipment: Ids of unlocked equipment items
        stages: Stage id -> StageProgress

    Invariants:
        - aggregate_level always equals aggregate_level_for(stage levels)
        - unlocked_equipment only grows
    """

    selected_character: Optional[str] = None
    player_name: str = ""
    character_name: str = ""
    hatched: bool = False
    aggregate_level: int = 1
    total_answers: int = 0
    total_correct: int = 0
    max_combo_ever: int = 0
    unlocked_equipment: Set[str] = field(default_factory=set)
    stages: Dict[str, StageProgress] = field(default_factory=default_stages)

    def __post_init__(self) -> None:
        self.recompute_aggregate()

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def max_stage_level(self) -> int:
        """Highest level across stages; drives the companion's look."""
        return max((s.level for s in self.stages.values()), default=1)

    @property
    def accuracy(self) -> float:
        """Share of correct answers, 0.0 before the first answer."""
        if self.total_answers == 0:
            return 0.0
        return self.total_correct / self.total_answers

    def stage_level(self, stage_id: str) -> int:
        """Level of a stage, 1 for stages never played."""
        stage = self.stages.get(stage_id)
        return stage.level if stage else 1

    def ensure_stage(self, stage_id: str, factor: float = AGGREGATE_FACTOR) -> StageProgress:
        """Get a stage track, creating a fresh one for unseen stage ids."""
        if stage_id not in self.stages:
            self.stages[stage_id] = StageProgress()
            self.recompute_aggregate(factor)
        return self.stages[stage_id]

    def recompute_aggregate(self, factor: float = AGGREGATE_FACTOR) -> int:
        self.aggregate_level = aggregate_level_for(
            (s.level for s in self.stages.values()), factor
        )
        return self.aggregate_level

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the save format.

        Note: aggregate_level is stored for display only and recomputed on load.
        """
        return {
            "selectedCharacter": self.selected_character,
            "playerName": self.player_name,
            "characterName": self.character_name,
            "hasHatched": self.hatched,
            "level": self.aggregate_level,
            "maxCombo": self.max_combo_ever,
            "totalAnswers": self.total_answers,
            "correctAnswers": self.total_correct,
            "stageLevels": {k: v.to_dict() for k, v in self.stages.items()},
            "equipment": sorted(self.unlocked_equipment),
        }

    @classmethod
    def from_dict(cls, data: dict) -> PlayerProfile:
        """Deserialize from the current save format (see core.utils.serialization for legacy)."""
        stages = {
            stage_id: StageProgress.from_dict(raw)
            for stage_id, raw in data.get("stageLevels", {}).items()
        }
        return cls(
            selected_character=data.get("selectedCharacter"),
            player_name=data.get("playerName") or "",
            character_name=data.get("characterName") or "",
            hatched=bool(data.get("hasHatched", False)),
            total_answers=int(data.get("totalAnswers", 0)),
            total_correct=int(data.get("correctAnswers", 0)),
            max_combo_ever=int(data.get("maxCombo", 0)),
            unlocked_equipment=set(data.get("equipment", [])),
            stages=stages or default_stages(),
        )
