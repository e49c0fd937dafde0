"""
Module: engine.progression.config

Purpose:
    Configuration dataclass for the progression engine. Immutable
    configuration with validation on construction.

Key Classes:
    - ProgressionConfig: Growth and unlock parameters
    - UnlockPolicy: How equipment unlock levels are compared

Used By:
    - engine.progression.engine
    - engine.config.GameConfig
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from tsumqma.core.models.progress import AGGREGATE_FACTOR


class UnlockPolicy(Enum):
    """
    Equipment unlock comparison.

    Attributes:
        EXACT: Unlock when the aggregate level equals the unlock level at a
               level-up step. An item whose level is skipped (or that lies
               below the starting aggregate level) never unlocks.
        THRESHOLD: Unlock every item at or below the aggregate level.
    """

    EXACT = auto()
    THRESHOLD = auto()


@dataclass(frozen=True)
class ProgressionConfig:
    """
    Configuration for exp and leveling (immutable).

    Attributes:
        growth: max_exp multiplier per level-up (floored after scaling)
        aggregate_factor: Share of the stage level sum forming the aggregate level
        hatch_level: Stage level that hatches the companion egg
        unlock_policy: Equipment unlock comparison

    Example:
        >>> ProgressionConfig().growth
        1.5
    """

    growth: float = 1.5
    aggregate_factor: float = AGGREGATE_FACTOR
    hatch_level: int = 5
    unlock_policy: UnlockPolicy = UnlockPolicy.THRESHOLD

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.growth < 1.0:
            raise ValueError(f"growth must be >= 1.0: {self.growth}")
        if not 0.0 < self.aggregate_factor <= 1.0:
            raise ValueError(f"aggregate_factor must be in (0, 1]: {self.aggregate_factor}")
        if self.hatch_level < 2:
            raise ValueError(f"hatch_level must be >= 2: {self.hatch_level}")
