"""
Module: engine.progression.engine

Purpose:
    Turns exp grants into persistent growth: per-stage level-up cascades,
    the derived aggregate level, equipment unlocks and the one-shot hatch
    milestone.

Key Classes:
    - ProgressionEngine: Owns the exp arithmetic for a PlayerProfile

Algorithm (grant_exp):
    1. Add exp to a working copy of the stage track
    2. While exp >= max_exp: subtract max_exp, level += 1,
       max_exp = floor(max_exp * growth), recompute aggregate level,
       unlock equipment, check the hatch milestone
    3. Commit the working copy, unlocks and events together

    Nothing is written to the profile until the cascade has finished, so a
    failure mid-cascade leaves the profile exactly as it was.

Dependencies:
    - core.models.progress: PlayerProfile, StageProgress
    - common.equipment: Equipment catalog

Used By:
    - engine.session.scheduler: Per-answer and end-of-session grants
    - engine.controller: Snapshots and event draining
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Set

from tsumqma.common.equipment import EQUIPMENT_CATALOG
from tsumqma.core.models.equipment import EquipmentItem
from tsumqma.core.models.progress import PlayerProfile, StageProgress, aggregate_level_for

from .config import ProgressionConfig, UnlockPolicy
from .events import (
    EquipmentUnlocked,
    LevelUp,
    MilestoneKind,
    MilestoneReached,
    ProgressionEvent,
)

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """
    Exp and leveling rules for one player profile.

    The engine is the only writer of StageProgress, aggregate_level,
    unlocked_equipment and the hatched flag.

    Attributes:
        profile: Player profile being progressed
        config: Progression configuration
        catalog: Equipment catalog checked on level-ups

    Example:
        >>> engine = ProgressionEngine(PlayerProfile())
        >>> engine.grant_exp("ai", 255)
        True
        >>> engine.profile.stages["ai"].level
        3
    """

    def __init__(
        self,
        profile: PlayerProfile,
        *,
        config: Optional[ProgressionConfig] = None,
        catalog: Sequence[EquipmentItem] = EQUIPMENT_CATALOG,
    ):
        self.profile = profile
        self.config = config or ProgressionConfig()
        self.catalog = tuple(catalog)
        self._events: List[ProgressionEvent] = []
        self.profile.recompute_aggregate(self.config.aggregate_factor)

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def stage_level(self, stage_id: str) -> int:
        return self.profile.stage_level(stage_id)

    def stage(self, stage_id: str) -> Optional[StageProgress]:
        return self.profile.stages.get(stage_id)

    def ensure_stage(self, stage_id: str) -> StageProgress:
        """Track a stage, recomputing the aggregate level with the configured factor."""
        return self.profile.ensure_stage(stage_id, self.config.aggregate_factor)

    @property
    def pending_events(self) -> tuple[ProgressionEvent, ...]:
        return tuple(self._events)

    def drain_events(self) -> List[ProgressionEvent]:
        """Hand over queued events; each event is delivered once."""
        events, self._events = self._events, []
        return events

    def equipment_status(self) -> list[tuple[EquipmentItem, bool]]:
        """Every catalog item with its unlocked flag, in catalog order."""
        return [(item, item.id in self.profile.unlocked_equipment) for item in self.catalog]

    # ─────────────────────────────────────────────────────────────────────────
    # Exp
    # ─────────────────────────────────────────────────────────────────────────

    def grant_exp(self, stage_id: str, amount: int) -> bool:
        """
        Add exp to a stage, cascading through as many level-ups as it pays for.

        Args:
            stage_id: Stage to credit
            amount: Exp to add (>= 0)

        Returns:
            True if at least one level-up happened. False for unknown stages.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"exp amount must be non-negative: {amount}")

        current = self.profile.stages.get(stage_id)
        if current is None:
            logger.error(f"Stage progress not found: {stage_id!r}")
            return False

        work = current.copy()
        work.exp += amount

        levels: Dict[str, int] = {k: v.level for k, v in self.profile.stages.items()}
        aggregate = self.profile.aggregate_level
        unlocked: Set[str] = set(self.profile.unlocked_equipment)
        hatched = self.profile.hatched
        events: List[ProgressionEvent] = []

        while work.exp >= work.max_exp:
            work.exp -= work.max_exp
            work.level += 1
            work.max_exp = math.floor(work.max_exp * self.config.growth)

            levels[stage_id] = work.level
            aggregate = aggregate_level_for(levels.values(), self.config.aggregate_factor)
            events.append(LevelUp(stage_id, work.level, aggregate))

            for item in self._newly_unlocked(aggregate, unlocked):
                unlocked.add(item.id)
                events.append(EquipmentUnlocked(item.id, aggregate))

            if not hatched and work.level >= self.config.hatch_level:
                hatched = True
                events.append(MilestoneReached(MilestoneKind.HATCH, stage_id, work.level))
                logger.info(f"Hatch milestone reached on stage {stage_id!r} at Lv{work.level}")

        # Commit
        current.level, current.exp, current.max_exp = work.level, work.exp, work.max_exp
        self.profile.aggregate_level = aggregate
        self.profile.unlocked_equipment.update(unlocked)
        self.profile.hatched = hatched
        self._events.extend(events)

        logger.debug(
            f"{stage_id} exp +{amount} (Lv{current.level} {current.exp}/{current.max_exp})"
        )
        return any(isinstance(e, LevelUp) for e in events)

    def _newly_unlocked(self, aggregate: int, unlocked: Set[str]) -> list[EquipmentItem]:
        if self.config.unlock_policy is UnlockPolicy.EXACT:
            matches = [i for i in self.catalog if i.unlock_level == aggregate]
        else:
            matches = [i for i in self.catalog if i.unlock_level <= aggregate]
        return [item for item in matches if item.id not in unlocked]
