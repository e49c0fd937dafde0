"""
Module: engine.collaborators

Purpose:
    Narrow interfaces to everything the engine drives but does not
    implement: screen rendering, audio cues and save storage. The engine
    only calls these; it never reads presentation state back.

Key Classes:
    - Presenter: Receives descriptors and snapshots to display
    - CueSink: Receives discrete audio/feedback cue names
    - ProfileStore: Synchronous load/save of the player profile
    - AssetSource: Stage list and per-stage questions
    - SessionSnapshot: Numbers the HUD shows during a session
    - NullPresenter, NullCueSink: No-op implementations for headless runs

Used By:
    - engine.session.scheduler
    - engine.controller
    - storage.profile_store: ProfileStore implementations
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable

from tsumqma.core.models.progress import PlayerProfile
from tsumqma.core.models.questions import QuestionSpec
from tsumqma.core.models.session import SessionResult
from tsumqma.core.models.stages import Stage

from .progression.events import MilestoneReached
from .question_types.base import OutcomeDescriptor, RenderDescriptor


class Cue(Enum):
    """Feedback cue names understood by the audio collaborator."""

    CLICK = "click"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    LEVEL_UP = "levelUp"
    TICK = "tick"
    COUNTDOWN = "countdown"
    GO = "go"
    RESULT_ENTRY = "resultEntry"
    HATCH = "hatch"


@dataclass(frozen=True)
class SessionSnapshot:
    """
    HUD values during a session.

    Attributes:
        stage_id: Stage being played
        score: Session score
        combo: Current combo
        time_remaining: Seconds left
        stage_level: Level of the stage being played
        exp: Exp of the stage being played
        max_exp: Exp needed for the next stage level
        aggregate_level: Overall player level
    """

    stage_id: str
    score: int
    combo: int
    time_remaining: int
    stage_level: int
    exp: int
    max_exp: int
    aggregate_level: int

    @property
    def exp_fraction(self) -> float:
        return self.exp / self.max_exp if self.max_exp else 0.0


@runtime_checkable
class Presenter(Protocol):
    def show_countdown(self, value: Optional[int]) -> None:
        """Show a countdown number; None means "GO"."""

    def show_question(self, number: int, descriptor: RenderDescriptor) -> None: ...

    def show_outcome(self, outcome: OutcomeDescriptor) -> None: ...

    def show_snapshot(self, snapshot: SessionSnapshot) -> None: ...

    def show_result(self, result: SessionResult) -> None: ...

    def show_milestone(self, milestone: MilestoneReached) -> None: ...


@runtime_checkable
class CueSink(Protocol):
    def emit(self, cue: Cue) -> None: ...


@runtime_checkable
class AssetSource(Protocol):
    """Both methods raise AssetLoadError on any failure."""

    def load_stages(self) -> List[Stage]: ...

    def load_stage_questions(self, stage: Stage | str) -> List[QuestionSpec]: ...


@runtime_checkable
class ProfileStore(Protocol):
    def load(self) -> Optional[PlayerProfile]:
        """Return the saved profile, or None when nothing is saved."""

    def save(self, profile: PlayerProfile) -> None: ...


class NullPresenter:
    """Presenter that shows nothing."""

    def show_countdown(self, value: Optional[int]) -> None:
        pass

    def show_question(self, number: int, descriptor: RenderDescriptor) -> None:
        pass

    def show_outcome(self, outcome: OutcomeDescriptor) -> None:
        pass

    def show_snapshot(self, snapshot: SessionSnapshot) -> None:
        pass

    def show_result(self, result: SessionResult) -> None:
        pass

    def show_milestone(self, milestone: MilestoneReached) -> None:
        pass


class NullCueSink:
    """Cue sink that plays nothing."""

    def emit(self, cue: Cue) -> None:
        pass
