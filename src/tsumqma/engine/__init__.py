"""
Module: engine

Purpose:
    Quiz game engine: question types, question order, timed sessions,
    progression and the controller that ties them to assets and storage.

Key Classes:
    - GameController: Application-level flow
    - SessionScheduler: Timed session state machine
    - ProgressionEngine: Exp, levels, unlocks, milestones
    - GameConfig: Top-level configuration

Used By:
    - scripts/simulate_session.py
"""

from .collaborators import (
    AssetSource,
    Cue,
    CueSink,
    NullCueSink,
    NullPresenter,
    Presenter,
    ProfileStore,
    SessionSnapshot,
)
from .config import GameConfig
from .controller import EquipmentStatus, GameController, StageStatus, StatusSnapshot
from .loading import FileAssetSource
from .progression import ProgressionConfig, ProgressionEngine, UnlockPolicy
from .session import AnswerOutcome, SessionConfig, SessionPhase, SessionScheduler, TimerQueue

__all__ = [
    "GameController",
    "GameConfig",
    "StatusSnapshot",
    "StageStatus",
    "EquipmentStatus",
    "SessionScheduler",
    "SessionPhase",
    "SessionConfig",
    "AnswerOutcome",
    "TimerQueue",
    "ProgressionEngine",
    "ProgressionConfig",
    "UnlockPolicy",
    "FileAssetSource",
    "AssetSource",
    "Presenter",
    "CueSink",
    "ProfileStore",
    "Cue",
    "SessionSnapshot",
    "NullPresenter",
    "NullCueSink",
]
