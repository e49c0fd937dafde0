"""
Module: engine.config

Purpose:
    Top-level game configuration: where assets and the save file live,
    plus the session and progression tunables.

Key Classes:
    - GameConfig: Immutable game configuration

Used By:
    - engine.controller
    - scripts/simulate_session.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from tsumqma.common.quotes import PLACEHOLDER_NAME
from tsumqma.common.stages import DEFAULT_STAGE_ID

from .progression.config import ProgressionConfig
from .session.config import SessionConfig


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a game (immutable).

    Attributes:
        asset_root: Directory holding stages.json and quizzes/
        save_path: Save file location
        quotes_file: Companion quotes JSON; None disables quotes
        default_stage: Stage loaded on start-up
        default_player_name: Name given to older saves that have none
        session: Timed session tunables
        progression: Exp and leveling tunables

    Example:
        >>> config = GameConfig.for_directory(Path("data"))
        >>> config.save_path
        PosixPath('data/save.json')
    """

    asset_root: Path
    save_path: Path
    quotes_file: Optional[Path] = None
    default_stage: str = DEFAULT_STAGE_ID
    default_player_name: str = PLACEHOLDER_NAME
    session: SessionConfig = field(default_factory=SessionConfig)
    progression: ProgressionConfig = field(default_factory=ProgressionConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        # Accept str paths; frozen dataclass needs object.__setattr__
        object.__setattr__(self, "asset_root", Path(self.asset_root))
        object.__setattr__(self, "save_path", Path(self.save_path))
        if self.quotes_file is not None:
            object.__setattr__(self, "quotes_file", Path(self.quotes_file))

        if not self.default_stage:
            raise ValueError("default_stage must not be empty")
        if not self.default_player_name.strip():
            raise ValueError("default_player_name must not be blank")

    @classmethod
    def for_directory(cls, root: Path | str, **overrides) -> GameConfig:
        """Conventional layout: assets, save.json and quotes.json under one directory."""
        root = Path(root)
        return cls(
            asset_root=root,
            save_path=overrides.pop("save_path", root / "save.json"),
            quotes_file=overrides.pop("quotes_file", root / "quotes.json"),
            **overrides,
        )
