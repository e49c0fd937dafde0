"""
Module: engine.controller

Purpose:
    Top-level game flow. Wires assets, save storage, presentation and
    audio collaborators to the progression engine and the session
    scheduler.

    Start-up → character select → player name → stage select →
    countdown → session → result (→ hatch + character naming)

Key Classes:
    - GameController: Application-level operations
    - StatusSnapshot, StageStatus, EquipmentStatus: Status screen data

Dependencies:
    - engine.loading: Stage and quiz assets
    - engine.session: Timed sessions
    - engine.progression: Exp and milestones
    - storage: Save file

Used By:
    - scripts/simulate_session.py
    - Presentation layers
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from tsumqma.common.characters import Character, evolution_stage, get_character, image_path
from tsumqma.common.quotes import QuoteBook
from tsumqma.core.models.equipment import EquipmentItem
from tsumqma.core.models.progress import PlayerProfile
from tsumqma.core.models.questions import QuestionSpec
from tsumqma.core.models.session import SessionResult
from tsumqma.core.models.stages import Stage
from tsumqma.errors import AssetLoadError, NoEligibleQuestions
from tsumqma.storage.profile_store import JsonProfileStore

from .collaborators import AssetSource, Cue, CueSink, NullCueSink, NullPresenter, Presenter, ProfileStore
from .config import GameConfig
from .loading.loader import FileAssetSource
from .progression.engine import ProgressionEngine
from .progression.events import EquipmentUnlocked, MilestoneKind, MilestoneReached, ProgressionEvent
from .session.scheduler import SessionScheduler
from .session.timers import TimerQueue

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Status Screen Data
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StageStatus:
    """One axis of the skill radar chart."""

    stage_id: str
    name: str
    level: int
    exp: int
    max_exp: int

    @property
    def fraction(self) -> float:
        return self.exp / self.max_exp if self.max_exp else 0.0


@dataclass(frozen=True)
class EquipmentStatus:
    item: EquipmentItem
    unlocked: bool


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Everything the status screen shows (immutable).

    Attributes:
        player_name: Player name, "" if not set
        character: Selected character, None before selection
        display_name: Companion name, falling back to the character name
        image_path: Companion art for the highest stage level
        evolution_stage: Colour-scheme stage label
        aggregate_level: Overall level
        accuracy_percent: Rounded all-time accuracy
        max_combo: Best combo ever
        total_answers: All answers ever submitted
        stages: Per-stage radar chart data, in stage list order
        equipment: Catalog items with unlocked flags
    """

    player_name: str
    character: Optional[Character]
    display_name: str
    image_path: Optional[str]
    evolution_stage: str
    aggregate_level: int
    accuracy_percent: int
    max_combo: int
    total_answers: int
    stages: tuple[StageStatus, ...]
    equipment: tuple[EquipmentStatus, ...]


# ─────────────────────────────────────────────────────────────────────────────
# Controller
# ─────────────────────────────────────────────────────────────────────────────

class GameController:
    """
    Application controller.

    Attributes:
        config: Game configuration
        assets: Stage/quiz asset source
        store: Save storage
        presenter: Presentation collaborator
        cues: Audio cue collaborator
        timers: Timer queue driving session continuations
        stages: Loaded stage descriptors
        profile: Player profile (after initialize())
        progression: ProgressionEngine (after initialize())
        scheduler: SessionScheduler (after initialize())
        quotes: Companion quotes
        is_new_player: True when no save existed at start-up
        last_events: Progression events drained after the last session

    Example:
        >>> controller = GameController(GameConfig.for_directory("data"))
        >>> if controller.initialize():
        ...     controller.choose_character("fire")
        ...     controller.select_stage("ai")
        ...     controller.advance(3)  # countdown
    """

    def __init__(
        self,
        config: GameConfig,
        *,
        assets: Optional[AssetSource] = None,
        store: Optional[ProfileStore] = None,
        presenter: Optional[Presenter] = None,
        cues: Optional[CueSink] = None,
        timers: Optional[TimerQueue] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.assets = assets or FileAssetSource(config.asset_root)
        self.store = store or JsonProfileStore(config.save_path)
        self.presenter = presenter or NullPresenter()
        self.cues = cues or NullCueSink()
        self.timers = timers or TimerQueue()
        self._rng = rng or random.Random(config.session.seed)

        self.stages: List[Stage] = []
        self.questions: Dict[str, List[QuestionSpec]] = {}
        self.profile: Optional[PlayerProfile] = None
        self.progression: Optional[ProgressionEngine] = None
        self.scheduler: Optional[SessionScheduler] = None
        self.quotes = QuoteBook()
        self.is_new_player = False
        self.last_events: List[ProgressionEvent] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Start-up
    # ─────────────────────────────────────────────────────────────────────────

    def initialize(self) -> bool:
        """
        Load assets and the save file and build the engines.

        Returns:
            False if stage or quiz assets fail to load; the game cannot
            start and the caller should stop.
        """
        logger.info("Initializing game")
        try:
            self.stages = self.assets.load_stages()
            self.questions[self.config.default_stage] = self.assets.load_stage_questions(
                self.config.default_stage
            )
        except AssetLoadError as e:
            logger.error(f"Failed to load game assets: {e}")
            return False

        if self.config.quotes_file is not None:
            self.quotes = QuoteBook.load(self.config.quotes_file)

        loaded = self.store.load()
        self.is_new_player = loaded is None
        self.profile = loaded if loaded is not None else PlayerProfile()
        self.progression = ProgressionEngine(self.profile, config=self.config.progression)
        for stage in self.stages:
            self.progression.ensure_stage(stage.id)

        self.scheduler = SessionScheduler(
            self.progression,
            store=self.store,
            presenter=self.presenter,
            cues=self.cues,
            config=self.config.session,
            timers=self.timers,
            rng=self._rng,
            on_end=self._on_session_end,
        )

        # Older saves predate player names
        if not self.is_new_player and not self.profile.player_name:
            self.profile.player_name = self.config.default_player_name
            self._save()
            logger.info(f"Default player name set: {self.profile.player_name}")

        logger.info(
            f"Game ready: {len(self.stages)} stages, "
            f"{'new player' if self.is_new_player else 'save loaded'}, "
            f"aggregate level {self.profile.aggregate_level}"
        )
        return True

    @property
    def needs_character_selection(self) -> bool:
        return self._require_profile().selected_character is None

    @property
    def needs_player_name(self) -> bool:
        return not self._require_profile().player_name

    @property
    def needs_character_name(self) -> bool:
        """True once the egg has hatched and the companion has no name yet."""
        profile = self._require_profile()
        return profile.hatched and not profile.character_name

    # ─────────────────────────────────────────────────────────────────────────
    # Player Setup
    # ─────────────────────────────────────────────────────────────────────────

    def choose_character(self, character_id: str) -> Character:
        """
        Select the companion character and save.

        Raises:
            ValueError: If the character id is unknown
        """
        character = get_character(character_id)
        if character is None:
            raise ValueError(f"Unknown character: {character_id!r}")
        profile = self._require_profile()
        profile.selected_character = character.id
        self.cues.emit(Cue.CLICK)
        self._save()
        logger.info(f"Character selected: {character.name}")
        return character

    def set_player_name(self, name: str) -> str:
        """
        Set the player name (trimmed) and save.

        Raises:
            ValueError: If the name is blank
        """
        name = _clean_name(name)
        self._require_profile().player_name = name
        self._save()
        logger.info(f"Player name set: {name}")
        return name

    def name_character(self, name: str) -> str:
        """
        Name the hatched companion (trimmed) and save.

        Raises:
            ValueError: If the name is blank
        """
        name = _clean_name(name)
        self._require_profile().character_name = name
        self.cues.emit(Cue.CLICK)
        self._save()
        logger.info(f"Companion named: {name}")
        return name

    # ─────────────────────────────────────────────────────────────────────────
    # Sessions
    # ─────────────────────────────────────────────────────────────────────────

    def select_stage(self, stage_id: str) -> bool:
        """
        Load a stage's questions and start the countdown.

        Returns:
            False if the questions could not be loaded or none is eligible
            at the stage level; no session is started.
        """
        scheduler = self._require_scheduler()
        try:
            questions = self.assets.load_stage_questions(stage_id)
        except AssetLoadError as e:
            logger.error(f"Failed to load stage {stage_id!r}: {e}")
            return False
        self.questions[stage_id] = questions

        try:
            scheduler.select_stage(stage_id, questions)
        except NoEligibleQuestions as e:
            logger.error(f"Cannot start stage {stage_id!r}: {e}")
            return False
        self.cues.emit(Cue.CLICK)
        return True

    def advance(self, seconds: float) -> int:
        """Advance game time, running due countdown steps, ticks and dwells."""
        return self.timers.advance(seconds)

    def _on_session_end(self, result: SessionResult) -> None:
        self.last_events = self._require_progression().drain_events()
        for event in self.last_events:
            if isinstance(event, EquipmentUnlocked):
                logger.info(f"Equipment unlocked: {event.item_id}")
            elif isinstance(event, MilestoneReached) and event.kind is MilestoneKind.HATCH:
                self.cues.emit(Cue.HATCH)
                self.presenter.show_milestone(event)

    # ─────────────────────────────────────────────────────────────────────────
    # Status
    # ─────────────────────────────────────────────────────────────────────────

    def status_snapshot(self) -> StatusSnapshot:
        profile = self._require_profile()
        progression = self._require_progression()
        character = get_character(profile.selected_character)
        max_level = profile.max_stage_level

        stage_names = {s.id: s.name for s in self.stages}
        ordered_ids = [s.id for s in self.stages] + [
            k for k in profile.stages if k not in stage_names
        ]
        stages = tuple(
            StageStatus(
                stage_id=stage_id,
                name=stage_names.get(stage_id, stage_id),
                level=profile.stages[stage_id].level,
                exp=profile.stages[stage_id].exp,
                max_exp=profile.stages[stage_id].max_exp,
            )
            for stage_id in ordered_ids
        )

        return StatusSnapshot(
            player_name=profile.player_name,
            character=character,
            display_name=profile.character_name or (character.name if character else ""),
            image_path=image_path(character, max_level) if character else None,
            evolution_stage=evolution_stage(max_level),
            aggregate_level=profile.aggregate_level,
            accuracy_percent=round(profile.accuracy * 100),
            max_combo=profile.max_combo_ever,
            total_answers=profile.total_answers,
            stages=stages,
            equipment=tuple(
                EquipmentStatus(item, unlocked) for item, unlocked in progression.equipment_status()
            ),
        )

    def pick_quote(self) -> Optional[str]:
        """Companion speech line addressed to the player, None without quotes."""
        return self.quotes.pick(self._require_profile().player_name, self._rng)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _require_profile(self) -> PlayerProfile:
        if self.profile is None:
            raise RuntimeError("GameController.initialize() has not run")
        return self.profile

    def _require_progression(self) -> ProgressionEngine:
        if self.progression is None:
            raise RuntimeError("GameController.initialize() has not run")
        return self.progression

    def _require_scheduler(self) -> SessionScheduler:
        if self.scheduler is None:
            raise RuntimeError("GameController.initialize() has not run")
        return self.scheduler

    def _save(self) -> None:
        try:
            self.store.save(self._require_profile())
        except OSError as e:
            logger.error(f"Failed to save profile: {e}")


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Name must not be blank")
    return cleaned
