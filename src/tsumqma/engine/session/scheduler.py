"""
Module: engine.session.scheduler

Purpose:
    Runs one timed quiz session as a state machine:

        IDLE --select_stage--> COUNTDOWN --3 ticks--> ACTIVE --timer/end--> ENDED

    While ACTIVE it draws questions in shuffled order, validates answers,
    keeps score and combo, grants exp through the progression engine and
    hands the profile to storage after every exp-affecting event.

Key Classes:
    - SessionScheduler: The state machine
    - SessionPhase: IDLE / COUNTDOWN / ACTIVE / ENDED
    - AnswerOutcome: What a single answer did

Scoring:
    - Correct: combo += 1, score += base + combo * bonus (using the new
      combo), exp += exp_base + combo * exp_per_combo
    - Incorrect: combo = 0, no exp
    - End: exp += floor(score / end_exp_divisor)

Continuations:
    Countdown steps, 1 Hz ticks and the post-answer dwell are scheduled on
    a TimerQueue and tagged with the session generation. Ending a session
    bumps the generation, so any continuation still queued for the old
    session is a no-op when it fires.

Dependencies:
    - engine.selection.shuffle: Question order
    - engine.question_types: Per-question validation
    - engine.progression: Exp grants

Used By:
    - engine.controller
    - scripts/simulate_session.py
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from tsumqma.core.models.questions import QuestionSpec
from tsumqma.core.models.session import SessionResult, SessionState
from tsumqma.errors import InvalidSessionState, NoEligibleQuestions

from ..collaborators import Cue, CueSink, NullCueSink, NullPresenter, Presenter, ProfileStore, SessionSnapshot
from ..progression.engine import ProgressionEngine
from ..question_types.base import OutcomeDescriptor, QuestionType
from ..question_types.registry import QuestionTypeRegistry, default_registry
from ..selection.shuffle import draw_next, eligible_indices
from .config import SessionConfig
from .timers import ScheduledTask, TimerQueue

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    IDLE = "idle"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class AnswerOutcome:
    """
    Effect of one answer (immutable).

    Attributes:
        is_correct: Verdict
        score_gained: Points added to the session score
        combo: Combo after the answer
        exp_gained: Exp granted immediately
        leveled_up: Whether the exp grant raised the stage level
        outcome: Per-option classification for the presenter
    """

    is_correct: bool
    score_gained: int
    combo: int
    exp_gained: int
    leveled_up: bool
    outcome: OutcomeDescriptor


class SessionScheduler:
    """
    Timed session state machine.

    One scheduler serves any number of sessions one after another; only one
    is ever in progress.

    Attributes:
        progression: Progression engine owning the player profile
        config: Session timing and scoring
        timers: Timer queue the continuations are scheduled on
        phase: Current SessionPhase
        state: SessionState of the current/last session (None before start)
        result: SessionResult of the last ended session
        stage_id: Stage of the current/last session
        current: QuestionType on screen
        generation: Session generation; bumped on every start and end

    Example:
        >>> timers = TimerQueue()
        >>> scheduler = SessionScheduler(ProgressionEngine(PlayerProfile()), timers=timers)
        >>> scheduler.select_stage("ai", questions)
        >>> timers.advance(3)           # countdown
        >>> scheduler.select_option(0)  # answer the first question
        >>> timers.advance(60)          # run out the clock
        >>> scheduler.phase
        <SessionPhase.ENDED: 'ended'>
    """

    def __init__(
        self,
        progression: ProgressionEngine,
        *,
        store: Optional[ProfileStore] = None,
        presenter: Optional[Presenter] = None,
        cues: Optional[CueSink] = None,
        registry: Optional[QuestionTypeRegistry] = None,
        config: Optional[SessionConfig] = None,
        timers: Optional[TimerQueue] = None,
        rng: Optional[random.Random] = None,
        on_end: Optional[Callable[[SessionResult], None]] = None,
    ):
        self.progression = progression
        self.store = store
        self.presenter = presenter or NullPresenter()
        self.cues = cues or NullCueSink()
        self.registry = registry or default_registry
        self.config = config or SessionConfig()
        self.timers = timers or TimerQueue()
        self.on_end = on_end
        self._rng = rng or random.Random(self.config.seed)

        self.phase = SessionPhase.IDLE
        self.state: Optional[SessionState] = None
        self.result: Optional[SessionResult] = None
        self.stage_id: Optional[str] = None
        self.current: Optional[QuestionType] = None
        self.generation = 0

        self._questions: tuple[QuestionSpec, ...] = ()
        self._countdown_remaining = 0
        self._awaiting_advance = False
        self._countdown_task: Optional[ScheduledTask] = None
        self._tick_task: Optional[ScheduledTask] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_playing(self) -> bool:
        return self.phase is SessionPhase.ACTIVE

    @property
    def awaiting_advance(self) -> bool:
        """True between an answer and the next question."""
        return self._awaiting_advance

    @property
    def countdown_remaining(self) -> int:
        return self._countdown_remaining

    @property
    def current_spec(self) -> Optional[QuestionSpec]:
        return self.current.spec if self.current else None

    def snapshot(self) -> SessionSnapshot:
        """HUD values for the current session."""
        if self.state is None or self.stage_id is None:
            raise InvalidSessionState("snapshot", self.phase)
        stage = self.progression.stage(self.stage_id)
        return SessionSnapshot(
            stage_id=self.stage_id,
            score=self.state.score,
            combo=self.state.combo,
            time_remaining=self.state.time_remaining,
            stage_level=stage.level if stage else 1,
            exp=stage.exp if stage else 0,
            max_exp=stage.max_exp if stage else 1,
            aggregate_level=self.progression.profile.aggregate_level,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # IDLE -> COUNTDOWN -> ACTIVE
    # ─────────────────────────────────────────────────────────────────────────

    def select_stage(self, stage_id: str, questions: Sequence[QuestionSpec]) -> None:
        """
        Pick a stage and start the countdown.

        Args:
            stage_id: Stage to play; its level track is created if missing
            questions: All loaded questions of the stage

        Raises:
            InvalidSessionState: If a session is already counting down or running
            NoEligibleQuestions: If no question is unlocked at the stage level
        """
        if self.phase in (SessionPhase.COUNTDOWN, SessionPhase.ACTIVE):
            raise InvalidSessionState("select_stage", self.phase)

        self.progression.ensure_stage(stage_id)
        level = self.progression.stage_level(stage_id)
        if not eligible_indices(questions, level):
            raise NoEligibleQuestions(level, len(questions))

        self.generation += 1
        self.stage_id = stage_id
        self._questions = tuple(questions)
        self.state = None
        self.result = None
        self.current = None
        self._awaiting_advance = False
        self.phase = SessionPhase.COUNTDOWN
        self._countdown_remaining = self.config.countdown_ticks

        logger.info(
            f"Stage {stage_id!r} selected: {len(self._questions)} questions, Lv{level}"
        )

        if self._countdown_remaining == 0:
            self._activate()
            return

        self.presenter.show_countdown(self._countdown_remaining)
        self.cues.emit(Cue.COUNTDOWN)
        self._countdown_task = self._schedule(
            self.config.tick_interval, self.countdown_tick, "countdown"
        )

    def countdown_tick(self) -> None:
        """
        Advance the countdown by one step; the last step starts the session.

        Raises:
            InvalidSessionState: If not counting down
        """
        if self.phase is not SessionPhase.COUNTDOWN:
            raise InvalidSessionState("countdown_tick", self.phase)
        if self._countdown_task is not None:
            self._countdown_task.cancel()

        self._countdown_remaining -= 1
        if self._countdown_remaining > 0:
            self.presenter.show_countdown(self._countdown_remaining)
            self.cues.emit(Cue.COUNTDOWN)
            self._countdown_task = self._schedule(
                self.config.tick_interval, self.countdown_tick, "countdown"
            )
            return

        self._countdown_task = None
        self.presenter.show_countdown(None)
        self.cues.emit(Cue.GO)
        self._activate()

    def cancel(self) -> None:
        """
        Abandon a countdown before the session starts.

        Raises:
            InvalidSessionState: If not counting down
        """
        if self.phase is not SessionPhase.COUNTDOWN:
            raise InvalidSessionState("cancel", self.phase)
        self._invalidate_generation()
        self.phase = SessionPhase.IDLE
        logger.info(f"Countdown for stage {self.stage_id!r} cancelled")

    def _activate(self) -> None:
        self.state = SessionState(time_remaining=self.config.duration)
        self.phase = SessionPhase.ACTIVE
        logger.info(f"Session started on stage {self.stage_id!r} ({self.config.duration}s)")
        self.advance_question()
        self._tick_task = self._schedule(self.config.tick_interval, self.tick, "tick")

    # ─────────────────────────────────────────────────────────────────────────
    # ACTIVE
    # ─────────────────────────────────────────────────────────────────────────

    def advance_question(self) -> QuestionType:
        """
        Put the next question on screen.

        Draws from the shuffled order, reshuffling when the pass is
        exhausted, and counts the question as presented.

        Raises:
            InvalidSessionState: If the session is not active
            NoEligibleQuestions: If reshuffling finds nothing; the session
                is abandoned without an end-of-session grant
        """
        if self.phase is not SessionPhase.ACTIVE or self.state is None:
            raise InvalidSessionState("advance_question", self.phase)

        level = self.progression.stage_level(self.stage_id)
        try:
            index = draw_next(self.state, self._questions, level, self._rng)
        except NoEligibleQuestions:
            logger.error(f"No eligible questions left on stage {self.stage_id!r}; abandoning session")
            self._invalidate_generation()
            self.phase = SessionPhase.ENDED
            raise

        spec = self._questions[index]
        self.current = self.registry.create(spec)
        self.state.questions_answered += 1
        self._awaiting_advance = False

        logger.debug(
            f"Question {self.state.questions_answered}: {spec.text[:30]!r} "
            f"({self.state.cursor}/{len(self.state.order)})"
        )
        self.presenter.show_question(self.state.questions_answered, self.current.present())
        self.presenter.show_snapshot(self.snapshot())
        return self.current

    def select_option(self, index: int) -> Optional[AnswerOutcome]:
        """
        Forward an option click to the current question.

        Returns:
            The AnswerOutcome when the click completes the answer (exclusive
            choice), otherwise None (multi choice toggles)
        """
        self._require_answerable("select_option")
        answer = self.current.record_selection(index)
        self.cues.emit(Cue.CLICK)
        if answer is None:
            return None
        return self.answer(answer)

    def confirm(self) -> AnswerOutcome:
        """
        Submit the current selection.

        Raises:
            EmptySelection: If nothing is selected; the question stays as is
        """
        self._require_answerable("confirm")
        candidate = self.current.confirm()
        self.cues.emit(Cue.CLICK)
        return self.answer(candidate)

    def answer(self, candidate: Any) -> AnswerOutcome:
        """
        Validate and score an answer to the current question.

        The whole effect (score, combo, exp, counters, save) is applied
        before this returns.

        Raises:
            InvalidSessionState: Outside ACTIVE, or if the current question
                was already answered
            EmptySelection: If a multi choice candidate selects nothing; the
                question stays open
        """
        self._require_answerable("answer")
        state = self.state
        profile = self.progression.profile

        # Everything that can fail on a bad candidate happens before mutation
        is_correct = self.current.validate(candidate)
        outcome = self.current.describe_outcome(is_correct, candidate)

        profile.total_answers += 1
        score_gained = 0
        exp_gained = 0
        leveled_up = False

        if is_correct:
            state.combo += 1
            state.max_combo = max(state.max_combo, state.combo)
            score_gained = self.config.score_for_combo(state.combo)
            state.score += score_gained
            state.session_correct_count += 1
            profile.total_correct += 1
            profile.max_combo_ever = max(profile.max_combo_ever, state.combo)

            exp_gained = self.config.exp_for_combo(state.combo)
            leveled_up = self.progression.grant_exp(self.stage_id, exp_gained)
            self.cues.emit(Cue.CORRECT)
            if leveled_up:
                self.cues.emit(Cue.LEVEL_UP)
        else:
            state.combo = 0
            self.cues.emit(Cue.INCORRECT)

        self._awaiting_advance = True
        self._save()

        self.presenter.show_outcome(outcome)
        self.presenter.show_snapshot(self.snapshot())
        self._schedule(self.config.result_dwell, self._after_dwell, "dwell")

        return AnswerOutcome(
            is_correct=is_correct,
            score_gained=score_gained,
            combo=state.combo,
            exp_gained=exp_gained,
            leveled_up=leveled_up,
            outcome=outcome,
        )

    def _after_dwell(self) -> None:
        if self.is_playing and self._awaiting_advance:
            self.advance_question()

    def tick(self) -> None:
        """
        One second of session time. Ends the session when time runs out.

        Raises:
            InvalidSessionState: If the session is not active
        """
        if self.phase is not SessionPhase.ACTIVE or self.state is None:
            raise InvalidSessionState("tick", self.phase)
        if self._tick_task is not None:
            self._tick_task.cancel()

        self.state.time_remaining = max(0, self.state.time_remaining - 1)
        self.cues.emit(Cue.TICK)
        self.presenter.show_snapshot(self.snapshot())

        if self.state.time_remaining == 0:
            self._tick_task = None
            self.end()
            return
        self._tick_task = self._schedule(self.config.tick_interval, self.tick, "tick")

    # ─────────────────────────────────────────────────────────────────────────
    # ACTIVE -> ENDED
    # ─────────────────────────────────────────────────────────────────────────

    def end(self) -> SessionResult:
        """
        Finish the session: freeze state, grant end-of-session exp, save.

        Returns:
            SessionResult for the finished session

        Raises:
            InvalidSessionState: If the session is not active
        """
        if self.phase is not SessionPhase.ACTIVE or self.state is None:
            raise InvalidSessionState("end", self.phase)

        self.phase = SessionPhase.ENDED
        self._invalidate_generation()
        self._awaiting_advance = False
        state = self.state

        exp_gained = self.config.end_exp(state.score)
        leveled_up = self.progression.grant_exp(self.stage_id, exp_gained)
        if leveled_up:
            self.cues.emit(Cue.LEVEL_UP)
        self._save()

        profile = self.progression.profile
        self.result = SessionResult(
            stage_id=self.stage_id,
            final_score=state.score,
            session_correct_count=state.session_correct_count,
            questions_answered=state.questions_answered,
            max_combo=state.max_combo,
            exp_gained=exp_gained,
            leveled_up=leveled_up,
            stage_level=profile.stage_level(self.stage_id),
            aggregate_level=profile.aggregate_level,
        )
        logger.info(
            f"Session ended on {self.stage_id!r}: score {state.score}, "
            f"{state.session_correct_count}/{state.questions_answered} correct, "
            f"+{exp_gained} exp"
        )

        self.cues.emit(Cue.RESULT_ENTRY)
        self.presenter.show_result(self.result)
        if self.on_end is not None:
            self.on_end(self.result)
        return self.result

    def reset(self) -> None:
        """Return to IDLE after a session has ended."""
        if self.phase in (SessionPhase.COUNTDOWN, SessionPhase.ACTIVE):
            raise InvalidSessionState("reset", self.phase)
        self.phase = SessionPhase.IDLE
        self.current = None

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _require_answerable(self, operation: str) -> None:
        if self.phase is not SessionPhase.ACTIVE or self.current is None:
            raise InvalidSessionState(operation, self.phase)
        if self._awaiting_advance:
            raise InvalidSessionState(operation, "active (already answered)")

    def _schedule(self, delay: float, action: Callable[[], None], label: str) -> ScheduledTask:
        """Schedule an action that only runs if this session is still current."""
        generation = self.generation

        def _guarded() -> None:
            if generation != self.generation:
                logger.debug(f"Dropped stale {label} continuation of generation {generation}")
                return
            action()

        return self.timers.call_later(delay, _guarded, generation=generation, label=label)

    def _invalidate_generation(self) -> None:
        self.timers.cancel_generation(self.generation)
        self.generation += 1
        self._countdown_task = None
        self._tick_task = None

    def _save(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.progression.profile)
        except OSError as e:
            # Progress stays in memory and is written again on the next save
            logger.error(f"Failed to save profile: {e}")
