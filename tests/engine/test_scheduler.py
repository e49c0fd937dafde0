"""
Unit Tests for the Session Scheduler

Tests for the IDLE -> COUNTDOWN -> ACTIVE -> ENDED state machine, scoring,
combo handling, exp grants, persistence hand-off and stale continuations.
"""

import random
from types import SimpleNamespace

import pytest

from tsumqma.core.models.progress import PlayerProfile
from tsumqma.core.models.questions import MULTIPLE_CHOICE, QuestionSpec
from tsumqma.engine.collaborators import Cue
from tsumqma.engine.progression import ProgressionEngine
from tsumqma.engine.session import SessionConfig, SessionPhase, SessionScheduler, TimerQueue
from tsumqma.errors import EmptySelection, InvalidSessionState, NoEligibleQuestions
from tsumqma.storage import MemoryProfileStore

from conftest import RecordingCues, RecordingPresenter


@pytest.fixture
def harness(question_pool):
    timers = TimerQueue()
    store = MemoryProfileStore()
    presenter = RecordingPresenter()
    cues = RecordingCues()
    ended = []
    progression = ProgressionEngine(PlayerProfile())
    scheduler = SessionScheduler(
        progression,
        store=store,
        presenter=presenter,
        cues=cues,
        timers=timers,
        rng=random.Random(3),
        on_end=ended.append,
    )
    return SimpleNamespace(
        scheduler=scheduler,
        timers=timers,
        store=store,
        presenter=presenter,
        cues=cues,
        ended=ended,
        profile=progression.profile,
        questions=question_pool,
    )


def start(h, stage_id="ai", questions=None):
    h.scheduler.select_stage(stage_id, questions if questions is not None else h.questions)
    h.timers.advance(3)
    assert h.scheduler.phase is SessionPhase.ACTIVE


def answer_correct(h):
    outcome = h.scheduler.select_option(0)
    h.timers.advance(1.5)
    return outcome


class TestCountdown:
    """Tests for IDLE -> COUNTDOWN -> ACTIVE."""

    def test_select_stage_when_idle_then_countdown(self, harness):
        harness.scheduler.select_stage("ai", harness.questions)
        assert harness.scheduler.phase is SessionPhase.COUNTDOWN
        assert harness.presenter.countdowns == [3]

    def test_countdown_when_three_ticks_then_go_and_first_question(self, harness):
        start(harness)
        assert harness.presenter.countdowns == [3, 2, 1, None]
        assert harness.cues.cues[:4] == [Cue.COUNTDOWN, Cue.COUNTDOWN, Cue.COUNTDOWN, Cue.GO]
        assert len(harness.presenter.questions) == 1
        assert harness.scheduler.state.time_remaining == 60
        assert harness.scheduler.state.questions_answered == 1

    def test_countdown_when_two_ticks_then_still_counting(self, harness):
        harness.scheduler.select_stage("ai", harness.questions)
        harness.timers.advance(2.9)
        assert harness.scheduler.phase is SessionPhase.COUNTDOWN
        assert harness.scheduler.countdown_remaining == 1

    def test_select_stage_when_active_then_raises_error(self, harness):
        start(harness)
        with pytest.raises(InvalidSessionState):
            harness.scheduler.select_stage("writing", harness.questions)

    def test_select_stage_when_nothing_eligible_then_raises_and_stays_idle(self, harness):
        locked = [QuestionSpec(text="Q", options=("a",), correct_answer=0, min_level=9)]
        with pytest.raises(NoEligibleQuestions):
            harness.scheduler.select_stage("ai", locked)
        assert harness.scheduler.phase is SessionPhase.IDLE

    def test_cancel_when_counting_down_then_idle_and_no_start(self, harness):
        harness.scheduler.select_stage("ai", harness.questions)
        harness.scheduler.cancel()
        harness.timers.advance(10)
        assert harness.scheduler.phase is SessionPhase.IDLE
        assert harness.presenter.questions == []

    def test_select_stage_when_zero_countdown_then_active_immediately(self, question_pool):
        scheduler = SessionScheduler(
            ProgressionEngine(PlayerProfile()), config=SessionConfig(countdown_ticks=0)
        )
        scheduler.select_stage("ai", question_pool)
        assert scheduler.phase is SessionPhase.ACTIVE


class TestScoring:
    """Tests for score, combo and immediate exp."""

    def test_answer_when_three_correct_then_combo_scores(self, harness):
        start(harness)
        gains = [answer_correct(harness).score_gained for _ in range(3)]
        assert gains == [120, 140, 160]
        assert harness.scheduler.state.score == 420
        assert harness.scheduler.state.max_combo == 3

    def test_answer_when_correct_then_exp_from_new_combo(self, harness):
        start(harness)
        exp = [answer_correct(harness).exp_gained for _ in range(3)]
        assert exp == [12, 14, 16]
        assert harness.profile.stages["ai"].exp == 42

    def test_answer_when_incorrect_then_combo_reset_no_exp(self, harness):
        start(harness)
        answer_correct(harness)
        answer_correct(harness)
        outcome = harness.scheduler.select_option(1)
        assert outcome.is_correct is False
        assert (outcome.score_gained, outcome.exp_gained, outcome.combo) == (0, 0, 0)
        assert harness.scheduler.state.max_combo == 2
        assert harness.scheduler.state.score == 260

    def test_answer_when_recorded_then_profile_counters_updated(self, harness):
        start(harness)
        answer_correct(harness)
        answer_correct(harness)
        harness.scheduler.select_option(2)
        assert harness.profile.total_answers == 3
        assert harness.profile.total_correct == 2
        assert harness.profile.max_combo_ever == 2

    def test_answer_when_recorded_then_saved_before_return(self, harness):
        start(harness)
        saves_before = harness.store.save_count
        harness.scheduler.select_option(0)
        assert harness.store.save_count == saves_before + 1
        assert harness.store.load().total_correct == 1

    def test_answer_when_correct_then_cues_and_outcome_shown(self, harness):
        start(harness)
        harness.scheduler.select_option(0)
        assert harness.cues.cues[-2:] == [Cue.CLICK, Cue.CORRECT]
        assert harness.presenter.outcomes[-1].is_correct is True

    def test_answer_when_exp_crosses_threshold_then_level_up_cue(self, harness):
        harness.profile.stages["ai"].exp = 95
        start(harness)
        outcome = harness.scheduler.select_option(0)
        assert outcome.leveled_up is True
        assert Cue.LEVEL_UP in harness.cues.cues
        assert harness.profile.stages["ai"].level == 2


class TestAnswerContract:
    """Tests for answer preconditions."""

    def test_answer_when_already_answered_then_raises_and_unchanged(self, harness):
        start(harness)
        harness.scheduler.select_option(0)
        score = harness.scheduler.state.score
        with pytest.raises(InvalidSessionState):
            harness.scheduler.select_option(0)
        assert harness.scheduler.state.score == score
        assert harness.profile.total_answers == 1

    def test_answer_when_idle_then_raises_error(self, harness):
        with pytest.raises(InvalidSessionState):
            harness.scheduler.answer(0)

    def test_tick_when_not_active_then_raises_error(self, harness):
        with pytest.raises(InvalidSessionState):
            harness.scheduler.tick()

    def test_dwell_when_elapsed_then_next_question_presented(self, harness):
        start(harness)
        harness.scheduler.select_option(0)
        assert harness.scheduler.awaiting_advance is True
        harness.timers.advance(1.4)
        assert len(harness.presenter.questions) == 1
        harness.timers.advance(0.1)
        assert len(harness.presenter.questions) == 2
        assert harness.scheduler.state.questions_answered == 2

    def test_questions_when_pool_exhausted_then_reshuffled_without_gaps(self, harness):
        start(harness)
        for _ in range(11):
            answer_correct(harness)
        state = harness.scheduler.state
        assert state.passes == 2
        assert state.questions_answered == 12


class TestMultiChoiceFlow:
    """Tests for toggle + confirm questions inside a session."""

    @pytest.fixture
    def multi_pool(self):
        return [
            QuestionSpec(
                text=f"Multi {i}",
                options=("a", "b", "c"),
                correct_answer=frozenset({0, 2}),
                type_tag=MULTIPLE_CHOICE,
            )
            for i in range(3)
        ]

    def test_confirm_when_empty_then_reprompted_without_state_change(self, harness, multi_pool):
        start(harness, questions=multi_pool)
        with pytest.raises(EmptySelection):
            harness.scheduler.confirm()
        assert harness.profile.total_answers == 0
        assert harness.scheduler.awaiting_advance is False

    def test_select_when_toggling_then_no_answer_yet(self, harness, multi_pool):
        start(harness, questions=multi_pool)
        assert harness.scheduler.select_option(2) is None
        assert harness.profile.total_answers == 0

    def test_confirm_when_set_matches_any_order_then_correct(self, harness, multi_pool):
        start(harness, questions=multi_pool)
        harness.scheduler.select_option(2)
        harness.scheduler.select_option(0)
        outcome = harness.scheduler.confirm()
        assert outcome.is_correct is True
        assert outcome.score_gained == 120

    def test_answer_when_empty_set_then_raises_and_combo_kept(self, harness, multi_pool):
        start(harness, questions=multi_pool)
        for _ in range(2):
            harness.scheduler.select_option(0)
            harness.scheduler.select_option(2)
            harness.scheduler.confirm()
            harness.timers.advance(1.5)
        assert harness.scheduler.state.combo == 2
        with pytest.raises(EmptySelection):
            harness.scheduler.answer(frozenset())
        assert harness.scheduler.state.combo == 2
        assert harness.profile.total_answers == 2
        assert harness.scheduler.awaiting_advance is False

    def test_answer_when_frozenset_candidate_then_validated(self, harness, multi_pool):
        start(harness, questions=multi_pool)
        assert harness.scheduler.answer(frozenset({0})).is_correct is False


class TestSessionEnd:
    """Tests for ACTIVE -> ENDED."""

    def test_timer_when_sixty_ticks_then_ended_once(self, harness):
        start(harness)
        harness.timers.advance(59)
        assert harness.scheduler.phase is SessionPhase.ACTIVE
        harness.timers.advance(1)
        assert harness.scheduler.phase is SessionPhase.ENDED
        harness.timers.advance(30)
        assert len(harness.ended) == 1
        assert len(harness.presenter.results) == 1
        assert harness.scheduler.state.time_remaining == 0

    def test_answer_when_ended_then_raises_error(self, harness):
        start(harness)
        harness.timers.advance(60)
        with pytest.raises(InvalidSessionState):
            harness.scheduler.select_option(0)

    def test_end_when_score_then_end_exp_granted(self, harness):
        start(harness)
        for _ in range(3):
            answer_correct(harness)
        result = harness.scheduler.end()
        assert result.final_score == 420
        assert result.exp_gained == 42
        assert result.session_correct_count == 3
        assert result.max_combo == 3
        # 12 + 14 + 16 during play, 42 at the end
        assert harness.profile.stages["ai"].exp == 84
        assert Cue.RESULT_ENTRY in harness.cues.cues

    def test_end_when_level_up_only_during_play_then_result_not_leveled(self, harness):
        harness.profile.stages["ai"].exp = 95
        start(harness)
        harness.scheduler.select_option(0)
        result = harness.scheduler.end()
        assert harness.profile.stages["ai"].level == 2
        assert result.leveled_up is False
        assert result.stage_level == 2

    def test_end_when_dwell_pending_then_stale_continuation_dropped(self, harness):
        start(harness)
        harness.timers.advance(59)
        harness.scheduler.select_option(0)
        harness.timers.advance(5)
        assert harness.scheduler.phase is SessionPhase.ENDED
        assert harness.scheduler.current is not None
        assert harness.scheduler.state.questions_answered == 1
        assert harness.timers.pending() == []

    def test_end_when_saved_then_store_has_final_profile(self, harness):
        start(harness)
        answer_correct(harness)
        harness.timers.advance(60)
        saved = harness.store.load()
        assert saved.stages["ai"].exp == harness.profile.stages["ai"].exp

    def test_select_stage_when_ended_then_new_session(self, harness):
        start(harness)
        answer_correct(harness)
        harness.timers.advance(60)
        start(harness, stage_id="writing")
        assert harness.scheduler.state.score == 0
        assert harness.scheduler.stage_id == "writing"
        assert harness.scheduler.result is None

    def test_tick_when_called_manually_then_single_pending_tick(self, harness):
        start(harness)
        harness.scheduler.tick()
        assert harness.scheduler.state.time_remaining == 59
        assert len(harness.timers.pending("tick")) == 1
