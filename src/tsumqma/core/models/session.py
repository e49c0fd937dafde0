"""
Module: session

Purpose:
    Transient per-session state and the immutable result produced when a
    session ends. SessionState is created when the countdown finishes,
    owned exclusively by the session scheduler, and never persisted.

Key Classes:
    - SessionState: Mutable in-session counters and question order
    - SessionResult: Frozen summary handed to the presentation layer

Used By:
    - engine.session.scheduler
    - engine.selection.shuffle: Reads/writes order and cursor
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class SessionState:
    """
    Counters of the running session.

    Attributes:
        score: Points earned this session
        combo: Current run of consecutive correct answers
        max_combo: Longest run this session
        time_remaining: Seconds left on the session timer
        order: Shuffled question indices for the current pass
        cursor: Position of the next question in order
        questions_answered: Questions presented so far
        session_correct_count: Correct answers this session
        passes: Number of shuffles performed (1 after start)
    """

    time_remaining: int
    score: int = 0
    combo: int = 0
    max_combo: int = 0
    order: List[int] = field(default_factory=list)
    cursor: int = 0
    questions_answered: int = 0
    session_correct_count: int = 0
    passes: int = 0

    @property
    def exhausted(self) -> bool:
        """True when every index of the current pass has been drawn."""
        return self.cursor >= len(self.order)


@dataclass(frozen=True)
class SessionResult:
    """
    Summary of a finished session (immutable).

    Attributes:
        stage_id: Stage the session was played on
        final_score: Score when the session ended
        session_correct_count: Correct answers this session
        questions_answered: Questions presented this session
        max_combo: Longest combo this session
        exp_gained: End-of-session exp grant, floor(score / 10)
        leveled_up: Whether the end-of-session grant raised the stage level
        stage_level: Stage level after the grant
        aggregate_level: Aggregate level after the grant
    """

    stage_id: str
    final_score: int
    session_correct_count: int
    questions_answered: int
    max_combo: int
    exp_gained: int
    leveled_up: bool
    stage_level: int
    aggregate_level: int
