"""
Module: engine.selection.shuffle

Purpose:
    Question order for a session. Filters questions to those unlocked at
    the player's stage level and walks them in a uniformly shuffled order.
    When a pass is exhausted, eligibility is recomputed (the stage level
    may have risen mid-session) and a new pass is shuffled.

Key Functions:
    - eligible_indices(): Indices of questions with min_level <= level
    - shuffled_copy(): Unbiased shuffle of a copy
    - build_order(): Shuffled eligible indices, NoEligibleQuestions if none
    - draw_next(): Next question index from a SessionState

Guarantees:
    - Within a pass every eligible index appears exactly once
    - Repeats happen only across passes
    - An empty eligible set raises instead of looping

Dependencies:
    - random (std)

Used By:
    - engine.session.scheduler
"""

from __future__ import annotations

import logging
import random
from typing import List, Sequence, TypeVar

from tsumqma.core.models.questions import QuestionSpec
from tsumqma.core.models.session import SessionState
from tsumqma.errors import NoEligibleQuestions

logger = logging.getLogger(__name__)

T = TypeVar("T")


def eligible_indices(questions: Sequence[QuestionSpec], stage_level: int) -> List[int]:
    """Indices of questions unlocked at a stage level, in original order."""
    return [i for i, q in enumerate(questions) if q.min_level <= stage_level]


def shuffled_copy(items: Sequence[T], rng: random.Random) -> List[T]:
    """
    Return a shuffled copy; every permutation is equally likely.

    Args:
        items: Items to shuffle (left untouched)
        rng: Random source
    """
    shuffled = list(items)
    rng.shuffle(shuffled)
    return shuffled


def build_order(
    questions: Sequence[QuestionSpec],
    stage_level: int,
    rng: random.Random,
) -> List[int]:
    """
    Shuffled order over the eligible questions.

    Raises:
        NoEligibleQuestions: If no question is unlocked at stage_level
    """
    eligible = eligible_indices(questions, stage_level)
    if not eligible:
        raise NoEligibleQuestions(stage_level, len(questions))

    order = shuffled_copy(eligible, rng)
    logger.debug(
        f"Shuffled {len(order)}/{len(questions)} questions eligible at Lv{stage_level}"
    )
    return order


def draw_next(
    state: SessionState,
    questions: Sequence[QuestionSpec],
    stage_level: int,
    rng: random.Random,
) -> int:
    """
    Take the next question index from the session order.

    Reshuffles first when the current pass is exhausted, using stage_level
    as it is now. On NoEligibleQuestions the state is left untouched.

    Returns:
        Index into questions
    """
    if state.exhausted:
        state.order = build_order(questions, stage_level, rng)
        state.cursor = 0
        state.passes += 1
        if state.passes > 1:
            logger.info(f"Pass {state.passes - 1} complete, reshuffled {len(state.order)} questions")

    index = state.order[state.cursor]
    state.cursor += 1
    return index
