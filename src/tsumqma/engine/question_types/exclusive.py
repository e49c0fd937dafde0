"""
Module: engine.question_types.exclusive

Purpose:
    Exclusive (single) choice questions: one correct option, and the first
    selection is the answer. There is no confirm step.
"""

from __future__ import annotations

from typing import Any, Optional

from tsumqma.core.models.questions import SINGLE_CHOICE
from tsumqma.errors import EmptySelection

from .base import OptionState, OutcomeDescriptor, QuestionType, RenderDescriptor


class ExclusiveChoiceQuestion(QuestionType):
    """Single-answer question; also the fallback for unknown type tags."""

    type_tag = SINGLE_CHOICE

    def __init__(self, spec):
        super().__init__(spec)
        self._selected: Optional[int] = None

    def present(self) -> RenderDescriptor:
        return RenderDescriptor(
            type_tag=self.type_tag,
            question_text=self.spec.text,
            slots=self._slots(toggleable=False),
        )

    def record_selection(self, index: int) -> int:
        self._check_index(index)
        self._selected = index
        return index

    def confirm(self) -> int:
        if self._selected is None:
            raise EmptySelection("No option selected")
        return self._selected

    def validate(self, candidate: Any) -> bool:
        # bool is an int subclass; True must not pass for index 1
        if isinstance(candidate, bool) or not isinstance(candidate, int):
            return False
        return candidate == self.spec.correct_answer

    def describe_outcome(self, is_correct: bool, candidate: Any) -> OutcomeDescriptor:
        states = []
        for i in range(len(self.spec.options)):
            if i == candidate:
                states.append(
                    OptionState.CORRECT_SELECTED if is_correct else OptionState.INCORRECT_SELECTED
                )
            else:
                states.append(OptionState.NEUTRAL)
        return OutcomeDescriptor(
            is_correct=is_correct,
            states=tuple(states),
            correct_indices=self.spec.correct_indices,
        )
