"""
Module: engine.question_types.multi

Purpose:
    Multi choice questions: options toggle on and off, and an explicit
    confirm submits the selected set. The answer is correct only when the
    set matches the correct set exactly; there is no partial credit.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Set

from tsumqma.core.models.questions import MULTIPLE_CHOICE
from tsumqma.errors import EmptySelection

from .base import OptionState, OutcomeDescriptor, QuestionType, RenderDescriptor

INSTRUCTION = "Select all options that are correct"


class MultiChoiceQuestion(QuestionType):
    """Toggle-and-confirm question with a set-valued answer."""

    type_tag = MULTIPLE_CHOICE

    def __init__(self, spec):
        super().__init__(spec)
        self._selected: Set[int] = set()

    @property
    def selected(self) -> FrozenSet[int]:
        return frozenset(self._selected)

    def present(self) -> RenderDescriptor:
        return RenderDescriptor(
            type_tag=self.type_tag,
            question_text=self.spec.text,
            slots=self._slots(toggleable=True),
            requires_confirm=True,
            instruction=INSTRUCTION,
        )

    def record_selection(self, index: int) -> None:
        """Toggle an option. Never completes the answer on its own."""
        self._check_index(index)
        if index in self._selected:
            self._selected.discard(index)
        else:
            self._selected.add(index)
        return None

    def confirm(self) -> FrozenSet[int]:
        if not self._selected:
            raise EmptySelection("Select at least one option before confirming")
        return frozenset(self._selected)

    def validate(self, candidate: Any) -> bool:
        """
        Order-independent exact match.

        A candidate with repeated indices has a different size from the
        correct set and therefore fails, even if its members match.

        Raises:
            EmptySelection: If the candidate selects nothing
        """
        try:
            values = list(candidate)
        except TypeError:
            return False
        if not values:
            raise EmptySelection("Select at least one option before confirming")
        correct = self.spec.correct_indices
        return len(values) == len(correct) and set(values) == correct

    def describe_outcome(self, is_correct: bool, candidate: Any) -> OutcomeDescriptor:
        try:
            chosen = set(candidate)
        except TypeError:
            chosen = set()
        correct = self.spec.correct_indices
        states = []
        for i in range(len(self.spec.options)):
            if i in chosen and i in correct:
                states.append(OptionState.CORRECT_SELECTED)
            elif i in chosen:
                states.append(OptionState.INCORRECT_SELECTED)
            elif i in correct:
                states.append(OptionState.CORRECT_MISSED)
            else:
                states.append(OptionState.NEUTRAL)
        return OutcomeDescriptor(
            is_correct=is_correct,
            states=tuple(states),
            correct_indices=correct,
        )
