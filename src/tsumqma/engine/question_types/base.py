"""
Module: engine.question_types.base

Purpose:
    Capability interface every question variant implements, plus the
    declarative descriptors handed to the presentation layer. Question
    types never touch rendering; they describe what to show.

Key Classes:
    - QuestionType: Abstract base (present / record_selection / confirm /
      validate / describe_outcome)
    - RenderDescriptor, OptionSlot: What to show before answering
    - OutcomeDescriptor, OptionState: What to show after answering

Used By:
    - engine.question_types.exclusive / multi: Concrete variants
    - engine.question_types.registry: Factory
    - engine.session.scheduler: Validation of answers
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, FrozenSet, Optional

from tsumqma.core.models.questions import QuestionSpec

OPTION_LABELS = "ABCDEF"


class OptionState(Enum):
    """Post-answer classification of a single option."""

    CORRECT_SELECTED = "correct-selected"
    INCORRECT_SELECTED = "incorrect-selected"
    CORRECT_MISSED = "correct-missed"  # Multi choice only
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class OptionSlot:
    """
    One selectable option.

    Attributes:
        index: Position in QuestionSpec.options
        label: Display label "A".."F"
        text: Option text
        toggleable: True for on/off slots that need a confirm action
    """

    index: int
    label: str
    text: str
    toggleable: bool = False


@dataclass(frozen=True)
class RenderDescriptor:
    """
    Declarative description of a question for the presentation layer.

    Attributes:
        type_tag: Question type tag
        question_text: The question
        slots: One OptionSlot per option
        requires_confirm: Whether a confirm action must be offered
        instruction: Optional helper line shown above the options
    """

    type_tag: str
    question_text: str
    slots: tuple[OptionSlot, ...]
    requires_confirm: bool = False
    instruction: Optional[str] = None


@dataclass(frozen=True)
class OutcomeDescriptor:
    """
    Post-answer description of every option.

    Attributes:
        is_correct: Verdict for the submitted answer
        states: One OptionState per option, in option order
        correct_indices: The correct answer, for revealing it
    """

    is_correct: bool
    states: tuple[OptionState, ...]
    correct_indices: FrozenSet[int]


class QuestionType(ABC):
    """
    Base class for all question variants.

    A question type wraps exactly one QuestionSpec for one
    present → select → validate → describe cycle.

    Subclasses must set `type_tag` and implement the abstract methods.
    Registering the subclass in a QuestionTypeRegistry is all that is needed
    to make a new variant playable; callers only use this interface.
    """

    type_tag: ClassVar[str] = ""

    def __init__(self, spec: QuestionSpec):
        self.spec = spec

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.spec.options):
            raise ValueError(
                f"Option index {index} out of range for {len(self.spec.options)} options"
            )

    def _slots(self, toggleable: bool) -> tuple[OptionSlot, ...]:
        return tuple(
            OptionSlot(
                index=i,
                label=OPTION_LABELS[i] if i < len(OPTION_LABELS) else str(i + 1),
                text=text,
                toggleable=toggleable,
            )
            for i, text in enumerate(self.spec.options)
        )

    @property
    def correct_answer(self) -> Any:
        return self.spec.correct_answer

    @abstractmethod
    def present(self) -> RenderDescriptor:
        """Describe the question and its selectable options."""

    @abstractmethod
    def record_selection(self, index: int) -> Optional[Any]:
        """
        Record a player selection.

        Returns:
            The complete answer when this selection finishes answering
            (no confirm step), otherwise None.
        """

    @abstractmethod
    def confirm(self) -> Any:
        """
        Finish the current selection into an answer.

        Raises:
            EmptySelection: If nothing has been selected
        """

    @abstractmethod
    def validate(self, candidate: Any) -> bool:
        """Return whether a candidate answer is correct."""

    @abstractmethod
    def describe_outcome(self, is_correct: bool, candidate: Any) -> OutcomeDescriptor:
        """Classify every option after an answer."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.spec!r})"
