"""
Module: questions

Purpose:
    Provides the QuestionSpec dataclass - the immutable description of a
    single quiz question passed from the asset loader to the session
    scheduler and question types.

Key Functions:
    - QuestionSpec.correct_indices: Correct answer as a frozenset
    - QuestionSpec.is_multi: Whether more than one answer is expected

Dependencies:
    - dataclasses (std)

Used By:
    - engine.loading.parser: Builds specs from raw quiz entries
    - engine.question_types: One spec per question instance
    - engine.selection.shuffle: Level filtering
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Union

SINGLE_CHOICE = "single-choice"
MULTIPLE_CHOICE = "multiple-choice"

CorrectAnswer = Union[int, FrozenSet[int]]


@dataclass(frozen=True)
class QuestionSpec:
    """
    Complete question definition (immutable).

    Attributes:
        text: Question text shown to the player
        options: Ordered option texts
        correct_answer: Single index for exclusive choice, frozenset of
            indices for multi choice
        type_tag: Question type selector, e.g. "single-choice"
        category: Stage name the question belongs to
        min_level: Lowest stage level at which the question is eligible

    Invariants:
        - options is non-empty
        - every correct index is a valid index into options
        - min_level >= 1

    Example:
        >>> q = QuestionSpec(
        ...     text="Which is a prompt technique?",
        ...     options=("Few-shot", "Overclocking"),
        ...     correct_answer=0,
        ... )
        >>> q.correct_indices
        frozenset({0})
    """

    text: str
    options: tuple[str, ...]
    correct_answer: CorrectAnswer
    type_tag: str = SINGLE_CHOICE
    category: str = ""
    min_level: int = 1

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.options:
            raise ValueError(f"options must not be empty: {self.text!r}")
        if self.min_level < 1:
            raise ValueError(f"min_level must be >= 1: {self.min_level}")

        if isinstance(self.correct_answer, frozenset):
            if not self.correct_answer:
                raise ValueError(f"correct_answer must not be empty: {self.text!r}")
            indices = self.correct_answer
        else:
            indices = frozenset([self.correct_answer])

        bad = sorted(i for i in indices if not 0 <= i < len(self.options))
        if bad:
            raise ValueError(
                f"correct_answer indices {bad} out of range for "
                f"{len(self.options)} options: {self.text!r}"
            )

    @property
    def correct_indices(self) -> FrozenSet[int]:
        """Correct answer as a set, whatever the question type."""
        if isinstance(self.correct_answer, frozenset):
            return self.correct_answer
        return frozenset([self.correct_answer])

    @property
    def is_multi(self) -> bool:
        return isinstance(self.correct_answer, frozenset)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"QuestionSpec({self.text[:30]!r}, type={self.type_tag}, "
            f"options={len(self.options)}, min_level={self.min_level})"
        )
