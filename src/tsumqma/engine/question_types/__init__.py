"""
Module: engine.question_types

Purpose:
    Pluggable question variants. Each variant turns a QuestionSpec plus a
    candidate answer into a verdict and describes what to render before
    and after answering.

Key Classes:
    - QuestionType: Capability interface
    - ExclusiveChoiceQuestion: Single answer, answered on first selection
    - MultiChoiceQuestion: Toggle + confirm, exact set match
    - QuestionTypeRegistry: Tag -> class factory

Used By:
    - engine.session.scheduler
"""

from .base import (
    QuestionType,
    RenderDescriptor,
    OutcomeDescriptor,
    OptionSlot,
    OptionState,
    OPTION_LABELS,
)
from .exclusive import ExclusiveChoiceQuestion
from .multi import MultiChoiceQuestion
from .registry import QuestionTypeRegistry, default_registry, create_question

__all__ = [
    "QuestionType",
    "RenderDescriptor",
    "OutcomeDescriptor",
    "OptionSlot",
    "OptionState",
    "OPTION_LABELS",
    "ExclusiveChoiceQuestion",
    "MultiChoiceQuestion",
    "QuestionTypeRegistry",
    "default_registry",
    "create_question",
]
