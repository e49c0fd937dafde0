"""
Module: engine.question_types.registry

Purpose:
    Maps question type tags to QuestionType classes. Adding a question
    variant is a registry insertion; no call site changes.

Key Functions:
    - create_question(): Build a question from the default registry

Key Classes:
    - QuestionTypeRegistry: Tag -> class mapping with a total create()

Used By:
    - engine.session.scheduler: One question instance per drawn spec
"""

from __future__ import annotations

import logging
import warnings
from typing import Callable, Dict, Optional, Type

from tsumqma.core.models.questions import QuestionSpec, SINGLE_CHOICE
from tsumqma.errors import UnknownQuestionType

from .base import QuestionType
from .exclusive import ExclusiveChoiceQuestion
from .multi import MultiChoiceQuestion

logger = logging.getLogger(__name__)


class QuestionTypeRegistry:
    """
    Registry of question variants.

    create() never fails: unknown tags fall back to the default class and
    raise an UnknownQuestionType warning instead.

    Example:
        >>> registry = QuestionTypeRegistry()
        >>> @registry.register("swipe")
        ... class SwipeQuestion(ExclusiveChoiceQuestion):
        ...     type_tag = "swipe"
        >>> "swipe" in registry
        True
    """

    def __init__(self, default: Type[QuestionType] = ExclusiveChoiceQuestion):
        self._types: Dict[str, Type[QuestionType]] = {}
        self.default = default

    def register(
        self,
        tag: str,
        question_class: Optional[Type[QuestionType]] = None,
    ) -> Callable[[Type[QuestionType]], Type[QuestionType]] | Type[QuestionType]:
        """
        Register a class for a tag. Usable directly or as a decorator.

        Re-registering a tag replaces the previous class.
        """
        def _register(cls: Type[QuestionType]) -> Type[QuestionType]:
            if tag in self._types and self._types[tag] is not cls:
                logger.info(f"Replacing question type {tag!r}: {self._types[tag].__name__} -> {cls.__name__}")
            self._types[tag] = cls
            return cls

        if question_class is not None:
            return _register(question_class)
        return _register

    def __contains__(self, tag: str) -> bool:
        return tag in self._types

    @property
    def tags(self) -> list[str]:
        return sorted(self._types)

    def resolve(self, tag: Optional[str]) -> Type[QuestionType]:
        """Class for a tag; a missing tag means single choice."""
        key = tag or SINGLE_CHOICE
        question_class = self._types.get(key)
        if question_class is None:
            logger.warning(f"Unknown question type: {key!r}, using {self.default.__name__}")
            warnings.warn(
                f"Unknown question type {key!r}; falling back to {self.default.__name__}",
                UnknownQuestionType,
                stacklevel=3,
            )
            return self.default
        return question_class

    def create(self, spec: QuestionSpec) -> QuestionType:
        """Build the question type instance for a spec (total)."""
        return self.resolve(spec.type_tag)(spec)


def _build_default_registry() -> QuestionTypeRegistry:
    registry = QuestionTypeRegistry()
    registry.register(SINGLE_CHOICE, ExclusiveChoiceQuestion)
    registry.register(MultiChoiceQuestion.type_tag, MultiChoiceQuestion)
    return registry


default_registry = _build_default_registry()


def create_question(spec: QuestionSpec, registry: Optional[QuestionTypeRegistry] = None) -> QuestionType:
    """Build a question from the given registry, or the default one."""
    return (registry or default_registry).create(spec)
