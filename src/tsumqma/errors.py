"""
Module: errors

Purpose:
    Error taxonomy for the quiz engine. Each error maps to one failure
    class with its own recovery policy:

    | Error | Policy |
    |-------|--------|
    | AssetLoadError | Fatal to starting a session; caller halts the flow |
    | UnknownQuestionType | Warning only; default question type is used |
    | NoEligibleQuestions | Fatal to the session; never loops |
    | EmptySelection | Recoverable; same question is re-prompted |
    | InvalidSessionState | Contract violation; call rejected, no mutation |

Used By:
    - engine.loading, engine.question_types, engine.selection,
      engine.session, engine.controller
"""

from __future__ import annotations


class TsumqmaError(Exception):
    """Base class for all quiz engine errors."""
    pass


class AssetLoadError(TsumqmaError):
    """Stage or quiz assets could not be read, parsed or validated."""
    pass


class NoEligibleQuestions(TsumqmaError):
    """No question is unlocked for the player's current stage level."""

    def __init__(self, stage_level: int, total: int):
        super().__init__(
            f"No eligible questions at stage level {stage_level} "
            f"({total} questions loaded)"
        )
        self.stage_level = stage_level
        self.total = total


class EmptySelection(TsumqmaError):
    """A confirm was attempted with nothing selected."""
    pass


class InvalidSessionState(TsumqmaError):
    """An operation was called in a session phase that does not allow it."""

    def __init__(self, operation: str, phase: object):
        super().__init__(f"{operation}() is not allowed in phase {phase}")
        self.operation = operation
        self.phase = phase


class UnknownQuestionType(UserWarning):
    """A question declared a type tag with no registered question type."""
    pass
