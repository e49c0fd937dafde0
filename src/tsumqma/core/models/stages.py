"""
Module: stages

Purpose:
    Stage descriptor as listed in stages.json. A stage is a topical
    category with its own quiz file and its own level track.

Used By:
    - engine.loading.loader: Stage discovery
    - engine.controller: Stage selection
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Stage:
    """
    Stage descriptor (immutable).

    Attributes:
        id: Stage id like "ai", also the key into PlayerProfile.stages
        name: Display name, copied into QuestionSpec.category
        quiz_file: Quiz file name relative to the quizzes directory
    """

    id: str
    name: str
    quiz_file: str

    @classmethod
    def from_dict(cls, data: dict) -> Stage:
        return cls(id=data["id"], name=data["name"], quiz_file=data["quizFile"])
