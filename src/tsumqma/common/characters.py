"""
Module: common.characters

Purpose:
    Companion character catalog and the level → appearance rules.

Key Functions:
    - get_character(): Look up a character by id
    - image_version(): Art version for a level (0 = egg)
    - image_path(): Asset path of the art for a character at a level
    - evolution_stage(): Colour-scheme stage label for a level

Used By:
    - engine.controller: Character selection and status snapshots
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Character:
    id: str
    name: str
    element: str
    color: str
    description: str
    image_color: str


CHARACTERS: tuple[Character, ...] = (
    Character("fire", "Flare", "Fire", "#ff6b6b", "Passionate and driven", "red"),
    Character("water", "Aqua", "Water", "#4ecdc4", "Calm and thoughtful", "blue"),
    Character("leaf", "Leaf", "Grass", "#51cf66", "Gentle and creative", "green"),
)

# (lowest level, version) pairs, highest first
_VERSION_THRESHOLDS = ((100, 5), (75, 4), (50, 3), (25, 2), (5, 1), (0, 0))

# Art beyond the hatched version has not been drawn yet
LATEST_DRAWN_VERSION = 1


def get_character(character_id: Optional[str]) -> Optional[Character]:
    for character in CHARACTERS:
        if character.id == character_id:
            return character
    return None


def image_version(level: int) -> int:
    """
    Art version for a level.

    Levels 0-4 are the egg (0), 5-24 the hatched form (1), then one version
    per 25 levels up to 5 at level 100.
    """
    for lowest, version in _VERSION_THRESHOLDS:
        if level >= lowest:
            return version
    return 0


def image_path(character: Character, level: int) -> str:
    version = min(image_version(level), LATEST_DRAWN_VERSION)
    return f"/images/char_{character.image_color}_v{version}.png"


def evolution_stage(level: int) -> str:
    if level >= 7:
        return "stage3"
    if level >= 4:
        return "stage2"
    return "stage1"
