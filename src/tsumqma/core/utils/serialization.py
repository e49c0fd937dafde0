"""
Serialization Utilities

to/from JSON helpers for the player save format.

**LEGACY SAVES:**

Saves written before per-stage tracking have a flat `level`/`exp` pair and
no `stageLevels`. On load that pair moves into the "ai" stage (the only
stage that existed then) with a fresh max_exp of 100; every other default
stage starts at level 1. The stored `level` is never trusted: the aggregate
level is always recomputed from stage levels.
"""

from __future__ import annotations

import logging
from typing import Any

from tsumqma.common.stages import DEFAULT_STAGE_ID, INITIAL_MAX_EXP
from ..models.progress import PlayerProfile, StageProgress, default_stages
from ..schemas.validator import validate_profile

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Profile Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_profile(profile: PlayerProfile) -> dict[str, Any]:
    """
    Serialize a PlayerProfile to a dictionary.

    The output can be written to JSON and will pass schema validation.
    """
    return profile.to_dict()


def deserialize_profile(data: dict[str, Any], *, validate: bool = True) -> PlayerProfile:
    """
    Deserialize a PlayerProfile, migrating legacy saves.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the profile schema first

    Returns:
        PlayerProfile with aggregate_level recomputed

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_profile(data)

    if "stageLevels" not in data:
        data = _migrate_legacy(data)

    profile = PlayerProfile.from_dict(data)
    logger.debug(
        f"Loaded profile: aggregate level {profile.aggregate_level}, "
        f"{len(profile.stages)} stages"
    )
    return profile


def _migrate_legacy(data: dict[str, Any]) -> dict[str, Any]:
    """Move a flat level/exp save into per-stage form."""
    stages = default_stages()
    stages[DEFAULT_STAGE_ID] = StageProgress(
        level=max(1, int(data.get("level") or 1)),
        exp=int(data.get("exp") or 0),
        max_exp=INITIAL_MAX_EXP,
    )
    migrated = dict(data)
    migrated["stageLevels"] = {k: v.to_dict() for k, v in stages.items()}
    logger.info(
        f"Migrated legacy save into stage {DEFAULT_STAGE_ID!r} "
        f"(level {stages[DEFAULT_STAGE_ID].level})"
    )
    return migrated
