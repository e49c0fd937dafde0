"""
Module: storage.profile_store

Purpose:
    ProfileStore implementations: a locked JSON save file for real play
    and an in-memory store for tests and simulations.

Key Classes:
    - JsonProfileStore: Save file on disk
    - MemoryProfileStore: Keeps serialized saves in memory

Used By:
    - engine.controller
    - scripts/simulate_session.py
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from tsumqma.core.models.progress import PlayerProfile
from tsumqma.core.schemas.validator import ValidationError
from tsumqma.core.utils.serialization import deserialize_profile, serialize_profile

from .file_locking import locked_read_json, locked_write_json

logger = logging.getLogger(__name__)


class JsonProfileStore:
    """
    Player profile saved as a JSON file.

    A missing file means a new player. A corrupted or invalid file is
    logged and also treated as a new player; it is overwritten on the
    next save.

    Attributes:
        path: Save file location
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Optional[PlayerProfile]:
        try:
            data = locked_read_json(self.path)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            logger.error(f"Corrupted save file {self.path}: {e}")
            return None
        except OSError as e:
            logger.error(f"Cannot read save file {self.path}: {e}")
            return None

        if data is None:
            logger.info(f"No save file at {self.path}; starting fresh")
            return None

        try:
            return deserialize_profile(data)
        except ValidationError as e:
            logger.error(f"Invalid save file {self.path}: {e}")
            return None

    def save(self, profile: PlayerProfile) -> None:
        locked_write_json(self.path, serialize_profile(profile))


class MemoryProfileStore:
    """
    Store that keeps saves in memory.

    Saves are serialized and loads deserialized, so the round trip goes
    through the same format as the file store.

    Attributes:
        saves: Every saved snapshot, oldest first
    """

    def __init__(self, initial: Optional[PlayerProfile] = None):
        self.saves: List[Dict[str, Any]] = []
        if initial is not None:
            self.saves.append(serialize_profile(initial))

    @property
    def save_count(self) -> int:
        return len(self.saves)

    def load(self) -> Optional[PlayerProfile]:
        if not self.saves:
            return None
        return deserialize_profile(self.saves[-1])

    def save(self, profile: PlayerProfile) -> None:
        self.saves.append(serialize_profile(profile))
