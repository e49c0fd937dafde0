"""
Module: common.quotes

Purpose:
    Companion speech lines. Quotes are written addressing a placeholder
    name which is swapped for the player's name when a quote is picked.

Key Classes:
    - QuoteBook: Loaded quote list with random picking

Used By:
    - engine.controller: Main page speech bubble
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = "三田"


@dataclass(frozen=True)
class QuoteBook:
    """Companion quotes (immutable). An empty book picks nothing."""

    quotes: tuple[str, ...] = ()
    placeholder: str = PLACEHOLDER_NAME

    @classmethod
    def load(cls, path: Path) -> QuoteBook:
        """
        Load quotes from a JSON list of {"text": ...} objects.

        A missing or malformed file gives an empty book; quotes are
        decoration and never block the game.
        """
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load quotes from {path}: {e}")
            return cls()

        if not isinstance(raw, list):
            logger.error(f"Quotes file {path} is not a list")
            return cls()

        quotes = tuple(
            item["text"] for item in raw
            if isinstance(item, dict) and isinstance(item.get("text"), str)
        )
        logger.info(f"Loaded {len(quotes)} quotes")
        return cls(quotes=quotes)

    def __len__(self) -> int:
        return len(self.quotes)

    def pick(self, player_name: str = "", rng: Optional[random.Random] = None) -> Optional[str]:
        """
        Pick a random quote addressed to the player.

        Returns:
            Quote text, or None when the book is empty
        """
        if not self.quotes:
            logger.warning("No quotes available")
            return None
        text = (rng or random).choice(self.quotes)
        if player_name:
            text = text.replace(self.placeholder, player_name)
        return text
