"""
Module: engine.session.config

Purpose:
    Configuration dataclass for timed quiz sessions. Immutable
    configuration with validation on construction.

Key Classes:
    - SessionConfig: Timing and scoring parameters

Used By:
    - engine.session.scheduler
    - engine.config.GameConfig
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionConfig:
    """
    Configuration for one timed session (immutable).

    Attributes:
        duration: Session length in seconds
        countdown_ticks: Countdown steps before the session starts
        tick_interval: Seconds between timer ticks
        result_dwell: Seconds an answer outcome stays visible
        base_score: Points for a correct answer
        combo_bonus: Extra points per combo step
        exp_base: Exp granted per correct answer
        exp_per_combo: Extra exp per combo step
        end_exp_divisor: End-of-session exp is floor(score / divisor)
        seed: Shuffle seed; None for a fresh random order each run

    Invariants:
        - duration > 0, countdown_ticks >= 0, end_exp_divisor > 0

    Example:
        >>> config = SessionConfig()
        >>> config.score_for_combo(3)
        160
    """

    # Timing
    duration: int = 60
    countdown_ticks: int = 3
    tick_interval: float = 1.0
    result_dwell: float = 1.5

    # Scoring
    base_score: int = 100
    combo_bonus: int = 20
    exp_base: int = 10
    exp_per_combo: int = 2
    end_exp_divisor: int = 10

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.duration <= 0:
            raise ValueError(f"duration must be positive: {self.duration}")
        if self.countdown_ticks < 0:
            raise ValueError(f"countdown_ticks must be non-negative: {self.countdown_ticks}")
        if self.tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive: {self.tick_interval}")
        if self.result_dwell < 0:
            raise ValueError(f"result_dwell must be non-negative: {self.result_dwell}")
        if self.end_exp_divisor <= 0:
            raise ValueError(f"end_exp_divisor must be positive: {self.end_exp_divisor}")

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    def score_for_combo(self, combo: int) -> int:
        """Points for a correct answer that brought the combo to `combo`."""
        return self.base_score + combo * self.combo_bonus

    def exp_for_combo(self, combo: int) -> int:
        """Immediate exp for a correct answer that brought the combo to `combo`."""
        return self.exp_base + combo * self.exp_per_combo

    def end_exp(self, score: int) -> int:
        return score // self.end_exp_divisor
