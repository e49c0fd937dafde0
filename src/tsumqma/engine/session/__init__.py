"""
Timed quiz sessions.

Public API:
    - SessionScheduler: IDLE -> COUNTDOWN -> ACTIVE -> ENDED state machine
    - SessionPhase, AnswerOutcome
    - SessionConfig: Timing and scoring
    - TimerQueue, ScheduledTask: Manually advanced continuations
"""

from .config import SessionConfig
from .scheduler import AnswerOutcome, SessionPhase, SessionScheduler
from .timers import ScheduledTask, TimerQueue

__all__ = [
    "SessionScheduler",
    "SessionPhase",
    "AnswerOutcome",
    "SessionConfig",
    "TimerQueue",
    "ScheduledTask",
]
