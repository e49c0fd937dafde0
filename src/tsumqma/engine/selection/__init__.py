"""
Module: engine.selection

Purpose:
    Level-filtered, shuffled question order for sessions.

Key Functions:
    - eligible_indices(), shuffled_copy(), build_order(), draw_next()

Used By:
    - engine.session.scheduler
"""

from .shuffle import eligible_indices, shuffled_copy, build_order, draw_next

__all__ = [
    "eligible_indices",
    "shuffled_copy",
    "build_order",
    "draw_next",
]
