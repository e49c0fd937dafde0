"""
Asset loading: stages.json and per-stage quiz files.

Public API:
    - FileAssetSource: Load stages and stage questions from a directory
    - parse_quiz_entry, parse_quiz_entries: Raw entry conversion
    - level_breakdown: Question counts per min_level
"""

from .loader import FileAssetSource, level_breakdown
from .parser import ParseError, drop_unsupported, parse_quiz_entries, parse_quiz_entry

__all__ = [
    "FileAssetSource",
    "level_breakdown",
    "ParseError",
    "drop_unsupported",
    "parse_quiz_entry",
    "parse_quiz_entries",
]
