"""
Module: engine.loading.parser

Purpose:
    Convert raw quiz file entries into QuestionSpec objects. Raw entries
    name their answers by option text; specs carry option indices.

Key Functions:
    - parse_quiz_entry(): One raw entry -> QuestionSpec
    - parse_quiz_entries(): A whole quiz file, skipping unusable entries
    - drop_unsupported(): Remove entry kinds the engine does not play

Key Classes:
    - ParseError: Exception for a single unusable entry

Raw entry format:
    {"type": "single" | "multiple" | "sort",
     "question": "...",
     "options": ["...", ...],
     "answer": "option text" | ["option text", ...],
     "minLevel": 2}

Used By:
    - engine.loading.loader
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence, Tuple

from tsumqma.core.models.questions import MULTIPLE_CHOICE, SINGLE_CHOICE, QuestionSpec

logger = logging.getLogger(__name__)

# Raw "type" values as written in quiz files
RAW_TYPE_TAGS: Dict[str, str] = {
    "single": SINGLE_CHOICE,
    "multiple": MULTIPLE_CHOICE,
}

UNSUPPORTED_TYPES = frozenset({"sort"})


class ParseError(Exception):
    """A quiz entry cannot be turned into a question."""
    pass


def drop_unsupported(entries: Sequence[Any]) -> List[Any]:
    """
    Remove entries whose type the engine cannot play (sort questions).

    Anything that is not an object is kept so schema validation reports it.
    """
    kept = [
        e for e in entries
        if not (isinstance(e, dict) and e.get("type") in UNSUPPORTED_TYPES)
    ]
    if len(kept) != len(entries):
        logger.info(f"Dropped unsupported entries: {len(entries)} -> {len(kept)}")
    return kept


def _type_tag(raw_type: Any) -> str:
    if raw_type is None:
        return SINGLE_CHOICE
    # Unknown tags pass through; the registry warns and falls back
    return RAW_TYPE_TAGS.get(raw_type, raw_type)


def _answer_index(options: Sequence[str], answer: str) -> int:
    try:
        return list(options).index(answer)
    except ValueError:
        raise ParseError(f"Answer {answer!r} is not one of the options") from None


def parse_quiz_entry(entry: Dict[str, Any], *, category: str = "") -> QuestionSpec:
    """
    Convert one raw quiz entry.

    Args:
        entry: Raw entry from a quiz file (already schema-validated)
        category: Stage name recorded on the spec

    Returns:
        QuestionSpec with answers mapped to option indices

    Raises:
        ParseError: If the answer is missing or names a non-existent option
    """
    answer = entry.get("answer")
    if answer is None or answer == [] or answer == "":
        raise ParseError("Entry has no answer")

    options: Tuple[str, ...] = tuple(entry["options"])
    type_tag = _type_tag(entry.get("type"))

    answers = answer if isinstance(answer, list) else [answer]
    indices = frozenset(_answer_index(options, a) for a in answers)

    # Only multiple choice carries a set; unknown tags fall back to exclusive choice
    if type_tag == MULTIPLE_CHOICE:
        correct: int | frozenset = indices
    elif len(indices) == 1:
        correct = next(iter(indices))
    else:
        raise ParseError(f"{type_tag} entry has {len(indices)} answers")

    try:
        return QuestionSpec(
            text=entry["question"],
            options=options,
            correct_answer=correct,
            type_tag=type_tag,
            category=category,
            min_level=entry.get("minLevel") or 1,
        )
    except ValueError as e:
        raise ParseError(str(e)) from e


def parse_quiz_entries(
    entries: Sequence[Dict[str, Any]],
    *,
    category: str = "",
) -> List[QuestionSpec]:
    """
    Convert a quiz file, skipping entries that cannot be used.

    Skipped entries are logged with their position in the file.
    """
    specs: List[QuestionSpec] = []
    for index, entry in enumerate(entries):
        try:
            specs.append(parse_quiz_entry(entry, category=category))
        except ParseError as e:
            logger.error(f"Skipping quiz entry {index}: {e}")
    return specs
