"""
Module: engine.loading.loader

Purpose:
    Load stage descriptors and stage questions from an asset directory,
    with schema validation before anything becomes a model.

Directory layout:
    <root>/stages.json          list of {id, name, quizFile}
    <root>/quizzes/<quizFile>   list of raw quiz entries

Key Classes:
    - FileAssetSource: Asset source over a directory

Key Functions:
    - level_breakdown(): Question counts per min_level

Dependencies:
    - core.schemas.validator: jsonschema validation
    - engine.loading.parser: Raw entry conversion

Used By:
    - engine.controller
    - scripts/simulate_session.py
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Sequence

from tsumqma.core.models.questions import QuestionSpec
from tsumqma.core.models.stages import Stage
from tsumqma.core.schemas.validator import ValidationError, validate_quiz, validate_stages
from tsumqma.errors import AssetLoadError

from .parser import drop_unsupported, parse_quiz_entries

logger = logging.getLogger(__name__)

STAGES_FILE = "stages.json"
QUIZ_DIR = "quizzes"


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise AssetLoadError(f"Asset file does not exist: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise AssetLoadError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise AssetLoadError(f"Cannot read {path}: {e}") from e


def level_breakdown(questions: Sequence[QuestionSpec]) -> Dict[str, int]:
    """
    Count questions per minimum level.

    Example:
        >>> level_breakdown(questions)
        {'Lv1': 12, 'Lv2': 5, 'Lv3': 3}
    """
    counts = Counter(q.min_level for q in questions)
    return {f"Lv{level}": counts[level] for level in sorted(counts)}


class FileAssetSource:
    """
    Stage and quiz assets stored as JSON files under one directory.

    Attributes:
        root: Asset directory
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._stages: Dict[str, Stage] = {}

    def load_stages(self) -> List[Stage]:
        """
        Load and validate stages.json.

        Raises:
            AssetLoadError: If the file is missing, unreadable or invalid
        """
        path = self.root / STAGES_FILE
        data = _read_json(path)
        try:
            validate_stages(data, source=str(path))
        except ValidationError as e:
            raise AssetLoadError(str(e)) from e

        stages = [Stage.from_dict(entry) for entry in data]
        self._stages = {s.id: s for s in stages}
        logger.info(f"Loaded {len(stages)} stages from {path}")
        return stages

    def get_stage(self, stage_id: str) -> Stage:
        """
        Look up a stage, loading stages.json on first use.

        Raises:
            AssetLoadError: If the stage id is unknown
        """
        if not self._stages:
            self.load_stages()
        try:
            return self._stages[stage_id]
        except KeyError:
            raise AssetLoadError(f"Unknown stage id: {stage_id!r}") from None

    def load_stage_questions(self, stage: Stage | str) -> List[QuestionSpec]:
        """
        Load the questions of one stage.

        Sort-type entries are dropped and entries whose answer cannot be
        resolved are skipped; both are logged.

        Args:
            stage: Stage or stage id

        Returns:
            Questions in file order

        Raises:
            AssetLoadError: If the quiz file is missing, unreadable or
                fails schema validation, or the stage id is unknown
        """
        if isinstance(stage, str):
            stage = self.get_stage(stage)

        path = self.root / QUIZ_DIR / stage.quiz_file
        logger.info(f"Loading quiz data: {stage.name} ({stage.quiz_file})")
        data = _read_json(path)
        if not isinstance(data, list):
            raise AssetLoadError(f"{path}: quiz file must contain a list")

        entries = drop_unsupported(data)
        try:
            validate_quiz(entries, source=str(path))
        except ValidationError as e:
            raise AssetLoadError(str(e)) from e

        questions = parse_quiz_entries(entries, category=stage.name)
        logger.info(
            f"Loaded {len(questions)} questions for {stage.id!r}: {level_breakdown(questions)}"
        )
        return questions
