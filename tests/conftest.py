import json
import random
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import tsumqma
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from tsumqma.core.models.questions import MULTIPLE_CHOICE, QuestionSpec  # noqa: E402


# Common test fixtures
@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def single_spec() -> QuestionSpec:
    return QuestionSpec(
        text="Which technique gives a model worked examples?",
        options=("Few-shot", "Overclocking", "Defragmenting", "Caching"),
        correct_answer=0,
        category="AI",
    )


@pytest.fixture
def multi_spec() -> QuestionSpec:
    return QuestionSpec(
        text="Which reduce hallucinations?",
        options=("Grounding", "Max temperature", "Citations", "No context"),
        correct_answer=frozenset({0, 2}),
        type_tag=MULTIPLE_CHOICE,
        category="AI",
    )


@pytest.fixture
def question_pool() -> list[QuestionSpec]:
    """Ten single-choice questions; option 0 is always correct. Last two need Lv3."""
    return [
        QuestionSpec(
            text=f"Question {i}",
            options=("right", "wrong", "also wrong"),
            correct_answer=0,
            min_level=3 if i >= 8 else 1,
        )
        for i in range(10)
    ]


def write_assets(root: Path, quizzes: dict[str, list], stages: list | None = None) -> Path:
    """Write a stages.json plus quizzes/<id>.json asset directory."""
    if stages is None:
        stages = [
            {"id": stage_id, "name": stage_id.title(), "quizFile": f"{stage_id}.json"}
            for stage_id in quizzes
        ]
    (root / "quizzes").mkdir(parents=True, exist_ok=True)
    (root / "stages.json").write_text(json.dumps(stages), encoding="utf-8")
    for stage_id, entries in quizzes.items():
        (root / "quizzes" / f"{stage_id}.json").write_text(
            json.dumps(entries, ensure_ascii=False), encoding="utf-8"
        )
    return root


def raw_single(i: int, min_level: int = 1) -> dict:
    return {
        "type": "single",
        "question": f"Question {i}",
        "options": ["right", "wrong"],
        "answer": "right",
        "minLevel": min_level,
    }


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Asset directory with an 'ai' and a 'writing' stage."""
    return write_assets(
        tmp_path / "assets",
        {
            "ai": [raw_single(i) for i in range(5)] + [
                {
                    "type": "multiple",
                    "question": "Pick both rights",
                    "options": ["right A", "wrong", "right B"],
                    "answer": ["right A", "right B"],
                },
                {"type": "sort", "question": "Order these", "items": ["a", "b"]},
            ],
            "writing": [raw_single(i) for i in range(3)],
        },
    )


class RecordingPresenter:
    """Presenter that keeps everything it is shown."""

    def __init__(self):
        self.countdowns = []
        self.questions = []
        self.outcomes = []
        self.snapshots = []
        self.results = []
        self.milestones = []

    def show_countdown(self, value):
        self.countdowns.append(value)

    def show_question(self, number, descriptor):
        self.questions.append((number, descriptor))

    def show_outcome(self, outcome):
        self.outcomes.append(outcome)

    def show_snapshot(self, snapshot):
        self.snapshots.append(snapshot)

    def show_result(self, result):
        self.results.append(result)

    def show_milestone(self, milestone):
        self.milestones.append(milestone)


class RecordingCues:
    def __init__(self):
        self.cues = []

    def emit(self, cue):
        self.cues.append(cue)
