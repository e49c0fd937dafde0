"""
Unit Tests for Question and Stage Models

Tests for QuestionSpec construction and validation, and Stage parsing.
"""

import pytest

from tsumqma.core.models.questions import SINGLE_CHOICE, QuestionSpec
from tsumqma.core.models.stages import Stage


class TestQuestionSpec:
    """Tests for QuestionSpec dataclass."""

    def test_init_when_valid_single_then_defaults_applied(self):
        spec = QuestionSpec(text="Q", options=("a", "b"), correct_answer=1)
        assert spec.type_tag == SINGLE_CHOICE
        assert spec.min_level == 1
        assert spec.is_multi is False
        assert spec.correct_indices == frozenset({1})

    def test_init_when_options_empty_then_raises_error(self):
        with pytest.raises(ValueError, match="options must not be empty"):
            QuestionSpec(text="Q", options=(), correct_answer=0)

    def test_init_when_index_out_of_range_then_raises_error(self):
        with pytest.raises(ValueError, match="out of range"):
            QuestionSpec(text="Q", options=("a", "b"), correct_answer=2)

    def test_init_when_multi_index_out_of_range_then_raises_error(self):
        with pytest.raises(ValueError, match="out of range"):
            QuestionSpec(text="Q", options=("a", "b"), correct_answer=frozenset({0, 5}))

    def test_init_when_multi_answer_empty_then_raises_error(self):
        with pytest.raises(ValueError, match="must not be empty"):
            QuestionSpec(text="Q", options=("a",), correct_answer=frozenset())

    def test_init_when_min_level_zero_then_raises_error(self):
        with pytest.raises(ValueError, match="min_level"):
            QuestionSpec(text="Q", options=("a",), correct_answer=0, min_level=0)

    def test_is_multi_when_frozenset_answer_then_true(self, multi_spec):
        assert multi_spec.is_multi is True
        assert multi_spec.correct_indices == frozenset({0, 2})

    def test_repr_when_called_then_concise(self, single_spec):
        assert "options=4" in repr(single_spec)


class TestStage:
    """Tests for Stage descriptor."""

    def test_from_dict_when_quiz_file_key_then_mapped(self):
        stage = Stage.from_dict({"id": "ai", "name": "AI", "quizFile": "ai.json", "color": "#fff"})
        assert stage == Stage("ai", "AI", "ai.json")
