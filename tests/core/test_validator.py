"""
Unit Tests for Schema Validation

Tests for the validator module.
"""

import pytest

from tsumqma.core.schemas.validator import (
    ValidationError,
    validate_profile,
    validate_quiz,
    validate_stages,
)


class TestValidateStages:
    """Tests for validate_stages function."""

    def test_validate_when_valid_data_then_no_error(self):
        # Should not raise
        validate_stages([{"id": "ai", "name": "AI", "quizFile": "ai.json"}])

    def test_validate_when_missing_quiz_file_then_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_stages([{"id": "ai", "name": "AI"}])
        assert "quizFile" in str(exc_info.value)

    def test_validate_when_empty_list_then_raises_error(self):
        with pytest.raises(ValidationError):
            validate_stages([])

    def test_validate_when_duplicate_id_then_raises_error(self):
        stage = {"id": "ai", "name": "AI", "quizFile": "ai.json"}
        with pytest.raises(ValidationError, match="duplicate stage id"):
            validate_stages([stage, dict(stage)])


class TestValidateQuiz:
    """Tests for validate_quiz function."""

    def test_validate_when_single_and_multiple_then_no_error(self):
        validate_quiz([
            {"type": "single", "question": "Q", "options": ["a", "b"], "answer": "a"},
            {"type": "multiple", "question": "Q", "options": ["a", "b"], "answer": ["a", "b"],
             "minLevel": 2},
        ])

    def test_validate_when_options_not_list_then_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_quiz([{"question": "Q", "options": "a,b", "answer": "a"}])
        assert exc_info.value.path == "0.options"

    def test_validate_when_min_level_zero_then_raises_error(self):
        with pytest.raises(ValidationError):
            validate_quiz([{"question": "Q", "options": ["a"], "answer": "a", "minLevel": 0}])

    def test_validate_when_many_violations_then_all_collected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_quiz([{"options": ["a"]}, {"question": 5, "options": ["a"]}])
        assert len(exc_info.value.errors) == 2
        assert "(+1 more)" in str(exc_info.value)


class TestValidateProfile:
    """Tests for validate_profile function."""

    def test_validate_when_stage_missing_max_exp_then_raises_error(self):
        with pytest.raises(ValidationError):
            validate_profile({"stageLevels": {"ai": {"level": 1, "exp": 0}}})

    def test_validate_when_legacy_layout_then_no_error(self):
        validate_profile({"level": 2, "exp": 30, "selectedCharacter": None})
