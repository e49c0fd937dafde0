"""JSON schemas for stage lists, quiz files and save data."""

from .validator import validate_stages, validate_quiz, validate_profile, ValidationError

__all__ = [
    "validate_stages",
    "validate_quiz",
    "validate_profile",
    "ValidationError",
]
