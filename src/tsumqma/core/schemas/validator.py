"""
Schema Validation Utilities

Validates asset and save-file JSON against the bundled schemas before any
of it is turned into models.

- `validate_stages()`: stages.json
- `validate_quiz()`: one quiz file
- `validate_profile()`: saved player data

All three fail fast with `ValidationError`, which carries every schema
violation found rather than only the first.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate(data: Any, schema_name: str, *, source: str) -> None:
    schema = _load_schema(schema_name)
    validator = jsonschema.Draft7Validator(schema)
    violations = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if not violations:
        return

    errors = [
        f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
        for e in violations
    ]
    first = violations[0]
    raise ValidationError(
        f"{source} failed {schema_name} schema validation: {errors[0]}"
        + (f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""),
        path=".".join(str(p) for p in first.absolute_path),
        errors=errors,
    )


def validate_stages(data: Any, *, source: str = "stages.json") -> None:
    """
    Validate a stage list.

    Args:
        data: Parsed stages.json content
        source: Name used in error messages

    Raises:
        ValidationError: If data is invalid or stage ids repeat
    """
    _validate(data, "stages", source=source)

    seen: set[str] = set()
    for i, stage in enumerate(data):
        if stage["id"] in seen:
            raise ValidationError(
                f"{source}: duplicate stage id {stage['id']!r}",
                path=f"{i}.id",
            )
        seen.add(stage["id"])


def validate_quiz(data: Any, *, source: str = "quiz") -> None:
    """
    Validate a raw quiz file.

    Only structure is checked here; whether answers match options is a
    per-entry concern handled by the parser.

    Raises:
        ValidationError: If data is invalid
    """
    _validate(data, "quiz", source=source)


def validate_profile(data: Any, *, source: str = "save data") -> None:
    """
    Validate saved player data (current or legacy layout).

    Raises:
        ValidationError: If data is invalid
    """
    _validate(data, "profile", source=source)
