"""
Schema Validation Utilities

Validates questions JSON (the parse → build hand-off format) before it is
turned back into question records.

Two levels:
- Basic checks (always): required fields, known type tag, schema version
- Strict mode: full JSON Schema validation via ``jsonschema``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
QUESTIONS_SCHEMA_VERSION = 1


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


def _run_schema(data: Any, schema_name: str, prefix: str = "") -> None:
    schema = _load_schema(schema_name)
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        path = ".".join(str(p) for p in first.absolute_path)
        if prefix:
            path = f"{prefix}.{path}" if path else prefix
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=path,
            errors=[e.message for e in errors],
        )


def validate_question(data: dict[str, Any], *, strict: bool = False, path: str = "") -> None:
    """
    Validate one question dictionary.

    Args:
        data: Question dictionary (``Question.to_dict()`` shape)
        strict: If True, also run the full JSON Schema
        path: Location prefix used in error messages

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Question must be an object, got {type(data).__name__}", path=path)

    required = ["type", "item_id"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    qtype = data.get("type")
    if qtype not in ("MCQ", "EMQ", "SAQ"):
        raise ValidationError(
            f"Invalid question type: {qtype!r} (must be MCQ, EMQ or SAQ)",
            path=f"{path}.type" if path else "type",
        )

    if not str(data.get("item_id", "")).strip():
        raise ValidationError("item_id must not be empty", path=f"{path}.item_id" if path else "item_id")

    if strict:
        _run_schema(data, "question", prefix=path)


def validate_questions_document(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a questions document (``{"schema_version", "parse_mode", "questions"}``).

    Args:
        data: Parsed JSON document
        strict: If True, also run the full JSON Schemas

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Questions document must be an object")

    version = data.get("schema_version")
    if version != QUESTIONS_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported questions schema version: {version} (expected {QUESTIONS_SCHEMA_VERSION})",
            path="schema_version",
        )

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    if strict:
        _run_schema(data, "questions")

    for i, question in enumerate(questions):
        validate_question(question, strict=strict, path=f"questions.{i}")
