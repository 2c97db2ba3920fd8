"""
Serialization Utilities

Provides to/from JSON utilities for question records.

- ``serialize_*`` / ``deserialize_*`` convert between models and dicts
- ``save_*`` / ``load_*`` read and write the questions document, the
  hand-off format between ``qti-toolkit parse`` and ``qti-toolkit convert``
- Validation via schemas before deserialization
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from ..models.questions import ParseMode, Question
from ..schemas.validator import (
    QUESTIONS_SCHEMA_VERSION,
    validate_question,
    validate_questions_document,
)


# ─────────────────────────────────────────────────────────────────────────────
# Question Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question(question: Question) -> dict[str, Any]:
    """
    Serialize a Question to a dictionary.

    The output can be written to JSON and will pass schema validation.
    """
    return question.to_dict()


def deserialize_question(data: dict[str, Any], *, validate: bool = True) -> Question:
    """
    Deserialize a Question from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first

    Returns:
        MCQQuestion, EMQQuestion or SAQQuestion instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If data cannot be parsed
    """
    if validate:
        validate_question(data, strict=True)
    return Question.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# Questions Document
# ─────────────────────────────────────────────────────────────────────────────

def serialize_questions(
    questions: Iterable[Question],
    parse_mode: ParseMode,
    *,
    source: Optional[str] = None,
    warnings: Iterable[str] = (),
) -> dict[str, Any]:
    """
    Build a questions document.

    Args:
        questions: Parsed question records
        parse_mode: Resolved parse mode (never AUTO)
        source: Original input filename, if known
        warnings: Item-level warnings recorded while parsing

    Returns:
        Dictionary matching ``questions.schema.json``
    """
    if parse_mode is ParseMode.AUTO:
        raise ValueError("parse_mode must be resolved before serialization")
    data: dict[str, Any] = {
        "schema_version": QUESTIONS_SCHEMA_VERSION,
        "parse_mode": parse_mode.value,
        "questions": [serialize_question(q) for q in questions],
    }
    if source:
        data["source"] = source
    warning_list = list(warnings)
    if warning_list:
        data["warnings"] = warning_list
    return data


def deserialize_questions(data: dict[str, Any], *, validate: bool = True) -> list[Question]:
    """
    Deserialize every question of a questions document.

    Raises:
        ValidationError: If validate=True and the document is invalid
    """
    if validate:
        validate_questions_document(data, strict=True)
    return [Question.from_dict(q) for q in data.get("questions", [])]


def save_questions_json(
    questions: Iterable[Question],
    path: Path,
    parse_mode: ParseMode,
    *,
    source: Optional[str] = None,
    warnings: Iterable[str] = (),
) -> None:
    """
    Save questions to a JSON document.

    Args:
        questions: Question records to save
        path: Output path, e.g. questions.json
        parse_mode: Resolved parse mode
        source: Original input filename
        warnings: Warnings to carry along
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = serialize_questions(questions, parse_mode, source=source, warnings=warnings)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_questions_json(path: Path, *, validate: bool = True) -> list[Question]:
    """
    Load questions from a JSON document.

    Raises:
        FileNotFoundError: If path does not exist
        json.JSONDecodeError: If the file is not JSON
        ValidationError: If validate=True and the document is invalid
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return deserialize_questions(data, validate=validate)
