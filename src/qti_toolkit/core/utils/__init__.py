"""Serialization helpers for core models."""

from .serialization import (
    deserialize_question,
    deserialize_questions,
    load_questions_json,
    save_questions_json,
    serialize_question,
    serialize_questions,
)

__all__ = [
    "deserialize_question",
    "deserialize_questions",
    "load_questions_json",
    "save_questions_json",
    "serialize_question",
    "serialize_questions",
]
