"""
JSON Schemas for the questions interchange format.
"""

from .validator import (
    QUESTIONS_SCHEMA_VERSION,
    ValidationError,
    validate_question,
    validate_questions_document,
)

__all__ = [
    "QUESTIONS_SCHEMA_VERSION",
    "ValidationError",
    "validate_question",
    "validate_questions_document",
]
