"""
Core Package

Immutable data models, error types, schema validation and serialization
shared by the extractor and the builder.
"""

from .errors import (
    ConversionError,
    ParseError,
    QTIToolkitError,
    QuestionValidationError,
    SourceLoadError,
)

__all__ = [
    "ConversionError",
    "ParseError",
    "QTIToolkitError",
    "QuestionValidationError",
    "SourceLoadError",
]
