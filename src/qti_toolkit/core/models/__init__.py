"""
Core Models Package

Immutable data models that serve as the single source of truth between
the extractor and the builder.

All models in this package are frozen dataclasses. Records are created
fresh per conversion and never mutated; derived copies are made with
``dataclasses.replace``.
"""

from .metadata import QuestionMetadata, UsageStatistics
from .package import ASSESSMENT_FILENAME, MANIFEST_FILENAME, ItemKind, QTIItem, QTIPackage
from .questions import (
    EMQQuestion,
    MCQQuestion,
    Option,
    ParseMode,
    Question,
    QuestionType,
    SAQQuestion,
    SubQuestion,
)

__all__ = [
    "ASSESSMENT_FILENAME",
    "EMQQuestion",
    "ItemKind",
    "MANIFEST_FILENAME",
    "MCQQuestion",
    "Option",
    "ParseMode",
    "QTIItem",
    "QTIPackage",
    "Question",
    "QuestionMetadata",
    "QuestionType",
    "SAQQuestion",
    "SubQuestion",
    "UsageStatistics",
]
