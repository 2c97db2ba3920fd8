"""
Module: core.errors

Purpose:
    Exception hierarchy for the conversion pipeline. Document-level
    failures are raised to the caller; item-level failures are raised
    inside the extractor and recovered there.

Key Classes:
    - QTIToolkitError: Base class for all toolkit errors
    - ParseError: Document cannot yield any question
    - QuestionValidationError: A single question breaks a structural rule
    - ConversionError: Package generation cannot proceed
    - SourceLoadError: Input file cannot be read into text

Used By:
    - extractor.pipeline, extractor.segmenter, extractor.validation
    - builder.controller
    - cli
"""

from __future__ import annotations

from typing import Optional


class QTIToolkitError(Exception):
    """Base error for the toolkit."""
    pass


class ParseError(QTIToolkitError):
    """Document-level parse failure (nothing usable in the input)."""
    pass


class QuestionValidationError(QTIToolkitError):
    """
    A parsed question failed a structural rule.

    Attributes:
        item_id: Item the rule failed for (may be empty)
        rule: Short rule name, e.g. "options_required"
    """

    def __init__(self, message: str, item_id: str = "", rule: str = ""):
        super().__init__(message)
        self.item_id = item_id
        self.rule = rule


class ConversionError(QTIToolkitError):
    """Package generation failure."""
    pass


class SourceLoadError(QTIToolkitError):
    """Input source could not be loaded as text."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
