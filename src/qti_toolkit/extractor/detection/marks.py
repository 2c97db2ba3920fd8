"""
Module: extractor.detection.marks

Purpose:
    Detect "(n marks)" annotations in SAQ text. A part may carry several
    annotations; its marks are their sum.

Key Classes:
    - MarkAnnotation: One detected annotation

Key Functions:
    - find_mark_annotations(): All annotations in text order
    - sum_marks(): Sum of all annotations
    - strip_marks(): Text with annotations removed

Dependencies:
    - re (std)

Used By:
    - extractor.structuring.saq
    - extractor.classification
    - builder.qti.items (stripping marks for display)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MARKS_PATTERN = re.compile(r"\((\d+)\s+marks?\)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class MarkAnnotation:
    """
    A detected "(n marks)" annotation.

    Attributes:
        value: Mark value (non-negative)
        start: Offset of "(" in the searched text
        end: Offset after ")"
    """
    value: int
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Marks cannot be negative: {self.value}")


def find_mark_annotations(text: str) -> list[MarkAnnotation]:
    """
    Find all mark annotations.

    Example:
        >>> [m.value for m in find_mark_annotations("Explain (2 marks) and list (1 mark)")]
        [2, 1]
    """
    return [
        MarkAnnotation(value=int(m.group(1)), start=m.start(), end=m.end())
        for m in MARKS_PATTERN.finditer(text)
    ]


def sum_marks(text: str) -> int:
    return sum(m.value for m in find_mark_annotations(text))


def strip_marks(text: str) -> str:
    """Remove every annotation and trim."""
    return MARKS_PATTERN.sub("", text).strip()
