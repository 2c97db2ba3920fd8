"""
Module: extractor.detection.parts

Purpose:
    Detect sub-question labels: SAQ part letters "(a) text" and EMQ
    "Sub-Question n: text" markers.

Key Classes:
    - PartLabel: Detected SAQ part
    - SubQuestionMarker: Detected EMQ sub-question

Key Functions:
    - detect_part(): Parse "(a) text"
    - answer_part_letter(): Part letter an answer line starts with
    - detect_sub_question(): Parse "Sub-Question 2: text"
    - has_sub_question_markers(): Any EMQ sub-question in text

Dependencies:
    - re (std)

Used By:
    - extractor.structuring.saq
    - extractor.structuring.emq
    - extractor.classification
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

PART_PATTERN = re.compile(r"^\(([a-z])\)\s+(.+)", re.IGNORECASE)
PART_PREFIX_PATTERN = re.compile(r"^\(([a-z])\)", re.IGNORECASE)
SUB_QUESTION_PATTERN = re.compile(r"^Sub-Question\s+(\d+):\s*(.+)", re.IGNORECASE)
SUB_QUESTION_ANYWHERE_PATTERN = re.compile(r"Sub-Question\s+\d+:", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PartLabel:
    """
    Detected SAQ part line.

    Attributes:
        letter: Lower-case part letter, e.g. "a"
        text: Text after the label (including any marks annotation)
    """
    letter: str
    text: str

    @property
    def display(self) -> str:
        """Label as displayed, e.g. "(a)"."""
        return f"({self.letter})"


@dataclass(frozen=True, slots=True)
class SubQuestionMarker:
    """
    Detected EMQ sub-question line.

    Attributes:
        number: Sub-question number as written
        text: Question text after the colon
    """
    number: int
    text: str


def detect_part(line: str) -> Optional[PartLabel]:
    """
    Parse a part line.

    Example:
        >>> detect_part("(B) Describe the mechanism (3 marks)")
        PartLabel(letter='b', text='Describe the mechanism (3 marks)')
    """
    match = PART_PATTERN.match(line)
    if not match:
        return None
    return PartLabel(letter=match.group(1).lower(), text=match.group(2).strip())


def answer_part_letter(text: str) -> Optional[str]:
    """Lower-case part letter ``text`` starts with, if any."""
    match = PART_PREFIX_PATTERN.match(text)
    return match.group(1).lower() if match else None


def detect_sub_question(line: str) -> Optional[SubQuestionMarker]:
    match = SUB_QUESTION_PATTERN.match(line)
    if not match:
        return None
    return SubQuestionMarker(number=int(match.group(1)), text=match.group(2).strip())


def has_sub_question_markers(text: str) -> bool:
    return bool(SUB_QUESTION_ANYWHERE_PATTERN.search(text))
