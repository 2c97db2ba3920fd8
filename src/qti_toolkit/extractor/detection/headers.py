"""
Module: extractor.detection.headers

Purpose:
    Line-level anchors shared by every per-item state machine: the
    ``Item ID:`` header, ``Answer:`` lines, ``Options ID:`` lines, option
    set back-references, and the markers that end question parsing.

Key Functions:
    - detect_item_header(): Parse "Item ID: <digits> <type-label>"
    - find_item_id(): Best-effort item id for logging
    - answer_content(): Content of an "Answer:" line
    - options_id_of(): Value of an "Options ID:" line
    - detect_reference(): Referenced options id of a back-reference line
    - is_metadata_marker() / is_end_of_item()

Dependencies:
    - re (std)

Used By:
    - extractor.segmenter
    - extractor.structuring.*
    - extractor.metadata
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

ITEM_ANCHOR = "Item ID:"
ANSWER_PREFIX = "Answer:"
OPTIONS_ID_PREFIX = "Options ID:"
SOURCE_PREFIX = "Source:"
END_OF_ITEM = "End-of-Item"

# Lines that end question parsing and start the trailing metadata block
METADATA_MARKERS = (
    "Profile:",
    "Last Use Statistics:",
    "Second Last Use Statistics:",
    "Background Info:",
)

ITEM_HEADER_PATTERN = re.compile(r"Item ID:\s*(\d+)\s+(.+)")
ITEM_ID_PATTERN = re.compile(r"Item ID:\s*(\d+)")
REFERENCE_PHRASE = "With reference to the previous Options"
REFERENCE_ID_PATTERN = re.compile(r"ID:\s*(\d+)")


@dataclass(frozen=True, slots=True)
class ItemHeader:
    """
    Parsed item header line.

    Attributes:
        item_id: Digits after "Item ID:"
        type_label: Remainder of the line, e.g. "A type: 5 options"
    """
    item_id: str
    type_label: str


def detect_item_header(line: str) -> Optional[ItemHeader]:
    """
    Parse an item header line.

    Returns:
        ItemHeader, or None if the line is not a well-formed header

    Example:
        >>> detect_item_header("Item ID: 24761 A type: 5 options")
        ItemHeader(item_id='24761', type_label='A type: 5 options')
    """
    match = ITEM_HEADER_PATTERN.search(line)
    if not match:
        return None
    return ItemHeader(item_id=match.group(1), type_label=match.group(2).strip())


def find_item_id(text: str) -> Optional[str]:
    """First item id anywhere in ``text`` (for log messages)."""
    match = ITEM_ID_PATTERN.search(text)
    return match.group(1) if match else None


def answer_content(line: str) -> Optional[str]:
    """Content after "Answer:", or None if the line is not an answer line."""
    if not line.startswith(ANSWER_PREFIX):
        return None
    return line[len(ANSWER_PREFIX):].strip()


def options_id_of(line: str) -> Optional[str]:
    """Value after "Options ID:", or None if the line does not start with it."""
    if not line.startswith(OPTIONS_ID_PREFIX):
        return None
    return line[len(OPTIONS_ID_PREFIX):].strip()


def detect_reference(line: str) -> Optional[str]:
    """
    Detect a back-reference to a previously defined option set.

    Returns:
        The referenced id, "" when the phrase carries no id, or None when
        the line is not a back-reference at all
    """
    if REFERENCE_PHRASE not in line:
        return None
    match = REFERENCE_ID_PATTERN.search(line)
    return match.group(1) if match else ""


def is_metadata_marker(line: str) -> bool:
    return line.startswith(METADATA_MARKERS)


def is_end_of_item(line: str) -> bool:
    return line.startswith(END_OF_ITEM)


def item_lines(text: str) -> list[str]:
    """Split item text into trimmed, non-empty lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]
