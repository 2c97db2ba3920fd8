"""
Module: extractor.detection.options

Purpose:
    Detect lettered answer option lines ("A. text") in their three
    authored forms: plain A-J options, options carrying an item-id prefix
    ("24762. A. text"), and the wider A-Z form used by sub-question EMQs.

Key Functions:
    - detect_option(): Parse one option line
    - count_option_blocks(): Count 4-in-a-row A./B./C./D. blocks

Dependencies:
    - re (std)
    - core.models.Option

Used By:
    - extractor.classification
    - extractor.structuring.*
"""

from __future__ import annotations

import re
from typing import Optional

from qti_toolkit.core.models import Option

OPTION_PATTERN = re.compile(r"^([A-J])\.\s+(.+)")
PREFIXED_OPTION_PATTERN = re.compile(r"^\d+\.\s*([A-J])\.\s+(.+)")
WIDE_OPTION_PATTERN = re.compile(r"^(?:\d+\.\s*)?([A-Z])\.\s*(.+)")
OPTION_START_PATTERN = re.compile(r"^[A-J]\.")

OPTION_BLOCK_PATTERN = re.compile(
    r"\n\s*A\.\s+[^\n]+\n\s*B\.\s+[^\n]+\n\s*C\.\s+[^\n]+\n\s*D\.\s+[^\n]+"
)


def detect_option(
    line: str,
    *,
    allow_prefix: bool = False,
    wide: bool = False,
) -> Optional[Option]:
    """
    Parse an option line.

    Args:
        line: Trimmed line
        allow_prefix: Accept an item-id prefix ("24762. A. text")
        wide: Accept letters A-Z, an optional prefix and no space after the dot

    Returns:
        Option with the prefix removed, or None

    Example:
        >>> detect_option("24762. B. Malaria", allow_prefix=True)
        Option(letter='B', text='Malaria')
    """
    if wide:
        match = WIDE_OPTION_PATTERN.match(line)
    else:
        match = OPTION_PATTERN.match(line)
        if not match and allow_prefix:
            match = PREFIXED_OPTION_PATTERN.match(line)
    if not match:
        return None
    text = match.group(2).strip()
    if not text:
        return None
    return Option(letter=match.group(1), text=text)


def looks_like_option(line: str) -> bool:
    """True if the line starts like an A-J option ("A."), even without text."""
    return bool(OPTION_START_PATTERN.match(line))


def count_option_blocks(text: str) -> int:
    """Count non-overlapping runs of A./B./C./D. option lines."""
    return len(OPTION_BLOCK_PATTERN.findall(text))


def format_options(options: tuple[Option, ...] | list[Option]) -> list[str]:
    """Render options back to "L. text" lines."""
    return [f"{o.letter}. {o.text}" for o in options]
