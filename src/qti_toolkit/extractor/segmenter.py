"""
Module: extractor.segmenter

Purpose:
    Split a normalized document into per-item text blocks at every
    "Item ID:" anchor.

Key Functions:
    - split_items(): Zero-width split, empty fragments dropped

Used By:
    - extractor.pipeline
    - extractor.html (per-item HTML fragments)
"""

from __future__ import annotations

import logging
import re

from qti_toolkit.core.errors import ParseError

from .detection.headers import ITEM_ANCHOR

logger = logging.getLogger(__name__)

_ITEM_SPLIT = re.compile(rf"(?={re.escape(ITEM_ANCHOR)})")


def split_items(text: str, *, require_items: bool = True) -> list[str]:
    """
    Split text into item blocks.

    Every block except possibly the first starts with "Item ID:". A
    preamble before the first anchor is kept as its own block; the
    extractors drop it because it has no header.

    Args:
        text: Normalized document text
        require_items: Raise when no anchor is present at all

    Returns:
        Non-empty item blocks in document order

    Raises:
        ParseError: If require_items and the text has no "Item ID:" anchor
    """
    blocks = [block for block in _ITEM_SPLIT.split(text) if block.strip()]
    if require_items and not any(ITEM_ANCHOR in block for block in blocks):
        raise ParseError(
            'No items found. Documents must contain items starting with "Item ID:" '
            "followed by the question type."
        )
    logger.debug(f"Segmented document into {len(blocks)} blocks")
    return blocks
