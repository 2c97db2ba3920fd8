"""
Module: extractor.normalizer

Purpose:
    Normalize raw document text before segmentation: unify line endings,
    collapse blank-line and whitespace runs, drop invisible characters,
    and trim every line.

Key Functions:
    - clean_text(): Pure normalization function

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import re

_BLANK_RUNS = re.compile(r"\n{3,}")
_SPACE_RUNS = re.compile(r"[ \t]{2,}")
_INVISIBLE = re.compile(r"[\u200b-\u200d\ufeff]")


def clean_text(text: str) -> str:
    """
    Normalize document text.

    Steps, in order:
    1. CRLF and lone CR become LF
    2. Three or more consecutive newlines become two
    3. Runs of two or more spaces/tabs become one space
    4. Zero-width characters and BOM are removed
    5. Every line is trimmed, then the whole text is trimmed

    Example:
        >>> clean_text("Item ID: 1\\r\\n\\r\\n\\r\\n  A.   yes ")
        'Item ID: 1\\n\\nA. yes'
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _BLANK_RUNS.sub("\n\n", text)
    text = _SPACE_RUNS.sub(" ", text)
    text = _INVISIBLE.sub("", text)
    return "\n".join(line.strip() for line in text.split("\n")).strip()
