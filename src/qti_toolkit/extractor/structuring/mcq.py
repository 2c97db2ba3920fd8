"""
Module: extractor.structuring.mcq

Purpose:
    Line state machine for one multiple-choice item.

    Item ID: 101 A type: 4 options
    <stem lines>
    A. <option>            ← A-J, encounter order
    ...
    Source: <reference>    ← kept out of the stem
    Answer: B
    Profile: ...           ← metadata, ends question parsing

Key Functions:
    - extract_mcq(): Item text → MCQQuestion (None if the header is malformed)

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
from typing import Optional

from qti_toolkit.core.models import MCQQuestion, Option

from ..detection.headers import (
    SOURCE_PREFIX,
    answer_content,
    detect_item_header,
    is_end_of_item,
    is_metadata_marker,
    item_lines,
)
from ..detection.options import detect_option
from ..metadata import extract_metadata
from .state import ExtractorState

logger = logging.getLogger(__name__)


def extract_mcq(item_text: str) -> Optional[MCQQuestion]:
    """
    Extract one MCQ from an item.

    Non-option lines join the stem with single spaces, including lines
    that follow the options. The last ``Answer:`` line wins.

    Returns:
        MCQQuestion, or None when the first line is not an item header
    """
    lines = item_lines(item_text)
    if not lines:
        return None
    header = detect_item_header(lines[0])
    if header is None:
        logger.debug(f"Dropping block without item header: {lines[0][:60]!r}")
        return None

    stem: list[str] = []
    options: list[Option] = []
    source: Optional[str] = None
    answer = ""
    state = ExtractorState.BODY

    for line in lines[1:]:
        if is_end_of_item(line):
            state = ExtractorState.DONE
            break
        if is_metadata_marker(line):
            state = ExtractorState.METADATA
            break

        content = answer_content(line)
        if content is not None:
            answer = content
            state = ExtractorState.ANSWER
            continue

        if state is ExtractorState.ANSWER:
            continue

        option = detect_option(line)
        if option is not None:
            options.append(option)
            state = ExtractorState.OPTIONS
        elif line.startswith(SOURCE_PREFIX):
            source = line[len(SOURCE_PREFIX):].strip() or None
        else:
            stem.append(line)

    return MCQQuestion(
        item_id=header.item_id,
        title=f"Question {header.item_id}",
        text=" ".join(stem),
        type_label=header.type_label,
        options=tuple(options),
        correct_answer=answer,
        source=source,
        metadata=extract_metadata(item_text),
    )
