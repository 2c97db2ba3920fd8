"""
Module: extractor.structuring.emq

Purpose:
    Line state machines for extended-matching items, in both authored
    shapes.

    Shape 1 - one question per item, option sets shared across items:

        Item ID: 201 R type
        Options ID: 10
        Fever in the returning traveller       ← topic header
        A. Malaria                             ← options (prefix "24762. A." allowed)
        B. Dengue
        For each patient select the most likely diagnosis.   ← instructions
        A 24-year-old returns from Ghana ...   ← stem
        Answer: A

        Item ID: 202 R type
        With reference to the previous Options ID: 10
        A 30-year-old returns from Thailand ...
        Answer: B

    Shape 2 - one item split into sibling records:

        Item ID: 300 R type
        <context lines>
        Options ID: 12
        A. ...
        Sub-Question 1: <question>
        Answer: C
        Sub-Question 2: <question>
        Answer: A

Key Functions:
    - extract_emq(): Shape 1, reads the shared option set accumulator
    - extract_emq_sub_questions(): Shape 2, falls back to shape 1
      when no sub-question line is found

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
from typing import Optional

from qti_toolkit.core.models import EMQQuestion, Option

from ..config import ExtractionConfig
from ..detection.headers import (
    answer_content,
    detect_item_header,
    detect_reference,
    is_end_of_item,
    is_metadata_marker,
    item_lines,
    options_id_of,
)
from ..detection.options import detect_option, looks_like_option
from ..detection.parts import SubQuestionMarker, detect_sub_question
from ..metadata import extract_metadata
from .state import (
    EMPTY_OPTION_SET,
    ExtractorState,
    SharedOptionSet,
    compose_shared_context,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Shape 1: Options ID / back-reference
# ─────────────────────────────────────────────────────────────────────────────

def extract_emq(
    item_text: str,
    shared: SharedOptionSet = EMPTY_OPTION_SET,
    config: Optional[ExtractionConfig] = None,
) -> Optional[EMQQuestion]:
    """
    Extract one EMQ from an item.

    Args:
        item_text: Item text starting at "Item ID:"
        shared: Most recently defined option set (fold accumulator)
        config: Extraction settings (instruction keywords, placeholder)

    Returns:
        EMQQuestion, or None when the first line is not an item header
    """
    config = config or ExtractionConfig()
    lines = item_lines(item_text)
    if not lines:
        return None
    header = detect_item_header(lines[0])
    if header is None:
        logger.debug(f"Dropping block without item header: {lines[0][:60]!r}")
        return None
    item_id = header.item_id

    options_id = ""
    options: list[Option] = []
    reference_id = ""
    inherited_context: Optional[str] = None
    topic = ""
    instructions: list[str] = []
    stem: list[str] = []
    answer = ""
    state = ExtractorState.BODY

    for line in lines[1:]:
        if is_end_of_item(line) or is_metadata_marker(line):
            break

        new_id = options_id_of(line)
        if new_id is not None:
            options_id = new_id
            options = []
            state = ExtractorState.TOPIC
            continue

        referenced = detect_reference(line)
        if referenced is not None:
            reference_id = referenced
            if shared.matches(referenced):
                options = list(shared.options)
                options_id = shared.options_id
                inherited_context = shared.shared_context
            elif referenced:
                logger.debug(
                    f"Item {item_id} references Options ID {referenced} "
                    f"but the last defined set is {shared.options_id or 'none'}"
                )
            state = ExtractorState.BODY
            continue

        content = answer_content(line)
        if content is not None:
            answer = content
            state = ExtractorState.ANSWER
            continue

        if state is ExtractorState.TOPIC:
            option = detect_option(line, allow_prefix=True)
            if option is not None:
                options.append(option)
                state = ExtractorState.OPTIONS
            elif not topic:
                topic = line
            else:
                topic = f"{topic} {line}"
        elif state is ExtractorState.OPTIONS:
            option = detect_option(line, allow_prefix=True)
            if option is not None:
                options.append(option)
            elif config.is_instruction(line):
                instructions.append(line)
                state = ExtractorState.INSTRUCTIONS
            else:
                stem.append(line)
                state = ExtractorState.BODY
        elif state is ExtractorState.INSTRUCTIONS:
            if config.is_instruction(line):
                instructions.append(line)
            else:
                stem.append(line)
                state = ExtractorState.BODY
        elif state is ExtractorState.BODY:
            if not looks_like_option(line):
                stem.append(line)

    if topic:
        shared_context = compose_shared_context(topic, options, instructions)
    elif reference_id and inherited_context:
        shared_context = inherited_context
    else:
        shared_context = compose_shared_context("", options, instructions) if options_id else None

    text = " ".join(stem).strip()
    if not text and reference_id:
        text = config.placeholder_for(item_id)

    return EMQQuestion(
        item_id=item_id,
        title=f"Question {item_id}",
        text=text,
        type_label=header.type_label,
        options_id=options_id,
        options=tuple(options),
        reference_id=reference_id,
        correct_answer=answer,
        shared_context=shared_context,
        metadata=extract_metadata(item_text),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Shape 2: Sub-Question n / Answer pairs
# ─────────────────────────────────────────────────────────────────────────────

def extract_emq_sub_questions(
    item_text: str,
    shared: SharedOptionSet = EMPTY_OPTION_SET,
    config: Optional[ExtractionConfig] = None,
) -> list[EMQQuestion]:
    """
    Split an item with "Sub-Question n:" lines into sibling EMQs.

    Each "Sub-Question n:" is completed by the next "Answer:" line; a
    sub-question followed directly by another one gets an empty answer.
    Siblings share the item's options id, options and shared context, and
    get ``item_id = "<parentId>_<n>"``.

    Returns:
        Sibling records in encounter order; the shape 1 result when the
        item has no sub-question line; [] for a malformed header
    """
    config = config or ExtractionConfig()
    lines = item_lines(item_text)
    if not lines:
        return []
    header = detect_item_header(lines[0])
    if header is None:
        logger.debug(f"Dropping block without item header: {lines[0][:60]!r}")
        return []
    item_id = header.item_id

    context: list[str] = []
    options_id = ""
    options: list[Option] = []
    instructions: list[str] = []
    completed: list[tuple[SubQuestionMarker, str]] = []
    pending: Optional[SubQuestionMarker] = None
    state = ExtractorState.BODY

    for line in lines[1:]:
        if is_end_of_item(line) or is_metadata_marker(line):
            break

        new_id = options_id_of(line)
        if new_id is not None:
            options_id = new_id
            state = ExtractorState.OPTIONS
            continue

        content = answer_content(line)
        if content is not None:
            if pending is not None:
                completed.append((pending, content))
                pending = None
            state = ExtractorState.ANSWER
            continue

        marker = detect_sub_question(line)
        if marker is not None:
            if pending is not None:
                completed.append((pending, ""))
            pending = marker
            state = ExtractorState.PARTS
            continue

        if state is ExtractorState.BODY:
            context.append(line)
        elif state is ExtractorState.OPTIONS:
            option = detect_option(line, wide=True)
            if option is not None:
                options.append(option)
            else:
                instructions.append(line)
                state = ExtractorState.INSTRUCTIONS
        elif state is ExtractorState.INSTRUCTIONS:
            instructions.append(line)
        elif state is ExtractorState.PARTS and pending is not None:
            pending = SubQuestionMarker(pending.number, f"{pending.text} {line}".strip())

    if pending is not None:
        completed.append((pending, ""))

    if not completed:
        single = extract_emq(item_text, shared, config)
        return [single] if single is not None else []

    header_line = context[0] if context else ""
    shared_context = compose_shared_context(header_line, options, context[1:] + instructions)
    metadata = extract_metadata(item_text)

    questions = []
    for marker, answer in completed:
        questions.append(
            EMQQuestion(
                item_id=f"{item_id}_{marker.number}",
                title=f"Question {item_id} (Sub-Question {marker.number})",
                text=marker.text,
                type_label=header.type_label,
                options_id=options_id,
                options=tuple(options),
                reference_id="",
                correct_answer=answer,
                shared_context=shared_context,
                parent_item_id=item_id,
                metadata=(
                    metadata.with_provenance(item_id, sub_question_number=marker.number)
                    if metadata is not None
                    else None
                ),
            )
        )

    logger.debug(f"Item {item_id}: split into {len(questions)} EMQ sub-questions")
    return questions
