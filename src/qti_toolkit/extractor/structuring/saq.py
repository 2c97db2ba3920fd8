"""
Module: extractor.structuring.saq

Purpose:
    Line state machine for one short-answer item. An item with lettered
    parts is split into one record per part; an item without parts
    becomes a single record.

    Item ID: 401 SAQ
    A 54-year-old presents with ...     ← shared context
    (a) List two causes (2 marks)       ← part, continuation lines join it
    (b) Outline management (3 marks)
    Answer: (a) Gallstones; alcohol     ← answers keyed by part letter
    (b) Fluids, analgesia
    (c) Name one complication (1 mark)  ← late part declared in the answer area

Key Functions:
    - extract_saq(): Item text → list of SAQQuestion

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from qti_toolkit.core.models import SAQQuestion, SubQuestion

from ..detection.headers import (
    answer_content,
    detect_item_header,
    is_end_of_item,
    is_metadata_marker,
    item_lines,
)
from ..detection.marks import find_mark_annotations, sum_marks
from ..detection.parts import answer_part_letter, detect_part
from ..metadata import extract_metadata
from .state import ExtractorState

logger = logging.getLogger(__name__)


def _strip_part_label(text: str) -> str:
    return text[3:].strip() if answer_part_letter(text) else text


def extract_saq(item_text: str) -> list[SAQQuestion]:
    """
    Extract SAQ records from one item.

    Parts are ``(x) text`` lines (x lower-cased). Answer lines starting
    with ``(x)`` are filed under that part; other answer lines continue
    the part answered last, or go to the general answer. When unlabelled
    answers follow more than one part (question, answer, question,
    answer) each part keeps the answer written after it. A part label
    seen only in the answer area starts a new part when the line carries
    a marks annotation.

    Returns:
        One record per part, a single record for an item without parts,
        or [] when the first line is not an item header
    """
    lines = item_lines(item_text)
    if not lines:
        return []
    header = detect_item_header(lines[0])
    if header is None:
        logger.debug(f"Dropping block without item header: {lines[0][:60]!r}")
        return []
    item_id = header.item_id

    context: List[str] = []
    parts: Dict[str, str] = {}
    answers: Dict[str, List[str]] = {}
    general_answer: List[str] = []
    # unlabelled answer lines keyed by the part they followed
    loose_answers: Dict[Optional[str], List[str]] = {}
    current_part: Optional[str] = None
    answering: Optional[str] = None
    state = ExtractorState.BODY

    for line in lines[1:]:
        if is_end_of_item(line) or is_metadata_marker(line):
            break

        content = answer_content(line)
        if content is not None:
            state = ExtractorState.ANSWER
            letter = answer_part_letter(content)
            if letter:
                answering = letter
                answers.setdefault(letter, []).append(_strip_part_label(content))
            elif content:
                answering = None
                general_answer.append(content)
                loose_answers.setdefault(current_part, []).append(content)
            continue

        part = detect_part(line)

        if state is ExtractorState.ANSWER:
            if part is not None and part.letter not in parts and find_mark_annotations(part.text):
                parts[part.letter] = part.text
                current_part = part.letter
                answering = None
                state = ExtractorState.PARTS
            elif part is not None:
                answering = part.letter
                answers.setdefault(part.letter, []).append(part.text)
            elif answering is not None:
                answers[answering].append(line)
            else:
                general_answer.append(line)
                loose_answers.setdefault(current_part, []).append(line)
            continue

        if part is not None:
            parts[part.letter] = part.text
            current_part = part.letter
            state = ExtractorState.PARTS
        elif state is ExtractorState.PARTS and current_part is not None:
            parts[current_part] = f"{parts[current_part]} {line}"
        else:
            context.append(line)

    metadata = extract_metadata(item_text)

    if not parts:
        all_answers = general_answer + [a for lines_ in answers.values() for a in lines_]
        text = " ".join(context)
        return [
            SAQQuestion(
                item_id=item_id,
                title=f"Question {item_id}",
                text=text,
                type_label=header.type_label,
                answer_key=" ".join(all_answers),
                total_marks=sum_marks(text),
                metadata=metadata,
            )
        ]

    shared_context = "\n".join(context) or None
    fallback_answer = "\n".join(general_answer)
    interleaved = sum(letter is not None for letter in loose_answers) > 1
    questions = []
    for letter, part_text in parts.items():
        marks = sum_marks(part_text)
        questions.append(
            SAQQuestion(
                item_id=f"{item_id}_{letter}",
                title=f"Question {item_id} ({letter})",
                text=f"({letter}) {part_text}",
                type_label=header.type_label,
                sub_questions=(SubQuestion(f"({letter})", part_text, marks),),
                answer_key=(
                    "\n".join(answers.get(letter, []))
                    or ("\n".join(loose_answers.get(letter, [])) if interleaved else fallback_answer)
                ),
                total_marks=marks,
                shared_context=shared_context,
                parent_item_id=item_id,
                metadata=(
                    metadata.with_provenance(item_id, sub_question_part=letter)
                    if metadata is not None
                    else None
                ),
            )
        )

    logger.debug(f"Item {item_id}: split into {len(questions)} SAQ parts")
    return questions
