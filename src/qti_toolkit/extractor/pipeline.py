"""
Module: extractor.pipeline

Purpose:
    Main pipeline orchestrator for text question extraction. Coordinates
    normalization, classification, segmentation, the per-item extractors
    and validation to produce typed question records.

Key Functions:
    - parse_questions(): Main entry point for extraction
    - extract_item(): One step of the per-item fold

Key Classes:
    - ExtractionResult: Container for extraction output

Dependencies:
    - qti_toolkit.extractor.structuring: Per-type state machines
    - qti_toolkit.common.timing: Phase timings

Used By:
    - qti_toolkit.cli: Command-line parse/build
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from qti_toolkit.common.timing import TimingLog, timed_phase
from qti_toolkit.core.errors import ParseError
from qti_toolkit.core.models import EMQQuestion, ParseMode, Question, QuestionType

from .classification import detect_item_type, detect_parse_mode
from .config import ExtractionConfig
from .detection.headers import ITEM_ANCHOR, detect_item_header, find_item_id
from .detection.parts import has_sub_question_markers
from .diagnostics import DiagnosticsCollector
from .html import attach_html
from .normalizer import clean_text
from .segmenter import split_items
from .structuring import (
    EMPTY_OPTION_SET,
    SharedOptionSet,
    extract_emq,
    extract_emq_sub_questions,
    extract_mcq,
    extract_saq,
)
from .validation import validate_questions

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """
    Result of parsing one document.

    Attributes:
        questions: Valid questions in source order
        parse_mode: Mode the document was parsed in (never AUTO)
        warnings: Messages for skipped items and rejected questions
        timing: Phase timings for the run
        diagnostics: Collector the run recorded issues into, if any
    """
    questions: List[Question]
    parse_mode: ParseMode
    warnings: List[str] = field(default_factory=list)
    timing: TimingLog = field(default_factory=TimingLog)
    diagnostics: Optional[DiagnosticsCollector] = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def question_ids(self) -> List[str]:
        return [q.item_id for q in self.questions]


def extract_item(
    item_text: str,
    shared: SharedOptionSet,
    mode: ParseMode,
    config: ExtractionConfig,
) -> Tuple[SharedOptionSet, List[Question]]:
    """
    Extract one item and advance the shared option set.

    In MIXED mode each item is classified on its own; otherwise the
    mode's single type is used for every item.

    Returns:
        (next shared option set, questions extracted from the item)
    """
    qtype = mode.question_type or detect_item_type(item_text)

    if qtype is QuestionType.MCQ:
        question = extract_mcq(item_text)
        return shared, [question] if question is not None else []

    if qtype is QuestionType.EMQ:
        if has_sub_question_markers(item_text):
            siblings = extract_emq_sub_questions(item_text, shared, config)
        else:
            single = extract_emq(item_text, shared, config)
            siblings = [single] if single is not None else []
        if siblings:
            shared = shared.advance(siblings[0])
        return shared, list(siblings)

    return shared, list(extract_saq(item_text))


def _no_valid_questions_message(mode: ParseMode) -> str:
    if mode is ParseMode.MIXED:
        return "No valid questions found in mixed document. Please check the format and try again."
    return f"No valid {mode} questions found. Please check the format and try again."


def parse_questions(
    text: str,
    question_type: str | ParseMode = ParseMode.AUTO,
    filename: str = "",
    html_content: str = "",
    *,
    config: Optional[ExtractionConfig] = None,
    diagnostics_collector: Optional[DiagnosticsCollector] = None,
) -> ExtractionResult:
    """
    Parse exam text into typed questions.

    Pipeline:
    1. Normalize text
    2. Resolve the parse mode (explicit selector, or classification for "auto")
    3. Split into items at "Item ID:"
    4. Fold the per-item extractor over the items, threading the EMQ
       shared option set
    5. Attach HTML fragments (if an HTML rendering was given)
    6. Drop questions failing the structural rules

    A failure inside one item is logged and recorded; the item is skipped
    and the batch continues.

    Args:
        text: Raw document text
        question_type: "MCQ", "EMQ", "SAQ", "MIXED" or "auto"
        filename: Original filename (classification hints only)
        html_content: Optional HTML rendering of the same document
        config: Optional extraction configuration
        diagnostics_collector: Optional collector for item-level issues

    Returns:
        ExtractionResult with at least one question

    Raises:
        ParseError: Empty text, no "Item ID:" anchor, or no valid question
        ValueError: Unknown question_type selector

    Example:
        >>> result = parse_questions("Item ID: 1 A type: 4 options\\nWhat is 2+2?\\nA. 3\\nB. 4\\nAnswer: B")
        >>> result.questions[0].correct_answer
        'B'
    """
    config = config or ExtractionConfig()
    requested = ParseMode.parse(question_type)
    timing_log = TimingLog()
    warnings: List[str] = []

    if diagnostics_collector is None and config.run_diagnostics:
        diagnostics_collector = DiagnosticsCollector()

    if not text or not text.strip():
        raise ParseError("No text content provided")

    with timed_phase(timing_log, "normalize"):
        cleaned = clean_text(text)

    with timed_phase(timing_log, "classify"):
        if requested is ParseMode.AUTO:
            mode = detect_parse_mode(
                cleaned, filename, mixed_filename_hints=config.mixed_filename_hints
            )
        else:
            mode = requested
    logger.info(f"Parsing {filename or 'document'} as {mode}")

    with timed_phase(timing_log, "segment"):
        items = split_items(cleaned)

    questions: List[Question] = []
    shared = EMPTY_OPTION_SET
    for item_text in items:
        if not item_text.startswith(ITEM_ANCHOR):
            logger.debug(f"Skipping preamble before first item ({len(item_text)} chars)")
            continue

        first_line = item_text.split("\n", 1)[0]
        if detect_item_header(first_line) is None:
            message = f"Skipping item with unrecognised header: {first_line[:80]!r}"
            logger.warning(message)
            warnings.append(message)
            if diagnostics_collector is not None:
                diagnostics_collector.add_unparseable_header(item_text, filename)
            continue

        item_id = find_item_id(first_line) or ""
        previous = shared
        try:
            with timed_phase(timing_log, "extract", item_id):
                shared, extracted = extract_item(item_text, shared, mode, config)
        except Exception as e:
            message = f"Failed to extract item {item_id}: {e}"
            logger.warning(message)
            warnings.append(message)
            if diagnostics_collector is not None:
                diagnostics_collector.add_extraction_failed(item_id, e, item_text, filename)
            continue

        for question in extracted:
            if (
                isinstance(question, EMQQuestion)
                and question.reference_id
                and not previous.matches(question.reference_id)
            ):
                message = (
                    f"Item {question.item_id}: Options ID {question.reference_id} "
                    f"does not match the last defined set ({previous.options_id or 'none'})"
                )
                logger.warning(message)
                warnings.append(message)
                if diagnostics_collector is not None:
                    diagnostics_collector.add_orphan_reference(
                        question.item_id, question.reference_id, previous.options_id, filename
                    )
        questions.extend(extracted)

    if html_content and html_content.strip():
        with timed_phase(timing_log, "attach_html"):
            questions = attach_html(
                questions, html_content, split_by_item=config.split_html_by_item
            )

    with timed_phase(timing_log, "validate"):
        report = validate_questions(questions, diagnostics_collector, filename)
    warnings.extend(report.warnings)

    if not report.valid:
        raise ParseError(_no_valid_questions_message(mode))

    logger.info(
        f"Extracted {len(report.valid)} {mode} questions from {len(items)} blocks"
        f" ({len(report.rejected)} rejected)"
    )
    logger.debug(timing_log.summary())

    return ExtractionResult(
        questions=report.valid,
        parse_mode=mode,
        warnings=warnings,
        timing=timing_log,
        diagnostics=diagnostics_collector,
    )
