"""
Module: extractor.validation

Purpose:
    Structural rule table applied to every extracted question. Invalid
    questions are dropped with a logged reason; the batch continues.

Key Functions:
    - validate_question(): Raise QuestionValidationError on the first failed rule
    - validate_questions(): Partition a batch into valid and rejected

Key Classes:
    - ValidationReport: Outcome of validate_questions()

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from qti_toolkit.core.errors import QuestionValidationError
from qti_toolkit.core.models import EMQQuestion, MCQQuestion, Question, SAQQuestion

from .diagnostics import DiagnosticsCollector

logger = logging.getLogger(__name__)


def _has_item_id(q: Question) -> bool:
    return bool(q.item_id.strip())


def _has_text(q: Question) -> bool:
    if isinstance(q, EMQQuestion) and q.reference_id:
        return True
    return bool(q.text.strip())


def _has_options(q: Question) -> bool:
    if isinstance(q, (MCQQuestion, EMQQuestion)):
        return len(q.options) > 0
    return True


def _has_correct_answer(q: Question) -> bool:
    if isinstance(q, (MCQQuestion, EMQQuestion)):
        return bool(q.correct_answer.strip())
    return True


def _has_answer_key(q: Question) -> bool:
    if isinstance(q, SAQQuestion):
        return bool(q.answer_key.strip())
    return True


# (rule name, check, message) in evaluation order. Note: correct_answer is
# not required to be one of the option letters.
RULES: Tuple[Tuple[str, Callable[[Question], bool], str], ...] = (
    ("item_id_required", _has_item_id, "missing item id"),
    ("text_required", _has_text, "empty question text"),
    ("options_required", _has_options, "no options"),
    ("correct_answer_required", _has_correct_answer, "no correct answer"),
    ("answer_key_required", _has_answer_key, "no answer key"),
)


def validate_question(question: Question) -> None:
    """
    Check one question against the rule table.

    Raises:
        QuestionValidationError: On the first rule that fails
    """
    for rule, check, message in RULES:
        if not check(question):
            raise QuestionValidationError(
                f"{question.type} question {question.item_id or '?'}: {message}",
                item_id=question.item_id,
                rule=rule,
            )


@dataclass
class ValidationReport:
    """Valid questions (source order) and (question, error) rejections."""
    valid: List[Question] = field(default_factory=list)
    rejected: List[Tuple[Question, QuestionValidationError]] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [str(error) for _, error in self.rejected]


def validate_questions(
    questions: Sequence[Question],
    diagnostics: Optional[DiagnosticsCollector] = None,
    source: str = "",
) -> ValidationReport:
    """
    Partition questions into valid and rejected.

    Rejected questions are logged at warning level and, when a collector
    is given, recorded as ``invalid_question`` issues.
    """
    report = ValidationReport()
    for question in questions:
        try:
            validate_question(question)
        except QuestionValidationError as e:
            logger.warning(f"Dropping invalid question: {e}")
            report.rejected.append((question, e))
            if diagnostics is not None:
                diagnostics.add_invalid_question(question.item_id, e.rule, str(e), source)
            continue
        report.valid.append(question)
    return report
