"""
Unit Tests for Question Validation

Tests for the structural rules applied before questions leave the
extractor.
"""

import pytest

from qti_toolkit.core.errors import QuestionValidationError
from qti_toolkit.core.models import EMQQuestion, MCQQuestion, Option, SAQQuestion
from qti_toolkit.extractor.diagnostics import INVALID_QUESTION, DiagnosticsCollector
from qti_toolkit.extractor.validation import validate_question, validate_questions


def _mcq(**overrides) -> MCQQuestion:
    fields = {
        "item_id": "1",
        "text": "What is 2+2?",
        "options": (Option("A", "3"), Option("B", "4")),
        "correct_answer": "B",
    }
    fields.update(overrides)
    return MCQQuestion(**fields)


class TestValidateQuestion:
    """Tests for validate_question()."""

    def test_validate_when_complete_mcq_then_passes(self):
        validate_question(_mcq())

    @pytest.mark.parametrize("overrides,rule", [
        ({"item_id": " "}, "item_id_required"),
        ({"text": ""}, "text_required"),
        ({"options": ()}, "options_required"),
        ({"correct_answer": ""}, "correct_answer_required"),
    ])
    def test_validate_when_mcq_incomplete_then_names_rule(self, overrides, rule):
        with pytest.raises(QuestionValidationError) as exc_info:
            validate_question(_mcq(**overrides))
        assert exc_info.value.rule == rule

    def test_validate_when_answer_not_among_options_then_passes(self):
        validate_question(_mcq(correct_answer="Z"))

    def test_validate_when_emq_reference_without_text_then_passes(self):
        q = EMQQuestion(
            item_id="202", reference_id="10", options=(Option("A", "x"),), correct_answer="A"
        )
        validate_question(q)

    def test_validate_when_emq_without_reference_or_text_then_fails(self):
        q = EMQQuestion(item_id="202", options=(Option("A", "x"),), correct_answer="A")
        with pytest.raises(QuestionValidationError, match="empty question text"):
            validate_question(q)

    def test_validate_when_saq_without_answer_key_then_fails(self):
        q = SAQQuestion(item_id="401", text="Explain (2 marks)", total_marks=2)
        with pytest.raises(QuestionValidationError, match="SAQ question 401: no answer key"):
            validate_question(q)

    def test_validate_when_saq_without_options_then_passes(self):
        validate_question(SAQQuestion(item_id="401", text="Explain", answer_key="Because"))


class TestValidateQuestions:
    """Tests for validate_questions() batch partitioning."""

    def test_validate_when_mixed_batch_then_partitions_in_order(self):
        questions = [_mcq(item_id="1"), _mcq(item_id="2", options=()), _mcq(item_id="3")]

        report = validate_questions(questions)

        assert [q.item_id for q in report.valid] == ["1", "3"]
        assert len(report.rejected) == 1
        assert report.warnings == ["MCQ question 2: no options"]

    def test_validate_when_collector_given_then_records_issue(self):
        collector = DiagnosticsCollector()

        validate_questions([_mcq(correct_answer="")], collector, "paper.txt")

        (issue,) = collector.issues
        assert issue.issue_type == INVALID_QUESTION
        assert issue.rule == "correct_answer_required"
        assert issue.message == "Item 1 INVALID: MCQ question 1: no correct answer"
