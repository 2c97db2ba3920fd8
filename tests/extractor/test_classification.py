"""
Unit Tests for Document Classification

Tests for parse-mode detection of whole documents and per-item type
detection in mixed mode.
"""

import pytest

from qti_toolkit.core.models import ParseMode, QuestionType
from qti_toolkit.extractor.classification import (
    _compile_patterns_with_weights,
    detect_item_type,
    detect_parse_mode,
    detect_question_type,
    score_patterns,
)


class TestDetectParseMode:
    """Tests for detect_parse_mode()."""

    # ─────────────────────────────────────────────────────────────────────────
    # Single-type documents
    # ─────────────────────────────────────────────────────────────────────────

    def test_detect_when_mcq_document_then_mcq(self, mcq_text):
        assert detect_parse_mode(mcq_text) is ParseMode.MCQ

    def test_detect_when_emq_document_then_emq(self, emq_text):
        assert detect_parse_mode(emq_text) is ParseMode.EMQ

    def test_detect_when_saq_document_then_saq(self, saq_text):
        assert detect_parse_mode(saq_text) is ParseMode.SAQ

    def test_detect_when_no_signal_then_defaults_to_mcq(self):
        assert detect_parse_mode("Item ID: 1 question\nWhat?") is ParseMode.MCQ

    # ─────────────────────────────────────────────────────────────────────────
    # Mixed documents
    # ─────────────────────────────────────────────────────────────────────────

    def test_detect_when_two_types_present_then_mixed(self, mixed_text):
        assert detect_parse_mode(mixed_text) is ParseMode.MIXED

    def test_detect_when_emq_with_four_option_block_then_mixed(self):
        text = (
            "Item ID: 1 R type\nOptions ID: 3\nA. a\nB. b\nC. c\nD. d\n"
            "Patient one.\nAnswer: A"
        )
        assert detect_parse_mode(text) is ParseMode.MIXED

    @pytest.mark.parametrize("filename", ["mixed.txt", "Final_Exam.txt", "paper2.pdf", "HYBRID"])
    def test_detect_when_mixed_filename_hint_then_mixed(self, mcq_text, filename):
        assert detect_parse_mode(mcq_text, filename) is ParseMode.MIXED

    def test_detect_when_custom_hints_then_used(self, mcq_text):
        assert detect_parse_mode(mcq_text, "exam.txt", mixed_filename_hints=()) is ParseMode.MCQ

    # ─────────────────────────────────────────────────────────────────────────
    # Filename type hints
    # ─────────────────────────────────────────────────────────────────────────

    def test_detect_when_single_type_hint_and_no_indicators_then_hint_wins(self):
        assert detect_parse_mode("Item ID: 1 question\nWhat?", "cardio_saq.txt") is ParseMode.SAQ

    def test_detect_when_single_type_hint_and_one_indicator_then_hint_wins(self, mcq_text):
        assert detect_parse_mode(mcq_text, "block_emq.txt") is ParseMode.EMQ


class TestDetectQuestionType:
    """Tests for detect_question_type() (broad counts)."""

    def test_detect_when_filename_hint_then_hint(self):
        assert detect_question_type("anything", "set1_emq.docx") is QuestionType.EMQ

    def test_detect_when_part_labels_dominate_then_saq(self):
        assert detect_question_type("(a) x (2 marks)\n(b) y (1 mark)") is QuestionType.SAQ

    def test_detect_when_tie_then_mcq(self):
        assert detect_question_type("Options ID: 1\n(a)") is QuestionType.MCQ


class TestDetectItemType:
    """Tests for detect_item_type() in mixed mode."""

    def test_detect_when_a_type_header_then_mcq(self, mcq_text):
        assert detect_item_type(mcq_text) is QuestionType.MCQ

    def test_detect_when_r_type_header_then_emq(self):
        assert detect_item_type("Item ID: 7 R type\nOptions ID: 3\nA. x") is QuestionType.EMQ

    def test_detect_when_emq_with_four_options_then_still_emq(self):
        text = "Item ID: 1 R type\nOptions ID: 3\nA. a\nB. b\nC. c\nD. d\nAnswer: A"
        assert detect_item_type(text) is QuestionType.EMQ

    def test_detect_when_saq_header_then_saq(self, saq_text):
        assert detect_item_type(saq_text) is QuestionType.SAQ

    def test_detect_when_no_signal_then_mcq(self):
        assert detect_item_type("Item ID: 9 question\nWhy?") is QuestionType.MCQ


class TestScorePatterns:
    """Tests for the weighted pattern scorer."""

    def test_compile_when_invalid_regex_then_skipped(self):
        compiled = _compile_patterns_with_weights({QuestionType.MCQ: ["(", r"A\."]})
        assert len(compiled[QuestionType.MCQ]) == 1

    def test_score_when_counting_occurrences_then_weights_each(self):
        compiled = _compile_patterns_with_weights(
            {QuestionType.SAQ: [{"pattern": r"\(\d+ marks?\)", "weight": 2.0}]}
        )
        text = "(1 mark) (2 marks) (3 marks)"
        assert score_patterns(text, compiled, count_occurrences=True)[QuestionType.SAQ] == 6.0
        assert score_patterns(text, compiled, count_occurrences=False)[QuestionType.SAQ] == 2.0

    def test_score_when_case_sensitive_then_respects_case(self):
        compiled = _compile_patterns_with_weights(
            {QuestionType.MCQ: [{"pattern": "A type", "case_sensitive": True}]}
        )
        assert score_patterns("a type", compiled, count_occurrences=True)[QuestionType.MCQ] == 0.0
