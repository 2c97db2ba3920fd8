"""
Unit Tests for Question Models

Tests for the typed question records, options, sub-questions and
metadata.
"""

import pytest

from qti_toolkit.core.models import (
    EMQQuestion,
    MCQQuestion,
    Option,
    ParseMode,
    Question,
    QuestionMetadata,
    QuestionType,
    SAQQuestion,
    SubQuestion,
    UsageStatistics,
)


class TestOption:
    """Tests for Option dataclass."""

    def test_init_when_valid_letter_then_creates_option(self):
        option = Option("C", "Typhoid")
        assert option.letter == "C"
        assert option.text == "Typhoid"

    def test_init_when_lowercase_letter_then_raises_error(self):
        with pytest.raises(ValueError, match="single uppercase letter"):
            Option("c", "Typhoid")

    def test_init_when_multiple_letters_then_raises_error(self):
        with pytest.raises(ValueError, match="single uppercase letter"):
            Option("AB", "Typhoid")

    def test_init_when_frozen_then_immutable(self):
        option = Option("A", "x")
        with pytest.raises(AttributeError):
            option.text = "y"  # type: ignore


class TestSubQuestion:
    """Tests for SubQuestion dataclass."""

    def test_letter_when_part_has_parentheses_then_returns_bare_letter(self):
        assert SubQuestion("(b)", "Explain", 3).letter == "b"

    def test_init_when_negative_marks_then_raises_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            SubQuestion("(a)", "Explain", -1)


class TestParseMode:
    """Tests for ParseMode selector parsing."""

    # ─────────────────────────────────────────────────────────────────────────
    # parse()
    # ─────────────────────────────────────────────────────────────────────────

    @pytest.mark.parametrize("value,expected", [
        ("mcq", ParseMode.MCQ),
        (" EMQ ", ParseMode.EMQ),
        ("Mixed", ParseMode.MIXED),
        ("AUTO", ParseMode.AUTO),
        ("", ParseMode.AUTO),
        (None, ParseMode.AUTO),
    ])
    def test_parse_when_known_selector_then_resolves(self, value, expected):
        assert ParseMode.parse(value) is expected

    def test_parse_when_unknown_selector_then_raises_error(self):
        with pytest.raises(ValueError, match="Unknown question type"):
            ParseMode.parse("essay")

    # ─────────────────────────────────────────────────────────────────────────
    # question_type
    # ─────────────────────────────────────────────────────────────────────────

    def test_question_type_when_single_type_mode_then_returns_type(self):
        assert ParseMode.SAQ.question_type is QuestionType.SAQ

    def test_question_type_when_mixed_then_none(self):
        assert ParseMode.MIXED.question_type is None
        assert ParseMode.AUTO.question_type is None

    def test_str_when_called_then_returns_value(self):
        assert str(ParseMode.MIXED) == "MIXED"


class TestQuestionSerialization:
    """Tests for to_dict()/from_dict() dispatch."""

    def test_to_dict_when_mcq_then_includes_options_and_answer(self):
        q = MCQQuestion(
            item_id="1",
            title="Question 1",
            text="What is 2+2?",
            options=(Option("A", "3"), Option("B", "4")),
            correct_answer="B",
        )
        d = q.to_dict()
        assert d["type"] == "MCQ"
        assert d["options"] == [{"letter": "A", "text": "3"}, {"letter": "B", "text": "4"}]
        assert d["correct_answer"] == "B"
        assert "source" not in d
        assert "html_content" not in d

    def test_from_dict_when_base_class_then_dispatches_on_type(self):
        q = Question.from_dict({
            "type": "SAQ",
            "item_id": "401_a",
            "text": "(a) Explain (2 marks)",
            "sub_questions": [{"part": "(a)", "question": "Explain (2 marks)", "marks": 2}],
            "answer_key": "Because",
            "total_marks": 2,
            "parent_item_id": "401",
        })
        assert isinstance(q, SAQQuestion)
        assert q.sub_questions == (SubQuestion("(a)", "Explain (2 marks)", 2),)
        assert q.parent_item_id == "401"

    def test_from_dict_when_unknown_type_then_raises_error(self):
        with pytest.raises(ValueError, match="Unknown question type"):
            Question.from_dict({"type": "ESSAY", "item_id": "1"})

    def test_from_dict_when_wrong_subclass_then_raises_error(self):
        with pytest.raises(ValueError, match="Cannot load EMQ data"):
            MCQQuestion.from_dict({"type": "EMQ", "item_id": "1"})

    def test_from_dict_when_emq_round_trips_then_equal(self):
        q = EMQQuestion(
            item_id="202",
            title="Question 202",
            text="Rash",
            options_id="10",
            options=(Option("A", "Malaria"),),
            reference_id="10",
            correct_answer="A",
            shared_context="Fever\nA. Malaria",
        )
        assert Question.from_dict(q.to_dict()) == q

    def test_with_html_when_called_then_returns_copy(self):
        q = MCQQuestion(item_id="1", text="Q", options=(Option("A", "x"),), correct_answer="A")
        copy = q.with_html("<p>Q</p>")
        assert copy.html_content == "<p>Q</p>"
        assert q.html_content is None

    def test_init_when_negative_total_marks_then_raises_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            SAQQuestion(item_id="1", total_marks=-2)


class TestQuestionMetadata:
    """Tests for QuestionMetadata helpers."""

    def test_keywords_when_profile_and_statistics_then_flattens(self):
        metadata = QuestionMetadata(
            profile={"specialty": "Cardiology", "status": ""},
            last_use_statistics=UsageStatistics(examination_year="2019", difficulty_level=65.0),
        )
        assert metadata.keywords() == [
            "specialty: Cardiology",
            "examination_year: 2019",
            "difficulty_level: 65.0",
        ]

    def test_with_provenance_when_called_then_sets_parent(self):
        metadata = QuestionMetadata(profile={"specialty": "Surgery"})
        split = metadata.with_provenance("401", sub_question_part="a")
        assert split.parent_item_id == "401"
        assert split.sub_question_part == "a"
        assert split.sub_question_number is None
        assert metadata.parent_item_id is None

    def test_to_dict_when_round_tripped_then_equal(self):
        metadata = QuestionMetadata(
            profile={"specialty": "Cardiology"},
            second_last_use_statistics=UsageStatistics(test_number=3),
            background_info="Seen before",
        )
        assert QuestionMetadata.from_dict(metadata.to_dict()) == metadata

    def test_is_empty_when_no_fields_then_true(self):
        assert UsageStatistics().is_empty
        assert not UsageStatistics(level="MBBS III").is_empty
