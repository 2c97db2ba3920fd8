"""
Unit Tests for SAQ Extraction

Tests for part splitting, per-part answers and marks.
"""

from qti_toolkit.core.models import SubQuestion
from qti_toolkit.extractor.structuring import extract_saq


class TestExtractSaqParts:
    """Tests for items with (a)/(b) parts."""

    def test_extract_when_two_parts_then_one_record_each(self, saq_text):
        questions = extract_saq(saq_text)

        assert [q.item_id for q in questions] == ["401_a", "401_b"]
        assert [q.title for q in questions] == ["Question 401 (a)", "Question 401 (b)"]
        assert all(q.parent_item_id == "401" for q in questions)

    def test_extract_when_two_parts_then_marks_per_part(self, saq_text):
        first, second = extract_saq(saq_text)

        assert first.total_marks == 2
        assert second.total_marks == 3
        assert first.sub_questions == (
            SubQuestion("(a)", "List two causes of acute pancreatitis. (2 marks)", 2),
        )

    def test_extract_when_two_parts_then_marks_sum_to_item_total(self, saq_text):
        assert sum(q.total_marks for q in extract_saq(saq_text)) == 5

    def test_extract_when_answers_labelled_then_filed_per_part(self, saq_text):
        first, second = extract_saq(saq_text)
        assert first.answer_key == "Gallstones; alcohol"
        assert second.answer_key == "IV fluids and analgesia"

    def test_extract_when_stem_before_parts_then_shared_context(self, saq_text):
        first, second = extract_saq(saq_text)
        assert first.shared_context == "A 54-year-old man presents with severe epigastric pain."
        assert second.shared_context == first.shared_context
        assert first.text == "(a) List two causes of acute pancreatitis. (2 marks)"

    def test_extract_when_part_wraps_then_continuation_joined(self):
        (q,) = extract_saq("Item ID: 4 SAQ\n(a) Describe the\nmechanism (3 marks)\nAnswer: (a) Binding")
        assert q.sub_questions[0].question == "Describe the mechanism (3 marks)"
        assert q.total_marks == 3

    def test_extract_when_answer_continues_then_lines_joined(self):
        (q,) = extract_saq("Item ID: 4 SAQ\n(a) Explain (2 marks)\nAnswer: (a) First point\nSecond point")
        assert q.answer_key == "First point\nSecond point"

    def test_extract_when_answer_unlabelled_then_used_as_fallback(self):
        questions = extract_saq("Item ID: 4 SAQ\n(a) One (1 mark)\n(b) Two (1 mark)\nAnswer: Both are X")
        assert [q.answer_key for q in questions] == ["Both are X", "Both are X"]

    def test_extract_when_answers_interleaved_then_each_part_keeps_own(self):
        questions = extract_saq(
            "Item ID: 5 SAQ\n"
            "(a) Name a cause (2 marks)\n"
            "Answer: Gallstones\n"
            "(b) Name a treatment (3 marks)\n"
            "Answer: Fluids\n"
            "and analgesia"
        )
        assert {q.item_id: q.answer_key for q in questions} == {
            "5_a": "Gallstones",
            "5_b": "Fluids\nand analgesia",
        }

    def test_extract_when_part_appears_after_answer_then_new_part(self):
        questions = extract_saq(
            "Item ID: 4 SAQ\n(a) One (1 mark)\nAnswer: (a) alpha\n(b) Two (2 marks)\nAnswer: (b) beta"
        )
        assert [(q.item_id, q.answer_key, q.total_marks) for q in questions] == [
            ("4_a", "alpha", 1),
            ("4_b", "beta", 2),
        ]

    def test_extract_when_metadata_then_part_provenance(self):
        questions = extract_saq(
            "Item ID: 4 SAQ\n(a) One (1 mark)\nAnswer: (a) x\nProfile: <specialty>Renal</specialty>"
        )
        assert questions[0].metadata.sub_question_part == "a"
        assert questions[0].metadata.parent_item_id == "4"


class TestExtractSaqSingle:
    """Tests for items without parts."""

    def test_extract_when_no_parts_then_single_record(self):
        (q,) = extract_saq("Item ID: 8 SAQ\nDefine shock. (2 marks)\nAnswer: Inadequate perfusion")
        assert q.item_id == "8"
        assert q.parent_item_id is None
        assert q.sub_questions == ()
        assert q.text == "Define shock. (2 marks)"
        assert q.answer_key == "Inadequate perfusion"
        assert q.total_marks == 2

    def test_extract_when_no_parts_and_several_annotations_then_summed(self):
        (q,) = extract_saq("Item ID: 8 SAQ\nDefine shock (2 marks)\nand list causes (3 marks)\nAnswer: x")
        assert q.total_marks == 5

    def test_extract_when_no_marks_then_zero(self):
        (q,) = extract_saq("Item ID: 8 SAQ\nDefine shock.\nAnswer: x")
        assert q.total_marks == 0

    def test_extract_when_no_header_then_empty(self):
        assert extract_saq("(a) orphan part") == []
