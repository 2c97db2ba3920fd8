"""
Unit Tests for Option Detection

Tests for lettered option lines in their MCQ, prefixed and wide forms.
"""

from qti_toolkit.core.models import Option
from qti_toolkit.extractor.detection.options import (
    count_option_blocks,
    detect_option,
    format_options,
    looks_like_option,
)


class TestDetectOption:
    """Tests for detect_option()."""

    def test_detect_when_plain_option_then_returns_option(self):
        assert detect_option("B. Dengue") == Option("B", "Dengue")

    def test_detect_when_letter_beyond_j_then_none(self):
        assert detect_option("K. Other") is None

    def test_detect_when_no_space_after_dot_then_none(self):
        assert detect_option("A.Malaria") is None

    def test_detect_when_prefixed_and_allowed_then_strips_prefix(self):
        assert detect_option("24762. B. Malaria", allow_prefix=True) == Option("B", "Malaria")

    def test_detect_when_prefixed_and_not_allowed_then_none(self):
        assert detect_option("24762. B. Malaria") is None

    def test_detect_when_wide_then_accepts_late_letters(self):
        assert detect_option("M.Measles", wide=True) == Option("M", "Measles")

    def test_detect_when_sentence_starts_with_letter_then_none(self):
        assert detect_option("A 24-year-old man") is None


class TestOptionHelpers:
    """Tests for option block and formatting helpers."""

    def test_looks_like_option_when_letter_dot_then_true(self):
        assert looks_like_option("C.")
        assert not looks_like_option("Chest pain")

    def test_count_option_blocks_when_four_consecutive_options_then_one(self):
        text = "Q\nA. one\nB. two\nC. three\nD. four\nE. five"
        assert count_option_blocks(text) == 1

    def test_count_option_blocks_when_three_options_then_zero(self):
        assert count_option_blocks("Q\nA. one\nB. two\nC. three") == 0

    def test_format_options_when_called_then_renders_lines(self):
        assert format_options((Option("A", "x"), Option("B", "y"))) == ["A. x", "B. y"]
