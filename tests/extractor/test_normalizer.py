"""
Unit Tests for Text Normalization
"""

from qti_toolkit.extractor.normalizer import clean_text


class TestCleanText:
    """Tests for clean_text()."""

    def test_clean_when_crlf_then_lf(self):
        assert clean_text("a\r\nb\rc") == "a\nb\nc"

    def test_clean_when_many_blank_lines_then_collapsed_to_one(self):
        assert clean_text("a\n\n\n\n\nb") == "a\n\nb"

    def test_clean_when_space_runs_then_single_space(self):
        assert clean_text("A.   Malaria\t\tfever") == "A. Malaria fever"

    def test_clean_when_zero_width_characters_then_removed(self):
        assert clean_text("\ufeffItem\u200b ID: 1") == "Item ID: 1"

    def test_clean_when_lines_padded_then_trimmed(self):
        assert clean_text("  Item ID: 1 A type  \n   A. yes ") == "Item ID: 1 A type\nA. yes"

    def test_clean_when_empty_then_empty(self):
        assert clean_text("") == ""
