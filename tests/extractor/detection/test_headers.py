"""
Unit Tests for Header Detection

Tests for item headers, answer lines, Options ID lines and
back-references.
"""

import pytest

from qti_toolkit.extractor.detection.headers import (
    ItemHeader,
    answer_content,
    detect_item_header,
    detect_reference,
    find_item_id,
    is_end_of_item,
    is_metadata_marker,
    item_lines,
    options_id_of,
)


class TestDetectItemHeader:
    """Tests for detect_item_header()."""

    def test_detect_when_mcq_header_then_returns_id_and_label(self):
        header = detect_item_header("Item ID: 24761 A type: 5 options")
        assert header == ItemHeader(item_id="24761", type_label="A type: 5 options")

    def test_detect_when_no_space_after_colon_then_matches(self):
        header = detect_item_header("Item ID:7 R type")
        assert header.item_id == "7"
        assert header.type_label == "R type"

    def test_detect_when_non_numeric_id_then_none(self):
        assert detect_item_header("Item ID: abc A type") is None

    def test_detect_when_no_type_label_then_none(self):
        assert detect_item_header("Item ID: 12") is None


class TestLinePrefixes:
    """Tests for Answer:/Options ID:/metadata prefixes."""

    def test_answer_content_when_answer_line_then_returns_trimmed(self):
        assert answer_content("Answer:  B ") == "B"

    def test_answer_content_when_other_line_then_none(self):
        assert answer_content("The Answer: B") is None

    def test_options_id_of_when_options_line_then_returns_id(self):
        assert options_id_of("Options ID: 10") == "10"
        assert options_id_of("Option ID: 10") is None

    def test_is_metadata_marker_when_profile_then_true(self):
        assert is_metadata_marker("Profile: <specialty>x</specialty>")
        assert is_metadata_marker("Second Last Use Statistics: Level: 3")
        assert not is_metadata_marker("Answer: A")

    def test_is_end_of_item_when_marker_then_true(self):
        assert is_end_of_item("End-of-Item")

    def test_find_item_id_when_present_then_returns_digits(self):
        assert find_item_id("Item ID: 55 SAQ") == "55"
        assert find_item_id("no anchor") is None


class TestDetectReference:
    """Tests for detect_reference()."""

    @pytest.mark.parametrize("line,expected", [
        ("With reference to the previous Options ID: 10", "10"),
        ("With reference to the previous Options ID:12 above", "12"),
        ("With reference to the previous Options", ""),
        ("Options ID: 10", None),
    ])
    def test_detect_reference_when_line_given_then_returns_id(self, line, expected):
        assert detect_reference(line) == expected


class TestItemLines:
    """Tests for item_lines()."""

    def test_item_lines_when_blank_lines_then_dropped_and_trimmed(self):
        assert item_lines("Item ID: 1 A type\n\n  Q  \n") == ["Item ID: 1 A type", "Q"]
