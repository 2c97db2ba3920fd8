"""
Unit Tests for Parse Diagnostics

Tests for DiagnosticsCollector and ParseDiagnosticsReport.
"""

import json
import threading
from pathlib import Path

from qti_toolkit.extractor.diagnostics import (
    EXCERPT_LIMIT,
    EXTRACTION_FAILED,
    ORPHAN_REFERENCE,
    UNPARSEABLE_HEADER,
    DiagnosticsCollector,
    ParseDiagnosticsReport,
    ParseIssue,
)


class TestDiagnosticsCollector:
    """Tests for issue recording."""

    def test_add_unparseable_header_when_called_then_quotes_first_line(self):
        collector = DiagnosticsCollector()
        collector.add_unparseable_header("Item ID: abc A type\nWhat?", "paper.txt")

        (issue,) = collector.issues
        assert issue.issue_type == UNPARSEABLE_HEADER
        assert issue.item_id == ""
        assert "'Item ID: abc A type'" in issue.message
        assert issue.excerpt.startswith("Item ID: abc")

    def test_add_extraction_failed_when_called_then_names_exception(self):
        collector = DiagnosticsCollector()
        collector.add_extraction_failed("7", ValueError("bad letter"), "Item ID: 7 R type")
        assert collector.issues[0].message == "Item 7: ValueError: bad letter"
        assert collector.issues[0].issue_type == EXTRACTION_FAILED

    def test_add_orphan_reference_when_no_previous_set_then_says_none(self):
        collector = DiagnosticsCollector()
        collector.add_orphan_reference("202", "10", "")
        assert collector.issues[0].issue_type == ORPHAN_REFERENCE
        assert "last defined set is (none)" in collector.issues[0].message

    def test_sources_when_same_source_twice_then_listed_once(self):
        collector = DiagnosticsCollector()
        collector.add_orphan_reference("1", "2", "3", "a.txt")
        collector.add_orphan_reference("4", "5", "6", "a.txt")
        collector.add_orphan_reference("7", "8", "9", "b.txt")
        assert collector.generate_report().sources == ["a.txt", "b.txt"]

    def test_add_when_called_from_threads_then_all_recorded(self):
        collector = DiagnosticsCollector()

        def record(n: int) -> None:
            for i in range(50):
                collector.add_orphan_reference(f"{n}_{i}", "1", "2")

        threads = [threading.Thread(target=record, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert collector.issue_count == 200


class TestParseDiagnosticsReport:
    """Tests for report generation and persistence."""

    def test_from_issues_when_called_then_summarizes_by_type(self):
        issues = [
            ParseIssue(ORPHAN_REFERENCE, "1", "m"),
            ParseIssue(ORPHAN_REFERENCE, "2", "m"),
            ParseIssue(EXTRACTION_FAILED, "3", "m"),
        ]
        report = ParseDiagnosticsReport.from_issues(issues)
        assert report.total_issues == 3
        assert report.summary_by_type == {ORPHAN_REFERENCE: 2, EXTRACTION_FAILED: 1}

    def test_to_dict_when_long_excerpt_then_truncated(self):
        issue = ParseIssue(UNPARSEABLE_HEADER, "", "m", excerpt="x" * (EXCERPT_LIMIT + 100))
        assert len(issue.to_dict()["excerpt"]) == EXCERPT_LIMIT
        assert "rule" not in issue.to_dict()

    def test_save_when_called_then_writes_json(self, tmp_path: Path):
        collector = DiagnosticsCollector()
        collector.add_invalid_question("5", "options_required", "MCQ question 5: no options")
        path = tmp_path / "reports" / "diagnostics.json"

        collector.generate_report().save(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["total_issues"] == 1
        assert data["issues"][0]["rule"] == "options_required"
        assert "generated_at" in data
