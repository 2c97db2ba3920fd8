"""
Unit Tests for Timing Utilities

Tests for TimingLog, timed_phase and the locked JSON report writer.
"""

import json
from pathlib import Path

from qti_toolkit.common.file_locking import locked_read_modify_write_json
from qti_toolkit.common.timing import TimingLog, timed_phase


class TestTimingLog:
    """Tests for TimingLog aggregation."""

    def test_total_when_document_phases_logged_then_sums(self):
        log = TimingLog()
        log.log_document("normalize", 0.5)
        log.log_document("segment", 0.25)
        assert log.total == 0.75

    def test_get_phase_averages_when_items_logged_then_averages(self):
        log = TimingLog()
        log.log_item("1", "extract", 0.2)
        log.log_item("2", "extract", 0.4)
        assert abs(log.get_phase_averages()["extract"] - 0.3) < 1e-9

    def test_get_slowest_items_when_called_then_sorted_descending(self):
        log = TimingLog()
        log.log_item("1", "extract", 0.1)
        log.log_item("2", "extract", 0.3)
        log.log_item("3", "extract", 0.2)
        assert [item_id for item_id, _ in log.get_slowest_items(2)] == ["2", "3"]

    def test_summary_when_called_then_has_heading(self):
        log = TimingLog()
        log.log_document("segment", 0.01)
        log.log_item("1", "extract", 0.001)
        summary = log.summary()
        assert "=== Conversion Timing Summary ===" in summary
        assert "Slowest items:" in summary

    def test_to_dict_when_called_then_includes_averages(self):
        log = TimingLog()
        log.log_item("1", "extract", 0.5)
        d = log.to_dict()
        assert d["item_timings"] == {"1": {"extract": 0.5}}
        assert d["phase_averages"] == {"extract": 0.5}


class TestTimedPhase:
    """Tests for the timed_phase context manager."""

    def test_timed_phase_when_no_item_id_then_logs_document_phase(self):
        log = TimingLog()
        with timed_phase(log, "segment"):
            pass
        assert "segment" in log.document_timings
        assert log.item_timings == {}

    def test_timed_phase_when_item_id_then_logs_item_phase(self):
        log = TimingLog()
        with timed_phase(log, "extract", "24761"):
            pass
        assert "extract" in log.item_timings["24761"]

    def test_timed_phase_when_body_raises_then_still_logs(self):
        log = TimingLog()
        try:
            with timed_phase(log, "extract", "7"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert "7" in log.item_timings


class TestTimingPersistence:
    """Tests for TimingLog.save() and the locked writer."""

    def test_save_when_merge_then_appends_runs(self, tmp_path: Path):
        path = tmp_path / "timings.json"
        log = TimingLog()
        log.log_document("segment", 0.1)

        log.save(path, label="first.txt")
        log.save(path, label="second.txt")

        runs = json.loads(path.read_text(encoding="utf-8"))["runs"]
        assert [run["label"] for run in runs] == ["first.txt", "second.txt"]

    def test_save_when_not_merge_then_replaces_file(self, tmp_path: Path):
        path = tmp_path / "timings.json"
        TimingLog().save(path, label="old")
        TimingLog().save(path, merge=False)
        runs = json.loads(path.read_text(encoding="utf-8"))["runs"]
        assert len(runs) == 1
        assert "label" not in runs[0]

    def test_locked_write_when_file_empty_then_uses_default(self, tmp_path: Path):
        path = tmp_path / "report.json"
        path.write_text("", encoding="utf-8")

        result = locked_read_modify_write_json(
            path, lambda data: {**data, "count": data["count"] + 1}, default=lambda: {"count": 0}
        )

        assert result == {"count": 1}
        assert json.loads(path.read_text(encoding="utf-8")) == {"count": 1}
