"""
Module: common.timing

Purpose:
    Timing instrumentation for the parse and package pipelines.

Key Classes:
    - TimingLog: Collects document-level and item-level phase durations

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - common.file_locking: merged saves

Used By:
    - extractor.pipeline
    - builder.controller
    - cli (--timings)
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Timing metrics for one conversion.

    Attributes:
        document_timings: phase_name -> duration_seconds
        item_timings: item_id -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog()
        >>> log.log_document("segment", 0.002)
        >>> log.log_item("24761", "extract", 0.0004)
        >>> print(log.summary())
    """
    document_timings: Dict[str, float] = field(default_factory=dict)
    item_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def log_document(self, phase: str, duration: float) -> None:
        """Log a document-level timing metric."""
        self.document_timings[phase] = duration

    def log_item(self, item_id: str, phase: str, duration: float) -> None:
        """Log an item-level timing metric."""
        self.item_timings.setdefault(item_id, {})[phase] = duration

    @property
    def total(self) -> float:
        return sum(self.document_timings.values())

    def get_phase_averages(self) -> Dict[str, float]:
        """Average time per item phase."""
        totals: Dict[str, float] = {}
        counts: Dict[str, int] = {}
        for phases in self.item_timings.values():
            for phase, duration in phases.items():
                totals[phase] = totals.get(phase, 0.0) + duration
                counts[phase] = counts.get(phase, 0) + 1
        return {phase: totals[phase] / counts[phase] for phase in totals}

    def get_slowest_items(self, n: int = 3) -> List[tuple]:
        """The N slowest items as (item_id, total_seconds)."""
        results = [(item_id, sum(p.values())) for item_id, p in self.item_timings.items()]
        results.sort(key=lambda x: x[1], reverse=True)
        return results[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Conversion Timing Summary ==="]

        if self.document_timings:
            lines.append("Document-level:")
            for phase, duration in self.document_timings.items():
                lines.append(f"  {phase:25s} {duration:.4f}s")

        averages = self.get_phase_averages()
        if averages:
            lines.append("")
            lines.append("Item-level averages:")
            for phase, avg in sorted(averages.items(), key=lambda x: -x[1]):
                lines.append(f"  {phase:25s} {avg:.5f}s")

        slowest = self.get_slowest_items(3)
        if slowest:
            lines.append("")
            lines.append("Slowest items:")
            for item_id, total in slowest:
                lines.append(f"  {item_id}: {total:.5f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "document_timings": self.document_timings,
            "item_timings": self.item_timings,
            "phase_averages": self.get_phase_averages(),
        }

    def save(self, path: Path, merge: bool = True, label: str = "") -> None:
        """
        Save timing data to JSON file.

        With ``merge=True`` the run is appended to the ``runs`` list of an
        existing report under a file lock; otherwise the file is replaced.

        Args:
            path: Path to JSON file.
            merge: Append to existing report instead of overwriting.
            label: Run label stored with the entry (e.g. input filename).
        """
        entry = self.to_dict()
        if label:
            entry["label"] = label

        if not merge:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"runs": [entry]}, f, indent=2)
            logger.debug(f"Saved timing data to {path}")
            return

        from .file_locking import locked_read_modify_write_json

        def append_run(existing: Dict[str, Any]) -> Dict[str, Any]:
            existing.setdefault("runs", []).append(entry)
            return existing

        locked_read_modify_write_json(path, append_run, default=lambda: {"runs": []})
        logger.debug(f"Merged timing data to {path}")


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    item_id: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        item_id: If provided, records as item-level metric;
                 otherwise records as document-level metric

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "segment"):
        ...     items = split_items(text)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if item_id:
            log.log_item(item_id, phase, elapsed)
        else:
            log.log_document(phase, elapsed)
