"""
Module: extractor.diagnostics

Captures item-level issues during extraction (dropped headers, failed
extractors, dangling option references, rejected questions) and
generates diagnostic reports for analysis.

Structure:
- Each issue names the item and carries a short excerpt of its source text
- Report groups issues by type and serializes to JSON
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

EXCERPT_LIMIT = 500

UNPARSEABLE_HEADER = "unparseable_header"
EXTRACTION_FAILED = "extraction_failed"
ORPHAN_REFERENCE = "orphan_reference"
INVALID_QUESTION = "invalid_question"


@dataclass
class ParseIssue:
    """
    A single extraction issue with diagnostic context.

    Fields:
    - item_id: Item the issue belongs to ("" when no id could be read)
    - excerpt: Start of the offending item's text
    - rule: Failed validation rule (invalid_question only)
    """
    issue_type: str
    item_id: str
    message: str
    excerpt: str = ""
    rule: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "issue_type": self.issue_type,
            "item_id": self.item_id,
            "message": self.message,
        }
        if self.excerpt:
            d["excerpt"] = self.excerpt[:EXCERPT_LIMIT]
        if self.rule:
            d["rule"] = self.rule
        return d


def _excerpt(text: str) -> str:
    return text.strip()[:EXCERPT_LIMIT]


class DiagnosticsCollector:
    """
    Thread-safe collector for extraction issues.

    One collector may be shared by several documents; ``source`` names the
    document an issue came from.
    """

    def __init__(self):
        self._issues: List[ParseIssue] = []
        self._sources: List[str] = []
        self._lock = threading.Lock()

    def _add(self, issue: ParseIssue, source: str = "") -> None:
        with self._lock:
            self._issues.append(issue)
            if source and source not in self._sources:
                self._sources.append(source)

    def add_unparseable_header(self, item_text: str, source: str = "") -> None:
        """Record an item block whose first line is not a valid header."""
        first_line = item_text.strip().split("\n", 1)[0]
        self._add(
            ParseIssue(
                issue_type=UNPARSEABLE_HEADER,
                item_id="",
                message=f"Item header not recognised: {first_line[:80]!r}",
                excerpt=_excerpt(item_text),
            ),
            source,
        )

    def add_extraction_failed(
        self,
        item_id: str,
        error: Exception,
        item_text: str = "",
        source: str = "",
    ) -> None:
        """Record an extractor that raised on one item."""
        self._add(
            ParseIssue(
                issue_type=EXTRACTION_FAILED,
                item_id=item_id,
                message=f"Item {item_id or '?'}: {type(error).__name__}: {error}",
                excerpt=_excerpt(item_text),
            ),
            source,
        )

    def add_orphan_reference(
        self,
        item_id: str,
        reference_id: str,
        last_options_id: str,
        source: str = "",
    ) -> None:
        """Record an EMQ that refers to an option set other than the last one defined."""
        self._add(
            ParseIssue(
                issue_type=ORPHAN_REFERENCE,
                item_id=item_id,
                message=(
                    f"Item {item_id}: references Options ID {reference_id or '(none)'}, "
                    f"last defined set is {last_options_id or '(none)'}"
                ),
            ),
            source,
        )

    def add_invalid_question(
        self,
        item_id: str,
        rule: str,
        message: str,
        source: str = "",
    ) -> None:
        """Record a question rejected by validation."""
        self._add(
            ParseIssue(
                issue_type=INVALID_QUESTION,
                item_id=item_id,
                message=f"Item {item_id or '?'} INVALID: {message}",
                rule=rule,
            ),
            source,
        )

    def generate_report(self) -> "ParseDiagnosticsReport":
        with self._lock:
            return ParseDiagnosticsReport.from_issues(list(self._issues), list(self._sources))

    @property
    def issues(self) -> List[ParseIssue]:
        with self._lock:
            return list(self._issues)

    @property
    def issue_count(self) -> int:
        with self._lock:
            return len(self._issues)


@dataclass
class ParseDiagnosticsReport:
    """Complete diagnostics report."""
    generated_at: str
    sources: List[str]
    total_issues: int
    summary_by_type: Dict[str, int]
    issues: List[ParseIssue]

    @classmethod
    def from_issues(
        cls,
        issues: List[ParseIssue],
        sources: Optional[List[str]] = None,
    ) -> "ParseDiagnosticsReport":
        summary_by_type: Dict[str, int] = {}
        for issue in issues:
            summary_by_type[issue.issue_type] = summary_by_type.get(issue.issue_type, 0) + 1

        return cls(
            generated_at=datetime.now(timezone.utc).isoformat(),
            sources=list(sources or []),
            total_issues=len(issues),
            summary_by_type=summary_by_type,
            issues=issues,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "sources": self.sources,
            "total_issues": self.total_issues,
            "summary_by_type": self.summary_by_type,
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Parse diagnostics saved: {path}")
