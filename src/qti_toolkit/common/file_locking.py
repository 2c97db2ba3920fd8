"""
Module: common.file_locking

Purpose:
    Cross-platform locked read-modify-write of JSON report files, so that
    several conversions running side by side (e.g. a shell loop of
    ``qti-toolkit build`` calls) can append to the same timing report.

Key Functions:
    - locked_read_modify_write_json: Read-modify-write JSON with an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - common.timing: TimingLog.save(merge=True)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict

import portalocker

logger = logging.getLogger(__name__)


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply modifier, write back - all with exclusive lock.

    Args:
        path: Path to JSON file (created from ``default`` if missing).
        modifier: Function that takes existing data, returns modified data.
        default: Factory for default data if file doesn't exist or is empty.

    Returns:
        The modified data that was written.

    Example:
        >>> def add_run(existing):
        ...     existing.setdefault("runs", []).append({"items": 4})
        ...     return existing
        >>> locked_read_modify_write_json(report_path, add_run)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    if not path.exists():
        path.write_text(json.dumps(default(), indent=2), encoding="utf-8")

    with open(path, "r+", encoding="utf-8") as f:
        portalocker.lock(f, portalocker.LOCK_EX)
        try:
            f.seek(0)
            content = f.read()
            existing = json.loads(content) if content.strip() else default()

            modified = modifier(existing)

            f.seek(0)
            f.truncate()
            json.dump(modified, f, indent=2, ensure_ascii=False)
        finally:
            portalocker.unlock(f)

    logger.debug(f"Updated {path.name} under lock")
    return modified
