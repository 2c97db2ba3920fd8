"""
Module: extractor.metadata

Purpose:
    Extract the optional trailing metadata block of an item: the
    ``Profile:`` tag soup, ``Last Use Statistics:`` / ``Second Last Use
    Statistics:`` key-value lines, and ``Background Info:`` prose.

Key Functions:
    - extract_metadata(): Item text → QuestionMetadata or None
    - parse_profile(): "<tag>value<tag2>value2" → {key: value}
    - parse_statistics(): One statistics line → {field: value}

Dependencies:
    - core.models: QuestionMetadata, UsageStatistics

Used By:
    - extractor.structuring.mcq / emq / saq
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Optional

from qti_toolkit.core.models import QuestionMetadata, UsageStatistics

from .detection.headers import is_end_of_item

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "Profile:"
LAST_STATS_PREFIX = "Last Use Statistics:"
SECOND_STATS_PREFIX = "Second Last Use Statistics:"
BACKGROUND_PREFIX = "Background Info:"

_TAG_VALUE = re.compile(r"<([^<>/][^<>]*)>([^<]+)")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_WORD = re.compile(r"[^a-z0-9]+")

# Tags whose key is not their plain snake_case form
PROFILE_KEY_ALIASES: Dict[str, str] = {
    "Originating Dept.": "originating_dept",
    "Level/Program": "level_program",
    "MeSH 1": "mesh1",
    "MeSH 2": "mesh2",
}


def _to_float(value: str) -> Optional[float]:
    try:
        return float(value.rstrip("%,;"))
    except ValueError:
        return None


def _to_int(value: str) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def _to_text(value: str) -> Optional[str]:
    value = value.strip().rstrip(",;")
    return value or None


# label → (field, converter); labels are tried longest first
STATISTICS_FIELDS: Dict[str, tuple[str, Callable[[str], Any]]] = {
    "Examination Year": ("examination_year", _to_text),
    "Difficulty Level": ("difficulty_level", _to_float),
    "Discrimination Index": ("discrimination_index", _to_float),
    "Point Biserial": ("pt_biserial", _to_float),
    "Pt Biserial": ("pt_biserial", _to_float),
    "Pt. Biserial": ("pt_biserial", _to_float),
    "Number in Group": ("number_in_group", _to_int),
    "No. in Group": ("number_in_group", _to_int),
    "Test Number": ("test_number", _to_int),
    "Question Number": ("question_number", _to_int),
    "Institution": ("institution", _to_text),
    "Level": ("level", _to_text),
}

_STATISTICS_PATTERN = re.compile(
    r"(?<![\w.])("
    + "|".join(re.escape(label) for label in sorted(STATISTICS_FIELDS, key=len, reverse=True))
    + r")\s*:\s*(\S+)",
    re.IGNORECASE,
)
_LABEL_LOOKUP = {label.lower(): spec for label, spec in STATISTICS_FIELDS.items()}


def profile_key(tag: str) -> str:
    """
    Normalize a profile tag to a snake_case key.

    Example:
        >>> profile_key("ageGroup"), profile_key("Status"), profile_key("MeSH 1")
        ('age_group', 'status', 'mesh1')
    """
    tag = tag.strip()
    if tag in PROFILE_KEY_ALIASES:
        return PROFILE_KEY_ALIASES[tag]
    key = _CAMEL_BOUNDARY.sub("_", tag).lower()
    return _NON_WORD.sub("_", key).strip("_")


def parse_profile(profile_text: str) -> Dict[str, str]:
    """
    Parse inline profile tags.

    Example:
        >>> parse_profile("<specialty>Cardiology</specialty><taxonomy>Recall")
        {'specialty': 'Cardiology', 'taxonomy': 'Recall'}
    """
    profile: Dict[str, str] = {}
    for match in _TAG_VALUE.finditer(profile_text):
        value = match.group(2).strip()
        if value:
            profile[profile_key(match.group(1))] = value
    return profile


def parse_statistics(line: str) -> Dict[str, Any]:
    """
    Parse "Label: value" pairs from one statistics line.

    Unparseable numeric values are skipped.

    Example:
        >>> parse_statistics("Examination Year: 2019 Difficulty Level: 65 Discrimination Index: 0.31")
        {'examination_year': '2019', 'difficulty_level': 65.0, 'discrimination_index': 0.31}
    """
    stats: Dict[str, Any] = {}
    for match in _STATISTICS_PATTERN.finditer(line):
        field_name, convert = _LABEL_LOOKUP[match.group(1).lower()]
        value = convert(match.group(2))
        if value is not None:
            stats[field_name] = value
    return stats


def extract_metadata(text: str) -> Optional[QuestionMetadata]:
    """
    Extract metadata from one item's text.

    Args:
        text: Full item text (header line included)

    Returns:
        QuestionMetadata, or None when the item has no (non-empty) profile
    """
    profile: Dict[str, str] = {}
    last_stats: Dict[str, Any] = {}
    second_stats: Dict[str, Any] = {}
    background: list[str] = []
    section = ""

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if is_end_of_item(line):
            break
        if line.startswith(PROFILE_PREFIX):
            section = "profile"
            profile.update(parse_profile(line[len(PROFILE_PREFIX):]))
        elif line.startswith(SECOND_STATS_PREFIX):
            section = "second_stats"
            second_stats.update(parse_statistics(line[len(SECOND_STATS_PREFIX):]))
        elif line.startswith(LAST_STATS_PREFIX):
            section = "last_stats"
            last_stats.update(parse_statistics(line[len(LAST_STATS_PREFIX):]))
        elif line.startswith(BACKGROUND_PREFIX):
            section = "background"
            rest = line[len(BACKGROUND_PREFIX):].strip()
            if rest:
                background.append(rest)
        elif section == "profile" and "<" in line:
            profile.update(parse_profile(line))
        elif section == "last_stats":
            last_stats.update(parse_statistics(line))
        elif section == "second_stats":
            second_stats.update(parse_statistics(line))
        elif section == "background":
            background.append(line)

    if not profile:
        return None

    return QuestionMetadata(
        profile=profile,
        last_use_statistics=UsageStatistics(**last_stats) if last_stats else None,
        second_last_use_statistics=UsageStatistics(**second_stats) if second_stats else None,
        background_info=" ".join(background),
    )
