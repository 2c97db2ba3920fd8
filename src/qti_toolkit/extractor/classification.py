"""
Module: extractor.classification

Purpose:
    Decide the parse mode of a document and, in mixed mode, the question
    type of each item, using weighted regex pattern tables. This is a
    tolerant best-effort classifier: it never raises and always yields a
    type (MCQ when nothing matches).

Key Functions:
    - detect_parse_mode(): Whole-document mode (MCQ/EMQ/SAQ/MIXED)
    - detect_question_type(): Dominant single type of a document
    - detect_item_type(): Type of one item (mixed mode)
    - score_patterns(): Weighted pattern scoring shared by all three

Dependencies:
    - re (std)
    - core.models: ParseMode, QuestionType
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from qti_toolkit.core.models import ParseMode, QuestionType

from .config import DEFAULT_MIXED_FILENAME_HINTS
from .detection.options import OPTION_BLOCK_PATTERN

logger = logging.getLogger(__name__)

# Pattern tables. Each entry is either a string (weight 1.0, case-insensitive)
# or a dict {"pattern": ..., "weight": ..., "case_sensitive": bool}.

# Document-level indicators, counted per occurrence.
DOCUMENT_INDICATORS: Dict[QuestionType, List] = {
    QuestionType.MCQ: [
        r"\bA type:",
        {"pattern": OPTION_BLOCK_PATTERN.pattern, "weight": 1.0, "case_sensitive": True},
    ],
    QuestionType.EMQ: [
        r"\bR type",
        r"Extended Matching",
        r"Options ID:",
    ],
    QuestionType.SAQ: [
        r"\bSAQ\b|Short Answer",
        {"pattern": r"\(\d+\s+marks?\)", "weight": 1.0},
    ],
}

# Broad single-type counts used when no indicator decides the document.
DOMINANT_TYPE_PATTERNS: Dict[QuestionType, List] = {
    QuestionType.MCQ: [
        {"pattern": r"A type:|A\.|B\.|C\.|D\.", "weight": 1.0, "case_sensitive": True},
    ],
    QuestionType.EMQ: [
        {"pattern": r"R type|Extended Matching|Options ID:|With reference to", "weight": 1.0,
         "case_sensitive": True},
    ],
    QuestionType.SAQ: [
        {"pattern": r"Short Answer|\(a\)|\(b\)|\(c\)|marks?\)", "weight": 1.0, "case_sensitive": True},
    ],
}

# Item-level patterns, each scored once if it matches anywhere in the item.
ITEM_PATTERNS: Dict[QuestionType, List] = {
    QuestionType.MCQ: [
        {"pattern": r"\b[abc] type:", "weight": 3.0},
        {"pattern": r"(?:^|\n)\s*[A-J]\.\s+", "weight": 1.0, "case_sensitive": True},
    ],
    QuestionType.EMQ: [
        {"pattern": r"r type|extended matching", "weight": 3.0},
        {"pattern": r"options? id:", "weight": 2.0},
        {"pattern": r"with reference to|choose.*most appropriate", "weight": 2.0},
        {"pattern": r"Sub-Question\s+\d+:", "weight": 2.0},
    ],
    QuestionType.SAQ: [
        {"pattern": r"short answer|\bsaq\b", "weight": 3.0},
        {"pattern": r"\([a-z]\)", "weight": 0.75, "case_sensitive": True},
        {"pattern": r"\d+\s*marks?", "weight": 0.75},
    ],
}

# Single-type filename hints, checked in this order.
FILENAME_TYPE_HINTS: Tuple[Tuple[str, QuestionType], ...] = (
    ("mcq", QuestionType.MCQ),
    ("emq", QuestionType.EMQ),
    ("saq", QuestionType.SAQ),
)

# Scoring order; a tie between the top scores resolves to MCQ.
_TYPE_ORDER = (QuestionType.MCQ, QuestionType.EMQ, QuestionType.SAQ)


# ─────────────────────────────────────────────────────────────────────────────
# Pattern Scoring
# ─────────────────────────────────────────────────────────────────────────────

def _compile_patterns_with_weights(
    patterns: Dict[QuestionType, Iterable],
) -> Dict[QuestionType, List[Tuple[re.Pattern, float]]]:
    """
    Compile pattern tables into (regex, weight) pairs.

    Args:
        patterns: {type: [pattern spec, ...]} where a spec is a string or a
            dict with "pattern", optional "weight" and "case_sensitive"

    Returns:
        {type: [(compiled, weight), ...]}; invalid regexes are skipped
    """
    compiled: Dict[QuestionType, List[Tuple[re.Pattern, float]]] = {}
    for qtype, pattern_list in patterns.items():
        compiled[qtype] = []
        for p in pattern_list:
            if isinstance(p, dict):
                pat_str = p.get("pattern", "")
                weight = float(p.get("weight", 1.0))
                flags = 0 if p.get("case_sensitive") else re.IGNORECASE
            else:
                pat_str = p
                weight = 1.0
                flags = re.IGNORECASE
            try:
                compiled[qtype].append((re.compile(pat_str, flags), weight))
            except re.error:
                logger.debug(f"Invalid regex pattern: {pat_str}")
                continue
    return compiled


@lru_cache(maxsize=None)
def _compiled(table_name: str) -> Dict[QuestionType, List[Tuple[re.Pattern, float]]]:
    return _compile_patterns_with_weights(_TABLES[table_name])


def score_patterns(
    text: str,
    compiled: Dict[QuestionType, List[Tuple[re.Pattern, float]]],
    *,
    count_occurrences: bool,
) -> Dict[QuestionType, float]:
    """
    Score text against compiled pattern tables.

    Args:
        text: Text to score
        compiled: Output of ``_compile_patterns_with_weights``
        count_occurrences: Weight every occurrence (True) or score each
            pattern at most once (False)

    Returns:
        {type: score} for every type in the table (0.0 when nothing matched)
    """
    scores: Dict[QuestionType, float] = {}
    for qtype, regexes in compiled.items():
        score = 0.0
        for pattern, weight in regexes:
            if count_occurrences:
                score += weight * len(pattern.findall(text))
            elif pattern.search(text):
                score += weight
        scores[qtype] = score
    return scores


def _best_type(scores: Dict[QuestionType, float]) -> QuestionType:
    """Highest score wins; ties and all-zero fall back to MCQ."""
    top = max(scores.get(t, 0.0) for t in _TYPE_ORDER)
    if top <= 0:
        return QuestionType.MCQ
    winners = [t for t in _TYPE_ORDER if scores.get(t, 0.0) == top]
    return winners[0] if len(winners) == 1 else QuestionType.MCQ


def _filename_type_hint(filename: str) -> Optional[QuestionType]:
    lower = filename.lower()
    for hint, qtype in FILENAME_TYPE_HINTS:
        if hint in lower:
            return qtype
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def detect_question_type(text: str, filename: str = "") -> QuestionType:
    """
    Dominant single question type of a document.

    Filename hints ("mcq", "emq", "saq") win; otherwise the type with the
    highest broad indicator count, MCQ on tie or no signal.
    """
    hinted = _filename_type_hint(filename)
    if hinted is not None:
        return hinted
    scores = score_patterns(text, _compiled("dominant"), count_occurrences=True)
    return _best_type(scores)


def detect_parse_mode(
    text: str,
    filename: str = "",
    *,
    mixed_filename_hints: Sequence[str] = DEFAULT_MIXED_FILENAME_HINTS,
) -> ParseMode:
    """
    Classify a normalized document.

    Algorithm:
    1. Filename containing a mixed hint ("mixed", "exam", "paper", "hybrid") → MIXED
    2. Indicators for two or more types → MIXED
    3. Single-type filename hint → that type
    4. Indicators for exactly one type → that type
    5. Otherwise the dominant broad count (MCQ on tie or absence of signal)

    Args:
        text: Normalized document text
        filename: Original filename, may be empty
        mixed_filename_hints: Substrings forcing MIXED

    Returns:
        ParseMode, never AUTO

    Example:
        >>> detect_parse_mode("Item ID: 1 A type: 4 options\\nQ\\nA. x\\nAnswer: A")
        <ParseMode.MCQ: 'MCQ'>
    """
    lower_name = filename.lower()
    if any(hint in lower_name for hint in mixed_filename_hints):
        logger.debug(f"Filename {filename!r} forces MIXED mode")
        return ParseMode.MIXED

    scores = score_patterns(text, _compiled("document"), count_occurrences=True)
    present = [qtype for qtype in _TYPE_ORDER if scores[qtype] > 0]
    logger.debug(
        "Document indicators: " + ", ".join(f"{t}={scores[t]:.1f}" for t in _TYPE_ORDER)
    )

    if len(present) >= 2:
        return ParseMode.MIXED

    hinted = _filename_type_hint(filename)
    if hinted is not None:
        return ParseMode(hinted.value)

    if len(present) == 1:
        return ParseMode(present[0].value)

    return ParseMode(detect_question_type(text, filename).value)


def detect_item_type(item_text: str) -> QuestionType:
    """
    Classify one item in mixed mode.

    Each item pattern contributes its weight once if it matches; explicit
    type markers ("A type:", "R type", "Short Answer") weigh most. Ties
    and no signal default to MCQ.

    Example:
        >>> detect_item_type("Item ID: 7 R type\\nOptions ID: 3\\nA. x")
        <QuestionType.EMQ: 'EMQ'>
    """
    scores = score_patterns(item_text, _compiled("item"), count_occurrences=False)
    return _best_type(scores)


_TABLES = {
    "document": DOCUMENT_INDICATORS,
    "dominant": DOMINANT_TYPE_PATTERNS,
    "item": ITEM_PATTERNS,
}
