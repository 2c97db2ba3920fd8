"""
Line-level detection helpers for exam item text.

Each module recognises one family of anchors and returns small frozen
records; the structuring state machines combine them.
"""

from .headers import ItemHeader, detect_item_header, find_item_id
from .marks import MarkAnnotation, find_mark_annotations, strip_marks, sum_marks
from .options import count_option_blocks, detect_option
from .parts import PartLabel, SubQuestionMarker, detect_part, detect_sub_question

__all__ = [
    "ItemHeader",
    "MarkAnnotation",
    "PartLabel",
    "SubQuestionMarker",
    "count_option_blocks",
    "detect_item_header",
    "detect_option",
    "detect_part",
    "detect_sub_question",
    "find_item_id",
    "find_mark_annotations",
    "strip_marks",
    "sum_marks",
]
