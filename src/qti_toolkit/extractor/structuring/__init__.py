"""
Structuring: per-item line state machines that turn one item's text into
typed question records.
"""

from .emq import extract_emq, extract_emq_sub_questions
from .mcq import extract_mcq
from .saq import extract_saq
from .state import (
    EMPTY_OPTION_SET,
    ExtractorState,
    SharedOptionSet,
    compose_shared_context,
    split_shared_context,
)

__all__ = [
    "extract_mcq",
    "extract_emq",
    "extract_emq_sub_questions",
    "extract_saq",
    "ExtractorState",
    "SharedOptionSet",
    "EMPTY_OPTION_SET",
    "compose_shared_context",
    "split_shared_context",
]
