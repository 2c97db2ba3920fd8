"""
Module: extractor.structuring.state

Purpose:
    States shared by the per-item line state machines, and the immutable
    accumulator that carries an EMQ option set from the item that defines
    it to the items that refer back to it.

Key Classes:
    - ExtractorState: Line-machine states
    - SharedOptionSet: Fold accumulator for EMQ option carry-over

Key Functions:
    - compose_shared_context(): Topic header + options + instructions → text
    - split_shared_context(): Inverse split used for stimulus rendering

Used By:
    - extractor.structuring.mcq / emq / saq
    - extractor.pipeline (fold)
    - builder.qti.items (stimulus rendering)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from qti_toolkit.core.models import EMQQuestion, Option

from ..detection.options import detect_option, format_options


class ExtractorState(Enum):
    """Position of a line machine within one item."""
    HEADER = "header"
    BODY = "body"
    TOPIC = "topic"
    OPTIONS = "options"
    INSTRUCTIONS = "instructions"
    PARTS = "parts"
    ANSWER = "answer"
    METADATA = "metadata"
    DONE = "done"


@dataclass(frozen=True)
class SharedOptionSet:
    """
    The most recently defined EMQ option set (immutable).

    Threaded through the per-item fold in document order; an item that
    says "With reference to the previous Options ID: <id>" inherits this
    set only when ``options_id`` equals ``<id>``.

    Attributes:
        options_id: Id of the set ("" before any set was seen)
        options: The set's options
        shared_context: Stimulus text built when the set was defined
    """
    options_id: str = ""
    options: tuple[Option, ...] = ()
    shared_context: Optional[str] = None

    def matches(self, reference_id: str) -> bool:
        return bool(reference_id) and reference_id == self.options_id

    def advance(self, question: EMQQuestion) -> "SharedOptionSet":
        """
        Next accumulator after ``question`` was extracted.

        A question with a new options id replaces the set; a question with
        options under the same (or no) id refreshes it; anything else
        leaves the set unchanged.
        """
        if question.options_id and question.options_id != self.options_id:
            return SharedOptionSet(question.options_id, question.options, question.shared_context)
        if question.options:
            return SharedOptionSet(question.options_id, question.options, question.shared_context)
        return self


EMPTY_OPTION_SET = SharedOptionSet()


def compose_shared_context(
    header: str,
    options: Sequence[Option],
    instructions: Iterable[str] = (),
) -> Optional[str]:
    """
    Build stimulus text: header line, "L. text" option lines, blank line,
    instruction prose.

    Returns:
        The text, or None when all three are empty
    """
    lines: list[str] = []
    if header:
        lines.append(header)
    lines.extend(format_options(options))
    instruction_text = " ".join(i for i in instructions if i).strip()
    if instruction_text:
        lines.append("")
        lines.append(instruction_text)
    text = "\n".join(lines).strip()
    return text or None


def split_shared_context(shared_context: Optional[str]) -> tuple[str, list[str]]:
    """
    Split stimulus text into (header, instruction lines).

    The first line is the header unless it is an option line; option lines
    are dropped (stimulus options are rendered from the option list);
    remaining lines are instructions.
    """
    if not shared_context:
        return "", []
    lines = [line.strip() for line in shared_context.split("\n") if line.strip()]
    header = ""
    if lines and detect_option(lines[0], allow_prefix=True) is None:
        header = lines.pop(0)
    instructions = [line for line in lines if detect_option(line, allow_prefix=True) is None]
    return header, instructions
