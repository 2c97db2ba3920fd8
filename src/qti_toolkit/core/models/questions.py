"""
Module: questions

Purpose:
    Provides the typed question records - the main data structure passed
    between extractor and builder. One abstract ``Question`` base with
    three variants (MCQ, EMQ, SAQ), each immutable and serializable.

Key Classes:
    - QuestionType: Variant tag (MCQ/EMQ/SAQ)
    - ParseMode: Classification outcome incl. MIXED and the "auto" selector
    - Option: One lettered answer option
    - SubQuestion: One SAQ part with its marks
    - Question, MCQQuestion, EMQQuestion, SAQQuestion

Key Functions:
    - Question.to_dict() / Question.from_dict(): Serialization (dispatches on type)
    - Question.with_html(): Copy with an HTML rendering attached

Dependencies:
    - dataclasses (std)
    - .metadata.QuestionMetadata

Used By:
    - extractor.structuring (creates records)
    - extractor.validation
    - builder.qti.items (consumes records)
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Type

from .metadata import QuestionMetadata


class QuestionType(str, Enum):
    """Question variant."""
    MCQ = "MCQ"
    EMQ = "EMQ"
    SAQ = "SAQ"

    def __str__(self) -> str:
        return self.value


class ParseMode(str, Enum):
    """
    Parse mode selected for a whole document.

    ``AUTO`` is only valid as a caller hint; classification always
    resolves it to one of the other four.
    """
    MCQ = "MCQ"
    EMQ = "EMQ"
    SAQ = "SAQ"
    MIXED = "MIXED"
    AUTO = "auto"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | ParseMode | None") -> "ParseMode":
        """
        Resolve a user supplied selector (case-insensitive).

        Raises:
            ValueError: If the selector is unknown
        """
        if value is None or value == "":
            return cls.AUTO
        if isinstance(value, ParseMode):
            return value
        normalized = value.strip()
        if normalized.lower() == "auto":
            return cls.AUTO
        try:
            return cls(normalized.upper())
        except ValueError:
            raise ValueError(
                f"Unknown question type {value!r} (expected MCQ, EMQ, SAQ, MIXED or auto)"
            ) from None

    @property
    def question_type(self) -> Optional[QuestionType]:
        """Single question type for single-type modes, else None."""
        if self in (ParseMode.MIXED, ParseMode.AUTO):
            return None
        return QuestionType(self.value)


@dataclass(frozen=True, slots=True)
class Option:
    """
    One lettered answer option.

    Attributes:
        letter: Single uppercase letter, e.g. "A"
        text: Option text
    """
    letter: str
    text: str

    def __post_init__(self) -> None:
        if len(self.letter) != 1 or not self.letter.isalpha() or not self.letter.isupper():
            raise ValueError(f"Option letter must be a single uppercase letter: {self.letter!r}")

    def to_dict(self) -> Dict[str, str]:
        return {"letter": self.letter, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Option":
        return cls(letter=data["letter"], text=data.get("text", ""))


@dataclass(frozen=True, slots=True)
class SubQuestion:
    """
    One SAQ part.

    Attributes:
        part: Display label including parentheses, e.g. "(a)"
        question: Part text (may still carry its "(n marks)" annotation)
        marks: Sum of the part's mark annotations
    """
    part: str
    question: str
    marks: int = 0

    def __post_init__(self) -> None:
        if self.marks < 0:
            raise ValueError(f"Marks cannot be negative: {self.marks}")

    @property
    def letter(self) -> str:
        """Bare part letter, e.g. "a" for "(a)"."""
        return self.part.strip("()")

    def to_dict(self) -> Dict[str, Any]:
        return {"part": self.part, "question": self.question, "marks": self.marks}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubQuestion":
        return cls(part=data["part"], question=data.get("question", ""), marks=int(data.get("marks", 0)))


# ─────────────────────────────────────────────────────────────────────────────
# Question Records
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, kw_only=True)
class Question:
    """
    Base question record (immutable).

    Attributes:
        item_id: Source item id, or "<parentId>_<suffix>" for split records
        title: Display title, e.g. "Question 101"
        text: Question stem (may be empty for referencing EMQ items)
        type_label: Type hint from the item header, e.g. "A type: 5 options"
        html_content: Optional richer rendering (tables)
        metadata: Optional profile/statistics metadata
    """
    type: ClassVar[QuestionType]

    item_id: str
    title: str = ""
    text: str = ""
    type_label: str = ""
    html_content: Optional[str] = None
    metadata: Optional[QuestionMetadata] = None

    def with_html(self, html_content: Optional[str]) -> "Question":
        """Copy with ``html_content`` replaced."""
        return replace(self, html_content=html_content)

    def _base_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.type.value,
            "item_id": self.item_id,
            "title": self.title,
            "text": self.text,
        }
        if self.type_label:
            d["type_label"] = self.type_label
        if self.html_content is not None:
            d["html_content"] = self.html_content
        if self.metadata is not None:
            d["metadata"] = self.metadata.to_dict()
        return d

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary (JSON-safe)."""
        return self._base_dict()

    @staticmethod
    def _base_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
        metadata = data.get("metadata")
        return {
            "item_id": str(data["item_id"]),
            "title": data.get("title", ""),
            "text": data.get("text", ""),
            "type_label": data.get("type_label", ""),
            "html_content": data.get("html_content"),
            "metadata": QuestionMetadata.from_dict(metadata) if metadata else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        """
        Deserialize from dictionary, dispatching on ``data["type"]``.

        Raises:
            ValueError: If the type tag is missing or unknown
        """
        try:
            qtype = QuestionType(data.get("type", ""))
        except ValueError:
            raise ValueError(f"Unknown question type: {data.get('type')!r}") from None
        target = _QUESTION_CLASSES[qtype]
        if cls is not Question and cls is not target:
            raise ValueError(f"Cannot load {qtype} data as {cls.__name__}")
        return target._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Question":
        raise NotImplementedError


@dataclass(frozen=True, kw_only=True)
class MCQQuestion(Question):
    """
    Multiple-choice question.

    Attributes:
        options: Options in encounter order
        correct_answer: Correct option letter (not checked against options)
        source: Text of the ``Source:`` line, if present

    Example:
        >>> q = MCQQuestion(item_id="1", text="What is 2+2?",
        ...                 options=(Option("A", "3"), Option("B", "4")),
        ...                 correct_answer="B")
        >>> q.option_letters
        ('A', 'B')
    """
    type: ClassVar[QuestionType] = QuestionType.MCQ

    options: tuple[Option, ...] = ()
    correct_answer: str = ""
    source: Optional[str] = None

    @property
    def option_letters(self) -> tuple[str, ...]:
        return tuple(o.letter for o in self.options)

    def to_dict(self) -> Dict[str, Any]:
        d = self._base_dict()
        d["options"] = [o.to_dict() for o in self.options]
        d["correct_answer"] = self.correct_answer
        if self.source is not None:
            d["source"] = self.source
        return d

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "MCQQuestion":
        return cls(
            **cls._base_kwargs(data),
            options=tuple(Option.from_dict(o) for o in data.get("options", [])),
            correct_answer=data.get("correct_answer", ""),
            source=data.get("source"),
        )


@dataclass(frozen=True, kw_only=True)
class EMQQuestion(Question):
    """
    Extended-matching question.

    Attributes:
        options_id: Shared option set id ("" when none)
        options: Option set (inherited when the item references a prior set)
        reference_id: Option set id this item refers back to ("" when none)
        correct_answer: Correct option letter
        shared_context: Stimulus text (header + options + instructions)
        parent_item_id: Source item id when split into sub-questions
    """
    type: ClassVar[QuestionType] = QuestionType.EMQ

    options_id: str = ""
    options: tuple[Option, ...] = ()
    reference_id: str = ""
    correct_answer: str = ""
    shared_context: Optional[str] = None
    parent_item_id: Optional[str] = None

    @property
    def option_letters(self) -> tuple[str, ...]:
        return tuple(o.letter for o in self.options)

    def to_dict(self) -> Dict[str, Any]:
        d = self._base_dict()
        d["options_id"] = self.options_id
        d["options"] = [o.to_dict() for o in self.options]
        d["reference_id"] = self.reference_id
        d["correct_answer"] = self.correct_answer
        if self.shared_context is not None:
            d["shared_context"] = self.shared_context
        if self.parent_item_id is not None:
            d["parent_item_id"] = self.parent_item_id
        return d

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "EMQQuestion":
        return cls(
            **cls._base_kwargs(data),
            options_id=str(data.get("options_id", "")),
            options=tuple(Option.from_dict(o) for o in data.get("options", [])),
            reference_id=str(data.get("reference_id", "")),
            correct_answer=data.get("correct_answer", ""),
            shared_context=data.get("shared_context"),
            parent_item_id=data.get("parent_item_id"),
        )


@dataclass(frozen=True, kw_only=True)
class SAQQuestion(Question):
    """
    Short-answer question.

    Split records carry exactly one sub-question; an item without parts
    carries none and sums every annotation into ``total_marks``.

    Attributes:
        sub_questions: Parts in encounter order
        answer_key: Model answer text
        total_marks: Marks available for this record
        shared_context: Stem shared by all parts of the source item
        parent_item_id: Source item id when split into parts
    """
    type: ClassVar[QuestionType] = QuestionType.SAQ

    sub_questions: tuple[SubQuestion, ...] = ()
    answer_key: str = ""
    total_marks: int = 0
    shared_context: Optional[str] = None
    parent_item_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.total_marks < 0:
            raise ValueError(f"total_marks cannot be negative: {self.total_marks}")

    def to_dict(self) -> Dict[str, Any]:
        d = self._base_dict()
        d["sub_questions"] = [s.to_dict() for s in self.sub_questions]
        d["answer_key"] = self.answer_key
        d["total_marks"] = self.total_marks
        if self.shared_context is not None:
            d["shared_context"] = self.shared_context
        if self.parent_item_id is not None:
            d["parent_item_id"] = self.parent_item_id
        return d

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "SAQQuestion":
        return cls(
            **cls._base_kwargs(data),
            sub_questions=tuple(SubQuestion.from_dict(s) for s in data.get("sub_questions", [])),
            answer_key=data.get("answer_key", ""),
            total_marks=int(data.get("total_marks", 0)),
            shared_context=data.get("shared_context"),
            parent_item_id=data.get("parent_item_id"),
        )


_QUESTION_CLASSES: Dict[QuestionType, Type[Question]] = {
    QuestionType.MCQ: MCQQuestion,
    QuestionType.EMQ: EMQQuestion,
    QuestionType.SAQ: SAQQuestion,
}
