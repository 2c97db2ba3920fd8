"""
Module: metadata

Purpose:
    Provides the optional per-item metadata attached to questions: the
    free-form profile tag map, usage statistics blocks and background
    information, plus provenance fields for questions split out of a
    single source item.

Key Classes:
    - UsageStatistics: One "Last Use Statistics" block
    - QuestionMetadata: Profile + statistics + background info

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.questions
    - extractor.metadata
    - builder.qti.manifest (LOM keywords)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UsageStatistics:
    """
    Usage statistics for one examination sitting.

    All fields are optional; a block may only report a subset.

    Attributes:
        examination_year: Year label as written, e.g. "2019" or "2019/20"
        level: Programme level, e.g. "MBBS III"
        institution: Institution the sitting belongs to
        difficulty_level: Difficulty score (percent correct)
        discrimination_index: Discrimination score
        pt_biserial: Point-biserial correlation
        number_in_group: Candidates in the reference group
        test_number: Paper number within the sitting
        question_number: Position of the item in that paper
    """
    examination_year: Optional[str] = None
    level: Optional[str] = None
    institution: Optional[str] = None
    difficulty_level: Optional[float] = None
    discrimination_index: Optional[float] = None
    pt_biserial: Optional[float] = None
    number_in_group: Optional[int] = None
    test_number: Optional[int] = None
    question_number: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        """True when no field was reported."""
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary, omitting unreported fields."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsageStatistics":
        """Deserialize from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class QuestionMetadata:
    """
    Metadata attached to a question (immutable).

    Only created when the item carries a ``Profile:`` line; a question
    without a profile has ``metadata=None`` rather than an empty object.

    Attributes:
        profile: Tag → value map (specialty, discipline, taxonomy, ...)
        last_use_statistics: Most recent statistics block, if any
        second_last_use_statistics: Previous statistics block, if any
        background_info: Free text from ``Background Info:``
        parent_item_id: Source item id when split into siblings
        sub_question_part: SAQ part letter, e.g. "a"
        sub_question_number: EMQ sub-question number
    """
    profile: Dict[str, str] = field(default_factory=dict)
    last_use_statistics: Optional[UsageStatistics] = None
    second_last_use_statistics: Optional[UsageStatistics] = None
    background_info: str = ""
    parent_item_id: Optional[str] = None
    sub_question_part: Optional[str] = None
    sub_question_number: Optional[int] = None

    def with_provenance(
        self,
        parent_item_id: str,
        *,
        sub_question_part: Optional[str] = None,
        sub_question_number: Optional[int] = None,
    ) -> "QuestionMetadata":
        """Copy with sub-question provenance filled in."""
        return replace(
            self,
            parent_item_id=parent_item_id,
            sub_question_part=sub_question_part,
            sub_question_number=sub_question_number,
        )

    def keywords(self) -> list[str]:
        """Flatten profile and statistics into "key: value" strings."""
        words = [f"{k}: {v}" for k, v in self.profile.items() if v]
        if self.last_use_statistics:
            words.extend(
                f"{k}: {v}" for k, v in self.last_use_statistics.to_dict().items()
            )
        return words

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"profile": dict(self.profile)}
        if self.last_use_statistics is not None:
            d["last_use_statistics"] = self.last_use_statistics.to_dict()
        if self.second_last_use_statistics is not None:
            d["second_last_use_statistics"] = self.second_last_use_statistics.to_dict()
        if self.background_info:
            d["background_info"] = self.background_info
        if self.parent_item_id is not None:
            d["parent_item_id"] = self.parent_item_id
        if self.sub_question_part is not None:
            d["sub_question_part"] = self.sub_question_part
        if self.sub_question_number is not None:
            d["sub_question_number"] = self.sub_question_number
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionMetadata":
        last = data.get("last_use_statistics")
        second = data.get("second_last_use_statistics")
        return cls(
            profile=dict(data.get("profile", {})),
            last_use_statistics=UsageStatistics.from_dict(last) if last else None,
            second_last_use_statistics=UsageStatistics.from_dict(second) if second else None,
            background_info=data.get("background_info", ""),
            parent_item_id=data.get("parent_item_id"),
            sub_question_part=data.get("sub_question_part"),
            sub_question_number=data.get("sub_question_number"),
        )
