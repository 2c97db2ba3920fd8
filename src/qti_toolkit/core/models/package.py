"""
Module: package

Purpose:
    Generator-side models: one serialized QTI document (``QTIItem``) and
    the complete package (``QTIPackage``) of manifest, assessment test and
    item documents.

Key Classes:
    - ItemKind: item / stimulus / context
    - QTIItem: One standalone assessmentItem document
    - QTIPackage: manifest + assessment + items

Dependencies:
    - dataclasses (std)

Used By:
    - builder.qti.items, builder.qti.manifest, builder.qti.assessment
    - builder.controller
    - builder.output.zip_writer
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional

from .metadata import QuestionMetadata

MANIFEST_FILENAME = "imsmanifest.xml"
ASSESSMENT_FILENAME = "assessment.xml"


class ItemKind(str, Enum):
    """Role of a generated document; also its identifier prefix."""
    ITEM = "item"
    STIMULUS = "stimulus"
    CONTEXT = "context"

    def __str__(self) -> str:
        return self.value

    @property
    def is_shared(self) -> bool:
        """True for documents shared by several questions."""
        return self is not ItemKind.ITEM


@dataclass(frozen=True)
class QTIItem:
    """
    One generated QTI document (immutable).

    Attributes:
        identifier: Globally unique id, "<kind>_<sourceId>_<uuid>"
        filename: Always "<identifier>.xml"
        item: Serialized XML
        kind: Document role
        source_id: Item id / options id / parent item id it was built from
        metadata: Question metadata, for manifest keywords
        group_key: (kind, source id) of the shared document a question is
            shown with; None for shared documents and standalone questions
    """
    identifier: str
    filename: str
    item: str
    kind: ItemKind = ItemKind.ITEM
    source_id: str = ""
    metadata: Optional[QuestionMetadata] = None
    group_key: Optional[tuple[ItemKind, str]] = None

    def __post_init__(self) -> None:
        if self.filename != f"{self.identifier}.xml":
            raise ValueError(
                f"filename must be '<identifier>.xml': {self.filename!r} vs {self.identifier!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"identifier": self.identifier, "filename": self.filename, "item": self.item}


@dataclass(frozen=True)
class QTIPackage:
    """
    A complete QTI 2.1 package (immutable).

    Attributes:
        manifest: imsmanifest.xml content
        assessment: assessment.xml content
        items: Item and stimulus documents in emission order
    """
    manifest: str
    assessment: str
    items: tuple[QTIItem, ...]

    def files(self) -> Iterator[tuple[str, str]]:
        """Yield (filename, content) for every file of the flat archive."""
        yield MANIFEST_FILENAME, self.manifest
        yield ASSESSMENT_FILENAME, self.assessment
        for item in self.items:
            yield item.filename, item.item

    @property
    def filenames(self) -> set[str]:
        return {name for name, _ in self.files()}

    def find(self, identifier: str) -> Optional[QTIItem]:
        for item in self.items:
            if item.identifier == identifier:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "manifest": self.manifest,
            "assessment": self.assessment,
            "items": [item.to_dict() for item in self.items],
        }
