"""
Module: builder.qti.assessment

Purpose:
    Build the assessmentTest: one nonlinear, simultaneous-submission
    testPart with one section per shared stimulus/context document and a
    final catch-all section for questions without one.

    Question items are matched to their shared document through
    ``QTIItem.group_key``: (stimulus, options id) for EMQ questions,
    (context, parent item id) for SAQ parts.

Key Functions:
    - group_items_by_stimulus(): Items → StimulusGroup list
    - generate_assessment_test(): Items → assessment.xml content

Key Classes:
    - StimulusGroup: One section's shared document and questions

Used By:
    - builder.controller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from qti_toolkit.core.models import ItemKind, QTIItem

from ..identifiers import IdentifierFactory
from .escaping import escape_xml
from .items import QTI_NAMESPACE, QTI_SCHEMA_LOCATION, XSI_NAMESPACE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StimulusGroup:
    """
    One assessment section.

    Attributes:
        stimulus: Shared document shown first (None for the catch-all section)
        questions: Question items sorted by identifier
    """
    stimulus: Optional[QTIItem]
    questions: tuple[QTIItem, ...]


def group_items_by_stimulus(items: Sequence[QTIItem]) -> List[StimulusGroup]:
    """
    Group question items under their shared documents.

    Groups follow the emission order of their shared documents; a shared
    document no question points at gets no section. Questions without a
    shared document form the last group.
    """
    shared: Dict[Tuple[ItemKind, str], QTIItem] = {}
    questions: List[QTIItem] = []
    for item in items:
        if item.kind.is_shared:
            shared.setdefault((item.kind, item.source_id), item)
        else:
            questions.append(item)

    grouped: Dict[Tuple[ItemKind, str], List[QTIItem]] = {}
    orphans: List[QTIItem] = []
    for item in questions:
        if item.group_key is not None and item.group_key in shared:
            grouped.setdefault(item.group_key, []).append(item)
        else:
            orphans.append(item)

    groups = [
        StimulusGroup(
            stimulus=document,
            questions=tuple(sorted(grouped[key], key=lambda i: i.identifier)),
        )
        for key, document in shared.items()
        if key in grouped
    ]
    if orphans:
        groups.append(
            StimulusGroup(stimulus=None, questions=tuple(sorted(orphans, key=lambda i: i.identifier)))
        )
    return groups


def _section(number: int, group: StimulusGroup, identifiers: IdentifierFactory) -> str:
    section_id = identifiers.new("section", str(number))
    kind = "Questions with Stimulus" if group.stimulus is not None else "Individual Questions"
    refs: List[str] = []
    if group.stimulus is not None:
        refs.append(
            f'      <assessmentItemRef identifier="{group.stimulus.identifier}" '
            f'href="{group.stimulus.filename}" category="stimulus" fixed="true"/>\n'
        )
    refs.extend(
        f'      <assessmentItemRef identifier="{item.identifier}" href="{item.filename}"/>\n'
        for item in group.questions
    )
    return (
        f'    <assessmentSection identifier="{section_id}" '
        f'title="Section {number} - {kind}" visible="true">\n'
        + "".join(refs)
        + "    </assessmentSection>\n"
    )


def generate_assessment_test(
    items: Sequence[QTIItem],
    title: str,
    identifiers: IdentifierFactory,
) -> str:
    """
    Build assessment.xml.

    Returns:
        assessmentTest XML with one section per group
    """
    test_id = identifiers.new("test")
    groups = group_items_by_stimulus(items)
    sections = "".join(
        _section(number, group, identifiers) for number, group in enumerate(groups, start=1)
    )
    logger.debug(f"Assessment test: {len(groups)} sections")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<assessmentTest identifier="{test_id}" title="{escape_xml(title)}"\n'
        f'                xmlns="{QTI_NAMESPACE}"\n'
        f'                xmlns:xsi="{XSI_NAMESPACE}"\n'
        f'                xsi:schemaLocation="{QTI_SCHEMA_LOCATION}">\n'
        '  <outcomeDeclaration identifier="SCORE" cardinality="single" baseType="float">\n'
        "    <defaultValue>\n"
        "      <value>0</value>\n"
        "    </defaultValue>\n"
        "  </outcomeDeclaration>\n"
        '  <testPart identifier="testPart" navigationMode="nonlinear" submissionMode="simultaneous">\n'
        + sections
        + "  </testPart>\n"
        "</assessmentTest>"
    )
