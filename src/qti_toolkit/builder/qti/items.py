"""
Module: builder.qti.items

Purpose:
    QTI 2.1 assessmentItem templates: one item document per question and
    the shared stimulus/context documents that sibling questions point at.

    Element order inside assessmentItem follows the QTI 2.1 schema:
    responseDeclaration, outcomeDeclaration, templateDeclaration,
    itemBody, responseProcessing, modalFeedback.

Key Functions:
    - generate_question_item(): Dispatch on question type (None if unsupported)
    - generate_mcq_item() / generate_emq_item() / generate_saq_item()
    - generate_emq_stimulus(): Topic header + lettered options + instructions
    - generate_context_document(): SAQ shared stem

Dependencies:
    - builder.qti.escaping: Text escaping, table conversion
    - builder.identifiers: Identifier minting

Used By:
    - builder.controller
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from qti_toolkit.core.models import (
    EMQQuestion,
    ItemKind,
    MCQQuestion,
    Option,
    QTIItem,
    Question,
    SAQQuestion,
)
from qti_toolkit.extractor.detection.marks import strip_marks
from qti_toolkit.extractor.structuring.state import split_shared_context

from ..config import PackageConfig
from ..identifiers import IdentifierFactory
from .escaping import comment_text, escape_xml, tables_to_qti

logger = logging.getLogger(__name__)

QTI_NAMESPACE = "http://www.imsglobal.org/xsd/imsqti_v2p1"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
QTI_SCHEMA_LOCATION = (
    "http://www.imsglobal.org/xsd/imsqti_v2p1 "
    "http://www.imsglobal.org/xsd/qti/qtiv2p1/imsqti_v2p1.xsd"
)
MATCH_CORRECT_TEMPLATE = "http://www.imsglobal.org/question/qti_v2p1/rptemplates/match_correct"

RESPONSE_IDENTIFIER = "RESPONSE"
MCQ_PROMPT = "Choose the correct answer:"
EMQ_PROMPT = "Select your answer:"
SAQ_PROMPT = "Provide your answer:"


# ─────────────────────────────────────────────────────────────────────────────
# Shared fragments
# ─────────────────────────────────────────────────────────────────────────────

def _item_open(identifier: str, title: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<assessmentItem identifier="{identifier}" title="{escape_xml(title)}" '
        'adaptive="false" timeDependent="false"\n'
        f'                xmlns="{QTI_NAMESPACE}"\n'
        f'                xmlns:xsi="{XSI_NAMESPACE}"\n'
        f'                xsi:schemaLocation="{QTI_SCHEMA_LOCATION}">\n'
    )


def _outcome(identifier: str, value: float | int) -> str:
    return (
        f'  <outcomeDeclaration identifier="{identifier}" cardinality="single" baseType="float">\n'
        "    <defaultValue>\n"
        f"      <value>{value}</value>\n"
        "    </defaultValue>\n"
        "  </outcomeDeclaration>\n"
    )


def _choice_response(correct_answer: str) -> str:
    return (
        f'  <responseDeclaration identifier="{RESPONSE_IDENTIFIER}" cardinality="single" '
        'baseType="identifier">\n'
        "    <correctResponse>\n"
        f"      <value>choice_{escape_xml(correct_answer)}</value>\n"
        "    </correctResponse>\n"
        "  </responseDeclaration>\n"
    )


def _choice_interaction(prompt: str, options: Sequence[Option], shuffle: bool) -> str:
    fixed = "false" if shuffle else "true"
    choices = "".join(
        f'      <simpleChoice identifier="choice_{o.letter}" fixed="{fixed}">'
        f"{escape_xml(o.text)}</simpleChoice>\n"
        for o in options
    )
    return (
        f'    <choiceInteraction responseIdentifier="{RESPONSE_IDENTIFIER}" '
        f'shuffle="{"true" if shuffle else "false"}" maxChoices="1">\n'
        f"      <prompt>{prompt}</prompt>\n"
        f"{choices}"
        "    </choiceInteraction>\n"
    )


def _stem_content(question: Question) -> str:
    """Stem paragraph plus any tables from the question's HTML."""
    lines: List[str] = []
    if question.text and question.text.strip():
        lines.append(f"      <p>{escape_xml(question.text)}</p>\n")
    for table in tables_to_qti(question.html_content):
        lines.append(f"      {table}\n")
    return "".join(lines)


def _make_item(
    identifier: str,
    xml: str,
    kind: ItemKind,
    source_id: str,
    question: Optional[Question] = None,
    group_key: Optional[Tuple[ItemKind, str]] = None,
) -> QTIItem:
    return QTIItem(
        identifier=identifier,
        filename=f"{identifier}.xml",
        item=xml,
        kind=kind,
        source_id=source_id,
        metadata=question.metadata if question is not None else None,
        group_key=group_key,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Question items
# ─────────────────────────────────────────────────────────────────────────────

def generate_mcq_item(
    question: MCQQuestion,
    identifiers: IdentifierFactory,
    config: Optional[PackageConfig] = None,
) -> QTIItem:
    config = config or PackageConfig()
    identifier = identifiers.new(ItemKind.ITEM.value, question.item_id)
    body = _stem_content(question)

    xml = (
        _item_open(identifier, question.title or f"Question {question.item_id}")
        + f"  <!-- Item ID: {comment_text(question.item_id)} -->\n"
        + _choice_response(question.correct_answer)
        + _outcome("SCORE", 0)
        + _outcome("MAXSCORE", 1)
        + "  <itemBody>\n"
        + (f"    <div>\n{body}    </div>\n" if body else "")
        + _choice_interaction(MCQ_PROMPT, question.options, config.shuffle_answers)
        + "  </itemBody>\n"
        + f'  <responseProcessing template="{MATCH_CORRECT_TEMPLATE}"/>\n'
        + "</assessmentItem>"
    )
    return _make_item(identifier, xml, ItemKind.ITEM, question.item_id, question)


def generate_emq_item(
    question: EMQQuestion,
    identifiers: IdentifierFactory,
    config: Optional[PackageConfig] = None,
) -> QTIItem:
    """
    EMQ item: only the question's own stem; the option set's topic and
    instructions live in the stimulus document.
    """
    config = config or PackageConfig()
    identifier = identifiers.new(ItemKind.ITEM.value, question.item_id)

    question_xml = ""
    if question.text and question.text.strip():
        question_xml = (
            '    <div class="question">\n'
            f"      <p><strong>{escape_xml(question.text)}</strong></p>\n"
            "    </div>\n"
        )

    xml = (
        _item_open(identifier, question.title or f"Question {question.item_id}")
        + f"  <!-- Item ID: {comment_text(question.item_id)} -->\n"
        + f"  <!-- Options ID: {comment_text(question.options_id or 'N/A')} -->\n"
        + _choice_response(question.correct_answer)
        + _outcome("SCORE", 0)
        + _outcome("MAXSCORE", 1)
        + "  <itemBody>\n"
        + question_xml
        + _choice_interaction(EMQ_PROMPT, question.options, config.shuffle_answers)
        + "  </itemBody>\n"
        + f'  <responseProcessing template="{MATCH_CORRECT_TEMPLATE}"/>\n'
        + "</assessmentItem>"
    )
    group_key = (ItemKind.STIMULUS, question.options_id) if question.options_id else None
    return _make_item(identifier, xml, ItemKind.ITEM, question.item_id, question, group_key)


def generate_saq_item(
    question: SAQQuestion,
    identifiers: IdentifierFactory,
    config: Optional[PackageConfig] = None,
) -> QTIItem:
    """
    SAQ item with a free-text interaction and the answer key as modal
    feedback. Sub-question labels are shown; their marks annotations are
    not (the marks are in MAXSCORE).
    """
    config = config or PackageConfig()
    identifier = identifiers.new(ItemKind.ITEM.value, question.item_id)
    marks = question.total_marks

    if question.sub_questions:
        body = "".join(
            f"      <p><strong>{escape_xml(sub.part)}</strong> "
            f"{escape_xml(strip_marks(sub.question))}</p>\n"
            for sub in question.sub_questions
        )
    else:
        body = _stem_content(question)

    xml = (
        _item_open(identifier, question.title or f"Question {question.item_id}")
        + f"  <!-- Item ID: {comment_text(question.item_id)} -->\n"
        + f"  <!-- Total Marks: {marks} -->\n"
        + f'  <responseDeclaration identifier="{RESPONSE_IDENTIFIER}" cardinality="single" '
        'baseType="string"/>\n'
        + _outcome("SCORE", 0)
        + _outcome("MAXSCORE", marks)
        + '  <templateDeclaration identifier="SCORE_ALL_CORRECT" cardinality="single" '
        'baseType="float">\n'
        f"    <defaultValue>\n      <value>{marks}</value>\n    </defaultValue>\n"
        "  </templateDeclaration>\n"
        + "  <itemBody>\n"
        + (f"    <div>\n{body}    </div>\n" if body else "")
        + f'    <extendedTextInteraction responseIdentifier="{RESPONSE_IDENTIFIER}" '
        f'expectedLength="{config.expected_length}">\n'
        f"      <prompt>{SAQ_PROMPT}</prompt>\n"
        "    </extendedTextInteraction>\n"
        "  </itemBody>\n"
        + "  <responseProcessing>\n"
        '    <setOutcomeValue identifier="SCORE">\n'
        '      <baseValue baseType="float">0</baseValue>\n'
        "    </setOutcomeValue>\n"
        '    <setOutcomeValue identifier="MAXSCORE">\n'
        f'      <baseValue baseType="float">{marks}</baseValue>\n'
        "    </setOutcomeValue>\n"
        "  </responseProcessing>\n"
        + '  <modalFeedback outcomeIdentifier="SCORE" identifier="correct" showHide="show">\n'
        f"    <p>Answer Key: {escape_xml(question.answer_key)}</p>\n"
        "  </modalFeedback>\n"
        + "</assessmentItem>"
    )
    group_key = (ItemKind.CONTEXT, question.parent_item_id) if question.parent_item_id else None
    return _make_item(identifier, xml, ItemKind.ITEM, question.item_id, question, group_key)


_GENERATORS = {
    MCQQuestion: generate_mcq_item,
    EMQQuestion: generate_emq_item,
    SAQQuestion: generate_saq_item,
}


def generate_question_item(
    question: Question,
    identifiers: IdentifierFactory,
    config: Optional[PackageConfig] = None,
) -> Optional[QTIItem]:
    """
    Generate the item document for one question.

    Returns:
        QTIItem, or None for an unsupported question class
    """
    generator = _GENERATORS.get(type(question))
    if generator is None:
        logger.warning(f"Unsupported question type: {type(question).__name__} ({question.item_id})")
        return None
    return generator(question, identifiers, config)


# ─────────────────────────────────────────────────────────────────────────────
# Shared documents
# ─────────────────────────────────────────────────────────────────────────────

def generate_emq_stimulus(
    options_id: str,
    options: Sequence[Option],
    shared_context: Optional[str],
    identifiers: IdentifierFactory,
) -> QTIItem:
    """
    Stimulus document for an EMQ option set.

    The topic header and instructions are recovered from the shared
    context; the options are rendered from the option list.
    """
    identifier = identifiers.new(ItemKind.STIMULUS.value, options_id)
    header, instructions = split_shared_context(shared_context)

    content: List[str] = []
    if header:
        content.append(f"      <p><strong>{escape_xml(header)}</strong></p>\n")
    for option in options:
        content.append(f"      <p>{escape_xml(f'{option.letter}. {option.text}')}</p>\n")
    if instructions:
        content.append(f"      <p>{escape_xml(' '.join(instructions))}</p>\n")

    xml = (
        _item_open(identifier, f"Stimulus for EMQ Options {options_id}")
        + f"  <!-- EMQ Stimulus Document for Options ID: {comment_text(options_id)} -->\n"
        + "  <itemBody>\n"
        + '    <div class="stimulus">\n'
        + "".join(content)
        + "    </div>\n"
        + "  </itemBody>\n"
        + "</assessmentItem>"
    )
    return _make_item(identifier, xml, ItemKind.STIMULUS, options_id)


def generate_context_document(
    parent_item_id: str,
    shared_context: str,
    identifiers: IdentifierFactory,
) -> QTIItem:
    """Context document holding the stem shared by an SAQ item's parts."""
    identifier = identifiers.new(ItemKind.CONTEXT.value, parent_item_id)
    paragraphs = "".join(
        f"      <p>{escape_xml(line)}</p>\n" for line in shared_context.split("\n") if line.strip()
    )

    xml = (
        _item_open(identifier, f"Stimulus for Question {parent_item_id}")
        + f"  <!-- Stimulus Document for Item ID: {comment_text(parent_item_id)} -->\n"
        + "  <itemBody>\n"
        + '    <div class="stimulus">\n'
        + "      <p><strong>Context:</strong></p>\n"
        + paragraphs
        + "    </div>\n"
        + "  </itemBody>\n"
        + "</assessmentItem>"
    )
    return _make_item(identifier, xml, ItemKind.CONTEXT, parent_item_id)
