"""
Module: builder.qti

Purpose:
    QTI 2.1 document generation: item and stimulus templates, the content
    package manifest and the assessment test.
"""

from .assessment import StimulusGroup, generate_assessment_test, group_items_by_stimulus
from .escaping import comment_text, convert_table_to_qti, escape_xml, tables_to_qti
from .items import (
    RESPONSE_IDENTIFIER,
    generate_context_document,
    generate_emq_item,
    generate_emq_stimulus,
    generate_mcq_item,
    generate_question_item,
    generate_saq_item,
)
from .manifest import generate_manifest

__all__ = [
    "RESPONSE_IDENTIFIER",
    "StimulusGroup",
    "comment_text",
    "convert_table_to_qti",
    "escape_xml",
    "generate_assessment_test",
    "generate_context_document",
    "generate_emq_item",
    "generate_emq_stimulus",
    "generate_manifest",
    "generate_mcq_item",
    "generate_question_item",
    "generate_saq_item",
    "group_items_by_stimulus",
    "tables_to_qti",
]
