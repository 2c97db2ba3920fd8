"""
Module: builder.controller

Purpose:
    Orchestrate package generation.
    Questions → shared documents + items → manifest → assessment test

Key Functions:
    - generate_qti_package(): Main entry point for building a package

Dependencies:
    - builder.qti: Document templates
    - builder.identifiers: Identifier minting

Used By:
    - cli: convert/build commands
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from qti_toolkit.core.errors import ConversionError
from qti_toolkit.core.models import EMQQuestion, QTIItem, QTIPackage, Question, SAQQuestion

from .config import PackageConfig
from .identifiers import IdentifierFactory
from .qti import (
    generate_assessment_test,
    generate_context_document,
    generate_emq_stimulus,
    generate_manifest,
    generate_question_item,
)

logger = logging.getLogger(__name__)


def generate_qti_package(
    questions: Sequence[Question],
    title: Optional[str] = None,
    config: Optional[PackageConfig] = None,
) -> QTIPackage:
    """
    Generate a complete QTI 2.1 package.

    Pipeline:
    1. Walk questions in source order; before the first question of an
       EMQ option set emit its stimulus document, before the first part
       of an SAQ item emit its context document
    2. Emit one item document per question (unsupported types are skipped)
    3. Build the manifest and the assessment test over all documents

    Args:
        questions: Validated questions in source order
        title: Assessment title (overrides config.title)
        config: Package options

    Returns:
        QTIPackage with manifest, assessment and items

    Raises:
        ConversionError: If there are no questions or no item was generated

    Example:
        >>> package = generate_qti_package(result.questions, "Cardiology")
        >>> sorted(package.filenames)[:2]
        ['assessment.xml', 'imsmanifest.xml']
    """
    config = config or PackageConfig()
    title = title or config.title
    if not questions:
        raise ConversionError("No questions provided")

    identifiers = IdentifierFactory(deterministic=config.deterministic_identifiers)
    items: List[QTIItem] = []
    seen_option_sets: Set[str] = set()
    seen_contexts: Set[str] = set()
    question_items = 0

    for question in questions:
        if (
            isinstance(question, EMQQuestion)
            and question.options_id
            and question.options
            and question.options_id not in seen_option_sets
        ):
            items.append(
                generate_emq_stimulus(
                    question.options_id, question.options, question.shared_context, identifiers
                )
            )
            seen_option_sets.add(question.options_id)
        elif (
            isinstance(question, SAQQuestion)
            and question.shared_context
            and question.parent_item_id
            and question.parent_item_id not in seen_contexts
        ):
            items.append(
                generate_context_document(question.parent_item_id, question.shared_context, identifiers)
            )
            seen_contexts.add(question.parent_item_id)

        item = generate_question_item(question, identifiers, config)
        if item is None:
            continue
        items.append(item)
        question_items += 1

    if question_items == 0:
        raise ConversionError("No QTI items were generated")

    manifest = generate_manifest(
        items, title, identifiers, include_metadata=config.include_metadata
    )
    assessment = generate_assessment_test(items, title, identifiers)

    shared = len(items) - question_items
    logger.info(f"Generated QTI package '{title}': {question_items} items, {shared} shared documents")
    return QTIPackage(manifest=manifest, assessment=assessment, items=tuple(items))
