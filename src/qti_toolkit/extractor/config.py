"""
Module: extractor.config

Purpose:
    Configuration dataclass for the extraction pipeline. Immutable
    settings for placeholder text, instruction detection and classifier
    hints.

Key Classes:
    - ExtractionConfig: Main configuration for extraction

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - extractor.pipeline
    - extractor.structuring.emq (instruction keywords, placeholder)
    - extractor.classification (filename hints)
"""

from dataclasses import dataclass

DEFAULT_PLACEHOLDER = "[Image or diagram - Item {item_id}]"

DEFAULT_INSTRUCTION_KEYWORDS = (
    "select",
    "choose",
    "match the",
    "may be used",
    "above",
    "following",
    "list of options",
    "for each",
)

DEFAULT_MIXED_FILENAME_HINTS = ("mixed", "exam", "paper", "hybrid")


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for question extraction.

    Attributes:
        placeholder_template: Stem used for referencing EMQ items without
            text; ``{item_id}`` is substituted
        instruction_keywords: Lower-case phrases marking EMQ instruction prose
        mixed_filename_hints: Filename substrings that force MIXED mode
        split_html_by_item: Attach each question the HTML of its own item
            (False attaches the whole document's HTML to every question)
        run_diagnostics: Collect item-level issues into a report
    """
    placeholder_template: str = DEFAULT_PLACEHOLDER
    instruction_keywords: tuple[str, ...] = DEFAULT_INSTRUCTION_KEYWORDS
    mixed_filename_hints: tuple[str, ...] = DEFAULT_MIXED_FILENAME_HINTS
    split_html_by_item: bool = True
    run_diagnostics: bool = False

    def placeholder_for(self, item_id: str) -> str:
        return self.placeholder_template.format(item_id=item_id)

    def is_instruction(self, line: str) -> bool:
        lower = line.lower()
        return any(keyword in lower for keyword in self.instruction_keywords)
