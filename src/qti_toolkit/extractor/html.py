"""
Module: extractor.html

Purpose:
    Helpers for the optional HTML rendering of a source document. The HTML
    never drives parsing; it is only attached to already-parsed questions
    so the generator can carry tables into the item body.

Key Functions:
    - html_to_text(): Markup → plain text with one line per block element
    - split_html_by_item(): Map item id → HTML fragment for that item
    - attach_html(): Copy questions with their HTML fragment attached

Dependencies:
    - bs4: HTML parsing

Used By:
    - extractor.pipeline
    - extractor.sources
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Dict, Iterator, List, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
    Tag,
)

from qti_toolkit.core.models import Question

logger = logging.getLogger(__name__)

ITEM_ANCHOR_PATTERN = re.compile(r"Item ID:\s*(\d+)")

BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "tr", "table", "ul", "ol"]
INLINE_TAGS = {"a", "b", "i", "u", "em", "strong", "span", "font", "sub", "sup", "small", "big", "br"}
# Word exports keep document settings in <xml> islands
HIDDEN_TAGS = ["script", "style", "head", "xml"]
_NON_CONTENT = (Comment, Declaration, Doctype, ProcessingInstruction)


def _parse(markup: str) -> BeautifulSoup:
    """Parse markup, dropping comments, declarations and non-visible elements."""
    soup = BeautifulSoup(markup, "html.parser")
    for node in soup.find_all(string=lambda s: isinstance(s, _NON_CONTENT)):
        node.extract()
    for tag in soup.find_all(HIDDEN_TAGS):
        tag.extract()
    return soup


def html_to_text(markup: str) -> str:
    """
    Recover plain text from markup.

    Block-level elements and <br> end a line, table cells are separated by
    a space, entities are unescaped. Comments (including Word's
    conditional comments), scripts and styles contribute nothing.

    Example:
        >>> html_to_text("<p>Item ID: 1 A type</p><p>What is 2 &amp; 2?</p>")
        'Item ID: 1 A type\\nWhat is 2 & 2?\\n'
    """
    soup = _parse(markup)
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for cell in soup.find_all(["td", "th"]):
        cell.append(" ")
    for block in soup.find_all(BLOCK_TAGS):
        block.append("\n")
    return soup.get_text()


def _text(node: PageElement) -> str:
    return node.get_text() if isinstance(node, Tag) else str(node)


def _markup(node: PageElement) -> str:
    if isinstance(node, NavigableString):
        return html_lib.escape(str(node), quote=False)
    return str(node)


def _segments(container: Tag) -> Iterator[List[PageElement]]:
    """
    Top-level pieces of a container: each block element on its own, runs
    of inline nodes together. Elements holding several items are opened up.
    """
    run: List[PageElement] = []
    for node in list(container.children):
        if isinstance(node, Tag) and len(ITEM_ANCHOR_PATTERN.findall(node.get_text())) > 1:
            if run:
                yield run
                run = []
            yield from _segments(node)
        elif isinstance(node, Tag) and node.name not in INLINE_TAGS:
            if run:
                yield run
                run = []
            yield [node]
        else:
            run.append(node)
    if run:
        yield run


def split_html_by_item(markup: str) -> Dict[str, str]:
    """
    Split a document's HTML at the elements carrying an "Item ID:" anchor.

    The anchor may be spread over inline tags (<b>Item ID:</b> 12). Content
    before the first anchor is dropped.

    Returns:
        {item_id: fragment}; empty when the markup has no anchor. A repeated
        id keeps its first fragment.
    """
    items: List[Tuple[str, List[str]]] = []
    for segment in _segments(_parse(markup)):
        match = ITEM_ANCHOR_PATTERN.search("".join(_text(node) for node in segment))
        if match:
            items.append((match.group(1), []))
        if items:
            items[-1][1].extend(_markup(node) for node in segment)

    fragments: Dict[str, str] = {}
    for item_id, pieces in items:
        fragments.setdefault(item_id, "".join(pieces))
    return fragments


def attach_html(
    questions: Sequence[Question],
    markup: str,
    *,
    split_by_item: bool = True,
) -> List[Question]:
    """
    Attach HTML to questions.

    With ``split_by_item`` each question gets the fragment of its source
    item (``parent_item_id`` for split records); questions whose item has
    no fragment are left unchanged. Without anchors, or when splitting is
    off, every question gets the whole markup.
    """
    if not markup or not markup.strip():
        return list(questions)

    fragments = split_html_by_item(markup) if split_by_item else {}
    if not fragments:
        return [q.with_html(markup) for q in questions]

    attached: List[Question] = []
    for question in questions:
        source_id = getattr(question, "parent_item_id", None) or question.item_id
        fragment = fragments.get(source_id)
        attached.append(question.with_html(fragment) if fragment else question)
    logger.debug(f"Attached HTML fragments to {sum(q.html_content is not None for q in attached)} questions")
    return attached
