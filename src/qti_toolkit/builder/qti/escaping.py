"""
Module: builder.qti.escaping

Purpose:
    Text-to-XML helpers for the QTI templates: escaping of element and
    attribute text, safe XML comment bodies, and conversion of HTML tables
    into QTI table markup.

Key Functions:
    - escape_xml(): Trim, collapse whitespace, escape the five metacharacters
    - comment_text(): Make text safe inside <!-- -->
    - convert_table_to_qti(): One HTML <table> → QTI table
    - tables_to_qti(): Every table in an HTML fragment

Dependencies:
    - bs4: HTML table parsing

Used By:
    - builder.qti.items, builder.qti.manifest, builder.qti.assessment
"""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

_WHITESPACE = re.compile(r"\s+")

# Order matters: "&" first so each pass escapes it exactly once
_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(text: Optional[str]) -> str:
    """
    Escape text for XML element content or attribute values.

    Leading/trailing whitespace is trimmed and internal runs collapse to
    one space before escaping.

    Example:
        >>> escape_xml("  Tom & Jerry\\n <cats>  ")
        'Tom &amp; Jerry &lt;cats&gt;'
    """
    if not text:
        return ""
    normalized = _WHITESPACE.sub(" ", text.strip())
    for char, entity in _XML_ESCAPES:
        normalized = normalized.replace(char, entity)
    return normalized


def comment_text(text: str) -> str:
    """Text safe inside an XML comment ("--" is not allowed, nor a trailing "-")."""
    cleaned = _WHITESPACE.sub(" ", text.strip())
    while "--" in cleaned:
        cleaned = cleaned.replace("--", "- -")
    return cleaned.rstrip("-") or "N/A"


def _table_to_qti(table: Tag) -> Optional[str]:
    head_rows: List[str] = []
    body_rows: List[str] = []
    for row in table.find_all("tr"):
        cells = row.find_all(["td", "th"])
        if not cells:
            continue
        is_header = any(cell.name == "th" for cell in cells)
        tag = "th" if is_header else "td"
        rendered = "".join(f"<{tag}>{escape_xml(cell.get_text(' '))}</{tag}>" for cell in cells)
        (head_rows if is_header else body_rows).append(f"<tr>{rendered}</tr>")

    if not head_rows and not body_rows:
        return None
    # QTI tables need at least one tbody
    if not body_rows:
        head_rows, body_rows = [], head_rows

    parts = ["<table>"]
    if head_rows:
        parts.append("<thead>" + "".join(head_rows) + "</thead>")
    parts.append("<tbody>" + "".join(body_rows) + "</tbody>")
    parts.append("</table>")
    return "".join(parts)


def convert_table_to_qti(table_markup: str) -> Optional[str]:
    """
    Convert one HTML table to QTI table markup.

    Rows containing <th> cells go to <thead>, the others to <tbody>; cell
    text is stripped of inner markup and escaped.

    Returns:
        QTI table XML, or None when the table has no rows
    """
    soup = BeautifulSoup(table_markup, "html.parser")
    table = soup.find("table")
    return _table_to_qti(table if table is not None else soup)


def tables_to_qti(html_content: Optional[str]) -> List[str]:
    """Convert every table in an HTML fragment, skipping empty ones."""
    if not html_content:
        return []
    tables = []
    for table in BeautifulSoup(html_content, "html.parser").find_all("table"):
        converted = _table_to_qti(table)
        if converted is not None:
            tables.append(converted)
    return tables
