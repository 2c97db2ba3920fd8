"""
Module: extractor.sources

Purpose:
    Load a source document into (text, html) for the pipeline. Word
    documents are converted upstream and are not read here.

Key Functions:
    - load_source(): Path → SourceDocument

Dependencies:
    - fitz (PyMuPDF): PDF text extraction

Used By:
    - cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import fitz

from qti_toolkit.core.errors import SourceLoadError

from .html import html_to_text

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = (".txt", ".text")
HTML_SUFFIXES = (".html", ".htm")
PDF_SUFFIXES = (".pdf",)


@dataclass(frozen=True)
class SourceDocument:
    """
    Loaded source.

    Attributes:
        path: File the document came from
        text: Plain text handed to the parser
        html: HTML rendering (only for HTML sources)
    """
    path: Path
    text: str
    html: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.path.name


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SourceLoadError(f"{path} is not valid UTF-8: {e}", str(path)) from e


def _read_pdf(path: Path) -> str:
    try:
        with fitz.open(path) as doc:
            pages = [page.get_text() for page in doc]
    except (RuntimeError, ValueError) as e:
        raise SourceLoadError(f"Cannot read PDF {path}: {e}", str(path)) from e
    logger.debug(f"Read {len(pages)} pages from {path.name}")
    return "\n".join(pages)


def load_source(path: Path | str, html_path: Path | str | None = None) -> SourceDocument:
    """
    Load a source document.

    Args:
        path: .txt, .html/.htm or .pdf file
        html_path: Optional separate HTML rendering of the same document

    Returns:
        SourceDocument with text and (optional) html

    Raises:
        SourceLoadError: Missing file, unsupported type or unreadable content
    """
    path = Path(path)
    if not path.is_file():
        raise SourceLoadError(f"Source file not found: {path}", str(path))

    suffix = path.suffix.lower()
    html: Optional[str] = None
    if suffix in HTML_SUFFIXES:
        html = _read_text(path)
        text = html_to_text(html)
    elif suffix in PDF_SUFFIXES:
        text = _read_pdf(path)
    elif suffix in TEXT_SUFFIXES or suffix == "":
        text = _read_text(path)
    elif suffix == ".docx":
        raise SourceLoadError(
            f"{path.name}: Word documents must be converted to text or HTML first", str(path)
        )
    else:
        raise SourceLoadError(f"Unsupported source type {suffix!r}: {path.name}", str(path))

    if html_path is not None:
        html_file = Path(html_path)
        if not html_file.is_file():
            raise SourceLoadError(f"HTML file not found: {html_file}", str(html_file))
        html = _read_text(html_file)

    logger.info(f"Loaded {path.name} ({len(text)} chars{', with HTML' if html else ''})")
    return SourceDocument(path=path, text=text, html=html)
