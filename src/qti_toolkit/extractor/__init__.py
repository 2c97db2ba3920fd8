"""
Module: extractor

Purpose:
    Text extraction pipeline for turning exam documents into typed
    question records. Uses immutable data models from core.models.

Key Functions:
    - parse_questions(): Main entry point for extraction
    - load_source(): Read a .txt/.html/.pdf file for the pipeline

Key Classes:
    - ExtractionConfig: Configuration for extraction settings
    - ExtractionResult: Container for extraction output
    - DiagnosticsCollector: Item-level issue collection

Dependencies:
    - fitz (PyMuPDF): PDF text extraction
    - qti_toolkit.core.models: Question records

Used By:
    - qti_toolkit.cli: parse and build commands
"""

from .config import ExtractionConfig
from .diagnostics import DiagnosticsCollector, ParseDiagnosticsReport
from .pipeline import ExtractionResult, extract_item, parse_questions
from .sources import SourceDocument, load_source

__all__ = [
    "parse_questions",
    "extract_item",
    "load_source",
    "ExtractionConfig",
    "ExtractionResult",
    "DiagnosticsCollector",
    "ParseDiagnosticsReport",
    "SourceDocument",
]
