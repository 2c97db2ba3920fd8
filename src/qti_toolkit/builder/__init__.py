"""
Module: builder

Purpose:
    QTI 2.1 package generation from extracted questions. Emits shared
    stimulus/context documents, one item per question, the manifest and
    the assessment test, and writes the flat ZIP archive.

Key Functions:
    - generate_qti_package(): Main entry point for package generation
    - write_package_zip(): Write the package archive

Key Classes:
    - PackageConfig: Configuration for package generation
    - IdentifierFactory: Random or deterministic identifiers

Dependencies:
    - qti_toolkit.core.models: Question and package models

Used By:
    - qti_toolkit.cli: convert and build commands
"""

from .config import PackageConfig
from .controller import generate_qti_package
from .identifiers import IdentifierFactory
from .output import package_to_bytes, write_package_zip

__all__ = [
    # Config
    "PackageConfig",
    "IdentifierFactory",
    # Controller
    "generate_qti_package",
    # Output
    "write_package_zip",
    "package_to_bytes",
]
