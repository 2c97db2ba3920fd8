"""
Module: builder.output

Purpose:
    Archive output for generated packages.

Key Functions:
    - write_package_zip(): Write a flat ZIP archive
    - package_to_bytes(): Same archive in memory
"""

from .zip_writer import package_to_bytes, write_package_zip

__all__ = [
    "package_to_bytes",
    "write_package_zip",
]
