"""
Module: builder.output.zip_writer

Purpose:
    Write a QTI package as the flat ZIP archive assessment platforms
    import: imsmanifest.xml, assessment.xml and every item document at
    the archive root.

Key Functions:
    - write_package_zip(): Main entry point
    - package_to_bytes(): Same archive in memory

Dependencies:
    - zipfile (std)

Used By:
    - cli: convert/build commands
"""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Union

from qti_toolkit.core.models import QTIPackage

logger = logging.getLogger(__name__)


def _write_entries(target: Union[Path, BinaryIO], package: QTIPackage) -> int:
    count = 0
    with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zf:
        for filename, content in package.files():
            zf.writestr(filename, content.encode("utf-8"))
            count += 1
    return count


def write_package_zip(package: QTIPackage, output_path: Path) -> Path:
    """
    Write the package to a ZIP file.

    Creates a ZIP file with structure:
        package.zip
        ├── imsmanifest.xml
        ├── assessment.xml
        ├── stimulus_10_<uuid>.xml
        ├── item_201_<uuid>.xml
        └── ...

    Args:
        package: Generated package
        output_path: Path for .zip file (will append .zip if missing)

    Returns:
        Path to created ZIP file

    Raises:
        OSError: If output path is not writable
    """
    output_path = Path(output_path)
    if not output_path.suffix == ".zip":
        output_path = output_path.with_suffix(".zip")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    count = _write_entries(output_path, package)
    logger.info(f"Wrote QTI package {output_path} ({count} files)")
    return output_path


def package_to_bytes(package: QTIPackage) -> bytes:
    buffer = BytesIO()
    _write_entries(buffer, package)
    return buffer.getvalue()
