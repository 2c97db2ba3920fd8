"""
Module: builder.identifiers

Purpose:
    Mint QTI identifiers of the form "<prefix>_<sourceId>_<uuid>".

    By default every identifier gets a fresh random uuid, so two runs on
    the same questions produce different packages. In deterministic mode
    the uuid is derived from (prefix, source id, occurrence count), which
    makes the whole package reproducible.

Key Classes:
    - IdentifierFactory: Per-package identifier source

Used By:
    - builder.qti.items, builder.qti.manifest, builder.qti.assessment
    - builder.controller
"""

from __future__ import annotations

import re
import uuid
from typing import Dict, Tuple

# Fixed namespace for deterministic identifiers
IDENTIFIER_NAMESPACE = uuid.UUID("6f1d6c2e-4b7a-5d0e-9c35-2a8f0e1b7d44")

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


def sanitize_source_id(source_id: str) -> str:
    """Make a source id safe for use inside an identifier and a filename."""
    return _UNSAFE.sub("_", source_id.strip()).strip("_")


class IdentifierFactory:
    """
    Source of identifiers for one package.

    Example:
        >>> ids = IdentifierFactory(deterministic=True)
        >>> ids.new("item", "101") == IdentifierFactory(deterministic=True).new("item", "101")
        True
    """

    def __init__(self, deterministic: bool = False):
        self.deterministic = deterministic
        self._counts: Dict[Tuple[str, str], int] = {}

    def _suffix(self, prefix: str, source_id: str) -> str:
        if not self.deterministic:
            return str(uuid.uuid4())
        key = (prefix, source_id)
        occurrence = self._counts.get(key, 0)
        self._counts[key] = occurrence + 1
        return str(uuid.uuid5(IDENTIFIER_NAMESPACE, f"{prefix}:{source_id}:{occurrence}"))

    def new(self, prefix: str, source_id: str = "") -> str:
        """
        New identifier "<prefix>_<sourceId>_<uuid>" ("<prefix>_<uuid>"
        without a source id).
        """
        safe_id = sanitize_source_id(source_id)
        suffix = self._suffix(prefix, safe_id)
        if safe_id:
            return f"{prefix}_{safe_id}_{suffix}"
        return f"{prefix}_{suffix}"
