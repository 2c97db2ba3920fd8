"""
Module: builder.config

Purpose:
    Configuration dataclass for package generation. Immutable
    configuration with validation on construction.

Key Classes:
    - PackageConfig: Main configuration for building QTI packages

Dependencies:
    - dataclasses (std)

Used By:
    - builder.controller: Package generation
    - cli: convert/build commands
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TITLE = "Assessment"


@dataclass(frozen=True)
class PackageConfig:
    """
    Configuration for generating a QTI package (immutable).

    Attributes:
        title: Assessment title (manifest LOM title and assessmentTest title)
        shuffle_answers: Let the delivery system shuffle choices
        include_metadata: Add profile/statistics keywords to item resources
        deterministic_identifiers: Derive identifier suffixes from content
            so repeated runs produce identical packages
        expected_length: expectedLength of SAQ text interactions

    Example:
        >>> config = PackageConfig(title="Cardiology 2024", shuffle_answers=True)
    """
    title: str = DEFAULT_TITLE
    shuffle_answers: bool = False
    include_metadata: bool = False
    deterministic_identifiers: bool = False
    expected_length: int = 500

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.title or not self.title.strip():
            raise ValueError("title must not be empty")
        if self.expected_length <= 0:
            raise ValueError(f"expected_length must be positive: {self.expected_length}")
