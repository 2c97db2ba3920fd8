"""Shared utilities used by both the extractor and the builder."""

from .timing import TimingLog, timed_phase

__all__ = ["TimingLog", "timed_phase"]
