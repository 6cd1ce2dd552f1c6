"""
Merger module.

Writes generated regions into new or existing modules, preserving
everything outside the generation markers.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, validate_python
from .base import FILE_MARKER, REGION_START_MARKER, REGION_STOP_MARKER, CodeMergeError
from .marker_merger import MarkerMerger
from .scanner import ArtifactScanner, read_text

__all__ = [
    "AtomicWriter",
    "ArtifactScanner",
    "CodeMergeError",
    "MarkerMerger",
    "FILE_MARKER",
    "REGION_START_MARKER",
    "REGION_STOP_MARKER",
    "read_text",
    "validate_python",
]
