"""
Module 09B - Slice Files

Provides functionality for saving, loading, and validating slice files.
"""

from orchestrator.artifacts.slices import (
    SliceFile,
    SliceFileError,
    SliceFileIntegrityError,
    fingerprint,
    load_slices,
    save_slices,
)

__all__ = [
    "SliceFile",
    "SliceFileError",
    "SliceFileIntegrityError",
    "fingerprint",
    "load_slices",
    "save_slices",
]
