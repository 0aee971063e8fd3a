"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize persisted-format version constants.
Kept import-free so every other schema file can depend on it.
"""

from typing import Literal

# Current slice file format
SLICE_FORMAT_VERSION: str = "slices.v1"

# Type alias for slice format version (future-proof for migrations)
SliceFormatVersion = Literal["slices.v1"]

SUPPORTED_SLICE_FORMATS: frozenset[str] = frozenset({"slices.v1"})


class UnsupportedFormatVersionError(ValueError):
    """Raised when a persisted file declares an unknown format version."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_SLICE_FORMATS
        super().__init__(
            f"Unsupported format version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_format_version(version: str) -> None:
    """
    Validate that the given slice file format version is supported.

    Raises:
        UnsupportedFormatVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_SLICE_FORMATS:
        raise UnsupportedFormatVersionError(version)
