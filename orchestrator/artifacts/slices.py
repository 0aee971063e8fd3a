"""
Module 09B - Slice Files
File: slices.py

Purpose: Save and load sliced batch collections to/from disk.

A slice file is a JSON document:

    {
        "format_version": "slices.v1",
        "created_at": "...",
        "entry_count": 101,
        "vhash": "0x...",       # commitment over the whole collection
        "batches": [ {"schema": ..., "data": [...]}, ... ]
    }

Batch and entry order are part of the commitment and are preserved exactly.
A bare JSON list of batches is also accepted on load.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.attestations.chain import count_entries, fold_commitment
from core.crypto.hashing import sha256, to_hex
from core.schemas.attestation import Batch, batches_from_wire, batches_to_wire
from core.schemas.canonical import dumps_canonical, loads_canonical
from core.schemas.errors import WellFormednessException
from core.schemas.primitives import normalize_bytes32
from core.schemas.versioning import (
    SLICE_FORMAT_VERSION,
    assert_supported_format_version,
)


class SliceFileError(Exception):
    """Error during slice file IO."""
    pass


class SliceFileIntegrityError(SliceFileError):
    """Recorded commitment does not match the batches in the file."""
    def __init__(self, path: str, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Verification hash mismatch in {path}: recorded {expected}, computed {actual}")


@dataclass
class SliceFile:
    """A sliced collection together with its recorded commitment."""
    batches: list[Batch] = field(default_factory=list)
    vhash: str = ""
    entry_count: int = 0
    format_version: str = SLICE_FORMAT_VERSION
    created_at: str | None = None

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc).isoformat()
        if not self.vhash:
            self.vhash = fold_commitment(self.batches)
        if not self.entry_count:
            self.entry_count = count_entries(self.batches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "format_version": self.format_version,
            "created_at": self.created_at,
            "entry_count": self.entry_count,
            "vhash": self.vhash,
            "batches": batches_to_wire(self.batches),
        }


def save_slices(batches: list[Batch], path: str | Path) -> SliceFile:
    """
    Write a sliced collection to ``path`` atomically.

    Returns:
        The SliceFile that was written (with its computed vhash)
    """
    out_path = Path(path)
    if out_path.parent and not out_path.parent.exists():
        out_path.parent.mkdir(parents=True, exist_ok=True)

    slice_file = SliceFile(batches=list(batches))
    content = dumps_canonical(slice_file.to_dict(), indent=2).encode("utf-8")

    fd, tmp_name = tempfile.mkstemp(dir=str(out_path.parent), prefix=".slices-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.replace(tmp_name, out_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    return slice_file


def load_slices(path: str | Path, *, verify_hash: bool = True) -> SliceFile:
    """
    Read a slice file.

    Args:
        path: File to read
        verify_hash: Re-derive the commitment and compare it with the
            recorded one

    Raises:
        SliceFileError: If the file is missing or not valid JSON
        UnsupportedFormatVersionError: If the format version is unknown
        SliceFileIntegrityError: If the recorded vhash does not match
        WellFormednessException: If a batch or entry is malformed
    """
    in_path = Path(path)
    if not in_path.exists():
        raise SliceFileError(f"Slice file not found: {in_path}")

    try:
        raw = loads_canonical(in_path.read_bytes().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SliceFileError(f"Slice file is not valid JSON: {in_path}: {e}") from e

    if isinstance(raw, list):
        batches = batches_from_wire(raw)
        return SliceFile(batches=batches)

    if not isinstance(raw, dict) or "batches" not in raw:
        raise SliceFileError(f"Slice file has no batches: {in_path}")

    assert_supported_format_version(raw.get("format_version", SLICE_FORMAT_VERSION))
    batches = batches_from_wire(raw["batches"])
    computed = fold_commitment(batches)
    try:
        recorded = normalize_bytes32(raw.get("vhash") or computed, field="vhash")
    except WellFormednessException as e:
        raise SliceFileError(f"Slice file has a malformed vhash: {in_path}: {e.message}") from e

    if verify_hash and recorded != computed:
        raise SliceFileIntegrityError(str(in_path), recorded, computed)

    return SliceFile(
        batches=batches,
        vhash=computed,
        entry_count=count_entries(batches),
        format_version=raw.get("format_version", SLICE_FORMAT_VERSION),
        created_at=raw.get("created_at"),
    )


def fingerprint(path: str | Path) -> str:
    """SHA-256 of the file bytes, for logs and status output."""
    return to_hex(sha256(Path(path).read_bytes()))


__all__ = [
    "SliceFile",
    "SliceFileError",
    "SliceFileIntegrityError",
    "save_slices",
    "load_slices",
    "fingerprint",
]
