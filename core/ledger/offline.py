"""
Module 05 - Offline Ledger Stand-ins

Count-based estimation for dry runs that slice without a node: each entry
costs one unit and the ceiling admits at most ``max_entries`` per slice
(use with a zero margin).
"""

from __future__ import annotations

from typing import Sequence

from core.schemas.attestation import AttestationEntry
from core.schemas.errors import WellFormednessException

from .interfaces import Estimate


class EntryCountEstimator:
    """Cost = number of entries; anything over ``max_entries`` is exceeded."""

    def __init__(self, max_entries: int) -> None:
        if max_entries < 1:
            raise WellFormednessException(
                f"Offline slice limit must be at least 1, got {max_entries}",
                field_path="max_entries",
            )
        self.max_entries = max_entries

    async def estimate(self, schema_uid: str, entries: Sequence[AttestationEntry]) -> Estimate:
        if len(entries) > self.max_entries:
            return Estimate.exceeded(f"{len(entries)} entries over offline limit {self.max_entries}")
        return Estimate.fits(len(entries))

    async def current_ceiling(self) -> int:
        # Costs must be strictly below the ceiling
        return self.max_entries + 1


__all__ = ["EntryCountEstimator"]
