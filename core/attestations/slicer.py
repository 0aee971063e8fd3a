"""
Module 03 - Slicer

Cuts a batch into the fewest ordered sub-batches whose estimated
submission cost stays strictly under ``ceiling - margin``.

The search is an explicit state machine:

    SEARCHING      binary search over end indices for the unprocessed suffix
    SLICE_EMITTED  a non-empty slice [start, end) was appended, start = end
    DONE           start reached the end of the batch

Every emitted slice is non-empty, so ``start`` strictly increases and the
loop terminates. When not even one entry fits, the call fails with
UnsliceableEntryException instead of emitting an empty or over-ceiling slice.

Estimators report "does not fit" through a typed result
(``Estimate.exceeded``) or by raising ResourceExceededException. Any other
exception aborts the whole call unchanged; no partial result is returned.
"""

from __future__ import annotations

import enum
import logging
from typing import Sequence

from core.ledger.interfaces import CeilingProvider, CostEstimator, Estimate
from core.schemas.attestation import AttestationEntry, Batch
from core.schemas.errors import (
    ResourceExceededException,
    UnsliceableEntryException,
    WellFormednessException,
)


logger = logging.getLogger(__name__)

# Headroom kept below the block gas limit
DEFAULT_GAS_MARGIN = 100_000


class SliceState(str, enum.Enum):
    SEARCHING = "searching"
    SLICE_EMITTED = "slice_emitted"
    DONE = "done"


class _SliceMachine:
    """Iteration state carried across probes for one batch."""

    def __init__(self, batch: Batch) -> None:
        self.batch = batch
        self.start = 0
        self.lo = 0
        self.hi = 0
        self.best = 0
        self.slices: list[Batch] = []
        self.state = SliceState.DONE if not batch.data else SliceState.SEARCHING
        if self.state is SliceState.SEARCHING:
            self._reset_search()

    @property
    def total(self) -> int:
        return len(self.batch.data)

    def _reset_search(self) -> None:
        # Candidate ends are start+1..total; best=start means nothing fits yet
        self.lo = self.start + 1
        self.hi = self.total
        self.best = self.start

    def searching(self) -> bool:
        return self.lo <= self.hi

    def probe(self) -> int:
        return (self.lo + self.hi) // 2

    def record(self, mid: int, fits: bool) -> None:
        if fits:
            self.best = mid
            self.lo = mid + 1
        else:
            self.hi = mid - 1

    def emit(self) -> Batch:
        if self.best == self.start:
            raise UnsliceableEntryException(
                f"Entry {self.start} of schema {self.batch.schema_uid} does not fit under the ceiling on its own",
                schema=self.batch.schema_uid,
                index=self.start,
            )
        piece = self.batch.window(self.start, self.best)
        self.slices.append(piece)
        self.start = self.best
        self.state = SliceState.SLICE_EMITTED
        return piece

    def advance(self) -> None:
        if self.start >= self.total:
            self.state = SliceState.DONE
        else:
            self.state = SliceState.SEARCHING
            self._reset_search()


async def _probe(
    estimator: CostEstimator,
    schema_uid: str,
    entries: Sequence[AttestationEntry],
    limit: int,
) -> bool:
    try:
        estimate = await estimator.estimate(schema_uid, entries)
    except ResourceExceededException as e:
        logger.debug(f"Estimator reported resource exceeded for {len(entries)} entries: {e.message}")
        return False
    if not isinstance(estimate, Estimate):
        estimate = Estimate.fits(estimate)
    return estimate.under(limit)


def effective_limit(ceiling: int, margin: int) -> int:
    """Ceiling minus safety margin; must leave a positive budget."""
    if margin < 0:
        raise WellFormednessException(f"Gas margin must be non-negative, got {margin}", field_path="margin")
    limit = int(ceiling) - int(margin)
    if limit <= 0:
        raise WellFormednessException(
            f"Ceiling {ceiling} leaves no room under margin {margin}",
            details={"ceiling": int(ceiling), "margin": int(margin)},
        )
    return limit


async def slice_batch(
    batch: Batch,
    estimator: CostEstimator,
    ceiling: int,
    *,
    margin: int = DEFAULT_GAS_MARGIN,
) -> list[Batch]:
    """
    Partition one batch into sub-batches that fit under ``ceiling - margin``.

    Args:
        batch: The batch to slice
        estimator: Async cost estimator for (schema, entries) ranges
        ceiling: Resource ceiling captured for this invocation
        margin: Safety margin subtracted from the ceiling

    Returns:
        Sub-batches of the same schema whose entries, concatenated,
        are exactly ``batch.data``

    Raises:
        UnsliceableEntryException: If a single entry cannot fit
        Exception: Any non-classified estimator failure, unchanged
    """
    limit = effective_limit(ceiling, margin)
    machine = _SliceMachine(batch)

    while machine.state is not SliceState.DONE:
        while machine.searching():
            mid = machine.probe()
            window = batch.data[machine.start:mid]
            machine.record(mid, await _probe(estimator, batch.schema_uid, window, limit))

        piece = machine.emit()
        logger.debug(
            f"Slice {len(machine.slices)} for schema {batch.schema_uid}: "
            f"{len(piece.data)} entries (through index {machine.start - 1})"
        )
        machine.advance()

    return machine.slices


class Slicer:
    """
    Slices batches against a live ceiling.

    The ceiling is fetched once per ``slice``/``slice_all`` call and reused
    for every probe in that call. A ceiling that drops mid-call can only make
    the result suboptimal, never over the captured limit.
    """

    def __init__(
        self,
        estimator: CostEstimator,
        ceiling_provider: CeilingProvider,
        *,
        margin: int = DEFAULT_GAS_MARGIN,
    ) -> None:
        self.estimator = estimator
        self.ceiling_provider = ceiling_provider
        self.margin = margin

    async def slice(self, batch: Batch) -> list[Batch]:
        ceiling = await self.ceiling_provider.current_ceiling()
        return await slice_batch(batch, self.estimator, ceiling, margin=self.margin)

    async def slice_all(self, batches: Sequence[Batch]) -> list[Batch]:
        """Slice every batch in order; output order follows input order."""
        ceiling = await self.ceiling_provider.current_ceiling()
        logger.info(f"Slicing {len(batches)} batches under ceiling {ceiling} (margin {self.margin})")

        sliced: list[Batch] = []
        for batch in batches:
            sliced.extend(await slice_batch(batch, self.estimator, ceiling, margin=self.margin))

        logger.info(f"Computed {len(sliced)} slices")
        return sliced


__all__ = [
    "DEFAULT_GAS_MARGIN",
    "Estimate",
    "SliceState",
    "Slicer",
    "effective_limit",
    "slice_batch",
]
