"""
Common test fixtures shared by all modules.

Provides factory functions for core atstdd data structures:
- Record / AttestationEntry / Batch
- Schema uids and recipient addresses

and in-memory ledger collaborators:
- FakeEstimator: linear cost model with configurable failure modes
- StaticCeiling: fixed resource ceiling that counts its queries
- FakeLedger: attester that folds submissions into its own vhash
"""

from typing import Any, Optional, Sequence

from core.attestations.chain import hash_entry
from core.crypto.hashing import ZERO_HASH
from core.ledger.interfaces import Estimate, SubmissionReceipt
from core.schemas.attestation import AttestationEntry, Batch, Record
from core.schemas.errors import LedgerException, ResourceExceededException


# =============================================================================
# Identifier Factories
# =============================================================================

def make_schema(n: int) -> str:
    """Deterministic 32-byte schema uid, e.g. make_schema(1) == 0x0101...01."""
    return "0x" + f"{n:02x}" * 32


def make_address(n: int) -> str:
    """Deterministic lowercase 20-byte address."""
    return "0x" + f"{n:02x}" * 20


# =============================================================================
# Record / Batch Factories
# =============================================================================

def make_record(
    schema: int = 1,
    recipient: Optional[int] = None,
    data: str = "0x",
) -> Record:
    """
    Create a Record for testing.

    Args:
        schema: Seed for the schema uid
        recipient: Seed for the recipient address (None = zero address)
        data: Payload hex
    """
    return Record(
        schema_uid=make_schema(schema),
        recipient=make_address(recipient) if recipient is not None else None,
        data=data,
    )


def make_entry(n: int) -> AttestationEntry:
    """Entry whose payload encodes ``n`` so entries are distinguishable."""
    return AttestationEntry(recipient=make_address((n % 250) + 1), data="0x" + f"{n:08x}")


def make_batch(schema: int = 1, size: int = 3, offset: int = 0) -> Batch:
    """Batch of ``size`` distinct entries under ``make_schema(schema)``."""
    return Batch(schema_uid=make_schema(schema), data=[make_entry(offset + i) for i in range(size)])


def make_collection(sizes: Sequence[int] = (3, 2, 4)) -> list[Batch]:
    """Collection with one batch per size, alternating two schemas, all entries distinct."""
    batches = []
    offset = 0
    for i, size in enumerate(sizes):
        batches.append(make_batch(schema=(i % 2) + 1, size=size, offset=offset))
        offset += size
    return batches


def flat(batches: Sequence[Batch]) -> list[tuple[str, AttestationEntry]]:
    """(schema, entry) pairs in collection order."""
    return [(b.schema_uid, e) for b in batches for e in b.data]


# =============================================================================
# Ledger Fakes
# =============================================================================

class FakeEstimator:
    """
    Cost = base + per_entry * len(entries).

    Failure modes:
        exceed_from: ranges of at least this many entries report exceeded
        raise_exceeded: report exceeded by raising ResourceExceededException
        error_on: ranges of exactly this many entries raise ``error``
    """

    def __init__(
        self,
        per_entry: int = 10,
        base: int = 0,
        *,
        exceed_from: Optional[int] = None,
        raise_exceeded: bool = False,
        error_on: Optional[int] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.per_entry = per_entry
        self.base = base
        self.exceed_from = exceed_from
        self.raise_exceeded = raise_exceeded
        self.error_on = error_on
        self.error = error or RuntimeError("node unavailable")
        self.calls: list[tuple[str, int]] = []

    async def estimate(self, schema_uid: str, entries: Sequence[AttestationEntry]) -> Estimate:
        self.calls.append((schema_uid, len(entries)))
        if self.error_on is not None and len(entries) == self.error_on:
            raise self.error
        if self.exceed_from is not None and len(entries) >= self.exceed_from:
            if self.raise_exceeded:
                raise ResourceExceededException()
            return Estimate.exceeded("exceeds block gas limit")
        return Estimate.fits(self.base + self.per_entry * len(entries))


class StaticCeiling:
    """Fixed ceiling; counts how often it is queried."""

    def __init__(self, ceiling: int) -> None:
        self.ceiling = ceiling
        self.queries = 0

    async def current_ceiling(self) -> int:
        self.queries += 1
        return self.ceiling


class FakeLedger:
    """
    In-memory attester.

    Submitting a batch folds its entries into ``vhash`` the way the contract
    does. ``fail_after`` makes the n-th and later submissions fail, to model
    an interrupted publish.
    """

    def __init__(
        self,
        vhash: str = ZERO_HASH,
        *,
        locked: bool = False,
        fail_after: Optional[int] = None,
    ) -> None:
        self.vhash = vhash
        self.locked = locked
        self.fail_after = fail_after
        self.submitted: list[Batch] = []

    async def current_commitment(self) -> str:
        return self.vhash

    async def is_locked(self) -> bool:
        return self.locked

    async def submit(self, batch: Batch) -> SubmissionReceipt:
        if self.locked:
            raise LedgerException("attester is locked")
        if self.fail_after is not None and len(self.submitted) >= self.fail_after:
            raise LedgerException("transaction dropped", retryable=True)
        for entry in batch.data:
            self.vhash = hash_entry(self.vhash, batch.schema_uid, entry)
        self.submitted.append(batch)
        n = len(self.submitted)
        return SubmissionReceipt(tx_hash="0x" + f"{n:064x}", block_number=n, gas_used=21_000)

    async def lock(self) -> SubmissionReceipt:
        self.locked = True
        return SubmissionReceipt(tx_hash="0x" + "ff" * 32, block_number=len(self.submitted) + 1)


__all__ = [
    "make_schema",
    "make_address",
    "make_record",
    "make_entry",
    "make_batch",
    "make_collection",
    "flat",
    "FakeEstimator",
    "StaticCeiling",
    "FakeLedger",
]
