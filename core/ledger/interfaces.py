"""
Module 05 - Ledger Interfaces

Collaborators the core consumes but never implements. The web3 client in
``core.ledger.attester`` satisfies all four; tests use in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from core.schemas.attestation import AttestationEntry, Batch


@dataclass(frozen=True)
class Estimate:
    """Outcome of one cost probe."""
    cost: int | None = None
    is_exceeded: bool = False
    reason: str = ""

    @classmethod
    def fits(cls, cost: int) -> "Estimate":
        return cls(cost=int(cost))

    @classmethod
    def exceeded(cls, reason: str = "") -> "Estimate":
        return cls(is_exceeded=True, reason=reason)

    def under(self, limit: int) -> bool:
        """True iff the probed range fits strictly below ``limit``."""
        return not self.is_exceeded and self.cost is not None and self.cost < limit


@runtime_checkable
class CostEstimator(Protocol):
    """Estimates the cost of submitting (schema, entries) in one call."""

    async def estimate(self, schema_uid: str, entries: Sequence["AttestationEntry"]) -> Estimate | int:
        ...


@runtime_checkable
class CeilingProvider(Protocol):
    """Reports the current per-submission resource ceiling."""

    async def current_ceiling(self) -> int:
        ...


@runtime_checkable
class CommitmentReader(Protocol):
    """Reads the verification hash currently recorded on the ledger."""

    async def current_commitment(self) -> str:
        ...


@runtime_checkable
class LockReader(Protocol):
    """Reports whether the attester accepts no further submissions."""

    async def is_locked(self) -> bool:
        ...


@dataclass
class SubmissionReceipt:
    """Result of one confirmed submission."""
    tx_hash: str
    block_number: int | None = None
    gas_used: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class SubmissionSink(Protocol):
    """Accepts one batch at a time and confirms it."""

    async def submit(self, batch: "Batch") -> SubmissionReceipt:
        ...


__all__ = [
    "Estimate",
    "CostEstimator",
    "CeilingProvider",
    "CommitmentReader",
    "LockReader",
    "SubmissionReceipt",
    "SubmissionSink",
]
