"""
Module 09A - Publication Workflow

Composes packing, slicing, rehashing and submission into the resumable
publish flow, and the final lock + commitment verification.

Key features:
- The ledger commitment is read fresh before every publish and verify
- Publishing resumes after the last confirmed entry; nothing is resubmitted
- Batches are submitted one at a time, each confirmed before the next
- Integrity mismatches stop publication before anything is sent
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from core.attestations.chain import count_entries, fold_commitment, locate_commitment, rehash
from core.attestations.packer import pack
from core.attestations.slicer import DEFAULT_GAS_MARGIN, Slicer
from core.crypto.hashing import ZERO_HASH
from core.ledger.interfaces import (
    CeilingProvider,
    CommitmentReader,
    CostEstimator,
    LockReader,
    SubmissionReceipt,
    SubmissionSink,
)
from core.schemas.attestation import Batch, Record
from core.schemas.errors import LedgerException
from core.schemas.primitives import normalize_bytes32
from core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

OnSubmitted = Callable[[int, int, Batch, SubmissionReceipt], Any]


# =============================================================================
# Results
# =============================================================================

@dataclass
class PublishPlan:
    """What remains to be published against a given ledger commitment."""
    vhash: str
    remaining: list[Batch]
    fresh: bool
    consumed: int = 0

    @property
    def remaining_entries(self) -> int:
        return count_entries(self.remaining)

    @property
    def complete(self) -> bool:
        return not self.remaining

    def to_dict(self) -> dict[str, Any]:
        return {
            "vhash": self.vhash,
            "fresh": self.fresh,
            "consumed_entries": self.consumed,
            "remaining_entries": self.remaining_entries,
            "remaining_slices": len(self.remaining),
        }


@dataclass
class PublishReport:
    """Outcome of one publish run."""
    plan: PublishPlan
    receipts: list[SubmissionReceipt] = field(default_factory=list)
    ok: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def submitted(self) -> int:
        return len(self.receipts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "submitted": self.submitted,
            "tx_hashes": [r.tx_hash for r in self.receipts],
            "errors": self.errors,
            **self.plan.to_dict(),
        }


def check_commitment(expected: str, batches: Sequence[Batch]) -> CheckResult:
    """Compare a claimed commitment with the one folded from ``batches``."""
    expected = normalize_bytes32(expected, field="vhash")
    computed = fold_commitment(batches)
    details = {
        "expected": expected,
        "computed": computed,
        "entry_count": count_entries(batches),
    }
    if computed == expected:
        return CheckResult.passed("vhash_match", "Verification hash matches", details)
    return CheckResult.failed("vhash_match", "verification hash mismatch", details)


def plan_against(vhash: str, batches: Sequence[Batch]) -> PublishPlan:
    """
    Work out the unpublished remainder for a known commitment.

    Raises:
        IntegrityMismatchException: If ``vhash`` is not genesis and matches
            no prefix of ``batches``
    """
    vhash = normalize_bytes32(vhash, field="vhash")
    remaining = rehash(vhash, batches)
    consumed = locate_commitment(vhash, batches) or 0
    fresh = consumed == 0 and vhash == ZERO_HASH
    return PublishPlan(vhash=vhash, remaining=remaining, fresh=fresh, consumed=consumed)


# =============================================================================
# Publisher
# =============================================================================

class Publisher:
    """
    Runs the publish workflow against ledger collaborators.

    Any collaborator may be omitted when the operations that need it are not
    used (e.g. ``verify`` needs only the reader and lock reader).
    """

    def __init__(
        self,
        *,
        estimator: Optional[CostEstimator] = None,
        ceiling_provider: Optional[CeilingProvider] = None,
        reader: Optional[CommitmentReader] = None,
        sink: Optional[SubmissionSink] = None,
        lock_reader: Optional[LockReader] = None,
        margin: int = DEFAULT_GAS_MARGIN,
    ) -> None:
        self.estimator = estimator
        self.ceiling_provider = ceiling_provider
        self.reader = reader
        self.sink = sink
        self.lock_reader = lock_reader
        self.margin = margin

    @classmethod
    def for_client(cls, client: Any, *, margin: int = DEFAULT_GAS_MARGIN) -> "Publisher":
        """Use one object (e.g. VerifiableAttesterClient) for every role."""
        return cls(
            estimator=client,
            ceiling_provider=client,
            reader=client,
            sink=client,
            lock_reader=client,
            margin=margin,
        )

    def _require(self, name: str) -> Any:
        collaborator = getattr(self, name)
        if collaborator is None:
            raise LedgerException(f"Publisher has no {name} configured")
        return collaborator

    async def prepare_slices(self, records: Iterable[Record]) -> list[Batch]:
        """Pack records and slice the batches under the live ceiling."""
        batches = pack(records)
        slicer = Slicer(
            self._require("estimator"),
            self._require("ceiling_provider"),
            margin=self.margin,
        )
        return await slicer.slice_all(batches)

    async def plan(self, batches: Sequence[Batch]) -> PublishPlan:
        """Read the ledger commitment and compute what is left to publish."""
        vhash = await self._require("reader").current_commitment()
        plan = plan_against(vhash, batches)
        if plan.fresh:
            logger.info("Nothing published yet, starting from genesis")
        else:
            logger.info(
                f"Ledger commitment covers {plan.consumed} entries, "
                f"{plan.remaining_entries} entries in {len(plan.remaining)} slices remain"
            )
        return plan

    async def publish(
        self,
        batches: Sequence[Batch],
        on_submitted: Optional[OnSubmitted] = None,
    ) -> PublishReport:
        """
        Submit every unpublished batch, one confirmed transaction at a time.

        Raises:
            IntegrityMismatchException: If the ledger commitment does not
                match the local collection (nothing is submitted)
            LedgerException: If a submission fails; earlier confirmed
                submissions stand and a rerun resumes after them
        """
        sink = self._require("sink")
        plan = await self.plan(batches)
        report = PublishReport(plan=plan)

        total = len(plan.remaining)
        for index, batch in enumerate(plan.remaining):
            logger.info(f"Sending attest transaction {index + 1} of {total} ({len(batch.data)} entries)")
            receipt = await sink.submit(batch)
            report.receipts.append(receipt)
            logger.info(f"Confirmed {receipt.tx_hash}")
            if on_submitted is not None:
                on_submitted(index, total, batch, receipt)

        report.ok = True
        return report

    async def verify(self, batches: Sequence[Batch], require_locked: bool = True) -> VerificationResult:
        """
        Check the ledger against the local collection.

        Checks:
        - contract_locked: the attester accepts no more submissions
        - vhash_match: the ledger commitment equals the full-collection fold
        """
        result = VerificationResult.success()

        if require_locked:
            locked = await self._require("lock_reader").is_locked()
            if locked:
                result.add_check(CheckResult.passed("contract_locked", "Contract is locked"))
            else:
                result.add_check(CheckResult.failed("contract_locked", "contract not locked"))

        vhash = await self._require("reader").current_commitment()
        result.add_check(check_commitment(vhash, batches))
        return result


__all__ = [
    "OnSubmitted",
    "PublishPlan",
    "PublishReport",
    "Publisher",
    "check_commitment",
    "plan_against",
]
