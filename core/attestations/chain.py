"""
Module 04 - Verification Hash Chain
Hasher, Verifier and Rehasher over ordered batch collections.

Commitment Rules (Hard Contracts):
1. Genesis: the zero bytes32 value means nothing has been committed
2. Step: vhash' = keccak256(abi.encode(bytes32 vhash, bytes32 schema,
   (address,uint64,bool,bytes32,bytes,uint256) entry))
3. Order: batch order, then entry order inside each batch. Batch
   boundaries carry no meaning, only the flattened entry order does
4. The chain is a strict left fold; step k needs step k-1

The same encoding is used on-ledger by the VerifiableAttester contract,
so a collection verifies against the contract's ``$vhash`` bit-for-bit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from eth_abi import encode

from core.crypto.hashing import ZERO_HASH, from_hex, keccak256, to_hex
from core.schemas.attestation import ENTRY_ABI_TYPE, AttestationEntry, Batch
from core.schemas.errors import IntegrityMismatchException
from core.schemas.primitives import normalize_bytes32


logger = logging.getLogger(__name__)

_STEP_TYPES = ["bytes32", "bytes32", ENTRY_ABI_TYPE]


@dataclass(frozen=True)
class ChainPosition:
    """Running commitment after folding one entry."""
    batch_index: int
    entry_index: int
    offset: int  # 0-based position in the flattened entry sequence
    commitment: str


def _step(prior: bytes, schema: bytes, entry: AttestationEntry) -> bytes:
    return keccak256(encode(_STEP_TYPES, [prior, schema, entry.as_abi_tuple()]))


def hash_entry(prior: str | bytes, schema_uid: str | bytes, entry: AttestationEntry) -> str:
    """
    Fold one entry into a verification hash.

    Args:
        prior: Previous commitment (ZERO_HASH for the first entry)
        schema_uid: Schema of the batch the entry belongs to
        entry: The attestation entry

    Returns:
        New commitment as lowercase 0x hex

    Raises:
        WellFormednessException: If prior or schema_uid is not 32 bytes
    """
    prior_raw = from_hex(normalize_bytes32(prior, field="prior"))
    schema_raw = from_hex(normalize_bytes32(schema_uid, field="schema"))
    return to_hex(_step(prior_raw, schema_raw, entry))


def iter_commitments(
    batches: Sequence[Batch],
    prior: str | bytes = ZERO_HASH,
) -> Iterator[ChainPosition]:
    """Yield the running commitment after every entry, in collection order."""
    computed = from_hex(normalize_bytes32(prior, field="prior"))
    offset = 0
    for batch_index, batch in enumerate(batches):
        schema = from_hex(batch.schema_uid)
        for entry_index, entry in enumerate(batch.data):
            computed = _step(computed, schema, entry)
            yield ChainPosition(batch_index, entry_index, offset, to_hex(computed))
            offset += 1


def fold_commitment(batches: Sequence[Batch], prior: str | bytes = ZERO_HASH) -> str:
    """Commitment over the whole collection (ZERO_HASH if it is empty)."""
    computed = normalize_bytes32(prior, field="prior")
    for position in iter_commitments(batches, prior):
        computed = position.commitment
    return computed


def count_entries(batches: Sequence[Batch]) -> int:
    return sum(len(b.data) for b in batches)


def flatten(batches: Sequence[Batch]) -> list[tuple[str, AttestationEntry]]:
    """(schema, entry) pairs in commitment order."""
    return [(b.schema_uid, e) for b in batches for e in b.data]


def verify(target: str | bytes, batches: Sequence[Batch]) -> bool:
    """
    Check a collection against a claimed verification hash.

    Returns:
        True iff folding every entry from genesis yields ``target``
    """
    expected = normalize_bytes32(target, field="vhash")
    computed = fold_commitment(batches)
    if computed != expected:
        logger.debug(f"Verification hash mismatch: expected {expected}, computed {computed}")
        return False
    return True


def locate_commitment(target: str | bytes, batches: Sequence[Batch]) -> int | None:
    """
    Number of leading entries already reflected in ``target``.

    Returns 0 for genesis, None when ``target`` matches no prefix.
    """
    expected = normalize_bytes32(target, field="vhash")
    for position in iter_commitments(batches):
        if position.commitment == expected:
            return position.offset + 1
    if expected == ZERO_HASH:
        return 0
    return None


def rehash(target: str | bytes, batches: Sequence[Batch]) -> list[Batch]:
    """
    Drop the prefix of entries already reflected in a partial commitment.

    Entries after the first position whose running commitment equals
    ``target`` are kept, regrouped under their original schema; batches
    left empty are dropped. Truncation may split a batch.

    Args:
        target: Commitment currently recorded on the ledger
        batches: Full collection in publication order

    Returns:
        The unpublished remainder. The input collection itself when
        ``target`` is genesis and never matched.

    Raises:
        IntegrityMismatchException: If ``target`` is not genesis and
            matches no prefix of the collection
    """
    expected = normalize_bytes32(target, field="vhash")
    rehashed: list[Batch] = []
    computed = from_hex(ZERO_HASH)
    found = False

    for batch in batches:
        schema = from_hex(batch.schema_uid)
        kept: list[AttestationEntry] = []
        for entry in batch.data:
            if found:
                kept.append(entry)
                continue
            computed = _step(computed, schema, entry)
            if to_hex(computed) == expected:
                found = True
        if kept:
            rehashed.append(Batch(schema_uid=batch.schema_uid, data=kept))

    if not found:
        if expected == ZERO_HASH:
            return list(batches)
        raise IntegrityMismatchException(
            "verification hash mismatch: ledger commitment matches no prefix of the local records",
            expected=expected,
            computed=to_hex(computed),
        )

    logger.debug(
        f"Rehashed collection: {count_entries(rehashed)} of {count_entries(batches)} entries remain"
    )
    return rehashed


__all__ = [
    "ChainPosition",
    "hash_entry",
    "iter_commitments",
    "fold_commitment",
    "count_entries",
    "flatten",
    "verify",
    "locate_commitment",
    "rehash",
]
