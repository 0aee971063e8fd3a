"""
Attestation batching, slicing and verification-hash chain.

Usage:
    from core.attestations import pack, Slicer, verify, rehash

    batches = pack(records)
    sliced = await Slicer(client, client).slice_all(batches)

    remaining = rehash(await client.current_commitment(), sliced)
    assert verify(final_vhash, sliced)
"""
from .packer import pack
from .slicer import (
    DEFAULT_GAS_MARGIN,
    Estimate,
    SliceState,
    Slicer,
    effective_limit,
    slice_batch,
)
from .chain import (
    ChainPosition,
    count_entries,
    flatten,
    fold_commitment,
    hash_entry,
    iter_commitments,
    locate_commitment,
    rehash,
    verify,
)

__all__ = [
    "pack",
    "DEFAULT_GAS_MARGIN",
    "Estimate",
    "SliceState",
    "Slicer",
    "effective_limit",
    "slice_batch",
    "ChainPosition",
    "count_entries",
    "flatten",
    "fold_commitment",
    "hash_entry",
    "iter_commitments",
    "locate_commitment",
    "rehash",
    "verify",
]
