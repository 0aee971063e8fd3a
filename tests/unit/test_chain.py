"""
Module 04 - Verification Hash Chain Tests

Tests for core/attestations/chain.py:
1. The fold matches the contract's abi.encode / keccak256 step
2. verify() accepts exactly the committed collection
3. rehash() drops exactly the committed prefix, at entry granularity
4. Unknown non-genesis commitments are integrity failures
"""

import asyncio

import pytest
from eth_abi import encode

from core.attestations import (
    count_entries,
    flatten,
    fold_commitment,
    hash_entry,
    iter_commitments,
    locate_commitment,
    pack,
    rehash,
    slice_batch,
    verify,
)
from core.crypto.hashing import ZERO_HASH, from_hex, keccak256, to_hex
from core.schemas.attestation import Batch
from core.schemas.errors import IntegrityMismatchException, WellFormednessException
from fixtures.common import (
    FakeEstimator,
    flat,
    make_batch,
    make_collection,
    make_entry,
    make_record,
    make_schema,
)

STEP_TYPES = ["bytes32", "bytes32", "(address,uint64,bool,bytes32,bytes,uint256)"]


def _manual_fold(pairs):
    vhash = b"\x00" * 32
    for schema, entry in pairs:
        vhash = keccak256(encode(STEP_TYPES, [vhash, from_hex(schema), entry.as_abi_tuple()]))
    return to_hex(vhash)


def _prefix_commitments(batches):
    return [ZERO_HASH] + [p.commitment for p in iter_commitments(batches)]


class TestHashEntry:
    """Single fold step."""

    def test_matches_abi_encoding(self):
        entry = make_entry(1)
        expected = keccak256(encode(STEP_TYPES, [b"\x00" * 32, b"\x01" * 32, entry.as_abi_tuple()]))

        assert hash_entry(ZERO_HASH, make_schema(1), entry) == to_hex(expected)

    def test_schema_is_part_of_step(self):
        entry = make_entry(1)

        assert hash_entry(ZERO_HASH, make_schema(1), entry) != hash_entry(ZERO_HASH, make_schema(2), entry)

    def test_accepts_raw_bytes(self):
        entry = make_entry(2)

        assert hash_entry(b"\x00" * 32, b"\x01" * 32, entry) == hash_entry(ZERO_HASH, make_schema(1), entry)

    def test_bad_prior_rejected(self):
        with pytest.raises(WellFormednessException):
            hash_entry("0x00", make_schema(1), make_entry(0))


class TestFold:
    """Folding whole collections."""

    def test_empty_collection_is_genesis(self):
        assert fold_commitment([]) == ZERO_HASH
        assert fold_commitment([Batch(schema_uid=make_schema(1))]) == ZERO_HASH

    def test_matches_manual_fold(self, collection):
        assert fold_commitment(collection) == _manual_fold(flat(collection))

    def test_batch_boundaries_do_not_matter(self):
        whole = [make_batch(schema=1, size=3)]
        split = [whole[0].window(0, 1), whole[0].window(1, 3)]

        assert fold_commitment(whole) == fold_commitment(split)

    def test_order_matters(self):
        batch = make_batch(size=2)
        swapped = Batch(schema_uid=batch.schema_uid, data=list(reversed(batch.data)))

        assert fold_commitment([batch]) != fold_commitment([swapped])

    def test_positions(self, collection):
        positions = list(iter_commitments(collection))

        assert len(positions) == count_entries(collection) == 9
        assert [p.offset for p in positions] == list(range(9))
        assert (positions[3].batch_index, positions[3].entry_index) == (1, 0)

    def test_flatten(self, collection):
        assert flatten(collection) == flat(collection)


class TestVerify:
    """Tests for verify()."""

    def test_round_trip(self, collection):
        assert verify(fold_commitment(collection), collection) is True

    def test_empty_collection_verifies_against_genesis(self):
        assert verify(ZERO_HASH, []) is True

    def test_missing_entry_fails(self, collection):
        vhash = fold_commitment(collection)
        shortened = collection[:-1] + [collection[-1].window(0, 3)]

        assert verify(vhash, shortened) is False

    def test_reordered_batches_fail(self, collection):
        vhash = fold_commitment(collection)

        assert verify(vhash, list(reversed(collection))) is False

    def test_malformed_target_rejected(self, collection):
        with pytest.raises(WellFormednessException):
            verify("0x1234", collection)


class TestRehash:
    """Tests for rehash() and locate_commitment()."""

    def test_every_prefix(self, collection):
        pairs = flat(collection)

        for k, target in enumerate(_prefix_commitments(collection)):
            remaining = rehash(target, collection)
            assert flat(remaining) == pairs[k:], f"prefix {k}"
            assert locate_commitment(target, collection) == k

    def test_genesis_returns_input(self, collection):
        assert rehash(ZERO_HASH, collection) == collection

    def test_fully_published_is_empty(self, collection):
        assert rehash(fold_commitment(collection), collection) == []

    def test_split_keeps_schema(self):
        collection = make_collection((4,))
        target = _prefix_commitments(collection)[1]

        remaining = rehash(target, collection)

        assert len(remaining) == 1
        assert remaining[0].schema_uid == collection[0].schema_uid
        assert remaining[0].data == collection[0].data[1:]

    def test_emptied_batches_dropped(self, collection):
        """Committing through the end of batch 0 leaves batches 1 and 2 intact."""
        target = _prefix_commitments(collection)[3]

        assert rehash(target, collection) == collection[1:]

    def test_unknown_commitment_is_integrity_failure(self, collection):
        foreign = "0x" + "ab" * 32

        with pytest.raises(IntegrityMismatchException) as exc_info:
            rehash(foreign, collection)

        assert exc_info.value.details["expected"] == foreign
        assert exc_info.value.details["computed"] == fold_commitment(collection)
        assert locate_commitment(foreign, collection) is None

    def test_rehash_then_verify(self, collection):
        """Publishing the remainder on top of the partial commitment completes the chain."""
        target = _prefix_commitments(collection)[5]
        remaining = rehash(target, collection)

        assert fold_commitment(remaining, prior=target) == fold_commitment(collection)
        assert verify(fold_commitment(remaining, prior=target), collection)


class TestScenarios:
    """Packing, slicing and hashing three records over two schemas."""

    def _records(self):
        return [
            make_record(schema=0xA, recipient=1, data="0x01"),
            make_record(schema=0xB, recipient=2, data="0x02"),
            make_record(schema=0xA, recipient=3, data="0x03"),
        ]

    def test_pack_and_slice(self):
        batch_a, batch_b = pack(self._records())
        assert [e.data for e in batch_a.data] == ["0x01", "0x03"]
        assert [e.data for e in batch_b.data] == ["0x02"]

        whole = asyncio.run(slice_batch(batch_a, FakeEstimator(per_entry=1), 1_000, margin=0))
        assert whole == [batch_a]

        singles = asyncio.run(slice_batch(batch_a, FakeEstimator(exceed_from=2), 1_000, margin=0))
        assert [[e.data for e in s.data] for s in singles] == [["0x01"], ["0x03"]]

    def test_nested_hash_and_resume(self):
        r1, r2, r3 = (r.to_entry() for r in self._records())
        a, b = make_schema(0xA), make_schema(0xB)
        collection = [
            Batch(schema_uid=a, data=[r1]),
            Batch(schema_uid=b, data=[r2]),
            Batch(schema_uid=a, data=[r3]),
        ]

        after_two = hash_entry(hash_entry(ZERO_HASH, a, r1), b, r2)
        assert fold_commitment(collection) == hash_entry(after_two, a, r3)

        remaining = rehash(after_two, collection)
        assert remaining == [Batch(schema_uid=a, data=[r3])]
