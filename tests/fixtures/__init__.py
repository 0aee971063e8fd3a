"""
Test fixtures package for atstdd tests.

This package provides factory functions and in-memory ledger fakes.

Usage:
    from fixtures import make_batch, FakeEstimator, FakeLedger

    def test_something():
        batch = make_batch(schema=1, size=5)
        ledger = FakeLedger()
"""

from .common import (
    make_schema,
    make_address,
    make_record,
    make_entry,
    make_batch,
    make_collection,
    flat,
    FakeEstimator,
    StaticCeiling,
    FakeLedger,
)

__all__ = [
    # Factories
    "make_schema",
    "make_address",
    "make_record",
    "make_entry",
    "make_batch",
    "make_collection",
    "flat",
    # Ledger fakes
    "FakeEstimator",
    "StaticCeiling",
    "FakeLedger",
]
