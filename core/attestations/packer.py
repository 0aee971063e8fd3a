"""
Module 03 - Packer

Groups an ordered stream of records into one batch per schema.

Batches appear in the order their schema was first seen; entries keep the
relative order of their source records. Grouping goes through a
schema -> batch index so packing stays linear in the number of records.
"""

from __future__ import annotations

import logging
from typing import Iterable

from core.schemas.attestation import Batch, Record
from core.schemas.errors import WellFormednessException


logger = logging.getLogger(__name__)


def pack(records: Iterable[Record]) -> list[Batch]:
    """
    Pack records into per-schema batches.

    Args:
        records: Records in publication order

    Returns:
        Batches, one per distinct schema, in first-seen schema order

    Raises:
        WellFormednessException: If an element is not a Record
    """
    packed: list[Batch] = []
    index: dict[str, Batch] = {}
    count = 0

    for position, record in enumerate(records):
        if not isinstance(record, Record):
            raise WellFormednessException(
                f"Expected Record at position {position}, got {type(record).__name__}",
                field_path=f"records[{position}]",
            )

        batch = index.get(record.schema_uid)
        if batch is None:
            batch = Batch(schema_uid=record.schema_uid)
            index[record.schema_uid] = batch
            packed.append(batch)

        batch.data.append(record.to_entry())
        count += 1

    logger.debug(f"Packed {count} records into {len(packed)} batches")
    return packed


__all__ = ["pack"]
