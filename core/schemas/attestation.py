"""
Module 01 - Schemas & Canonicalization
File: attestation.py

Purpose: Records, attestation entries and batches.

Field aliases follow the ledger ABI (camelCase) so that a batch dumped with
``by_alias=True`` is exactly the ``MultiAttestationRequest`` JSON shape that
slice files and the HTTP API exchange.
"""

from __future__ import annotations

from typing import Any

from eth_utils import to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import ZERO_ADDRESS, ZERO_HASH, from_hex

from .primitives import normalize_address, normalize_bytes32, normalize_payload

UINT64_MAX = 2**64 - 1
UINT256_MAX = 2**256 - 1

# ABI type of one AttestationRequestData tuple
ENTRY_ABI_TYPE = "(address,uint64,bool,bytes32,bytes,uint256)"


class Record(BaseModel):
    """
    One logical attestation before grouping.

    Immutable once created. A missing recipient becomes the zero address.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    schema_uid: str = Field(
        ...,
        alias="schema",
        description="Category id (32-byte schema uid, 0x hex)",
    )
    recipient: str = Field(
        default=ZERO_ADDRESS,
        description="Recipient address, zero address when absent",
    )
    data: str = Field(
        default="0x",
        description="Opaque payload bytes (0x hex)",
    )

    @field_validator("schema_uid", mode="before")
    @classmethod
    def _check_schema(cls, v: Any) -> str:
        return normalize_bytes32(v, field="schema")

    @field_validator("recipient", mode="before")
    @classmethod
    def _check_recipient(cls, v: Any) -> str:
        return normalize_address(v)

    @field_validator("data", mode="before")
    @classmethod
    def _check_data(cls, v: Any) -> str:
        return normalize_payload(v)

    def to_entry(self) -> "AttestationEntry":
        """Build the batch entry for this record with the fixed fields."""
        return AttestationEntry(recipient=self.recipient, data=self.data)


class AttestationEntry(BaseModel):
    """
    A record-derived entry inside a batch (AttestationRequestData).

    Entries produced by the packer always carry expirationTime=0,
    revocable=false, refUID=0 and value=0.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    recipient: str = Field(default=ZERO_ADDRESS)
    expiration_time: int = Field(default=0, alias="expirationTime", ge=0, le=UINT64_MAX)
    revocable: bool = Field(default=False)
    ref_uid: str = Field(default=ZERO_HASH, alias="refUID")
    data: str = Field(default="0x")
    value: int = Field(default=0, ge=0, le=UINT256_MAX)

    @field_validator("recipient", mode="before")
    @classmethod
    def _check_recipient(cls, v: Any) -> str:
        return normalize_address(v)

    @field_validator("ref_uid", mode="before")
    @classmethod
    def _check_ref_uid(cls, v: Any) -> str:
        return normalize_bytes32(v, field="refUID")

    @field_validator("data", mode="before")
    @classmethod
    def _check_data(cls, v: Any) -> str:
        return normalize_payload(v)

    def as_abi_tuple(self) -> tuple[str, int, bool, bytes, bytes, int]:
        """Values in ABI order, ready for ``eth_abi.encode`` or a contract call."""
        return (
            to_checksum_address(self.recipient),
            self.expiration_time,
            self.revocable,
            from_hex(self.ref_uid),
            from_hex(self.data),
            self.value,
        )


class Batch(BaseModel):
    """
    Ordered entries sharing one category (MultiAttestationRequest).

    The entry order is part of the verification hash.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_uid: str = Field(..., alias="schema")
    data: list[AttestationEntry] = Field(default_factory=list)

    @field_validator("schema_uid", mode="before")
    @classmethod
    def _check_schema(cls, v: Any) -> str:
        return normalize_bytes32(v, field="schema")

    def __len__(self) -> int:
        return len(self.data)

    def window(self, start: int, end: int) -> "Batch":
        """Copy of this batch restricted to ``data[start:end]``."""
        return Batch(schema_uid=self.schema_uid, data=self.data[start:end])

    def as_abi_tuple(self) -> tuple[bytes, list[tuple]]:
        return (from_hex(self.schema_uid), [e.as_abi_tuple() for e in self.data])

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict in the ledger's field naming."""
        return self.model_dump(mode="json", by_alias=True)


def batches_to_wire(batches: list[Batch]) -> list[dict[str, Any]]:
    """Dump a batch collection, preserving order."""
    return [b.to_wire() for b in batches]


def batches_from_wire(data: list[dict[str, Any]]) -> list[Batch]:
    """Parse a batch collection, preserving order."""
    return [Batch.model_validate(item) for item in data]
