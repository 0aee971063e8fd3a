"""
Module 01 - Schemas & Canonicalization
File: primitives.py

Purpose: Normalizers for the fixed-size ledger primitives carried by records
and commitments. Malformed input raises WellFormednessException; nothing is
padded, truncated or repaired.
"""

from __future__ import annotations

from typing import Any

from eth_utils import is_address, is_checksum_address, to_canonical_address

from core.crypto.hashing import ZERO_ADDRESS, from_hex, to_hex

from .errors import WellFormednessException


def decode_hex(value: Any, field: str) -> bytes:
    """Decode 0x hex (or pass raw bytes through)."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return from_hex(value)
    except ValueError as e:
        raise WellFormednessException(f"{field}: {e}", field_path=field) from e


def normalize_bytes32(value: Any, field: str = "bytes32") -> str:
    """
    Normalize a 32-byte identifier (schema uid, commitment) to lowercase 0x hex.

    Accepts raw bytes as returned by web3 contract calls.
    """
    raw = decode_hex(value, field)
    if len(raw) != 32:
        raise WellFormednessException(
            f"{field} must be exactly 32 bytes, got {len(raw)}",
            field_path=field,
        )
    return to_hex(raw)


def normalize_address(value: Any, field: str = "recipient") -> str:
    """
    Normalize a 20-byte address to lowercase 0x hex.

    None maps to the zero address. Mixed-case input must carry a valid
    EIP-55 checksum.
    """
    if value is None:
        return ZERO_ADDRESS
    if not isinstance(value, str) or not is_address(value):
        raise WellFormednessException(
            f"{field} is not a valid address: {value!r}",
            field_path=field,
        )
    digits = value[2:] if value[:2].lower() == "0x" else value
    if digits != digits.lower() and digits != digits.upper() and not is_checksum_address("0x" + digits):
        raise WellFormednessException(
            f"{field} has an invalid EIP-55 checksum: {value!r}",
            field_path=field,
        )
    return to_hex(to_canonical_address(value))


def normalize_payload(value: Any, field: str = "data") -> str:
    """Normalize an opaque payload to lowercase 0x hex (may be empty)."""
    return to_hex(decode_hex(value, field))


__all__ = [
    "decode_hex",
    "normalize_bytes32",
    "normalize_address",
    "normalize_payload",
]
