"""
Module 02 - Hashing Utilities
Keccak hashing and hex helpers for verification-hash commitments.

This module provides:
- Keccak-256 hashing for raw bytes (the ledger's native digest)
- SHA-256 for off-ledger file fingerprints
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Hex output is always lowercase with a 0x prefix
"""
from __future__ import annotations

import hashlib

from eth_utils import keccak

# Genesis verification hash: nothing committed yet
ZERO_HASH: str = "0x" + "00" * 32

# Default recipient for records that do not name one
ZERO_ADDRESS: str = "0x" + "00" * 20


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def sha256(data: bytes) -> bytes:
    """Compute the SHA-256 hash of raw bytes."""
    return hashlib.sha256(data).digest()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not isinstance(hex_string, str) or hex_string[:2].lower() != "0x":
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {str(hex_string)[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "ZERO_HASH",
    "ZERO_ADDRESS",
    "keccak256",
    "sha256",
    "to_hex",
    "from_hex",
]
