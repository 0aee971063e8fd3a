"""
Core cryptographic utilities.

Keccak hashing and hex helpers used by the verification-hash chain.
"""
from .hashing import (
    ZERO_ADDRESS,
    ZERO_HASH,
    from_hex,
    keccak256,
    sha256,
    to_hex,
)

__all__ = [
    "ZERO_ADDRESS",
    "ZERO_HASH",
    "from_hex",
    "keccak256",
    "sha256",
    "to_hex",
]
