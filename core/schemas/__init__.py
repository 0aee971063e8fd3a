"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Version constants
from .versioning import (
    SLICE_FORMAT_VERSION,
    SUPPORTED_SLICE_FORMATS,
    SliceFormatVersion,
    UnsupportedFormatVersionError,
    assert_supported_format_version,
)

# Error models and exceptions (imported before anything that normalizes input)
from .errors import (
    AddressResolutionException,
    AtstError,
    AtstException,
    CanonicalizationException,
    ErrorCodes,
    GeneratorException,
    IntegrityMismatchException,
    LedgerException,
    ResourceExceededException,
    UnsliceableEntryException,
    WellFormednessException,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Ledger primitives
from .primitives import (
    decode_hex,
    normalize_address,
    normalize_bytes32,
    normalize_payload,
)

# Records and batches
from .attestation import (
    ENTRY_ABI_TYPE,
    AttestationEntry,
    Batch,
    Record,
    batches_from_wire,
    batches_to_wire,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    "SLICE_FORMAT_VERSION",
    "SUPPORTED_SLICE_FORMATS",
    "SliceFormatVersion",
    "UnsupportedFormatVersionError",
    "assert_supported_format_version",
    "AddressResolutionException",
    "AtstError",
    "AtstException",
    "CanonicalizationException",
    "ErrorCodes",
    "GeneratorException",
    "IntegrityMismatchException",
    "LedgerException",
    "ResourceExceededException",
    "UnsliceableEntryException",
    "WellFormednessException",
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    "decode_hex",
    "normalize_address",
    "normalize_bytes32",
    "normalize_payload",
    "ENTRY_ABI_TYPE",
    "AttestationEntry",
    "Batch",
    "Record",
    "batches_from_wire",
    "batches_to_wire",
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
