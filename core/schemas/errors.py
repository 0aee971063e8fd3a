"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the attestation pipeline.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pipeline."""

    # Input & Validation Errors
    WELL_FORMEDNESS_VIOLATION = "WELL_FORMEDNESS_VIOLATION"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Slicing Errors
    RESOURCE_EXCEEDED = "RESOURCE_EXCEEDED"
    UNSLICEABLE_ENTRY = "UNSLICEABLE_ENTRY"

    # Commitment Errors
    INTEGRITY_MISMATCH = "INTEGRITY_MISMATCH"

    # Ledger Errors
    ADDRESS_RESOLUTION_FAILED = "ADDRESS_RESOLUTION_FAILED"
    LEDGER_ERROR = "LEDGER_ERROR"

    # Generator Errors
    GENERATOR_ERROR = "GENERATOR_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AtstError(BaseModel):
    """
    Base error model for structured error communication.

    Used to pass errors across the HTTP boundary and into CLI JSON output
    without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INTEGRITY_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AtstException(Exception):
    """
    Base exception for all attestation pipeline errors.

    Carries structured error information and converts to an AtstError
    model for JSON output.
    """

    def __init__(
        self,
        message: str,
        code: str = "ATST_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AtstError:
        """Convert this exception to an AtstError model."""
        return AtstError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(AtstException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class WellFormednessException(AtstException):
    """
    Raised when an input violates its stated shape.

    Malformed category ids, addresses or payloads are caller bugs;
    they fail fast and are never sanitized.
    """

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.WELL_FORMEDNESS_VIOLATION,
            details=full_details,
            retryable=False,
        )


class ResourceExceededException(AtstException):
    """Raised by an estimator when a probed range cannot fit the ceiling."""

    def __init__(
        self,
        message: str = "estimated cost exceeds the resource ceiling",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.RESOURCE_EXCEEDED,
            details=details,
            retryable=False,
        )


class UnsliceableEntryException(AtstException):
    """Raised when a single entry alone does not fit under the ceiling."""

    def __init__(
        self,
        message: str,
        schema: str | None = None,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if schema:
            full_details["schema"] = schema
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.UNSLICEABLE_ENTRY,
            details=full_details,
            retryable=False,
        )


class IntegrityMismatchException(AtstException):
    """Raised when a recomputed commitment does not match an expected one."""

    def __init__(
        self,
        message: str,
        expected: str | None = None,
        computed: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected is not None:
            full_details["expected"] = expected
        if computed is not None:
            full_details["computed"] = computed
        super().__init__(
            message=message,
            code=ErrorCodes.INTEGRITY_MISMATCH,
            details=full_details,
            retryable=False,
        )


class AddressResolutionException(AtstException):
    """Raised when no contract address is known for a chain id."""

    def __init__(
        self,
        message: str,
        chain_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if chain_id is not None:
            full_details["chain_id"] = chain_id
        super().__init__(
            message=message,
            code=ErrorCodes.ADDRESS_RESOLUTION_FAILED,
            details=full_details,
            retryable=False,
        )


class LedgerException(AtstException):
    """Raised when the ledger rejects or fails a call."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        full_details = details or {}
        if tx_hash:
            full_details["tx_hash"] = tx_hash
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_ERROR,
            details=full_details,
            retryable=retryable,
        )


class GeneratorException(AtstException):
    """Raised when a record generator cannot be loaded or returns bad records."""

    def __init__(
        self,
        message: str,
        generator: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if generator:
            full_details["generator"] = generator
        super().__init__(
            message=message,
            code=ErrorCodes.GENERATOR_ERROR,
            details=full_details,
            retryable=False,
        )
