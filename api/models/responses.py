"""
Module 09D - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "atstdd-api"
    version: str = "v1"


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = Field(..., description="Whether the collection folds to the claimed hash")
    expected: str = Field(..., description="Claimed verification hash")
    computed: str = Field(..., description="Hash folded from the submitted batches")
    entry_count: int = Field(default=0)


class RehashResponse(BaseModel):
    """Response for POST /rehash endpoint."""

    ok: bool = True
    fresh: bool = Field(..., description="True when nothing has been published yet")
    consumed: int = Field(..., description="Entries already covered by the commitment")
    remaining_entries: int = Field(default=0)
    remaining: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Unpublished batches, in order",
    )


class PackResponse(BaseModel):
    """Response for POST /pack endpoint."""

    ok: bool = True
    batch_count: int = Field(default=0)
    entry_count: int = Field(default=0)
    vhash: str = Field(..., description="Commitment over the packed collection")
    batches: list[dict[str, Any]] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
