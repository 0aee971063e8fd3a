"""
Module 09D - API Request Models

Pydantic models for API request validation.

Batches and records arrive as raw JSON objects and are parsed by the route,
so malformed ids or payloads surface as WELL_FORMEDNESS_VIOLATION errors
rather than generic validation failures.
"""

from typing import Any

from pydantic import BaseModel, Field


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    vhash: str = Field(
        ...,
        description="Claimed verification hash (bytes32, 0x hex)",
    )
    batches: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Batches in publication order ({schema, data: [...]})",
    )


class RehashRequest(BaseModel):
    """Request body for POST /rehash endpoint."""

    vhash: str = Field(
        ...,
        description="Commitment currently recorded on the ledger",
    )
    batches: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Full collection in publication order",
    )


class PackRequest(BaseModel):
    """Request body for POST /pack endpoint."""

    records: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Records ({schema, recipient?, data}) in publication order",
    )
