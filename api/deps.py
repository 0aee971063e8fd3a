"""
Module 09D - API Dependencies

Request body parsing shared by the routes.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from api.errors import InvalidRequestError
from core.schemas.attestation import Batch, Record, batches_from_wire


def parse_batches(raw: list[dict[str, Any]]) -> list[Batch]:
    """
    Parse wire batches, preserving order.

    Malformed hex raises WellFormednessException (handled as 400); missing
    or unknown fields become INVALID_REQUEST.
    """
    try:
        return batches_from_wire(raw)
    except ValidationError as e:
        raise InvalidRequestError("Invalid batch", details={"errors": e.errors(include_url=False, include_context=False)}) from e


def parse_records(raw: list[dict[str, Any]]) -> list[Record]:
    try:
        return [Record.model_validate(item) for item in raw]
    except ValidationError as e:
        raise InvalidRequestError("Invalid record", details={"errors": e.errors(include_url=False, include_context=False)}) from e
