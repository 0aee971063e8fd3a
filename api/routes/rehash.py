"""
Module 09D - Rehash Route

Compute the unpublished remainder of a collection for a ledger commitment.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import RehashRequest
from api.models.responses import RehashResponse
from api.deps import parse_batches

from core.schemas.attestation import batches_to_wire
from orchestrator.publisher import plan_against


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/rehash", response_model=RehashResponse)
async def rehash_collection(request: RehashRequest) -> RehashResponse:
    """
    Drop the prefix already reflected in ``vhash``.

    Responds 409 INTEGRITY_MISMATCH when a non-genesis ``vhash`` matches no
    prefix of the collection.
    """
    plan = plan_against(request.vhash, parse_batches(request.batches))
    return RehashResponse(
        ok=True,
        fresh=plan.fresh,
        consumed=plan.consumed,
        remaining_entries=plan.remaining_entries,
        remaining=batches_to_wire(plan.remaining),
    )
