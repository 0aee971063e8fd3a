"""
Module 09D - Verify Route

Check a batch collection against a claimed verification hash, offline.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import VerifyRequest
from api.models.responses import VerifyResponse
from api.deps import parse_batches

from orchestrator.publisher import check_commitment


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse)
async def verify_collection(request: VerifyRequest) -> VerifyResponse:
    """
    Fold the submitted batches from genesis and compare with ``vhash``.

    A mismatch is a normal ``ok: false`` response, not an error.
    """
    batches = parse_batches(request.batches)
    check = check_commitment(request.vhash, batches)
    logger.info(f"Verify: {check.details['entry_count']} entries, ok={check.ok}")
    return VerifyResponse(
        ok=check.ok,
        expected=check.details["expected"],
        computed=check.details["computed"],
        entry_count=check.details["entry_count"],
    )
