"""
Module 09D - Pack Route

Group records into per-schema batches.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.models.requests import PackRequest
from api.models.responses import PackResponse
from api.deps import parse_records

from core.attestations.chain import count_entries, fold_commitment
from core.attestations.packer import pack
from core.schemas.attestation import batches_to_wire


router = APIRouter(tags=["batching"])


@router.post("/pack", response_model=PackResponse)
async def pack_records(request: PackRequest) -> PackResponse:
    records = parse_records(request.records)
    batches = pack(records)
    return PackResponse(
        ok=True,
        batch_count=len(batches),
        entry_count=count_entries(batches),
        vhash=fold_commitment(batches),
        batches=batches_to_wire(batches),
    )
