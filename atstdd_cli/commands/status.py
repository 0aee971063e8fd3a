"""
Module 09C - CLI Status Command

Report how much of a slice file the ledger commitment already covers.

Usage:
    atstdd status --slices slices.json --attester 0x... --rpc http://...
"""

from __future__ import annotations

import asyncio
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.ledger.addresses import EAS, REGISTRY, resolve_address
from core.schemas.errors import AddressResolutionException, IntegrityMismatchException
from orchestrator.artifacts.slices import load_slices
from orchestrator.publisher import Publisher

from atstdd_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    build_client,
    print_json,
    runtime_from_args,
    wants_json,
)


@dataclass
class StatusSummary:
    """Publication progress for CLI output."""
    slices_path: str = ""
    attester: str = ""
    eas: str | None = None
    registry: str | None = None
    vhash: str = ""
    fresh: bool = False
    locked: bool = False
    entry_count: int = 0
    consumed_entries: int = 0
    remaining_entries: int = 0
    remaining_slices: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: StatusSummary) -> None:
    print(f"slices: {summary.slices_path}")
    print(f"attester: {summary.attester}")
    print(f"eas: {summary.eas or '(unknown for this chain, supply --eas)'}")
    print(f"registry: {summary.registry or '(unknown for this chain, supply --registry)'}")
    print(f"ledger vhash: {summary.vhash}")
    print(f"locked: {str(summary.locked).lower()}")
    print(f"published: {summary.consumed_entries} of {summary.entry_count} entries")
    print(f"remaining: {summary.remaining_entries} entries in {summary.remaining_slices} slices")


async def _status(args: Namespace) -> StatusSummary:
    slice_file = load_slices(args.slices)
    runtime = runtime_from_args(args)
    client = build_client(runtime)

    network = runtime.network
    try:
        eas = await resolve_address(EAS, client.w3, network.eas, network.chain_id)
    except AddressResolutionException:
        eas = None
    try:
        registry = await resolve_address(REGISTRY, client.w3, network.registry, network.chain_id)
    except AddressResolutionException:
        registry = None

    plan = await Publisher.for_client(client).plan(slice_file.batches)
    return StatusSummary(
        slices_path=str(args.slices),
        attester=client.address,
        eas=eas,
        registry=registry,
        vhash=plan.vhash,
        fresh=plan.fresh,
        locked=await client.is_locked(),
        entry_count=slice_file.entry_count,
        consumed_entries=plan.consumed,
        remaining_entries=plan.remaining_entries,
        remaining_slices=len(plan.remaining),
    )


def status_cmd(args: Namespace) -> int:
    try:
        summary = asyncio.run(_status(args))
    except IntegrityMismatchException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
