"""
Module 09C - CLI Publish Command

Publish a slice file: read the ledger commitment, drop everything already
published and submit the rest one confirmed transaction at a time. Rerunning
after an interruption resumes where the ledger left off.

Usage:
    atstdd publish --slices slices.json --attester 0x... --key 0x... --rpc http://...
"""

from __future__ import annotations

import asyncio
import logging
import sys
from argparse import Namespace

from core.ledger.interfaces import SubmissionReceipt
from core.schemas.attestation import Batch
from core.schemas.errors import IntegrityMismatchException
from orchestrator.artifacts.slices import load_slices
from orchestrator.publisher import PublishReport, Publisher

from atstdd_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    build_client,
    print_json,
    runtime_from_args,
    wants_json,
)


logger = logging.getLogger(__name__)


def _progress(index: int, total: int, batch: Batch, receipt: SubmissionReceipt) -> None:
    print(f"[{index + 1}/{total}] {len(batch.data)} entries confirmed: {receipt.tx_hash}")


async def _publish(args: Namespace, quiet: bool) -> PublishReport:
    slice_file = load_slices(args.slices)
    runtime = runtime_from_args(args)
    publisher = Publisher.for_client(build_client(runtime), margin=runtime.slicer.gas_margin)
    return await publisher.publish(slice_file.batches, on_submitted=None if quiet else _progress)


def publish_cmd(args: Namespace) -> int:
    """
    Execute the publish command.

    Returns:
        Exit code (2 when the ledger does not match the slice file)
    """
    output_json = wants_json(args)
    try:
        report = asyncio.run(_publish(args, quiet=output_json))
    except IntegrityMismatchException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        print(
            "Publication is blocked until the slice file and the ledger are reconciled.",
            file=sys.stderr,
        )
        return EXIT_VERIFICATION_FAILED

    if output_json:
        print_json(report.to_dict())
    elif report.plan.complete:
        print("Nothing to publish: every slice is already on the ledger")
    else:
        print(f"Published {report.submitted} slices")
    return EXIT_SUCCESS
