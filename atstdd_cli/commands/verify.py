"""
Module 09C - CLI Verify Command

Verify a slice file against the ledger:
- The attester contract must be locked (no further submissions possible)
- The ledger commitment must equal the fold over the whole slice file

With ``--vhash`` the commitment is taken from the command line instead and
no node is contacted.

Usage:
    atstdd verify --slices slices.json --attester 0x... --rpc http://... [--json]
    atstdd verify --slices slices.json --vhash 0x...
"""

from __future__ import annotations

import asyncio
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.schemas.verification import VerificationResult
from orchestrator.artifacts.slices import SliceFileIntegrityError, load_slices
from orchestrator.publisher import Publisher, check_commitment

from atstdd_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    build_client,
    print_json,
    runtime_from_args,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of slice file verification for CLI output."""
    slices_path: str = ""
    offline: bool = False
    ok: bool = False
    entry_count: int = 0
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def build_summary(slices_path: str, entry_count: int, result: VerificationResult, offline: bool) -> VerifySummary:
    summary = VerifySummary(
        slices_path=slices_path,
        offline=offline,
        ok=result.ok,
        entry_count=entry_count,
    )
    for check in result.checks:
        summary.checks.append({
            "check_id": check.check_id,
            "ok": check.ok,
            "message": check.message,
            **check.details,
        })
    summary.errors = result.get_error_messages()
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    print(f"slices: {summary.slices_path}")
    print(f"entries: {summary.entry_count}")
    for check in summary.checks:
        status = "✓" if check["ok"] else "✗"
        print(f"  {status} {check['check_id']}: {check['message']}")
        if check["check_id"] == "vhash_match" and not check["ok"]:
            print(f"      expected: {check.get('expected')}")
            print(f"      computed: {check.get('computed')}")
    print("verification successful" if summary.ok else "verification failed")


async def _verify_online(args: Namespace, batches) -> VerificationResult:
    client = build_client(runtime_from_args(args))
    return await Publisher.for_client(client).verify(batches, require_locked=not args.allow_unlocked)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 when any check fails)
    """
    try:
        slice_file = load_slices(args.slices)
    except SliceFileIntegrityError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    offline = args.vhash is not None
    if offline:
        result = VerificationResult.success()
        result.add_check(check_commitment(args.vhash, slice_file.batches))
    else:
        result = asyncio.run(_verify_online(args, slice_file.batches))

    summary = build_summary(str(args.slices), slice_file.entry_count, result, offline)
    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    if result.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
