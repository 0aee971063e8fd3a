"""
Module 09C - CLI Lock Command

Lock the attester contract so no further attestations can be made through
it. Run once publishing is complete, before final verification.

Usage:
    atstdd lock --attester 0x... --key 0x... --rpc http://...
"""

from __future__ import annotations

import asyncio
from argparse import Namespace

from core.ledger.interfaces import SubmissionReceipt

from atstdd_cli.commands.common import (
    EXIT_SUCCESS,
    build_client,
    print_json,
    runtime_from_args,
    wants_json,
)


async def _lock(args: Namespace) -> SubmissionReceipt:
    client = build_client(runtime_from_args(args))
    return await client.lock()


def lock_cmd(args: Namespace) -> int:
    receipt = asyncio.run(_lock(args))
    if wants_json(args):
        print_json({
            "tx_hash": receipt.tx_hash,
            "block_number": receipt.block_number,
            "gas_used": receipt.gas_used,
        })
    else:
        print(f"locked in transaction {receipt.tx_hash} (block {receipt.block_number})")
    return EXIT_SUCCESS
