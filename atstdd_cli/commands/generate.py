"""
Module 09C - CLI Generate Command

Run a record generator, pack its records per schema, slice the batches under
the attester's gas ceiling and write a slice file.

Usage:
    atstdd generate --generator examples/poap/generator.py --gen-config poap.json \
        --out slices.json --attester 0x... --rpc http://...
    atstdd generate --generator gen.py --gen-config cfg.json --out slices.json --offline-limit 50
"""

from __future__ import annotations

import asyncio
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.attestations.chain import count_entries
from core.ledger.offline import EntryCountEstimator
from orchestrator.artifacts.slices import save_slices
from orchestrator.generators import load_generator_config, run_generator
from orchestrator.publisher import Publisher

from atstdd_cli.commands.common import (
    EXIT_SUCCESS,
    build_client,
    print_json,
    runtime_from_args,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class GenerateSummary:
    """Summary of a generate run for CLI output."""
    out: str = ""
    records: int = 0
    slices: int = 0
    entry_count: int = 0
    vhash: str = ""
    offline: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: GenerateSummary) -> None:
    print(f"out: {summary.out}")
    print(f"records: {summary.records}")
    print(f"slices: {summary.slices}")
    print(f"entries: {summary.entry_count}")
    print(f"vhash: {summary.vhash}")
    if summary.offline:
        print("(sliced offline by entry count)")


def _publisher_for(args: Namespace) -> Publisher:
    if args.offline_limit is not None:
        estimator = EntryCountEstimator(args.offline_limit)
        return Publisher(estimator=estimator, ceiling_provider=estimator, margin=0)
    runtime = runtime_from_args(args)
    return Publisher.for_client(build_client(runtime), margin=runtime.slicer.gas_margin)


async def _generate(args: Namespace) -> GenerateSummary:
    records = await run_generator(args.generator, load_generator_config(args.gen_config))

    logger.info("Finding optimal slices, this might take a while...")
    sliced = await _publisher_for(args).prepare_slices(records)

    slice_file = save_slices(sliced, args.out)
    return GenerateSummary(
        out=str(args.out),
        records=len(records),
        slices=len(sliced),
        entry_count=count_entries(sliced),
        vhash=slice_file.vhash,
        offline=args.offline_limit is not None,
    )


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Returns:
        Exit code
    """
    summary = asyncio.run(_generate(args))

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
