"""
Module 09C - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    atstdd generate --generator PATH --gen-config PATH --out PATH [--offline-limit N]
    atstdd publish --slices PATH [--attester ADDR] [--key KEY] [--rpc URL]
    atstdd status --slices PATH [--attester ADDR] [--rpc URL]
    atstdd lock [--attester ADDR] [--key KEY] [--rpc URL]
    atstdd verify --slices PATH [--vhash HEX] [--attester ADDR] [--rpc URL]
    atstdd config --init | --show

Environment Variables:
    ATSTDD_RPC_URL          JSON-RPC endpoint
    ATSTDD_ATTESTER         VerifiableAttester contract address
    ATSTDD_PRIVATE_KEY      Signing key for publish and lock
    ATSTDD_GAS_MARGIN       Headroom below the block gas limit (default: 100000)
    ATSTDD_LOG_LEVEL        Log level (default: INFO)
    ATSTDD_LOG_FILE         Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.schemas.errors import AtstException

from atstdd_cli import __version__
from atstdd_cli.commands import generate, publish, status, verify, lock
from atstdd_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, print_json, wants_json
from atstdd_cli.config import load_config, get_default_config_template


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_ledger_args(parser: argparse.ArgumentParser, *, signing: bool = False) -> None:
    parser.add_argument("--rpc", type=str, default=None, help="JSON-RPC url (overrides config)")
    parser.add_argument("--attester", type=str, default=None, help="VerifiableAttester contract address")
    if signing:
        parser.add_argument("--key", type=str, default=None, help="Private key to sign transactions with")


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="atstdd",
        description="A tool for duplicating data into the attestation station, verifiably.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./atstdd.json or ~/.config/atstdd/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate, pack and slice attestations into a slice file",
        description="Run a record generator and write gas-bounded slices to disk.",
    )
    generate_parser.add_argument(
        "--generator",
        type=str,
        required=True,
        help="Path to the generator script (defines generate(config))",
    )
    generate_parser.add_argument(
        "--gen-config",
        type=str,
        default=None,
        help="Path to the JSON config passed to the generator",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        required=True,
        help="Path of the slice file to write",
    )
    generate_parser.add_argument(
        "--offline-limit",
        type=int,
        default=None,
        help="Slice by entry count instead of gas estimates (no node needed)",
    )
    generate_parser.add_argument(
        "--gas-margin",
        type=int,
        default=None,
        help="Headroom kept below the block gas limit (overrides config)",
    )
    _add_ledger_args(generate_parser)
    _add_output_args(generate_parser)
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- publish command ---
    publish_parser = subparsers.add_parser(
        "publish",
        help="Publish a slice file, resuming after what is already on the ledger",
    )
    publish_parser.add_argument("--slices", type=str, required=True, help="Slice file to publish")
    _add_ledger_args(publish_parser, signing=True)
    _add_output_args(publish_parser)
    publish_parser.set_defaults(func=publish.publish_cmd)

    # --- status command ---
    status_parser = subparsers.add_parser(
        "status",
        help="Show how much of a slice file is already published",
    )
    status_parser.add_argument("--slices", type=str, required=True, help="Slice file to compare")
    status_parser.add_argument("--eas", type=str, default=None, help="Attestation service address")
    status_parser.add_argument("--registry", type=str, default=None, help="Schema registry address")
    _add_ledger_args(status_parser)
    _add_output_args(status_parser)
    status_parser.set_defaults(func=status.status_cmd)

    # --- lock command ---
    lock_parser = subparsers.add_parser(
        "lock",
        help="Lock the attester contract to prevent further attestations",
    )
    _add_ledger_args(lock_parser, signing=True)
    _add_output_args(lock_parser)
    lock_parser.set_defaults(func=lock.lock_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a slice file against the ledger commitment",
        description="Require a locked contract and compare verification hashes.",
    )
    verify_parser.add_argument("--slices", type=str, required=True, help="Slice file to verify")
    verify_parser.add_argument(
        "--vhash",
        type=str,
        default=None,
        help="Verify against this commitment instead of reading the ledger",
    )
    verify_parser.add_argument(
        "--allow-unlocked",
        action="store_true",
        default=False,
        help="Skip the locked-contract check",
    )
    _add_ledger_args(verify_parser)
    _add_output_args(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="atstdd.json",
        help="Path for config file (default: atstdd.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (ATSTDD_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: atstdd config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except AtstException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        if wants_json(args):
            print_json({"ok": False, "error": e.to_error_model().model_dump()})
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
