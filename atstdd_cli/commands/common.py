"""
Module 09C - CLI Shared Helpers

Exit codes, runtime config assembly from flags, and client construction
shared by the ledger-facing commands.
"""

from __future__ import annotations

import copy
import json
from argparse import Namespace
from typing import Any

from core.config.runtime import RuntimeConfig
from core.ledger.attester import VerifiableAttesterClient


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

# Command-line flag -> network config field
_NETWORK_FLAGS = {
    "rpc": "rpc_url",
    "attester": "attester",
    "key": "private_key",
    "eas": "eas",
    "registry": "registry",
}


def runtime_from_args(args: Namespace) -> RuntimeConfig:
    """Runtime config from the loaded CLI config with command-line flags applied on top."""
    cli_config = getattr(args, "cli_config", None)
    runtime = copy.deepcopy(cli_config.runtime) if cli_config is not None else RuntimeConfig.from_env()

    for flag, attr in _NETWORK_FLAGS.items():
        value = getattr(args, flag, None)
        if value:
            setattr(runtime.network, attr, value)

    margin = getattr(args, "gas_margin", None)
    if margin is not None:
        runtime.slicer.gas_margin = margin

    return runtime


def build_client(runtime: RuntimeConfig) -> VerifiableAttesterClient:
    return VerifiableAttesterClient.from_config(runtime)


def wants_json(args: Namespace) -> bool:
    if getattr(args, "json", False):
        return True
    cli_config = getattr(args, "cli_config", None)
    return cli_config is not None and cli_config.default_output_format == "json"


def print_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))
