"""
Module 09C - CLI Configuration

Configuration management for the atstdd CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import RuntimeConfig


# Environment variable prefix
ENV_PREFIX = "ATSTDD_"

DEFAULT_CONFIG_PATHS = (
    Path("atstdd.json"),
    Path(".atstdd.json"),
)


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Ledger, slicing and publishing settings
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        return {
            "log_level": self.log_level,
            "log_file": self.log_file,
            "default_output_format": self.default_output_format,
            **self.runtime.to_dict(),
        }


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig(runtime=RuntimeConfig.from_dict(data))

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    # Output
    config.default_output_format = data.get("default_output_format", config.default_output_format)

    return config


def default_config_paths() -> list[Path]:
    """Config locations searched when no path is given, in priority order."""
    return [
        *(Path.cwd() / p for p in DEFAULT_CONFIG_PATHS),
        Path.home() / ".config" / "atstdd" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    # Start with defaults
    config = CLIConfig()

    # Load from file if provided
    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    config.runtime = config.runtime.with_env_overrides()
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human",
  "network": {
    "rpc_url": "http://localhost:8545",
    "chain_id": null,
    "eas": null,
    "registry": null,
    "attester": null
  },
  "slicer": {
    "gas_margin": 100000
  },
  "publisher": {
    "receipt_timeout": 120.0,
    "poll_latency": 0.5
  }
}
"""
