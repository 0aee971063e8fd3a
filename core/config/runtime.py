"""
Runtime Configuration

Central configuration for ledger access, slicing and publication.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_REDACTED = "***"


@dataclass
class NetworkConfig:
    """Configuration for the ledger endpoint and contract addresses."""
    rpc_url: str = "http://localhost:8545"
    chain_id: Optional[int] = None
    eas: Optional[str] = None
    registry: Optional[str] = None
    attester: Optional[str] = None
    private_key: Optional[str] = None


@dataclass
class SlicerConfig:
    """Configuration for slice sizing."""
    gas_margin: int = 100_000


@dataclass
class PublisherConfig:
    """Configuration for submission and receipt polling."""
    receipt_timeout: float = 120.0
    poll_latency: float = 0.5


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for atstdd.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    network: NetworkConfig = field(default_factory=NetworkConfig)
    slicer: SlicerConfig = field(default_factory=SlicerConfig)
    publisher: PublisherConfig = field(default_factory=PublisherConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - ATSTDD_RPC_URL: JSON-RPC endpoint
        - ATSTDD_CHAIN_ID: Chain id (skips the eth_chainId lookup)
        - ATSTDD_EAS: Attestation service address
        - ATSTDD_REGISTRY: Schema registry address
        - ATSTDD_ATTESTER: Deployed verifiable attester address
        - ATSTDD_PRIVATE_KEY: Signing key for submissions
        - ATSTDD_GAS_MARGIN: Headroom kept below the block gas limit
        - ATSTDD_RECEIPT_TIMEOUT: Seconds to wait for a receipt
        """
        overrides: dict[str, Any] = {}

        # Network settings
        if os.getenv("ATSTDD_RPC_URL"):
            overrides.setdefault("network", {})["rpc_url"] = os.getenv("ATSTDD_RPC_URL")
        if os.getenv("ATSTDD_CHAIN_ID"):
            overrides.setdefault("network", {})["chain_id"] = int(os.getenv("ATSTDD_CHAIN_ID"))
        if os.getenv("ATSTDD_EAS"):
            overrides.setdefault("network", {})["eas"] = os.getenv("ATSTDD_EAS")
        if os.getenv("ATSTDD_REGISTRY"):
            overrides.setdefault("network", {})["registry"] = os.getenv("ATSTDD_REGISTRY")
        if os.getenv("ATSTDD_ATTESTER"):
            overrides.setdefault("network", {})["attester"] = os.getenv("ATSTDD_ATTESTER")
        if os.getenv("ATSTDD_PRIVATE_KEY"):
            overrides.setdefault("network", {})["private_key"] = os.getenv("ATSTDD_PRIVATE_KEY")

        # Slicer settings
        if os.getenv("ATSTDD_GAS_MARGIN"):
            overrides.setdefault("slicer", {})["gas_margin"] = int(os.getenv("ATSTDD_GAS_MARGIN"))

        # Publisher settings
        if os.getenv("ATSTDD_RECEIPT_TIMEOUT"):
            overrides.setdefault("publisher", {})["receipt_timeout"] = float(
                os.getenv("ATSTDD_RECEIPT_TIMEOUT")
            )

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        network_data = data.get("network") or {}
        slicer_data = data.get("slicer") or {}
        publisher_data = data.get("publisher") or {}

        return cls(
            network=NetworkConfig(**network_data),
            slicer=SlicerConfig(**slicer_data),
            publisher=PublisherConfig(**publisher_data),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)

        return new_config

    def to_dict(self, redact: bool = True) -> dict[str, Any]:
        """Convert configuration to a dictionary. The signing key is redacted by default."""
        private_key = self.network.private_key
        if redact and private_key:
            private_key = _REDACTED
        return {
            "network": {
                "rpc_url": self.network.rpc_url,
                "chain_id": self.network.chain_id,
                "eas": self.network.eas,
                "registry": self.network.registry,
                "attester": self.network.attester,
                "private_key": private_key,
            },
            "slicer": {
                "gas_margin": self.slicer.gas_margin,
            },
            "publisher": {
                "receipt_timeout": self.publisher.receipt_timeout,
                "poll_latency": self.publisher.poll_latency,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
