"""
Runtime Configuration Module

Provides configuration loading and management for atstdd.
"""

from .runtime import (
    NetworkConfig,
    PublisherConfig,
    RuntimeConfig,
    SlicerConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "NetworkConfig",
    "PublisherConfig",
    "RuntimeConfig",
    "SlicerConfig",
    "get_default_config",
    "set_default_config",
]
