"""
CLI command modules.
"""

from atstdd_cli.commands import generate, publish, status, verify, lock

__all__ = ["generate", "publish", "status", "verify", "lock"]
