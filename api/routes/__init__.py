"""API route handlers."""

from api.routes import health, verify, rehash, pack

__all__ = ["health", "verify", "rehash", "pack"]
