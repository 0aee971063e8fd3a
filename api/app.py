"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, verify, rehash, pack
from api.errors import APIError, api_error_handler, atst_error_handler, generic_error_handler
from core.schemas.errors import AtstException


# Configure logging: ATSTDD_LOG_LEVEL env var, then atstdd.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or atstdd.json, defaulting to INFO."""
    raw = os.getenv("ATSTDD_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "atstdd.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, json.JSONDecodeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="atstdd API",
        description="""
Offline verification service for verifiable attestation collections.

## Endpoints

- **POST /verify** - Compare a batch collection with a claimed verification hash
- **POST /rehash** - Drop the prefix already covered by a ledger commitment
- **POST /pack** - Group records into per-schema batches
- **GET /health** - Health check

Integrity mismatches on /rehash are reported as HTTP 409 with code
`INTEGRITY_MISMATCH`.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AtstException, atst_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(verify.router)
    app.include_router(rehash.router)
    app.include_router(pack.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
