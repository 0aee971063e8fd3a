"""
Module 09D - Minimal API (FastAPI)

HTTP API for atstdd:
- POST /verify - Verify a batch collection against a vhash
- POST /rehash - Unpublished remainder for a ledger commitment
- POST /pack - Group records into batches
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
