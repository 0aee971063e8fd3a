"""
Module 09C - atstdd CLI

Command-line interface for duplicating data into the attestation station.

Usage:
    python -m atstdd_cli generate --generator gen.py --gen-config cfg.json --out slices.json
    python -m atstdd_cli publish --slices slices.json
    python -m atstdd_cli status --slices slices.json
    python -m atstdd_cli lock
    python -m atstdd_cli verify --slices slices.json
"""

__version__ = "0.1.0"
