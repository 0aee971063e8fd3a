"""
Module 09C - Record Generators

Loads a user-supplied generator module from a file path and turns its output
into validated records.

A generator module exposes ``generate(config)``, plain or ``async``, that
returns an iterable of raw record dicts::

    {"schema": "0x<32 bytes>", "recipient": "0x<20 bytes>" | None, "data": "0x..."}

The generator config is an arbitrary JSON document passed through unchanged.
"""

from __future__ import annotations

import importlib.util
import inspect
import json
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterable

from core.schemas.attestation import Record
from core.schemas.errors import GeneratorException, WellFormednessException


logger = logging.getLogger(__name__)

GENERATOR_ENTRYPOINT = "generate"


def load_generator(path: str | Path) -> Callable[[dict[str, Any]], Any]:
    """
    Import a generator module from ``path`` and return its entrypoint.

    Raises:
        GeneratorException: If the file is missing, fails to import, or
            defines no callable ``generate``
    """
    module_path = Path(path).resolve()
    if not module_path.is_file():
        raise GeneratorException(f"Generator not found: {module_path}", generator=str(path))

    spec = importlib.util.spec_from_file_location(f"atstdd_generator_{module_path.stem}", module_path)
    if spec is None or spec.loader is None:
        raise GeneratorException(f"Cannot load generator from {module_path}", generator=str(path))

    module: ModuleType = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise GeneratorException(f"Generator failed to import: {e}", generator=str(path)) from e

    entrypoint = getattr(module, GENERATOR_ENTRYPOINT, None)
    if not callable(entrypoint):
        raise GeneratorException(
            f"Generator {module_path.name} does not define {GENERATOR_ENTRYPOINT}(config)",
            generator=str(path),
        )
    return entrypoint


def load_generator_config(path: str | Path | None) -> dict[str, Any]:
    """Read a JSON generator config; no path means an empty config."""
    if path is None:
        return {}
    config_path = Path(path)
    try:
        with open(config_path) as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise GeneratorException(f"Generator config not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise GeneratorException(f"Generator config is not valid JSON: {config_path}: {e}") from e


def to_records(raw: Iterable[Any]) -> list[Record]:
    """
    Validate raw generator output into records, preserving order.

    Raises:
        GeneratorException: If any item is not a valid record
    """
    records: list[Record] = []
    for position, item in enumerate(raw):
        if isinstance(item, Record):
            records.append(item)
            continue
        if not isinstance(item, dict):
            raise GeneratorException(
                f"Record {position} is a {type(item).__name__}, expected an object",
                details={"position": position},
            )
        try:
            records.append(Record.model_validate(item))
        except (WellFormednessException, ValueError) as e:
            raise GeneratorException(
                f"Record {position} is malformed: {e}",
                details={"position": position},
            ) from e
    return records


async def run_generator(
    path: str | Path,
    config: dict[str, Any] | None = None,
) -> list[Record]:
    """Load the generator at ``path``, run it on ``config`` and validate its records."""
    generate = load_generator(path)
    logger.info(f"Running generator {Path(path).name}")

    try:
        raw = generate(config or {})
        if inspect.isawaitable(raw):
            raw = await raw
    except GeneratorException:
        raise
    except Exception as e:
        raise GeneratorException(f"Generator raised: {e}", generator=str(path)) from e

    if raw is None:
        raise GeneratorException("Generator returned nothing", generator=str(path))

    records = to_records(raw)
    logger.info(f"Generated {len(records)} records")
    return records


__all__ = [
    "GENERATOR_ENTRYPOINT",
    "load_generator",
    "load_generator_config",
    "run_generator",
    "to_records",
]
