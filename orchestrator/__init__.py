"""
Module 09 - Publication Orchestration

Wires record generation, slicing, persistence and publication on top of the
core attestation primitives.

Public API:
- Publisher: Resumable publish and verify flows over ledger collaborators
- PublishPlan: Unpublished remainder against a ledger commitment
- PublishReport: Outcome of one publish run
- run_generator: Load and run a record generator from a file path
- save_slices / load_slices: Slice file persistence
"""

from orchestrator.publisher import (
    PublishPlan,
    PublishReport,
    Publisher,
    check_commitment,
    plan_against,
)
from orchestrator.generators import (
    load_generator,
    load_generator_config,
    run_generator,
    to_records,
)
from orchestrator.artifacts.slices import (
    SliceFile,
    SliceFileError,
    SliceFileIntegrityError,
    load_slices,
    save_slices,
)


__all__ = [
    # Publication
    "Publisher",
    "PublishPlan",
    "PublishReport",
    "check_commitment",
    "plan_against",
    # Generators
    "load_generator",
    "load_generator_config",
    "run_generator",
    "to_records",
    # Slice files
    "SliceFile",
    "SliceFileError",
    "SliceFileIntegrityError",
    "load_slices",
    "save_slices",
]
