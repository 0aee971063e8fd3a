"""
Ledger access: collaborator protocols, address resolution and the web3
client for VerifiableAttester contracts.
"""
from .interfaces import (
    CeilingProvider,
    CommitmentReader,
    CostEstimator,
    LockReader,
    Estimate,
    SubmissionReceipt,
    SubmissionSink,
)
from .addresses import EAS, REGISTRY, resolve, resolve_address
from .offline import EntryCountEstimator
from .attester import (
    RESOURCE_EXCEEDED_MARKERS,
    VERIFIABLE_ATTESTER_ABI,
    VerifiableAttesterClient,
    is_resource_exceeded,
)

__all__ = [
    "CeilingProvider",
    "CommitmentReader",
    "CostEstimator",
    "LockReader",
    "Estimate",
    "SubmissionReceipt",
    "SubmissionSink",
    "EAS",
    "REGISTRY",
    "resolve",
    "resolve_address",
    "EntryCountEstimator",
    "RESOURCE_EXCEEDED_MARKERS",
    "VERIFIABLE_ATTESTER_ABI",
    "VerifiableAttesterClient",
    "is_resource_exceeded",
]
