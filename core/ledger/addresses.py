"""
Module 05 - Contract Addresses

Known attestation-service and schema-registry deployments per chain id,
and resolution of the address to use for a given network.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Optional

from core.schemas.errors import AddressResolutionException
from core.schemas.primitives import normalize_address

if TYPE_CHECKING:
    from web3 import AsyncWeb3


logger = logging.getLogger(__name__)

# Attestation service predeploys
EAS: dict[int, str] = {
    420: "0x4200000000000000000000000000000000000021",
}

# Schema registry predeploys
REGISTRY: dict[int, str] = {
    420: "0x4200000000000000000000000000000000000020",
}


def resolve(
    mapping: Mapping[int, str],
    chain_id: Optional[int],
    supplied: Optional[str] = None,
) -> str:
    """
    Pick the contract address for a chain.

    A supplied address always wins. Otherwise the chain id must be known
    to ``mapping``.

    Raises:
        AddressResolutionException: If nothing is supplied and the chain
            id has no known deployment
        WellFormednessException: If the supplied address is malformed
    """
    if supplied:
        return normalize_address(supplied, field="address")

    resolved = mapping.get(chain_id) if chain_id is not None else None
    if resolved is None:
        raise AddressResolutionException(
            f"Contract not found for chain id {chain_id}, must supply manually",
            chain_id=chain_id,
        )
    logger.debug(f"Resolved {resolved} for chain id {chain_id}")
    return resolved


async def resolve_address(
    mapping: Mapping[int, str],
    w3: "AsyncWeb3",
    supplied: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> str:
    """
    Like ``resolve``, querying the chain id from the node only when neither
    an address nor a configured chain id is given.
    """
    if supplied or chain_id is not None:
        return resolve(mapping, chain_id, supplied)
    chain_id = await w3.eth.chain_id
    return resolve(mapping, int(chain_id))


__all__ = ["EAS", "REGISTRY", "resolve", "resolve_address"]
