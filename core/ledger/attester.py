"""
Module 05 - Verifiable Attester Client

web3.py client for a deployed VerifiableAttester contract. Implements every
ledger collaborator the core consumes (CostEstimator, CeilingProvider,
CommitmentReader, SubmissionSink) plus lock/admin helpers for the CLI.

Node errors that mean "this range is too big" are turned into
``Estimate.exceeded`` here and nowhere else; every other failure propagates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from eth_account import Account
from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import Web3Exception

from core.crypto.hashing import to_hex
from core.schemas.attestation import AttestationEntry, Batch
from core.schemas.errors import LedgerException
from core.schemas.primitives import normalize_address, normalize_bytes32

from .interfaces import Estimate, SubmissionReceipt

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount

    from core.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)

# Substrings nodes use when a call cannot fit in a block
RESOURCE_EXCEEDED_MARKERS = (
    "exceeds block gas limit",
    "gas required exceeds",
    "exceeds gas limit",
    "cannot estimate gas",
)

_ENTRY_COMPONENTS = [
    {"name": "recipient", "type": "address"},
    {"name": "expirationTime", "type": "uint64"},
    {"name": "revocable", "type": "bool"},
    {"name": "refUID", "type": "bytes32"},
    {"name": "data", "type": "bytes"},
    {"name": "value", "type": "uint256"},
]

VERIFIABLE_ATTESTER_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "attest",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "multiRequests",
                "type": "tuple[]",
                "components": [
                    {"name": "schema", "type": "bytes32"},
                    {"name": "data", "type": "tuple[]", "components": _ENTRY_COMPONENTS},
                ],
            }
        ],
        "outputs": [{"name": "", "type": "bytes32[]"}],
    },
    {
        "type": "function",
        "name": "lock",
        "stateMutability": "nonpayable",
        "inputs": [],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "$vhash",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "type": "function",
        "name": "$locked",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "$admin",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]


def is_resource_exceeded(error: BaseException) -> bool:
    """True iff a node error reports that the call does not fit in a block."""
    message = str(error).lower()
    return any(marker in message for marker in RESOURCE_EXCEEDED_MARKERS)


class VerifiableAttesterClient:
    """
    Async client bound to one attester contract.

    Read-only use (estimate, status, verify) needs no account; submit and
    lock require one.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        address: Optional[str],
        account: Optional["LocalAccount"] = None,
        *,
        receipt_timeout: float = 120.0,
        poll_latency: float = 0.5,
    ) -> None:
        if not address:
            raise LedgerException("Attester address is required")
        self.w3 = w3
        self.address = to_checksum_address(normalize_address(address, field="attester"))
        self.account = account
        self.receipt_timeout = receipt_timeout
        self.poll_latency = poll_latency
        self.contract = w3.eth.contract(address=self.address, abi=VERIFIABLE_ATTESTER_ABI)
        self._admin: Optional[str] = None

    @classmethod
    def from_config(cls, config: "RuntimeConfig") -> "VerifiableAttesterClient":
        """Build a client from the network/publisher sections of a runtime config."""
        network = config.network
        w3 = AsyncWeb3(AsyncHTTPProvider(network.rpc_url))
        account = Account.from_key(network.private_key) if network.private_key else None
        return cls(
            w3,
            network.attester,
            account,
            receipt_timeout=config.publisher.receipt_timeout,
            poll_latency=config.publisher.poll_latency,
        )

    def _view(self, name: str):
        return getattr(self.contract.functions, name)()

    async def admin(self) -> str:
        """Contract admin; estimates are made from this address."""
        if self._admin is None:
            self._admin = to_checksum_address(await self._view("$admin").call())
        return self._admin

    async def is_locked(self) -> bool:
        return bool(await self._view("$locked").call())

    async def current_commitment(self) -> str:
        raw = await self._view("$vhash").call()
        return normalize_bytes32(raw, field="vhash")

    async def current_ceiling(self) -> int:
        block = await self.w3.eth.get_block("latest")
        return int(block["gasLimit"])

    async def estimate(self, schema_uid: str, entries: Sequence[AttestationEntry]) -> Estimate:
        """
        Gas needed to attest ``entries`` under ``schema_uid`` in one call.

        Returns ``Estimate.exceeded`` when the node refuses for size reasons.
        """
        request = Batch(schema_uid=schema_uid, data=list(entries)).as_abi_tuple()
        try:
            gas = await self.contract.functions.attest([request]).estimate_gas(
                {"from": await self.admin()}
            )
        except (Web3Exception, ValueError) as e:
            if is_resource_exceeded(e):
                return Estimate.exceeded(str(e))
            raise
        return Estimate.fits(gas)

    async def submit(self, batch: Batch) -> SubmissionReceipt:
        """Sign, send and confirm one attest transaction for ``batch``."""
        call = self.contract.functions.attest([batch.as_abi_tuple()])
        return await self._transact(call, f"attest ({len(batch.data)} entries)")

    async def lock(self) -> SubmissionReceipt:
        return await self._transact(self.contract.functions.lock(), "lock")

    async def _transact(self, call: Any, label: str) -> SubmissionReceipt:
        if self.account is None:
            raise LedgerException(f"A private key is required to send {label}")

        sender = self.account.address
        tx = await call.build_transaction({
            "from": sender,
            "nonce": await self.w3.eth.get_transaction_count(sender),
        })
        signed = self.account.sign_transaction(tx)

        logger.info(f"Sending {label} transaction...")
        tx_hash = to_hex(bytes(await self.w3.eth.send_raw_transaction(signed.raw_transaction)))
        logger.info(f"Transaction hash: {tx_hash}")

        logger.info("Waiting for transaction receipt...")
        receipt = await self.w3.eth.wait_for_transaction_receipt(
            tx_hash,
            timeout=self.receipt_timeout,
            poll_latency=self.poll_latency,
        )
        if receipt["status"] != 1:
            raise LedgerException(
                f"{label} transaction reverted",
                tx_hash=tx_hash,
                details={"block_number": receipt["blockNumber"]},
            )

        logger.info(f"Transaction confirmed in block {receipt['blockNumber']}")
        return SubmissionReceipt(
            tx_hash=tx_hash,
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
        )


__all__ = [
    "RESOURCE_EXCEEDED_MARKERS",
    "VERIFIABLE_ATTESTER_ABI",
    "VerifiableAttesterClient",
    "is_resource_exceeded",
]
