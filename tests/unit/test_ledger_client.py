"""
Module 05 - Ledger Client Tests

Tests for core/ledger (addresses, attester client, offline estimator)
against in-memory stand-ins for the web3 objects.
"""

import asyncio
from types import SimpleNamespace

import pytest
from eth_account import Account
from eth_utils import to_checksum_address
from web3.exceptions import Web3Exception

from core.crypto.hashing import ZERO_HASH
from core.ledger import (
    EAS,
    REGISTRY,
    EntryCountEstimator,
    VerifiableAttesterClient,
    is_resource_exceeded,
    resolve,
    resolve_address,
)
from core.schemas.errors import AddressResolutionException, LedgerException, WellFormednessException
from fixtures.common import make_address, make_batch, make_schema

ADMIN = make_address(0xAD)
ATTESTER = make_address(0x42)


# =============================================================================
# Web3 stand-ins
# =============================================================================

class _Call:
    def __init__(self, result=None, error=None, sink=None):
        self.result = result
        self.error = error
        self.sink = sink if sink is not None else []

    async def call(self):
        return self.result

    async def estimate_gas(self, tx):
        self.sink.append(("estimate_gas", tx))
        if self.error is not None:
            raise self.error
        return self.result

    async def build_transaction(self, tx):
        self.sink.append(("build_transaction", tx))
        return dict(tx, data="0x")


class FakeContract:
    def __init__(self, *, vhash=b"\x00" * 32, locked=False, gas=50_000, gas_error=None):
        self.calls = []
        self.attest_args = []
        functions = SimpleNamespace()
        setattr(functions, "$vhash", lambda: _Call(vhash))
        setattr(functions, "$locked", lambda: _Call(locked))
        setattr(functions, "$admin", lambda: _Call(ADMIN))

        def attest(requests):
            self.attest_args.append(requests)
            return _Call(gas, gas_error, self.calls)

        functions.attest = attest
        functions.lock = lambda: _Call(sink=self.calls)
        self.functions = functions


class FakeEth:
    def __init__(self, contract, *, chain_id=420, gas_limit=30_000_000, status=1):
        self.contract_obj = contract
        self._chain_id = chain_id
        self.gas_limit = gas_limit
        self.status = status
        self.sent = []

    @property
    def chain_id(self):
        async def _get():
            return self._chain_id
        return _get()

    def contract(self, address, abi):
        self.contract_obj.address = address
        return self.contract_obj

    async def get_block(self, tag):
        return {"gasLimit": self.gas_limit}

    async def get_transaction_count(self, address):
        return 7

    async def send_raw_transaction(self, raw):
        self.sent.append(raw)
        return b"\x11" * 32

    async def wait_for_transaction_receipt(self, tx_hash, timeout, poll_latency):
        return {"status": self.status, "blockNumber": 99, "gasUsed": 123_456}


class FakeAccount:
    address = make_address(0xEE)

    def sign_transaction(self, tx):
        return SimpleNamespace(raw_transaction=b"signed")


def _client(contract=None, account=None, **eth_kwargs):
    contract = contract or FakeContract()
    w3 = SimpleNamespace(eth=FakeEth(contract, **eth_kwargs))
    return VerifiableAttesterClient(w3, ATTESTER, account)


# =============================================================================
# Tests
# =============================================================================

class TestAddresses:
    """Tests for resolve() and resolve_address()."""

    def test_known_chain(self):
        assert resolve(EAS, 420) == "0x4200000000000000000000000000000000000021"
        assert resolve(REGISTRY, 420) == "0x4200000000000000000000000000000000000020"

    def test_supplied_wins(self):
        assert resolve(EAS, 1, supplied=make_address(5)) == make_address(5)

    def test_unknown_chain(self):
        with pytest.raises(AddressResolutionException) as exc_info:
            resolve(EAS, 1)

        assert exc_info.value.details["chain_id"] == 1

    def test_malformed_supplied(self):
        with pytest.raises(WellFormednessException):
            resolve(EAS, 420, supplied="0x1234")

    def test_queries_chain_id(self):
        w3 = SimpleNamespace(eth=FakeEth(FakeContract(), chain_id=420))

        assert asyncio.run(resolve_address(EAS, w3)) == EAS[420]

    def test_unknown_chain_from_node(self):
        w3 = SimpleNamespace(eth=FakeEth(FakeContract(), chain_id=31337))

        with pytest.raises(AddressResolutionException):
            asyncio.run(resolve_address(EAS, w3))

    def test_configured_chain_id_skips_node(self):
        w3 = SimpleNamespace()

        assert asyncio.run(resolve_address(REGISTRY, w3, chain_id=420)) == REGISTRY[420]
        with pytest.raises(AddressResolutionException):
            asyncio.run(resolve_address(EAS, w3, chain_id=1))


class TestResourceClassification:
    """Tests for is_resource_exceeded()."""

    @pytest.mark.parametrize("message", [
        "exceeds block gas limit",
        "gas required exceeds allowance (30000000)",
        "Cannot estimate gas; transaction may fail",
    ])
    def test_exceeded_messages(self, message):
        assert is_resource_exceeded(Web3Exception(message))

    def test_other_messages(self):
        assert not is_resource_exceeded(Web3Exception("execution reverted: not admin"))


class TestAttesterReads:
    """View calls and estimation."""

    def test_requires_address(self):
        w3 = SimpleNamespace(eth=FakeEth(FakeContract()))

        with pytest.raises(LedgerException):
            VerifiableAttesterClient(w3, None)

    def test_commitment_and_lock(self):
        client = _client(FakeContract(vhash=b"\x00" * 32, locked=True))

        assert asyncio.run(client.current_commitment()) == ZERO_HASH
        assert asyncio.run(client.is_locked()) is True

    def test_ceiling_is_block_gas_limit(self):
        client = _client(gas_limit=15_000_000)

        assert asyncio.run(client.current_ceiling()) == 15_000_000

    def test_estimate_from_admin(self):
        contract = FakeContract(gas=77_000)
        client = _client(contract)
        batch = make_batch(size=2)

        estimate = asyncio.run(client.estimate(batch.schema_uid, batch.data))

        assert estimate.cost == 77_000
        assert not estimate.is_exceeded
        (name, tx), = contract.calls
        assert name == "estimate_gas"
        assert tx["from"].lower() == ADMIN
        schema, entries = contract.attest_args[0][0]
        assert schema == bytes.fromhex(make_schema(1)[2:])
        assert len(entries) == 2

    def test_estimate_exceeded(self):
        contract = FakeContract(gas_error=ValueError({"code": -32000, "message": "exceeds block gas limit"}))
        client = _client(contract)
        batch = make_batch(size=1)

        estimate = asyncio.run(client.estimate(batch.schema_uid, batch.data))

        assert estimate.is_exceeded
        assert not estimate.under(10**9)

    def test_estimate_other_error_propagates(self):
        error = Web3Exception("execution reverted: not admin")
        client = _client(FakeContract(gas_error=error))
        batch = make_batch(size=1)

        with pytest.raises(Web3Exception):
            asyncio.run(client.estimate(batch.schema_uid, batch.data))


class TestAttesterWrites:
    """Signed transactions."""

    def test_submit_requires_account(self):
        client = _client()

        with pytest.raises(LedgerException):
            asyncio.run(client.submit(make_batch(size=1)))

    def test_submit(self):
        contract = FakeContract()
        client = _client(contract, FakeAccount())

        receipt = asyncio.run(client.submit(make_batch(size=3)))

        assert receipt.tx_hash == "0x" + "11" * 32
        assert receipt.block_number == 99
        assert receipt.gas_used == 123_456
        (name, tx), = contract.calls
        assert name == "build_transaction"
        assert tx["nonce"] == 7
        assert client.w3.eth.sent == [b"signed"]

    def test_signed_transaction_exposes_raw_transaction(self):
        """The installed eth-account names the signed payload the way _transact reads it."""
        account = Account.from_key("0x" + "11" * 32)
        signed = account.sign_transaction({
            "to": to_checksum_address(ATTESTER),
            "value": 0,
            "gas": 21_000,
            "gasPrice": 1,
            "nonce": 0,
            "chainId": 420,
        })

        assert isinstance(signed.raw_transaction, bytes)

    def test_reverted_transaction(self):
        client = _client(FakeContract(), FakeAccount(), status=0)

        with pytest.raises(LedgerException) as exc_info:
            asyncio.run(client.lock())

        assert exc_info.value.details["tx_hash"] == "0x" + "11" * 32


class TestEntryCountEstimator:
    """Offline estimator used without a node."""

    def test_limits_entries(self):
        estimator = EntryCountEstimator(3)
        batch = make_batch(size=4)

        assert asyncio.run(estimator.estimate(batch.schema_uid, batch.data[:3])).under(4)
        assert asyncio.run(estimator.estimate(batch.schema_uid, batch.data)).is_exceeded
        assert asyncio.run(estimator.current_ceiling()) == 4

    def test_rejects_zero(self):
        with pytest.raises(WellFormednessException):
            EntryCountEstimator(0)
