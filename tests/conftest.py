"""
Pytest fixtures for the ArbWallet SDK tests.
"""
import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest
from web3 import Web3

from arbwallet_sdk import _rate_limited_log
from arbwallet_sdk.calls import BALANCE_OF_SELECTOR, DECIMALS_SELECTOR
from arbwallet_sdk.chain.base import ChainClient
from arbwallet_sdk.exceptions import ContractReverted
from arbwallet_sdk.models import FeeParams, TxReceipt
from arbwallet_sdk.signer.local import KeyMaterial
from arbwallet_sdk.utils import to_hex
from arbwallet_sdk.wallet import Wallet

# Constants for testing
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_TOKEN = "0x1234567890123456789012345678901234567890"
TEST_RECIPIENT = "0x2345678901234567890123456789012345678901"
TEST_CHAIN_ID = 421614  # Arbitrum Sepolia
TEST_NETWORK = "arbitrum-sepolia"
ONE_ETHER = 10 ** 18


class FakeChainClient(ChainClient):
    """
    In-memory node that records every call.

    Nonces are assigned only when asked: ``get_transaction_count`` reports
    how many raw transactions have been accepted so far. Every method yields
    to the event loop once so concurrent callers interleave.
    """

    def __init__(self, chain_id: int = TEST_CHAIN_ID):
        self.chain_id = chain_id
        self.calls: List[Tuple[str, Any]] = []
        self.balances: Dict[str, int] = {}
        self.tokens: Dict[str, Dict[str, Any]] = {}
        self.receipts: Dict[str, Dict[str, Any]] = {}
        self.sent: List[bytes] = []
        self.fees = FeeParams(max_fee_per_gas=200_000_000, max_priority_fee_per_gas=0)
        self.gas_estimate = 21_000
        # Errors to raise from the next N calls of a method
        self.failures: Dict[str, List[Exception]] = {}
        self.closed = False

    def add_token(self, address: str, decimals: int, balances: Optional[Dict[str, int]] = None) -> None:
        self.tokens[address.lower()] = {
            "decimals": decimals,
            "balances": {k.lower(): v for k, v in (balances or {}).items()},
            "revert": False,
        }

    def fail_next(self, method: str, *errors: Exception) -> None:
        self.failures.setdefault(method, []).extend(errors)

    async def _enter(self, method: str, args: Any = None) -> None:
        self.calls.append((method, args))
        await asyncio.sleep(0)
        pending = self.failures.get(method)
        if pending:
            raise pending.pop(0)

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def get_balance(self, address: str) -> int:
        await self._enter("get_balance", address)
        return self.balances.get(address.lower(), 0)

    async def get_transaction_count(self, address: str) -> int:
        await self._enter("get_transaction_count", address)
        return len(self.sent)

    async def get_chain_id(self) -> int:
        await self._enter("get_chain_id")
        return self.chain_id

    async def estimate_fee(self) -> FeeParams:
        await self._enter("estimate_fee")
        return self.fees

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        await self._enter("estimate_gas", tx)
        return self.gas_estimate

    async def call(self, contract: str, data: bytes) -> bytes:
        await self._enter("call", (contract, data))
        token = self.tokens.get(contract.lower())
        if token is None:
            return b""
        if token["revert"]:
            raise ContractReverted("execution reverted")
        selector = data[:4]
        if selector == DECIMALS_SELECTOR:
            return token["decimals"].to_bytes(32, "big")
        if selector == BALANCE_OF_SELECTOR:
            owner = "0x" + data[16:36].hex()
            return token["balances"].get(owner, 0).to_bytes(32, "big")
        raise ContractReverted("unknown selector")

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        await self._enter("send_raw_transaction", raw_transaction)
        self.sent.append(raw_transaction)
        return to_hex(Web3.keccak(raw_transaction))

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TxReceipt]:
        await self._enter("get_transaction_receipt", tx_hash)
        data = self.receipts.get(tx_hash)
        return TxReceipt.model_validate(data) if data else None

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _clear_rate_limited_log():
    _rate_limited_log.clear()
    yield
    _rate_limited_log.clear()


@pytest.fixture
def fake_chain():
    return FakeChainClient()


@pytest.fixture
def key_material():
    return KeyMaterial.from_private_key(TEST_PRIV_KEY)


@pytest.fixture
def wallet(key_material, fake_chain):
    return Wallet(key_material, fake_chain, network=TEST_NETWORK)


def make_receipt(tx_hash: str, status: int = 1) -> Dict[str, Any]:
    """Receipt dict in node (camelCase) form."""
    return {
        "transactionHash": tx_hash,
        "blockNumber": 12345,
        "blockHash": "0x" + "ab" * 32,
        "status": status,
        "gasUsed": 85000,
        "from": "0x1234567890123456789012345678901234567890",
        "to": TEST_RECIPIENT,
        "logs": [],
    }
