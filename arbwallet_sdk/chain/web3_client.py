"""
ChainClient backed by web3.py's asynchronous HTTP provider.
"""
import asyncio
import logging
import urllib.parse
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import aiohttp
from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.exceptions import (
    ContractLogicError,
    TransactionNotFound,
    Web3Exception,
    Web3RPCError,
)

from ..exceptions import ContractReverted, RemoteError
from ..models import FeeParams, TxReceipt
from ..utils import to_hex
from .base import ChainClient


def validate_rpc_url(rpc_url: str) -> None:
    """
    Require https for remote endpoints.

    Raises:
        ValueError: If the URL is not https and not a local address
    """
    parsed = urllib.parse.urlparse(rpc_url)
    host = parsed.netloc.split(':')[0]
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not is_local:
        raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")


def convert_receipt(web3_receipt: Any) -> TxReceipt:
    """
    Convert a web3 receipt to our TxReceipt model

    Args:
        web3_receipt: The web3 transaction receipt (AttributeDict)

    Returns:
        Our TxReceipt model
    """
    receipt_dict = dict(web3_receipt)

    # Convert bytes to hex strings
    for key, value in list(receipt_dict.items()):
        if isinstance(value, bytes):
            receipt_dict[key] = to_hex(value)

    receipt_dict["logs"] = [
        {k: to_hex(v) if isinstance(v, bytes) else v for k, v in dict(log).items()}
        for log in receipt_dict.get("logs", [])
    ]
    return TxReceipt.model_validate(receipt_dict)


class Web3ChainClient(ChainClient):
    """
    Node access over JSON-RPC using ``AsyncWeb3``.

    Fee estimation uses EIP-1559 when the latest block reports a base fee
    (``max_fee = 2 * base_fee + priority``) and falls back to legacy
    ``gasPrice`` otherwise.
    """

    def __init__(
        self,
        rpc_url: str,
        request_timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the client

        Args:
            rpc_url: JSON-RPC endpoint (e.g. "https://sepolia-rollup.arbitrum.io/rpc")
            request_timeout: Per-request timeout in seconds
            logger: Optional logger instance

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        validate_rpc_url(rpc_url)
        self.rpc_url = rpc_url
        self.logger = logger or logging.getLogger(__name__)
        self.w3 = AsyncWeb3(AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout)}
        ))

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except ContractLogicError as e:
            raise ContractReverted(f"{operation} reverted: {e}") from e
        except Web3RPCError as e:
            error = (e.rpc_response or {}).get("error") or {}
            message = error.get("message") or str(e)
            self.logger.debug(f"{operation} rejected by node: {message}")
            raise RemoteError(message, code=error.get("code", -32000)) from e
        except (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self.logger.debug(f"{operation} failed: {e}")
            raise RemoteError(f"{operation} failed: {e}") from e

    async def get_balance(self, address: str) -> int:
        with self._translate_errors("eth_getBalance"):
            return await self.w3.eth.get_balance(address)

    async def get_transaction_count(self, address: str) -> int:
        with self._translate_errors("eth_getTransactionCount"):
            return await self.w3.eth.get_transaction_count(address, "pending")

    async def get_chain_id(self) -> int:
        with self._translate_errors("eth_chainId"):
            return await self.w3.eth.chain_id

    async def estimate_fee(self) -> FeeParams:
        with self._translate_errors("fee estimation"):
            latest = await self.w3.eth.get_block("latest")
            base_fee = latest.get("baseFeePerGas")
            if base_fee is None:
                return FeeParams(gas_price=await self.w3.eth.gas_price)

            priority = await self.w3.eth.max_priority_fee
            return FeeParams(
                max_fee_per_gas=base_fee * 2 + priority,
                max_priority_fee_per_gas=priority,
            )

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        with self._translate_errors("eth_estimateGas"):
            return await self.w3.eth.estimate_gas(tx)

    async def call(self, contract: str, data: bytes) -> bytes:
        with self._translate_errors("eth_call"):
            result = await self.w3.eth.call({"to": contract, "data": to_hex(data)})
        return bytes(result)

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        with self._translate_errors("eth_sendRawTransaction"):
            tx_hash = await self.w3.eth.send_raw_transaction(raw_transaction)
        return to_hex(tx_hash)

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TxReceipt]:
        with self._translate_errors("eth_getTransactionReceipt"):
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                return None
        return convert_receipt(receipt)

    async def close(self) -> None:
        await self.w3.provider.disconnect()
