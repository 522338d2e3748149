"""
ERC-20 token reads and transfers.
"""
import asyncio
import logging
from typing import Optional

from ._rate_limited_log import rate_limited_log
from .calls import (
    EncodedCall,
    balance_of_call,
    decimals_call,
    decode_uint256,
    decode_uint8,
    transfer_call,
)
from .chain.base import ChainClient
from .exceptions import ContractReverted, RemoteError, UnknownToken
from .models import Amount, TokenDescriptor, TransactionHandle, TransactionRequest
from .transactions import TransactionSender
from .units import parse_decimal, to_base_units
from .utils import to_checksum_address


class TokenClient:
    """
    Client for ERC-20 token contracts.

    Reads (``balanceOf``, ``decimals``) are retried on node errors up to
    ``read_retries`` attempts in total. A revert or an empty return value
    means the contract is not a token and raises ``UnknownToken`` at once.
    Transfers are never retried.
    """

    def __init__(
        self,
        chain: ChainClient,
        sender: Optional[TransactionSender] = None,
        read_retries: int = 3,
        backoff_factor: float = 0.5,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the TokenClient

        Args:
            chain: Node access
            sender: Transaction sender; required for ``transfer``
            read_retries: Total attempts for each read call
            backoff_factor: Base delay in seconds between read attempts
            logger: Optional logger instance
        """
        self.chain = chain
        self.sender = sender
        self.read_retries = max(1, read_retries)
        self.backoff_factor = backoff_factor
        self.logger = logger or logging.getLogger(__name__)

    async def _read(self, contract: str, call: EncodedCall) -> bytes:
        attempt = 0
        while True:
            attempt += 1
            try:
                result = await self.chain.call(contract, call.data)
            except ContractReverted as e:
                raise UnknownToken(f"{call.signature} reverted on {contract}: {e.message}") from e
            except RemoteError as e:
                if attempt >= self.read_retries:
                    self.logger.error(f"{call.signature} on {contract} failed after {attempt} attempts: {e}")
                    raise
                wait_time = self.backoff_factor * (2 ** (attempt - 1))
                rate_limited_log(
                    f"Retrying {call.signature} on {contract} after node error: {e}",
                    logger_instance=self.logger
                )
                await asyncio.sleep(wait_time)
                continue

            if not result:
                raise UnknownToken(f"{call.signature} returned no data from {contract}")
            return result

    async def decimals(self, contract: str) -> int:
        """
        Read the token's ``decimals()``.

        Raises:
            InvalidAddress: If ``contract`` is malformed
            UnknownToken: If the contract does not answer like an ERC-20 token
        """
        contract = to_checksum_address(contract)
        raw = await self._read(contract, decimals_call())
        try:
            return decode_uint8(raw)
        except ValueError as e:
            raise UnknownToken(f"Invalid decimals() result from {contract}: {e}") from e

    async def describe(self, contract: str) -> TokenDescriptor:
        """Fetch the token's address and decimals."""
        contract = to_checksum_address(contract)
        return TokenDescriptor(address=contract, decimals=await self.decimals(contract))

    async def balance_of(self, contract: str, owner: str) -> Amount:
        """
        Read ``owner``'s balance, scaled by the token's decimals.

        ``balanceOf`` and ``decimals`` are issued concurrently. If either
        read fails, the other is cancelled before the error propagates.

        Raises:
            InvalidAddress: If either address is malformed
            UnknownToken: If the contract does not answer like an ERC-20 token
        """
        contract = to_checksum_address(contract)
        owner = to_checksum_address(owner)

        reads = [
            asyncio.ensure_future(self._read(contract, balance_of_call(owner))),
            asyncio.ensure_future(self.decimals(contract)),
        ]
        try:
            raw_balance, decimals = await asyncio.gather(*reads)
        except BaseException:
            for task in reads:
                task.cancel()
            await asyncio.gather(*reads, return_exceptions=True)
            raise
        try:
            value = decode_uint256(raw_balance)
        except ValueError as e:
            raise UnknownToken(f"Invalid balanceOf() result from {contract}: {e}") from e

        return Amount(value=value, decimals=decimals)

    async def transfer(self, contract: str, to: str, amount: str) -> TransactionHandle:
        """
        Transfer tokens.

        Args:
            contract: Token contract address
            to: Recipient address
            amount: Amount in token units as a decimal string, e.g. "10.5"

        Returns:
            Handle for the broadcast transaction

        Raises:
            InvalidAddress: If an address is malformed (no network call made)
            InvalidAmount: If the amount is malformed or finer than the token's decimals
            UnknownToken: If ``decimals()`` fails
            ValueError: If this client was built without a sender
        """
        if self.sender is None:
            raise ValueError("TokenClient needs a TransactionSender to transfer")

        contract = to_checksum_address(contract)
        recipient = to_checksum_address(to)
        parse_decimal(amount)

        decimals = await self.decimals(contract)
        value = to_base_units(amount, decimals)
        call = transfer_call(recipient, value)

        self.logger.debug(f"Token transfer of {value} base units on {contract} to {recipient}")
        request = TransactionRequest(to=contract, value=0, data=call.data)
        return await self.sender.submit(request)
