"""
Transaction submission: chain context, signing and broadcast.
"""
import asyncio
import logging
from typing import Optional

from .chain.base import ChainClient
from .exceptions import (
    BroadcastUncertain,
    NonceConflict,
    RemoteError,
    SigningError,
    WalletError,
)
from .models import ChainContext, SignedTransaction, TransactionHandle, TransactionRequest
from .nonce import NonceManager
from .signer import Signer
from .units import ETHER_DECIMALS, to_base_units
from .utils import to_checksum_address, to_hex

# Node messages that mean the nonce is already taken
NONCE_CONFLICT_MARKERS = (
    "nonce too low",
    "nonce has already been used",
    "replacement transaction underpriced",
    "transaction underpriced: replacement",
)

# Node message for a payload it already holds (same hash, not a conflict)
ALREADY_KNOWN_MARKER = "already known"

DEFAULT_GAS_BUFFER = 1.1


def is_nonce_conflict(error: RemoteError) -> bool:
    message = (error.message or "").lower()
    return any(marker in message for marker in NONCE_CONFLICT_MARKERS)


class TransactionSender:
    """
    Runs the shared sequence for every outgoing transaction.

    1. Reserve a nonce (serialised per account)
    2. Fetch fee parameters and a gas estimate, plus the chain id once
    3. Sign locally
    4. Broadcast; never retried here
    """

    def __init__(
        self,
        signer: Signer,
        chain: ChainClient,
        gas_buffer: float = DEFAULT_GAS_BUFFER,
        nonce_manager: Optional[NonceManager] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.signer = signer
        self.chain = chain
        self.gas_buffer = gas_buffer
        self.nonces = nonce_manager or NonceManager(chain, signer.address)
        self.logger = logger or logging.getLogger(__name__)
        self._chain_id: Optional[int] = None

    async def chain_id(self) -> int:
        """Chain id of the connected node, fetched once."""
        if self._chain_id is None:
            self._chain_id = await self.chain.get_chain_id()
        return self._chain_id

    async def build_context(self, request: TransactionRequest, nonce: int) -> ChainContext:
        """
        Collect everything the signer needs besides the request itself.
        """
        estimate_tx = {
            "from": self.signer.address,
            "to": request.to,
            "value": request.value,
            "data": to_hex(request.data),
        }
        fees, gas = await asyncio.gather(
            self.chain.estimate_fee(),
            self.chain.estimate_gas(estimate_tx),
        )
        context = ChainContext(
            nonce=nonce,
            chain_id=await self.chain_id(),
            gas_limit=int(gas * self.gas_buffer),
            fees=fees,
        )
        self.logger.debug(
            f"Chain context: nonce={context.nonce} chain_id={context.chain_id} "
            f"gas={context.gas_limit} eip1559={fees.is_eip1559}"
        )
        return context

    async def submit(self, request: TransactionRequest) -> TransactionHandle:
        """
        Sign and broadcast a request.

        Args:
            request: Request to send; it cannot be submitted again afterwards

        Returns:
            Handle carrying the transaction hash

        Raises:
            SigningError: If signing fails (nothing is broadcast)
            NonceConflict: If the node reports the nonce as used; retryable
            BroadcastUncertain: If the broadcast outcome is unknown
            RemoteError: If the node rejects the transaction or a context call fails
        """
        request.mark_consumed()

        async with self.nonces.reserve() as nonce:
            context = await self.build_context(request, nonce)
            signed = self._sign(request, context)
            tx_hash = await self._broadcast(signed)

        self.logger.info(f"Transaction sent: {tx_hash} (nonce {nonce})")
        return TransactionHandle(
            tx_hash=tx_hash,
            nonce=nonce,
            chain_id=context.chain_id,
            from_address=self.signer.address,
            to_address=request.to,
            value=request.value,
            data=to_hex(request.data),
        )

    def _sign(self, request: TransactionRequest, context: ChainContext) -> SignedTransaction:
        try:
            return self.signer.sign(request, context)
        except WalletError:
            raise
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise SigningError(f"Failed to sign transaction: {e}") from e

    async def _broadcast(self, signed: SignedTransaction) -> str:
        try:
            return await self.chain.send_raw_transaction(signed.raw_transaction)
        except RemoteError as e:
            if is_nonce_conflict(e):
                self.logger.warning(f"Nonce {signed.nonce} rejected as used: {e.message}")
                raise NonceConflict(e.message, code=e.code) from e
            if e.code is not None and ALREADY_KNOWN_MARKER in (e.message or "").lower():
                self.logger.info(f"Node already holds transaction {signed.tx_hash}")
                return signed.tx_hash
            if e.code is None:
                self.logger.error(f"Broadcast outcome unknown for {signed.tx_hash}: {e.message}")
                raise BroadcastUncertain(
                    f"Broadcast failed, transaction may have been accepted: {e.message}",
                    tx_hash=signed.tx_hash,
                    nonce=signed.nonce,
                ) from e
            self.logger.error(f"Failed to send transaction: {e}")
            raise


class NativeTransferBuilder:
    """Builds and submits native-currency (ETH) transfers."""

    def __init__(self, sender: TransactionSender):
        self.sender = sender

    async def send(self, to: str, amount: str) -> TransactionHandle:
        """
        Send native currency.

        Args:
            to: Recipient address
            amount: Amount in ether as a decimal string, e.g. "0.001"

        Returns:
            Handle for the broadcast transaction

        Raises:
            InvalidAddress: If ``to`` is malformed (no network call made)
            InvalidAmount: If ``amount`` is malformed (no network call made)
        """
        recipient = to_checksum_address(to)
        value = to_base_units(amount, ETHER_DECIMALS)
        request = TransactionRequest(to=recipient, value=value)
        return await self.sender.submit(request)
