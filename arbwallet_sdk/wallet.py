"""
Wallet - composition root binding one signer to one node.
"""
import asyncio
import logging
import time
from typing import Any, Optional, Union

from .chain.base import ChainClient
from .chain.web3_client import Web3ChainClient
from .config import NetworkConfig
from .exceptions import NetworkError, RemoteError
from .models import Amount, TokenDescriptor, TransactionHandle, TxReceipt
from .signer import Signer
from .signer.local import KeyMaterial
from .token import TokenClient
from .transactions import DEFAULT_GAS_BUFFER, NativeTransferBuilder, TransactionSender
from .units import ETHER_DECIMALS
from .utils import hex_to_bytes, to_checksum_address, to_hex


def _normalize_tx_hash(tx_hash: Union[str, bytes]) -> str:
    try:
        raw = hex_to_bytes(tx_hash)
    except (ValueError, AttributeError):
        raise ValueError(f"Invalid transaction hash: {tx_hash!r}")
    if len(raw) != 32:
        raise ValueError(f"Transaction hash must be 32 bytes, got {len(raw)}")
    return to_hex(raw)


class Wallet:
    """
    Client-side wallet for one account on an Ethereum-compatible chain.

    This class handles:
    1. Native (ETH) balance queries and transfers
    2. ERC-20 balance queries and transfers
    3. Receipt lookup for broadcast transactions

    The wallet keeps no transaction history; callers track the returned
    handles. Concurrent sends from one wallet are sequenced so no two
    transactions share a nonce.
    """

    def __init__(
        self,
        signer: Signer,
        chain: ChainClient,
        network: Optional[str] = None,
        expected_chain_id: Optional[int] = None,
        read_retries: int = 3,
        gas_buffer: float = DEFAULT_GAS_BUFFER,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the Wallet

        Args:
            signer: Key material (or any object implementing ``Signer``)
            chain: Node access
            network: Optional preset name, used for chain-id checks and explorer links
            expected_chain_id: Chain id the node must report (defaults to the preset's)
            read_retries: Total attempts for token read calls
            gas_buffer: Multiplier applied to gas estimates
            logger: Optional logger instance
        """
        self.signer = signer
        self.chain = chain
        self.network = network
        if expected_chain_id is None and network is not None:
            expected_chain_id = NetworkConfig.get_chain_id(network)
        self.expected_chain_id = expected_chain_id
        self.logger = logger or logging.getLogger(__name__)

        self._sender = TransactionSender(signer, chain, gas_buffer=gas_buffer, logger=self.logger)
        self._native = NativeTransferBuilder(self._sender)
        self._tokens = TokenClient(chain, self._sender, read_retries=read_retries, logger=self.logger)

    @classmethod
    def _connect(
        cls,
        signer: Signer,
        rpc_url: Optional[str],
        network: Optional[str],
        request_timeout: int = 30,
        **kwargs: Any
    ) -> "Wallet":
        if network is None and rpc_url is None:
            network = NetworkConfig.default_network()
        if network is not None:
            rpc_url = NetworkConfig.get_rpc_url(network, override=rpc_url)

        chain = Web3ChainClient(rpc_url, request_timeout=request_timeout, logger=kwargs.get("logger"))
        return cls(signer, chain, network=network, **kwargs)

    @classmethod
    def from_private_key(
        cls,
        private_key: Union[str, bytes],
        rpc_url: Optional[str] = None,
        network: Optional[str] = None,
        **kwargs: Any
    ) -> "Wallet":
        """
        Create a wallet from an existing private key.

        Args:
            private_key: 32-byte key as hex string or bytes
            rpc_url: JSON-RPC endpoint; overrides the network preset's URL
            network: Network preset name (default from ``ARBWALLET_NETWORK``)
            **kwargs: Passed to ``Wallet.__init__``

        Raises:
            InvalidKey: If the private key is invalid
        """
        return cls._connect(KeyMaterial.from_private_key(private_key), rpc_url, network, **kwargs)

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: str,
        rpc_url: Optional[str] = None,
        network: Optional[str] = None,
        account_path: str = "m/44'/60'/0'/0/0",
        **kwargs: Any
    ) -> "Wallet":
        """Create a wallet from a BIP-39 mnemonic phrase."""
        signer = KeyMaterial.from_mnemonic(mnemonic, account_path=account_path)
        return cls._connect(signer, rpc_url, network, **kwargs)

    @classmethod
    def create(
        cls,
        rpc_url: Optional[str] = None,
        network: Optional[str] = None,
        **kwargs: Any
    ) -> "Wallet":
        """
        Create a wallet with a freshly generated key.

        The mnemonic is never logged; retrieve it with
        ``wallet.signer.export_mnemonic()``.
        """
        return cls._connect(KeyMaterial.generate(), rpc_url, network, **kwargs)

    @property
    def address(self) -> str:
        """The wallet's checksummed address."""
        return self.signer.address

    async def balance(self) -> Amount:
        """Native balance in ether."""
        wei = await self.chain.get_balance(self.address)
        return Amount(value=wei, decimals=ETHER_DECIMALS)

    async def send_native(self, to: str, amount: str) -> TransactionHandle:
        """
        Send native currency.

        Args:
            to: Recipient address
            amount: Amount in ether, e.g. "0.001"
        """
        return await self._native.send(to, amount)

    async def get_token_balance(self, token_address: str, owner: Optional[str] = None) -> Amount:
        """
        Token balance of ``owner`` (this wallet by default).
        """
        return await self._tokens.balance_of(token_address, owner or self.address)

    async def get_token_info(self, token_address: str) -> TokenDescriptor:
        return await self._tokens.describe(token_address)

    async def send_token(self, token_address: str, to: str, amount: str) -> TransactionHandle:
        """
        Send ERC-20 tokens.

        Args:
            token_address: Token contract address
            to: Recipient address
            amount: Amount in token units, e.g. "10.5"
        """
        return await self._tokens.transfer(token_address, to, amount)

    async def get_receipt(self, tx_hash: Union[str, bytes]) -> Optional[TxReceipt]:
        """
        Receipt for a transaction, or None while it is pending.

        Raises:
            ValueError: If ``tx_hash`` is not a 32-byte hex hash
        """
        return await self.chain.get_transaction_receipt(_normalize_tx_hash(tx_hash))

    async def wait_for_receipt(
        self,
        tx_hash: Union[str, bytes],
        timeout: float = 120,
        poll_interval: float = 1.0
    ) -> Optional[TxReceipt]:
        """
        Poll for a receipt until it appears or ``timeout`` seconds pass.

        Returns:
            The receipt, or None if the transaction is still pending at the deadline
        """
        tx_hash = _normalize_tx_hash(tx_hash)
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self.chain.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.monotonic() >= deadline:
                self.logger.info(f"No receipt for {tx_hash} after {timeout}s")
                return None
            await asyncio.sleep(poll_interval)

    async def assert_chain_id(self) -> None:
        """
        Verify the node reports the expected chain id.

        Raises:
            NetworkError: On mismatch or if the chain id cannot be read
        """
        if self.expected_chain_id is None:
            self.logger.warning("No expected chain ID set, skipping chain ID validation")
            return

        try:
            actual = await self._sender.chain_id()
        except RemoteError as e:
            raise NetworkError(f"Failed to validate chain ID: {e}") from e

        if actual != self.expected_chain_id:
            network = f" for network '{self.network}'" if self.network else ""
            raise NetworkError(
                f"Chain ID mismatch{network}: expected {self.expected_chain_id}, got {actual}"
            )

    def tx_url(self, tx_hash: Union[str, bytes]) -> Optional[str]:
        """Block explorer link for a transaction, if the network is known."""
        if self.network is None:
            return None
        return f"{NetworkConfig.get_explorer_url(self.network)}/tx/{_normalize_tx_hash(tx_hash)}"

    def address_url(self, address: Optional[str] = None) -> Optional[str]:
        """Block explorer link for an address (this wallet by default)."""
        if self.network is None:
            return None
        address = to_checksum_address(address or self.address)
        return f"{NetworkConfig.get_explorer_url(self.network)}/address/{address}"

    async def close(self) -> None:
        """Close the node connection."""
        await self.chain.close()

    async def __aenter__(self) -> "Wallet":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
        destroy = getattr(self.signer, "destroy", None)
        if destroy is not None:
            destroy()

    def __repr__(self) -> str:
        return f"Wallet(address={self.address}, network={self.network})"
