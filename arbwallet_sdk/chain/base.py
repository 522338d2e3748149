"""
Abstract node interface.

Every wallet operation that touches the network goes through a
``ChainClient``. Implementations translate their transport errors into
``RemoteError`` (or ``ContractReverted`` for reverted calls).
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..models import FeeParams, TxReceipt


class ChainClient(ABC):
    """
    Abstract base class for remote node access.

    All methods are coroutines and may raise ``RemoteError``.
    """

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """
        Get the native balance of an address.

        Returns:
            Balance in wei
        """
        pass

    @abstractmethod
    async def get_transaction_count(self, address: str) -> int:
        """
        Get the next nonce for an address, counting pending transactions.
        """
        pass

    @abstractmethod
    async def get_chain_id(self) -> int:
        """Get the chain identifier of the connected node."""
        pass

    @abstractmethod
    async def estimate_fee(self) -> FeeParams:
        """Get current fee parameters (EIP-1559 where supported, else legacy)."""
        pass

    @abstractmethod
    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        """
        Estimate the gas limit for a transaction.

        Args:
            tx: Transaction fields (``from``, ``to``, ``value``, ``data``)
        """
        pass

    @abstractmethod
    async def call(self, contract: str, data: bytes) -> bytes:
        """
        Execute a read-only contract call against the latest block.

        Raises:
            ContractReverted: If the call reverts
            RemoteError: For any other node failure
        """
        pass

    @abstractmethod
    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """
        Broadcast a signed transaction.

        Returns:
            Transaction hash as a 0x-prefixed hex string
        """
        pass

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TxReceipt]:
        """
        Get the receipt of a mined transaction.

        Returns:
            The receipt, or None if the transaction is pending or unknown
        """
        pass

    async def close(self) -> None:
        """Close any open connections or resources."""
        pass
