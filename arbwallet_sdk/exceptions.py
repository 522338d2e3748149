"""
Exceptions for the ArbWallet SDK.
"""
from typing import Optional, Union


class WalletError(Exception):
    """Base exception for all wallet errors."""
    pass


class InvalidAddress(WalletError):
    """Raised when an address is not a well-formed 20-byte hex address."""
    pass


class InvalidAmount(WalletError):
    """Raised when a decimal amount is malformed or exceeds the allowed precision."""
    pass


class InvalidKey(WalletError):
    """Raised when a private key or mnemonic cannot be used for secp256k1 signing."""
    pass


class SigningError(WalletError):
    """Raised when a transaction cannot be signed. Nothing has been broadcast."""
    pass


class UnknownToken(WalletError):
    """Raised when a contract does not behave like an ERC-20 token."""
    pass


class NetworkError(WalletError):
    """Raised when the connected node is on an unexpected chain."""
    pass


class RemoteError(WalletError):
    """
    Raised when the remote node fails or rejects a request.

    Attributes:
        code: JSON-RPC error code, or None for transport-level failures
        message: Error message as reported by the node or transport
    """

    def __init__(self, message: str, code: Optional[Union[int, str]] = None):
        self.code = code
        self.message = message
        super().__init__(message if code is None else f"[{code}] {message}")


class ContractReverted(RemoteError):
    """Raised when a read-only contract call reverts."""
    pass


class NonceConflict(RemoteError):
    """
    Raised when the node rejects a transaction because its nonce was already used.

    This is retryable: fetch a fresh nonce and resubmit.
    """
    pass


class BroadcastUncertain(RemoteError):
    """
    Raised when a broadcast fails at the transport level.

    The transaction may or may not have reached the node. Check for a
    receipt of ``tx_hash`` before sending again.
    """

    def __init__(
        self,
        message: str,
        tx_hash: str,
        nonce: int,
        code: Optional[Union[int, str]] = None
    ):
        self.tx_hash = tx_hash
        self.nonce = nonce
        super().__init__(message, code=code)
